from django.apps import AppConfig


class FacilitiesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.facilities"
    label = "facilities"
    verbose_name = "Shared facilities"

    def ready(self):
        from .handlers import register_event_handlers

        register_event_handlers()
