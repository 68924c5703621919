"""Users app package.

Defines the custom user model with a resident/admin role and the hostel
the user belongs to. Use ``apps.users.models.CustomUser`` as the
AUTH_USER_MODEL throughout the project.
"""
