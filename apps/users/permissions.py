"""Permission classes shared by the facilities and analytics APIs."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


class IsHostelAdmin(permissions.BasePermission):
    """
    Allow only hostel admins.

    Django staff and superusers are treated as admins as well.
    """

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
            return True
        return hasattr(user, "is_hostel_admin") and user.is_hostel_admin()


class HasHostel(permissions.BasePermission):
    """Resident endpoints need to know which hostel partition to use."""

    message = "Hostel ID missing"

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        return bool(user.is_authenticated and getattr(user, "hostel_id", None))
