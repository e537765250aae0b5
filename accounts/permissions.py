"""Role-based permission classes."""

from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """Allow only users with the admin role (or superusers)."""

    message = "Admin access required"

    def has_permission(self, request, view) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin_role)


class IsFacultyOrAdmin(BasePermission):
    """Allow content authors: faculty and admins."""

    message = "Faculty or admin access required"

    def has_permission(self, request, view) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and user.can_author)
