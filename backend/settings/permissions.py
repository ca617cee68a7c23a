from rest_framework import permissions


class SettingsReadOnlyOrStaff(permissions.BasePermission):
    """
    - Read access for any authenticated user
    - Write access only for staff users
    """

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False

        if request.method in permissions.SAFE_METHODS:
            return True

        return request.user.is_staff or request.user.is_superuser
