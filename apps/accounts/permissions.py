"""Custom permission classes shared by the rewards program apps."""
from rest_framework.permissions import BasePermission


class IsProgramAdmin(BasePermission):
    """
    Allow access only to users with the admin role (or superusers).

    Usage:
        @permission_classes([IsAuthenticated, IsProgramAdmin])
        def allocate_points(request):
            ...
    """

    message = 'You must be a program admin to perform this action.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin)
