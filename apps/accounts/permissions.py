"""
Role-based permission classes shared by the back-office endpoints.

Permission Classes:
    IsBackOffice - STAFF or ADMIN users (or superusers)
    IsAdminRole  - ADMIN users (or superusers)
"""

from rest_framework.permissions import BasePermission


class IsBackOffice(BasePermission):
    """Allow STAFF and ADMIN roles."""

    message = 'Back-office access required.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_back_office)


class IsAdminRole(BasePermission):
    """Allow the ADMIN role only."""

    message = 'Administrator access required.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin)
