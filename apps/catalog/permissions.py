"""Permission classes for catalog endpoints."""

from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsBackOfficeOrReadOnly(BasePermission):
    """Anyone may read; only STAFF/ADMIN users may write."""

    message = 'Back-office access required to modify the catalog.'

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        user = request.user
        return bool(user and user.is_authenticated and user.is_back_office)
