"""Orders API permissions.

Object-level ownership check for order detail endpoints. It runs once the
order is loaded, before any status or field rule, so a foreign order is always
answered with 403 and never reveals its state.
"""

from rest_framework.permissions import BasePermission


class IsOrderOwner(BasePermission):
    """Allow access only to the identity that placed the order."""

    message = "Access denied. You can only access your own orders."

    def has_object_permission(self, request, view, obj):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return obj.user_sub == getattr(user, "sub", None)
