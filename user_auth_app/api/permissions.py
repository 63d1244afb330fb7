"""Auth API permissions.

Request-level guards that work on the verified identity: a declared-owner
check for requests that name a user id before any resource is loaded, and a
named-permission check against the token's permission list.
"""

from rest_framework.permissions import BasePermission
from rest_framework.request import Request
from rest_framework.views import View


def declared_owner(request: Request, view: View):
    """Return the user id a request claims to act for (path, body or query), if any."""
    kwargs = getattr(view, "kwargs", {}) or {}
    if kwargs.get("user_id"):
        return kwargs["user_id"]
    data = request.data
    if isinstance(data, dict) and data.get("user_id"):
        return data["user_id"]
    return request.query_params.get("user_id") or None


class MatchesDeclaredOwner(BasePermission):
    """Deny requests that declare a user id different from the caller's identity."""

    message = "Access denied. You can only access your own data."

    def has_permission(self, request: Request, view: View) -> bool:
        user = request.user
        if not user or not user.is_authenticated:
            return False
        owner = declared_owner(request, view)
        return owner is None or owner == user.sub


def HasPermission(permission: str):
    """Build a permission class requiring ``permission`` in the token's permission list."""

    class _HasPermission(BasePermission):
        message = "Insufficient permissions."

        def has_permission(self, request: Request, view: View) -> bool:
            user = request.user
            if not user or not user.is_authenticated:
                return False
            return permission in getattr(user, "permissions", ())

    _HasPermission.__name__ = f"HasPermission[{permission}]"
    return _HasPermission
