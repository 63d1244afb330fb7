"""Auth API views.

Profile endpoints for callers holding a verified bearer token. The identity
provider owns sign-in; this API keeps the local profile in sync with it.
Every route runs under the general and the stricter auth rate limit.
"""

import logging

from django.db import transaction
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.pipeline import PipelineMixin
from common.throttling import AuthRateThrottle, GeneralRateThrottle
from profiles.api.serializers import (
    ProfileContactSerializer,
    ProfileSerializer,
    ProfileUpdateSerializer,
)
from profiles.models import Profile
from .permissions import MatchesDeclaredOwner

logger = logging.getLogger(__name__)


def _own_profile_or_404(identity):
    profile = Profile.active.filter(auth0_id=identity.sub).first()
    if profile is None:
        raise NotFound("User profile not found.")
    return profile


class AuthAPIView(PipelineMixin, APIView):
    permission_classes = [IsAuthenticated, MatchesDeclaredOwner]
    throttle_classes = [GeneralRateThrottle, AuthRateThrottle]


class ProfileView(AuthAPIView):
    """POST /api/auth/profile/ -> create or sync the caller's profile from the token.
    PUT/PATCH /api/auth/profile/ -> update name, contact data and preferences.
    """

    def post(self, request, *args, **kwargs):
        contact = ProfileContactSerializer(data=request.data)
        contact.is_valid(raise_exception=True)

        existing = Profile.objects.filter(auth0_id=request.user.sub).first()
        if existing is not None and existing.is_locked:
            raise PermissionDenied("Account is temporarily locked.")

        with transaction.atomic():
            profile, created = Profile.sync_from_identity(request.user)
            if contact.validated_data:
                for attr, val in contact.validated_data.items():
                    setattr(profile, attr, val)
                profile.save(update_fields=[*contact.validated_data.keys(), "updated_at"])

        logger.info("Profile %s for %s", "created" if created else "synced", profile.auth0_id)
        message = "Profile updated successfully" if contact.validated_data else "Profile synced successfully"
        return Response(
            {"message": message, "user": ProfileSerializer(profile).data},
            status=status.HTTP_200_OK,
        )

    def put(self, request, *args, **kwargs):
        profile = _own_profile_or_404(request.user)
        serializer = ProfileUpdateSerializer(profile, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(
            {"message": "Profile updated successfully", "user": ProfileSerializer(profile).data},
            status=status.HTTP_200_OK,
        )

    patch = put


class MeView(AuthAPIView):
    """GET /api/auth/me/ -> the caller's active profile."""

    def get(self, request, *args, **kwargs):
        profile = _own_profile_or_404(request.user)
        return Response({"user": ProfileSerializer(profile).data}, status=status.HTTP_200_OK)


class LogoutView(AuthAPIView):
    """POST /api/auth/logout/ -> record the logout event; tokens are revoked by the provider."""

    def post(self, request, *args, **kwargs):
        Profile.active.filter(auth0_id=request.user.sub).update(updated_at=timezone.now())
        logger.info("User %s logged out at %s", request.user.sub, timezone.now().isoformat())
        return Response({"message": "Logout successful"}, status=status.HTTP_200_OK)


class UserProfileView(MeView):
    """GET /api/users/profile/ -> same as /api/auth/me/, outside the auth rate limit."""

    throttle_classes = [GeneralRateThrottle]


class AuthStatusView(AuthAPIView):
    """GET /api/auth/status/ -> confirms the bearer token is valid."""

    def get(self, request, *args, **kwargs):
        user = request.user
        data = {
            "authenticated": True,
            "user": {"sub": user.sub, "email": user.email, "name": user.name},
        }
        return Response(data, status=status.HTTP_200_OK)
