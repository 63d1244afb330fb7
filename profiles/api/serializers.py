"""Profiles API serializers.

Contains serializers for:
- reading a profile (failed-login counter and lock timestamp are never exposed),
- the optional contact fields accepted when syncing a profile,
- partially updating the caller's own profile, including nested preferences.
"""

from rest_framework import serializers

from ..models import Profile
from ..validators import (
    validate_contact_number,
    validate_country,
    validate_display_name,
)


# ------------------------------ helpers ------------------------------

def _apply_preferences(profile: Profile, preferences: dict):
    for key in ("notifications", "newsletter"):
        if key in preferences:
            setattr(profile, key, preferences[key])


# ------------------------------ serializers ------------------------------

class PreferencesSerializer(serializers.Serializer):
    notifications = serializers.BooleanField(required=False)
    newsletter = serializers.BooleanField(required=False)


class ProfileSerializer(serializers.ModelSerializer):
    """Read-only representation of a profile."""

    id = serializers.CharField(source="auth0_id", read_only=True)
    preferences = serializers.SerializerMethodField()

    class Meta:
        model = Profile
        fields = [
            "id",
            "email",
            "name",
            "username",
            "picture",
            "contact_number",
            "country",
            "preferences",
            "is_active",
            "last_login",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_preferences(self, obj):
        return {"notifications": obj.notifications, "newsletter": obj.newsletter}


class ProfileContactSerializer(serializers.Serializer):
    """Optional contact fields accepted by POST /api/auth/profile/."""

    contact_number = serializers.CharField(
        required=False, allow_blank=True, max_length=30, validators=[validate_contact_number]
    )
    country = serializers.CharField(
        required=False, allow_blank=True, max_length=50, validators=[validate_country]
    )


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """Partial update of the caller's own profile."""

    name = serializers.CharField(
        required=False, max_length=100, validators=[validate_display_name]
    )
    contact_number = serializers.CharField(
        required=False, allow_blank=True, max_length=30, validators=[validate_contact_number]
    )
    country = serializers.CharField(
        required=False, allow_blank=True, max_length=50, validators=[validate_country]
    )
    preferences = PreferencesSerializer(required=False)

    class Meta:
        model = Profile
        fields = ["name", "contact_number", "country", "preferences"]

    def update(self, instance: Profile, validated_data):
        """Merge preferences into the existing flags; other fields overwrite."""
        _apply_preferences(instance, validated_data.pop("preferences", {}))
        for attr, val in validated_data.items():
            setattr(instance, attr, val.strip() if isinstance(val, str) else val)
        instance.save()
        return instance
