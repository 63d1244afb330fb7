"""Profiles app models.

Defines the Profile model: the local record of a person who signed in through
the external identity provider. Profiles are keyed by the provider's subject
id, created or refreshed on every profile sync, and deactivated rather than
deleted.
"""

from django.core.validators import validate_email
from django.db import models
from django.utils import timezone

from .validators import (
    normalize_display_name,
    normalize_username,
    validate_contact_number,
    validate_country,
    validate_display_name,
    validate_identity_id,
    validate_username,
)


class ActiveProfileManager(models.Manager):
    def get_queryset(self):
        return super().get_queryset().filter(is_active=True)


class Profile(models.Model):
    """Local user record synced from a verified identity."""

    auth0_id = models.CharField(max_length=128, unique=True, validators=[validate_identity_id])
    email = models.EmailField(unique=True, validators=[validate_email])
    name = models.CharField(max_length=100, validators=[validate_display_name])
    username = models.CharField(max_length=30, unique=True, validators=[validate_username])
    picture = models.URLField(max_length=500, blank=True, default="")
    contact_number = models.CharField(
        max_length=30, blank=True, default="", validators=[validate_contact_number]
    )
    country = models.CharField(max_length=50, blank=True, default="", validators=[validate_country])

    notifications = models.BooleanField(default=True)
    newsletter = models.BooleanField(default=False)

    is_active = models.BooleanField(default=True)
    last_login = models.DateTimeField(default=timezone.now)
    login_attempts = models.PositiveIntegerField(default=0)
    lock_until = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = models.Manager()
    active = ActiveProfileManager()

    class Meta:
        db_table = "profiles"
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["-created_at"], name="profile_created_idx")]

    def __str__(self):
        """Readable representation for admin and debugging."""
        return f"Profile<{self.auth0_id}:{self.username}>"

    @property
    def is_locked(self) -> bool:
        return bool(self.lock_until and self.lock_until > timezone.now())

    @classmethod
    def unique_username(cls, base: str, exclude_auth0_id: str) -> str:
        """Return ``base`` or ``base`` with a numeric suffix not used by another profile."""
        candidate = base
        suffix = 1
        while cls.objects.filter(username__iexact=candidate).exclude(auth0_id=exclude_auth0_id).exists():
            tail = f"_{suffix}"
            candidate = f"{base[: 30 - len(tail)]}{tail}"
            suffix += 1
        return candidate

    @classmethod
    def sync_from_identity(cls, identity):
        """Create or refresh the profile for a verified identity.

        Email is lower-cased, the username is derived from the nickname (or the
        email local part) and the name is reduced to letters and spaces. On a
        refresh, claims missing from the token leave the stored value alone.
        Returns ``(profile, created)``.
        """
        email = (identity.email or "").lower()
        existing = cls.objects.filter(auth0_id=identity.sub).first()

        values = {"last_login": timezone.now(), "login_attempts": 0, "lock_until": None}
        if email or existing is None:
            values["email"] = email
        if identity.name or identity.nickname or existing is None:
            values["name"] = normalize_display_name(identity.name or identity.nickname)
        if identity.picture or existing is None:
            values["picture"] = identity.picture or ""

        raw_username = identity.nickname or email.split("@")[0]
        if raw_username or existing is None:
            username = normalize_username(raw_username)
            if existing is None or existing.username.lower() != username.lower():
                username = cls.unique_username(username, identity.sub)
            values["username"] = username

        if existing is None:
            profile = cls(auth0_id=identity.sub, **values)
            profile.full_clean()
            profile.save()
            return profile, True

        for attr, val in values.items():
            setattr(existing, attr, val)
        existing.full_clean()
        existing.save()
        return existing, False
