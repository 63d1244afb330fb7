"""Field rules for user profiles.

Plain functions raising Django's ``ValidationError`` so they can be attached
to model fields and serializer fields alike.
"""

import re

from django.core.exceptions import ValidationError

IDENTITY_ID_RE = re.compile(r"^[A-Za-z0-9-]+(\|[A-Za-z0-9_.-]+)?$")
NAME_RE = re.compile(r"^[A-Za-z\s]+$")
USERNAME_RE = re.compile(r"^[A-Za-z0-9_]+$")
CONTACT_NUMBER_RE = re.compile(r"^\+?[0-9\-()\s]+$")
COUNTRY_RE = re.compile(r"^[A-Za-z\s]*$")

NAME_MAX_LENGTH = 100
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
COUNTRY_MAX_LENGTH = 50


def validate_identity_id(value):
    if not value or not IDENTITY_ID_RE.match(value):
        raise ValidationError("Invalid user ID format.")


def validate_display_name(value):
    if not value or not value.strip():
        raise ValidationError("Name is required.")
    if len(value) > NAME_MAX_LENGTH:
        raise ValidationError(f"Name cannot be more than {NAME_MAX_LENGTH} characters.")
    if not NAME_RE.match(value):
        raise ValidationError("Name can only contain letters and spaces.")


def validate_username(value):
    if len(value) < USERNAME_MIN_LENGTH:
        raise ValidationError(f"Username must be at least {USERNAME_MIN_LENGTH} characters.")
    if len(value) > USERNAME_MAX_LENGTH:
        raise ValidationError(f"Username cannot be more than {USERNAME_MAX_LENGTH} characters.")
    if not USERNAME_RE.match(value):
        raise ValidationError("Username can only contain letters, numbers, and underscores.")


def validate_contact_number(value):
    if value and not CONTACT_NUMBER_RE.match(value):
        raise ValidationError("Invalid contact number format.")


def validate_country(value):
    if value and len(value) > COUNTRY_MAX_LENGTH:
        raise ValidationError(f"Country name cannot be more than {COUNTRY_MAX_LENGTH} characters.")
    if value and not COUNTRY_RE.match(value):
        raise ValidationError("Country can only contain letters and spaces.")


def normalize_display_name(raw, fallback="User"):
    """Reduce an identity-provider name to letters and spaces (may be empty input)."""
    cleaned = re.sub(r"[^A-Za-z\s]", " ", raw or "")
    cleaned = re.sub(r"\s+", " ", cleaned).strip()[:NAME_MAX_LENGTH].strip()
    return cleaned or fallback


def normalize_username(raw, fallback="user"):
    """Reduce a nickname/email local part to a valid username."""
    cleaned = re.sub(r"[^A-Za-z0-9_]", "_", raw or "").strip("_")
    cleaned = cleaned[:USERNAME_MAX_LENGTH]
    if len(cleaned) < USERNAME_MIN_LENGTH:
        cleaned = (cleaned + "_" + fallback)[:USERNAME_MAX_LENGTH].strip("_")
        cleaned = cleaned.ljust(USERNAME_MIN_LENGTH, "0")
    return cleaned
