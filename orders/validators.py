"""Order rules as plain functions.

Field validators raise Django's ``ValidationError`` and are shared by the
model (checked on every save) and the API serializers. State rules raise
``StateConflict``: the order exists and belongs to the caller, but its status
does not allow the requested change.
"""

import re
from datetime import date, datetime

from django.core.exceptions import ValidationError
from django.utils import timezone
from django.utils.dateparse import parse_date

from common.exceptions import StateConflict
from products.catalog import (
    DELIVERY_LOCATIONS,
    DELIVERY_TIMES,
    EXCLUDED_DELIVERY_WEEKDAY,
    PRODUCT_PRICES,
)

MIN_QUANTITY = 1
MAX_QUANTITY = 10
MESSAGE_MAX_LENGTH = 500
SCRIPT_LIKE = re.compile(r"(<script|</script|javascript:|on\w+\s*=)", re.IGNORECASE)

PENDING = "pending"
CONFIRMED = "confirmed"
PROCESSING = "processing"
SHIPPED = "shipped"
DELIVERED = "delivered"
CANCELLED = "cancelled"

MODIFIABLE_STATUSES = frozenset({PENDING, CONFIRMED})
CANCELLABLE_STATUSES = frozenset({PENDING, CONFIRMED, PROCESSING})
OPEN_STATUSES = frozenset({PENDING, CONFIRMED, PROCESSING, SHIPPED})

TRANSITIONS = {
    PENDING: frozenset({CONFIRMED, PROCESSING, CANCELLED}),
    CONFIRMED: frozenset({PROCESSING, CANCELLED}),
    PROCESSING: frozenset({SHIPPED, CANCELLED}),
    SHIPPED: frozenset({DELIVERED}),
    DELIVERED: frozenset(),
    CANCELLED: frozenset(),
}

# Fields whose change counts as modifying the delivery of an order.
DELIVERY_FIELDS = ("delivery_date", "delivery_time", "delivery_location", "message")

MESSAGE_INVALID = "Message contains invalid characters."


def current_date() -> date:
    return timezone.localdate()


# ------------------------------ field rules ------------------------------

def validate_product_name(value):
    if value not in PRODUCT_PRICES:
        raise ValidationError("Product name must be from the predefined list.")


def validate_quantity(value):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Quantity must be an integer.")
    if value < MIN_QUANTITY:
        raise ValidationError(f"Quantity must be at least {MIN_QUANTITY}.")
    if value > MAX_QUANTITY:
        raise ValidationError(f"Quantity cannot exceed {MAX_QUANTITY} per order.")


def _as_date(value):
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            parsed = parse_date(value[:10])
        except ValueError:
            parsed = None
        if parsed is not None:
            return parsed
    raise ValidationError("Delivery date must be a valid date (YYYY-MM-DD).")


def validate_delivery_date(value):
    """Delivery must be today or later (date only) and not on the excluded weekday."""
    day = _as_date(value)
    if day < current_date():
        raise ValidationError("Delivery date must be today or in the future.")
    if day.weekday() == EXCLUDED_DELIVERY_WEEKDAY:
        raise ValidationError("Delivery date cannot be a Sunday.")


def validate_delivery_time(value):
    if value not in DELIVERY_TIMES:
        raise ValidationError("Delivery time must be 10:00 AM, 11:00 AM, or 12:00 PM.")


def validate_delivery_location(value):
    if value not in DELIVERY_LOCATIONS:
        raise ValidationError("Delivery location must be a valid Sri Lankan district.")


def validate_message(value):
    if not value:
        return
    if len(value) > MESSAGE_MAX_LENGTH:
        raise ValidationError(f"Message cannot be more than {MESSAGE_MAX_LENGTH} characters.")
    if SCRIPT_LIKE.search(value):
        raise ValidationError(MESSAGE_INVALID)


FIELD_VALIDATORS = {
    "product_name": validate_product_name,
    "quantity": validate_quantity,
    "delivery_date": validate_delivery_date,
    "delivery_time": validate_delivery_time,
    "delivery_location": validate_delivery_location,
    "message": validate_message,
}


def collect_field_errors(values: dict) -> dict:
    """Run the field rules for every key present in ``values``.

    Returns ``{field: [messages]}``; empty when everything is valid.
    """
    errors = {}
    for field, validator in FIELD_VALIDATORS.items():
        if field not in values:
            continue
        try:
            validator(values[field])
        except ValidationError as exc:
            errors[field] = exc.messages
    return errors


def validate_order_fields(values: dict):
    errors = collect_field_errors(values)
    if errors:
        raise ValidationError(errors)


# ------------------------------ state rules ------------------------------

def can_be_modified(status: str) -> bool:
    return status in MODIFIABLE_STATUSES


def can_be_cancelled(status: str) -> bool:
    return status in CANCELLABLE_STATUSES


def ensure_modifiable(status: str):
    if not can_be_modified(status):
        raise StateConflict(f"Order cannot be modified in its current status ({status}).")


def ensure_cancellable(status: str):
    if not can_be_cancelled(status):
        raise StateConflict(f"Order cannot be cancelled in its current status ({status}).")


def check_transition(old: str, new: str):
    """Raise ``StateConflict`` unless ``old -> new`` is an allowed status change."""
    if old == new:
        return
    if new not in TRANSITIONS:
        raise ValidationError({"status": ["Invalid order status."]})
    if new not in TRANSITIONS.get(old, frozenset()):
        raise StateConflict(f"Order status cannot change from {old} to {new}.")
