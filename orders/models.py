"""Orders app models.

Defines the Order model. An order references one catalog product, snapshots
its unit price at creation and recomputes the total on every save. Every write
re-checks the order rules: changed fields are validated again, delivery
changes require a modifiable status and status changes must follow the
allowed transitions.
"""

import time
from string import ascii_uppercase, digits

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import DEFERRED, Count, Sum
from django.utils import timezone
from django.utils.crypto import get_random_string

from products.catalog import unit_price_for
from . import validators as rules

ORDER_NUMBER_SUFFIX_CHARS = ascii_uppercase + digits
IMMUTABLE_FIELDS = ("user_sub", "order_number", "product_name", "unit_price")


def generate_order_number() -> str:
    """``ORD-<epoch millis>-<5 random uppercase alphanumerics>``."""
    millis = int(time.time() * 1000)
    return f"ORD-{millis}-{get_random_string(5, ORDER_NUMBER_SUFFIX_CHARS)}"


class OrderQuerySet(models.QuerySet):
    def for_user(self, sub: str):
        return self.filter(user_sub=sub)

    def upcoming(self):
        return self.filter(
            delivery_date__gte=rules.current_date(),
            status__in=rules.OPEN_STATUSES,
        )

    def status_breakdown(self):
        """Count and total value per status."""
        return list(
            self.values("status")
            .annotate(count=Count("id"), total_value=Sum("total_price"))
            .order_by("status")
        )


class Order(models.Model):
    """A single-product order placed by an authenticated identity."""

    class Status(models.TextChoices):
        PENDING = rules.PENDING, "pending"
        CONFIRMED = rules.CONFIRMED, "confirmed"
        PROCESSING = rules.PROCESSING, "processing"
        SHIPPED = rules.SHIPPED, "shipped"
        DELIVERED = rules.DELIVERED, "delivered"
        CANCELLED = rules.CANCELLED, "cancelled"

    user_sub = models.CharField(max_length=128, db_index=True)
    order_number = models.CharField(max_length=40, unique=True, editable=False)

    product_name = models.CharField(max_length=200)
    quantity = models.PositiveSmallIntegerField()

    delivery_date = models.DateField()
    delivery_time = models.CharField(max_length=8)
    delivery_location = models.CharField(max_length=50)
    message = models.TextField(blank=True, default="")

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)

    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    total_price = models.DecimalField(max_digits=12, decimal_places=2)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    shipped_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)

    # Request metadata; never serialized.
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=512, blank=True, default="")

    objects = OrderQuerySet.as_manager()

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["user_sub", "-created_at"], name="order_user_created_idx"),
            models.Index(fields=["delivery_date", "delivery_time"], name="order_delivery_slot_idx"),
            models.Index(fields=["status"], name="order_status_idx"),
            models.Index(fields=["-created_at"], name="order_created_idx"),
        ]

    def __str__(self) -> str:
        """Readable representation for admin and debugging."""
        return f"Order<{self.order_number} {self.product_name} x{self.quantity} {self.status}>"

    # ------------------------------ change tracking ------------------------------

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._loaded_values = dict(zip(field_names, values))
        return instance

    def _snapshot(self):
        self._loaded_values = {
            f.attname: getattr(self, f.attname) for f in self._meta.concrete_fields
        }

    def changed_fields(self) -> set:
        loaded = getattr(self, "_loaded_values", None)
        if loaded is None:
            return set()
        return {
            name
            for name, old in loaded.items()
            if old is not DEFERRED and getattr(self, name) != old
        }

    # ------------------------------ rules ------------------------------

    @property
    def loaded_status(self) -> str:
        return getattr(self, "_loaded_values", {}).get("status", self.status)

    def enforce_write_rules(self):
        """Validate this write against field and state rules."""
        if self._state.adding:
            if self.status != self.Status.PENDING:
                raise ValidationError({"status": ["New orders start as pending."]})
            rules.validate_order_fields(
                {name: getattr(self, name) for name in rules.FIELD_VALIDATORS}
            )
            return

        changed = self.changed_fields()
        frozen = sorted(changed.intersection(IMMUTABLE_FIELDS))
        if frozen:
            raise ValidationError({name: ["This field cannot be changed."] for name in frozen})
        if changed.intersection(rules.DELIVERY_FIELDS):
            rules.ensure_modifiable(self.loaded_status)
        if "status" in changed:
            rules.check_transition(self.loaded_status, self.status)
        rules.validate_order_fields(
            {name: getattr(self, name) for name in changed if name in rules.FIELD_VALIDATORS}
        )

    def _stamp_status_times(self):
        now = timezone.now()
        if self.status == self.Status.SHIPPED and self.shipped_at is None:
            self.shipped_at = now
        if self.status == self.Status.DELIVERED and self.delivered_at is None:
            self.delivered_at = now

    def save(self, *args, **kwargs):
        self.enforce_write_rules()
        if not self.order_number:
            self.order_number = generate_order_number()
        if self._state.adding:
            self.unit_price = unit_price_for(self.product_name)
        self.total_price = self.unit_price * self.quantity
        self._stamp_status_times()

        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = set(update_fields) | {
                "total_price", "updated_at", "shipped_at", "delivered_at"
            }
        super().save(*args, **kwargs)
        self._snapshot()

    def transition_to(self, new_status: str):
        """Move to ``new_status`` and persist; raises ``StateConflict`` if not allowed."""
        rules.check_transition(self.status, new_status)
        self.status = new_status
        self.save()

    def cancel(self):
        rules.ensure_cancellable(self.status)
        self.transition_to(self.Status.CANCELLED)

    # ------------------------------ derived ------------------------------

    @property
    def is_upcoming(self) -> bool:
        return self.delivery_date >= rules.current_date() and self.status in rules.OPEN_STATUSES

    @property
    def is_past(self) -> bool:
        return self.delivery_date < rules.current_date() or self.status in (
            self.Status.DELIVERED,
            self.Status.CANCELLED,
        )
