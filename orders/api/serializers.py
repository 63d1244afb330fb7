"""Orders API serializers.

Input serializers for creating and updating orders and the output serializer
returning orders to their owner. Field rules come from ``orders.validators``
so the API and the model enforce the same constraints. Prices are never read
from client input; request metadata is never written out.
"""

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_ipv46_address
from rest_framework import serializers

from common.throttling import client_ip
from orders import validators as rules
from orders.models import Order
from products.catalog import DELIVERY_LOCATIONS, DELIVERY_TIMES, PRODUCT_NAMES

UPDATABLE_FIELDS = ("delivery_date", "delivery_time", "delivery_location", "message")


def _reject_if_sanitized(serializer, field_name, value):
    """A field the sanitizer had to rewrite carried dangerous content: reject it."""
    request = serializer.context.get("request")
    if request is not None and field_name in getattr(request, "sanitized_fields", ()):
        raise serializers.ValidationError(rules.MESSAGE_INVALID)
    return value


class OrderCreateSerializer(serializers.ModelSerializer):
    """Input serializer for POST /api/orders/.

    Validates product, quantity, delivery slot and message. The owner, unit
    price and request metadata are filled in from the request context.
    """

    product_name = serializers.ChoiceField(
        choices=PRODUCT_NAMES, error_messages={"invalid_choice": "Invalid product selection."}
    )
    quantity = serializers.IntegerField(
        min_value=rules.MIN_QUANTITY,
        max_value=rules.MAX_QUANTITY,
        error_messages={
            "min_value": "Quantity must be between 1 and 10.",
            "max_value": "Quantity must be between 1 and 10.",
        },
    )
    delivery_date = serializers.DateField(validators=[rules.validate_delivery_date])
    delivery_time = serializers.ChoiceField(
        choices=DELIVERY_TIMES,
        error_messages={"invalid_choice": "Delivery time must be 10:00 AM, 11:00 AM, or 12:00 PM."},
    )
    delivery_location = serializers.ChoiceField(
        choices=DELIVERY_LOCATIONS,
        error_messages={"invalid_choice": "Invalid delivery location."},
    )
    message = serializers.CharField(
        required=False,
        allow_blank=True,
        max_length=rules.MESSAGE_MAX_LENGTH,
        validators=[rules.validate_message],
    )

    class Meta:
        model = Order
        fields = [
            "product_name",
            "quantity",
            "delivery_date",
            "delivery_time",
            "delivery_location",
            "message",
        ]

    def validate_message(self, value):
        return _reject_if_sanitized(self, "message", value)

    def create(self, validated_data):
        request = self.context["request"]
        return Order.objects.create(
            user_sub=request.user.sub,
            ip_address=_client_ip(request),
            user_agent=(request.META.get("HTTP_USER_AGENT") or "")[:512],
            **validated_data,
        )


class OrderUpdateSerializer(serializers.ModelSerializer):
    """Input serializer for PUT/PATCH /api/orders/{id}/ (delivery fields only)."""

    delivery_date = serializers.DateField(required=False, validators=[rules.validate_delivery_date])
    delivery_time = serializers.ChoiceField(
        required=False,
        choices=DELIVERY_TIMES,
        error_messages={"invalid_choice": "Delivery time must be 10:00 AM, 11:00 AM, or 12:00 PM."},
    )
    delivery_location = serializers.ChoiceField(
        required=False,
        choices=DELIVERY_LOCATIONS,
        error_messages={"invalid_choice": "Invalid delivery location."},
    )
    message = serializers.CharField(
        required=False,
        allow_blank=True,
        max_length=rules.MESSAGE_MAX_LENGTH,
        validators=[rules.validate_message],
    )

    class Meta:
        model = Order
        fields = list(UPDATABLE_FIELDS)

    def validate_message(self, value):
        return _reject_if_sanitized(self, "message", value)

    def validate(self, attrs):
        extra = sorted(set(self.initial_data.keys()) - set(UPDATABLE_FIELDS))
        if extra:
            raise serializers.ValidationError(
                {field: ["This field cannot be updated."] for field in extra}
            )
        return attrs


class OrderStatusSerializer(serializers.Serializer):
    """Input for POST /api/orders/{id}/status/ (staff only)."""

    status = serializers.ChoiceField(
        choices=Order.Status.choices, error_messages={"invalid_choice": "Invalid order status."}
    )


class OrderOutputSerializer(serializers.ModelSerializer):
    """Read serializer for returning an order to its owner (no request metadata)."""

    user_id = serializers.CharField(source="user_sub", read_only=True)
    is_upcoming = serializers.BooleanField(read_only=True)
    is_past = serializers.BooleanField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "user_id",
            "product_name",
            "quantity",
            "delivery_date",
            "delivery_time",
            "delivery_location",
            "message",
            "status",
            "unit_price",
            "total_price",
            "is_upcoming",
            "is_past",
            "created_at",
            "updated_at",
            "shipped_at",
            "delivered_at",
        ]
        read_only_fields = fields


def _client_ip(request):
    candidate = client_ip(request)
    if not candidate:
        return None
    try:
        validate_ipv46_address(candidate)
    except DjangoValidationError:
        return None
    return candidate
