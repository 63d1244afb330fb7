from django import forms
from django.contrib import admin
from django.core.exceptions import ValidationError
from django.utils.html import format_html

from common.exceptions import StateConflict
from . import validators as rules
from .models import Order

# One entry per Order.Status; a status missing here fails the admin tests.
STATUS_COLORS = {
    Order.Status.PENDING: "#6b7280",
    Order.Status.CONFIRMED: "#4f46e5",
    Order.Status.PROCESSING: "#0284c7",
    Order.Status.SHIPPED: "#d97706",
    Order.Status.DELIVERED: "#16a34a",
    Order.Status.CANCELLED: "#dc2626",
}


class OrderAdminForm(forms.ModelForm):
    class Meta:
        model = Order
        fields = ("status",)

    def clean_status(self):
        new_status = self.cleaned_data["status"]
        try:
            rules.check_transition(self.instance.loaded_status, new_status)
        except StateConflict as exc:
            raise ValidationError(str(exc))
        return new_status


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Order overview:
    - List: number, product, quantity, status badge, owner, total, delivery slot
    - Filter: status, delivery location, created (date hierarchy)
    - Only the status is editable, and only along the allowed transitions
    """
    form = OrderAdminForm
    list_display = (
        "id",
        "order_number",
        "product_name",
        "quantity",
        "status_badge",
        "user_sub",
        "total_price",
        "delivery_date",
        "delivery_time",
        "created_at",
    )
    list_filter = ("status", "delivery_location", "created_at")
    date_hierarchy = "created_at"
    ordering = ("-created_at", "-id")
    search_fields = ("order_number", "user_sub", "product_name")

    readonly_fields = (
        "order_number",
        "user_sub",
        "product_name",
        "quantity",
        "unit_price",
        "total_price",
        "delivery_date",
        "delivery_time",
        "delivery_location",
        "message",
        "shipped_at",
        "delivered_at",
        "created_at",
        "updated_at",
    )
    fields = ("status",) + readonly_fields

    def has_add_permission(self, request):
        return False

    def status_badge(self, obj):
        color = STATUS_COLORS.get(obj.status, STATUS_COLORS[Order.Status.PENDING])
        return format_html('<strong style="color:{}">{}</strong>', color, obj.get_status_display())
    status_badge.short_description = "status"
    status_badge.admin_order_field = "status"
