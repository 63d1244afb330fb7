"""Orders API views.

List and create orders on the same endpoint; only the caller's own orders are
ever listed. Detail routes load the order, check ownership, then the order's
status, then the submitted fields. DELETE cancels instead of deleting.
Statistics and the price list for the order form live on their own routes.
Staff holding the status permission move orders along the status graph on a
separate route that skips the ownership check.
"""

import logging

from django.db import transaction
from rest_framework import generics, status
from rest_framework.exceptions import ValidationError
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.pipeline import PipelineMixin
from orders import validators as rules
from orders.models import Order
from products.catalog import PRODUCTS
from products.api.serializers import ProductPriceSerializer
from user_auth_app.api.permissions import HasPermission, MatchesDeclaredOwner
from .permissions import IsOrderOwner
from .serializers import (
    OrderCreateSerializer,
    OrderOutputSerializer,
    OrderStatusSerializer,
    OrderUpdateSerializer,
)

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {"created_at", "delivery_date", "total_price", "status"}
STATUS_PERMISSION = "update:order_status"


# ----------------------------- helpers (module-level) -----------------------------

def _apply_status_filter(qs, params):
    status_value = params.get("status")
    if not status_value:
        return qs
    if status_value not in Order.Status.values:
        raise ValidationError(
            {"status": f"Allowed values: {', '.join(Order.Status.values)}."}
        )
    return qs.filter(status=status_value)


def _apply_ordering(qs, params):
    sort = params.get("sort") or "created_at"
    direction = params.get("order") or "desc"
    if sort not in SORTABLE_FIELDS:
        raise ValidationError({"sort": f"Allowed values: {', '.join(sorted(SORTABLE_FIELDS))}."})
    if direction not in ("asc", "desc"):
        raise ValidationError({"order": "Allowed values: asc, desc."})
    prefix = "-" if direction == "desc" else ""
    return qs.order_by(f"{prefix}{sort}", f"{prefix}id")


# --------------------------------------- views ---------------------------------------

class OrdersPagination(PageNumberPagination):
    """Order pagination; ``limit`` sets the page size (default 10)."""

    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 100

    def get_paginated_response(self, data):
        paginator = self.page.paginator
        return Response(
            {
                "orders": data,
                "upcoming_orders": [o for o in data if o["is_upcoming"]],
                "past_orders": [o for o in data if o["is_past"]],
                "pagination": {
                    "current_page": self.page.number,
                    "total_pages": paginator.num_pages,
                    "total_orders": paginator.count,
                    "limit": paginator.per_page,
                },
            }
        )


class OrderAPIView(PipelineMixin):
    permission_classes = [IsAuthenticated]


class OrderListCreateAPIView(OrderAPIView, generics.ListCreateAPIView):
    """GET: list the caller's orders (filter, sort, paginate).
    POST: create a new order for the caller.
    """

    queryset = Order.objects.all()
    pagination_class = OrdersPagination

    def get_permissions(self):
        """A POST may not declare a different owner than the caller."""
        if self.request.method == "POST":
            return [IsAuthenticated(), MatchesDeclaredOwner()]
        return [IsAuthenticated()]

    def get_serializer_class(self):
        """Use output serializer for GET and input serializer for POST."""
        return OrderOutputSerializer if self.request.method == "GET" else OrderCreateSerializer

    # --- GET ---
    def get_queryset(self):
        """Return only the caller's orders, filtered and sorted from the query string."""
        params = self.request.query_params
        qs = super().get_queryset().for_user(self.request.user.sub)
        qs = _apply_status_filter(qs, params)
        return _apply_ordering(qs, params)

    # --- POST ---
    def create(self, request, *args, **kwargs):
        """Validate and create a new order, returning the full order payload."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = serializer.save()
        logger.info("Order %s created by %s", order.order_number, order.user_sub)
        return Response(
            {"message": "Order created successfully", "order": OrderOutputSerializer(order).data},
            status=status.HTTP_201_CREATED,
        )


class OrderDetailAPIView(OrderAPIView, generics.RetrieveUpdateDestroyAPIView):
    """GET: the order. PUT/PATCH: change delivery fields. DELETE: cancel the order."""

    queryset = Order.objects.all()
    permission_classes = [IsAuthenticated, IsOrderOwner]

    def get_serializer_class(self):
        if self.request.method in ("PUT", "PATCH"):
            return OrderUpdateSerializer
        return OrderOutputSerializer

    def retrieve(self, request, *args, **kwargs):
        order = self.get_object()
        return Response({"order": OrderOutputSerializer(order).data}, status=status.HTTP_200_OK)

    def update(self, request, *args, **kwargs):
        """Ownership (403) is checked by get_object, then status (409), then fields (400)."""
        with transaction.atomic():
            order = self._locked_object()
            rules.ensure_modifiable(order.status)
            serializer = self.get_serializer(order, data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            serializer.save()
        logger.info("Order %s updated by %s", order.order_number, order.user_sub)
        return Response(
            {"message": "Order updated successfully", "order": OrderOutputSerializer(order).data},
            status=status.HTTP_200_OK,
        )

    def destroy(self, request, *args, **kwargs):
        """Soft delete: set the status to cancelled and return the order."""
        with transaction.atomic():
            order = self._locked_object()
            order.cancel()
        logger.info("Order %s cancelled by %s", order.order_number, order.user_sub)
        return Response(
            {"message": "Order cancelled successfully", "order": OrderOutputSerializer(order).data},
            status=status.HTTP_200_OK,
        )

    def _locked_object(self):
        """get_object() on a row locked for the rest of the transaction."""
        self.queryset = Order.objects.select_for_update()
        return self.get_object()


class OrderStatusAPIView(OrderAPIView, generics.GenericAPIView):
    """POST /api/orders/{id}/status/ -> move any order along the status graph (staff)."""

    queryset = Order.objects.all()
    permission_classes = [IsAuthenticated, HasPermission(STATUS_PERMISSION)]

    def post(self, request, *args, **kwargs):
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_status = serializer.validated_data["status"]
        with transaction.atomic():
            self.queryset = Order.objects.select_for_update()
            order = self.get_object()
            previous = order.status
            order.transition_to(new_status)
        logger.info(
            "Order %s moved from %s to %s by %s",
            order.order_number, previous, new_status, request.user.sub,
        )
        return Response(
            {"message": "Order status updated successfully", "order": OrderOutputSerializer(order).data},
            status=status.HTTP_200_OK,
        )


class OrderStatsAPIView(OrderAPIView, APIView):
    """GET /api/orders/stats/ -> totals and a per-status breakdown for the caller."""

    def get(self, request):
        own = Order.objects.for_user(request.user.sub)
        breakdown = [
            {
                "status": row["status"],
                "count": row["count"],
                "total_value": str(row["total_value"] or 0),
            }
            for row in own.status_breakdown()
        ]
        data = {
            "total_orders": own.count(),
            "upcoming_orders": own.upcoming().count(),
            "status_breakdown": breakdown,
        }
        return Response(data, status=status.HTTP_200_OK)


class OrderProductListAPIView(OrderAPIView, APIView):
    """GET /api/orders/products/list/ -> product names with unit prices for the order form."""

    def get(self, request):
        products = ProductPriceSerializer(PRODUCTS, many=True).data
        return Response({"products": products}, status=status.HTTP_200_OK)
