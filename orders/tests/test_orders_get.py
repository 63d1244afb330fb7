from decimal import Decimal

from django.urls import reverse
from rest_framework import status

from orders.models import Order
from orders.tests.support import OWNER, STRANGER, YESTERDAY, OrderAPITestCase, create_order


class OrderListTests(OrderAPITestCase):
    """
    Tests for GET /api/orders/

    - Only the caller's own orders are listed.
    - Supports status filter, sort/order and page/limit pagination.
    - Splits the page into upcoming and past orders.
    """

    def setUp(self):
        super().setUp()
        self.url = reverse("order-list")
        self.pending = create_order(quantity=1)
        self.confirmed = create_order(quantity=3, status=Order.Status.CONFIRMED)
        self.cancelled = create_order(quantity=2, status=Order.Status.CANCELLED)
        self.delivered = create_order(quantity=4, status=Order.Status.DELIVERED)
        Order.objects.filter(pk=self.delivered.pk).update(delivery_date=YESTERDAY)
        self.foreign = create_order(user_sub=STRANGER)
        self.auth(OWNER)

    def ids(self, orders):
        return [o["id"] for o in orders]

    def test_lists_only_own_orders_newest_first(self):
        res = self.client.get(self.url)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(
            self.ids(res.data["orders"]),
            [self.delivered.id, self.cancelled.id, self.confirmed.id, self.pending.id],
        )
        self.assertNotIn(self.foreign.id, self.ids(res.data["orders"]))
        self.assertEqual(
            res.data["pagination"],
            {"current_page": 1, "total_pages": 1, "total_orders": 4, "limit": 10},
        )

    def test_upcoming_and_past_split(self):
        res = self.client.get(self.url)
        self.assertCountEqual(self.ids(res.data["upcoming_orders"]), [self.pending.id, self.confirmed.id])
        self.assertCountEqual(self.ids(res.data["past_orders"]), [self.cancelled.id, self.delivered.id])

    def test_status_filter(self):
        res = self.client.get(self.url, {"status": "confirmed"})
        self.assertEqual(self.ids(res.data["orders"]), [self.confirmed.id])

    def test_unknown_status_filter_rejected(self):
        res = self.client.get(self.url, {"status": "lost"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("status", res.data["fields"])

    def test_sort_by_total_ascending(self):
        res = self.client.get(self.url, {"sort": "total_price", "order": "asc"})
        self.assertEqual(
            self.ids(res.data["orders"]),
            [self.pending.id, self.cancelled.id, self.confirmed.id, self.delivered.id],
        )

    def test_invalid_sort_rejected(self):
        res = self.client.get(self.url, {"sort": "user_sub"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        res = self.client.get(self.url, {"order": "sideways"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_pages_cover_every_order_once(self):
        seen = []
        first = self.client.get(self.url, {"limit": 3})
        self.assertEqual(first.data["pagination"]["total_pages"], 2)
        self.assertEqual(first.data["pagination"]["limit"], 3)
        seen += self.ids(first.data["orders"])
        second = self.client.get(self.url, {"limit": 3, "page": 2})
        seen += self.ids(second.data["orders"])
        self.assertEqual(len(seen), 4)
        self.assertEqual(
            set(seen), {self.pending.id, self.confirmed.id, self.cancelled.id, self.delivered.id}
        )

    def test_requires_token(self):
        self.client.credentials()
        res = self.client.get(self.url)
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)


class OrderDetailGetTests(OrderAPITestCase):
    """Tests for GET /api/orders/{id}/"""

    def setUp(self):
        super().setUp()
        self.order = create_order()
        self.auth(OWNER)

    def test_own_order(self):
        res = self.client.get(reverse("order-detail", args=[self.order.id]))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["order"]["order_number"], self.order.order_number)

    def test_foreign_order_forbidden(self):
        self.auth(STRANGER)
        res = self.client.get(reverse("order-detail", args=[self.order.id]))
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(res.data["detail"], "Access denied. You can only access your own orders.")

    def test_missing_order(self):
        res = self.client.get(reverse("order-detail", args=[99999]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)


class OrderStatsAndProductsTests(OrderAPITestCase):
    """Tests for GET /api/orders/stats/ and GET /api/orders/products/list/"""

    def test_stats_for_caller_only(self):
        create_order(quantity=1)
        create_order(quantity=2)
        create_order(quantity=1, status=Order.Status.CANCELLED)
        create_order(user_sub=STRANGER, quantity=5)
        self.auth(OWNER)

        res = self.client.get(reverse("order-stats"))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["total_orders"], 3)
        self.assertEqual(res.data["upcoming_orders"], 2)
        breakdown = {row["status"]: row for row in res.data["status_breakdown"]}
        self.assertEqual(set(breakdown), {"pending", "cancelled"})
        self.assertEqual(breakdown["pending"]["count"], 2)
        self.assertEqual(Decimal(breakdown["pending"]["total_value"]), Decimal("2399.97"))

    def test_stats_empty(self):
        self.auth(OWNER)
        res = self.client.get(reverse("order-stats"))
        self.assertEqual(res.data, {"total_orders": 0, "upcoming_orders": 0, "status_breakdown": []})

    def test_product_price_list(self):
        self.auth(OWNER)
        res = self.client.get(reverse("order-products"))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(len(res.data["products"]), 16)
        self.assertEqual(res.data["products"][0], {"name": "Laptop - Dell XPS 13", "price": "1299.99"})

    def test_product_price_list_requires_token(self):
        res = self.client.get(reverse("order-products"))
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
