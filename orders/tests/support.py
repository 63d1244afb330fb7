from datetime import date
from unittest import mock

from common.tests.support import SecuredAPITestCase
from orders.models import Order

# A Wednesday; the Sunday after it is SUNDAY.
TODAY = date(2026, 10, 14)
TOMORROW = date(2026, 10, 15)
NEXT_WEEK = date(2026, 10, 21)
SUNDAY = date(2026, 10, 18)
YESTERDAY = date(2026, 10, 13)

OWNER = "auth0|owner-1"
STRANGER = "auth0|stranger-1"


def freeze_today(testcase, today=TODAY):
    patcher = mock.patch("orders.validators.current_date", return_value=today)
    patcher.start()
    testcase.addCleanup(patcher.stop)


def create_order(user_sub=OWNER, product_name="Smartphone - iPhone 15", quantity=2, status=None, **fields):
    """Create a valid pending order, then force ``status`` directly in the table."""
    values = {
        "delivery_date": TOMORROW,
        "delivery_time": "10:00 AM",
        "delivery_location": "Colombo",
    }
    values.update(fields)
    order = Order.objects.create(
        user_sub=user_sub, product_name=product_name, quantity=quantity, **values
    )
    if status is not None:
        Order.objects.filter(pk=order.pk).update(status=status)
        order = Order.objects.get(pk=order.pk)
    return order


class OrderAPITestCase(SecuredAPITestCase):
    def setUp(self):
        super().setUp()
        freeze_today(self)
