import pytest
from datetime import datetime
from decimal import Decimal
from django.utils import timezone
from apps.orders.models import Order, OrderStatus


@pytest.fixture
def now():
    return timezone.make_aware(datetime(2026, 3, 15, 12, 0))


@pytest.fixture
def make_order(user):
    """Create an order and backdate it."""
    counter = iter(range(1, 1000))

    def _make(*, total, status=OrderStatus.PAID, created_at=None, owner=None):
        order = Order.objects.create(
            order_number=f'CMD-TEST-{next(counter):04d}',
            user=owner or user,
            status=status,
            total=Decimal(total),
        )
        if created_at is not None:
            Order.objects.filter(pk=order.pk).update(created_at=created_at)
            order.refresh_from_db()
        return order

    return _make
