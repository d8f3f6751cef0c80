"""Order status transitions."""

import logging
from uuid import UUID

from django.db import transaction

from apps.catalog.services import reserve_stock, release_stock, InsufficientStockError
from apps.messaging.models import MessageType
from apps.messaging.services import notify_user
from apps.streaming.models import SubscriptionStatus
from apps.streaming.services import cancel_subscription
from ..models import Order, OrderStatus, PaymentStatus, ItemType
from .exceptions import OrderNotFoundError, InvalidStatusTransitionError
from .history import record_history

logger = logging.getLogger(__name__)

STATUS_FLOW = [
    OrderStatus.QUOTE,
    OrderStatus.PENDING,
    OrderStatus.PARTIALLY_PAID,
    OrderStatus.PAID,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
]


def can_transition(current: str, new: str) -> bool:
    """
    Whether an order may move from ``current`` to ``new``.

    Orders move one step at a time along STATUS_FLOW. Cancelling is
    possible until delivery, a refund only from PAID, and a cancelled
    order can be reopened as PENDING. REFUNDED is final.
    """
    if current == OrderStatus.REFUNDED:
        return False
    if new == OrderStatus.CANCELLED:
        return current not in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)
    if new == OrderStatus.REFUNDED:
        return current == OrderStatus.PAID
    if current == OrderStatus.CANCELLED:
        return new == OrderStatus.PENDING
    if current not in STATUS_FLOW or new not in STATUS_FLOW:
        return False
    return STATUS_FLOW.index(new) == STATUS_FLOW.index(current) + 1


def _product_lines(order):
    return order.items.filter(item_type=ItemType.PRODUCT, product__isnull=False)


def _cancel_subscriptions(order) -> None:
    for subscription in order.subscriptions.exclude(
        status__in=[SubscriptionStatus.CANCELLED, SubscriptionStatus.EXPIRED]
    ):
        cancel_subscription(subscription_id=subscription.id)


@transaction.atomic
def change_order_status(*, order_id: UUID, new_status: str, user=None, note: str = '') -> Order:
    """
    Move an order to ``new_status`` and record it in the history.

    Cancelling gives product stock back and cancels the order's
    subscriptions; reopening takes the stock again.

    Raises:
        OrderNotFoundError: Unknown order
        InvalidStatusTransitionError: Transition not allowed, or stock gone on reopen
    """
    try:
        order = Order.objects.select_for_update().get(id=order_id)
    except Order.DoesNotExist:
        raise OrderNotFoundError(f"Order {order_id} not found")

    if new_status not in OrderStatus.values:
        raise InvalidStatusTransitionError(f"Unknown status {new_status}")

    current = order.status
    if current == new_status:
        return order
    if not can_transition(current, new_status):
        raise InvalidStatusTransitionError(f"Cannot change status from {current} to {new_status}")

    if new_status == OrderStatus.CANCELLED:
        for line in _product_lines(order):
            release_stock(product_id=line.product_id, quantity=line.quantity, reference=order.order_number, user=user)
        _cancel_subscriptions(order)
    elif current == OrderStatus.CANCELLED:
        for line in _product_lines(order):
            try:
                reserve_stock(product_id=line.product_id, quantity=line.quantity, reference=order.order_number, user=user)
            except InsufficientStockError as e:
                raise InvalidStatusTransitionError(f"Cannot reopen order: {e}")
    elif new_status == OrderStatus.REFUNDED:
        order.payment_status = PaymentStatus.REFUNDED
        _cancel_subscriptions(order)

    order.status = new_status
    order.save(update_fields=['status', 'payment_status', 'updated_at'])
    record_history(
        order,
        action='status_changed',
        description=note or f"{current} → {new_status}",
        user=user,
        previous_status=current,
    )
    notify_user(
        user=order.user,
        subject=f"Commande {order.order_number}",
        content=f"Le statut de votre commande est maintenant : {order.get_status_display()}.",
        type=MessageType.ORDER,
        order=order,
    )
    logger.info("Order %s: %s -> %s", order.order_number, current, new_status)
    return order
