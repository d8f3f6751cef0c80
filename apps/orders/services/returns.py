"""Product return requests and refunds."""

import logging
from datetime import timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from apps.catalog.services import release_stock
from apps.messaging.models import MessageType
from apps.messaging.services import notify_user
from ..models import (
    Order,
    OrderStatus,
    ItemType,
    ItemCondition,
    Payment,
    PaymentRecordStatus,
    PaymentStatus,
    ReturnRequest,
    ReturnItem,
    ReturnStatus,
)
from .exceptions import (
    OrderNotFoundError,
    ReturnNotFoundError,
    ReturnNotAllowedError,
    InvalidReturnStateError,
)
from .history import record_history
from .numbering import generate_return_number

logger = logging.getLogger(__name__)

NON_RETURNABLE_STATUSES = (OrderStatus.QUOTE, OrderStatus.CANCELLED, OrderStatus.REFUNDED)


def _returned_quantity(order_item) -> int:
    return ReturnItem.objects.filter(order_item=order_item).exclude(
        return_request__status=ReturnStatus.REJECTED
    ).aggregate(total=Sum('quantity'))['total'] or 0


@transaction.atomic
def request_return(
    *,
    order_id: UUID,
    user,
    reason: str,
    items: List[Dict[str, Any]],
    description: str = '',
) -> ReturnRequest:
    """
    Open a return request on an order.

    Only the order's owner may ask, within RETURN_WINDOW_DAYS of the
    order. For each line the returned quantity, counting earlier
    non-rejected returns, cannot exceed the ordered quantity.

    Args:
        items: List of ``{"order_item_id", "quantity", "condition", "reason"}``

    Raises:
        OrderNotFoundError: Unknown order or not owned by ``user``
        ReturnNotAllowedError: Window passed, order not returnable, bad items
    """
    try:
        order = Order.objects.select_for_update().get(id=order_id, user=user)
    except Order.DoesNotExist:
        raise OrderNotFoundError("Order not found")

    if not reason:
        raise ReturnNotAllowedError("A reason is required")
    if not items:
        raise ReturnNotAllowedError("Select at least one item to return")
    if order.status in NON_RETURNABLE_STATUSES:
        raise ReturnNotAllowedError(f"A {order.status} order cannot be returned")
    if timezone.now() - order.created_at > timedelta(days=settings.RETURN_WINDOW_DAYS):
        raise ReturnNotAllowedError(
            f"Returns are accepted within {settings.RETURN_WINDOW_DAYS} days of the order"
        )

    order_items = {str(item.id): item for item in order.items.all()}
    lines = []
    requested_amount = Decimal('0')
    pending = {}
    for entry in items:
        order_item = order_items.get(str(entry.get('order_item_id')))
        if order_item is None:
            raise ReturnNotAllowedError(f"Item {entry.get('order_item_id')} is not part of this order")
        quantity = int(entry.get('quantity') or 0)
        if quantity < 1:
            raise ReturnNotAllowedError("Return quantity must be at least 1")
        already = pending.get(order_item.id, 0)
        if _returned_quantity(order_item) + already + quantity > order_item.quantity:
            raise ReturnNotAllowedError(f"Return quantity too high for {order_item.name}")
        pending[order_item.id] = already + quantity

        refund_amount = order_item.unit_price * quantity
        requested_amount += refund_amount
        lines.append(ReturnItem(
            order_item=order_item,
            quantity=quantity,
            condition=entry.get('condition') or ItemCondition.UNKNOWN,
            reason=entry.get('reason') or reason,
            refund_amount=refund_amount,
        ))

    return_request = ReturnRequest.objects.create(
        return_number=generate_return_number(),
        order=order,
        user=user,
        reason=reason,
        description=description,
        requested_amount=requested_amount,
    )
    for line in lines:
        line.return_request = return_request
    ReturnItem.objects.bulk_create(lines)

    record_history(order, action='return_requested', description=return_request.return_number, user=user)
    logger.info("Return %s requested on %s", return_request.return_number, order.order_number)
    return return_request


def _get_locked(return_id: UUID) -> ReturnRequest:
    try:
        return ReturnRequest.objects.select_for_update().select_related('order', 'user').get(id=return_id)
    except ReturnRequest.DoesNotExist:
        raise ReturnNotFoundError(f"Return {return_id} not found")


@transaction.atomic
def approve_return(
    *,
    return_id: UUID,
    user=None,
    approved_amount: Optional[Decimal] = None,
    admin_notes: str = '',
) -> ReturnRequest:
    """
    Approve a requested return; the approved amount defaults to the
    requested amount and cannot exceed it. Stock of returned products in
    resellable condition is restored.
    """
    return_request = _get_locked(return_id)
    if return_request.status != ReturnStatus.REQUESTED:
        raise InvalidReturnStateError(f"Return is already {return_request.status}")

    amount = return_request.requested_amount if approved_amount is None else Decimal(str(approved_amount))
    if amount < 0 or amount > return_request.requested_amount:
        raise InvalidReturnStateError("Approved amount must be between 0 and the requested amount")

    for line in return_request.items.select_related('order_item'):
        order_item = line.order_item
        if (
            order_item.item_type == ItemType.PRODUCT
            and order_item.product_id
            and line.condition != ItemCondition.DAMAGED
        ):
            release_stock(
                product_id=order_item.product_id,
                quantity=line.quantity,
                reference=return_request.return_number,
                user=user,
            )

    return_request.status = ReturnStatus.APPROVED
    return_request.approved_amount = amount
    return_request.admin_notes = admin_notes or return_request.admin_notes
    return_request.processed_by = user
    return_request.processed_at = timezone.now()
    return_request.save()

    notify_user(
        user=return_request.user,
        subject=f"Retour {return_request.return_number}",
        content="Votre demande de retour a été acceptée.",
        type=MessageType.ORDER,
        order=return_request.order,
    )
    return return_request


@transaction.atomic
def reject_return(*, return_id: UUID, user=None, admin_notes: str = '') -> ReturnRequest:
    return_request = _get_locked(return_id)
    if return_request.status != ReturnStatus.REQUESTED:
        raise InvalidReturnStateError(f"Return is already {return_request.status}")

    return_request.status = ReturnStatus.REJECTED
    return_request.admin_notes = admin_notes or return_request.admin_notes
    return_request.processed_by = user
    return_request.processed_at = timezone.now()
    return_request.save()

    notify_user(
        user=return_request.user,
        subject=f"Retour {return_request.return_number}",
        content=f"Votre demande de retour a été refusée. {admin_notes}".strip(),
        type=MessageType.ORDER,
        order=return_request.order,
    )
    return return_request


@transaction.atomic
def refund_return(
    *,
    return_id: UUID,
    method: str,
    user=None,
    amount: Optional[Decimal] = None,
    reference: str = '',
) -> ReturnRequest:
    """
    Refund an approved return and record the outgoing payment.

    When refunds cover everything paid, the order's payment status
    becomes REFUNDED.
    """
    return_request = _get_locked(return_id)
    if return_request.status != ReturnStatus.APPROVED:
        raise InvalidReturnStateError("Only approved returns can be refunded")

    amount = return_request.approved_amount if amount is None else Decimal(str(amount))
    if amount <= 0 or amount > return_request.approved_amount:
        raise InvalidReturnStateError("Refund must be positive and not exceed the approved amount")

    order = Order.objects.select_for_update().get(id=return_request.order_id)
    Payment.objects.create(
        order=order,
        amount=amount,
        currency=order.currency,
        base_amount=amount,
        method=method,
        reference=reference or return_request.return_number,
        status=PaymentRecordStatus.REFUNDED,
        processed_by=user,
    )

    return_request.status = ReturnStatus.REFUNDED
    return_request.refunded_amount = amount
    return_request.processed_by = user
    return_request.processed_at = timezone.now()
    return_request.save()

    refunded = order.payments.filter(status=PaymentRecordStatus.REFUNDED).aggregate(
        total=Sum('base_amount')
    )['total'] or Decimal('0')
    if refunded >= order.amount_paid > 0:
        order.payment_status = PaymentStatus.REFUNDED
        order.save(update_fields=['payment_status', 'updated_at'])

    record_history(order, action='return_refunded', description=f"{return_request.return_number}: {amount}", user=user)
    logger.info("Refunded %s on return %s", amount, return_request.return_number)
    return return_request
