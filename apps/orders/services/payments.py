"""Payment recording against orders."""

import logging
from decimal import Decimal
from uuid import UUID

from django.db import transaction

from apps.currency.services import convert, quantize, get_rates, ExchangeRateMissingError
from apps.messaging.models import MessageType
from apps.messaging.services import notify_user
from apps.streaming.models import SubscriptionStatus
from apps.streaming.services import activate_subscription
from ..models import Order, OrderStatus, PaymentStatus, Payment, PaymentRecordStatus
from .exceptions import OrderNotFoundError, InvalidPaymentAmountError, PaymentExceedsBalanceError
from .history import record_history
from .numbering import generate_order_number, ORDER_PREFIX

logger = logging.getLogger(__name__)


@transaction.atomic
def record_payment(
    *,
    order_id: UUID,
    amount,
    method: str,
    currency: str = 'MGA',
    provider: str = '',
    transaction_id: str = '',
    reference: str = '',
    user=None,
    notes: str = '',
) -> Payment:
    """
    Record a completed payment.

    The first payment on a quote (``DEV-...``) gives the order a new
    ``CMD-...`` number. A full payment marks the order PAID and activates
    its pending subscriptions.

    Raises:
        OrderNotFoundError: Unknown order
        InvalidPaymentAmountError: Amount not positive, unknown currency, or order closed
        PaymentExceedsBalanceError: Paid sum would exceed the order total
    """
    try:
        order = Order.objects.select_for_update().get(id=order_id)
    except Order.DoesNotExist:
        raise OrderNotFoundError(f"Order {order_id} not found")

    amount = Decimal(str(amount))
    if amount <= 0:
        raise InvalidPaymentAmountError("Payment amount must be greater than 0")
    if order.status in (OrderStatus.CANCELLED, OrderStatus.REFUNDED):
        raise InvalidPaymentAmountError(f"Cannot record a payment on a {order.status} order")

    currency = currency.upper()
    try:
        rates = get_rates()
        base_amount = quantize(convert(amount, currency, order.currency, rates), order.currency)
        exchange_rate = convert(1, currency, order.currency, rates)
    except ExchangeRateMissingError as e:
        raise InvalidPaymentAmountError(str(e))

    already_paid = order.amount_paid
    if already_paid + base_amount > order.total:
        logger.warning("Refused overpayment on %s", order.order_number)
        raise PaymentExceedsBalanceError(
            f"Payment exceeds balance due ({order.total - already_paid} {order.currency})"
        )

    renumbered_from = ''
    if order.is_quote_number and already_paid == 0:
        old_number = renumbered_from = order.order_number
        order.order_number = generate_order_number(ORDER_PREFIX)
        logger.info("Order %s renumbered %s", old_number, order.order_number)

    payment = Payment.objects.create(
        order=order,
        amount=amount,
        currency=currency,
        base_amount=base_amount,
        exchange_rate=exchange_rate,
        method=method,
        provider=provider,
        transaction_id=transaction_id,
        reference=reference,
        status=PaymentRecordStatus.COMPLETED,
        processed_by=user,
        notes=notes,
    )

    fully_paid = already_paid + base_amount >= order.total
    previous_status = order.status
    order.payment_status = PaymentStatus.PAID if fully_paid else PaymentStatus.PARTIALLY_PAID
    if order.status in (OrderStatus.QUOTE, OrderStatus.PENDING, OrderStatus.PARTIALLY_PAID):
        order.status = OrderStatus.PAID if fully_paid else OrderStatus.PARTIALLY_PAID
    if not order.payment_method:
        order.payment_method = method
    order.save(update_fields=['order_number', 'status', 'payment_status', 'payment_method', 'updated_at'])

    if fully_paid:
        for subscription in order.subscriptions.filter(status=SubscriptionStatus.PENDING):
            activate_subscription(subscription_id=subscription.id)

    record_history(
        order,
        action='payment_recorded',
        description=f"{amount} {currency} via {method}" + (f" (was {renumbered_from})" if renumbered_from else ''),
        user=user,
        previous_status=previous_status if previous_status != order.status else '',
    )
    notify_user(
        user=order.user,
        subject=f"Paiement reçu - {order.order_number}",
        content=f"Nous avons reçu votre paiement de {amount} {currency}.",
        type=MessageType.ORDER,
        order=order,
    )
    return payment
