"""Turning an accepted quote into an order awaiting payment."""

import logging
from uuid import UUID

from django.conf import settings
from django.db import transaction

from apps.catalog.services import reserve_stock, InsufficientStockError
from apps.orders.models import ItemType, Order, OrderItem, OrderStatus, PaymentStatus
from apps.orders.services.history import record_history
from apps.orders.services.numbering import generate_order_number, QUOTE_PREFIX
from ..models import Quote, QuoteStatus
from .exceptions import InvalidQuoteStateError
from .quote_workflow import get_quote, notify_quote_client

logger = logging.getLogger(__name__)


@transaction.atomic
def convert_quote_to_order(*, quote_id: UUID, user=None) -> Quote:
    """
    Create a QUOTE-status order (``DEV-...``) priced at the final price.

    Raises:
        InvalidQuoteStateError: Quote not ACCEPTED, or product out of stock
    """
    quote = get_quote(quote_id, lock=True)
    if quote.status != QuoteStatus.ACCEPTED:
        raise InvalidQuoteStateError("Only accepted quotes can be converted into an order")

    unit_price = quote.final_price
    order = Order.objects.create(
        order_number=generate_order_number(QUOTE_PREFIX),
        user=quote.user,
        status=OrderStatus.QUOTE,
        payment_status=PaymentStatus.UNPAID,
        currency=settings.BASE_CURRENCY,
        total=unit_price * quote.quantity,
        notes=quote.description,
    )
    item_type = ItemType.SERVICE if quote.service_id else ItemType.PRODUCT
    OrderItem.objects.create(
        order=order,
        item_type=item_type,
        service=quote.service,
        product=quote.product,
        name=quote.item_name,
        quantity=quote.quantity,
        unit_price=unit_price,
        total_price=unit_price * quote.quantity,
        metadata={'quote_id': str(quote.id)},
    )
    if quote.product_id:
        try:
            reserve_stock(product_id=quote.product_id, quantity=quote.quantity, reference=order.order_number, user=user)
        except InsufficientStockError as e:
            raise InvalidQuoteStateError(str(e))

    quote.status = QuoteStatus.CONVERTED
    quote.order = order
    quote.save(update_fields=['status', 'order', 'updated_at'])

    record_history(order, action='created', description=f"From quote {quote.id}", user=user)
    notify_quote_client(quote, f"Votre devis a été transformé en commande {order.order_number}.")
    logger.info("Quote %s converted into order %s", quote.id, order.order_number)
    return quote
