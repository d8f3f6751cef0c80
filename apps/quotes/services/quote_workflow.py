"""
Quote negotiation between a client and the back office.

PENDING ──accept──► ACCEPTED ──convert──► CONVERTED
   │  ▲                ▲
   │  └─propose─┐      │
counter         │   accept_counter
   ▼            │      │
NEGOTIATING ────┴──────┘

Either side may reject while the quote is open; the client can then
propose a new price, which reopens it.
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.catalog.models import Product, Service
from apps.currency.services import format_amount
from apps.messaging.models import MessageType
from apps.messaging.services import notify_user
from ..models import Quote, QuoteMessage, QuoteStatus
from .exceptions import (
    QuoteNotFoundError,
    QuoteTargetNotFoundError,
    DuplicateQuoteError,
    InvalidQuoteStateError,
    InvalidQuotePriceError,
)

logger = logging.getLogger(__name__)

OPEN_STATUSES = (QuoteStatus.PENDING, QuoteStatus.NEGOTIATING)


def get_quote(quote_id: UUID, *, user=None, lock: bool = False) -> Quote:
    """
    Fetch a quote; with ``user``, only the owner or back office may see it.

    Raises:
        QuoteNotFoundError: Unknown quote or not visible to ``user``
    """
    queryset = Quote.objects.select_related('user', 'service', 'product')
    if lock:
        queryset = queryset.select_for_update()
    try:
        quote = queryset.get(id=quote_id)
    except Quote.DoesNotExist:
        raise QuoteNotFoundError(f"Quote {quote_id} not found")

    if user is not None and quote.user_id != user.id and not user.is_back_office:
        raise QuoteNotFoundError(f"Quote {quote_id} not found")
    return quote


def _owned_quote(quote_id: UUID, user) -> Quote:
    quote = get_quote(quote_id, lock=True)
    if quote.user_id != user.id:
        raise QuoteNotFoundError(f"Quote {quote_id} not found")
    return quote


def _system_message(quote: Quote, sender, text: str, **metadata) -> QuoteMessage:
    return QuoteMessage.objects.create(
        quote=quote,
        sender=sender,
        message=text,
        is_system_message=True,
        metadata=metadata,
    )


def _positive(price, label: str = 'Price') -> Decimal:
    price = Decimal(str(price))
    if price <= 0:
        raise InvalidQuotePriceError(f"{label} must be greater than 0")
    return price


def notify_quote_client(quote: Quote, content: str) -> None:
    notify_user(
        user=quote.user,
        subject=f"Devis {quote.item_name}",
        content=content,
        type=MessageType.QUOTE,
    )


@transaction.atomic
def request_quote(
    *,
    user,
    service_id: Optional[UUID] = None,
    product_id: Optional[UUID] = None,
    quantity: int = 1,
    description: str = '',
    budget: Optional[Decimal] = None,
) -> Quote:
    """
    Ask for a price on a service or a product.

    The client's budget, when given, becomes the first proposed price.

    Raises:
        QuoteTargetNotFoundError: Item missing, or neither/both given
        DuplicateQuoteError: A PENDING quote already exists for this item
        InvalidQuotePriceError: Non-positive budget or quantity
    """
    if bool(service_id) == bool(product_id):
        raise QuoteTargetNotFoundError("Ask for a quote on either a service or a product")
    if quantity < 1:
        raise InvalidQuotePriceError("Quantity must be at least 1")
    if budget is not None:
        budget = _positive(budget, 'Budget')

    if service_id:
        target = Service.objects.filter(id=service_id, is_active=True).first()
        lookup = {'service': target}
    else:
        target = Product.objects.filter(id=product_id).first()
        lookup = {'product': target}
    if target is None:
        raise QuoteTargetNotFoundError("Service or product not found")

    if Quote.objects.filter(user=user, status=QuoteStatus.PENDING, **lookup).exists():
        raise DuplicateQuoteError(f"A quote request for {target.name} is already pending")

    quote = Quote.objects.create(
        user=user,
        quantity=quantity,
        description=description,
        budget=budget,
        proposed_price=budget,
        **lookup,
    )
    logger.info("Quote %s requested by %s for %s", quote.id, user.id, target.name)
    return quote


@transaction.atomic
def accept_quote(*, quote_id: UUID, user, final_price: Optional[Decimal] = None) -> Quote:
    """
    Back office accepts; the final price defaults to the proposed price,
    then to the client's budget.

    Raises:
        InvalidQuoteStateError: Quote is not open
        InvalidQuotePriceError: No price to settle on
    """
    quote = get_quote(quote_id, lock=True)
    if quote.status not in OPEN_STATUSES:
        raise InvalidQuoteStateError(f"Cannot accept a {quote.status} quote")

    price = final_price if final_price is not None else (quote.proposed_price or quote.budget)
    if price is None:
        raise InvalidQuotePriceError("A final price is required")
    price = _positive(price, 'Final price')

    quote.status = QuoteStatus.ACCEPTED
    quote.final_price = price
    quote.save(update_fields=['status', 'final_price', 'updated_at'])

    _system_message(quote, user, f"Proposition acceptée ! Prix final : {format_amount(price)}", type='accepted')
    notify_quote_client(quote, f"Votre devis pour {quote.item_name} a été accepté à {format_amount(price)}.")
    logger.info("Quote %s accepted at %s", quote.id, price)
    return quote


@transaction.atomic
def reject_quote(*, quote_id: UUID, user, reason: str = '') -> Quote:
    quote = get_quote(quote_id, lock=True)
    if quote.status not in OPEN_STATUSES:
        raise InvalidQuoteStateError(f"Cannot reject a {quote.status} quote")

    quote.status = QuoteStatus.REJECTED
    quote.save(update_fields=['status', 'updated_at'])

    text = "Proposition refusée. Vous pouvez faire une nouvelle proposition."
    if reason:
        text = f"{text} {reason}"
    _system_message(quote, user, text, type='rejected')
    notify_quote_client(quote, text)
    logger.info("Quote %s rejected", quote.id)
    return quote


@transaction.atomic
def counter_quote(*, quote_id: UUID, user, counter_price: Decimal, message: str = '') -> Quote:
    """
    Back office answers with its own price; the quote moves to NEGOTIATING.

    A personal message, when given, is posted after the system message.
    """
    quote = get_quote(quote_id, lock=True)
    if quote.status not in OPEN_STATUSES:
        raise InvalidQuoteStateError(f"Cannot counter a {quote.status} quote")
    counter_price = _positive(counter_price, 'Counter price')

    previous_price = quote.proposed_price
    quote.status = QuoteStatus.NEGOTIATING
    quote.proposed_price = counter_price
    quote.save(update_fields=['status', 'proposed_price', 'updated_at'])

    _system_message(
        quote,
        user,
        f"Nouvelle proposition de prix : {format_amount(counter_price)} pour {quote.item_name}",
        type='counter_proposal',
        counter_price=str(counter_price),
        original_price=str(previous_price) if previous_price is not None else None,
        item_name=quote.item_name,
    )
    if message.strip():
        QuoteMessage.objects.create(quote=quote, sender=user, message=message.strip())

    notify_quote_client(quote, f"Nouvelle proposition pour {quote.item_name} : {format_amount(counter_price)}.")
    logger.info("Quote %s countered at %s", quote.id, counter_price)
    return quote


def mark_messages_read(*, quote_id: UUID, user) -> int:
    """Mark the other party's messages as read; returns how many changed."""
    quote = get_quote(quote_id, user=user)
    return quote.messages.filter(read_at__isnull=True).exclude(sender=user).update(read_at=timezone.now())


@transaction.atomic
def post_quote_message(*, quote_id: UUID, user, message: str) -> QuoteMessage:
    """
    Add a free-text message to the discussion (owner or back office).

    Raises:
        InvalidQuoteStateError: Quote already converted into an order
    """
    quote = get_quote(quote_id, user=user)
    if not message or not message.strip():
        raise InvalidQuoteStateError("Message cannot be empty")
    if quote.status == QuoteStatus.CONVERTED:
        raise InvalidQuoteStateError("This quote is closed")

    quote.save(update_fields=['updated_at'])
    return QuoteMessage.objects.create(quote=quote, sender=user, message=message.strip())


@transaction.atomic
def client_propose_price(*, quote_id: UUID, user, price: Decimal, message: str = '') -> Quote:
    """Client puts a new price forward; the quote goes back to PENDING."""
    quote = _owned_quote(quote_id, user)
    if quote.status not in (*OPEN_STATUSES, QuoteStatus.REJECTED):
        raise InvalidQuoteStateError(f"Cannot propose a price on a {quote.status} quote")
    price = _positive(price)

    quote.status = QuoteStatus.PENDING
    quote.proposed_price = price
    quote.save(update_fields=['status', 'proposed_price', 'updated_at'])

    QuoteMessage.objects.create(
        quote=quote,
        sender=user,
        message=message.strip() or f"Je propose {format_amount(price)}",
        proposed_price=price,
    )
    logger.info("Client proposed %s on quote %s", price, quote.id)
    return quote


@transaction.atomic
def client_accept_counter(*, quote_id: UUID, user) -> Quote:
    """Client accepts the back office's counter-offer."""
    quote = _owned_quote(quote_id, user)
    if quote.status != QuoteStatus.NEGOTIATING:
        raise InvalidQuoteStateError("There is no counter-offer to accept")

    quote.status = QuoteStatus.ACCEPTED
    quote.final_price = quote.proposed_price
    quote.save(update_fields=['status', 'final_price', 'updated_at'])

    _system_message(
        quote,
        user,
        f"Contre-proposition acceptée par le client : {format_amount(quote.final_price)}",
        type='counter_accepted',
    )
    logger.info("Client accepted counter-offer on quote %s", quote.id)
    return quote
