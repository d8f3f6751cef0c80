"""
Checkout: turning a basket of items into an order.

Prices always come from the catalog; client-sent prices are ignored.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.db import transaction

from apps.accounts.models import AddressType
from apps.accounts.services import find_or_create_customer, create_address
from apps.catalog.services import reserve_stock, InsufficientStockError
from apps.messaging.models import MessageType
from apps.messaging.services import notify_user
from apps.streaming.services import create_subscription
from ..models import (
    Cart,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    Payment,
    PaymentRecordStatus,
    ItemType,
    INSTANT_PAYMENT_METHODS,
)
from .exceptions import InvalidOrderError, ItemUnavailableError
from .history import record_history
from .numbering import generate_order_number, QUOTE_PREFIX, ORDER_PREFIX
from .pricing import resolve_item

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = ('street', 'city', 'zip_code', 'country')


def _same_address(first: Dict[str, Any], second: Dict[str, Any]) -> bool:
    return all((first.get(f) or '') == (second.get(f) or '') for f in ADDRESS_FIELDS)


def _create_address(user, data: Dict[str, Any], type: str):
    if not (data.get('street') and data.get('city')):
        raise InvalidOrderError("Address needs a street and a city")
    return create_address(user=user, type=type, **{f: data[f] for f in ADDRESS_FIELDS if data.get(f)})


def _resolve_customer(user, customer: Optional[Dict[str, Any]]):
    if user is not None and user.is_authenticated:
        return user
    if not customer or not (customer.get('email') or customer.get('phone')):
        raise InvalidOrderError("Email or phone is required to place an order")
    return find_or_create_customer(
        email=customer.get('email'),
        phone=customer.get('phone'),
        first_name=customer.get('first_name', ''),
        last_name=customer.get('last_name', ''),
        newsletter=customer.get('newsletter', False),
        create_account=customer.get('create_account', False),
        password=customer.get('password'),
    )


@transaction.atomic
def place_order(
    *,
    items: List[Dict[str, Any]],
    payment_method: str,
    user=None,
    customer: Optional[Dict[str, Any]] = None,
    billing: Optional[Dict[str, Any]] = None,
    shipping: Optional[Dict[str, Any]] = None,
    notes: str = '',
) -> Order:
    """
    Create an order in one transaction.

    Instant payment methods (mobile money, card) produce a PAID order
    numbered ``CMD-...`` with a completed payment. Other methods produce a
    quote numbered ``DEV-...`` awaiting payment.

    Args:
        items: List of ``{"item_type", "item_id", "quantity"}``
        payment_method: One of PaymentMethod
        user: Signed-in user, or None for guest checkout
        customer: Guest identity (email/phone, names, create_account, password)
        billing: Billing address fields
        shipping: Shipping address fields; reuses billing when identical or absent

    Raises:
        InvalidOrderError: No items, bad quantity or no customer identity
        ItemUnavailableError: An item is not for sale or out of stock
        CustomerNotFoundError: Unknown guest without account creation
    """
    if not items:
        raise InvalidOrderError("An order needs at least one item")

    priced_lines = []
    for line in items:
        quantity = line.get('quantity')
        quantity = 1 if quantity is None else int(quantity)
        if quantity < 1:
            raise InvalidOrderError("Quantity must be at least 1")
        priced_lines.append((resolve_item(line['item_type'], line['item_id'], quantity), quantity))

    buyer = _resolve_customer(user, customer)

    billing_address = shipping_address = None
    if billing:
        billing_address = _create_address(buyer, billing, AddressType.BILLING)
        shipping_address = billing_address
    if shipping and not (billing and _same_address(billing, shipping)):
        shipping_address = _create_address(buyer, shipping, AddressType.SHIPPING)

    paid = payment_method in INSTANT_PAYMENT_METHODS
    total = sum((priced.unit_price * qty for priced, qty in priced_lines), Decimal('0'))
    order = Order.objects.create(
        order_number=generate_order_number(ORDER_PREFIX if paid else QUOTE_PREFIX),
        user=buyer,
        status=OrderStatus.PAID if paid else OrderStatus.QUOTE,
        payment_status=PaymentStatus.PAID if paid else PaymentStatus.UNPAID,
        payment_method=payment_method,
        currency=settings.BASE_CURRENCY,
        total=total,
        billing_address=billing_address,
        shipping_address=shipping_address,
        notes=notes,
    )

    for priced, quantity in priced_lines:
        order_item = OrderItem.objects.create(
            order=order,
            item_type=priced.item_type,
            name=priced.name,
            quantity=quantity,
            unit_price=priced.unit_price,
            total_price=priced.unit_price * quantity,
            **priced.as_fields(),
        )
        if priced.item_type == ItemType.PRODUCT:
            try:
                reserve_stock(
                    product_id=priced.target.id,
                    quantity=quantity,
                    reference=order.order_number,
                    user=buyer,
                )
            except InsufficientStockError as e:
                raise ItemUnavailableError(str(e))
        elif priced.item_type == ItemType.OFFER:
            for _ in range(quantity):
                create_subscription(user=buyer, offer=priced.target, order=order, activate=paid)
            order_item.metadata = {'duration': priced.target.duration, 'duration_unit': priced.target.duration_unit}
            order_item.save(update_fields=['metadata'])

    if paid and total > 0:
        Payment.objects.create(
            order=order,
            amount=total,
            currency=order.currency,
            base_amount=total,
            method=payment_method,
            status=PaymentRecordStatus.COMPLETED,
        )

    record_history(order, action='created', description=f"Order placed ({payment_method})", user=buyer)
    notify_user(
        user=buyer,
        subject=f"Commande {order.order_number}",
        content=(
            f"Votre commande {order.order_number} a été payée."
            if paid else
            f"Votre devis {order.order_number} a été enregistré."
        ),
        type=MessageType.ORDER,
        order=order,
    )
    logger.info("Placed order %s (%s, total %s)", order.order_number, order.status, order.total)
    return order


@transaction.atomic
def checkout_cart(*, cart: Cart, payment_method: str, **kwargs: Any) -> Order:
    """Place an order from a cart's lines and empty the cart."""
    lines = [
        {
            'item_type': item.item_type,
            'item_id': item.product_id or item.service_id or item.offer_id,
            'quantity': item.quantity,
        }
        for item in cart.items.all()
    ]
    if not lines:
        raise InvalidOrderError("Cart is empty")

    order = place_order(items=lines, payment_method=payment_method, **kwargs)
    cart.items.all().delete()
    return order
