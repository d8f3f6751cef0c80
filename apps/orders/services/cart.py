"""
Shopping cart operations.

Signed-in users own one cart; guests get a cart keyed by session that
expires after ``GUEST_CART_EXPIRY_DAYS``.
"""

import logging
from datetime import timedelta
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from ..models import Cart, CartItem, ItemType
from .exceptions import CartError, CartItemNotFoundError
from .pricing import resolve_item

logger = logging.getLogger(__name__)


def _guest_expiry():
    return timezone.now() + timedelta(days=settings.GUEST_CART_EXPIRY_DAYS)


@transaction.atomic
def get_or_create_cart(*, user=None, session_key: Optional[str] = None) -> Cart:
    """
    Return the cart of a user, or of a guest session.

    Raises:
        CartError: Neither user nor session key given
    """
    if user is not None and user.is_authenticated:
        cart, _ = Cart.objects.get_or_create(user=user)
        return cart

    if not session_key:
        raise CartError("A session key is required for guest carts")

    cart, created = Cart.objects.get_or_create(
        session_key=session_key,
        defaults={'expires_at': _guest_expiry()},
    )
    if not created:
        cart.expires_at = _guest_expiry()
        cart.save(update_fields=['expires_at', 'updated_at'])
    return cart


@transaction.atomic
def add_to_cart(*, cart: Cart, item_type: str, item_id: UUID, quantity: int = 1) -> CartItem:
    """
    Add an item; adding the same item again increases its quantity.

    The unit price is refreshed from the catalog on every add.
    """
    if quantity < 1:
        raise CartError("Quantity must be at least 1")

    existing = cart.items.filter(item_type=item_type, **_item_filter_ids(item_type, item_id)).first()
    new_quantity = quantity + (existing.quantity if existing else 0)
    priced = resolve_item(item_type, item_id, new_quantity)

    if existing:
        existing.quantity = new_quantity
        existing.unit_price = priced.unit_price
        existing.save(update_fields=['quantity', 'unit_price'])
        item = existing
    else:
        item = CartItem.objects.create(
            cart=cart,
            item_type=item_type,
            quantity=quantity,
            unit_price=priced.unit_price,
            **priced.as_fields(),
        )
    cart.save(update_fields=['updated_at'])
    return item


def _item_filter_ids(item_type: str, item_id) -> dict:
    return {
        ItemType.PRODUCT: {'product_id': item_id},
        ItemType.SERVICE: {'service_id': item_id},
        ItemType.OFFER: {'offer_id': item_id},
    }.get(item_type, {'id': None})


@transaction.atomic
def set_cart_item_quantity(*, cart: Cart, item_id: UUID, quantity: int) -> Optional[CartItem]:
    """Set the quantity of a cart line; 0 removes it and returns None."""
    try:
        item = cart.items.select_for_update().get(id=item_id)
    except CartItem.DoesNotExist:
        raise CartItemNotFoundError("Item not in cart")

    if quantity <= 0:
        item.delete()
        return None

    target_id = item.product_id or item.service_id or item.offer_id
    resolve_item(item.item_type, target_id, quantity)
    item.quantity = quantity
    item.save(update_fields=['quantity'])
    return item


def clear_cart(*, cart: Cart) -> None:
    cart.items.all().delete()


def cart_totals(cart: Cart) -> dict:
    items = list(cart.items.all())
    return {
        'item_count': sum(item.quantity for item in items),
        'subtotal': sum((item.total_price for item in items), Decimal('0')),
        'currency': settings.BASE_CURRENCY,
    }


@transaction.atomic
def merge_guest_cart(*, user, session_key: str) -> Cart:
    """Move a guest cart's items into the user's cart after sign-in."""
    cart = get_or_create_cart(user=user)
    guest = Cart.objects.filter(session_key=session_key, user__isnull=True).first()
    if guest is None:
        return cart

    for item in guest.items.all():
        target_id = item.product_id or item.service_id or item.offer_id
        existing = cart.items.filter(item_type=item.item_type, **_item_filter_ids(item.item_type, target_id)).first()
        if existing:
            existing.quantity += item.quantity
            existing.save(update_fields=['quantity'])
        else:
            item.cart = cart
            item.save(update_fields=['cart'])
    guest.delete()
    return cart


def cleanup_expired_carts(*, now=None) -> int:
    """Delete guest carts past their expiry; returns how many were removed."""
    now = now or timezone.now()
    expired = Cart.objects.filter(user__isnull=True, expires_at__lt=now)
    count = expired.count()
    if count:
        expired.delete()
        logger.info("Removed %d expired guest cart(s)", count)
    return count
