"""Stock adjustments with an audit trail."""

import logging
from uuid import UUID

from django.db import transaction

from ..models import Product, StockMovement
from .exceptions import ProductNotFoundError, InsufficientStockError

logger = logging.getLogger(__name__)


@transaction.atomic
def adjust_stock(*, product_id: UUID, delta: int, reason: str, user=None) -> Product:
    """
    Apply ``delta`` to a product's stock and record a StockMovement.

    Raises:
        ProductNotFoundError: Unknown product
        InsufficientStockError: Stock would go below zero
    """
    try:
        product = Product.objects.select_for_update().get(id=product_id)
    except Product.DoesNotExist:
        raise ProductNotFoundError(f"Product {product_id} not found")

    new_stock = product.stock + delta
    if new_stock < 0:
        logger.warning(
            "Refused stock change %+d on %s (stock %d)", delta, product.id, product.stock
        )
        raise InsufficientStockError(
            f"Insufficient stock for {product.name}: {product.stock} available"
        )

    product.stock = new_stock
    product.save(update_fields=['stock', 'updated_at'])
    StockMovement.objects.create(
        product=product,
        delta=delta,
        reason=reason,
        resulting_stock=new_stock,
        created_by=user,
    )
    return product


def reserve_stock(*, product_id: UUID, quantity: int, reference: str, user=None) -> Product:
    """Take stock for an order line; untracked products are left alone."""
    product = Product.objects.get(id=product_id)
    if not product.track_inventory:
        return product
    return adjust_stock(
        product_id=product_id,
        delta=-quantity,
        reason=f"Order {reference}",
        user=user,
    )


def release_stock(*, product_id: UUID, quantity: int, reference: str, user=None) -> Product:
    """Give stock back (cancelled order, approved return)."""
    product = Product.objects.get(id=product_id)
    if not product.track_inventory:
        return product
    return adjust_stock(
        product_id=product_id,
        delta=quantity,
        reason=f"Restock {reference}",
        user=user,
    )
