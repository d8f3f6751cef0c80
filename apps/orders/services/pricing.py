"""Resolving cart/order lines to catalog items and their current prices."""

from decimal import Decimal
from typing import NamedTuple, Optional

from apps.catalog.models import Product, ProductStatus, Service
from apps.streaming.models import Offer
from ..models import ItemType
from .exceptions import ItemUnavailableError


class PricedItem(NamedTuple):
    item_type: str
    target: object
    name: str
    unit_price: Decimal

    def as_fields(self) -> dict:
        return {
            'product': self.target if self.item_type == ItemType.PRODUCT else None,
            'service': self.target if self.item_type == ItemType.SERVICE else None,
            'offer': self.target if self.item_type == ItemType.OFFER else None,
        }


def resolve_item(item_type: str, item_id, quantity: int = 1, *, check_stock: bool = True) -> PricedItem:
    """
    Look up a sellable item and its server-side price.

    Raises:
        ItemUnavailableError: Unknown type, missing, inactive or out of stock
    """
    if item_type == ItemType.PRODUCT:
        product: Optional[Product] = Product.objects.filter(id=item_id, status=ProductStatus.ACTIVE).first()
        if product is None:
            raise ItemUnavailableError("Product not available")
        if check_stock and product.track_inventory and product.stock < quantity:
            raise ItemUnavailableError(f"Only {product.stock} {product.name} in stock")
        return PricedItem(item_type, product, product.name, product.price)

    if item_type == ItemType.SERVICE:
        service = Service.objects.filter(id=item_id, is_active=True).first()
        if service is None:
            raise ItemUnavailableError("Service not available")
        return PricedItem(item_type, service, service.name, service.price)

    if item_type == ItemType.OFFER:
        offer = Offer.objects.filter(id=item_id, is_active=True).first()
        if offer is None:
            raise ItemUnavailableError("Offer not available")
        return PricedItem(item_type, offer, offer.name, offer.price)

    raise ItemUnavailableError(f"Unknown item type {item_type}")
