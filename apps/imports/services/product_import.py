"""Turning a simulation into a catalog product."""

import logging
from typing import Optional

from django.db import transaction

from apps.catalog.models import Category, ProductStatus
from apps.catalog.services import create_product
from .calculator import calculate_import_cost

logger = logging.getLogger(__name__)


@transaction.atomic
def create_product_from_simulation(
    *,
    name: str,
    mode: str,
    supplier_price,
    supplier_currency: str,
    weight,
    warehouse: str,
    volume=None,
    supplier_url: str = '',
    description: str = '',
    category: Optional[Category] = None,
    stock: int = 0,
    status: str = ProductStatus.DRAFT,
    images: Optional[list] = None,
):
    """
    Create an imported product priced at the simulated MGA total.

    Returns:
        Tuple of (product, calculation)
    """
    calculation = calculate_import_cost(
        mode=mode,
        supplier_price=supplier_price,
        supplier_currency=supplier_currency,
        weight=weight,
        warehouse=warehouse,
        volume=volume,
        product_name=name,
        product_url=supplier_url,
    )

    product = create_product(
        name=name,
        price=calculation['total_mga'],
        description=description,
        category=category,
        stock=stock,
        status=status,
        images=images or [],
        weight_kg=calculation['weight'],
        is_imported=True,
        supplier_url=supplier_url,
        supplier_price=calculation['supplier_price'],
        supplier_currency=calculation['supplier_currency'],
        warehouse=warehouse,
        import_mode=mode,
    )
    logger.info("Created imported product %s at %s MGA", product.slug, product.price)
    return product, calculation
