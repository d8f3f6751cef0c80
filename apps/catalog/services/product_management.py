"""Product, service and category CRUD operations."""

import logging
from decimal import Decimal
from typing import Optional, Dict, Any
from uuid import UUID

from django.db import transaction

from ..models import Category, Product, ProductStatus, Service
from .exceptions import ProductNotFoundError, ServiceNotFoundError
from .slugs import unique_slug

logger = logging.getLogger(__name__)


@transaction.atomic
def create_category(*, name: str, kind: str, parent: Optional[Category] = None, description: str = '') -> Category:
    return Category.objects.create(
        name=name,
        slug=unique_slug(Category, name, max_length=120),
        parent=parent,
        kind=kind,
        description=description,
    )


@transaction.atomic
def create_product(
    *,
    name: str,
    price: Decimal,
    description: str = '',
    category: Optional[Category] = None,
    stock: int = 0,
    status: str = ProductStatus.DRAFT,
    **extra: Any,
) -> Product:
    """
    Create a product with a unique slug.

    ``extra`` carries the optional model fields (weight, images, import
    metadata, compare_at_price, track_inventory).
    """
    product = Product.objects.create(
        name=name,
        slug=unique_slug(Product, name, max_length=280),
        price=price,
        description=description,
        category=category,
        stock=stock,
        status=status,
        **extra,
    )
    logger.info("Created product %s (%s)", product.id, product.slug)
    return product


@transaction.atomic
def update_product(*, product_id: UUID, data: Dict[str, Any]) -> Product:
    """
    Update product fields. Renaming regenerates the slug; ``stock`` is
    ignored here (use adjust_stock).
    """
    try:
        product = Product.objects.select_for_update().get(id=product_id)
    except Product.DoesNotExist:
        raise ProductNotFoundError(f"Product {product_id} not found")

    data = dict(data)
    data.pop('stock', None)
    if 'name' in data and data['name'] != product.name:
        product.slug = unique_slug(Product, data['name'], instance_id=product.id, max_length=280)

    for field, value in data.items():
        setattr(product, field, value)
    product.save()
    return product


@transaction.atomic
def archive_product(*, product_id: UUID) -> Product:
    try:
        product = Product.objects.select_for_update().get(id=product_id)
    except Product.DoesNotExist:
        raise ProductNotFoundError(f"Product {product_id} not found")

    product.status = ProductStatus.ARCHIVED
    product.save(update_fields=['status', 'updated_at'])
    logger.info("Archived product %s", product.id)
    return product


@transaction.atomic
def create_service(
    *,
    name: str,
    price: Decimal = Decimal('0'),
    description: str = '',
    category: Optional[Category] = None,
    **extra: Any,
) -> Service:
    service = Service.objects.create(
        name=name,
        slug=unique_slug(Service, name, max_length=280),
        price=price,
        description=description,
        category=category,
        **extra,
    )
    logger.info("Created service %s (%s)", service.id, service.slug)
    return service


@transaction.atomic
def update_service(*, service_id: UUID, data: Dict[str, Any]) -> Service:
    try:
        service = Service.objects.select_for_update().get(id=service_id)
    except Service.DoesNotExist:
        raise ServiceNotFoundError(f"Service {service_id} not found")

    if 'name' in data and data['name'] != service.name:
        service.slug = unique_slug(Service, data['name'], instance_id=service.id, max_length=280)
    for field, value in data.items():
        setattr(service, field, value)
    service.save()
    return service
