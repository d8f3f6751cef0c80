"""Services for the product and service catalog."""

from .exceptions import (
    CatalogServiceError,
    ProductNotFoundError,
    ServiceNotFoundError,
    CategoryNotFoundError,
    InsufficientStockError,
    ProductUnavailableError,
)
from .slugs import unique_slug
from .product_management import (
    create_category,
    create_product,
    update_product,
    archive_product,
    create_service,
    update_service,
)
from .inventory import adjust_stock, reserve_stock, release_stock
from .catalog_search import search_catalog, similar_products

__all__ = [
    # Exceptions
    'CatalogServiceError',
    'ProductNotFoundError',
    'ServiceNotFoundError',
    'CategoryNotFoundError',
    'InsufficientStockError',
    'ProductUnavailableError',
    # Services
    'unique_slug',
    'create_category',
    'create_product',
    'update_product',
    'archive_product',
    'create_service',
    'update_service',
    'adjust_stock',
    'reserve_stock',
    'release_stock',
    'search_catalog',
    'similar_products',
]
