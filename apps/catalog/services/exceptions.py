"""Domain-specific exceptions for catalog services."""


class CatalogServiceError(Exception):
    """Base exception for catalog services."""
    pass


class ProductNotFoundError(CatalogServiceError):
    pass


class ServiceNotFoundError(CatalogServiceError):
    pass


class CategoryNotFoundError(CatalogServiceError):
    pass


class InsufficientStockError(CatalogServiceError):
    """Raised when a stock change would take a product below zero."""
    pass


class ProductUnavailableError(CatalogServiceError):
    """Raised when an item that is not ACTIVE (or not active) is ordered."""
    pass
