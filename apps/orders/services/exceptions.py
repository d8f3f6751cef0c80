"""
Domain exceptions for order services.

Exception Hierarchy:
    OrdersServiceError (base)
    ├── CartError
    │   └── CartItemNotFoundError
    ├── ItemUnavailableError
    ├── InvalidOrderError
    ├── OrderNotFoundError
    ├── InvalidStatusTransitionError
    ├── PaymentError
    │   ├── InvalidPaymentAmountError
    │   └── PaymentExceedsBalanceError
    └── ReturnError
        ├── ReturnNotFoundError
        ├── ReturnNotAllowedError
        └── InvalidReturnStateError
"""


class OrdersServiceError(Exception):
    """Base exception for order services."""
    pass


class CartError(OrdersServiceError):
    pass


class CartItemNotFoundError(CartError):
    pass


class ItemUnavailableError(OrdersServiceError):
    """Raised when an item does not exist, is not for sale or is out of stock."""
    pass


class InvalidOrderError(OrdersServiceError):
    """Raised when checkout data is incomplete or inconsistent."""
    pass


class OrderNotFoundError(OrdersServiceError):
    pass


class InvalidStatusTransitionError(OrdersServiceError):
    pass


class PaymentError(OrdersServiceError):
    pass


class InvalidPaymentAmountError(PaymentError):
    pass


class PaymentExceedsBalanceError(PaymentError):
    """Raised when a payment would bring the paid sum above the order total."""
    pass


class ReturnError(OrdersServiceError):
    pass


class ReturnNotFoundError(ReturnError):
    pass


class ReturnNotAllowedError(ReturnError):
    """Raised when the order, the requester or the quantities do not allow a return."""
    pass


class InvalidReturnStateError(ReturnError):
    pass
