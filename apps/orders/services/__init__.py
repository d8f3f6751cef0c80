"""Services for carts, orders, payments, returns and order documents."""

from .exceptions import (
    OrdersServiceError,
    CartError,
    CartItemNotFoundError,
    ItemUnavailableError,
    InvalidOrderError,
    OrderNotFoundError,
    InvalidStatusTransitionError,
    PaymentError,
    InvalidPaymentAmountError,
    PaymentExceedsBalanceError,
    ReturnError,
    ReturnNotFoundError,
    ReturnNotAllowedError,
    InvalidReturnStateError,
)
from .pricing import resolve_item
from .numbering import generate_order_number, generate_return_number
from .cart import (
    get_or_create_cart,
    add_to_cart,
    set_cart_item_quantity,
    clear_cart,
    cart_totals,
    merge_guest_cart,
    cleanup_expired_carts,
)
from .checkout import place_order, checkout_cart
from .order_status import STATUS_FLOW, can_transition, change_order_status
from .payments import record_payment
from .returns import request_return, approve_return, reject_return, refund_return
from .documents import document_type, build_invoice_pdf, build_delivery_note_pdf
from .tracking import track_order

__all__ = [
    # Exceptions
    'OrdersServiceError',
    'CartError',
    'CartItemNotFoundError',
    'ItemUnavailableError',
    'InvalidOrderError',
    'OrderNotFoundError',
    'InvalidStatusTransitionError',
    'PaymentError',
    'InvalidPaymentAmountError',
    'PaymentExceedsBalanceError',
    'ReturnError',
    'ReturnNotFoundError',
    'ReturnNotAllowedError',
    'InvalidReturnStateError',
    # Cart
    'resolve_item',
    'get_or_create_cart',
    'add_to_cart',
    'set_cart_item_quantity',
    'clear_cart',
    'cart_totals',
    'merge_guest_cart',
    'cleanup_expired_carts',
    # Orders
    'generate_order_number',
    'generate_return_number',
    'place_order',
    'checkout_cart',
    'STATUS_FLOW',
    'can_transition',
    'change_order_status',
    'record_payment',
    'track_order',
    # Returns
    'request_return',
    'approve_return',
    'reject_return',
    'refund_return',
    # Documents
    'document_type',
    'build_invoice_pdf',
    'build_delivery_note_pdf',
]
