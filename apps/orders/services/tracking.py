from typing import Optional

from django.db.models import Q

from ..models import Order
from .exceptions import OrderNotFoundError


def track_order(*, order_number: str, email: Optional[str] = None, phone: Optional[str] = None) -> Order:
    """
    Public order lookup; the contact must match the order's customer.

    Raises:
        OrderNotFoundError: No match (same error for wrong number or contact)
    """
    if not (email or phone):
        raise OrderNotFoundError("Order not found")

    contact = Q()
    if email:
        contact |= Q(user__email__iexact=email)
    if phone:
        contact |= Q(user__phone=phone)

    order = (
        Order.objects
        .select_related('user')
        .prefetch_related('items', 'history')
        .filter(contact, order_number__iexact=order_number.strip())
        .first()
    )
    if order is None:
        raise OrderNotFoundError("Order not found")
    return order
