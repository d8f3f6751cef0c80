from ..models import OrderHistory


def record_history(order, *, action: str, description: str = '', user=None, previous_status: str = '') -> OrderHistory:
    return OrderHistory.objects.create(
        order=order,
        status=order.status,
        previous_status=previous_status,
        action=action,
        description=description,
        user=user if user is not None and user.is_authenticated else None,
    )
