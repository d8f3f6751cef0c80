"""Order and return reference numbers."""

import re
from typing import Optional

from django.utils import timezone

from ..models import Order, ReturnRequest

QUOTE_PREFIX = 'DEV'
ORDER_PREFIX = 'CMD'


def generate_order_number(prefix: str, year: Optional[int] = None) -> str:
    """
    Next ``<prefix>-<year>-<seq>`` number, e.g. ``CMD-2025-0042``.

    The sequence continues from the highest existing number for the same
    prefix and year. Call inside the transaction that saves the order.
    """
    year = year or timezone.now().year
    stem = f"{prefix}-{year}-"
    pattern = re.compile(rf"^{re.escape(stem)}(\d+)$")

    highest = 0
    for number in Order.objects.filter(order_number__startswith=stem).values_list('order_number', flat=True):
        match = pattern.match(number)
        if match:
            highest = max(highest, int(match.group(1)))
    return f"{stem}{highest + 1:04d}"


def generate_return_number(now=None) -> str:
    """``RET-<yyyymmddHHMMSS>-<nnn>`` where nnn counts existing returns."""
    now = now or timezone.now()
    sequence = ReturnRequest.objects.count() + 1
    number = f"RET-{now:%Y%m%d%H%M%S}-{sequence:03d}"
    while ReturnRequest.objects.filter(return_number=number).exists():
        sequence += 1
        number = f"RET-{now:%Y%m%d%H%M%S}-{sequence:03d}"
    return number
