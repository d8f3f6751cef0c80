"""Address book services."""

from django.db import transaction

from ..models import Address, AddressType
from .exceptions import AddressNotFoundError


@transaction.atomic
def create_address(
    *,
    user,
    street: str,
    city: str,
    zip_code: str = '000',
    country: str = 'Madagascar',
    type: str = AddressType.BILLING,
    is_default: bool = False,
) -> Address:
    """Create an address; the first address of a type becomes the default."""
    has_existing = Address.objects.filter(user=user, type=type).exists()
    if is_default:
        Address.objects.filter(user=user, type=type).update(is_default=False)

    return Address.objects.create(
        user=user,
        type=type,
        street=street,
        city=city,
        zip_code=zip_code or '000',
        country=country or 'Madagascar',
        is_default=is_default or not has_existing,
    )


@transaction.atomic
def set_default_address(*, user, address_id) -> Address:
    """Make an address the user's default for its type."""
    try:
        address = Address.objects.select_for_update().get(id=address_id, user=user)
    except Address.DoesNotExist:
        raise AddressNotFoundError("Address not found")

    Address.objects.filter(user=user, type=address.type).exclude(id=address.id).update(is_default=False)
    address.is_default = True
    address.save(update_fields=['is_default'])
    return address
