import pytest
from apps.accounts.models import User, Address, AddressType


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        first_name='Inactive',
        is_active=False,
    )


@pytest.fixture
def phone_only_user(db):
    return User.objects.create_user(
        phone='0331112233',
        first_name='Rija',
    )


@pytest.fixture
def billing_address(user):
    return Address.objects.create(
        user=user,
        type=AddressType.BILLING,
        street='Lot II A 12',
        city='Antananarivo',
        is_default=True,
    )


@pytest.fixture
def phone_customer(db):
    return User.objects.create_user(
        phone='0327654321',
        password='Mobile2024',
        first_name='Lova',
    )
