import pytest
from decimal import Decimal
from apps.catalog.models import Product, ProductStatus, Service
from apps.currency.models import ExchangeRate, RateSource
from apps.orders.models import ItemType, PaymentMethod
from apps.orders.services import place_order
from apps.streaming.services import create_platform, create_account, create_offer


@pytest.fixture
def product(db):
    return Product.objects.create(
        name='Clavier mécanique RGB',
        slug='clavier-mecanique-rgb',
        price=Decimal('185000'),
        stock=5,
        status=ProductStatus.ACTIVE,
    )


@pytest.fixture
def service(db):
    return Service.objects.create(
        name='Installation Windows',
        slug='installation-windows',
        price=Decimal('30000'),
    )


@pytest.fixture
def netflix(db):
    return create_platform(name='Netflix', has_profiles=True, max_profiles_per_account=5)


@pytest.fixture
def netflix_account(netflix):
    return create_account(platform_id=netflix.id, username='nf-shared-01', password='s3cret')


@pytest.fixture
def offer(netflix):
    return create_offer(
        name='Netflix 1 écran',
        price=Decimal('15000'),
        platforms=[{'platform_id': netflix.id, 'profile_count': 1}],
    )


@pytest.fixture
def rates(db):
    for code, rate in {'EUR': '0.0002', 'USD': '0.00025'}.items():
        ExchangeRate.objects.create(currency=code, rate=Decimal(rate), source=RateSource.MANUAL)


@pytest.fixture
def billing():
    return {'street': 'Lot II M 45', 'city': 'Antananarivo', 'zip_code': '101', 'country': 'Madagascar'}


@pytest.fixture
def quote_order(user, product):
    """Cash order awaiting payment: 2 keyboards, 370000 MGA."""
    return place_order(
        user=user,
        items=[{'item_type': ItemType.PRODUCT, 'item_id': product.id, 'quantity': 2}],
        payment_method=PaymentMethod.CASH,
    )


@pytest.fixture
def paid_order(user, product):
    return place_order(
        user=user,
        items=[{'item_type': ItemType.PRODUCT, 'item_id': product.id, 'quantity': 2}],
        payment_method=PaymentMethod.MOBILE_MONEY,
    )
