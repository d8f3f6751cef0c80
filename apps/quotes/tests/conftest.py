import pytest
from decimal import Decimal
from apps.catalog.models import Product, ProductStatus, Service, PricingType
from apps.quotes.services import request_quote


@pytest.fixture
def service(db):
    return Service.objects.create(
        name='Création site vitrine',
        slug='creation-site-vitrine',
        price=Decimal('0'),
        pricing_type=PricingType.QUOTE,
    )


@pytest.fixture
def product(db):
    return Product.objects.create(
        name='Serveur NAS 4 baies',
        slug='serveur-nas-4-baies',
        price=Decimal('1200000'),
        stock=2,
        status=ProductStatus.ACTIVE,
    )


@pytest.fixture
def quote(user, service):
    """Pending quote with a 500 000 MGA budget."""
    return request_quote(
        user=user,
        service_id=service.id,
        description='Site 5 pages avec formulaire de contact',
        budget=Decimal('500000'),
    )
