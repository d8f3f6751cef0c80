import pytest
from decimal import Decimal
from apps.catalog.models import Category, CategoryKind, Product, ProductStatus, Service


@pytest.fixture
def category(db):
    return Category.objects.create(name='Informatique', slug='informatique', kind=CategoryKind.PRODUCT)


@pytest.fixture
def subcategory(category):
    return Category.objects.create(name='Claviers', slug='claviers', kind=CategoryKind.PRODUCT, parent=category)


@pytest.fixture
def product(subcategory):
    return Product.objects.create(
        name='Clavier mécanique RGB',
        slug='clavier-mecanique-rgb',
        description='Clavier gaming switches rouges',
        category=subcategory,
        price=Decimal('185000'),
        stock=5,
        status=ProductStatus.ACTIVE,
    )


@pytest.fixture
def draft_product(category):
    return Product.objects.create(
        name='Souris sans fil',
        slug='souris-sans-fil',
        category=category,
        price=Decimal('45000'),
        stock=10,
        status=ProductStatus.DRAFT,
    )


@pytest.fixture
def service(db):
    return Service.objects.create(
        name='Réparation ordinateur portable',
        slug='reparation-ordinateur-portable',
        description='Diagnostic et réparation',
        price=Decimal('50000'),
    )
