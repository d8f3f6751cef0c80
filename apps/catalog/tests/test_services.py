import pytest
from decimal import Decimal
from apps.catalog.models import Product, ProductStatus, StockMovement
from apps.catalog.services import (
    create_product,
    update_product,
    archive_product,
    adjust_stock,
    reserve_stock,
    search_catalog,
    similar_products,
    InsufficientStockError,
    ProductNotFoundError,
)


@pytest.mark.django_db
class TestProductManagement:

    def test_slug_is_unique(self, product):
        duplicate = create_product(name=product.name, price=Decimal('1000'))

        assert duplicate.slug == f"{product.slug}-2"

    def test_rename_regenerates_slug(self, product):
        updated = update_product(product_id=product.id, data={'name': 'Clavier sans fil'})

        assert updated.slug == 'clavier-sans-fil'

    def test_update_ignores_stock(self, product):
        update_product(product_id=product.id, data={'stock': 999, 'price': Decimal('190000')})

        product.refresh_from_db()
        assert product.stock == 5
        assert product.price == Decimal('190000')

    def test_archive(self, product):
        archive_product(product_id=product.id)

        product.refresh_from_db()
        assert product.status == ProductStatus.ARCHIVED

    def test_update_unknown_product(self, db):
        import uuid
        with pytest.raises(ProductNotFoundError):
            update_product(product_id=uuid.uuid4(), data={'name': 'x'})


@pytest.mark.django_db
class TestInventory:

    def test_adjust_records_movement(self, product, staff_user):
        adjust_stock(product_id=product.id, delta=3, reason='Delivery', user=staff_user)

        product.refresh_from_db()
        assert product.stock == 8
        movement = StockMovement.objects.get(product=product)
        assert movement.resulting_stock == 8
        assert movement.created_by == staff_user

    def test_never_below_zero(self, product):
        with pytest.raises(InsufficientStockError):
            adjust_stock(product_id=product.id, delta=-6, reason='Loss')

        product.refresh_from_db()
        assert product.stock == 5
        assert not StockMovement.objects.exists()

    def test_reserve_skips_untracked(self, product):
        product.track_inventory = False
        product.stock = 0
        product.save()

        reserve_stock(product_id=product.id, quantity=4, reference='CMD-2025-0001')

        product.refresh_from_db()
        assert product.stock == 0


@pytest.mark.django_db
class TestSearch:

    def test_finds_product_by_partial_name(self, product, service):
        results = search_catalog(query='clavier')

        assert results[0]['type'] == 'PRODUCT'
        assert results[0]['slug'] == product.slug

    def test_finds_service(self, product, service):
        results = search_catalog(query='réparation')

        assert any(r['type'] == 'SERVICE' for r in results)

    def test_excludes_draft_products(self, draft_product):
        assert search_catalog(query='souris sans fil') == []

    def test_blank_query(self, product):
        assert search_catalog(query='   ') == []

    def test_similar_products_same_category(self, product, subcategory):
        other = Product.objects.create(
            name='Clavier compact', slug='clavier-compact', category=subcategory,
            price=Decimal('90000'), status=ProductStatus.ACTIVE,
        )

        assert list(similar_products(product=product)) == [other]
