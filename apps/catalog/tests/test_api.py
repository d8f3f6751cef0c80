import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status
from apps.catalog.models import Product, ProductStatus


@pytest.mark.django_db
class TestProductApi:

    def test_public_list_shows_active_only(self, api_client, product, draft_product):
        response = api_client.get(reverse('catalog:product-list'))

        assert response.status_code == status.HTTP_200_OK
        slugs = [p['slug'] for p in response.data['results']]
        assert slugs == [product.slug]

    def test_back_office_sees_drafts(self, staff_client, product, draft_product):
        response = staff_client.get(reverse('catalog:product-list'))

        assert response.data['count'] == 2

    def test_filter_by_parent_category(self, api_client, product, category):
        response = api_client.get(reverse('catalog:product-list'), {'category': category.slug})

        assert response.data['count'] == 1

    def test_client_cannot_create(self, authenticated_client, category):
        response = authenticated_client.post(reverse('catalog:product-list'), {
            'name': 'Écran 24"',
            'price': '450000',
        })

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_staff_creates_product(self, staff_client, category):
        response = staff_client.post(reverse('catalog:product-list'), {
            'name': 'Écran 24 pouces',
            'price': '450000',
            'category': str(category.id),
            'status': 'ACTIVE',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['slug'] == 'ecran-24-pouces'

    def test_destroy_archives(self, staff_client, product):
        url = reverse('catalog:product-detail', kwargs={'slug': product.slug})
        response = staff_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        product.refresh_from_db()
        assert product.status == ProductStatus.ARCHIVED

    def test_adjust_stock_below_zero(self, staff_client, product):
        url = reverse('catalog:product-adjust-stock', kwargs={'slug': product.slug})
        response = staff_client.post(url, {'delta': -10, 'reason': 'Inventory'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_adjust_stock(self, staff_client, product):
        url = reverse('catalog:product-adjust-stock', kwargs={'slug': product.slug})
        response = staff_client.post(url, {'delta': 4, 'reason': 'Delivery'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['stock'] == 9


@pytest.mark.django_db
class TestSearchApi:

    def test_search(self, api_client, product):
        response = api_client.get(reverse('catalog:search'), {'q': 'clavier'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] >= 1

    def test_search_requires_query(self, api_client):
        response = api_client.get(reverse('catalog:search'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
