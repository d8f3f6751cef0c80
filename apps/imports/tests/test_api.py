import pytest
from django.urls import reverse
from rest_framework import status
from apps.catalog.models import Product


@pytest.mark.django_db
class TestCalculateApi:

    def test_public_calculation(self, api_client, rates, air_france_payload):
        response = api_client.post(reverse('imports:calculate'), air_france_payload, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert str(response.data['total_mga']) == '513750'
        assert 'settings' not in response.data

    def test_invalid_warehouse(self, api_client, rates, air_france_payload):
        air_france_payload['warehouse'] = 'china'

        response = api_client.post(reverse('imports:calculate'), air_france_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_admin_calculation_includes_settings(self, staff_client, rates, air_france_payload):
        response = staff_client.post(reverse('imports:admin-calculate'), air_france_payload, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['settings']['tax_rate'] == '3.5'

    def test_admin_calculation_forbidden_for_clients(self, authenticated_client, air_france_payload):
        response = authenticated_client.post(reverse('imports:admin-calculate'), air_france_payload, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestSettingsApi:

    def test_admin_updates_settings(self, admin_client):
        response = admin_client.put(
            reverse('imports:admin-settings'),
            {'settings': {'processing_fee': '3'}},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        values = {row['key']: row['value'] for row in response.data['settings']}
        assert values['processing_fee'] == '3.0000'

    def test_staff_cannot_update(self, staff_client):
        response = staff_client.get(reverse('imports:admin-settings'))

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestCreateProductApi:

    def test_creates_imported_product(self, staff_client, rates, air_france_payload):
        payload = dict(air_france_payload, name='Casque audio')
        payload.pop('product_name')

        response = staff_client.post(reverse('imports:admin-create-product'), payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        product = Product.objects.get(id=response.data['product']['id'])
        assert product.is_imported
