import pytest
from decimal import Decimal
from unittest.mock import patch
from django.urls import reverse
from rest_framework import status
from apps.currency.models import ExchangeRate
from apps.currency.services import ExchangeRateProviderError


@pytest.mark.django_db
class TestCurrencyApi:

    def test_public_rates(self, api_client, stored_rates):
        response = api_client.get(reverse('currency:rates'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['base'] == 'MGA'
        assert Decimal(response.data['rates']['EUR']) == Decimal('0.0002')

    def test_convert(self, api_client, stored_rates):
        response = api_client.get(reverse('currency:convert'), {'amount': '50', 'from': 'EUR', 'to': 'MGA'})

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data['converted']) == Decimal('250000')
        assert response.data['formatted'] == '250 000 Ar'

    def test_convert_unknown_currency(self, api_client, stored_rates):
        response = api_client.get(reverse('currency:convert'), {'amount': '50', 'from': 'XYZ', 'to': 'MGA'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_convert_requires_amount(self, api_client):
        response = api_client.get(reverse('currency:convert'), {'from': 'EUR', 'to': 'MGA'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_admin_update_rates(self, admin_client):
        response = admin_client.put(
            reverse('currency:update-rates'),
            {'rates': {'EUR': '0.00021'}},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert ExchangeRate.objects.get(currency='EUR').rate == Decimal('0.00021')

    def test_update_rates_forbidden_for_clients(self, authenticated_client):
        response = authenticated_client.put(
            reverse('currency:update-rates'),
            {'rates': {'EUR': '0.00021'}},
            format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_sync_provider_failure(self, admin_client):
        with patch('apps.currency.views.sync_rates_from_provider', side_effect=ExchangeRateProviderError('down')):
            response = admin_client.post(reverse('currency:sync-rates'))

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
