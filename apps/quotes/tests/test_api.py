import pytest
from django.urls import reverse
from rest_framework import status
from apps.quotes.models import QuoteStatus


@pytest.mark.django_db
class TestQuoteAPI:

    def test_request_quote(self, authenticated_client, service):
        response = authenticated_client.post(
            reverse('quotes:quote-list'),
            {'service_id': str(service.id), 'budget': '300000', 'description': 'Boutique en ligne'},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == QuoteStatus.PENDING
        assert response.data['proposed_price'] == '300000.00'

    def test_duplicate_request(self, authenticated_client, quote, service):
        response = authenticated_client.post(
            reverse('quotes:quote-list'), {'service_id': str(service.id)}, format='json'
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_needs_a_target(self, authenticated_client):
        response = authenticated_client.post(reverse('quotes:quote-list'), {'budget': '1000'}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_anonymous_rejected(self, api_client):
        response = api_client.get(reverse('quotes:quote-list'))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_clients_see_own_quotes(self, authenticated_client, other_client, quote):
        assert authenticated_client.get(reverse('quotes:quote-list')).data['count'] == 1
        assert other_client.get(reverse('quotes:quote-list')).data['count'] == 0

    def test_back_office_filter(self, staff_client, quote):
        url = reverse('quotes:quote-list')
        assert staff_client.get(url, {'status': QuoteStatus.PENDING}).data['count'] == 1
        assert staff_client.get(url, {'status': QuoteStatus.ACCEPTED}).data['count'] == 0

    def test_client_cannot_accept(self, authenticated_client, quote):
        response = authenticated_client.post(reverse('quotes:quote-accept', kwargs={'pk': quote.id}))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_negotiation_flow(self, authenticated_client, staff_client, quote):
        response = staff_client.post(
            reverse('quotes:quote-counter', kwargs={'pk': quote.id}),
            {'counter_price': '700000', 'message': 'Avec hébergement un an'},
            format='json',
        )
        assert response.data['status'] == QuoteStatus.NEGOTIATING
        assert len(response.data['messages']) == 2

        response = authenticated_client.post(reverse('quotes:quote-accept-counter', kwargs={'pk': quote.id}))
        assert response.data['status'] == QuoteStatus.ACCEPTED
        assert response.data['final_price'] == '700000.00'

        response = staff_client.post(reverse('quotes:quote-convert', kwargs={'pk': quote.id}))
        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == QuoteStatus.CONVERTED
        assert response.data['order_number'].startswith('DEV-')

    def test_propose_price(self, authenticated_client, quote):
        response = authenticated_client.post(
            reverse('quotes:quote-propose', kwargs={'pk': quote.id}),
            {'price': '450000'},
            format='json',
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data['proposed_price'] == '450000.00'

    def test_messages_and_mark_read(self, authenticated_client, staff_client, quote):
        url = reverse('quotes:quote-messages', kwargs={'pk': quote.id})
        response = authenticated_client.post(url, {'message': 'Délai de livraison ?'}, format='json')
        assert response.status_code == status.HTTP_201_CREATED

        assert len(staff_client.get(url).data) == 1

        response = staff_client.post(reverse('quotes:quote-mark-read', kwargs={'pk': quote.id}))
        assert response.data == {'marked': 1}

    def test_other_client_cannot_post(self, other_client, quote):
        url = reverse('quotes:quote-messages', kwargs={'pk': quote.id})
        response = other_client.post(url, {'message': 'Hello'}, format='json')
        assert response.status_code == status.HTTP_404_NOT_FOUND
