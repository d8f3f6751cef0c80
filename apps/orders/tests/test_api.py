import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status
from apps.orders.models import ItemType, Order, OrderStatus, PaymentMethod, ReturnStatus


# =============================================================================
# CART
# =============================================================================

@pytest.mark.django_db
class TestCartAPI:

    def test_guest_cart_by_header(self, api_client, product):
        url = reverse('orders:cart-add')
        response = api_client.post(
            url,
            {'item_type': ItemType.PRODUCT, 'item_id': str(product.id), 'quantity': 2},
            format='json',
            HTTP_X_CART_SESSION='guest-123',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['session_key'] == 'guest-123'
        assert response.data['item_count'] == 2

        response = api_client.get(reverse('orders:cart'), HTTP_X_CART_SESSION='guest-123')
        assert response.data['subtotal'] == '370000.00'

    def test_guest_without_session(self, api_client):
        response = api_client.get(reverse('orders:cart'))
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update_and_remove_line(self, authenticated_client, service):
        response = authenticated_client.post(
            reverse('orders:cart-add'),
            {'item_type': ItemType.SERVICE, 'item_id': str(service.id)},
            format='json',
        )
        item_id = response.data['items'][0]['id']
        url = reverse('orders:cart-item', kwargs={'pk': item_id})

        response = authenticated_client.patch(url, {'quantity': 3}, format='json')
        assert response.data['items'][0]['quantity'] == 3

        response = authenticated_client.delete(url)
        assert response.status_code == status.HTTP_200_OK
        assert response.data['items'] == []

    def test_unavailable_item(self, authenticated_client, product):
        response = authenticated_client.post(
            reverse('orders:cart-add'),
            {'item_type': ItemType.PRODUCT, 'item_id': str(product.id), 'quantity': 10},
            format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_checkout(self, authenticated_client, service):
        authenticated_client.post(
            reverse('orders:cart-add'),
            {'item_type': ItemType.SERVICE, 'item_id': str(service.id)},
            format='json',
        )
        response = authenticated_client.post(
            reverse('orders:cart-checkout'),
            {'payment_method': PaymentMethod.CASH},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['order_number'].startswith('DEV-')
        assert response.data['status'] == OrderStatus.QUOTE


# =============================================================================
# ORDERS
# =============================================================================

@pytest.mark.django_db
class TestOrderAPI:

    def test_guest_order(self, api_client, product):
        response = api_client.post(
            reverse('orders:order-list'),
            {
                'items': [{'item_type': ItemType.PRODUCT, 'item_id': str(product.id), 'quantity': 1}],
                'payment_method': PaymentMethod.MOBILE_MONEY,
                'customer': {'email': 'guest@example.com', 'create_account': True},
                'billing': {'street': 'Lot II M 45', 'city': 'Antananarivo'},
            },
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['order_number'].startswith('CMD-')
        assert response.data['total'] == '185000.00'
        assert response.data['customer']['email'] == 'guest@example.com'

    def test_unknown_guest_without_account(self, api_client, product):
        response = api_client.post(
            reverse('orders:order-list'),
            {
                'items': [{'item_type': ItemType.PRODUCT, 'item_id': str(product.id)}],
                'payment_method': PaymentMethod.CASH,
                'customer': {'email': 'nobody@example.com'},
            },
            format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_order_without_items(self, authenticated_client):
        response = authenticated_client.post(
            reverse('orders:order-list'),
            {'payment_method': PaymentMethod.CASH},
            format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_clients_see_own_orders(self, authenticated_client, other_client, paid_order):
        response = authenticated_client.get(reverse('orders:order-list'))
        assert response.data['count'] == 1

        response = other_client.get(reverse('orders:order-list'))
        assert response.data['count'] == 0

        response = other_client.get(reverse('orders:order-detail', kwargs={'pk': paid_order.id}))
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_back_office_filters(self, staff_client, paid_order, quote_order):
        response = staff_client.get(reverse('orders:order-list'), {'status': OrderStatus.QUOTE})
        assert response.data['count'] == 1
        assert response.data['results'][0]['order_number'] == quote_order.order_number

        response = staff_client.get(reverse('orders:order-list'), {'search': 'testuser@'})
        assert response.data['count'] == 2

    def test_change_status(self, staff_client, paid_order):
        url = reverse('orders:order-change-status', kwargs={'pk': paid_order.id})

        response = staff_client.post(url, {'status': OrderStatus.PROCESSING}, format='json')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == OrderStatus.PROCESSING

        response = staff_client.post(url, {'status': OrderStatus.DELIVERED}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_client_cannot_change_status(self, authenticated_client, paid_order):
        url = reverse('orders:order-change-status', kwargs={'pk': paid_order.id})
        response = authenticated_client.post(url, {'status': OrderStatus.PROCESSING}, format='json')
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_record_payment(self, staff_client, quote_order):
        url = reverse('orders:order-payments', kwargs={'pk': quote_order.id})

        response = staff_client.post(url, {'amount': '370000', 'method': PaymentMethod.CASH}, format='json')
        assert response.status_code == status.HTTP_201_CREATED

        response = staff_client.post(url, {'amount': '1', 'method': PaymentMethod.CASH}, format='json')
        assert response.status_code == status.HTTP_409_CONFLICT

        response = staff_client.get(url)
        assert len(response.data) == 1
        assert Order.objects.get(id=quote_order.id).status == OrderStatus.PAID

    def test_history(self, authenticated_client, paid_order):
        response = authenticated_client.get(reverse('orders:order-history', kwargs={'pk': paid_order.id}))
        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['action'] == 'created'

    def test_invoice_pdf(self, authenticated_client, quote_order):
        response = authenticated_client.get(reverse('orders:order-invoice', kwargs={'pk': quote_order.id}))

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'] == 'application/pdf'
        assert 'proforma-' in response['Content-Disposition']
        assert response.content.startswith(b'%PDF')

    def test_invoice_unknown_currency(self, authenticated_client, paid_order):
        url = reverse('orders:order-invoice', kwargs={'pk': paid_order.id})
        response = authenticated_client.get(url, {'currency': 'XYZ'})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_delivery_note_back_office_only(self, authenticated_client, staff_client, paid_order):
        url = reverse('orders:order-delivery-note', kwargs={'pk': paid_order.id})
        assert authenticated_client.get(url).status_code == status.HTTP_403_FORBIDDEN
        assert staff_client.get(url).content.startswith(b'%PDF')


@pytest.mark.django_db
class TestTrackingAPI:

    def test_track(self, api_client, paid_order):
        response = api_client.get(
            reverse('orders:track'),
            {'order_number': paid_order.order_number, 'phone': '0340000001'},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == OrderStatus.PAID
        assert 'customer' not in response.data

    def test_contact_required(self, api_client, paid_order):
        response = api_client.get(reverse('orders:track'), {'order_number': paid_order.order_number})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_wrong_contact(self, api_client, paid_order):
        response = api_client.get(
            reverse('orders:track'),
            {'order_number': paid_order.order_number, 'email': 'wrong@example.com'},
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# RETURNS
# =============================================================================

@pytest.mark.django_db
class TestReturnAPI:

    def _create(self, client, order, quantity=1):
        return client.post(
            reverse('orders:return-list'),
            {
                'order_id': str(order.id),
                'reason': 'Touche défectueuse',
                'items': [{'order_item_id': str(order.items.get().id), 'quantity': quantity}],
            },
            format='json',
        )

    def test_request_and_refund(self, authenticated_client, staff_client, paid_order):
        response = self._create(authenticated_client, paid_order)
        assert response.status_code == status.HTTP_201_CREATED
        return_id = response.data['id']

        response = staff_client.post(
            reverse('orders:return-approve', kwargs={'pk': return_id}),
            {'approved_amount': '150000'},
            format='json',
        )
        assert response.data['status'] == ReturnStatus.APPROVED

        response = staff_client.post(
            reverse('orders:return-refund', kwargs={'pk': return_id}),
            {'method': PaymentMethod.MOBILE_MONEY},
            format='json',
        )
        assert response.data['status'] == ReturnStatus.REFUNDED
        assert Decimal(response.data['refunded_amount']) == Decimal('150000')

    def test_too_many_items(self, authenticated_client, paid_order):
        response = self._create(authenticated_client, paid_order, quantity=3)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_someone_elses_order(self, other_client, paid_order):
        response = self._create(other_client, paid_order)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_client_cannot_approve(self, authenticated_client, paid_order):
        return_id = self._create(authenticated_client, paid_order).data['id']
        response = authenticated_client.post(reverse('orders:return-approve', kwargs={'pk': return_id}))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_reject_twice(self, authenticated_client, staff_client, paid_order):
        return_id = self._create(authenticated_client, paid_order).data['id']
        url = reverse('orders:return-reject', kwargs={'pk': return_id})
        assert staff_client.post(url, {'admin_notes': 'Non'}, format='json').status_code == status.HTTP_200_OK
        assert staff_client.post(url, format='json').status_code == status.HTTP_400_BAD_REQUEST
