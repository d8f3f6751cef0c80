import pytest
from django.urls import reverse


@pytest.mark.django_db
class TestDashboardEndpoint:

    def test_requires_authentication(self, api_client):
        assert self.client_get(api_client).status_code == 401

    def test_clients_are_forbidden(self, authenticated_client):
        assert self.client_get(authenticated_client).status_code == 403

    def test_staff_gets_dashboard(self, staff_client, make_order):
        make_order(total='125000')

        response = self.client_get(staff_client)

        assert response.status_code == 200
        assert response.data['overview']['total_orders'] == 1
        assert response.data['overview']['total_revenue'] == '125000.00'
        assert len(response.data['monthly']) == 6
        assert len(response.data['recent_orders']) == 1

    def test_months_parameter(self, staff_client):
        response = self.client_get(staff_client, months=12)

        assert len(response.data['monthly']) == 12

    def test_invalid_months(self, staff_client):
        assert self.client_get(staff_client, months=48).status_code == 400

    def client_get(self, client, **params):
        return client.get(reverse('analytics:dashboard'), params)
