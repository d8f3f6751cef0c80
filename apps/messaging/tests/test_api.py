import pytest
from django.urls import reverse
from rest_framework import status
from apps.messaging.models import Message
from apps.messaging.services import notify_user


@pytest.mark.django_db
class TestMessagingApi:

    def test_contact_is_public(self, api_client):
        response = api_client.post(reverse('messaging:contact'), {
            'name': 'Rasoa',
            'email': 'rasoa@example.com',
            'subject': 'Horaires',
            'content': 'Quels sont vos horaires ?',
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert Message.objects.filter(guest_email='rasoa@example.com').exists()

    def test_client_writes_to_admins(self, authenticated_client, user):
        response = authenticated_client.post(reverse('messaging:my-messages'), {
            'subject': 'Question',
            'content': 'Bonjour',
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['recipient'] is None

    def test_unread_count(self, authenticated_client, user):
        notify_user(user=user, subject='x', content='x')

        response = authenticated_client.get(reverse('messaging:unread-count'))

        assert response.data == {'unread': 1}

    def test_admin_inbox_requires_back_office(self, authenticated_client):
        response = authenticated_client.get(reverse('messaging:admin-inbox'))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_staff_sends_message(self, staff_client, user):
        response = staff_client.post(reverse('messaging:admin-inbox'), {
            'recipient_id': str(user.id),
            'subject': 'Livraison',
            'content': 'Demain',
            'priority': 'HIGH',
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['priority'] == 'HIGH'

    def test_other_user_cannot_read_message(self, other_client, user):
        message = notify_user(user=user, subject='x', content='x')

        response = other_client.get(reverse('messaging:message-detail', kwargs={'pk': message.id}))

        assert response.status_code == status.HTTP_404_NOT_FOUND
