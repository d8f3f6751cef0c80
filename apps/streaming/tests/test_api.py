import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status
from apps.streaming.models import Offer, StreamingAccount
from apps.streaming.services import create_subscription, create_gift_card


@pytest.mark.django_db
class TestOfferApi:

    def test_public_list_hides_inactive(self, api_client, single_offer, duo_offer):
        Offer.objects.filter(id=duo_offer.id).update(is_active=False)

        response = api_client.get(reverse('streaming:offer-list'))

        assert response.status_code == status.HTTP_200_OK
        assert [o['slug'] for o in response.data] == [single_offer.slug]

    def test_client_cannot_create(self, authenticated_client, netflix):
        response = authenticated_client.post(reverse('streaming:offer-list'), {
            'name': 'Netflix Premium',
            'price': '40000',
            'platforms': [{'platform_id': str(netflix.id), 'profile_count': 4}],
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_staff_creates_bundle(self, staff_client, netflix, spotify):
        response = staff_client.post(reverse('streaming:offer-list'), {
            'name': 'Pack Famille',
            'price': '45000',
            'type': 'BUNDLE',
            'platforms': [
                {'platform_id': str(netflix.id), 'profile_count': 2},
                {'platform_id': str(spotify.id), 'profile_count': 1},
            ],
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['max_profiles'] == 3

    def test_single_with_two_platforms_rejected(self, staff_client, netflix, spotify):
        response = staff_client.post(reverse('streaming:offer-list'), {
            'name': 'Invalid',
            'price': '45000',
            'type': 'SINGLE',
            'platforms': [
                {'platform_id': str(netflix.id)},
                {'platform_id': str(spotify.id)},
            ],
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestAccountApi:

    def test_staff_creates_account_with_profiles(self, staff_client, netflix):
        response = staff_client.post(reverse('streaming:account-list'), {
            'platform': str(netflix.id),
            'username': 'nf-shared-02',
            'password': 'pw',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert len(response.data['profiles']) == 5
        assert response.data['free_profile_count'] == 5

    def test_client_forbidden(self, authenticated_client):
        response = authenticated_client.get(reverse('streaming:account-list'))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_delete_assigned_profile_rejected(self, staff_client, netflix_account, single_offer, user):
        subscription = create_subscription(user=user, offer=single_offer)
        profile = subscription.profiles.first()

        response = staff_client.delete(reverse('streaming:profile-detail', kwargs={'pk': profile.id}))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert StreamingAccount.objects.get(id=netflix_account.id).profiles.count() == 5


@pytest.mark.django_db
class TestSubscriptionApi:

    def test_client_sees_own_subscriptions_with_credentials(
        self, authenticated_client, netflix_account, single_offer, user, other_user
    ):
        create_subscription(user=user, offer=single_offer, activate=True)
        create_subscription(user=other_user, offer=single_offer, activate=True)

        response = authenticated_client.get(reverse('streaming:subscription-list'))

        assert response.data['count'] == 1
        profile = response.data['results'][0]['profiles'][0]
        assert profile['username'] == 'nf-shared-01'
        assert profile['password'] == 's3cret'

    def test_staff_creates_subscription(self, staff_client, netflix_account, duo_offer, user):
        response = staff_client.post(reverse('streaming:subscription-list'), {
            'user_id': str(user.id),
            'offer_id': str(duo_offer.id),
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == 'ACTIVE'
        assert len(response.data['profiles']) == 2

    def test_client_cannot_assign_profiles(self, authenticated_client, single_offer, user):
        subscription = create_subscription(user=user, offer=single_offer)
        url = reverse('streaming:subscription-assign-profiles', kwargs={'pk': subscription.id})

        response = authenticated_client.post(url, {'profile_ids': []}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_over_allocation_returns_400(self, staff_client, netflix_account, single_offer, user):
        subscription = create_subscription(user=user, offer=single_offer)
        free = netflix_account.profiles.filter(is_assigned=False).values_list('id', flat=True)[:1]
        url = reverse('streaming:subscription-assign-profiles', kwargs={'pk': subscription.id})

        response = staff_client.post(url, {'profile_ids': [str(pid) for pid in free]}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_client_cancels_own(self, authenticated_client, netflix_account, single_offer, user):
        subscription = create_subscription(user=user, offer=single_offer, activate=True)
        url = reverse('streaming:subscription-cancel', kwargs={'pk': subscription.id})

        response = authenticated_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'CANCELLED'
        assert response.data['profiles'] == []


@pytest.mark.django_db
class TestGiftCardApi:

    def test_redeem(self, authenticated_client, spotify):
        create_gift_card(platform_id=spotify.id, amount=Decimal('25000'), code='GIFT-0001')

        response = authenticated_client.post(reverse('streaming:gift-card-redeem'), {'code': 'gift-0001'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'USED'

    def test_redeem_unknown(self, authenticated_client):
        response = authenticated_client.post(reverse('streaming:gift-card-redeem'), {'code': 'NOPE'})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_staff_issues_card(self, staff_client, spotify):
        response = staff_client.post(reverse('streaming:gift-card-list'), {
            'platform': str(spotify.id),
            'amount': '50000',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert len(response.data['code']) == 19
