import pytest
from django.urls import reverse
from rest_framework import status
from apps.siteconfig.models import SiteSetting, SettingGroup


@pytest.mark.django_db
class TestSiteSettingsApi:

    def test_public_hides_private_groups(self, api_client):
        SiteSetting.objects.create(key='site_name', value='Boutique', group=SettingGroup.GENERAL)
        SiteSetting.objects.create(key='api_secret', value='s3cret', group=SettingGroup.SYSTEM)

        response = api_client.get(reverse('siteconfig:public-settings'))

        assert response.status_code == status.HTTP_200_OK
        assert [row['key'] for row in response.data] == ['site_name']

    def test_admin_upsert(self, admin_client):
        response = admin_client.post(reverse('siteconfig:admin-settings'), {
            'key': 'contact_phone',
            'value': '+261 34 00 000 00',
            'group': 'contact',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert SiteSetting.objects.get(key='contact_phone').group == 'contact'

    def test_staff_cannot_write(self, staff_client):
        response = staff_client.post(reverse('siteconfig:admin-settings'), {
            'key': 'x', 'value': 'y',
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
