import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
from apps.streaming.models import Subscription
from apps.streaming.services import create_platform, create_account, create_offer, create_subscription


@pytest.fixture
def now():
    return timezone.now()


@pytest.fixture
def netflix(db):
    return create_platform(name='Netflix', has_profiles=True, max_profiles_per_account=5)


@pytest.fixture
def account(netflix):
    return create_account(platform_id=netflix.id, username='nf-shared-01', password='s3cret')


@pytest.fixture
def offer(netflix):
    return create_offer(
        name='Netflix 1 écran',
        price=Decimal('15000'),
        platforms=[{'platform_id': netflix.id, 'profile_count': 1}],
    )


@pytest.fixture
def make_subscription(user, offer, account):
    """Subscription with a chosen end date or age."""

    def _make(*, ends_in=None, created_ago=None, activate=True):
        subscription = create_subscription(user=user, offer=offer, activate=activate)
        fields = {}
        if ends_in is not None:
            fields['end_date'] = timezone.now() + ends_in
        if created_ago is not None:
            fields['created_at'] = timezone.now() - created_ago
        if fields:
            Subscription.objects.filter(id=subscription.id).update(**fields)
            subscription.refresh_from_db()
        return subscription

    return _make


@pytest.fixture
def expiring_subscription(make_subscription):
    return make_subscription(ends_in=timedelta(days=2, hours=12))
