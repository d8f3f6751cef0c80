import pytest
from decimal import Decimal
from apps.streaming.models import OfferType
from apps.streaming.services import create_platform, create_account, create_offer


@pytest.fixture
def netflix(db):
    return create_platform(name='Netflix', has_profiles=True, max_profiles_per_account=5)


@pytest.fixture
def spotify(db):
    return create_platform(name='Spotify', has_profiles=True, max_profiles_per_account=2, has_gift_cards=True)


@pytest.fixture
def netflix_account(netflix):
    return create_account(platform_id=netflix.id, username='nf-shared-01', password='s3cret', email='nf01@example.com')


@pytest.fixture
def single_offer(netflix):
    return create_offer(
        name='Netflix 1 écran',
        price=Decimal('15000'),
        platforms=[{'platform_id': netflix.id, 'profile_count': 1}],
    )


@pytest.fixture
def duo_offer(netflix):
    return create_offer(
        name='Netflix Duo',
        price=Decimal('28000'),
        platforms=[{'platform_id': netflix.id, 'profile_count': 2}],
    )


@pytest.fixture
def bundle_offer(netflix, spotify):
    return create_offer(
        name='Pack Netflix + Spotify',
        price=Decimal('30000'),
        type=OfferType.BUNDLE,
        platforms=[
            {'platform_id': netflix.id, 'profile_count': 1},
            {'platform_id': spotify.id, 'profile_count': 1, 'is_default': True},
        ],
    )
