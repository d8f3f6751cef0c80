import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from django.utils import timezone
from apps.streaming.models import (
    DurationUnit,
    GiftCardStatus,
    OfferType,
    SubscriptionStatus,
)
from apps.streaming.services import (
    compute_end_date,
    create_account,
    create_offer,
    update_account,
    delete_profile,
    validate_offer,
    create_subscription,
    assign_profiles,
    release_profiles,
    cancel_subscription,
    activate_subscription,
    renew_subscription,
    expire_subscriptions,
    create_gift_card,
    redeem_gift_card,
    AccountUpdateError,
    ProfileDeletionError,
    OfferValidationError,
    ProfileAssignmentError,
    InvalidSubscriptionStateError,
    GiftCardUnavailableError,
    GiftCardNotFoundError,
)


class TestComputeEndDate:

    def test_month_clamps_to_month_end(self):
        start = datetime(2024, 1, 31, 10, 0)

        assert compute_end_date(start, 1, DurationUnit.MONTH) == datetime(2024, 2, 29, 10, 0)

    def test_days(self):
        start = datetime(2024, 1, 1)

        assert compute_end_date(start, 7, DurationUnit.DAY) == datetime(2024, 1, 8)

    def test_year_on_leap_day(self):
        start = datetime(2024, 2, 29)

        assert compute_end_date(start, 1, DurationUnit.YEAR) == datetime(2025, 2, 28)


@pytest.mark.django_db
class TestAccountManagement:

    def test_create_account_creates_profile_slots(self, netflix_account):
        profiles = list(netflix_account.profiles.order_by('profile_slot'))

        assert len(profiles) == 5
        assert profiles[0].name == 'nf-shared-01 - Profile 1'
        assert profiles[4].profile_slot == 5

    def test_username_change_renames_free_profiles(self, netflix_account):
        update_account(account_id=netflix_account.id, data={'username': 'nf-shared-99'})

        assert netflix_account.profiles.get(profile_slot=2).name == 'nf-shared-99 - Profile 2'

    def test_platform_change_blocked_with_profiles(self, netflix_account, spotify):
        with pytest.raises(AccountUpdateError):
            update_account(account_id=netflix_account.id, data={'platform': spotify})

    def test_cannot_delete_last_profile(self, spotify):
        account = create_account(platform_id=spotify.id, username='sp-01', password='x')
        first, second = account.profiles.order_by('profile_slot')
        delete_profile(profile_id=first.id)

        with pytest.raises(ProfileDeletionError):
            delete_profile(profile_id=second.id)

    def test_cannot_delete_assigned_profile(self, netflix_account, single_offer, user):
        subscription = create_subscription(user=user, offer=single_offer)
        profile = subscription.profiles.first()

        with pytest.raises(ProfileDeletionError):
            delete_profile(profile_id=profile.id)


@pytest.mark.django_db
class TestOffers:

    def test_single_offer_needs_exactly_one_platform(self, netflix, spotify):
        with pytest.raises(OfferValidationError):
            validate_offer(
                type=OfferType.SINGLE,
                price=Decimal('1000'),
                duration=1,
                platforms=[{'platform_id': netflix.id}, {'platform_id': spotify.id}],
            )

    def test_price_must_be_positive(self, netflix):
        with pytest.raises(OfferValidationError):
            validate_offer(type=OfferType.SINGLE, price=0, duration=1, platforms=[{'platform_id': netflix.id}])

    def test_bundle_max_profiles_is_sum(self, bundle_offer):
        assert bundle_offer.max_profiles == 2
        assert bundle_offer.platform_offers.get(is_default=True).platform.name == 'Spotify'

    def test_first_platform_default_when_none_flagged(self, single_offer, netflix):
        assert single_offer.platform_offers.get().is_default is True


@pytest.mark.django_db
class TestSubscriptions:

    def test_profiles_assigned_and_renamed(self, netflix_account, duo_offer, user):
        subscription = create_subscription(user=user, offer=duo_offer)

        names = sorted(subscription.profiles.values_list('name', flat=True))
        assert names == ['Test 2', 'Test Main']
        assert subscription.status == SubscriptionStatus.PENDING
        assert list(subscription.accounts.all()) == [netflix_account]

    def test_full_account_becomes_unavailable(self, spotify, user):
        account = create_account(platform_id=spotify.id, username='sp-01', password='x')
        offer = create_offer(
            name='Spotify Duo',
            price=Decimal('12000'),
            platforms=[{'platform_id': spotify.id, 'profile_count': 2}],
        )

        create_subscription(user=user, offer=offer, activate=True)

        account.refresh_from_db()
        assert account.availability is False

    def test_no_account_still_creates_subscription(self, single_offer, user):
        subscription = create_subscription(user=user, offer=single_offer)

        assert subscription.profiles.count() == 0

    def test_over_allocation_rejected(self, netflix_account, single_offer, user):
        subscription = create_subscription(user=user, offer=single_offer)
        free = netflix_account.profiles.filter(is_assigned=False).first()

        with pytest.raises(ProfileAssignmentError):
            assign_profiles(subscription_id=subscription.id, profile_ids=[free.id])

    def test_already_assigned_profile_rejected(self, netflix_account, single_offer, user, other_user):
        first = create_subscription(user=user, offer=single_offer)
        taken = first.profiles.first()
        second = create_subscription(user=other_user, offer=single_offer)
        release_profiles(subscription_id=second.id)

        with pytest.raises(ProfileAssignmentError):
            assign_profiles(subscription_id=second.id, profile_ids=[taken.id])

    def test_cancel_releases_profiles(self, netflix_account, duo_offer, user):
        subscription = create_subscription(user=user, offer=duo_offer, activate=True)

        cancel_subscription(subscription_id=subscription.id)

        subscription.refresh_from_db()
        assert subscription.status == SubscriptionStatus.CANCELLED
        assert not netflix_account.profiles.filter(is_assigned=True).exists()
        assert netflix_account.profiles.get(profile_slot=1).name == 'nf-shared-01 - Profile 1'

    def test_cancel_twice(self, single_offer, user):
        subscription = create_subscription(user=user, offer=single_offer)
        cancel_subscription(subscription_id=subscription.id)

        with pytest.raises(InvalidSubscriptionStateError):
            cancel_subscription(subscription_id=subscription.id)

    def test_activate_restarts_period(self, single_offer, user):
        subscription = create_subscription(
            user=user, offer=single_offer, start_date=timezone.now() - timedelta(days=10)
        )

        subscription = activate_subscription(subscription_id=subscription.id)

        assert subscription.status == SubscriptionStatus.ACTIVE
        assert subscription.end_date > timezone.now() + timedelta(days=27)

    def test_expire_and_renew(self, netflix_account, single_offer, user):
        subscription = create_subscription(
            user=user,
            offer=single_offer,
            activate=True,
            start_date=timezone.now() - timedelta(days=40),
        )

        assert expire_subscriptions() == 1
        subscription.refresh_from_db()
        assert subscription.status == SubscriptionStatus.EXPIRED
        assert subscription.profiles.count() == 0

        subscription = renew_subscription(subscription_id=subscription.id)
        assert subscription.status == SubscriptionStatus.ACTIVE
        assert subscription.end_date > timezone.now()
        assert subscription.profiles.count() == 1


@pytest.mark.django_db
class TestGiftCards:

    def test_platform_without_gift_cards(self, netflix):
        with pytest.raises(GiftCardUnavailableError):
            create_gift_card(platform_id=netflix.id, amount=Decimal('50000'))

    def test_generated_code_format(self, spotify):
        card = create_gift_card(platform_id=spotify.id, amount=Decimal('50000'))

        parts = card.code.split('-')
        assert len(parts) == 4
        assert all(len(part) == 4 for part in parts)

    def test_redeem_once(self, spotify, user):
        card = create_gift_card(platform_id=spotify.id, amount=Decimal('50000'), code='abcd-efgh')

        redeemed = redeem_gift_card(code='ABCD-EFGH', user=user)
        assert redeemed.status == GiftCardStatus.USED
        assert redeemed.used_by == user

        with pytest.raises(GiftCardUnavailableError):
            redeem_gift_card(code=card.code, user=user)

    def test_expired_card(self, spotify, user):
        create_gift_card(
            platform_id=spotify.id,
            amount=Decimal('50000'),
            code='OLD-CARD',
            expires_at=timezone.now() - timedelta(days=1),
        )

        with pytest.raises(GiftCardUnavailableError):
            redeem_gift_card(code='OLD-CARD', user=user)

    def test_unknown_code(self, user):
        with pytest.raises(GiftCardNotFoundError):
            redeem_gift_card(code='NOPE', user=user)
