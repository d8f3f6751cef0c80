"""Services for streaming subscription resale."""

from .exceptions import (
    StreamingServiceError,
    PlatformNotFoundError,
    AccountNotFoundError,
    AccountUpdateError,
    ProfileDeletionError,
    OfferValidationError,
    OfferNotFoundError,
    SubscriptionNotFoundError,
    InvalidSubscriptionStateError,
    ProfileAssignmentError,
    GiftCardError,
    GiftCardNotFoundError,
    GiftCardUnavailableError,
)
from .account_management import create_platform, create_account, update_account, delete_profile
from .offer_management import validate_offer, create_offer, update_offer
from .subscription_management import (
    ProfileReservation,
    compute_end_date,
    find_available_account,
    create_subscription,
    assign_profiles,
    release_profiles,
    activate_subscription,
    cancel_subscription,
    renew_subscription,
    expire_subscriptions,
)
from .gift_cards import generate_gift_card_code, create_gift_card, redeem_gift_card, expire_gift_cards

__all__ = [
    # Exceptions
    'StreamingServiceError',
    'PlatformNotFoundError',
    'AccountNotFoundError',
    'AccountUpdateError',
    'ProfileDeletionError',
    'OfferValidationError',
    'OfferNotFoundError',
    'SubscriptionNotFoundError',
    'InvalidSubscriptionStateError',
    'ProfileAssignmentError',
    'GiftCardError',
    'GiftCardNotFoundError',
    'GiftCardUnavailableError',
    # Accounts
    'create_platform',
    'create_account',
    'update_account',
    'delete_profile',
    # Offers
    'validate_offer',
    'create_offer',
    'update_offer',
    # Subscriptions
    'ProfileReservation',
    'compute_end_date',
    'find_available_account',
    'create_subscription',
    'assign_profiles',
    'release_profiles',
    'activate_subscription',
    'cancel_subscription',
    'renew_subscription',
    'expire_subscriptions',
    # Gift cards
    'generate_gift_card_code',
    'create_gift_card',
    'redeem_gift_card',
    'expire_gift_cards',
]
