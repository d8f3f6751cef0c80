"""Gift card issuing and redemption."""

import logging
import secrets
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from ..models import GiftCard, GiftCardStatus, Platform
from .exceptions import PlatformNotFoundError, GiftCardNotFoundError, GiftCardUnavailableError

logger = logging.getLogger(__name__)

CODE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'


def generate_gift_card_code() -> str:
    """Random code formatted XXXX-XXXX-XXXX-XXXX."""
    while True:
        raw = ''.join(secrets.choice(CODE_ALPHABET) for _ in range(16))
        code = '-'.join(raw[i:i + 4] for i in range(0, 16, 4))
        if not GiftCard.objects.filter(code=code).exists():
            return code


@transaction.atomic
def create_gift_card(
    *,
    platform_id: UUID,
    amount: Decimal,
    currency: str = 'MGA',
    code: Optional[str] = None,
    expires_at: Optional[datetime] = None,
) -> GiftCard:
    """
    Raises:
        PlatformNotFoundError: Unknown platform
        GiftCardUnavailableError: Platform has no gift cards or code already exists
    """
    try:
        platform = Platform.objects.get(id=platform_id)
    except Platform.DoesNotExist:
        raise PlatformNotFoundError(f"Platform {platform_id} not found")

    if not platform.has_gift_cards:
        raise GiftCardUnavailableError(f"{platform.name} does not sell gift cards")
    if Decimal(str(amount)) <= 0:
        raise GiftCardUnavailableError("Gift card amount must be positive")

    code = (code or '').strip().upper() or generate_gift_card_code()
    if GiftCard.objects.filter(code=code).exists():
        raise GiftCardUnavailableError(f"Gift card code {code} already exists")

    card = GiftCard.objects.create(
        platform=platform,
        code=code,
        amount=amount,
        currency=currency.upper(),
        expires_at=expires_at,
    )
    logger.info("Issued %s gift card %s", platform.name, card.id)
    return card


@transaction.atomic
def redeem_gift_card(*, code: str, user) -> GiftCard:
    """
    Mark a gift card as used by ``user``.

    Raises:
        GiftCardNotFoundError: Unknown code
        GiftCardUnavailableError: Already used or expired
    """
    try:
        card = GiftCard.objects.select_for_update().get(code=code.strip().upper())
    except GiftCard.DoesNotExist:
        raise GiftCardNotFoundError("Gift card not found")

    now = timezone.now()
    if card.status == GiftCardStatus.ACTIVE and card.expires_at and card.expires_at <= now:
        card.status = GiftCardStatus.EXPIRED
        card.save(update_fields=['status'])
    if card.status != GiftCardStatus.ACTIVE:
        logger.warning("Refused redemption of %s gift card %s", card.status, card.id)
        raise GiftCardUnavailableError(f"Gift card is {card.status.lower()}")

    card.status = GiftCardStatus.USED
    card.used_by = user
    card.used_at = now
    card.save(update_fields=['status', 'used_by', 'used_at'])
    logger.info("Gift card %s redeemed by %s", card.id, user.id)
    return card


def expire_gift_cards(*, now: Optional[datetime] = None) -> int:
    now = now or timezone.now()
    return GiftCard.objects.filter(
        status=GiftCardStatus.ACTIVE,
        expires_at__isnull=False,
        expires_at__lte=now,
    ).update(status=GiftCardStatus.EXPIRED)
