"""Offer creation and validation."""

import logging
from decimal import Decimal
from typing import List, Dict, Any, Optional
from uuid import UUID

from django.db import transaction

from apps.catalog.services import unique_slug
from ..models import Offer, OfferType, PlatformOffer, Platform, DurationUnit
from .exceptions import OfferValidationError, OfferNotFoundError

logger = logging.getLogger(__name__)


def validate_offer(*, type: str, price, duration: int, platforms: List[Dict[str, Any]]) -> List[Platform]:
    """
    Check offer rules and return the referenced platforms.

    ``platforms`` is a list of ``{"platform_id", "profile_count", "is_default"}``.
    """
    if not platforms:
        raise OfferValidationError("An offer needs at least one platform")
    if type == OfferType.SINGLE and len(platforms) != 1:
        raise OfferValidationError("A SINGLE offer must have exactly one platform")
    if price is None or Decimal(str(price)) <= 0:
        raise OfferValidationError("Price must be greater than 0")
    if not duration or duration <= 0:
        raise OfferValidationError("Duration must be greater than 0")

    ids = [entry['platform_id'] for entry in platforms]
    if len(set(ids)) != len(ids):
        raise OfferValidationError("A platform is listed twice")
    found = {p.id: p for p in Platform.objects.filter(id__in=ids)}
    missing = [str(pid) for pid in ids if pid not in found]
    if missing:
        raise OfferValidationError(f"Unknown platform(s): {', '.join(missing)}")
    return [found[pid] for pid in ids]


def _set_platforms(offer: Offer, platforms: List[Dict[str, Any]], platform_objs: List[Platform]) -> None:
    offer.platform_offers.all().delete()
    has_default = any(entry.get('is_default') for entry in platforms)
    for index, (entry, platform) in enumerate(zip(platforms, platform_objs)):
        PlatformOffer.objects.create(
            offer=offer,
            platform=platform,
            profile_count=entry.get('profile_count', 1),
            is_default=entry.get('is_default', False) if has_default else index == 0,
        )
    offer.max_profiles = sum(entry.get('profile_count', 1) for entry in platforms)
    offer.save(update_fields=['max_profiles', 'updated_at'])


@transaction.atomic
def create_offer(
    *,
    name: str,
    price: Decimal,
    platforms: List[Dict[str, Any]],
    type: str = OfferType.SINGLE,
    duration: int = 1,
    duration_unit: str = DurationUnit.MONTH,
    description: str = '',
    features: Optional[list] = None,
    is_popular: bool = False,
    is_active: bool = True,
) -> Offer:
    """
    Create an offer; ``max_profiles`` is the sum of the platforms'
    profile counts.

    Raises:
        OfferValidationError: Platform, price or duration rule broken
    """
    platform_objs = validate_offer(type=type, price=price, duration=duration, platforms=platforms)

    offer = Offer.objects.create(
        name=name,
        slug=unique_slug(Offer, name, max_length=180),
        price=price,
        type=type,
        duration=duration,
        duration_unit=duration_unit,
        description=description,
        features=features or [],
        is_popular=is_popular,
        is_active=is_active,
    )
    _set_platforms(offer, platforms, platform_objs)
    logger.info("Created offer %s with %d platform(s)", offer.slug, len(platform_objs))
    return offer


@transaction.atomic
def update_offer(*, offer_id: UUID, data: Dict[str, Any]) -> Offer:
    try:
        offer = Offer.objects.select_for_update().get(id=offer_id)
    except Offer.DoesNotExist:
        raise OfferNotFoundError(f"Offer {offer_id} not found")

    data = dict(data)
    platforms = data.pop('platforms', None)
    merged_type = data.get('type', offer.type)
    merged_price = data.get('price', offer.price)
    merged_duration = data.get('duration', offer.duration)
    if platforms is None:
        platforms = [
            {'platform_id': po.platform_id, 'profile_count': po.profile_count, 'is_default': po.is_default}
            for po in offer.platform_offers.all()
        ]
        platform_objs = validate_offer(type=merged_type, price=merged_price, duration=merged_duration, platforms=platforms)
        replace_platforms = False
    else:
        platform_objs = validate_offer(type=merged_type, price=merged_price, duration=merged_duration, platforms=platforms)
        replace_platforms = True

    if 'name' in data and data['name'] != offer.name:
        offer.slug = unique_slug(Offer, data['name'], instance_id=offer.id, max_length=180)
    for field, value in data.items():
        setattr(offer, field, value)
    offer.save()

    if replace_platforms:
        _set_platforms(offer, platforms, platform_objs)
    return offer
