"""Catalog search ranked by fuzzy similarity."""

from typing import List, Dict, Any

from fuzzywuzzy import fuzz

from ..models import Product, ProductStatus, Service

# Minimum similarity score (0-100) for a result to be returned
SEARCH_THRESHOLD = 60


def _score(query: str, name: str, description: str = '') -> int:
    query = query.lower().strip()
    name_score = max(fuzz.partial_ratio(query, name.lower()), fuzz.token_set_ratio(query, name.lower()))
    if description:
        # Description hits count for less than name hits
        description_score = fuzz.token_set_ratio(query, description.lower()) - 15
        return max(name_score, description_score)
    return name_score


def search_catalog(*, query: str, limit: int = 20, threshold: int = SEARCH_THRESHOLD) -> List[Dict[str, Any]]:
    """
    Search active products, services and streaming offers.

    Returns:
        Dicts with ``type``, ``id``, ``name``, ``slug``, ``price`` and
        ``score``, best match first.
    """
    from apps.streaming.models import Offer

    if not query or not query.strip():
        return []

    candidates = []
    for product in Product.objects.filter(status=ProductStatus.ACTIVE).only('id', 'name', 'slug', 'price', 'description'):
        candidates.append(('PRODUCT', product, _score(query, product.name, product.description)))
    for service in Service.objects.filter(is_active=True).only('id', 'name', 'slug', 'price', 'description'):
        candidates.append(('SERVICE', service, _score(query, service.name, service.description)))
    for offer in Offer.objects.filter(is_active=True).prefetch_related('platform_offers__platform'):
        platforms = ' '.join(po.platform.name for po in offer.platform_offers.all())
        candidates.append(('OFFER', offer, _score(query, f"{offer.name} {platforms}", offer.description)))

    results = [
        {
            'type': item_type,
            'id': str(item.id),
            'name': item.name,
            'slug': item.slug,
            'price': str(item.price),
            'score': score,
        }
        for item_type, item, score in candidates
        if score >= threshold
    ]
    results.sort(key=lambda r: (-r['score'], r['name']))
    return results[:limit]


def similar_products(*, product: Product, limit: int = 4):
    """Other active products of the same category, newest first."""
    if product.category_id is None:
        return Product.objects.none()
    return (
        Product.objects
        .filter(category_id=product.category_id, status=ProductStatus.ACTIVE)
        .exclude(id=product.id)
        .order_by('-created_at')[:limit]
    )
