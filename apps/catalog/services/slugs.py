"""Unique slug generation."""

from django.utils.text import slugify


def unique_slug(model, value: str, *, instance_id=None, max_length: int = 255) -> str:
    """Slugify ``value`` and append -2, -3, ... until unused for ``model``."""
    base = slugify(value)[:max_length] or 'item'
    slug = base
    counter = 2
    queryset = model.objects.all()
    if instance_id is not None:
        queryset = queryset.exclude(pk=instance_id)
    while queryset.filter(slug=slug).exists():
        suffix = f"-{counter}"
        slug = f"{base[:max_length - len(suffix)]}{suffix}"
        counter += 1
    return slug
