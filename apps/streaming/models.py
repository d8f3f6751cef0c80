from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import uuid


class PlatformType(models.TextChoices):
    VIDEO = 'VIDEO', 'Video'
    MUSIC = 'MUSIC', 'Music'
    GAMING = 'GAMING', 'Gaming'
    OTHER = 'OTHER', 'Other'


class Platform(models.Model):
    """Streaming platform (Netflix, Spotify, ...)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=120, unique=True)
    type = models.CharField(max_length=10, choices=PlatformType.choices, default=PlatformType.VIDEO)
    description = models.TextField(blank=True)
    website_url = models.URLField(blank=True)
    has_profiles = models.BooleanField(default=True)
    max_profiles_per_account = models.PositiveSmallIntegerField(default=5)
    has_gift_cards = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'streaming_platforms'
        ordering = ['name']

    def __str__(self):
        return self.name


class AccountStatus(models.TextChoices):
    ACTIVE = 'ACTIVE', 'Active'
    INACTIVE = 'INACTIVE', 'Inactive'
    EXPIRED = 'EXPIRED', 'Expired'


class StreamingAccount(models.Model):
    """Shared platform account whose profiles are resold."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    platform = models.ForeignKey(Platform, on_delete=models.PROTECT, related_name='accounts')
    username = models.CharField(max_length=150)
    email = models.EmailField(blank=True)
    password = models.CharField(max_length=255)
    status = models.CharField(max_length=10, choices=AccountStatus.choices, default=AccountStatus.ACTIVE)
    availability = models.BooleanField(default=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'streaming_accounts'
        ordering = ['platform__name', 'username']
        indexes = [
            models.Index(fields=['platform', 'status']),
            models.Index(fields=['expires_at']),
        ]

    def __str__(self):
        return f"{self.platform.name}: {self.username}"

    @property
    def free_profiles(self):
        return self.profiles.filter(is_assigned=False)


class AccountProfile(models.Model):
    """One profile slot (1..max_profiles_per_account) of a streaming account."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    account = models.ForeignKey(StreamingAccount, on_delete=models.CASCADE, related_name='profiles')
    profile_slot = models.PositiveSmallIntegerField()
    name = models.CharField(max_length=150)
    pin = models.CharField(max_length=10, blank=True)
    is_assigned = models.BooleanField(default=False)
    subscription = models.ForeignKey(
        'Subscription',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='profiles'
    )

    class Meta:
        db_table = 'streaming_account_profiles'
        ordering = ['account', 'profile_slot']
        constraints = [
            models.UniqueConstraint(fields=['account', 'profile_slot'], name='unique_profile_slot'),
        ]

    def __str__(self):
        return self.name

    def default_name(self):
        return f"{self.account.username} - Profile {self.profile_slot}"


class OfferType(models.TextChoices):
    SINGLE = 'SINGLE', 'Single platform'
    BUNDLE = 'BUNDLE', 'Bundle'


class DurationUnit(models.TextChoices):
    DAY = 'DAY', 'Day'
    MONTH = 'MONTH', 'Month'
    YEAR = 'YEAR', 'Year'


class Offer(models.Model):
    """Sellable subscription offer covering one or more platforms."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=150)
    slug = models.SlugField(max_length=180, unique=True)
    description = models.TextField(blank=True)
    type = models.CharField(max_length=10, choices=OfferType.choices, default=OfferType.SINGLE)
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    duration = models.PositiveIntegerField(default=1)
    duration_unit = models.CharField(max_length=5, choices=DurationUnit.choices, default=DurationUnit.MONTH)
    max_profiles = models.PositiveSmallIntegerField(default=1)
    features = models.JSONField(default=list, blank=True)
    is_popular = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    platforms = models.ManyToManyField(Platform, through='PlatformOffer', related_name='offers')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'streaming_offers'
        ordering = ['-is_popular', 'price']

    def __str__(self):
        return self.name


class PlatformOffer(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    offer = models.ForeignKey(Offer, on_delete=models.CASCADE, related_name='platform_offers')
    platform = models.ForeignKey(Platform, on_delete=models.PROTECT, related_name='platform_offers')
    profile_count = models.PositiveSmallIntegerField(default=1)
    is_default = models.BooleanField(default=False)

    class Meta:
        db_table = 'streaming_platform_offers'
        constraints = [
            models.UniqueConstraint(fields=['offer', 'platform'], name='unique_offer_platform'),
        ]

    def __str__(self):
        return f"{self.offer.name} / {self.platform.name}"


class SubscriptionStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    ACTIVE = 'ACTIVE', 'Active'
    EXPIRED = 'EXPIRED', 'Expired'
    CANCELLED = 'CANCELLED', 'Cancelled'


class Subscription(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='subscriptions')
    offer = models.ForeignKey(Offer, on_delete=models.PROTECT, related_name='subscriptions')
    order = models.ForeignKey(
        'orders.Order',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='subscriptions'
    )
    platform_offer = models.ForeignKey(
        PlatformOffer,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='subscriptions'
    )
    status = models.CharField(max_length=10, choices=SubscriptionStatus.choices, default=SubscriptionStatus.PENDING)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    auto_renew = models.BooleanField(default=False)
    accounts = models.ManyToManyField(StreamingAccount, blank=True, related_name='subscriptions')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'streaming_subscriptions'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'end_date']),
            models.Index(fields=['user', 'status']),
        ]

    def __str__(self):
        return f"{self.offer.name} for {self.user}"


class GiftCardStatus(models.TextChoices):
    ACTIVE = 'ACTIVE', 'Active'
    USED = 'USED', 'Used'
    EXPIRED = 'EXPIRED', 'Expired'


class GiftCard(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    platform = models.ForeignKey(Platform, on_delete=models.PROTECT, related_name='gift_cards')
    code = models.CharField(max_length=64, unique=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3, default='MGA')
    status = models.CharField(max_length=10, choices=GiftCardStatus.choices, default=GiftCardStatus.ACTIVE)
    used_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='redeemed_gift_cards'
    )
    used_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'streaming_gift_cards'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.platform.name} {self.amount} {self.currency}"
