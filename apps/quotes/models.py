import uuid
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class QuoteStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    NEGOTIATING = 'NEGOTIATING', 'Negotiating'
    ACCEPTED = 'ACCEPTED', 'Accepted'
    REJECTED = 'REJECTED', 'Rejected'
    CONVERTED = 'CONVERTED', 'Converted'


class Quote(models.Model):
    """Price request for a service or product, negotiated through messages."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='quotes')
    service = models.ForeignKey(
        'catalog.Service',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='quotes'
    )
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='quotes'
    )
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    description = models.TextField(blank=True)
    budget = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    # Price currently on the table: the client's offer or the last counter-offer
    proposed_price = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    final_price = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    status = models.CharField(max_length=12, choices=QuoteStatus.choices, default=QuoteStatus.PENDING)
    valid_until = models.DateTimeField(null=True, blank=True)
    order = models.ForeignKey(
        'orders.Order',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='quotes'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'quotes'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'status']),
            models.Index(fields=['status']),
        ]

    def __str__(self):
        return f"Quote {self.item_name} for {self.user}"

    @property
    def target(self):
        return self.service or self.product

    @property
    def item_name(self):
        target = self.target
        return target.name if target else 'Article'


class QuoteMessage(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    quote = models.ForeignKey(Quote, on_delete=models.CASCADE, related_name='messages')
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='quote_messages'
    )
    message = models.TextField()
    proposed_price = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    is_system_message = models.BooleanField(default=False)
    metadata = models.JSONField(default=dict, blank=True)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'quote_messages'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.quote_id}: {self.message[:40]}"
