from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Sum
from decimal import Decimal
import uuid


class ItemType(models.TextChoices):
    PRODUCT = 'PRODUCT', 'Product'
    SERVICE = 'SERVICE', 'Service'
    OFFER = 'OFFER', 'Subscription offer'


class Cart(models.Model):
    """Shopping cart of a signed-in user or of a guest session."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='cart'
    )
    session_key = models.CharField(max_length=64, unique=True, null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'carts'
        indexes = [
            models.Index(fields=['expires_at']),
        ]

    def __str__(self):
        return f"Cart {self.user or self.session_key}"


class CartItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    cart = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name='items')
    item_type = models.CharField(max_length=10, choices=ItemType.choices)
    product = models.ForeignKey('catalog.Product', on_delete=models.CASCADE, null=True, blank=True)
    service = models.ForeignKey('catalog.Service', on_delete=models.CASCADE, null=True, blank=True)
    offer = models.ForeignKey('streaming.Offer', on_delete=models.CASCADE, null=True, blank=True)
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=14, decimal_places=2)
    added_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'cart_items'
        ordering = ['added_at']

    def __str__(self):
        return f"{self.quantity} × {self.target}"

    @property
    def target(self):
        return self.product or self.service or self.offer

    @property
    def total_price(self):
        return self.unit_price * self.quantity


class OrderStatus(models.TextChoices):
    QUOTE = 'QUOTE', 'Quote'
    PENDING = 'PENDING', 'Pending'
    PARTIALLY_PAID = 'PARTIALLY_PAID', 'Partially paid'
    PAID = 'PAID', 'Paid'
    PROCESSING = 'PROCESSING', 'Processing'
    SHIPPED = 'SHIPPED', 'Shipped'
    DELIVERED = 'DELIVERED', 'Delivered'
    CANCELLED = 'CANCELLED', 'Cancelled'
    REFUNDED = 'REFUNDED', 'Refunded'


class PaymentStatus(models.TextChoices):
    UNPAID = 'UNPAID', 'Unpaid'
    PARTIALLY_PAID = 'PARTIALLY_PAID', 'Partially paid'
    PAID = 'PAID', 'Paid'
    REFUNDED = 'REFUNDED', 'Refunded'


class PaymentMethod(models.TextChoices):
    MOBILE_MONEY = 'mobile_money', 'Mobile money'
    CARD = 'card', 'Card'
    CASH = 'cash', 'Cash'
    BANK_TRANSFER = 'bank_transfer', 'Bank transfer'
    CASH_ON_DELIVERY = 'cash_on_delivery', 'Cash on delivery'


INSTANT_PAYMENT_METHODS = {PaymentMethod.MOBILE_MONEY, PaymentMethod.CARD}

PAID_LIKE_STATUSES = [
    OrderStatus.PAID,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
]


class Order(models.Model):
    """
    Customer order.

    Orders numbered ``DEV-...`` are quotes awaiting payment; the first
    payment gives them a ``CMD-...`` number.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(max_length=20, unique=True)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='orders')
    status = models.CharField(max_length=20, choices=OrderStatus.choices, default=OrderStatus.QUOTE)
    payment_status = models.CharField(max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.UNPAID)
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices, blank=True)
    currency = models.CharField(max_length=3, default='MGA')
    total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    billing_address = models.ForeignKey(
        'accounts.Address',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    shipping_address = models.ForeignKey(
        'accounts.Address',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', '-created_at']),
            models.Index(fields=['user', '-created_at']),
        ]

    def __str__(self):
        return self.order_number

    @property
    def is_quote_number(self):
        return self.order_number.startswith('DEV-')

    @property
    def amount_paid(self):
        return self.payments.filter(status=PaymentRecordStatus.COMPLETED).aggregate(
            total=Sum('base_amount')
        )['total'] or Decimal('0')

    @property
    def balance_due(self):
        return max(self.total - self.amount_paid, Decimal('0'))


class OrderItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    item_type = models.CharField(max_length=10, choices=ItemType.choices)
    product = models.ForeignKey('catalog.Product', on_delete=models.SET_NULL, null=True, blank=True)
    service = models.ForeignKey('catalog.Service', on_delete=models.SET_NULL, null=True, blank=True)
    offer = models.ForeignKey('streaming.Offer', on_delete=models.SET_NULL, null=True, blank=True)
    name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=14, decimal_places=2)
    total_price = models.DecimalField(max_digits=14, decimal_places=2)
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = 'order_items'

    def __str__(self):
        return f"{self.quantity} × {self.name}"


class OrderHistory(models.Model):
    """Audit trail of order events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='history')
    status = models.CharField(max_length=20, choices=OrderStatus.choices)
    previous_status = models.CharField(max_length=20, choices=OrderStatus.choices, blank=True)
    action = models.CharField(max_length=50)
    description = models.TextField(blank=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_history'
        ordering = ['-created_at']
        verbose_name_plural = 'order history'


class PaymentRecordStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    COMPLETED = 'COMPLETED', 'Completed'
    FAILED = 'FAILED', 'Failed'
    REFUNDED = 'REFUNDED', 'Refunded'


class Payment(models.Model):
    """
    Payment received (or refunded) against an order.

    ``amount`` is in the payment ``currency``; ``base_amount`` is the
    same value in the order currency at ``exchange_rate``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='payments')
    amount = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    currency = models.CharField(max_length=3, default='MGA')
    base_amount = models.DecimalField(max_digits=14, decimal_places=2)
    exchange_rate = models.DecimalField(max_digits=20, decimal_places=10, default=Decimal('1'))
    method = models.CharField(max_length=20, choices=PaymentMethod.choices)
    provider = models.CharField(max_length=50, blank=True)
    transaction_id = models.CharField(max_length=100, blank=True)
    reference = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=10, choices=PaymentRecordStatus.choices, default=PaymentRecordStatus.COMPLETED)
    processed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='processed_payments'
    )
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'payments'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.amount} {self.currency} on {self.order.order_number}"


class ReturnStatus(models.TextChoices):
    REQUESTED = 'REQUESTED', 'Requested'
    APPROVED = 'APPROVED', 'Approved'
    REJECTED = 'REJECTED', 'Rejected'
    REFUNDED = 'REFUNDED', 'Refunded'


class ItemCondition(models.TextChoices):
    NEW = 'NEW', 'New'
    USED = 'USED', 'Used'
    DAMAGED = 'DAMAGED', 'Damaged'
    UNKNOWN = 'UNKNOWN', 'Unknown'


class ReturnRequest(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    return_number = models.CharField(max_length=40, unique=True)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='returns')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='returns')
    reason = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=10, choices=ReturnStatus.choices, default=ReturnStatus.REQUESTED)
    requested_amount = models.DecimalField(max_digits=14, decimal_places=2)
    approved_amount = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    refunded_amount = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    admin_notes = models.TextField(blank=True)
    processed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    processed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'returns'
        ordering = ['-created_at']

    def __str__(self):
        return self.return_number


class ReturnItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    return_request = models.ForeignKey(ReturnRequest, on_delete=models.CASCADE, related_name='items')
    order_item = models.ForeignKey(OrderItem, on_delete=models.CASCADE, related_name='return_items')
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    condition = models.CharField(max_length=10, choices=ItemCondition.choices, default=ItemCondition.UNKNOWN)
    reason = models.CharField(max_length=255, blank=True)
    refund_amount = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        db_table = 'return_items'
