from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import uuid


class CategoryKind(models.TextChoices):
    PRODUCT = 'PRODUCT', 'Product'
    SERVICE = 'SERVICE', 'Service'


class Category(models.Model):
    """Product or service category; ``parent`` makes it a subcategory."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=120, unique=True)
    parent = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='children'
    )
    kind = models.CharField(max_length=10, choices=CategoryKind.choices, default=CategoryKind.PRODUCT)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'categories'
        ordering = ['name']
        verbose_name_plural = 'categories'

    def __str__(self):
        return f"{self.parent.name} / {self.name}" if self.parent_id else self.name


class ProductStatus(models.TextChoices):
    DRAFT = 'DRAFT', 'Draft'
    ACTIVE = 'ACTIVE', 'Active'
    ARCHIVED = 'ARCHIVED', 'Archived'


class Product(models.Model):
    """Physical product sold in MGA, possibly imported on demand."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=280, unique=True)
    description = models.TextField(blank=True)
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='products'
    )

    price = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))]
    )
    compare_at_price = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)

    stock = models.PositiveIntegerField(default=0)
    track_inventory = models.BooleanField(default=True)
    weight_kg = models.DecimalField(max_digits=8, decimal_places=3, null=True, blank=True)
    status = models.CharField(max_length=10, choices=ProductStatus.choices, default=ProductStatus.DRAFT)
    images = models.JSONField(default=list, blank=True)

    # Imported products
    is_imported = models.BooleanField(default=False)
    supplier_url = models.URLField(max_length=500, blank=True)
    supplier_price = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    supplier_currency = models.CharField(max_length=3, blank=True)
    warehouse = models.CharField(max_length=20, blank=True)
    import_mode = models.CharField(max_length=5, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status']),
            models.Index(fields=['category', 'status']),
        ]

    def __str__(self):
        return self.name

    @property
    def in_stock(self):
        return not self.track_inventory or self.stock > 0


class PricingType(models.TextChoices):
    FIXED = 'FIXED', 'Fixed price'
    HOURLY = 'HOURLY', 'Hourly'
    QUOTE = 'QUOTE', 'On quote'


class Service(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=280, unique=True)
    description = models.TextField(blank=True)
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='services'
    )
    price = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    pricing_type = models.CharField(max_length=10, choices=PricingType.choices, default=PricingType.FIXED)
    duration_minutes = models.PositiveIntegerField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'services'
        ordering = ['name']

    def __str__(self):
        return self.name


class StockMovement(models.Model):
    """Audit trail of stock changes."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='stock_movements')
    delta = models.IntegerField()
    reason = models.CharField(max_length=255)
    resulting_stock = models.PositiveIntegerField()
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='stock_movements'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'stock_movements'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.product.name}: {self.delta:+d}"
