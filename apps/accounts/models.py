from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
import uuid


class UserRole(models.TextChoices):
    CLIENT = 'CLIENT', 'Client'
    STAFF = 'STAFF', 'Staff'
    ADMIN = 'ADMIN', 'Admin'


class UserManager(BaseUserManager):
    """User manager for email (or phone-only) customers."""

    def create_user(self, email=None, password=None, **extra_fields):
        if not email and not extra_fields.get('phone'):
            raise ValueError('Email or phone is required')

        email = self.normalize_email(email) if email else None
        role = extra_fields.get('role', UserRole.CLIENT)
        if role in (UserRole.STAFF, UserRole.ADMIN):
            extra_fields['is_staff'] = True

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', UserRole.ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """Customer or back-office user. Email is optional for phone-only customers."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255, null=True, blank=True)
    phone = models.CharField(max_length=30, blank=True, db_index=True)
    first_name = models.CharField(max_length=100, blank=True)
    last_name = models.CharField(max_length=100, blank=True)

    role = models.CharField(max_length=10, choices=UserRole.choices, default=UserRole.CLIENT)
    newsletter = models.BooleanField(default=False)

    # Permissions
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['role']),
            models.Index(fields=['created_at']),
        ]

    def __str__(self):
        return self.email or self.phone or str(self.id)

    def save(self, *args, **kwargs):
        if self.role in (UserRole.STAFF, UserRole.ADMIN):
            self.is_staff = True
        super().save(*args, **kwargs)

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def get_display_name(self):
        """Return full name, falling back to the email prefix or phone."""
        if self.full_name:
            return self.full_name
        if self.email:
            return self.email.split('@')[0]
        return self.phone

    @property
    def is_back_office(self):
        return self.is_superuser or self.role in (UserRole.STAFF, UserRole.ADMIN)

    @property
    def is_admin(self):
        return self.is_superuser or self.role == UserRole.ADMIN


class AddressType(models.TextChoices):
    BILLING = 'BILLING', 'Billing'
    SHIPPING = 'SHIPPING', 'Shipping'


class Address(models.Model):
    """Postal address attached to a user."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='addresses')
    type = models.CharField(max_length=10, choices=AddressType.choices, default=AddressType.BILLING)
    street = models.CharField(max_length=255)
    city = models.CharField(max_length=100)
    zip_code = models.CharField(max_length=20, default='000')
    country = models.CharField(max_length=100, default='Madagascar')
    is_default = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'addresses'
        ordering = ['-is_default', '-created_at']
        verbose_name_plural = 'addresses'

    def __str__(self):
        return f"{self.street}, {self.city} ({self.type})"

    def as_lines(self):
        return [line for line in [self.street, f"{self.zip_code} {self.city}".strip(), self.country] if line]
