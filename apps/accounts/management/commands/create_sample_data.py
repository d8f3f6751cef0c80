"""
Management command to create sample data for trying the API.

Usage:
    python manage.py create_sample_data

This creates:
- 4 users (admin, staff, two clients)
- Product and service categories
- 6 products and 3 services
- 3 streaming platforms with shared accounts
- 3 subscription offers
- Default exchange rates and shop settings
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils.text import slugify
from decimal import Decimal

from apps.accounts.models import User, UserRole
from apps.catalog.models import Category, CategoryKind, Product, ProductStatus, Service, PricingType
from apps.currency.models import ExchangeRate, RateSource, DEFAULT_RATES, BASE_CURRENCY
from apps.siteconfig.models import SettingType, SettingGroup
from apps.siteconfig.services import set_setting
from apps.streaming.models import (
    Platform, StreamingAccount, Offer, OfferType, PlatformType, Subscription, GiftCard,
)
from apps.streaming.services import create_platform, create_account, create_offer


class Command(BaseCommand):
    help = 'Create sample data for trying the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear catalog and streaming data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        self.create_users()
        categories = self.create_categories()
        self.create_products(categories)
        self.create_services(categories)
        self.create_streaming()
        self.create_settings()

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (admin)')
        self.stdout.write('  staff@example.com / password123 (staff)')
        self.stdout.write('  rova@example.com / password123')
        self.stdout.write('  hery@example.com / password123')

    def clear_data(self):
        """Clear catalog and streaming data. Orders and users are kept."""
        Subscription.objects.all().delete()
        GiftCard.objects.all().delete()
        Offer.objects.all().delete()
        StreamingAccount.objects.all().delete()
        Platform.objects.all().delete()
        Product.objects.all().delete()
        Service.objects.all().delete()
        Category.objects.all().delete()

    def create_users(self):
        self.stdout.write('  Creating users...')

        people = [
            ('admin@example.com', 'admin123', 'Admin', 'Boutique', UserRole.ADMIN),
            ('staff@example.com', 'password123', 'Fara', 'Rakoto', UserRole.STAFF),
            ('rova@example.com', 'password123', 'Rova', 'Andriamanana', UserRole.CLIENT),
            ('hery@example.com', 'password123', 'Hery', 'Rasoa', UserRole.CLIENT),
        ]
        for email, password, first_name, last_name, role in people:
            user, created = User.objects.get_or_create(
                email=email,
                defaults={
                    'first_name': first_name,
                    'last_name': last_name,
                    'role': role,
                    'is_staff': role != UserRole.CLIENT,
                    'is_superuser': role == UserRole.ADMIN,
                }
            )
            if created:
                user.set_password(password)
                user.save()

    def create_categories(self):
        self.stdout.write('  Creating categories...')

        specs = {
            'peripherals': ('Périphériques', CategoryKind.PRODUCT),
            'components': ('Composants', CategoryKind.PRODUCT),
            'repair': ('Dépannage', CategoryKind.SERVICE),
            'web': ('Développement web', CategoryKind.SERVICE),
        }
        categories = {}
        for slug, (name, kind) in specs.items():
            categories[slug], _ = Category.objects.get_or_create(
                slug=slug,
                defaults={'name': name, 'kind': kind},
            )
        return categories

    def create_products(self, categories):
        self.stdout.write('  Creating products...')

        products = [
            ('Clavier mécanique RGB', 'peripherals', '185000', 12),
            ('Souris sans fil', 'peripherals', '65000', 30),
            ('Casque gaming 7.1', 'peripherals', '240000', 4),
            ('SSD NVMe 1 To', 'components', '420000', 8),
            ('Barrette RAM 16 Go DDR4', 'components', '210000', 3),
            ('Carte graphique RTX 4060', 'components', '1950000', 0),
        ]
        for name, category, price, stock in products:
            Product.objects.get_or_create(
                slug=slugify(name),
                defaults={
                    'name': name,
                    'category': categories[category],
                    'price': Decimal(price),
                    'stock': stock,
                    'status': ProductStatus.ACTIVE,
                }
            )

    def create_services(self, categories):
        self.stdout.write('  Creating services...')

        services = [
            ('Installation Windows', 'repair', '30000', PricingType.FIXED),
            ('Réparation PC portable', 'repair', '25000', PricingType.HOURLY),
            ('Site vitrine', 'web', '0', PricingType.QUOTE),
        ]
        for name, category, price, pricing_type in services:
            Service.objects.get_or_create(
                slug=slugify(name),
                defaults={
                    'name': name,
                    'category': categories[category],
                    'price': Decimal(price),
                    'pricing_type': pricing_type,
                }
            )

    def create_streaming(self):
        self.stdout.write('  Creating platforms, accounts and offers...')

        if Platform.objects.exists():
            self.stdout.write('    Streaming data already present, skipped')
            return

        netflix = create_platform(name='Netflix', has_profiles=True, max_profiles_per_account=5)
        spotify = create_platform(
            name='Spotify',
            type=PlatformType.MUSIC,
            has_profiles=True,
            max_profiles_per_account=6,
        )
        disney = create_platform(name='Disney+', has_profiles=True, max_profiles_per_account=4)

        for platform, count in ((netflix, 2), (spotify, 1), (disney, 1)):
            for index in range(1, count + 1):
                create_account(
                    platform_id=platform.id,
                    username=f'{platform.slug}-shared-{index:02d}',
                    password='change-me',
                )

        create_offer(
            name='Netflix 1 écran',
            price=Decimal('15000'),
            platforms=[{'platform_id': netflix.id, 'profile_count': 1}],
            is_popular=True,
        )
        create_offer(
            name='Spotify Premium',
            price=Decimal('10000'),
            platforms=[{'platform_id': spotify.id, 'profile_count': 1}],
        )
        create_offer(
            name='Pack Ciné',
            type=OfferType.BUNDLE,
            price=Decimal('25000'),
            platforms=[
                {'platform_id': netflix.id, 'profile_count': 1},
                {'platform_id': disney.id, 'profile_count': 1},
            ],
        )

    def create_settings(self):
        self.stdout.write('  Creating exchange rates and settings...')

        for code, rate in DEFAULT_RATES.items():
            if code == BASE_CURRENCY:
                continue
            ExchangeRate.objects.get_or_create(
                currency=code,
                defaults={'rate': rate, 'source': RateSource.MANUAL},
            )

        set_setting(key='low_stock_threshold', value=5, type=SettingType.NUMBER, group=SettingGroup.GENERAL)
