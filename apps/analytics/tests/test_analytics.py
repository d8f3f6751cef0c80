import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
from apps.analytics.analytics import DashboardQueries, _change
from apps.analytics.exceptions import InvalidPeriodError
from apps.catalog.models import Product, ProductStatus
from apps.orders.models import OrderStatus
from apps.siteconfig.models import SettingType
from apps.siteconfig.services import set_setting
from apps.tasks.models import Task, TaskPriority, TaskStatus


class TestChange:

    def test_percentage(self):
        assert _change(150, 100) == 50.0
        assert _change(Decimal('50'), Decimal('200')) == -75.0

    def test_from_zero(self):
        assert _change(3, 0) == 100.0
        assert _change(0, 0) == 0.0


@pytest.mark.django_db
class TestOverview:

    def test_revenue_counts_paid_like_orders_only(self, make_order):
        make_order(total='100000', status=OrderStatus.PAID)
        make_order(total='50000', status=OrderStatus.DELIVERED)
        make_order(total='999000', status=OrderStatus.PENDING)
        make_order(total='777000', status=OrderStatus.CANCELLED)

        overview = DashboardQueries.overview()

        assert overview['total_orders'] == 4
        assert overview['pending_orders'] == 2
        assert overview['total_revenue'] == Decimal('150000')

    def test_empty_revenue_is_zero(self, db):
        assert DashboardQueries.overview()['total_revenue'] == Decimal('0')

    def test_low_stock_uses_configured_threshold(self, db):
        Product.objects.create(name='A', slug='a', price=1, stock=2, status=ProductStatus.ACTIVE)
        Product.objects.create(name='B', slug='b', price=1, stock=8, status=ProductStatus.ACTIVE)
        Product.objects.create(name='C', slug='c', price=1, stock=0, track_inventory=False, status=ProductStatus.ACTIVE)

        assert DashboardQueries.overview()['low_stock_products'] == 1

        set_setting(key='low_stock_threshold', value=10, type=SettingType.NUMBER)
        assert DashboardQueries.overview()['low_stock_products'] == 2


@pytest.mark.django_db
class TestGrowth:

    def test_compares_rolling_windows(self, make_order, now):
        make_order(total='200000', created_at=now - timedelta(days=3))
        make_order(total='100000', created_at=now - timedelta(days=10))
        make_order(total='100000', created_at=now - timedelta(days=45))

        growth = DashboardQueries.growth(now=now)

        assert growth['orders'] == {'current': 2, 'previous': 1, 'change': 100.0}
        assert growth['revenue']['current'] == Decimal('300000')
        assert growth['revenue']['change'] == 200.0


@pytest.mark.django_db
class TestRevenueSeries:

    def test_fills_empty_months_oldest_first(self, make_order, now):
        make_order(total='100000', created_at=now - timedelta(days=2))
        make_order(total='40000', status=OrderStatus.PENDING, created_at=now - timedelta(days=3))
        make_order(total='60000', created_at=now - timedelta(days=60))

        series = DashboardQueries.revenue_series(months=3, now=now)

        assert [row['period'] for row in series] == ['2026-01', '2026-02', '2026-03']
        assert series[0]['orders'] == 1
        assert series[0]['revenue'] == Decimal('60000')
        assert series[1] == {'period': '2026-02', 'orders': 0, 'revenue': Decimal('0')}
        assert series[2]['orders'] == 2
        assert series[2]['revenue'] == Decimal('100000')

    def test_crosses_year_boundary(self, db, now):
        series = DashboardQueries.revenue_series(months=4, now=now)

        assert series[0]['period'] == '2025-12'

    @pytest.mark.parametrize('months', [0, 25])
    def test_rejects_out_of_range(self, db, months):
        with pytest.raises(InvalidPeriodError):
            DashboardQueries.revenue_series(months=months)


@pytest.mark.django_db
class TestDashboardStats:

    def test_recent_orders_newest_first(self, make_order, user):
        now = timezone.now()
        old = make_order(total='1000', created_at=now - timedelta(days=1))
        new = make_order(total='2000', created_at=now)

        recent = DashboardQueries.recent_orders(limit=1)

        assert recent[0]['order_number'] == new.order_number
        assert recent[0]['customer'] == user.get_display_name()
        assert old.order_number not in [row['order_number'] for row in recent]

    def test_task_summary(self, db):
        now = timezone.now()
        Task.objects.create(title='Relancer', priority=TaskPriority.URGENT, due_date=now - timedelta(days=1))
        Task.objects.create(title='Recharger', priority=TaskPriority.LOW)
        Task.objects.create(title='Fini', status=TaskStatus.COMPLETED, due_date=now - timedelta(days=5))

        assert DashboardQueries.task_summary(now=now) == {'open': 2, 'urgent': 1, 'overdue': 1}

    def test_payload_sections(self, db):
        stats = DashboardQueries.dashboard_stats(months=2)

        assert set(stats) == {'overview', 'growth', 'monthly', 'recent_orders', 'subscriptions', 'tasks'}
        assert len(stats['monthly']) == 2
