"""
Analytics Module
=================

Read-only queries powering the back-office dashboard. They aggregate
orders, users, catalog, subscriptions and tasks into plain dictionaries
ready for JSON responses.

Classes:
    DashboardQueries: Static methods for the dashboard figures.

Example:
    Building the dashboard payload::

        from apps.analytics.analytics import DashboardQueries

        stats = DashboardQueries.dashboard_stats()
        print(stats['overview']['total_revenue'])

Note:
    Revenue only counts orders in a paid-like status (PAID, PROCESSING,
    SHIPPED, DELIVERED), in the base currency.
"""

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db.models import Count, Sum, DecimalField
from django.db.models.functions import TruncMonth, Coalesce
from django.utils import timezone

from apps.catalog.models import Product, ProductStatus, Service
from apps.orders.models import Order, OrderStatus, PAID_LIKE_STATUSES
from apps.siteconfig.services import get_setting
from apps.streaming.models import Subscription, SubscriptionStatus
from apps.tasks.models import Task, TaskPriority, OPEN_TASK_STATUSES
from .exceptions import InvalidPeriodError

User = get_user_model()

PENDING_ORDER_STATUSES = (OrderStatus.PENDING, OrderStatus.PAID, OrderStatus.PROCESSING)
GROWTH_WINDOW_DAYS = 30
MAX_SERIES_MONTHS = 24
LOW_STOCK_THRESHOLD_KEY = 'low_stock_threshold'
DEFAULT_LOW_STOCK_THRESHOLD = 5


def _revenue(orders) -> Decimal:
    return orders.filter(status__in=PAID_LIKE_STATUSES).aggregate(
        total=Coalesce(Sum('total'), Decimal('0'), output_field=DecimalField())
    )['total']


def _change(current, previous) -> float:
    """Percentage change, 100% when starting from nothing."""
    if not previous:
        return 100.0 if current else 0.0
    return round(float((Decimal(current) - Decimal(previous)) / Decimal(previous) * 100), 1)


def _month_start(moment, months_back=0):
    local = timezone.localtime(moment)
    year, month = local.year, local.month - months_back
    while month < 1:
        month += 12
        year -= 1
    return local.replace(year=year, month=month, day=1, hour=0, minute=0, second=0, microsecond=0)


class DashboardQueries:
    """
    Queries for the admin dashboard.

    Methods:
        overview: Headline totals.
        growth: Last 30 days compared with the 30 days before.
        revenue_series: Orders and revenue per calendar month.
        recent_orders: Latest orders.
        subscription_summary: Subscription counts by state.
        task_summary: Open back-office work.
        dashboard_stats: Everything above in one payload.
    """

    @staticmethod
    def overview():
        """
        Headline totals.

        Returns:
            dict: total_users, total_products, total_services, total_orders,
            pending_orders, low_stock_products and total_revenue.
        """
        threshold = get_setting(LOW_STOCK_THRESHOLD_KEY, DEFAULT_LOW_STOCK_THRESHOLD)
        return {
            'total_users': User.objects.count(),
            'total_products': Product.objects.count(),
            'total_services': Service.objects.count(),
            'total_orders': Order.objects.count(),
            'pending_orders': Order.objects.filter(status__in=PENDING_ORDER_STATUSES).count(),
            'low_stock_products': Product.objects.filter(
                status=ProductStatus.ACTIVE,
                track_inventory=True,
                stock__lte=threshold,
            ).count(),
            'total_revenue': _revenue(Order.objects.all()),
        }

    @staticmethod
    def growth(now=None):
        """
        Compare the last 30 days with the 30 days before.

        Args:
            now (datetime, optional): Reference time, defaults to now.

        Returns:
            dict: For ``users``, ``orders`` and ``revenue``, a dict with
            ``current``, ``previous`` and ``change`` (percent, one decimal).
        """
        now = now or timezone.now()
        window = timedelta(days=GROWTH_WINDOW_DAYS)
        current = {'created_at__gt': now - window, 'created_at__lte': now}
        previous = {'created_at__gt': now - 2 * window, 'created_at__lte': now - window}

        figures = {
            'users': (
                User.objects.filter(**current).count(),
                User.objects.filter(**previous).count(),
            ),
            'orders': (
                Order.objects.filter(**current).count(),
                Order.objects.filter(**previous).count(),
            ),
            'revenue': (
                _revenue(Order.objects.filter(**current)),
                _revenue(Order.objects.filter(**previous)),
            ),
        }
        return {
            name: {'current': cur, 'previous': prev, 'change': _change(cur, prev)}
            for name, (cur, prev) in figures.items()
        }

    @staticmethod
    def revenue_series(months=6, now=None):
        """
        Orders and revenue per calendar month, oldest first.

        Months without orders are included with zeros.

        Args:
            months (int): Number of months including the current one (1-24).
            now (datetime, optional): Reference time.

        Returns:
            list[dict]: ``period`` (YYYY-MM), ``orders`` and ``revenue``.

        Raises:
            InvalidPeriodError: ``months`` out of range.
        """
        if not 1 <= months <= MAX_SERIES_MONTHS:
            raise InvalidPeriodError(f"Months must be between 1 and {MAX_SERIES_MONTHS}")

        now = now or timezone.now()
        start = _month_start(now, months - 1)
        periods = [_month_start(now, back).strftime('%Y-%m') for back in range(months - 1, -1, -1)]
        series = {period: {'period': period, 'orders': 0, 'revenue': Decimal('0')} for period in periods}

        orders = Order.objects.filter(created_at__gte=start, created_at__lte=now)
        for row in orders.annotate(month=TruncMonth('created_at')).values('month').annotate(count=Count('id')):
            series[row['month'].strftime('%Y-%m')]['orders'] = row['count']

        paid = orders.filter(status__in=PAID_LIKE_STATUSES)
        for row in paid.annotate(month=TruncMonth('created_at')).values('month').annotate(revenue=Sum('total')):
            series[row['month'].strftime('%Y-%m')]['revenue'] = row['revenue']

        return [series[period] for period in periods]

    @staticmethod
    def recent_orders(limit=5):
        return [
            {
                'id': order.id,
                'order_number': order.order_number,
                'customer': order.user.get_display_name(),
                'email': order.user.email,
                'total': order.total,
                'status': order.status,
                'payment_status': order.payment_status,
                'created_at': order.created_at,
            }
            for order in Order.objects.select_related('user').order_by('-created_at')[:limit]
        ]

    @staticmethod
    def subscription_summary(now=None):
        now = now or timezone.now()
        return {
            'active': Subscription.objects.filter(status=SubscriptionStatus.ACTIVE).count(),
            'pending': Subscription.objects.filter(status=SubscriptionStatus.PENDING).count(),
            'expiring_soon': Subscription.objects.filter(
                status=SubscriptionStatus.ACTIVE,
                end_date__gte=now,
                end_date__lte=now + timedelta(days=7),
            ).count(),
        }

    @staticmethod
    def task_summary(now=None):
        now = now or timezone.now()
        open_tasks = Task.objects.filter(status__in=OPEN_TASK_STATUSES)
        return {
            'open': open_tasks.count(),
            'urgent': open_tasks.filter(priority=TaskPriority.URGENT).count(),
            'overdue': open_tasks.filter(due_date__lt=now).count(),
        }

    @staticmethod
    def dashboard_stats(months=6, now=None):
        """
        Everything the dashboard shows, in one payload.

        Args:
            months (int): Length of the revenue series.
            now (datetime, optional): Reference time.

        Returns:
            dict: ``overview``, ``growth``, ``monthly``, ``recent_orders``,
            ``subscriptions`` and ``tasks``.
        """
        now = now or timezone.now()
        return {
            'overview': DashboardQueries.overview(),
            'growth': DashboardQueries.growth(now=now),
            'monthly': DashboardQueries.revenue_series(months=months, now=now),
            'recent_orders': DashboardQueries.recent_orders(),
            'subscriptions': DashboardQueries.subscription_summary(now=now),
            'tasks': DashboardQueries.task_summary(now=now),
        }
