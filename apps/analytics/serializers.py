"""
Serializers for analytics app.

Input Serializers:
    DashboardQuerySerializer - Validates the dashboard query parameters

Response Serializers:
    DashboardResponseSerializer - Dashboard payload, for the API schema
"""

from rest_framework import serializers

from .analytics import MAX_SERIES_MONTHS


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class DashboardQuerySerializer(serializers.Serializer):
    months = serializers.IntegerField(required=False, default=6, min_value=1, max_value=MAX_SERIES_MONTHS)


# =============================================================================
# Response Serializers
# =============================================================================

class OverviewSerializer(serializers.Serializer):
    total_users = serializers.IntegerField()
    total_products = serializers.IntegerField()
    total_services = serializers.IntegerField()
    total_orders = serializers.IntegerField()
    pending_orders = serializers.IntegerField()
    low_stock_products = serializers.IntegerField()
    total_revenue = serializers.DecimalField(max_digits=16, decimal_places=2)


class GrowthFigureSerializer(serializers.Serializer):
    current = serializers.DecimalField(max_digits=16, decimal_places=2)
    previous = serializers.DecimalField(max_digits=16, decimal_places=2)
    change = serializers.FloatField()


class GrowthSerializer(serializers.Serializer):
    users = GrowthFigureSerializer()
    orders = GrowthFigureSerializer()
    revenue = GrowthFigureSerializer()


class MonthlyStatSerializer(serializers.Serializer):
    period = serializers.CharField()
    orders = serializers.IntegerField()
    revenue = serializers.DecimalField(max_digits=16, decimal_places=2)


class RecentOrderSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    order_number = serializers.CharField()
    customer = serializers.CharField()
    email = serializers.EmailField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    status = serializers.CharField()
    payment_status = serializers.CharField()
    created_at = serializers.DateTimeField()


class SubscriptionSummarySerializer(serializers.Serializer):
    active = serializers.IntegerField()
    pending = serializers.IntegerField()
    expiring_soon = serializers.IntegerField()


class TaskSummarySerializer(serializers.Serializer):
    open = serializers.IntegerField()
    urgent = serializers.IntegerField()
    overdue = serializers.IntegerField()


class DashboardResponseSerializer(serializers.Serializer):
    overview = OverviewSerializer()
    growth = GrowthSerializer()
    monthly = MonthlyStatSerializer(many=True)
    recent_orders = RecentOrderSerializer(many=True)
    subscriptions = SubscriptionSummarySerializer()
    tasks = TaskSummarySerializer()
