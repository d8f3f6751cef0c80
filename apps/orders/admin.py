from django.contrib import admin
from .models import Cart, CartItem, Order, OrderItem, OrderHistory, Payment, ReturnRequest, ReturnItem


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    raw_id_fields = ['product', 'service', 'offer']


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'session_key', 'expires_at', 'updated_at']
    search_fields = ['user__email', 'session_key']
    inlines = [CartItemInline]


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ['item_type', 'name', 'quantity', 'unit_price', 'total_price']
    raw_id_fields = ['product', 'service', 'offer']


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    readonly_fields = ['amount', 'currency', 'base_amount', 'method', 'status', 'processed_by', 'created_at']
    can_delete = False


class OrderHistoryInline(admin.TabularInline):
    model = OrderHistory
    extra = 0
    readonly_fields = ['status', 'previous_status', 'action', 'description', 'user', 'created_at']
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['order_number', 'user', 'status', 'payment_status', 'payment_method', 'total', 'created_at']
    list_filter = ['status', 'payment_status', 'payment_method']
    search_fields = ['order_number', 'user__email', 'user__phone']
    readonly_fields = ['order_number', 'created_at', 'updated_at']
    date_hierarchy = 'created_at'
    inlines = [OrderItemInline, PaymentInline, OrderHistoryInline]


class ReturnItemInline(admin.TabularInline):
    model = ReturnItem
    extra = 0
    readonly_fields = ['order_item', 'quantity', 'condition', 'reason', 'refund_amount']


@admin.register(ReturnRequest)
class ReturnRequestAdmin(admin.ModelAdmin):
    list_display = ['return_number', 'order', 'user', 'status', 'requested_amount', 'approved_amount', 'created_at']
    list_filter = ['status']
    search_fields = ['return_number', 'order__order_number', 'user__email']
    inlines = [ReturnItemInline]
