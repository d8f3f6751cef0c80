from rest_framework import serializers
from apps.accounts.serializers import AddressSerializer
from .models import (
    Cart,
    CartItem,
    ItemType,
    Order,
    OrderItem,
    OrderHistory,
    OrderStatus,
    Payment,
    PaymentMethod,
    PaymentStatus,
    ReturnRequest,
    ReturnItem,
    ItemCondition,
)


class CartItemSerializer(serializers.ModelSerializer):
    name = serializers.SerializerMethodField()
    total_price = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = CartItem
        fields = ['id', 'item_type', 'product', 'service', 'offer', 'name', 'quantity', 'unit_price', 'total_price']
        read_only_fields = fields

    def get_name(self, obj):
        target = obj.target
        return target.name if target else None


class CartSerializer(serializers.ModelSerializer):
    items = CartItemSerializer(many=True, read_only=True)
    subtotal = serializers.SerializerMethodField()
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Cart
        fields = ['id', 'session_key', 'expires_at', 'items', 'item_count', 'subtotal', 'updated_at']
        read_only_fields = fields

    def get_subtotal(self, obj):
        return str(sum((item.total_price for item in obj.items.all()), 0))

    def get_item_count(self, obj):
        return sum(item.quantity for item in obj.items.all())


class CartAddSerializer(serializers.Serializer):
    item_type = serializers.ChoiceField(choices=ItemType.choices)
    item_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class CartQuantitySerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=0)


class OrderLineInputSerializer(serializers.Serializer):
    item_type = serializers.ChoiceField(choices=ItemType.choices)
    item_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class AddressInputSerializer(serializers.Serializer):
    street = serializers.CharField(max_length=255)
    city = serializers.CharField(max_length=100)
    zip_code = serializers.CharField(max_length=10, required=False, allow_blank=True)
    country = serializers.CharField(max_length=100, required=False, allow_blank=True)


class CustomerInputSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False, allow_blank=True)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default='')
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default='')
    newsletter = serializers.BooleanField(default=False)
    create_account = serializers.BooleanField(default=False)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True)


class CheckoutSerializer(serializers.Serializer):
    """
    Checkout input. Prices are never taken from the client.
    """

    items = OrderLineInputSerializer(many=True, required=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices)
    customer = CustomerInputSerializer(required=False)
    billing = AddressInputSerializer(required=False)
    shipping = AddressInputSerializer(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class OrderItemSerializer(serializers.ModelSerializer):

    class Meta:
        model = OrderItem
        fields = [
            'id', 'item_type', 'product', 'service', 'offer', 'name',
            'quantity', 'unit_price', 'total_price', 'metadata',
        ]
        read_only_fields = fields


class OrderHistorySerializer(serializers.ModelSerializer):

    class Meta:
        model = OrderHistory
        fields = ['id', 'status', 'previous_status', 'action', 'description', 'user', 'created_at']
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):

    class Meta:
        model = Payment
        fields = [
            'id', 'amount', 'currency', 'base_amount', 'exchange_rate', 'method',
            'provider', 'transaction_id', 'reference', 'status', 'processed_by',
            'notes', 'created_at',
        ]
        read_only_fields = fields


class PaymentCreateSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    method = serializers.ChoiceField(choices=PaymentMethod.choices)
    currency = serializers.CharField(max_length=3, default='MGA')
    provider = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    transaction_id = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    billing_address = AddressSerializer(read_only=True)
    shipping_address = AddressSerializer(read_only=True)
    customer = serializers.SerializerMethodField()
    amount_paid = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    balance_due = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'customer', 'status', 'payment_status',
            'payment_method', 'currency', 'total', 'amount_paid', 'balance_due',
            'billing_address', 'shipping_address', 'notes', 'items',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_customer(self, obj):
        return {
            'id': str(obj.user_id),
            'name': obj.user.get_display_name(),
            'email': obj.user.email,
            'phone': obj.user.phone,
        }


class OrderListSerializer(serializers.ModelSerializer):
    customer_name = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'customer_name', 'status', 'payment_status',
            'payment_method', 'total', 'created_at',
        ]
        read_only_fields = fields

    def get_customer_name(self, obj):
        return obj.user.get_display_name()


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    note = serializers.CharField(required=False, allow_blank=True, default='')


class OrderFilterSerializer(serializers.Serializer):
    """Input serializer for the order list query parameters."""

    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
    payment_status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)
    search = serializers.CharField(required=False, allow_blank=True)


class TrackingQuerySerializer(serializers.Serializer):
    order_number = serializers.CharField(max_length=20)
    email = serializers.EmailField(required=False)
    phone = serializers.CharField(max_length=20, required=False)

    def validate(self, attrs):
        if not (attrs.get('email') or attrs.get('phone')):
            raise serializers.ValidationError('Provide the email or phone used for the order')
        return attrs


class TrackingSerializer(serializers.ModelSerializer):
    """Public view of an order: no customer or payment details."""

    items = serializers.SerializerMethodField()
    history = OrderHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = ['order_number', 'status', 'payment_status', 'total', 'currency', 'items', 'history', 'created_at']
        read_only_fields = fields

    def get_items(self, obj):
        return [{'name': item.name, 'quantity': item.quantity} for item in obj.items.all()]


class ReturnItemSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='order_item.name', read_only=True)

    class Meta:
        model = ReturnItem
        fields = ['id', 'order_item', 'name', 'quantity', 'condition', 'reason', 'refund_amount']
        read_only_fields = fields


class ReturnRequestSerializer(serializers.ModelSerializer):
    items = ReturnItemSerializer(many=True, read_only=True)
    order_number = serializers.CharField(source='order.order_number', read_only=True)

    class Meta:
        model = ReturnRequest
        fields = [
            'id', 'return_number', 'order', 'order_number', 'user', 'reason',
            'description', 'status', 'requested_amount', 'approved_amount',
            'refunded_amount', 'admin_notes', 'processed_at', 'items', 'created_at',
        ]
        read_only_fields = fields


class ReturnLineInputSerializer(serializers.Serializer):
    order_item_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    condition = serializers.ChoiceField(choices=ItemCondition.choices, default=ItemCondition.UNKNOWN)
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class ReturnCreateSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    reason = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    items = ReturnLineInputSerializer(many=True)


class ReturnDecisionSerializer(serializers.Serializer):
    approved_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    admin_notes = serializers.CharField(required=False, allow_blank=True, default='')


class RefundSerializer(serializers.Serializer):
    method = serializers.ChoiceField(choices=PaymentMethod.choices)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
