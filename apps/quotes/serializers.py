from rest_framework import serializers
from .models import Quote, QuoteMessage, QuoteStatus


class QuoteMessageSerializer(serializers.ModelSerializer):
    sender_name = serializers.SerializerMethodField()
    sender_role = serializers.CharField(source='sender.role', read_only=True, default=None)

    class Meta:
        model = QuoteMessage
        fields = [
            'id', 'sender', 'sender_name', 'sender_role', 'message', 'proposed_price',
            'is_system_message', 'metadata', 'read_at', 'created_at',
        ]
        read_only_fields = fields

    def get_sender_name(self, obj):
        return obj.sender.get_display_name() if obj.sender else None


class QuoteListSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(read_only=True)
    customer_name = serializers.SerializerMethodField()

    class Meta:
        model = Quote
        fields = [
            'id', 'item_name', 'customer_name', 'quantity', 'budget',
            'proposed_price', 'final_price', 'status', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_customer_name(self, obj):
        return obj.user.get_display_name()


class QuoteSerializer(QuoteListSerializer):
    messages = QuoteMessageSerializer(many=True, read_only=True)
    order_number = serializers.CharField(source='order.order_number', read_only=True, default=None)

    class Meta(QuoteListSerializer.Meta):
        fields = QuoteListSerializer.Meta.fields + [
            'service', 'product', 'description', 'valid_until', 'order', 'order_number', 'messages',
        ]
        read_only_fields = fields


class QuoteCreateSerializer(serializers.Serializer):
    service_id = serializers.UUIDField(required=False)
    product_id = serializers.UUIDField(required=False)
    quantity = serializers.IntegerField(min_value=1, default=1)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    budget = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)

    def validate(self, attrs):
        if bool(attrs.get('service_id')) == bool(attrs.get('product_id')):
            raise serializers.ValidationError('Provide either service_id or product_id')
        return attrs


class QuoteFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=QuoteStatus.choices, required=False)


class AcceptQuoteSerializer(serializers.Serializer):
    final_price = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)


class RejectQuoteSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class CounterQuoteSerializer(serializers.Serializer):
    counter_price = serializers.DecimalField(max_digits=14, decimal_places=2)
    message = serializers.CharField(required=False, allow_blank=True, default='')


class QuoteMessageCreateSerializer(serializers.Serializer):
    message = serializers.CharField()


class ProposePriceSerializer(serializers.Serializer):
    price = serializers.DecimalField(max_digits=14, decimal_places=2)
    message = serializers.CharField(required=False, allow_blank=True, default='')
