from rest_framework import serializers
from .models import Message, MessageType, MessagePriority, MessageStatus


class MessageSerializer(serializers.ModelSerializer):
    sender_name = serializers.SerializerMethodField()
    recipient_name = serializers.SerializerMethodField()
    order_number = serializers.CharField(source='order.order_number', read_only=True, default=None)

    class Meta:
        model = Message
        fields = [
            'id', 'sender', 'sender_name', 'recipient', 'recipient_name',
            'guest_name', 'guest_email', 'guest_phone',
            'subject', 'content', 'type', 'priority', 'status',
            'parent', 'order', 'order_number', 'read_at', 'created_at',
        ]
        read_only_fields = fields

    def get_sender_name(self, obj):
        if obj.sender:
            return obj.sender.get_display_name()
        return obj.guest_name or 'System'

    def get_recipient_name(self, obj):
        return obj.recipient.get_display_name() if obj.recipient else None


class AdminMessageCreateSerializer(serializers.Serializer):
    recipient_id = serializers.UUIDField()
    subject = serializers.CharField(max_length=200)
    content = serializers.CharField()
    type = serializers.ChoiceField(choices=MessageType.choices, default=MessageType.GENERAL)
    priority = serializers.ChoiceField(choices=MessagePriority.choices, default=MessagePriority.NORMAL)


class ClientMessageCreateSerializer(serializers.Serializer):
    subject = serializers.CharField(max_length=200)
    content = serializers.CharField()
    type = serializers.ChoiceField(choices=MessageType.choices, default=MessageType.GENERAL)
    order_id = serializers.UUIDField(required=False, allow_null=True)


class ContactMessageSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')
    subject = serializers.CharField(max_length=200)
    content = serializers.CharField()


class ReplySerializer(serializers.Serializer):
    content = serializers.CharField()


class MessageFilterSerializer(serializers.Serializer):
    """Input serializer for the back-office message list."""

    status = serializers.ChoiceField(choices=MessageStatus.choices, required=False)
    type = serializers.ChoiceField(choices=MessageType.choices, required=False)
    priority = serializers.ChoiceField(choices=MessagePriority.choices, required=False)
    user = serializers.UUIDField(required=False)
