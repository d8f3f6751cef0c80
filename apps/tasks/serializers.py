from rest_framework import serializers
from .models import Task, TaskType, TaskPriority, TaskStatus


class TaskSerializer(serializers.ModelSerializer):
    assigned_to_name = serializers.SerializerMethodField()
    is_open = serializers.BooleanField(read_only=True)

    class Meta:
        model = Task
        fields = [
            'id', 'title', 'description', 'type', 'priority', 'status', 'is_open',
            'due_date', 'assigned_to', 'assigned_to_name', 'created_by',
            'related_user', 'related_subscription', 'related_account', 'related_order',
            'metadata', 'completed_at', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_assigned_to_name(self, obj):
        return obj.assigned_to.get_display_name() if obj.assigned_to else None


class TaskCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    type = serializers.ChoiceField(choices=TaskType.choices, default=TaskType.MANUAL)
    priority = serializers.ChoiceField(choices=TaskPriority.choices, default=TaskPriority.MEDIUM)
    due_date = serializers.DateTimeField(required=False, allow_null=True)
    assigned_to_id = serializers.UUIDField(required=False, allow_null=True)
    related_user_id = serializers.UUIDField(required=False, allow_null=True)
    related_subscription_id = serializers.UUIDField(required=False, allow_null=True)
    related_account_id = serializers.UUIDField(required=False, allow_null=True)
    related_order_id = serializers.UUIDField(required=False, allow_null=True)
    metadata = serializers.JSONField(required=False)


class TaskUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    priority = serializers.ChoiceField(choices=TaskPriority.choices, required=False)
    status = serializers.ChoiceField(choices=TaskStatus.choices, required=False)
    due_date = serializers.DateTimeField(required=False, allow_null=True)
    assigned_to_id = serializers.UUIDField(required=False, allow_null=True)
    metadata = serializers.JSONField(required=False)


class TaskFilterSerializer(serializers.Serializer):
    """Input serializer for the task list query parameters."""

    status = serializers.ChoiceField(choices=TaskStatus.choices, required=False)
    type = serializers.ChoiceField(choices=TaskType.choices, required=False)
    priority = serializers.ChoiceField(choices=TaskPriority.choices, required=False)
    mine = serializers.BooleanField(required=False, default=False)
    open = serializers.BooleanField(required=False, default=False)
