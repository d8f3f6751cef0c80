from django.contrib import admin
from .models import Task


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ['title', 'type', 'priority', 'status', 'due_date', 'assigned_to', 'created_at']
    list_filter = ['type', 'priority', 'status']
    search_fields = ['title', 'description']
    raw_id_fields = ['assigned_to', 'created_by', 'related_user', 'related_subscription', 'related_account', 'related_order']
    readonly_fields = ['completed_at', 'created_at', 'updated_at']
