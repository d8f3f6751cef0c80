from django.contrib import admin
from .models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ['subject', 'sender', 'recipient', 'guest_email', 'type', 'priority', 'status', 'created_at']
    list_filter = ['status', 'type', 'priority']
    search_fields = ['subject', 'content', 'guest_email', 'sender__email', 'recipient__email']
    readonly_fields = ['created_at', 'read_at']
    raw_id_fields = ['parent', 'order']
