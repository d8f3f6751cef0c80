from django.contrib import admin
from .models import Quote, QuoteMessage


class QuoteMessageInline(admin.TabularInline):
    model = QuoteMessage
    extra = 0
    readonly_fields = ['sender', 'message', 'proposed_price', 'is_system_message', 'read_at', 'created_at']


@admin.register(Quote)
class QuoteAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'service', 'product', 'quantity', 'proposed_price', 'final_price', 'status', 'created_at']
    list_filter = ['status']
    search_fields = ['user__email', 'service__name', 'product__name']
    raw_id_fields = ['user', 'service', 'product', 'order']
    inlines = [QuoteMessageInline]
