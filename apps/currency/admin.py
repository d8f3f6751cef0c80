from django.contrib import admin
from .models import ExchangeRate


@admin.register(ExchangeRate)
class ExchangeRateAdmin(admin.ModelAdmin):
    list_display = ['currency', 'rate', 'name', 'symbol', 'source', 'updated_at']
    list_filter = ['source']
    search_fields = ['currency', 'name']
    readonly_fields = ['updated_at']
