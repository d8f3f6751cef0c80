from django.contrib import admin
from .models import SiteSetting


@admin.register(SiteSetting)
class SiteSettingAdmin(admin.ModelAdmin):
    list_display = ['key', 'value', 'type', 'group', 'updated_at']
    list_filter = ['group', 'type']
    search_fields = ['key', 'description']
    ordering = ['group', 'key']
