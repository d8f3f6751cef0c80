from django.contrib import admin
from .models import ImportSetting


@admin.register(ImportSetting)
class ImportSettingAdmin(admin.ModelAdmin):
    list_display = ['key', 'value', 'description', 'updated_at']
    search_fields = ['key']
    readonly_fields = ['updated_at']
