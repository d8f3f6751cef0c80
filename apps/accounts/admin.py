from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import User, Address, UserRole


ROLE_COLORS = {
    UserRole.ADMIN: '#B85C5C',
    UserRole.STAFF: '#A47449',
    UserRole.CLIENT: '#6B8E5E',
}


class AddressInline(admin.TabularInline):
    model = Address
    extra = 0
    fields = ['type', 'street', 'city', 'zip_code', 'country', 'is_default']


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin interface for customers and back-office users."""

    list_display = [
        'email',
        'phone',
        'full_name',
        'role_badge',
        'is_active',
        'newsletter',
        'created_at',
        'last_login',
    ]

    list_filter = [
        'role',
        'is_active',
        'newsletter',
        'created_at',
    ]

    search_fields = [
        'email',
        'phone',
        'first_name',
        'last_name',
    ]

    ordering = ['-created_at']
    date_hierarchy = 'created_at'
    inlines = [AddressInline]

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'phone', 'first_name', 'last_name', 'password')
        }),
        ('Role & Permissions', {
            'fields': ('role', 'is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        ('Preferences', {
            'fields': ('newsletter',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'phone', 'first_name', 'last_name', 'role', 'password1', 'password2'),
        }),
    )

    readonly_fields = ['created_at', 'last_login']
    filter_horizontal = ['groups', 'user_permissions']

    def role_badge(self, obj):
        """Display role as colored badge."""
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            ROLE_COLORS.get(obj.role, '#ccc'),
            obj.get_role_display(),
        )
    role_badge.short_description = 'Role'
    role_badge.admin_order_field = 'role'

    actions = ['activate_users', 'deactivate_users']

    @admin.action(description='Activate selected users')
    def activate_users(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'Activated {count} user(s).')

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        """Deactivate selected users (superusers are skipped)."""
        safe_queryset = queryset.filter(is_superuser=False)
        count = safe_queryset.update(is_active=False)
        skipped = queryset.count() - count
        msg = f'Deactivated {count} user(s).'
        if skipped:
            msg += f' Skipped {skipped} superuser(s).'
        self.message_user(request, msg)
