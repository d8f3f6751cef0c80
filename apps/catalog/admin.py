from django.contrib import admin
from .models import Category, Product, Service, StockMovement


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'parent', 'kind', 'slug']
    list_filter = ['kind']
    search_fields = ['name']
    prepopulated_fields = {'slug': ('name',)}


class StockMovementInline(admin.TabularInline):
    model = StockMovement
    extra = 0
    readonly_fields = ['delta', 'reason', 'resulting_stock', 'created_by', 'created_at']
    can_delete = False


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'price', 'stock', 'status', 'is_imported', 'created_at']
    list_filter = ['status', 'is_imported', 'category']
    search_fields = ['name', 'description', 'slug']
    readonly_fields = ['created_at', 'updated_at']
    prepopulated_fields = {'slug': ('name',)}
    inlines = [StockMovementInline]

    actions = ['activate_products', 'archive_products']

    @admin.action(description='Publish selected products')
    def activate_products(self, request, queryset):
        count = queryset.update(status='ACTIVE')
        self.message_user(request, f'Published {count} product(s).')

    @admin.action(description='Archive selected products')
    def archive_products(self, request, queryset):
        count = queryset.update(status='ARCHIVED')
        self.message_user(request, f'Archived {count} product(s).')


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'price', 'pricing_type', 'is_active']
    list_filter = ['pricing_type', 'is_active']
    search_fields = ['name', 'description']
    prepopulated_fields = {'slug': ('name',)}
