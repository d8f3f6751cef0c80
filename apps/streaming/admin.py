from django.contrib import admin
from .models import Platform, StreamingAccount, AccountProfile, Offer, PlatformOffer, Subscription, GiftCard


@admin.register(Platform)
class PlatformAdmin(admin.ModelAdmin):
    list_display = ['name', 'type', 'has_profiles', 'max_profiles_per_account', 'has_gift_cards', 'is_active']
    list_filter = ['type', 'is_active']
    search_fields = ['name']
    prepopulated_fields = {'slug': ('name',)}


class AccountProfileInline(admin.TabularInline):
    model = AccountProfile
    extra = 0
    readonly_fields = ['is_assigned', 'subscription']


@admin.register(StreamingAccount)
class StreamingAccountAdmin(admin.ModelAdmin):
    list_display = ['username', 'platform', 'status', 'availability', 'expires_at']
    list_filter = ['platform', 'status', 'availability']
    search_fields = ['username', 'email']
    inlines = [AccountProfileInline]


class PlatformOfferInline(admin.TabularInline):
    model = PlatformOffer
    extra = 1


@admin.register(Offer)
class OfferAdmin(admin.ModelAdmin):
    list_display = ['name', 'type', 'price', 'duration', 'duration_unit', 'max_profiles', 'is_popular', 'is_active']
    list_filter = ['type', 'is_active', 'is_popular']
    search_fields = ['name', 'description']
    prepopulated_fields = {'slug': ('name',)}
    inlines = [PlatformOfferInline]


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):
    list_display = ['offer', 'user', 'status', 'start_date', 'end_date', 'auto_renew']
    list_filter = ['status', 'offer']
    search_fields = ['user__email', 'user__phone', 'offer__name']
    date_hierarchy = 'end_date'


@admin.register(GiftCard)
class GiftCardAdmin(admin.ModelAdmin):
    list_display = ['code', 'platform', 'amount', 'currency', 'status', 'used_by', 'expires_at']
    list_filter = ['status', 'platform']
    search_fields = ['code']
