from rest_framework import serializers
from .models import (
    Platform,
    StreamingAccount,
    AccountProfile,
    Offer,
    OfferType,
    DurationUnit,
    PlatformOffer,
    Subscription,
    GiftCard,
)


class PlatformSerializer(serializers.ModelSerializer):

    class Meta:
        model = Platform
        fields = [
            'id', 'name', 'slug', 'type', 'description', 'website_url',
            'has_profiles', 'max_profiles_per_account', 'has_gift_cards',
            'is_active', 'created_at',
        ]
        read_only_fields = ['id', 'slug', 'created_at']


class AccountProfileSerializer(serializers.ModelSerializer):

    class Meta:
        model = AccountProfile
        fields = ['id', 'account', 'profile_slot', 'name', 'pin', 'is_assigned', 'subscription']
        read_only_fields = ['id', 'account', 'profile_slot', 'is_assigned', 'subscription']


class StreamingAccountSerializer(serializers.ModelSerializer):
    platform_name = serializers.CharField(source='platform.name', read_only=True)
    profiles = AccountProfileSerializer(many=True, read_only=True)
    free_profile_count = serializers.SerializerMethodField()

    class Meta:
        model = StreamingAccount
        fields = [
            'id', 'platform', 'platform_name', 'username', 'email', 'password',
            'status', 'availability', 'expires_at', 'notes',
            'profiles', 'free_profile_count', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'availability', 'created_at', 'updated_at']

    def get_free_profile_count(self, obj):
        return sum(1 for p in obj.profiles.all() if not p.is_assigned)


class PlatformOfferSerializer(serializers.ModelSerializer):
    platform_name = serializers.CharField(source='platform.name', read_only=True)

    class Meta:
        model = PlatformOffer
        fields = ['platform', 'platform_name', 'profile_count', 'is_default']


class OfferPlatformInputSerializer(serializers.Serializer):
    platform_id = serializers.UUIDField()
    profile_count = serializers.IntegerField(min_value=1, default=1)
    is_default = serializers.BooleanField(default=False)


class OfferSerializer(serializers.ModelSerializer):
    platform_offers = PlatformOfferSerializer(many=True, read_only=True)
    platforms = OfferPlatformInputSerializer(many=True, write_only=True, required=False)

    class Meta:
        model = Offer
        fields = [
            'id', 'name', 'slug', 'description', 'type', 'price',
            'duration', 'duration_unit', 'max_profiles', 'features',
            'is_popular', 'is_active', 'platform_offers', 'platforms',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'slug', 'max_profiles', 'created_at', 'updated_at']

    def validate(self, attrs):
        if self.instance is None and not attrs.get('platforms'):
            raise serializers.ValidationError({'platforms': 'At least one platform is required'})
        return attrs


class AssignedProfileSerializer(serializers.ModelSerializer):
    """Profile with the credentials the subscriber needs to log in."""

    platform = serializers.CharField(source='account.platform.name', read_only=True)
    username = serializers.CharField(source='account.username', read_only=True)
    email = serializers.CharField(source='account.email', read_only=True)
    password = serializers.CharField(source='account.password', read_only=True)

    class Meta:
        model = AccountProfile
        fields = ['id', 'name', 'pin', 'profile_slot', 'platform', 'username', 'email', 'password']
        read_only_fields = fields


class SubscriptionSerializer(serializers.ModelSerializer):
    offer_name = serializers.CharField(source='offer.name', read_only=True)
    user_email = serializers.CharField(source='user.email', read_only=True, default=None)
    profiles = AssignedProfileSerializer(many=True, read_only=True)

    class Meta:
        model = Subscription
        fields = [
            'id', 'user', 'user_email', 'offer', 'offer_name', 'order',
            'status', 'start_date', 'end_date', 'auto_renew',
            'profiles', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class SubscriptionCreateSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    offer_id = serializers.UUIDField()
    activate = serializers.BooleanField(default=True)


class ProfileAssignmentSerializer(serializers.Serializer):
    profile_ids = serializers.ListField(child=serializers.UUIDField(), min_length=1)


class GiftCardSerializer(serializers.ModelSerializer):
    platform_name = serializers.CharField(source='platform.name', read_only=True)

    class Meta:
        model = GiftCard
        fields = [
            'id', 'platform', 'platform_name', 'code', 'amount', 'currency',
            'status', 'used_by', 'used_at', 'expires_at', 'created_at',
        ]
        read_only_fields = ['id', 'status', 'used_by', 'used_at', 'created_at']
        extra_kwargs = {'code': {'required': False, 'allow_blank': True}}


class GiftCardRedeemSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=64)
