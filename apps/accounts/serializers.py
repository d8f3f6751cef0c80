from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User, Address, UserRole


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'phone',
            'first_name',
            'last_name',
            'role',
            'newsletter',
            'created_at',
            'last_login',
        ]
        read_only_fields = ['id', 'email', 'role', 'created_at', 'last_login']


class UserRegistrationSerializer(serializers.Serializer):
    """Input serializer for user registration."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )
    first_name = serializers.CharField(required=False, allow_blank=True, max_length=100)
    last_name = serializers.CharField(required=False, allow_blank=True, max_length=100)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=30)
    newsletter = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class UserLoginSerializer(serializers.Serializer):
    """Login with ``identifier`` (email or phone); ``email`` is accepted as an alias."""

    identifier = serializers.CharField(required=False, max_length=255)
    email = serializers.EmailField(required=False)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )

    def validate(self, attrs):
        email = attrs.pop('email', None)
        attrs['identifier'] = attrs.get('identifier') or email
        if not attrs['identifier']:
            raise serializers.ValidationError({'identifier': 'Email or phone is required.'})
        return attrs


class AddressSerializer(serializers.ModelSerializer):

    class Meta:
        model = Address
        fields = ['id', 'type', 'street', 'city', 'zip_code', 'country', 'is_default', 'created_at']
        read_only_fields = ['id', 'created_at']


class ClientListSerializer(serializers.ModelSerializer):
    """Client row for the back-office client list."""

    order_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = User
        fields = ['id', 'email', 'phone', 'first_name', 'last_name', 'newsletter',
                  'is_active', 'created_at', 'order_count']
        read_only_fields = fields


class ClientDetailSerializer(serializers.ModelSerializer):
    addresses = AddressSerializer(many=True, read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'phone', 'first_name', 'last_name', 'role', 'newsletter',
                  'is_active', 'created_at', 'last_login', 'addresses']
        read_only_fields = fields


class EmployeeCreateSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, validators=[validate_password])
    role = serializers.ChoiceField(choices=[UserRole.STAFF, UserRole.ADMIN])
    first_name = serializers.CharField(required=False, allow_blank=True, default='')
    last_name = serializers.CharField(required=False, allow_blank=True, default='')
    phone = serializers.CharField(required=False, allow_blank=True, default='')


class UserPublicSerializer(serializers.ModelSerializer):
    """Public user info (for message senders, quote participants, etc.)."""

    display_name = serializers.CharField(source='get_display_name', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'display_name', 'role']
        read_only_fields = fields
