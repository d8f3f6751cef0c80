from rest_framework import serializers
from .models import Category, Product, Service, StockMovement


class CategorySerializer(serializers.ModelSerializer):
    children = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = ['id', 'name', 'slug', 'parent', 'kind', 'description', 'children']
        read_only_fields = ['id', 'slug', 'children']

    def get_children(self, obj):
        return [{'id': str(c.id), 'name': c.name, 'slug': c.slug} for c in obj.children.all()]


class ProductSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)
    in_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'slug', 'description', 'category', 'category_name',
            'price', 'compare_at_price', 'stock', 'track_inventory', 'in_stock',
            'weight_kg', 'status', 'images',
            'is_imported', 'supplier_url', 'supplier_price', 'supplier_currency',
            'warehouse', 'import_mode',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'slug', 'created_at', 'updated_at']


class ProductListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for product lists."""

    in_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = ['id', 'name', 'slug', 'price', 'compare_at_price', 'status', 'in_stock', 'images', 'category']
        read_only_fields = fields


class ServiceSerializer(serializers.ModelSerializer):

    class Meta:
        model = Service
        fields = [
            'id', 'name', 'slug', 'description', 'category', 'price',
            'pricing_type', 'duration_minutes', 'is_active', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'slug', 'created_at', 'updated_at']


class StockAdjustmentSerializer(serializers.Serializer):
    delta = serializers.IntegerField()
    reason = serializers.CharField(max_length=255)

    def validate_delta(self, value):
        if value == 0:
            raise serializers.ValidationError('Delta must not be zero')
        return value


class StockMovementSerializer(serializers.ModelSerializer):

    class Meta:
        model = StockMovement
        fields = ['id', 'delta', 'reason', 'resulting_stock', 'created_by', 'created_at']
        read_only_fields = fields


class ProductFilterSerializer(serializers.Serializer):
    """Input serializer for product list query parameters."""

    category = serializers.SlugField(required=False)
    status = serializers.CharField(required=False)
    min_price = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    max_price = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    imported = serializers.BooleanField(required=False, allow_null=True, default=None)
    search = serializers.CharField(required=False, allow_blank=True)


class SearchQuerySerializer(serializers.Serializer):
    q = serializers.CharField(min_length=1, max_length=100)
    limit = serializers.IntegerField(required=False, default=20, min_value=1, max_value=50)
