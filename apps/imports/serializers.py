from rest_framework import serializers
from apps.catalog.models import Category, ProductStatus
from .models import ImportSetting


class ImportCalculationSerializer(serializers.Serializer):
    """Input serializer for an import-cost simulation."""

    mode = serializers.ChoiceField(choices=['air', 'sea'])
    supplier_price = serializers.DecimalField(max_digits=14, decimal_places=2)
    supplier_currency = serializers.CharField(max_length=3)
    weight = serializers.DecimalField(max_digits=10, decimal_places=3, min_value=0)
    warehouse = serializers.CharField(max_length=20)
    volume = serializers.DecimalField(max_digits=10, decimal_places=4, required=False, allow_null=True)
    product_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    product_url = serializers.URLField(max_length=500, required=False, allow_blank=True, default='')


class ImportedProductCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    mode = serializers.ChoiceField(choices=['air', 'sea'])
    supplier_price = serializers.DecimalField(max_digits=14, decimal_places=2)
    supplier_currency = serializers.CharField(max_length=3)
    weight = serializers.DecimalField(max_digits=10, decimal_places=3, min_value=0)
    warehouse = serializers.CharField(max_length=20)
    volume = serializers.DecimalField(max_digits=10, decimal_places=4, required=False, allow_null=True)
    supplier_url = serializers.URLField(max_length=500, required=False, allow_blank=True, default='')
    description = serializers.CharField(required=False, allow_blank=True, default='')
    category = serializers.PrimaryKeyRelatedField(queryset=Category.objects.all(), required=False, allow_null=True)
    stock = serializers.IntegerField(min_value=0, default=0)
    status = serializers.ChoiceField(choices=ProductStatus.choices, default=ProductStatus.DRAFT)
    images = serializers.ListField(child=serializers.URLField(), required=False, default=list)


class ImportSettingSerializer(serializers.ModelSerializer):

    class Meta:
        model = ImportSetting
        fields = ['key', 'value', 'description', 'updated_at']
        read_only_fields = fields


class ImportSettingsUpdateSerializer(serializers.Serializer):
    settings = serializers.DictField(child=serializers.DecimalField(max_digits=12, decimal_places=4))
