from rest_framework import serializers
from .models import ExchangeRate


class ExchangeRateSerializer(serializers.ModelSerializer):

    class Meta:
        model = ExchangeRate
        fields = ['currency', 'rate', 'name', 'symbol', 'source', 'updated_at']
        read_only_fields = fields


class ConversionQuerySerializer(serializers.Serializer):
    """Input serializer for the public conversion endpoint."""

    amount = serializers.DecimalField(max_digits=18, decimal_places=4, min_value=0)
    from_currency = serializers.CharField(max_length=3)
    to_currency = serializers.CharField(max_length=3)


class ConversionResponseSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=18, decimal_places=4)
    from_currency = serializers.CharField()
    to_currency = serializers.CharField()
    converted = serializers.DecimalField(max_digits=24, decimal_places=4)
    formatted = serializers.CharField()


class RatesUpdateSerializer(serializers.Serializer):
    rates = serializers.DictField(child=serializers.DecimalField(max_digits=20, decimal_places=10))
