from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from apps.accounts.permissions import IsAdminRole
from apps.siteconfig.services import get_setting
from .models import ExchangeRate, SUPPORTED_CURRENCIES, BASE_CURRENCY
from .serializers import (
    ExchangeRateSerializer,
    ConversionQuerySerializer,
    ConversionResponseSerializer,
    RatesUpdateSerializer,
)
from .services import (
    get_rates,
    convert,
    quantize,
    format_amount,
    set_rates,
    sync_rates_from_provider,
    ExchangeRateMissingError,
    InvalidRateError,
    ExchangeRateProviderError,
)
from .services.rate_management import LAST_UPDATE_KEY


def _rate_table():
    last_update = get_setting(LAST_UPDATE_KEY)
    return {
        'base': BASE_CURRENCY,
        'rates': {code: str(rate) for code, rate in get_rates().items()},
        'currencies': [
            {'code': code, 'name': name, 'symbol': symbol}
            for code, (name, symbol) in SUPPORTED_CURRENCIES.items()
        ],
        'last_update': last_update.isoformat() if last_update else None,
    }


@extend_schema(
    description="Current exchange-rate table (units per 1 MGA).",
    tags=['currency'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def rates(request):
    return Response(_rate_table())


@extend_schema(
    parameters=[
        OpenApiParameter('amount', OpenApiTypes.DECIMAL, required=True),
        OpenApiParameter('from', OpenApiTypes.STR, required=True),
        OpenApiParameter('to', OpenApiTypes.STR, required=True),
    ],
    responses={200: ConversionResponseSerializer},
    description="Convert an amount between two currencies.",
    tags=['currency'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def convert_amount(request):
    """Convert an amount - thin HTTP handler."""
    query_serializer = ConversionQuerySerializer(data={
        'amount': request.query_params.get('amount'),
        'from_currency': request.query_params.get('from'),
        'to_currency': request.query_params.get('to'),
    })
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        converted = convert(params['amount'], params['from_currency'], params['to_currency'])
    except ExchangeRateMissingError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    to_currency = params['to_currency'].upper()
    return Response({
        'amount': str(params['amount']),
        'from_currency': params['from_currency'].upper(),
        'to_currency': to_currency,
        'converted': str(quantize(converted, to_currency)),
        'formatted': format_amount(converted, to_currency),
    })


@extend_schema(
    request=RatesUpdateSerializer,
    responses={200: ExchangeRateSerializer(many=True)},
    description="Manually set exchange rates. Admin only.",
    tags=['currency'],
)
@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsAdminRole])
def update_rates(request):
    serializer = RatesUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        set_rates(rates=serializer.validated_data['rates'])
    except InvalidRateError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response(ExchangeRateSerializer(ExchangeRate.objects.all(), many=True).data)


@extend_schema(
    request=None,
    description="Synchronise rates with the external provider. Admin only.",
    tags=['currency'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def sync_rates(request):
    try:
        sync_rates_from_provider()
    except ExchangeRateProviderError as e:
        return Response({'error': str(e)}, status=status.HTTP_502_BAD_GATEWAY)
    return Response(_rate_table())
