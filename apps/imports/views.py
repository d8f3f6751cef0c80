from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema
from apps.accounts.permissions import IsBackOffice, IsAdminRole
from apps.catalog.serializers import ProductSerializer
from .serializers import (
    ImportCalculationSerializer,
    ImportedProductCreateSerializer,
    ImportSettingsUpdateSerializer,
)
from .services import (
    DEFAULT_IMPORT_SETTINGS,
    WAREHOUSES,
    calculate_import_cost,
    get_import_settings,
    update_import_settings,
    create_product_from_simulation,
    ImportValidationError,
    UnknownImportSettingError,
    InvalidCalculationError,
)


def _run_calculation(request):
    serializer = ImportCalculationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        return calculate_import_cost(**serializer.validated_data), None
    except ImportValidationError as e:
        return None, Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except InvalidCalculationError as e:
        return None, Response({'error': str(e)}, status=status.HTTP_422_UNPROCESSABLE_ENTITY)


@extend_schema(
    request=ImportCalculationSerializer,
    description="Estimate the landed cost of a product imported by air or sea.",
    tags=['imports'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def calculate(request):
    """Public import simulator - thin HTTP handler."""
    result, error = _run_calculation(request)
    if error:
        return error
    return Response(result)


@extend_schema(
    request=ImportCalculationSerializer,
    description="Import simulation with the parameters used. Back office only.",
    tags=['imports'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsBackOffice])
def admin_calculate(request):
    result, error = _run_calculation(request)
    if error:
        return error
    result['settings'] = {key: str(value) for key, value in get_import_settings().items()}
    return Response(result)


@extend_schema(
    request=ImportSettingsUpdateSerializer,
    description="Read or update calculation parameters. Admin only.",
    tags=['imports'],
)
@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_settings(request):
    if request.method == 'PUT':
        serializer = ImportSettingsUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            update_import_settings(values=serializer.validated_data['settings'])
        except (UnknownImportSettingError, ImportValidationError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    values = get_import_settings()
    return Response({
        'settings': [
            {'key': key, 'value': str(values[key]), 'description': description}
            for key, (_, description) in DEFAULT_IMPORT_SETTINGS.items()
        ],
        'warehouses': WAREHOUSES,
    })


@extend_schema(
    request=ImportedProductCreateSerializer,
    responses={201: ProductSerializer},
    description="Create an imported product priced from a simulation. Back office only.",
    tags=['imports'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsBackOffice])
def admin_create_product(request):
    serializer = ImportedProductCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        product, calculation = create_product_from_simulation(**serializer.validated_data)
    except ImportValidationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except InvalidCalculationError as e:
        return Response({'error': str(e)}, status=status.HTTP_422_UNPROCESSABLE_ENTITY)

    return Response(
        {'product': ProductSerializer(product).data, 'calculation': calculation},
        status=status.HTTP_201_CREATED,
    )
