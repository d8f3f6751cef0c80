from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema
from apps.accounts.permissions import IsAdminRole
from .models import SiteSetting, PRIVATE_GROUPS
from .serializers import SiteSettingSerializer, SiteSettingWriteSerializer
from .services import set_setting, InvalidSettingValueError


@extend_schema(
    responses={200: SiteSettingSerializer(many=True)},
    description="Public site settings (system and payment groups excluded).",
    tags=['settings'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def public_settings(request):
    settings_qs = SiteSetting.objects.exclude(group__in=PRIVATE_GROUPS)
    group = request.query_params.get('group')
    if group:
        settings_qs = settings_qs.filter(group=group)
    return Response(SiteSettingSerializer(settings_qs, many=True).data)


@extend_schema(
    request=SiteSettingWriteSerializer,
    responses={200: SiteSettingSerializer(many=True)},
    description="List all settings (GET) or upsert one setting (POST). Admin only.",
    tags=['settings'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_settings(request):
    if request.method == 'GET':
        return Response(SiteSettingSerializer(SiteSetting.objects.all(), many=True).data)

    serializer = SiteSettingWriteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        setting = set_setting(**serializer.validated_data)
    except InvalidSettingValueError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response(SiteSettingSerializer(setting).data)
