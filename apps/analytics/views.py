"""
Analytics API views.

Thin HTTP handlers over DashboardQueries.
"""

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.accounts.permissions import IsBackOffice
from .analytics import DashboardQueries
from .exceptions import AnalyticsServiceError
from .serializers import DashboardQuerySerializer, DashboardResponseSerializer


@extend_schema(
    parameters=[
        OpenApiParameter('months', OpenApiTypes.INT, description='Length of the monthly series (1-24)'),
    ],
    responses={200: DashboardResponseSerializer},
    description="Back-office dashboard: totals, growth, monthly revenue, recent orders, subscriptions and tasks.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsBackOffice])
def dashboard(request):
    query_serializer = DashboardQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    try:
        data = DashboardQueries.dashboard_stats(months=query_serializer.validated_data['months'])
    except AnalyticsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(DashboardResponseSerializer(data).data)
