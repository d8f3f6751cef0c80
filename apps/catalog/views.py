from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from django.db.models import Q
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from .models import Category, Product, ProductStatus, Service
from .permissions import IsBackOfficeOrReadOnly
from .serializers import (
    CategorySerializer,
    ProductSerializer,
    ProductListSerializer,
    ServiceSerializer,
    StockAdjustmentSerializer,
    StockMovementSerializer,
    ProductFilterSerializer,
    SearchQuerySerializer,
)
from .services import (
    create_category,
    create_product,
    update_product,
    archive_product,
    create_service,
    update_service,
    adjust_stock,
    search_catalog,
    similar_products,
    InsufficientStockError,
)


class CatalogPagination(PageNumberPagination):
    """Custom pagination for catalog lists."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def _is_back_office(request):
    return request.user.is_authenticated and request.user.is_back_office


class CategoryViewSet(viewsets.ModelViewSet):
    """
    Categories and subcategories.

    GET is public; writes need back-office access.
    """
    queryset = Category.objects.prefetch_related('children')
    serializer_class = CategorySerializer
    permission_classes = [IsBackOfficeOrReadOnly]
    lookup_field = 'slug'

    def get_queryset(self):
        queryset = super().get_queryset()
        kind = self.request.query_params.get('kind')
        if kind:
            queryset = queryset.filter(kind=kind)
        if self.request.query_params.get('root') == 'true':
            queryset = queryset.filter(parent__isnull=True)
        return queryset

    def perform_create(self, serializer):
        serializer.instance = create_category(**serializer.validated_data)


class ProductViewSet(viewsets.ModelViewSet):
    """
    Products.

    list/retrieve: public (ACTIVE only unless back office)
    create/update/destroy: back office; destroy archives the product
    """
    queryset = Product.objects.select_related('category')
    permission_classes = [IsBackOfficeOrReadOnly]
    pagination_class = CatalogPagination
    lookup_field = 'slug'

    def get_serializer_class(self):
        if self.action == 'list':
            return ProductListSerializer
        return ProductSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        if not _is_back_office(self.request):
            queryset = queryset.filter(status=ProductStatus.ACTIVE)

        if self.action != 'list':
            return queryset

        filter_serializer = ProductFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if params.get('category'):
            queryset = queryset.filter(
                Q(category__slug=params['category']) |
                Q(category__parent__slug=params['category'])
            )
        if params.get('status') and _is_back_office(self.request):
            queryset = queryset.filter(status=params['status'])
        if 'min_price' in params:
            queryset = queryset.filter(price__gte=params['min_price'])
        if 'max_price' in params:
            queryset = queryset.filter(price__lte=params['max_price'])
        if params.get('imported') is not None:
            queryset = queryset.filter(is_imported=params['imported'])
        if params.get('search'):
            queryset = queryset.filter(
                Q(name__icontains=params['search']) |
                Q(description__icontains=params['search'])
            )
        return queryset

    def perform_create(self, serializer):
        serializer.instance = create_product(**serializer.validated_data)

    def perform_update(self, serializer):
        serializer.instance = update_product(
            product_id=serializer.instance.id,
            data=serializer.validated_data,
        )

    def destroy(self, request, *args, **kwargs):
        product = self.get_object()
        archive_product(product_id=product.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=StockAdjustmentSerializer, responses={200: ProductSerializer})
    @action(detail=True, methods=['post'])
    def adjust_stock(self, request, slug=None):
        """
        Add or remove stock.

        POST /api/catalog/products/{slug}/adjust_stock/
        Body: {"delta": -2, "reason": "Damaged"}
        """
        product = self.get_object()
        serializer = StockAdjustmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            product = adjust_stock(product_id=product.id, user=request.user, **serializer.validated_data)
        except InsufficientStockError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ProductSerializer(product).data)

    @action(detail=True, methods=['get'])
    def stock_movements(self, request, slug=None):
        product = self.get_object()
        if not _is_back_office(request):
            return Response({'error': 'Back-office access required'}, status=status.HTTP_403_FORBIDDEN)
        return Response(StockMovementSerializer(product.stock_movements.all()[:50], many=True).data)

    @action(detail=True, methods=['get'])
    def similar(self, request, slug=None):
        product = self.get_object()
        return Response(ProductListSerializer(similar_products(product=product), many=True).data)


class ServiceViewSet(viewsets.ModelViewSet):
    """Services (repairs, installation, ...). Public read, back-office write."""

    queryset = Service.objects.select_related('category')
    serializer_class = ServiceSerializer
    permission_classes = [IsBackOfficeOrReadOnly]
    pagination_class = CatalogPagination
    lookup_field = 'slug'

    def get_queryset(self):
        queryset = super().get_queryset()
        if not _is_back_office(self.request):
            queryset = queryset.filter(is_active=True)
        category = self.request.query_params.get('category')
        if category:
            queryset = queryset.filter(category__slug=category)
        return queryset

    def perform_create(self, serializer):
        serializer.instance = create_service(**serializer.validated_data)

    def perform_update(self, serializer):
        serializer.instance = update_service(
            service_id=serializer.instance.id,
            data=serializer.validated_data,
        )

    def perform_destroy(self, instance):
        instance.is_active = False
        instance.save(update_fields=['is_active', 'updated_at'])


@extend_schema(
    parameters=[
        OpenApiParameter('q', OpenApiTypes.STR, required=True, description='Search text'),
        OpenApiParameter('limit', OpenApiTypes.INT, default=20),
    ],
    description="Fuzzy search across products, services and streaming offers.",
    tags=['catalog'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def search(request):
    """Search the catalog - thin HTTP handler."""
    query_serializer = SearchQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    results = search_catalog(query=params['q'], limit=params['limit'])
    return Response({'query': params['q'], 'count': len(results), 'results': results})
