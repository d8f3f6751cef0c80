from django.db.models import Q
from django.http import HttpResponse
from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from apps.accounts.permissions import IsBackOffice
from apps.accounts.services import CustomerNotFoundError, InvalidPasswordError
from apps.currency.services import ExchangeRateMissingError
from .models import Order, ReturnRequest
from .serializers import (
    CartSerializer,
    CartAddSerializer,
    CartQuantitySerializer,
    CheckoutSerializer,
    OrderSerializer,
    OrderListSerializer,
    OrderHistorySerializer,
    OrderStatusSerializer,
    OrderFilterSerializer,
    PaymentSerializer,
    PaymentCreateSerializer,
    TrackingQuerySerializer,
    TrackingSerializer,
    ReturnRequestSerializer,
    ReturnCreateSerializer,
    ReturnDecisionSerializer,
    RefundSerializer,
)
from .services import (
    get_or_create_cart,
    add_to_cart,
    set_cart_item_quantity,
    clear_cart,
    checkout_cart,
    place_order,
    change_order_status,
    record_payment,
    track_order,
    request_return,
    approve_return,
    reject_return,
    refund_return,
    build_invoice_pdf,
    build_delivery_note_pdf,
    document_type,
    CartError,
    CartItemNotFoundError,
    ItemUnavailableError,
    InvalidOrderError,
    OrderNotFoundError,
    InvalidStatusTransitionError,
    PaymentError,
    PaymentExceedsBalanceError,
    ReturnNotAllowedError,
    InvalidReturnStateError,
)

CART_SESSION_HEADER = 'HTTP_X_CART_SESSION'

CHECKOUT_ERRORS = (
    CartError,
    ItemUnavailableError,
    InvalidOrderError,
    CustomerNotFoundError,
    InvalidPasswordError,
)


class OrderPagination(PageNumberPagination):
    """Custom pagination for order lists."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def _is_back_office(request):
    return request.user.is_authenticated and request.user.is_back_office


def _cart_for(request):
    session_key = request.META.get(CART_SESSION_HEADER) or request.query_params.get('session')
    return get_or_create_cart(user=request.user, session_key=session_key)


def _checkout_kwargs(request, data):
    return {
        'user': request.user,
        'customer': data.get('customer'),
        'billing': data.get('billing'),
        'shipping': data.get('shipping'),
        'notes': data.get('notes', ''),
    }


# =============================================================================
# CART
# =============================================================================

@extend_schema(
    responses={200: CartSerializer},
    description="Current cart. Guests identify their cart with the X-Cart-Session header.",
    tags=['cart'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def cart_detail(request):
    try:
        cart = _cart_for(request)
    except CartError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response(CartSerializer(cart).data)


@extend_schema(request=CartAddSerializer, responses={201: CartSerializer}, tags=['cart'])
@api_view(['POST'])
@permission_classes([AllowAny])
def cart_add(request):
    serializer = CartAddSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        cart = _cart_for(request)
        add_to_cart(cart=cart, **serializer.validated_data)
    except (CartError, ItemUnavailableError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response(CartSerializer(cart).data, status=status.HTTP_201_CREATED)


@extend_schema(request=CartQuantitySerializer, responses={200: CartSerializer}, tags=['cart'])
@api_view(['PATCH', 'DELETE'])
@permission_classes([AllowAny])
def cart_item(request, pk):
    """Change a cart line's quantity (0 removes it) or delete it."""
    if request.method == 'DELETE':
        quantity = 0
    else:
        serializer = CartQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        quantity = serializer.validated_data['quantity']

    try:
        cart = _cart_for(request)
        set_cart_item_quantity(cart=cart, item_id=pk, quantity=quantity)
    except CartItemNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except (CartError, ItemUnavailableError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response(CartSerializer(cart).data)


@extend_schema(request=None, responses={200: CartSerializer}, tags=['cart'])
@api_view(['POST'])
@permission_classes([AllowAny])
def cart_clear(request):
    try:
        cart = _cart_for(request)
    except CartError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    clear_cart(cart=cart)
    return Response(CartSerializer(cart).data)


@extend_schema(request=CheckoutSerializer, responses={201: OrderSerializer}, tags=['cart'])
@api_view(['POST'])
@permission_classes([AllowAny])
def cart_checkout(request):
    """Place an order from the cart's lines."""
    serializer = CheckoutSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    try:
        cart = _cart_for(request)
        order = checkout_cart(
            cart=cart,
            payment_method=data['payment_method'],
            **_checkout_kwargs(request, data),
        )
    except CHECKOUT_ERRORS as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


# =============================================================================
# ORDERS
# =============================================================================

class OrderViewSet(mixins.ListModelMixin,
                   mixins.RetrieveModelMixin,
                   mixins.CreateModelMixin,
                   viewsets.GenericViewSet):
    """
    Orders.

    create: public checkout (guest or signed in)
    list/retrieve: own orders, or all orders for the back office
    """
    pagination_class = OrderPagination

    def get_permissions(self):
        if self.action == 'create':
            return [AllowAny()]
        if self.action in ('change_status', 'payments', 'delivery_note'):
            return [IsAuthenticated(), IsBackOffice()]
        return [IsAuthenticated()]

    def get_serializer_class(self):
        if self.action == 'list':
            return OrderListSerializer
        if self.action == 'create':
            return CheckoutSerializer
        return OrderSerializer

    def get_queryset(self):
        queryset = Order.objects.select_related(
            'user', 'billing_address', 'shipping_address'
        ).prefetch_related('items')
        if not _is_back_office(self.request):
            return queryset.filter(user=self.request.user)

        if self.action != 'list':
            return queryset

        filter_serializer = OrderFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        if params.get('payment_status'):
            queryset = queryset.filter(payment_status=params['payment_status'])
        if params.get('search'):
            term = params['search']
            queryset = queryset.filter(
                Q(order_number__icontains=term) |
                Q(user__email__icontains=term) |
                Q(user__phone__icontains=term) |
                Q(user__last_name__icontains=term)
            )
        return queryset

    @extend_schema(request=CheckoutSerializer, responses={201: OrderSerializer})
    def create(self, request, *args, **kwargs):
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        if not data.get('items'):
            return Response({'error': 'An order needs at least one item'}, status=status.HTTP_400_BAD_REQUEST)

        try:
            order = place_order(
                items=data['items'],
                payment_method=data['payment_method'],
                **_checkout_kwargs(request, data),
            )
        except CHECKOUT_ERRORS as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=OrderStatusSerializer, responses={200: OrderSerializer})
    @action(detail=True, methods=['post'])
    def change_status(self, request, pk=None):
        """
        Move an order to a new status.

        POST /api/orders/orders/{id}/change_status/
        Body: {"status": "PROCESSING", "note": "..."}
        """
        order = self.get_object()
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            order = change_order_status(
                order_id=order.id,
                new_status=serializer.validated_data['status'],
                user=request.user,
                note=serializer.validated_data['note'],
            )
        except InvalidStatusTransitionError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(OrderSerializer(order).data)

    @extend_schema(request=PaymentCreateSerializer, responses={200: PaymentSerializer(many=True)})
    @action(detail=True, methods=['get', 'post'])
    def payments(self, request, pk=None):
        order = self.get_object()
        if request.method == 'GET':
            return Response(PaymentSerializer(order.payments.all(), many=True).data)

        serializer = PaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            payment = record_payment(order_id=order.id, user=request.user, **serializer.validated_data)
        except PaymentExceedsBalanceError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except PaymentError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get'])
    def history(self, request, pk=None):
        order = self.get_object()
        return Response(OrderHistorySerializer(order.history.all(), many=True).data)

    @extend_schema(
        parameters=[OpenApiParameter('currency', OpenApiTypes.STR, description='Display currency')],
        responses={(200, 'application/pdf'): OpenApiTypes.BINARY},
    )
    @action(detail=True, methods=['get'])
    def invoice(self, request, pk=None):
        """Invoice (or proforma for quotes) as PDF."""
        order = self.get_object()
        try:
            pdf = build_invoice_pdf(order, display_currency=request.query_params.get('currency'))
        except ExchangeRateMissingError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        response = HttpResponse(pdf, content_type='application/pdf')
        response['Content-Disposition'] = (
            f'attachment; filename="{document_type(order).lower()}-{order.order_number}.pdf"'
        )
        return response

    @extend_schema(responses={(200, 'application/pdf'): OpenApiTypes.BINARY})
    @action(detail=True, methods=['get'])
    def delivery_note(self, request, pk=None):
        order = self.get_object()
        response = HttpResponse(build_delivery_note_pdf(order), content_type='application/pdf')
        response['Content-Disposition'] = f'attachment; filename="delivery-{order.order_number}.pdf"'
        return response


@extend_schema(
    parameters=[
        OpenApiParameter('order_number', OpenApiTypes.STR, required=True),
        OpenApiParameter('email', OpenApiTypes.STR),
        OpenApiParameter('phone', OpenApiTypes.STR),
    ],
    responses={200: TrackingSerializer},
    description="Public order tracking by order number and the customer's email or phone.",
    tags=['orders'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def track(request):
    query_serializer = TrackingQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    try:
        order = track_order(**query_serializer.validated_data)
    except OrderNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    return Response(TrackingSerializer(order).data)


# =============================================================================
# RETURNS
# =============================================================================

class ReturnViewSet(mixins.ListModelMixin,
                    mixins.RetrieveModelMixin,
                    mixins.CreateModelMixin,
                    viewsets.GenericViewSet):
    """
    Return requests.

    Clients open returns on their orders; the back office approves,
    rejects and refunds them.
    """
    serializer_class = ReturnRequestSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = OrderPagination

    def get_permissions(self):
        if self.action in ('approve', 'reject', 'refund'):
            return [IsAuthenticated(), IsBackOffice()]
        return super().get_permissions()

    def get_queryset(self):
        queryset = ReturnRequest.objects.select_related('order').prefetch_related('items__order_item')
        if not _is_back_office(self.request):
            return queryset.filter(user=self.request.user)
        return_status = self.request.query_params.get('status')
        if return_status:
            queryset = queryset.filter(status=return_status)
        return queryset

    @extend_schema(request=ReturnCreateSerializer, responses={201: ReturnRequestSerializer})
    def create(self, request, *args, **kwargs):
        serializer = ReturnCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            return_request = request_return(user=request.user, **serializer.validated_data)
        except OrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except ReturnNotAllowedError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(ReturnRequestSerializer(return_request).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ReturnDecisionSerializer, responses={200: ReturnRequestSerializer})
    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        return_request = self.get_object()
        serializer = ReturnDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            return_request = approve_return(
                return_id=return_request.id,
                user=request.user,
                approved_amount=serializer.validated_data.get('approved_amount'),
                admin_notes=serializer.validated_data['admin_notes'],
            )
        except InvalidReturnStateError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(ReturnRequestSerializer(return_request).data)

    @extend_schema(request=ReturnDecisionSerializer, responses={200: ReturnRequestSerializer})
    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        return_request = self.get_object()
        serializer = ReturnDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            return_request = reject_return(
                return_id=return_request.id,
                user=request.user,
                admin_notes=serializer.validated_data['admin_notes'],
            )
        except InvalidReturnStateError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(ReturnRequestSerializer(return_request).data)

    @extend_schema(request=RefundSerializer, responses={200: ReturnRequestSerializer})
    @action(detail=True, methods=['post'])
    def refund(self, request, pk=None):
        return_request = self.get_object()
        serializer = RefundSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            return_request = refund_return(
                return_id=return_request.id,
                user=request.user,
                method=serializer.validated_data['method'],
                amount=serializer.validated_data.get('amount'),
                reference=serializer.validated_data['reference'],
            )
        except InvalidReturnStateError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(ReturnRequestSerializer(return_request).data)
