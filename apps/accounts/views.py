from rest_framework import status, generics, viewsets, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from rest_framework_simplejwt.tokens import RefreshToken
from django.db.models import Count, Q
from drf_spectacular.utils import extend_schema
from .models import User, Address, UserRole
from .permissions import IsBackOffice, IsAdminRole
from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
    AddressSerializer,
    ClientListSerializer,
    ClientDetailSerializer,
    EmployeeCreateSerializer,
)
from .services import (
    register_user,
    create_employee,
    authenticate_user,
    create_address,
    set_default_address,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    AddressNotFoundError,
)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


def _tokens_for(user):
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


class AccountsPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Register a new client account and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register a new user account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    data = serializer.validated_data.copy()
    data.pop('password_confirm', None)

    try:
        user = register_user(**data)
    except UserRegistrationError as e:
        return Response(
            {'error': str(e)},
            status=status.HTTP_400_BAD_REQUEST
        )

    return Response({
        'message': 'Registration successful.',
        'user': UserSerializer(user).data,
        'tokens': _tokens_for(user),
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with email or phone and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email or phone and password."""
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = authenticate_user(**serializer.validated_data)
    except InvalidCredentialsError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': _tokens_for(user),
    })


@extend_schema(
    request=UserSerializer,
    responses={200: UserSerializer},
    description="Get (GET) or update (PATCH) the current user's profile.",
    tags=['auth'],
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def current_user(request):
    """Get or update the current authenticated user."""
    if request.method == 'GET':
        return Response(UserSerializer(request.user).data)

    serializer = UserSerializer(request.user, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return Response(serializer.data)


class AddressViewSet(viewsets.ModelViewSet):
    """
    The current user's address book.

    list/create/retrieve/update/destroy plus set_default.
    """

    serializer_class = AddressSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return Address.objects.filter(user=self.request.user)

    def perform_create(self, serializer):
        serializer.instance = create_address(user=self.request.user, **serializer.validated_data)


@extend_schema(
    request=None,
    responses={200: AddressSerializer, 404: ErrorResponseSerializer},
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def set_default(request, pk):
    """Make an address the default of its type."""
    try:
        address = set_default_address(user=request.user, address_id=pk)
    except AddressNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    return Response(AddressSerializer(address).data)


class ClientListView(generics.ListAPIView):
    """
    Back-office client list.

    GET /api/auth/admin/clients/?search=...
    """
    serializer_class = ClientListSerializer
    permission_classes = [IsAuthenticated, IsBackOffice]
    pagination_class = AccountsPagination

    def get_queryset(self):
        queryset = User.objects.filter(role=UserRole.CLIENT).annotate(order_count=Count('orders'))
        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(
                Q(email__icontains=search) |
                Q(phone__icontains=search) |
                Q(first_name__icontains=search) |
                Q(last_name__icontains=search)
            )
        return queryset


class ClientDetailView(generics.RetrieveAPIView):
    queryset = User.objects.prefetch_related('addresses')
    serializer_class = ClientDetailSerializer
    permission_classes = [IsAuthenticated, IsBackOffice]


@extend_schema(
    request=EmployeeCreateSerializer,
    responses={200: UserSerializer(many=True), 201: UserSerializer, 400: ErrorResponseSerializer},
    description="List (GET) or create (POST) back-office employees. Admin only.",
    tags=['admin'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def employees(request):
    """List or create STAFF/ADMIN accounts."""
    if request.method == 'GET':
        staff = User.objects.filter(role__in=[UserRole.STAFF, UserRole.ADMIN])
        return Response(UserSerializer(staff, many=True).data)

    serializer = EmployeeCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        user = create_employee(**serializer.validated_data)
    except UserRegistrationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)
