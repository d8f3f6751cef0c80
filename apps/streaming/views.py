from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from apps.accounts.permissions import IsBackOffice
from apps.catalog.permissions import IsBackOfficeOrReadOnly
from .models import Platform, StreamingAccount, AccountProfile, Offer, Subscription, GiftCard
from .serializers import (
    PlatformSerializer,
    StreamingAccountSerializer,
    AccountProfileSerializer,
    OfferSerializer,
    SubscriptionSerializer,
    SubscriptionCreateSerializer,
    ProfileAssignmentSerializer,
    GiftCardSerializer,
    GiftCardRedeemSerializer,
)
from .services import (
    create_platform,
    create_account,
    update_account,
    delete_profile,
    create_offer,
    update_offer,
    create_subscription,
    assign_profiles,
    release_profiles,
    activate_subscription,
    cancel_subscription,
    renew_subscription,
    create_gift_card,
    redeem_gift_card,
    PlatformNotFoundError,
    AccountUpdateError,
    ProfileDeletionError,
    OfferValidationError,
    OfferNotFoundError,
    InvalidSubscriptionStateError,
    ProfileAssignmentError,
    GiftCardNotFoundError,
    GiftCardUnavailableError,
)

User = get_user_model()


class StreamingPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def _is_back_office(request):
    return request.user.is_authenticated and request.user.is_back_office


class PlatformViewSet(viewsets.ModelViewSet):
    queryset = Platform.objects.all()
    serializer_class = PlatformSerializer
    permission_classes = [IsBackOfficeOrReadOnly]
    lookup_field = 'slug'

    def get_queryset(self):
        queryset = super().get_queryset()
        if not _is_back_office(self.request):
            queryset = queryset.filter(is_active=True)
        return queryset

    def perform_create(self, serializer):
        serializer.instance = create_platform(**serializer.validated_data)

    def perform_destroy(self, instance):
        instance.is_active = False
        instance.save(update_fields=['is_active'])


class StreamingAccountViewSet(viewsets.ModelViewSet):
    """
    Shared platform accounts. Back office only.

    Creating an account creates its profile slots.
    """
    queryset = StreamingAccount.objects.select_related('platform').prefetch_related('profiles')
    serializer_class = StreamingAccountSerializer
    permission_classes = [IsAuthenticated, IsBackOffice]
    pagination_class = StreamingPagination

    def get_queryset(self):
        queryset = super().get_queryset()
        platform = self.request.query_params.get('platform')
        if platform:
            queryset = queryset.filter(platform__slug=platform)
        account_status = self.request.query_params.get('status')
        if account_status:
            queryset = queryset.filter(status=account_status)
        if self.request.query_params.get('available') == 'true':
            queryset = queryset.filter(availability=True)
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        platform = data.pop('platform')
        try:
            account = create_account(platform_id=platform.id, **data)
        except PlatformNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(self.get_serializer(account).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        account = self.get_object()
        serializer = self.get_serializer(account, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        try:
            account = update_account(account_id=account.id, data=serializer.validated_data)
        except AccountUpdateError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        account = self.get_queryset().get(id=account.id)
        return Response(self.get_serializer(account).data)


class AccountProfileViewSet(mixins.RetrieveModelMixin,
                            mixins.UpdateModelMixin,
                            mixins.DestroyModelMixin,
                            viewsets.GenericViewSet):
    """Rename, set the PIN of, or delete a profile slot. Back office only."""

    queryset = AccountProfile.objects.select_related('account')
    serializer_class = AccountProfileSerializer
    permission_classes = [IsAuthenticated, IsBackOffice]

    def destroy(self, request, *args, **kwargs):
        profile = self.get_object()
        try:
            delete_profile(profile_id=profile.id)
        except ProfileDeletionError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)


class OfferViewSet(viewsets.ModelViewSet):
    """
    Subscription offers.

    Public read (active offers only); back-office write.
    """
    queryset = Offer.objects.prefetch_related('platform_offers__platform')
    serializer_class = OfferSerializer
    permission_classes = [IsBackOfficeOrReadOnly]
    lookup_field = 'slug'

    def get_queryset(self):
        queryset = super().get_queryset()
        if not _is_back_office(self.request):
            queryset = queryset.filter(is_active=True)
        platform = self.request.query_params.get('platform')
        if platform:
            queryset = queryset.filter(platform_offers__platform__slug=platform).distinct()
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            offer = create_offer(**serializer.validated_data)
        except OfferValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(offer).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        offer = self.get_object()
        serializer = self.get_serializer(offer, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        try:
            offer = update_offer(offer_id=offer.id, data=serializer.validated_data)
        except (OfferValidationError, OfferNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(offer).data)

    def perform_destroy(self, instance):
        instance.is_active = False
        instance.save(update_fields=['is_active', 'updated_at'])


class SubscriptionViewSet(mixins.ListModelMixin,
                          mixins.RetrieveModelMixin,
                          viewsets.GenericViewSet):
    """
    Subscriptions.

    Clients see their own subscriptions with the assigned profiles;
    back office sees all and manages them.
    """
    serializer_class = SubscriptionSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StreamingPagination

    def get_queryset(self):
        queryset = (
            Subscription.objects
            .select_related('offer', 'user')
            .prefetch_related('profiles__account__platform')
        )
        if not _is_back_office(self.request):
            return queryset.filter(user=self.request.user)

        sub_status = self.request.query_params.get('status')
        if sub_status:
            queryset = queryset.filter(status=sub_status)
        user_id = self.request.query_params.get('user')
        if user_id:
            queryset = queryset.filter(user_id=user_id)
        return queryset

    def _back_office_only(self, request):
        if not _is_back_office(request):
            return Response({'error': 'Back-office access required'}, status=status.HTTP_403_FORBIDDEN)
        return None

    def _respond(self, subscription_id):
        return Response(self.get_serializer(self.get_queryset().get(id=subscription_id)).data)

    @extend_schema(request=SubscriptionCreateSerializer, responses={201: SubscriptionSerializer})
    def create(self, request):
        denied = self._back_office_only(request)
        if denied:
            return denied
        serializer = SubscriptionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = get_object_or_404(User, id=serializer.validated_data['user_id'])
        offer = get_object_or_404(Offer, id=serializer.validated_data['offer_id'])
        try:
            subscription = create_subscription(
                user=user,
                offer=offer,
                activate=serializer.validated_data['activate'],
            )
        except (OfferNotFoundError, ProfileAssignmentError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(
            self.get_serializer(self.get_queryset().get(id=subscription.id)).data,
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(request=ProfileAssignmentSerializer, responses={200: SubscriptionSerializer})
    @action(detail=True, methods=['post'])
    def assign_profiles(self, request, pk=None):
        """
        Assign profiles to a subscription.

        POST /api/streaming/subscriptions/{id}/assign_profiles/
        Body: {"profile_ids": ["uuid", ...]}
        """
        denied = self._back_office_only(request)
        if denied:
            return denied
        subscription = self.get_object()
        serializer = ProfileAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            assign_profiles(subscription_id=subscription.id, profile_ids=serializer.validated_data['profile_ids'])
        except ProfileAssignmentError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return self._respond(subscription.id)

    @extend_schema(request=ProfileAssignmentSerializer, responses={200: SubscriptionSerializer})
    @action(detail=True, methods=['post'])
    def release_profiles(self, request, pk=None):
        denied = self._back_office_only(request)
        if denied:
            return denied
        subscription = self.get_object()
        profile_ids = request.data.get('profile_ids') or None
        release_profiles(subscription_id=subscription.id, profile_ids=profile_ids)
        return self._respond(subscription.id)

    @extend_schema(request=None, responses={200: SubscriptionSerializer})
    @action(detail=True, methods=['post'])
    def activate(self, request, pk=None):
        denied = self._back_office_only(request)
        if denied:
            return denied
        subscription = self.get_object()
        try:
            activate_subscription(subscription_id=subscription.id)
        except InvalidSubscriptionStateError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return self._respond(subscription.id)

    @extend_schema(request=None, responses={200: SubscriptionSerializer})
    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        subscription = self.get_object()
        try:
            cancel_subscription(subscription_id=subscription.id)
        except InvalidSubscriptionStateError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return self._respond(subscription.id)

    @extend_schema(request=None, responses={200: SubscriptionSerializer})
    @action(detail=True, methods=['post'])
    def renew(self, request, pk=None):
        denied = self._back_office_only(request)
        if denied:
            return denied
        subscription = self.get_object()
        try:
            renew_subscription(subscription_id=subscription.id)
        except InvalidSubscriptionStateError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return self._respond(subscription.id)


class GiftCardViewSet(mixins.ListModelMixin,
                      mixins.RetrieveModelMixin,
                      mixins.CreateModelMixin,
                      viewsets.GenericViewSet):
    """Gift card stock. Back office only."""

    queryset = GiftCard.objects.select_related('platform', 'used_by')
    serializer_class = GiftCardSerializer
    permission_classes = [IsAuthenticated, IsBackOffice]
    pagination_class = StreamingPagination

    def get_queryset(self):
        queryset = super().get_queryset()
        card_status = self.request.query_params.get('status')
        if card_status:
            queryset = queryset.filter(status=card_status)
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        platform = data.pop('platform')
        try:
            card = create_gift_card(platform_id=platform.id, **data)
        except (PlatformNotFoundError, GiftCardUnavailableError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(card).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=GiftCardRedeemSerializer,
    responses={200: GiftCardSerializer},
    description="Redeem a gift card code.",
    tags=['streaming'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def redeem_gift_card_view(request):
    serializer = GiftCardRedeemSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        card = redeem_gift_card(code=serializer.validated_data['code'], user=request.user)
    except GiftCardNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except GiftCardUnavailableError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response(GiftCardSerializer(card).data)
