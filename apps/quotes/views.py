from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema
from apps.accounts.permissions import IsBackOffice
from .models import Quote
from .serializers import (
    QuoteSerializer,
    QuoteListSerializer,
    QuoteCreateSerializer,
    QuoteFilterSerializer,
    QuoteMessageSerializer,
    QuoteMessageCreateSerializer,
    AcceptQuoteSerializer,
    RejectQuoteSerializer,
    CounterQuoteSerializer,
    ProposePriceSerializer,
)
from .services import (
    request_quote,
    accept_quote,
    reject_quote,
    counter_quote,
    mark_messages_read,
    post_quote_message,
    client_propose_price,
    client_accept_counter,
    convert_quote_to_order,
    QuoteNotFoundError,
    QuoteTargetNotFoundError,
    DuplicateQuoteError,
    InvalidQuoteStateError,
    InvalidQuotePriceError,
)

BACK_OFFICE_ACTIONS = ('accept', 'reject', 'counter', 'convert')


class QuotePagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class QuoteViewSet(mixins.ListModelMixin,
                   mixins.RetrieveModelMixin,
                   mixins.CreateModelMixin,
                   viewsets.GenericViewSet):
    """
    Quote requests and their negotiation thread.

    Clients request quotes, discuss and answer counter-offers;
    the back office accepts, rejects, counters and converts them.
    """
    pagination_class = QuotePagination

    def get_permissions(self):
        if self.action in BACK_OFFICE_ACTIONS:
            return [IsAuthenticated(), IsBackOffice()]
        return [IsAuthenticated()]

    def get_serializer_class(self):
        if self.action == 'list':
            return QuoteListSerializer
        return QuoteSerializer

    def get_queryset(self):
        queryset = Quote.objects.select_related('user', 'service', 'product', 'order')
        if self.action != 'list':
            queryset = queryset.prefetch_related('messages__sender')
        if not self.request.user.is_back_office:
            queryset = queryset.filter(user=self.request.user)

        filter_serializer = QuoteFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        if filter_serializer.validated_data.get('status'):
            queryset = queryset.filter(status=filter_serializer.validated_data['status'])
        return queryset

    def _respond(self, quote_id, status_code=status.HTTP_200_OK):
        quote = self.get_queryset().get(id=quote_id)
        return Response(QuoteSerializer(quote).data, status=status_code)

    @extend_schema(request=QuoteCreateSerializer, responses={201: QuoteSerializer})
    def create(self, request, *args, **kwargs):
        serializer = QuoteCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            quote = request_quote(user=request.user, **serializer.validated_data)
        except QuoteTargetNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (DuplicateQuoteError, InvalidQuotePriceError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return self._respond(quote.id, status.HTTP_201_CREATED)

    @extend_schema(request=AcceptQuoteSerializer, responses={200: QuoteSerializer})
    @action(detail=True, methods=['post'])
    def accept(self, request, pk=None):
        quote = self.get_object()
        serializer = AcceptQuoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            accept_quote(quote_id=quote.id, user=request.user, final_price=serializer.validated_data.get('final_price'))
        except (InvalidQuoteStateError, InvalidQuotePriceError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return self._respond(quote.id)

    @extend_schema(request=RejectQuoteSerializer, responses={200: QuoteSerializer})
    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        quote = self.get_object()
        serializer = RejectQuoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            reject_quote(quote_id=quote.id, user=request.user, reason=serializer.validated_data['reason'])
        except InvalidQuoteStateError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return self._respond(quote.id)

    @extend_schema(request=CounterQuoteSerializer, responses={200: QuoteSerializer})
    @action(detail=True, methods=['post'])
    def counter(self, request, pk=None):
        """
        Send a counter-offer.

        POST /api/quotes/quotes/{id}/counter/
        Body: {"counter_price": "45000", "message": "..."}
        """
        quote = self.get_object()
        serializer = CounterQuoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            counter_quote(quote_id=quote.id, user=request.user, **serializer.validated_data)
        except (InvalidQuoteStateError, InvalidQuotePriceError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return self._respond(quote.id)

    @extend_schema(request=None, responses={200: QuoteSerializer})
    @action(detail=True, methods=['post'])
    def convert(self, request, pk=None):
        quote = self.get_object()
        try:
            convert_quote_to_order(quote_id=quote.id, user=request.user)
        except InvalidQuoteStateError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return self._respond(quote.id)

    @extend_schema(request=QuoteMessageCreateSerializer, responses={200: QuoteMessageSerializer(many=True)})
    @action(detail=True, methods=['get', 'post'])
    def messages(self, request, pk=None):
        quote = self.get_object()
        if request.method == 'GET':
            return Response(QuoteMessageSerializer(quote.messages.select_related('sender'), many=True).data)

        serializer = QuoteMessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            message = post_quote_message(quote_id=quote.id, user=request.user, message=serializer.validated_data['message'])
        except InvalidQuoteStateError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(QuoteMessageSerializer(message).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=None)
    @action(detail=True, methods=['post'])
    def mark_read(self, request, pk=None):
        quote = self.get_object()
        count = mark_messages_read(quote_id=quote.id, user=request.user)
        return Response({'marked': count})

    @extend_schema(request=ProposePriceSerializer, responses={200: QuoteSerializer})
    @action(detail=True, methods=['post'])
    def propose(self, request, pk=None):
        """Client proposes a new price."""
        quote = self.get_object()
        serializer = ProposePriceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            client_propose_price(quote_id=quote.id, user=request.user, **serializer.validated_data)
        except QuoteNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (InvalidQuoteStateError, InvalidQuotePriceError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return self._respond(quote.id)

    @extend_schema(request=None, responses={200: QuoteSerializer})
    @action(detail=True, methods=['post'])
    def accept_counter(self, request, pk=None):
        quote = self.get_object()
        try:
            client_accept_counter(quote_id=quote.id, user=request.user)
        except QuoteNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidQuoteStateError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return self._respond(quote.id)
