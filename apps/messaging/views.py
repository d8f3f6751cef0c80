from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema
from apps.accounts.permissions import IsBackOffice
from apps.orders.models import Order
from .serializers import (
    MessageSerializer,
    AdminMessageCreateSerializer,
    ClientMessageCreateSerializer,
    ContactMessageSerializer,
    ReplySerializer,
    MessageFilterSerializer,
)
from .services import (
    send_admin_message,
    send_contact_message,
    client_message_to_admins,
    get_message,
    reply_to_message,
    mark_read,
    archive_message,
    unread_count,
    user_messages,
    admin_messages,
    RecipientNotFoundError,
    InvalidRecipientError,
    MessageNotFoundError,
    MessagePermissionError,
)


class MessagePagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def _paginated(request, queryset):
    paginator = MessagePagination()
    page = paginator.paginate_queryset(queryset, request)
    return paginator.get_paginated_response(MessageSerializer(page, many=True).data)


@extend_schema(
    request=ContactMessageSerializer,
    responses={201: MessageSerializer},
    description="Public contact form.",
    tags=['messages'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def contact(request):
    serializer = ContactMessageSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    message = send_contact_message(sender=request.user, **serializer.validated_data)
    return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=ClientMessageCreateSerializer,
    responses={200: MessageSerializer(many=True), 201: MessageSerializer},
    description="List my messages, or write to the back office.",
    tags=['messages'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def my_messages(request):
    if request.method == 'GET':
        return _paginated(request, user_messages(request.user))

    serializer = ClientMessageCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = dict(serializer.validated_data)
    order_id = data.pop('order_id', None)
    order = Order.objects.filter(id=order_id).first() if order_id else None
    try:
        message = client_message_to_admins(sender=request.user, order=order, **data)
    except MessagePermissionError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=['messages'])
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def unread(request):
    return Response({'unread': unread_count(request.user)})


@extend_schema(responses={200: MessageSerializer}, tags=['messages'])
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def message_detail(request, pk):
    try:
        message = get_message(user=request.user, message_id=pk)
    except MessageNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    return Response(MessageSerializer(message).data)


@extend_schema(request=ReplySerializer, responses={201: MessageSerializer}, tags=['messages'])
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def reply(request, pk):
    serializer = ReplySerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        message = reply_to_message(user=request.user, message_id=pk, content=serializer.validated_data['content'])
    except MessageNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except MessagePermissionError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)


@extend_schema(request=None, responses={200: MessageSerializer}, tags=['messages'])
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def read(request, pk):
    try:
        message = mark_read(user=request.user, message_id=pk)
    except MessageNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except MessagePermissionError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    return Response(MessageSerializer(message).data)


@extend_schema(request=None, responses={200: MessageSerializer}, tags=['messages'])
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def archive(request, pk):
    try:
        message = archive_message(user=request.user, message_id=pk)
    except MessageNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except MessagePermissionError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    return Response(MessageSerializer(message).data)


@extend_schema(
    request=AdminMessageCreateSerializer,
    responses={200: MessageSerializer(many=True), 201: MessageSerializer},
    description="Back-office inbox (unread first, then by priority) and outgoing messages.",
    tags=['messages'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsBackOffice])
def admin_inbox(request):
    if request.method == 'GET':
        filter_serializer = MessageFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data
        queryset = admin_messages(
            status=params.get('status'),
            type=params.get('type'),
            priority=params.get('priority'),
            user_id=params.get('user'),
        )
        return _paginated(request, queryset)

    serializer = AdminMessageCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        message = send_admin_message(sender=request.user, **serializer.validated_data)
    except RecipientNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InvalidRecipientError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)
