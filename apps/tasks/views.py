from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema
from apps.accounts.permissions import IsBackOffice
from .models import Task, OPEN_TASK_STATUSES
from .serializers import TaskSerializer, TaskCreateSerializer, TaskUpdateSerializer, TaskFilterSerializer
from .services import (
    create_task,
    update_task,
    complete_task,
    generate_all_tasks,
    TaskAssignmentError,
    InvalidTaskStateError,
)


class TaskPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class TaskViewSet(viewsets.ModelViewSet):
    """
    Back-office tasks.

    list: filter with ?status=, ?type=, ?priority=, ?mine=true, ?open=true
    """
    serializer_class = TaskSerializer
    permission_classes = [IsAuthenticated, IsBackOffice]
    pagination_class = TaskPagination
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        queryset = Task.objects.select_related('assigned_to', 'created_by')
        if self.action != 'list':
            return queryset

        filter_serializer = TaskFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data
        for name in ('status', 'type', 'priority'):
            if params.get(name):
                queryset = queryset.filter(**{name: params[name]})
        if params['mine']:
            queryset = queryset.filter(assigned_to=self.request.user)
        if params['open']:
            queryset = queryset.filter(status__in=OPEN_TASK_STATUSES)
        return queryset

    @extend_schema(request=TaskCreateSerializer, responses={201: TaskSerializer})
    def create(self, request, *args, **kwargs):
        serializer = TaskCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            task = create_task(created_by=request.user, **serializer.validated_data)
        except TaskAssignmentError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(TaskSerializer(task).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=TaskUpdateSerializer, responses={200: TaskSerializer})
    def partial_update(self, request, *args, **kwargs):
        task = self.get_object()
        serializer = TaskUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            task = update_task(task_id=task.id, **serializer.validated_data)
        except TaskAssignmentError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(TaskSerializer(task).data)

    @extend_schema(request=None, responses={200: TaskSerializer})
    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        task = self.get_object()
        try:
            task = complete_task(task_id=task.id, user=request.user)
        except InvalidTaskStateError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(TaskSerializer(task).data)

    @extend_schema(request=None)
    @action(detail=False, methods=['post'])
    def generate(self, request):
        """Run the automatic task generators now."""
        return Response(generate_all_tasks())
