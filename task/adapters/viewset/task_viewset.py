from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action

from store import get_store
from task.adapters.serializers.task_serializer import (
    TaskListQuerySerializer,
    TaskPrioritySerializer,
    TaskSerializer,
    TaskStatusSerializer,
    TaskWriteSerializer,
)
from task.permission import TaskAccessPermission
from task.services.task_service import TaskService
from utils.responses import success_response


class TaskViewset(viewsets.ViewSet):
    """Tasks of the authenticated user: list/board, CRUD, status and priority moves.

    Single-task operations are limited to the task's assignee and creator.
    """
    permission_classes = [TaskAccessPermission]
    lookup_value_regex = '[^/]+'

    @property
    def service(self) -> TaskService:
        return TaskService(get_store())

    def _serialize(self, tasks, users=None):
        if users is None:
            users = self.service.related_users(tasks)
        return TaskSerializer(tasks, many=True, context={'users': users, 'request': self.request}).data

    def _task_response(self, task, message=None, status_code=status.HTTP_200_OK):
        data = {'task': self._serialize([task])[0]}
        return success_response(data, message=message, status=status_code)

    @extend_schema(
        parameters=[TaskListQuerySerializer],
        summary="List tasks, or group them into the priority board with board=true",
    )
    def list(self, request):
        service = self.service
        result = service.list(request.user.id, request.query_params)

        if 'pagination' in result:
            return success_response({
                'tasks': self._serialize(result['tasks']),
                'pagination': result['pagination'],
            })

        all_tasks = [task for lane in result.values() for task in lane['tasks']]
        users = service.related_users(all_tasks)
        board = {
            priority: {**lane, 'tasks': self._serialize(lane['tasks'], users)}
            for priority, lane in result.items()
        }
        return success_response(board)

    @extend_schema(request=TaskWriteSerializer, responses={201: TaskSerializer})
    def create(self, request):
        task = self.service.create(request.user.id, request.data)
        return self._task_response(task, 'Task created successfully', status.HTTP_201_CREATED)

    @extend_schema(responses={200: TaskSerializer})
    def retrieve(self, request, pk=None):
        task = self.service.get(request.user.id, pk)
        return self._task_response(task)

    @extend_schema(request=TaskWriteSerializer, responses={200: TaskSerializer})
    def update(self, request, pk=None):
        task = self.service.update(request.user.id, pk, request.data)
        return self._task_response(task, 'Task updated successfully')

    @extend_schema(request=TaskWriteSerializer, responses={200: TaskSerializer})
    def partial_update(self, request, pk=None):
        task = self.service.update(request.user.id, pk, request.data, partial=True)
        return self._task_response(task, 'Task updated successfully')

    def destroy(self, request, pk=None):
        self.service.delete(request.user.id, pk)
        return success_response(message='Task deleted successfully')

    @extend_schema(request=TaskStatusSerializer, responses={200: TaskSerializer})
    @action(detail=True, methods=['patch'], url_path='status')
    def update_status(self, request, pk=None):
        task = self.service.update_status(request.user.id, pk, request.data)
        return self._task_response(task, 'Task status updated successfully')

    @extend_schema(request=TaskPrioritySerializer, responses={200: TaskSerializer})
    @action(detail=True, methods=['patch'], url_path='priority')
    def update_priority(self, request, pk=None):
        task = self.service.update_priority(request.user.id, pk, request.data)
        return self._task_response(task, 'Task priority updated successfully')

    @extend_schema(summary="Task counts by priority and status, overdue and due-today counts")
    @action(detail=False, methods=['get'])
    def stats(self, request):
        return success_response(self.service.stats(request.user.id))
