import logging
from datetime import timedelta
from typing import Any, Dict, Iterable, Mapping

from django.utils import timezone

from store import Store
from task.adapters.serializers.task_serializer import (
    TaskListQuerySerializer,
    TaskPrioritySerializer,
    TaskStatusSerializer,
    TaskWriteSerializer,
)
from task.models import Priority, Status, Task
from task.permission import is_owner
from user.models import User
from utils.errors import AuthorizationDenied, NotFound
from utils.validation import validated_data

from .board import build_board, lane_filter
from .listing import list_tasks

logger = logging.getLogger(__name__)


class TaskService:
    """
    Task lifecycle operations on behalf of an acting user.

    Every single-task operation loads the task and applies the ownership rule
    before touching the store. Each write is a single-record replace, so a
    rejected operation never leaves partial changes behind.
    """

    def __init__(self, store: Store):
        self.store = store

    # ---- helpers ----

    def _load(self, task_id: str) -> Task:
        record = self.store.tasks.find_by_id(task_id)
        if record is None:
            raise NotFound('Task not found')
        return Task.from_document(record)

    def _owned(self, actor_id: str, task_id: str, action: str) -> Task:
        task = self._load(task_id)
        if not is_owner(actor_id, task):
            raise AuthorizationDenied(
                f'Access denied. You can only {action} tasks assigned to you or created by you.'
            )
        return task

    def _require_assignee(self, user_id: str) -> None:
        if self.store.users.find_by_id(user_id) is None:
            raise NotFound('Assignee user not found')

    def _replace(self, task_id: str, patch: Dict[str, Any]) -> Task:
        record = self.store.tasks.replace(task_id, patch)
        if record is None:
            # deleted between the ownership check and the write
            raise NotFound('Task not found')
        return Task.from_document(record)

    def related_users(self, tasks: Iterable[Task]) -> Dict[str, User]:
        """Assignees and creators of ``tasks``, keyed by id."""
        ids = set()
        for task in tasks:
            ids.add(task.assignee)
            ids.add(task.created_by)
        if not ids:
            return {}
        records = self.store.users.find_many({'id': {'$in': sorted(ids)}})
        return {record['id']: User.from_document(record) for record in records}

    # ---- reads ----

    def get(self, actor_id: str, task_id: str) -> Task:
        return self._owned(actor_id, task_id, 'view')

    def board(self, actor_id: str, limit: int) -> Dict[str, Dict[str, Any]]:
        return build_board(self.store, actor_id, limit)

    def list(self, actor_id: str, params: Mapping[str, Any]) -> Dict[str, Any]:
        """
        List or board view, depending on ``params['board']``.

        Returns ``{'tasks': [...], 'pagination': {...}}`` for the list view and
        the lane mapping for the board view.
        """
        query = validated_data(TaskListQuerySerializer(data=params))
        if query['board']:
            return self.board(actor_id, query['limit'])
        tasks, pagination = list_tasks(
            self.store,
            actor_id,
            priority=query.get('priority'),
            status=query.get('status'),
            page=query['page'],
            limit=query['limit'],
        )
        return {'tasks': tasks, 'pagination': pagination}

    def stats(self, assignee_id: str) -> Dict[str, Any]:
        base = {'assignee': str(assignee_id), 'is_archived': False}
        priority_counts = {
            priority.value: self.store.tasks.count({**base, 'priority': priority.value})
            for priority in Priority.ordered()
        }
        status_counts = {
            status.value: self.store.tasks.count({**base, 'status': status.value})
            for status in Status
        }

        now = timezone.now()
        open_tasks = {**base, 'status': {'$ne': Status.COMPLETED.value}}
        overdue = self.store.tasks.count({**open_tasks, 'due_date': {'$lt': now}})

        today = timezone.localtime(now).replace(hour=0, minute=0, second=0, microsecond=0)
        tomorrow = today + timedelta(days=1)
        due_today = self.store.tasks.count({**open_tasks, 'due_date': {'$gte': today, '$lt': tomorrow}})

        return {
            'priorityCounts': priority_counts,
            'statusCounts': status_counts,
            'overdueTasks': overdue,
            'tasksDueToday': due_today,
        }

    # ---- writes ----

    def create(self, actor_id: str, data: Mapping[str, Any]) -> Task:
        values = validated_data(TaskWriteSerializer(data=data))

        assignee_id = values.get('assignee') or str(actor_id)
        self._require_assignee(assignee_id)

        priority = values.get('priority', Priority.BACKLOG.value)
        position = self.store.tasks.count(lane_filter(assignee_id, priority))

        task = Task(
            id='',
            title=values['title'],
            description=values.get('description', ''),
            due_date=values.get('due_date'),
            priority=priority,
            status=values.get('status', Status.PENDING.value),
            assignee=assignee_id,
            created_by=str(actor_id),
            position=position,
            tags=list(values.get('tags', [])),
        )
        created = Task.from_document(self.store.tasks.insert(task.to_document()))
        logger.info("Task created id=%s assignee=%s priority=%s position=%s",
                    created.id, created.assignee, created.priority, created.position)
        return created

    def update(self, actor_id: str, task_id: str, data: Mapping[str, Any], partial: bool = False) -> Task:
        values = validated_data(TaskWriteSerializer(data=data, partial=partial))
        task = self._owned(actor_id, task_id, 'modify')

        assignee_id = values.get('assignee')
        if assignee_id and assignee_id != task.assignee:
            self._require_assignee(assignee_id)

        patch = dict(values)
        if 'tags' in patch:
            patch['tags'] = list(patch['tags'])
        return self._replace(task.id, patch)

    def update_status(self, actor_id: str, task_id: str, data: Mapping[str, Any]) -> Task:
        values = validated_data(TaskStatusSerializer(data=data))
        task = self._owned(actor_id, task_id, 'modify')
        return self._replace(task.id, {'status': values['status']})

    def update_priority(self, actor_id: str, task_id: str, data: Mapping[str, Any]) -> Task:
        values = validated_data(TaskPrioritySerializer(data=data))
        task = self._owned(actor_id, task_id, 'modify')

        patch = {'priority': values['priority']}
        # sibling positions are left alone; the caller owns lane ordering
        if values.get('position') is not None:
            patch['position'] = values['position']
        return self._replace(task.id, patch)

    def delete(self, actor_id: str, task_id: str) -> None:
        task = self._owned(actor_id, task_id, 'delete')
        self.store.tasks.delete(task.id)
        logger.info("Task deleted id=%s by=%s", task.id, actor_id)

