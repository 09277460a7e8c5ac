import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from django.db import models
from django.utils import timezone


class Status(models.TextChoices):
    PENDING = 'pending', 'Pending'
    IN_PROGRESS = 'in-progress', 'In Progress'
    COMPLETED = 'completed', 'Completed'


class Priority(models.TextChoices):
    HIGH = 'high', 'High'
    MEDIUM = 'medium', 'Medium'
    LOW = 'low', 'Low'
    BACKLOG = 'backlog', 'Backlog'

    @classmethod
    def ordered(cls) -> List['Priority']:
        """Board lanes, most severe first."""
        return [cls.HIGH, cls.MEDIUM, cls.LOW, cls.BACKLOG]


TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000
MAX_TAGS = 10
TAG_MAX_LENGTH = 30


@dataclass
class Task:
    id: str
    title: str
    assignee: str
    created_by: str
    description: str = ''
    due_date: Optional[datetime] = None
    priority: str = Priority.BACKLOG
    status: str = Status.PENDING
    position: int = 0
    tags: List[str] = field(default_factory=list)
    is_archived: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> 'Task':
        return cls(
            id=document['id'],
            title=document['title'],
            assignee=document['assignee'],
            created_by=document['created_by'],
            description=document.get('description') or '',
            due_date=document.get('due_date'),
            priority=document.get('priority') or Priority.BACKLOG,
            status=document.get('status') or Status.PENDING,
            position=int(document.get('position') or 0),
            tags=list(document.get('tags') or []),
            is_archived=bool(document.get('is_archived', False)),
            created_at=document.get('created_at'),
            updated_at=document.get('updated_at'),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'description': self.description,
            'due_date': self.due_date,
            'priority': str(self.priority),
            'status': str(self.status),
            'assignee': self.assignee,
            'created_by': self.created_by,
            'position': self.position,
            'tags': list(self.tags),
            'is_archived': self.is_archived,
        }

    @property
    def is_overdue(self) -> bool:
        return (
            self.due_date is not None
            and self.due_date < timezone.now()
            and self.status != Status.COMPLETED
        )

    @property
    def days_until_due(self) -> Optional[int]:
        if self.due_date is None:
            return None
        remaining = (self.due_date - timezone.now()).total_seconds()
        return math.ceil(remaining / 86400)

    def __str__(self):
        return self.title
