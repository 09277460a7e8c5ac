from bson import ObjectId
from django.utils import timezone
from rest_framework import serializers
from rest_framework.settings import ISO_8601

from task.models import (
    DESCRIPTION_MAX_LENGTH,
    MAX_TAGS,
    TAG_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Priority,
    Status,
)

PRIORITY_CHOICE_ERROR = 'Priority must be high, medium, low, or backlog'
STATUS_CHOICE_ERROR = 'Status must be pending, in-progress, or completed'


class TaskUserSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    email = serializers.EmailField()
    avatarUrl = serializers.CharField(source='avatar_url', allow_null=True)


class TaskSerializer(serializers.Serializer):
    """
    Read shape of a task.

    Expects a ``users`` mapping (id -> User) in the context to embed the
    assignee and creator; unknown users render as null.
    """
    id = serializers.CharField()
    title = serializers.CharField()
    description = serializers.CharField()
    dueDate = serializers.DateTimeField(source='due_date', allow_null=True)
    priority = serializers.CharField()
    status = serializers.CharField()
    assignee = serializers.SerializerMethodField()
    createdBy = serializers.SerializerMethodField()
    position = serializers.IntegerField()
    tags = serializers.ListField(child=serializers.CharField())
    isArchived = serializers.BooleanField(source='is_archived')
    isOverdue = serializers.BooleanField(source='is_overdue')
    daysUntilDue = serializers.IntegerField(source='days_until_due', allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at')
    updatedAt = serializers.DateTimeField(source='updated_at')

    def _user(self, user_id):
        user = self.context.get('users', {}).get(user_id)
        if user is None:
            return None
        return TaskUserSerializer(user).data

    def get_assignee(self, obj):
        return self._user(obj.assignee)

    def get_createdBy(self, obj):
        return self._user(obj.created_by)


class TaskWriteSerializer(serializers.Serializer):
    title = serializers.CharField(
        max_length=TITLE_MAX_LENGTH,
        error_messages={
            'blank': 'Title must be between 1 and 200 characters',
            'max_length': 'Title must be between 1 and 200 characters',
        },
    )
    description = serializers.CharField(
        max_length=DESCRIPTION_MAX_LENGTH,
        required=False,
        allow_blank=True,
        error_messages={'max_length': 'Description cannot exceed 1000 characters'},
    )
    dueDate = serializers.DateTimeField(
        source='due_date',
        required=False,
        allow_null=True,
        input_formats=[ISO_8601, '%Y-%m-%d'],
        error_messages={'invalid': 'Due date must be a valid date'},
    )
    priority = serializers.ChoiceField(
        choices=Priority.choices,
        required=False,
        error_messages={'invalid_choice': PRIORITY_CHOICE_ERROR},
    )
    status = serializers.ChoiceField(
        choices=Status.choices,
        required=False,
        error_messages={'invalid_choice': STATUS_CHOICE_ERROR},
    )
    assignee = serializers.CharField(required=False)
    tags = serializers.ListField(
        child=serializers.CharField(
            max_length=TAG_MAX_LENGTH,
            error_messages={'max_length': 'Each tag must be a string with maximum 30 characters'},
        ),
        required=False,
        max_length=MAX_TAGS,
        error_messages={'max_length': 'Cannot have more than 10 tags'},
    )

    def validate_dueDate(self, value):
        if value is not None and value <= timezone.now():
            raise serializers.ValidationError('Due date must be in the future')
        return value

    def validate_assignee(self, value):
        if not ObjectId.is_valid(value):
            raise serializers.ValidationError('Assignee must be a valid user ID')
        return value


class TaskStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=Status.choices,
        error_messages={'invalid_choice': STATUS_CHOICE_ERROR},
    )


class TaskPrioritySerializer(serializers.Serializer):
    priority = serializers.ChoiceField(
        choices=Priority.choices,
        error_messages={'invalid_choice': PRIORITY_CHOICE_ERROR},
    )
    position = serializers.IntegerField(
        min_value=0,
        required=False,
        error_messages={
            'min_value': 'Position must be a non-negative integer',
            'invalid': 'Position must be a non-negative integer',
        },
    )


class TaskListQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(
        min_value=1,
        default=1,
        error_messages={'min_value': 'Page must be a positive integer'},
    )
    limit = serializers.IntegerField(
        min_value=1,
        max_value=100,
        default=15,
        error_messages={
            'min_value': 'Limit must be between 1 and 100',
            'max_value': 'Limit must be between 1 and 100',
        },
    )
    priority = serializers.ChoiceField(
        choices=Priority.choices,
        required=False,
        error_messages={'invalid_choice': PRIORITY_CHOICE_ERROR},
    )
    status = serializers.ChoiceField(
        choices=Status.choices,
        required=False,
        error_messages={'invalid_choice': STATUS_CHOICE_ERROR},
    )
    board = serializers.BooleanField(default=False)
