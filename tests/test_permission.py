# tests/test_permission.py

from types import SimpleNamespace

import pytest

from task.models import Task
from task.permission import TaskAccessPermission, is_owner


def _task(assignee='u1', created_by='u2'):
    return Task(id='t1', title='Task', assignee=assignee, created_by=created_by)


@pytest.mark.parametrize(
    'user_id, expected',
    [
        ('u1', True),   # assignee
        ('u2', True),   # creator
        ('u3', False),
        (None, False),
    ],
)
def test_is_owner_matches_assignee_or_creator(user_id, expected):
    assert is_owner(user_id, _task()) is expected


def test_is_owner_is_false_for_missing_task():
    assert is_owner('u1', None) is False


def test_self_assigned_task_is_owned_by_its_creator():
    assert is_owner('u1', _task(assignee='u1', created_by='u1')) is True


def test_permission_requires_active_authenticated_user():
    permission = TaskAccessPermission()
    active = SimpleNamespace(user=SimpleNamespace(id='u1', is_authenticated=True, is_active=True))
    inactive = SimpleNamespace(user=SimpleNamespace(id='u1', is_authenticated=True, is_active=False))
    anonymous = SimpleNamespace(user=None)

    assert permission.has_permission(active, view=None) is True
    assert permission.has_permission(inactive, view=None) is False
    assert permission.has_permission(anonymous, view=None) is False
