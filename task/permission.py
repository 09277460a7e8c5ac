from typing import Optional

from rest_framework.permissions import BasePermission

from task.models import Task


def is_owner(user_id: Optional[str], task: Optional[Task]) -> bool:
    """
    Ownership rule for single-task operations.

    A user owns a task when they are its assignee or its creator. Absent
    tasks are owned by nobody.
    """
    if task is None or user_id is None:
        return False
    user_id = str(user_id)
    return user_id == str(task.assignee) or user_id == str(task.created_by)


class TaskAccessPermission(BasePermission):
    """
    The caller must be an authenticated, active user. Ownership of a single
    task is checked with ``is_owner`` by the task service once the task is
    loaded.
    """

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not user or not getattr(user, "is_authenticated", False):
            return False
        return bool(getattr(user, "is_active", False))
