from typing import Any, Dict, List, Optional

from store import ASCENDING, DESCENDING, Store
from task.models import Priority, Task

# Manual order within a lane; newest first among equal positions.
LANE_SORT = [('position', ASCENDING), ('created_at', DESCENDING)]


def lane_filter(assignee_id: str, priority: str, status: Optional[str] = None) -> Dict[str, Any]:
    query = {
        'assignee': str(assignee_id),
        'priority': str(priority),
        'is_archived': False,
    }
    if status:
        query['status'] = str(status)
    return query


def fetch_lane(store: Store, query: Dict[str, Any], skip: int = 0, limit: Optional[int] = None) -> List[Task]:
    records = store.tasks.find_many(query, sort=LANE_SORT, skip=skip, limit=limit)
    return [Task.from_document(record) for record in records]


def build_board(store: Store, assignee_id: str, limit: int) -> Dict[str, Dict[str, Any]]:
    """
    Group a user's non-archived tasks into the four priority lanes.

    Every lane is always present. Each one is truncated to ``limit`` tasks and
    counted on its own, so ``hasMore`` tells whether the lane has tasks past
    the cut. A non-positive ``limit`` returns no tasks.
    """
    board = {}
    for priority in Priority.ordered():
        query = lane_filter(assignee_id, priority)
        total = store.tasks.count(query)
        tasks = fetch_lane(store, query, limit=limit) if limit > 0 else []
        board[priority.value] = {
            'tasks': tasks,
            'totalCount': total,
            'hasMore': total > max(limit, 0),
        }
    return board
