from typing import Any, Dict, List, Optional, Tuple

from store import Store
from task.models import Priority, Task
from utils.custom_paginator import CustomPaginator

from .board import fetch_lane, lane_filter


def list_tasks(
    store: Store,
    assignee_id: str,
    priority: Optional[str] = None,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = CustomPaginator.page_size,
) -> Tuple[List[Task], Dict[str, Any]]:
    """
    Page through a user's non-archived tasks, most severe priority first.

    The result is the concatenation of the lanes in severity order, each lane
    in board order. Only the part of each lane that overlaps the requested
    window is fetched.
    """
    paginator = CustomPaginator(page, limit)
    window_start = paginator.offset
    window_end = window_start + paginator.limit

    lanes = [priority] if priority else Priority.ordered()
    tasks: List[Task] = []
    total = 0
    for lane in lanes:
        query = lane_filter(assignee_id, lane, status)
        count = store.tasks.count(query)
        start = max(window_start - total, 0)
        end = min(window_end - total, count)
        if end > start:
            tasks.extend(fetch_lane(store, query, skip=start, limit=end - start))
        total += count

    return tasks, paginator.get_paginated_data(total, total_key='totalTasks')
