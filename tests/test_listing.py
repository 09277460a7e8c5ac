# tests/test_listing.py

import math

import pytest

from task.services.listing import list_tasks

from .factories import make_task


@pytest.fixture()
def spread(store, alice):
    """Two tasks in every lane for alice, created backlog-first."""
    for priority in ['backlog', 'low', 'medium', 'high']:
        for position in range(2):
            make_task(store, alice, title=f'{priority}-{position}', priority=priority, position=position)
    return alice


def test_sorted_by_severity_then_position(store, spread):
    tasks, pagination = list_tasks(store, spread, page=1, limit=100)

    assert [task.title for task in tasks] == [
        'high-0', 'high-1', 'medium-0', 'medium-1', 'low-0', 'low-1', 'backlog-0', 'backlog-1',
    ]
    assert pagination['totalTasks'] == 8


def test_window_spans_lane_boundaries(store, spread):
    tasks, pagination = list_tasks(store, spread, page=2, limit=3)

    assert [task.title for task in tasks] == ['medium-1', 'low-0', 'low-1']
    assert pagination == {
        'page': 2,
        'limit': 3,
        'totalTasks': 8,
        'totalPages': 3,
        'hasNext': True,
        'hasPrev': True,
    }


def test_filters_are_combined(store, spread):
    make_task(store, spread, title='low-done', priority='low', status='completed', position=5)

    tasks, pagination = list_tasks(store, spread, priority='low', status='completed')

    assert [task.title for task in tasks] == ['low-done']
    assert pagination['totalTasks'] == 1


@pytest.mark.parametrize('limit', [1, 3, 5, 8, 10])
def test_total_pages_is_ceiling(store, spread, limit):
    _, pagination = list_tasks(store, spread, page=1, limit=limit)

    assert pagination['totalPages'] == math.ceil(8 / limit)


def test_page_past_the_end_is_empty_not_an_error(store, spread):
    tasks, pagination = list_tasks(store, spread, page=4, limit=3)

    assert tasks == []
    assert pagination['hasNext'] is False
    assert pagination['hasPrev'] is True
    assert pagination['totalTasks'] == 8


def test_other_users_and_archived_tasks_are_excluded(store, spread, bob):
    make_task(store, bob, title='bob-high', priority='high')
    make_task(store, spread, title='archived', priority='high', is_archived=True)

    tasks, _ = list_tasks(store, spread, page=1, limit=100)

    titles = [task.title for task in tasks]
    assert 'bob-high' not in titles
    assert 'archived' not in titles


def test_no_tasks_gives_zero_pages(store, alice):
    tasks, pagination = list_tasks(store, alice)

    assert tasks == []
    assert pagination['totalPages'] == 0
    assert pagination['hasNext'] is False
    assert pagination['hasPrev'] is False
