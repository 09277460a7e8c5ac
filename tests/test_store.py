# tests/test_store.py

from datetime import timedelta

import pytest
from bson import ObjectId
from django.utils import timezone
from pymongo.errors import ServerSelectionTimeoutError

import store as store_module
from store import (
    ASCENDING,
    DESCENDING,
    DuplicateRecord,
    MemoryStore,
    StoreError,
    connect_store,
    get_store,
    set_store,
)

from .factories import make_task, make_user


def test_insert_assigns_object_id_and_timestamps(store):
    record = store.tasks.insert({'title': 'Write report', 'assignee': 'x'})

    assert ObjectId.is_valid(record['id'])
    assert record['created_at'] is not None
    assert record['updated_at'] is not None
    assert store.tasks.find_by_id(record['id'])['title'] == 'Write report'


def test_find_by_id_treats_malformed_or_unknown_ids_as_absent(store):
    assert store.tasks.find_by_id('not-an-id') is None
    assert store.tasks.find_by_id(str(ObjectId())) is None
    assert store.tasks.replace('not-an-id', {'title': 'x'}) is None
    assert store.tasks.delete('not-an-id') is False


def test_returned_records_are_timezone_aware(store, alice):
    due = timezone.now() + timedelta(days=1)
    task_id = make_task(store, alice, due_date=due)

    record = store.tasks.find_by_id(task_id)

    assert timezone.is_aware(record['created_at'])
    assert timezone.is_aware(record['due_date'])
    assert abs(record['due_date'] - due) < timedelta(milliseconds=1)


def test_replace_merges_patch_and_keeps_creation_time(store, alice):
    task_id = make_task(store, alice, title='Old', tags=['a'])
    before = store.tasks.find_by_id(task_id)

    updated = store.tasks.replace(task_id, {'title': 'New', 'created_at': None})

    assert updated['title'] == 'New'
    assert updated['tags'] == ['a']
    assert updated['created_at'] == before['created_at']
    assert updated['updated_at'] >= before['updated_at']


def test_delete_removes_record_permanently(store, alice):
    task_id = make_task(store, alice)

    assert store.tasks.delete(task_id) is True
    assert store.tasks.find_by_id(task_id) is None
    assert store.tasks.delete(task_id) is False


def test_count_and_find_many_with_operators(store, alice):
    now = timezone.now()
    make_task(store, alice, title='a', status='completed', due_date=now - timedelta(days=1))
    make_task(store, alice, title='b', status='pending', due_date=now - timedelta(days=1))
    make_task(store, alice, title='c', status='pending', due_date=now + timedelta(days=1))
    make_task(store, alice, title='d', status='pending')

    overdue = {'status': {'$ne': 'completed'}, 'due_date': {'$lt': now}}
    assert store.tasks.count(overdue) == 1
    assert store.tasks.count({'status': {'$in': ['pending', 'completed']}}) == 4
    assert store.tasks.count({'due_date': {'$gte': now}}) == 1
    assert [r['title'] for r in store.tasks.find_many(overdue)] == ['b']


def test_sort_skip_and_limit(store, alice):
    for position, title in [(2, 'c'), (0, 'a'), (1, 'b'), (3, 'd')]:
        make_task(store, alice, title=title, position=position)

    ordered = store.tasks.find_many({}, sort=[('position', ASCENDING)])
    window = store.tasks.find_many({}, sort=[('position', DESCENDING)], skip=1, limit=2)

    assert [r['title'] for r in ordered] == ['a', 'b', 'c', 'd']
    assert [r['title'] for r in window] == ['c', 'b']
    assert store.tasks.find_many({}, limit=0) == []


def test_sort_ties_keep_insertion_order(store, alice):
    for title in ['first', 'second', 'third']:
        make_task(store, alice, title=title, position=0)

    found = store.tasks.find_many({}, sort=[('position', ASCENDING)])

    assert [r['title'] for r in found] == ['first', 'second', 'third']


def test_ties_on_creation_time_follow_its_direction(store, alice):
    for title in ['first', 'second', 'third']:
        make_task(store, alice, title=title, position=0)

    newest = store.tasks.find_many({}, sort=[('position', ASCENDING), ('created_at', DESCENDING)])
    oldest = store.tasks.find_many({}, sort=[('position', ASCENDING), ('created_at', ASCENDING)])

    assert [r['title'] for r in newest] == ['third', 'second', 'first']
    assert [r['title'] for r in oldest] == ['first', 'second', 'third']


def test_email_is_unique(store):
    make_user(store, 'Alice', email='alice@example.com')

    with pytest.raises(DuplicateRecord) as excinfo:
        make_user(store, 'Other', email='alice@example.com')

    assert excinfo.value.field == 'email'
    assert store.users.count({'email': 'alice@example.com'}) == 1


def test_list_fields_match_contained_values(store):
    user_id = make_user(store, 'Alice', refresh_tokens=['t1', 't2'])

    assert store.users.find_one({'refresh_tokens': 't2'})['id'] == user_id
    assert store.users.find_one({'refresh_tokens': 't3'}) is None


def test_case_insensitive_regex_inside_or(store):
    make_user(store, 'Alice Smith', email='alice@example.com')
    make_user(store, 'Bob', email='bob@corp.io')

    pattern = {'$regex': 'SMITH', '$options': 'i'}
    found = store.users.find_many({'$or': [{'name': pattern}, {'email': pattern}]})

    assert [r['name'] for r in found] == ['Alice Smith']


def test_id_filter_with_in(store):
    first = make_user(store, 'Alice')
    make_user(store, 'Bob')

    found = store.users.find_many({'id': {'$in': [first, 'bogus']}})

    assert [r['id'] for r in found] == [first]


class UnreachableMongo:
    def __init__(self, *args, **kwargs):
        pass

    def ping(self):
        raise ServerSelectionTimeoutError('no server')


def test_memory_store_is_used_without_uri_in_debug(settings):
    settings.MONGODB_URI = ''
    settings.DEBUG = True

    assert isinstance(connect_store(), MemoryStore)


def test_missing_uri_outside_debug_refuses_to_start(settings):
    settings.MONGODB_URI = ''
    settings.DEBUG = False

    with pytest.raises(StoreError):
        connect_store()


def test_unreachable_mongo_falls_back_only_in_debug(settings, monkeypatch):
    monkeypatch.setattr(store_module, 'MongoStore', UnreachableMongo)
    settings.MONGODB_URI = 'mongodb://db.invalid:27017'

    settings.DEBUG = True
    assert isinstance(connect_store(), MemoryStore)

    settings.DEBUG = False
    with pytest.raises(ServerSelectionTimeoutError):
        connect_store()


def test_backend_is_chosen_once_per_process(monkeypatch):
    calls = []

    def fake_connect():
        calls.append(1)
        return MemoryStore()

    monkeypatch.setattr(store_module, 'connect_store', fake_connect)
    set_store(None)
    try:
        first = get_store()
        assert get_store() is first
        assert len(calls) == 1
    finally:
        set_store(None)
