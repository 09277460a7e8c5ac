# tests/conftest.py

from datetime import timedelta

import mongomock
import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from store import MemoryStore, MongoStore, set_store
from task.services.task_service import TaskService
from user.services.user_service import UserService

from .factories import make_user


@pytest.fixture(autouse=True)
def fast_password_hasher(settings):
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']


@pytest.fixture(params=['memory', 'mongo'])
def store(request):
    """
    Each store-level test runs against both backends.

    MongoDB is simulated with mongomock so no server is needed.
    """
    if request.param == 'memory':
        backend = MemoryStore()
    else:
        backend = MongoStore(client=mongomock.MongoClient(), db_name='taskboard_test')
        backend.ensure_indexes()
    set_store(backend)
    yield backend
    set_store(None)


@pytest.fixture()
def task_service(store) -> TaskService:
    return TaskService(store)


@pytest.fixture()
def user_service(store) -> UserService:
    return UserService(store)


@pytest.fixture()
def alice(store):
    return make_user(store, 'Alice')


@pytest.fixture()
def bob(store):
    return make_user(store, 'Bob')


@pytest.fixture()
def future():
    return (timezone.now() + timedelta(days=3)).isoformat()


@pytest.fixture()
def api_client():
    backend = MemoryStore()
    set_store(backend)
    client = APIClient()
    client.store = backend
    yield client
    set_store(None)
