# tests/test_api.py

from datetime import timedelta

from django.utils import timezone


def register(client, name='Alice', email='alice@example.com'):
    response = client.post(
        '/api/auth/register/',
        {'name': name, 'email': email, 'password': 'Secret123'},
        format='json',
    )
    assert response.status_code == 201, response.json()
    return response.json()['data']


def authenticate(client, session):
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {session['accessToken']}")


def test_requests_without_token_are_rejected(api_client):
    response = api_client.get('/api/tasks/')

    assert response.status_code == 401
    assert response.json()['success'] is False
    assert response.json()['kind'] == 'authentication_failed'


def test_invalid_token_is_rejected(api_client):
    api_client.credentials(HTTP_AUTHORIZATION='Bearer not-a-jwt')

    assert api_client.get('/api/tasks/').status_code == 401


def test_register_sets_refresh_cookie_and_hides_secrets(api_client):
    data = register(api_client)

    assert data['user']['email'] == 'alice@example.com'
    assert 'password' not in data['user']
    assert 'refresh_tokens' not in data['user']
    assert api_client.cookies['refresh_token'].value


def test_duplicate_registration(api_client):
    register(api_client)

    response = api_client.post(
        '/api/auth/register/',
        {'name': 'Alice', 'email': 'alice@example.com', 'password': 'Secret123'},
        format='json',
    )

    assert response.status_code == 400
    assert response.json()['error'] == 'User with this email already exists'
    assert api_client.store.users.count({}) == 1


def test_login_refresh_and_logout(api_client):
    register(api_client)
    api_client.cookies.clear()

    login = api_client.post('/api/auth/login/', {'email': 'alice@example.com', 'password': 'Secret123'}, format='json')
    assert login.status_code == 200
    authenticate(api_client, login.json()['data'])

    refreshed = api_client.post('/api/auth/refresh/')
    assert refreshed.status_code == 200
    assert refreshed.json()['data']['accessToken']

    me = api_client.get('/api/auth/me/')
    assert me.json()['data']['user']['name'] == 'Alice'

    assert api_client.post('/api/auth/logout/').status_code == 200
    assert api_client.post('/api/auth/refresh/').status_code == 401


def test_bad_login(api_client):
    register(api_client)

    response = api_client.post('/api/auth/login/', {'email': 'alice@example.com', 'password': 'Nope1234'}, format='json')

    assert response.status_code == 401
    assert response.json()['error'] == 'Invalid credentials'


def test_task_lifecycle(api_client):
    session = register(api_client)
    authenticate(api_client, session)
    due = (timezone.now() + timedelta(days=2)).isoformat()

    created = api_client.post(
        '/api/tasks/',
        {'title': 'Write docs', 'priority': 'high', 'dueDate': due, 'tags': ['docs']},
        format='json',
    )
    assert created.status_code == 201
    task = created.json()['data']['task']
    assert task['assignee']['id'] == session['user']['id']
    assert task['createdBy']['email'] == 'alice@example.com'
    assert task['position'] == 0
    assert task['isOverdue'] is False

    status_response = api_client.patch(f"/api/tasks/{task['id']}/status/", {'status': 'in-progress'}, format='json')
    assert status_response.json()['data']['task']['status'] == 'in-progress'

    moved = api_client.patch(f"/api/tasks/{task['id']}/priority/", {'priority': 'low', 'position': 3}, format='json')
    assert moved.json()['data']['task']['priority'] == 'low'
    assert moved.json()['data']['task']['position'] == 3

    updated = api_client.put(f"/api/tasks/{task['id']}/", {'title': 'Write better docs'}, format='json')
    assert updated.json()['data']['task']['title'] == 'Write better docs'

    board = api_client.get('/api/tasks/', {'board': 'true', 'limit': 10}).json()['data']
    assert list(board) == ['high', 'medium', 'low', 'backlog']
    assert board['low']['totalCount'] == 1
    assert board['low']['tasks'][0]['title'] == 'Write better docs'

    listing = api_client.get('/api/tasks/', {'page': 1, 'limit': 5}).json()['data']
    assert listing['pagination']['totalTasks'] == 1
    assert listing['pagination']['totalPages'] == 1

    stats = api_client.get('/api/tasks/stats/').json()['data']
    assert stats['statusCounts']['in-progress'] == 1
    assert stats['priorityCounts']['low'] == 1

    assert api_client.delete(f"/api/tasks/{task['id']}/").status_code == 200
    assert api_client.get(f"/api/tasks/{task['id']}/").status_code == 404


def test_past_due_date_is_a_validation_error(api_client):
    authenticate(api_client, register(api_client))
    yesterday = (timezone.now() - timedelta(days=1)).isoformat()

    response = api_client.post('/api/tasks/', {'title': 'Late', 'dueDate': yesterday}, format='json')

    assert response.status_code == 400
    body = response.json()
    assert body['kind'] == 'validation_failed'
    assert body['details']['dueDate'] == ['Due date must be in the future']


def test_strangers_cannot_touch_tasks(api_client):
    owner = register(api_client)
    authenticate(api_client, owner)
    task_id = api_client.post('/api/tasks/', {'title': 'Private'}, format='json').json()['data']['task']['id']

    stranger = register(api_client, name='Mallory', email='mallory@example.com')
    authenticate(api_client, stranger)

    assert api_client.get(f'/api/tasks/{task_id}/').status_code == 403
    response = api_client.delete(f'/api/tasks/{task_id}/')
    assert response.status_code == 403
    assert response.json()['kind'] == 'authorization_denied'
    assert api_client.store.tasks.find_by_id(task_id) is not None


def test_unknown_task_is_not_found(api_client):
    authenticate(api_client, register(api_client))

    response = api_client.patch('/api/tasks/0123456789abcdef01234567/status/', {'status': 'completed'}, format='json')

    assert response.status_code == 404
    assert response.json()['error'] == 'Task not found'


def test_users_listing_and_detail(api_client):
    session = register(api_client)
    register(api_client, name='Bob', email='bob@example.com')
    authenticate(api_client, session)

    listing = api_client.get('/api/users/', {'search': 'bob'}).json()['data']
    assert [user['name'] for user in listing['users']] == ['Bob']

    detail = api_client.get(f"/api/users/{session['user']['id']}/")
    assert detail.status_code == 200
    assert detail.json()['data']['user']['email'] == 'alice@example.com'


def test_profile_update(api_client):
    authenticate(api_client, register(api_client))

    response = api_client.put('/api/auth/me/', {'name': 'Alice Cooper'}, format='json')

    assert response.status_code == 200
    assert response.json()['data']['user']['name'] == 'Alice Cooper'
