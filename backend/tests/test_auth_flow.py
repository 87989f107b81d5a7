from tests.test_utils_seed import ensure_user, login


def test_login_and_me(client):
    ensure_user('auth_editor', 'Editor')
    body = login(client, 'auth_editor')
    assert body['username'] == 'auth_editor'
    assert body['role'] == 'Editor'
    assert body['access_token'] and body['refresh_token']

    me = client.get('/api/auth/me', headers={'Authorization': f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.get_json() == {'id': body['id'], 'username': 'auth_editor', 'role': 'Editor'}


def test_login_requires_both_fields(client):
    resp = client.post('/api/auth/login', json={'username': 'someone'})
    assert resp.status_code == 400
    assert resp.get_json()['error']['detail'] == 'Please provide username and password'
    assert client.post('/api/auth/login').status_code == 400


def test_login_rejects_bad_credentials(client):
    ensure_user('auth_wrongpw', 'Viewer', password='right')
    assert client.post('/api/auth/login', json={'username': 'auth_wrongpw', 'password': 'wrong'}).status_code == 401
    unknown = client.post('/api/auth/login', json={'username': 'auth_nobody', 'password': 'x'})
    assert unknown.status_code == 401
    assert unknown.get_json()['error']['detail'] == 'Invalid credentials'


def test_refresh_issues_new_access_token(client):
    ensure_user('auth_refresh', 'Admin')
    body = login(client, 'auth_refresh')
    resp = client.post('/api/auth/refresh', headers={'Authorization': f"Bearer {body['refresh_token']}"})
    assert resp.status_code == 200, resp.get_json()
    data = resp.get_json()
    assert data['user'] == {'id': body['id'], 'username': 'auth_refresh', 'role': 'Admin'}
    me = client.get('/api/auth/me', headers={'Authorization': f"Bearer {data['access_token']}"})
    assert me.status_code == 200


def test_refresh_rejects_access_token_and_missing_token(client):
    ensure_user('auth_refresh_bad', 'Viewer')
    body = login(client, 'auth_refresh_bad')
    wrong_kind = client.post('/api/auth/refresh', headers={'Authorization': f"Bearer {body['access_token']}"})
    assert wrong_kind.status_code in (401, 422)
    assert client.post('/api/auth/refresh').status_code == 401


def test_me_requires_token(client):
    resp = client.get('/api/auth/me')
    assert resp.status_code == 401
    assert resp.get_json()['error']['detail'] == 'Not authorized, no token'


def test_login_rejects_malformed_bodies(client):
    for payload in (['a', 'b'], 'admin', {'username': ['a'], 'password': 'x'}, {'username': 'a', 'password': 1}):
        resp = client.post('/api/auth/login', json=payload)
        assert resp.status_code == 400, payload
        assert resp.get_json()['error']['detail'] == 'Please provide username and password'
