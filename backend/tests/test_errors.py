def test_unknown_path_returns_error_json(client):
    resp = client.get('/non-existent-path')
    # Flask default 404 should be wrapped by error handler
    assert resp.status_code == 404
    body = resp.get_json()
    assert body['error']['status'] == 404
    assert 'detail' in body['error']


def test_method_not_allowed_is_wrapped(client):
    resp = client.patch('/api/posts')
    assert resp.status_code == 405
    assert resp.get_json()['error']['status'] == 405


def test_internal_error_shape(client, monkeypatch):
    from tests.test_utils_seed import ensure_user, auth_headers
    from postgate.routes import users
    ensure_user('errors_admin', 'Admin')
    headers = auth_headers(client, 'errors_admin')

    def boom():
        raise RuntimeError('database went away')

    monkeypatch.setattr(users, 'get_db', boom)
    resp = client.get('/api/users', headers=headers)
    assert resp.status_code == 500
    body = resp.get_json()
    assert body['error'] == {'status': 500, 'title': 'Internal Server Error', 'detail': 'Unexpected error'}


def test_health_endpoint(client):
    resp = client.get('/healthz')
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['status'] == 'healthy'
    assert body['timestamp'].endswith('Z')
