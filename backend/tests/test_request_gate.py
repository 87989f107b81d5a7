import pytest
from postgate import get_db
from postgate.decorators.auth import require_permissions
from tests.test_utils_seed import ensure_user, auth_headers, jwt_headers

GATED = [
    ('get', '/api/posts'),
    ('post', '/api/posts'),
    ('put', '/api/posts/1'),
    ('delete', '/api/posts/1'),
    ('get', '/api/users'),
]


@pytest.mark.parametrize('method, path', GATED)
def test_unauthenticated_requests_never_reach_evaluator(client, monkeypatch, method, path):
    import postgate.decorators.auth as gate

    def boom(*a, **k):
        raise AssertionError('evaluator must not run without a principal')
    monkeypatch.setattr(gate, 'allows_any', boom)
    resp = getattr(client, method)(path, json={'title': 't', 'content': 'c'})
    assert resp.status_code == 401
    body = resp.get_json()
    assert body['error']['status'] == 401
    assert body['error']['detail'] == 'Not authorized, no token'


@pytest.mark.parametrize('header', ['Bearer not-a-jwt', 'Bearer a.b.c', 'Token abc'])
def test_malformed_tokens_are_unauthorized(client, header):
    resp = client.get('/api/posts', headers={'Authorization': header})
    assert resp.status_code == 401


def test_token_for_deleted_user_is_unauthorized(client, app_instance):
    user = ensure_user('gate_ghost', 'Admin')
    with app_instance.app_context():
        headers = jwt_headers(user.id, 'Admin')
    session = get_db()
    session.delete(user)
    session.commit()
    resp = client.get('/api/posts', headers=headers)
    assert resp.status_code == 401
    assert resp.get_json()['error']['detail'] == 'Not authorized, user not found'


def test_expired_token_is_unauthorized(client, app_instance):
    from datetime import timedelta
    from flask_jwt_extended import create_access_token
    user = ensure_user('gate_expired', 'Admin')
    with app_instance.app_context():
        token = create_access_token(identity=str(user.id), expires_delta=timedelta(seconds=-30))
    resp = client.get('/api/posts', headers={'Authorization': f'Bearer {token}'})
    assert resp.status_code == 401


def test_role_comes_from_storage_not_token_claims(client, app_instance):
    viewer = ensure_user('gate_claims', 'Viewer')
    with app_instance.app_context():
        headers = jwt_headers(viewer.id, 'Admin')
    assert client.get('/api/users', headers=headers).status_code == 403


def test_forbidden_when_role_lacks_action(client):
    ensure_user('gate_viewer', 'Viewer')
    headers = auth_headers(client, 'gate_viewer')
    resp = client.post('/api/posts', json={'title': 't', 'content': 'c'}, headers=headers)
    assert resp.status_code == 403
    assert resp.get_json()['error']['detail'] == 'Forbidden: You do not have permission to perform this action'


def test_gate_passes_when_any_required_action_allowed(app_instance):
    @require_permissions('users:manage', 'posts:read')
    def view():
        return 'ok'

    assert view.required_actions == ('users:manage', 'posts:read')
    editor = ensure_user('gate_any_editor', 'Editor')
    with app_instance.test_request_context('/x', headers=jwt_headers_in(app_instance, editor.id)):
        assert view() == 'ok'


def jwt_headers_in(app, user_id):
    with app.app_context():
        return jwt_headers(user_id)


def test_gate_decides_through_allows_any(client, monkeypatch):
    import postgate.decorators.auth as gate
    ensure_user('gate_delegate_admin', 'Admin')
    headers = auth_headers(client, 'gate_delegate_admin')
    seen = []

    def deny_all(principal, actions):
        seen.append((principal.role, tuple(actions)))
        return False
    monkeypatch.setattr(gate, 'allows_any', deny_all)
    assert client.get('/api/users', headers=headers).status_code == 403
    assert seen == [('Admin', ('users:manage',))]
