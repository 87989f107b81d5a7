from tests.test_utils_seed import ensure_user, auth_headers


def test_admin_lists_users_with_pagination(client):
    ensure_user('users_admin', 'Admin')
    ensure_user('users_listed_a', 'Editor')
    ensure_user('users_listed_b', 'Viewer')
    headers = auth_headers(client, 'users_admin')

    resp = client.get('/api/users?limit=2', headers=headers)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['pagination']['limit'] == 2
    assert body['pagination']['total'] >= 3
    assert len(body['data']) == 2
    row = body['data'][0]
    assert set(row) == {'id', 'username', 'role', 'created_at'}
    assert 'password_hash' not in row


def test_non_admins_cannot_list_users(client):
    ensure_user('users_editor', 'Editor')
    ensure_user('users_viewer', 'Viewer')
    for username in ('users_editor', 'users_viewer'):
        resp = client.get('/api/users', headers=auth_headers(client, username))
        assert resp.status_code == 403, username
        assert resp.get_json()['error']['detail'] == 'Forbidden: You do not have permission to perform this action'
