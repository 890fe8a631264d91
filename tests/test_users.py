from vmforge.extensions import db
from vmforge.models import User, VirtualMachine

from conftest import vm_payload


def test_list_users_admin_only(client, admin_headers, operator_headers):
    assert client.get('/api/admin/users', headers=operator_headers).status_code == 403

    response = client.get('/api/admin/users', headers=admin_headers)
    assert response.status_code == 200
    users = response.get_json()
    assert [u['username'] for u in users] == ['admin', 'operator', 'viewer']
    assert all('password' not in u and 'passwordHash' not in u for u in users)


def test_create_user(client, admin_headers):
    response = client.post('/api/admin/users', json={
        'username': 'joana', 'password': 'pw123456', 'fullName': 'Joana', 'role': 'viewer'
    }, headers=admin_headers)

    assert response.status_code == 201
    assert response.get_json()['role'] == 'viewer'

    login = client.post('/api/auth/login', json={'username': 'joana', 'password': 'pw123456'})
    assert login.status_code == 200


def test_create_user_defaults_to_operator(client, admin_headers):
    response = client.post('/api/admin/users', json={'username': 'novo', 'password': 'x1'}, headers=admin_headers)
    assert response.get_json()['role'] == 'operator'


def test_create_user_validation(client, admin_headers):
    response = client.post('/api/admin/users', json={'username': '', 'role': 'root'}, headers=admin_headers)

    assert response.status_code == 400
    assert {'username', 'password', 'role'} == {e['field'] for e in response.get_json()['errors']}


def test_duplicate_username_conflicts(client, admin_headers):
    response = client.post('/api/admin/users', json={'username': 'viewer', 'password': 'x'}, headers=admin_headers)
    assert response.status_code == 409


def test_update_role_and_password(client, admin_headers):
    viewer_id = User.query.filter_by(username='viewer').first().id

    response = client.put(f'/api/admin/users/{viewer_id}', json={
        'role': 'operator', 'password': 'trocada'
    }, headers=admin_headers)

    assert response.status_code == 200
    assert response.get_json()['role'] == 'operator'
    assert client.post('/api/auth/login', json={'username': 'viewer', 'password': 'trocada'}).status_code == 200


def test_admin_cannot_delete_self(client, admin_headers):
    admin_id = User.query.filter_by(username='admin').first().id

    response = client.delete(f'/api/admin/users/{admin_id}', headers=admin_headers)

    assert response.status_code == 400
    assert db.session.get(User, admin_id) is not None


def test_delete_user_keeps_vms(client, admin_headers, operator_headers):
    vm_id = client.post('/api/virtual-machines', json=vm_payload(), headers=operator_headers).get_json()['id']
    operator_id = User.query.filter_by(username='operator').first().id

    response = client.delete(f'/api/admin/users/{operator_id}', headers=admin_headers)

    assert response.status_code == 200
    vm = db.session.get(VirtualMachine, vm_id)
    assert vm is not None
    assert vm.user_id is None


def test_token_of_deleted_user_is_refused(client, admin_headers, operator_headers):
    operator_id = User.query.filter_by(username='operator').first().id
    client.delete(f'/api/admin/users/{operator_id}', headers=admin_headers)

    assert client.get('/api/auth/me', headers=operator_headers).status_code == 401


def test_non_text_username_is_a_400(client, admin_headers):
    viewer_id = User.query.filter_by(username='viewer').first().id

    created = client.post('/api/admin/users', json={'username': 42, 'password': 'x'}, headers=admin_headers)
    updated = client.put(f'/api/admin/users/{viewer_id}', json={'username': ['a']}, headers=admin_headers)

    assert created.status_code == 400
    assert created.get_json()['errors'] == [{'field': 'username', 'message': 'username deve ser texto.'}]
    assert updated.status_code == 400


def test_array_body_is_a_400(client, admin_headers):
    response = client.post('/api/admin/users', json=['admin'], headers=admin_headers)

    assert response.status_code == 400
    assert response.get_json()['errors'][0]['field'] == 'body'


def test_username_longer_than_column_is_a_400(client, admin_headers):
    response = client.post('/api/admin/users', json={'username': 'u' * 65, 'password': 'x'}, headers=admin_headers)
    assert response.status_code == 400
