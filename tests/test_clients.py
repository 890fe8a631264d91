from vmforge.models import Client

from conftest import vm_payload


def test_list_clients(client, viewer_headers):
    response = client.get('/api/clients', headers=viewer_headers)

    assert response.status_code == 200
    names = [c['name'] for c in response.get_json()]
    assert names == ['Cliente Teste', 'Outro Cliente']


def test_create_client(client, admin_headers):
    response = client.post('/api/clients', json={
        'name': 'Secretaria de Obras',
        'contactName': 'Maria',
        'email': 'maria@obras.local',
        'department': 'Infra'
    }, headers=admin_headers)

    assert response.status_code == 201
    data = response.get_json()
    assert data['contactName'] == 'Maria'
    assert Client.query.count() == 3


def test_create_requires_admin(client, operator_headers):
    response = client.post('/api/clients', json={'name': 'X'}, headers=operator_headers)
    assert response.status_code == 403


def test_duplicate_name_conflicts(client, admin_headers):
    response = client.post('/api/clients', json={'name': 'cliente teste'}, headers=admin_headers)

    assert response.status_code == 409
    assert Client.query.count() == 2


def test_create_without_name(client, admin_headers):
    response = client.post('/api/clients', json={'email': 'a@b.c'}, headers=admin_headers)
    assert response.status_code == 400


def test_update_client(client, admin_headers):
    response = client.put('/api/clients/2', json={'notes': 'contrato 2025', 'phone': '1234'}, headers=admin_headers)

    assert response.status_code == 200
    assert response.get_json()['notes'] == 'contrato 2025'
    assert response.get_json()['name'] == 'Outro Cliente'


def test_update_to_existing_name_conflicts(client, admin_headers):
    response = client.put('/api/clients/2', json={'name': 'Cliente Teste'}, headers=admin_headers)
    assert response.status_code == 409


def test_delete_client_with_vms_is_rejected_with_count(client, admin_headers, operator_headers):
    for name in ('a', 'b'):
        client.post('/api/virtual-machines', json=vm_payload(name=name), headers=operator_headers)

    response = client.delete('/api/clients/1', headers=admin_headers)

    assert response.status_code == 409
    assert response.get_json()['dependentCount'] == 2
    assert Client.query.count() == 2


def test_delete_client_without_vms(client, admin_headers):
    response = client.delete('/api/clients/2', headers=admin_headers)

    assert response.status_code == 200
    assert Client.query.count() == 1


def test_delete_unknown_client(client, admin_headers):
    assert client.delete('/api/clients/99', headers=admin_headers).status_code == 404


def test_malformed_client_bodies_are_400(client, admin_headers):
    assert client.post('/api/clients', json=[{'name': 'x'}], headers=admin_headers).status_code == 400
    assert client.post('/api/clients', json={'name': 7}, headers=admin_headers).status_code == 400
    assert client.put('/api/clients/1', json={'phone': '9' * 41}, headers=admin_headers).status_code == 400
