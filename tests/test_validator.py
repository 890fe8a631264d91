import pytest

from vmforge.errors import ValidationFailed
from vmforge.schemas import validate_vm_request

from conftest import vm_payload


def _fields(excinfo):
    return {err['field'] for err in excinfo.value.errors}


def test_valid_cataloged_request_is_parsed():
    parsed = validate_vm_request(vm_payload())

    assert parsed.hypervisor_type == 'proxmox'
    assert parsed.plan_id == 2
    assert parsed.client_id == 1
    assert parsed.disk_type == 'ssd'
    # Booleanos ausentes viram False
    assert parsed.vnc_access is False
    assert parsed.snapshot is False
    assert parsed.backup is False


@pytest.mark.parametrize('missing', ['name', 'operatingSystem', 'networkInterface'])
def test_missing_required_text_field_is_rejected(missing):
    payload = vm_payload()
    del payload[missing]

    with pytest.raises(ValidationFailed) as excinfo:
        validate_vm_request(payload)

    assert missing in _fields(excinfo)


def test_blank_name_is_rejected():
    with pytest.raises(ValidationFailed) as excinfo:
        validate_vm_request(vm_payload(name='   '))

    assert 'name' in _fields(excinfo)


def test_enumerations_are_enforced():
    payload = vm_payload(hypervisorType='hyperv', planType='rented', diskType='nvme')

    with pytest.raises(ValidationFailed) as excinfo:
        validate_vm_request(payload)

    assert {'hypervisorType', 'planType', 'diskType'} <= _fields(excinfo)


def test_cataloged_requires_plan_id():
    payload = vm_payload()
    del payload['planId']

    with pytest.raises(ValidationFailed) as excinfo:
        validate_vm_request(payload)

    assert _fields(excinfo) == {'planId'}


def test_custom_with_empty_resources_lists_every_field():
    payload = vm_payload(planType='custom', ram='', cpuCores='', diskSize='')
    del payload['planId']

    with pytest.raises(ValidationFailed) as excinfo:
        validate_vm_request(payload)

    assert {'ram', 'cpuCores', 'diskSize'} <= _fields(excinfo)


def test_custom_must_not_carry_plan_id():
    payload = vm_payload(planType='custom', ram='4 GB', cpuCores='2', diskSize='40 GB')

    with pytest.raises(ValidationFailed) as excinfo:
        validate_vm_request(payload)

    assert 'planId' in _fields(excinfo)


def test_custom_accepts_numeric_cpu_cores():
    payload = vm_payload(planType='custom', ram='4 GB', cpuCores=2, diskSize='40 GB')
    del payload['planId']

    parsed = validate_vm_request(payload)

    assert parsed.cpu_cores == '2'


@pytest.mark.parametrize('client_id', [0, -3, 'abc', None])
def test_client_id_must_be_positive_integer(client_id):
    with pytest.raises(ValidationFailed) as excinfo:
        validate_vm_request(vm_payload(clientId=client_id))

    assert 'clientId' in _fields(excinfo)


def test_report_number_is_required():
    with pytest.raises(ValidationFailed) as excinfo:
        validate_vm_request(vm_payload(reportNumber=''))

    assert 'reportNumber' in _fields(excinfo)


def test_unknown_and_server_owned_keys_are_ignored():
    payload = vm_payload(status='running', id=99, userId=7, createdAt='2020-01-01', foo='bar')

    parsed = validate_vm_request(payload)

    assert not hasattr(parsed, 'status')
    assert not hasattr(parsed, 'user_id')


def test_null_booleans_default_to_false():
    parsed = validate_vm_request(vm_payload(vncAccess=None, snapshot=None, backup=True))

    assert parsed.vnc_access is False
    assert parsed.snapshot is False
    assert parsed.backup is True


def test_blank_optional_network_fields_become_none():
    parsed = validate_vm_request(vm_payload(ipAddress='', gateway='  ', dns=''))

    assert parsed.ip_address is None
    assert parsed.gateway is None
    assert parsed.dns is None


def test_non_object_body_is_rejected():
    with pytest.raises(ValidationFailed) as excinfo:
        validate_vm_request(None)

    assert excinfo.value.errors[0]['field'] == 'body'


@pytest.mark.parametrize('field, limit', [
    ('description', 255),
    ('operatingSystem', 50),
    ('networkInterface', 50),
    ('ipAddress', 45),
    ('gateway', 45),
    ('dns', 255),
    ('datastore', 100),
    ('hostGroup', 100),
    ('cluster', 100),
    ('resourcePool', 100),
    ('folder', 100),
    ('name', 100),
    ('reportNumber', 50),
])
def test_text_longer_than_column_is_rejected(field, limit):
    validate_vm_request(vm_payload(**{field: 'x' * limit}))

    with pytest.raises(ValidationFailed) as excinfo:
        validate_vm_request(vm_payload(**{field: 'x' * (limit + 1)}))

    assert _fields(excinfo) == {field}


@pytest.mark.parametrize('field, limit', [('ram', 20), ('cpuCores', 10), ('diskSize', 20)])
def test_custom_resources_longer_than_column_are_rejected(field, limit):
    payload = vm_payload(planType='custom', ram='4 GB', cpuCores='2', diskSize='40 GB')
    del payload['planId']
    payload[field] = '9' * (limit + 1)

    with pytest.raises(ValidationFailed) as excinfo:
        validate_vm_request(payload)

    assert _fields(excinfo) == {field}


def test_oversized_field_is_a_400_on_create(client, operator_headers):
    response = client.post('/api/virtual-machines', json=vm_payload(operatingSystem='x' * 60),
                           headers=operator_headers)

    assert response.status_code == 400
    assert response.get_json()['errors'][0]['field'] == 'operatingSystem'
