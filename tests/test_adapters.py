import logging
import random

import pytest

from vmforge.adapters import ADAPTERS, get_adapter, ProxmoxSimulatedAdapter, VCenterSimulatedAdapter
from vmforge.adapters import proxmox, vcenter
from vmforge.constants import OS_OPTIONS
from vmforge.errors import UnsupportedHypervisorError
from vmforge.schemas import VMCreateRequest

from conftest import vm_payload


def _request(**overrides):
    data = vm_payload(**{'ram': '4 GB', 'cpuCores': '2', 'diskSize': '40 GB', **overrides})
    return VMCreateRequest.model_validate(data)


class FixedRandom(random.Random):
    def __init__(self, value):
        super().__init__()
        self.value = value

    def random(self):
        return self.value


# --- Tabelas de SO ---

def test_proxmox_os_table_covers_every_offered_os():
    for option in OS_OPTIONS:
        assert proxmox.map_operating_system(option['value']) in ('l26', 'win10', 'win11')


def test_vcenter_os_table_covers_every_offered_os():
    for option in OS_OPTIONS:
        assert vcenter.map_guest_os(option['value']) != 'OTHER_64'


def test_unknown_os_maps_to_generic_identifier():
    assert proxmox.map_operating_system('freebsd-14') == 'other'
    assert vcenter.map_guest_os('freebsd-14') == 'OTHER_64'


@pytest.mark.parametrize('os_name, expected', [
    ('ubuntu-22.04', 'l26'),
    ('centos-7', 'l26'),
    ('windows-server-2022', 'win10'),
    ('windows-10', 'win10'),
    ('windows-11', 'win11'),
])
def test_proxmox_os_mapping(os_name, expected):
    assert proxmox.map_operating_system(os_name) == expected


# --- Conversão de unidades ---

@pytest.mark.parametrize('value, expected', [
    ('4 GB', 4096),
    ('16gb', 16384),
    ('64 Gb', 65536),
    ('muita', 1024),
    (None, 1024),
])
def test_proxmox_memory_parsing(value, expected):
    assert proxmox.parse_memory_mb(value) == expected


@pytest.mark.parametrize('value, expected', [
    ('40 GB', 40),
    ('2 TB', 2048),
    ('1tb', 1024),
    ('grande', 20),
])
def test_proxmox_disk_parsing(value, expected):
    assert proxmox.parse_disk_gb(value) == expected


def test_vcenter_unit_parsing():
    assert vcenter.parse_memory_mib('8 GB') == 8192
    assert vcenter.parse_memory_mib('??') == 1024
    assert vcenter.parse_disk_bytes('40 GB') == 40 * 1024 ** 3
    assert vcenter.parse_disk_bytes('1 TB') == 1024 ** 4
    assert vcenter.parse_disk_bytes('') == 20 * 1024 ** 3


# --- Payloads ---

def test_proxmox_payload_with_static_ip():
    adapter = ProxmoxSimulatedAdapter(delay=0)
    payload = adapter.build_payload(_request(
        ipAddress='10.0.0.10', gateway='10.0.0.1', dns='1.1.1.1',
        hostGroup='node2', datastore='local-lvm', backup=True
    ))

    assert payload['node'] == 'node2'
    assert payload['storage'] == 'local-lvm'
    assert payload['ostype'] == 'l26'
    assert payload['cores'] == 2
    assert payload['memory'] == 4096
    assert payload['disk'] == 40
    assert payload['net0'] == 'model=virtio,bridge=prod-net'
    assert payload['ipconfig0'] == 'ip=10.0.0.10/24,gw=10.0.0.1'
    assert payload['nameserver'] == '1.1.1.1'
    assert payload['onboot'] is True
    assert payload['agent'] == 1
    assert payload['backup'] is True
    assert payload['vncpassword'] is None


def test_proxmox_payload_without_ip_uses_dhcp():
    payload = ProxmoxSimulatedAdapter(delay=0).build_payload(_request())
    assert payload['ipconfig0'] == 'ip=dhcp'


def test_proxmox_vnc_password_is_generated_when_requested():
    payload = ProxmoxSimulatedAdapter(delay=0).build_payload(_request(vncAccess=True))

    password = payload['vncpassword']
    assert len(password) == 8
    assert password.isalnum()


def test_proxmox_vnc_password_is_masked_in_log(caplog):
    adapter = ProxmoxSimulatedAdapter(delay=0, success_rate=1.0)

    with caplog.at_level(logging.INFO, logger='vmforge.adapters.base'):
        outcome = adapter.create_vm(_request(vncAccess=True))

    assert outcome.success
    assert "'vncpassword': '********'" in caplog.text


def test_vcenter_payload_shape():
    adapter = VCenterSimulatedAdapter(delay=0)
    payload = adapter.build_payload(_request(
        hypervisorType='vcenter', operatingSystem='windows-server-2019',
        cpuCores='12', cluster='prod-cluster', resourcePool='high', folder='web-servers',
        datastore='ds-ssd-01', ipAddress='10.1.1.5', gateway='10.1.1.1', dns='8.8.8.8, 8.8.4.4',
        snapshot=True
    ))

    assert payload['guest_OS'] == 'WINDOWS_SERVER_2019'
    assert payload['placement'] == {
        'cluster': 'prod-cluster', 'resource_pool': 'high',
        'folder': 'web-servers', 'datastore': 'ds-ssd-01'
    }
    assert payload['compute']['cpu']['count'] == 12
    assert payload['compute']['cpu']['cores_per_socket'] == 8
    assert payload['compute']['memory']['size_MiB'] == 4096
    assert payload['disks'][0]['new_vmdk']['capacity'] == 40 * 1024 ** 3
    assert payload['nics'] == [{'network': 'prod-net', 'type': 'VMXNET3'}]
    assert payload['hardware_version'] == 'VMX_13'
    assert payload['vm_options'] == {'snapshot': True}
    ipv4 = payload['guest_customization']['ip_settings']['ipv4']
    assert ipv4['type'] == 'STATIC'
    assert ipv4['prefix'] == 24
    assert payload['guest_customization']['dns_settings']['dns_servers'] == ['8.8.8.8', '8.8.4.4']


def test_vcenter_cores_per_socket_follows_small_counts():
    payload = VCenterSimulatedAdapter(delay=0).build_payload(_request(hypervisorType='vcenter', cpuCores='4'))

    assert payload['compute']['cpu'] == {'count': 4, 'cores_per_socket': 4, 'hot_add_enabled': True}


def test_vcenter_payload_without_ip_uses_dhcp():
    payload = VCenterSimulatedAdapter(delay=0).build_payload(_request(hypervisorType='vcenter'))

    assert payload['guest_customization']['ip_settings']['ipv4']['type'] == 'DHCP'
    assert payload['guest_customization']['dns_settings']['dns_servers'] == []


# --- Simulação ---

def test_create_vm_succeeds_below_success_rate():
    adapter = ProxmoxSimulatedAdapter(delay=0, success_rate=0.9, rng=FixedRandom(0.5))
    outcome = adapter.create_vm(_request(hostGroup='node1'))

    assert outcome.success is True
    assert 'web-01' in outcome.message
    assert 'node1' in outcome.message


def test_create_vm_fails_above_success_rate():
    adapter = VCenterSimulatedAdapter(delay=0, success_rate=0.9, rng=FixedRandom(0.95))
    outcome = adapter.create_vm(_request(hypervisorType='vcenter'))

    assert outcome.success is False
    assert outcome.message == 'Falha ao conectar na API do vCenter'


def test_create_vm_turns_payload_exception_into_failure(mocker):
    adapter = ProxmoxSimulatedAdapter(delay=0, success_rate=1.0)
    mocker.patch.object(adapter, 'build_payload', side_effect=RuntimeError('boom'))

    outcome = adapter.create_vm(_request())

    assert outcome.success is False
    assert outcome.message == 'boom'


def test_create_vm_waits_for_simulated_delay(mocker):
    sleep = mocker.patch('vmforge.adapters.base.time.sleep')
    ProxmoxSimulatedAdapter(delay=1.0, success_rate=1.0).create_vm(_request())

    sleep.assert_called_once_with(1.0)


# --- Registro ---

def test_get_adapter_uses_app_settings():
    adapter = get_adapter('vcenter', {'HYPERVISOR_SIMULATED_DELAY': 0, 'HYPERVISOR_SUCCESS_RATE': 0.5})

    assert isinstance(adapter, VCenterSimulatedAdapter)
    assert adapter.delay == 0
    assert adapter.success_rate == 0.5


def test_get_adapter_rejects_unknown_type():
    with pytest.raises(UnsupportedHypervisorError):
        get_adapter('hyperv', {})


def test_registry_covers_both_backends():
    assert set(ADAPTERS) == {'proxmox', 'vcenter'}
