from .base import SimulatedAdapter, extract_amount, parse_count

GIB = 1024 ** 3
TIB = 1024 ** 4

DEFAULT_MEMORY_MIB = 1024
DEFAULT_DISK_BYTES = 20 * GIB

GUEST_OS = {
    'ubuntu-20.04': 'UBUNTU_64',
    'ubuntu-22.04': 'UBUNTU_64',
    'centos-7': 'CENTOS_64',
    'centos-8': 'CENTOS_64',
    'windows-server-2019': 'WINDOWS_SERVER_2019',
    'windows-server-2022': 'WINDOWS_SERVER_2022',
    'windows-10': 'WINDOWS_10_64',
    'windows-11': 'WINDOWS_11_64',
}


def map_guest_os(os_name):
    return GUEST_OS.get(os_name, 'OTHER_64')


def parse_memory_mib(ram):
    gb = extract_amount(ram, 'GB')
    if gb is not None:
        return gb * 1024
    return DEFAULT_MEMORY_MIB


def parse_disk_bytes(disk_size):
    gb = extract_amount(disk_size, 'GB')
    if gb is not None:
        return gb * GIB
    tb = extract_amount(disk_size, 'TB')
    if tb is not None:
        return tb * TIB
    return DEFAULT_DISK_BYTES


class VCenterSimulatedAdapter(SimulatedAdapter):
    label = 'vCenter'
    failure_message = 'Falha ao conectar na API do vCenter'

    @property
    def hypervisor_type(self):
        return 'vcenter'

    def build_payload(self, request):
        cpu_count = parse_count(request.cpu_cores)
        dns_servers = [d.strip() for d in request.dns.split(',')] if request.dns else []

        return {
            'name': request.name,
            'description': request.description,
            'guest_OS': map_guest_os(request.operating_system),
            'placement': {
                'cluster': request.cluster,
                'resource_pool': request.resource_pool,
                'folder': request.folder,
                'datastore': request.datastore
            },
            'compute': {
                'cpu': {
                    'count': cpu_count,
                    'cores_per_socket': min(cpu_count, 8) if cpu_count else None,
                    'hot_add_enabled': True
                },
                'memory': {
                    'size_MiB': parse_memory_mib(request.ram),
                    'hot_add_enabled': True
                }
            },
            'disks': [
                {
                    'type': 'SCSI',
                    'new_vmdk': {
                        'capacity': parse_disk_bytes(request.disk_size),
                        'name': f"{request.name}_disk1",
                        'datastore': request.datastore
                    }
                }
            ],
            'nics': [
                {'network': request.network_interface, 'type': 'VMXNET3'}
            ],
            'hardware_version': 'VMX_13',
            'boot': {'type': 'BIOS'},
            'boot_devices': [],
            'vm_options': {'snapshot': request.snapshot},
            'guest_customization': {
                'name': request.name,
                'domain': 'local',
                'ip_settings': {
                    'ipv4': {
                        'type': 'STATIC' if request.ip_address else 'DHCP',
                        'address': request.ip_address,
                        'gateway': request.gateway,
                        'prefix': 24
                    }
                },
                'dns_settings': {'dns_servers': dns_servers}
            }
        }

    def success_message(self, request):
        return f'VM "{request.name}" criada com sucesso no cluster {request.cluster} do vCenter'
