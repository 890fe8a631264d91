import secrets
import string

from .base import SimulatedAdapter, extract_amount, parse_count

DEFAULT_MEMORY_MB = 1024
DEFAULT_DISK_GB = 20

OS_TYPES = {
    'ubuntu-20.04': 'l26',
    'ubuntu-22.04': 'l26',
    'centos-7': 'l26',
    'centos-8': 'l26',
    'windows-server-2019': 'win10',
    'windows-server-2022': 'win10',
    'windows-10': 'win10',
    'windows-11': 'win11',
}

VNC_PASSWORD_CHARS = string.ascii_letters + string.digits


def map_operating_system(os_name):
    return OS_TYPES.get(os_name, 'other')


def parse_memory_mb(ram):
    """'4 GB' -> 4096. Entrada fora do padrão cai no default de 1024 MB."""
    gb = extract_amount(ram, 'GB')
    if gb is not None:
        return gb * 1024
    return DEFAULT_MEMORY_MB


def parse_disk_gb(disk_size):
    """'40 GB' -> 40, '1 TB' -> 1024. Entrada fora do padrão cai no default de 20 GB."""
    gb = extract_amount(disk_size, 'GB')
    if gb is not None:
        return gb
    tb = extract_amount(disk_size, 'TB')
    if tb is not None:
        return tb * 1024
    return DEFAULT_DISK_GB


def generate_vnc_password(length=8):
    return ''.join(secrets.choice(VNC_PASSWORD_CHARS) for _ in range(length))


class ProxmoxSimulatedAdapter(SimulatedAdapter):
    label = 'Proxmox'
    failure_message = 'Falha ao conectar na API do Proxmox'

    @property
    def hypervisor_type(self):
        return 'proxmox'

    def build_payload(self, request):
        if request.ip_address:
            ipconfig = f"ip={request.ip_address}/24,gw={request.gateway}"
        else:
            ipconfig = 'ip=dhcp'

        return {
            'name': request.name,
            'description': request.description,
            'node': request.host_group,
            'storage': request.datastore,
            'ostype': map_operating_system(request.operating_system),
            'cores': parse_count(request.cpu_cores),
            'memory': parse_memory_mb(request.ram),
            'disk': parse_disk_gb(request.disk_size),
            'disktype': request.disk_type,
            'net0': f"model=virtio,bridge={request.network_interface}",
            'ipconfig0': ipconfig,
            'nameserver': request.dns,
            'onboot': True,
            'agent': 1,
            'protection': False,
            'startup': '',
            # TODO: a senha VNC é gerada e descartada; definir com o dono do sistema onde entregá-la
            'vncpassword': generate_vnc_password() if request.vnc_access else None,
            'backup': request.backup
        }

    def loggable_payload(self, payload):
        if payload.get('vncpassword'):
            return {**payload, 'vncpassword': '********'}
        return payload

    def success_message(self, request):
        node = request.host_group or 'padrão'
        return f'VM "{request.name}" criada com sucesso no nó {node} do Proxmox'
