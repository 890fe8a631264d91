from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

HYPERVISOR_CHOICES = ('proxmox', 'vcenter')
DISK_CHOICES = ('ssd', 'hdd')


class Step(Enum):
    HYPERVISOR = 0
    RESOURCES = 1
    CONFIGURATION = 2
    REVIEW = 3


class SubmissionStatus(Enum):
    IDLE = 'idle'
    LOADING = 'loading'
    SUCCESS = 'success'
    ERROR = 'error'


def _blank(value):
    return value is None or not str(value).strip()


@dataclass(frozen=True)
class HypervisorChosen:
    hypervisor_type: str
    hypervisor_id: Optional[int] = None

    def to_payload(self):
        payload = {'hypervisorType': self.hypervisor_type}
        if self.hypervisor_id is not None:
            payload['hypervisorId'] = self.hypervisor_id
        return payload


@dataclass(frozen=True)
class CatalogedResources:
    plan_id: int
    plan_name: str = ''
    ram: str = ''
    cpu_cores: str = ''
    disk_size: str = ''
    disk_type: str = 'ssd'

    @classmethod
    def from_plan(cls, plan, disk_type='ssd'):
        """Aceita o dict devolvido por GET /api/plans."""
        return cls(
            plan_id=plan['id'],
            plan_name=plan.get('name', ''),
            ram=plan.get('ram', ''),
            cpu_cores=plan.get('cpuCores', ''),
            disk_size=plan.get('diskSize', ''),
            disk_type=disk_type
        )

    @property
    def complete(self):
        return self.plan_id is not None

    def to_payload(self):
        return {'planType': 'cataloged', 'planId': self.plan_id, 'diskType': self.disk_type}


@dataclass(frozen=True)
class CustomResources:
    ram: str
    cpu_cores: str
    disk_size: str
    disk_type: str = 'ssd'

    @property
    def complete(self):
        return not any(_blank(v) for v in (self.ram, self.cpu_cores, self.disk_size))

    def to_payload(self):
        return {
            'planType': 'custom',
            'ram': self.ram,
            'cpuCores': self.cpu_cores,
            'diskSize': self.disk_size,
            'diskType': self.disk_type
        }


Resources = Union[CatalogedResources, CustomResources]


@dataclass(frozen=True)
class VMConfiguration:
    name: str
    operating_system: str
    network_interface: str
    client_id: Optional[int] = None
    report_number: Optional[str] = None
    description: Optional[str] = None
    ip_address: Optional[str] = None
    gateway: Optional[str] = None
    dns: Optional[str] = None
    datastore: Optional[str] = None
    host_group: Optional[str] = None
    vnc_access: bool = False
    cluster: Optional[str] = None
    resource_pool: Optional[str] = None
    folder: Optional[str] = None
    snapshot: bool = False
    backup: bool = False

    REQUIRED = (
        ('name', 'Nome da VM é obrigatório.'),
        ('operating_system', 'Sistema operacional é obrigatório.'),
        ('network_interface', 'Interface de rede é obrigatória.'),
    )

    # snake_case (Python) -> camelCase (API)
    WIRE_NAMES = {
        'name': 'name',
        'operating_system': 'operatingSystem',
        'network_interface': 'networkInterface',
        'client_id': 'clientId',
        'report_number': 'reportNumber',
        'description': 'description',
        'ip_address': 'ipAddress',
        'gateway': 'gateway',
        'dns': 'dns',
        'datastore': 'datastore',
        'host_group': 'hostGroup',
        'vnc_access': 'vncAccess',
        'cluster': 'cluster',
        'resource_pool': 'resourcePool',
        'folder': 'folder',
        'snapshot': 'snapshot',
        'backup': 'backup',
    }

    @classmethod
    def validate(cls, values):
        """Retorna a lista de erros [{field, message}] dos campos obrigatórios."""
        return [
            {'field': cls.WIRE_NAMES[key], 'message': message}
            for key, message in cls.REQUIRED
            if _blank(values.get(key))
        ]

    @classmethod
    def from_values(cls, values):
        known = {}
        for key in cls.WIRE_NAMES:
            if key not in values:
                continue
            value = values[key]
            if isinstance(value, str):
                value = value.strip() or None
            known[key] = value
        for key in ('vnc_access', 'snapshot', 'backup'):
            known[key] = bool(known.get(key))
        return cls(**known)

    def to_payload(self):
        return {wire: getattr(self, attr) for attr, wire in self.WIRE_NAMES.items()}


@dataclass(frozen=True)
class ReviewReady:
    """Só existe com as três etapas preenchidas."""
    hypervisor: HypervisorChosen
    resources: Resources
    configuration: VMConfiguration

    def to_payload(self):
        payload = {}
        payload.update(self.hypervisor.to_payload())
        payload.update(self.resources.to_payload())
        payload.update(self.configuration.to_payload())
        return payload


@dataclass(frozen=True)
class SubmissionOutcome:
    status: SubmissionStatus
    http_status: Optional[int] = None
    # True quando a API registrou a VM (201), mesmo que o provisionamento tenha falhado
    accepted: bool = False
    vm: Optional[dict] = None
    message: Optional[str] = None
    errors: Tuple[dict, ...] = ()
