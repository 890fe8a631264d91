from vmforge.extensions import db
from vmforge.errors import InvalidStatusTransition
from datetime import datetime

VM_STATUSES = ('creating', 'running', 'error', 'stopped')

# Transições permitidas. Dentro do pipeline de criação só saímos de 'creating'
# para 'running' ou 'error'.
STATUS_TRANSITIONS = {
    'creating': ('running', 'error'),
    'running': ('stopped',),
    'stopped': ('running',),
    'error': (),
}


class VirtualMachine(db.Model):
    __tablename__ = 'virtual_machines'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(255))

    # Classificação
    hypervisor_type = db.Column(db.String(20), nullable=False)  # 'proxmox' ou 'vcenter'
    hypervisor_id = db.Column(db.Integer, db.ForeignKey('hypervisors.id'), nullable=True)
    plan_type = db.Column(db.String(20), nullable=False)  # 'cataloged' ou 'custom'
    plan_id = db.Column(db.Integer, db.ForeignKey('plans.id'), nullable=True)  # null se custom

    # Snapshot das specs no momento da criação
    ram = db.Column(db.String(20), nullable=False)
    cpu_cores = db.Column(db.String(10), nullable=False)
    disk_size = db.Column(db.String(20), nullable=False)
    disk_type = db.Column(db.String(10), nullable=False, default='ssd')

    # Rede (ip vazio => DHCP)
    operating_system = db.Column(db.String(50), nullable=False)
    network_interface = db.Column(db.String(50), nullable=False)
    ip_address = db.Column(db.String(45))
    gateway = db.Column(db.String(45))
    dns = db.Column(db.String(255))

    datastore = db.Column(db.String(100))

    # Específicos do Proxmox
    host_group = db.Column(db.String(100))  # Node do Proxmox
    vnc_access = db.Column(db.Boolean, default=False)

    # Específicos do vCenter
    cluster = db.Column(db.String(100))
    resource_pool = db.Column(db.String(100))
    folder = db.Column(db.String(100))
    snapshot = db.Column(db.Boolean, default=False)

    backup = db.Column(db.Boolean, default=False)

    status = db.Column(db.String(20), nullable=False, default='creating')
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # Associações
    client_id = db.Column(db.Integer, db.ForeignKey('clients.id'), nullable=True)
    report_number = db.Column(db.String(50))
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    def transition_to(self, new_status):
        allowed = STATUS_TRANSITIONS.get(self.status, ())
        if new_status not in allowed:
            raise InvalidStatusTransition(
                f"VM {self.id}: transição '{self.status}' -> '{new_status}' não permitida."
            )
        self.status = new_status

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'hypervisorType': self.hypervisor_type,
            'hypervisorId': self.hypervisor_id,
            'planType': self.plan_type,
            'planId': self.plan_id,
            'ram': self.ram,
            'cpuCores': self.cpu_cores,
            'diskSize': self.disk_size,
            'diskType': self.disk_type,
            'operatingSystem': self.operating_system,
            'networkInterface': self.network_interface,
            'ipAddress': self.ip_address,
            'gateway': self.gateway,
            'dns': self.dns,
            'datastore': self.datastore,
            'hostGroup': self.host_group,
            'vncAccess': bool(self.vnc_access),
            'cluster': self.cluster,
            'resourcePool': self.resource_pool,
            'folder': self.folder,
            'snapshot': bool(self.snapshot),
            'backup': bool(self.backup),
            'status': self.status,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'clientId': self.client_id,
            'reportNumber': self.report_number,
            'userId': self.user_id
        }
