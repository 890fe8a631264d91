from vmforge.extensions import db
from datetime import datetime

HYPERVISOR_TYPES = ('proxmox', 'vcenter')
HYPERVISOR_STATUSES = ('active', 'inactive', 'maintenance')
AUTH_TYPES = ('credentials', 'token')


class Hypervisor(db.Model):
    """Perfil de conexão com um backend de virtualização."""
    __tablename__ = 'hypervisors'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    type = db.Column(db.String(20), nullable=False)  # 'proxmox' ou 'vcenter'
    api_url = db.Column(db.String(255), nullable=False)

    # Credenciais: usuário/senha OU token, conforme auth_type
    auth_type = db.Column(db.String(20), nullable=False, default='credentials')
    username = db.Column(db.String(100))
    password = db.Column(db.String(255))
    api_token = db.Column(db.String(255))
    verify_ssl = db.Column(db.Boolean, nullable=False, default=True)

    status = db.Column(db.String(20), nullable=False, default='active')
    datacenter = db.Column(db.String(100))
    version = db.Column(db.String(20))  # Versão do vCenter (ex: 6.7, 7.0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    virtual_machines = db.relationship('VirtualMachine', backref='hypervisor', lazy='dynamic')

    @property
    def is_active(self):
        return self.status == 'active'

    def set_credentials(self, auth_type, username=None, password=None, api_token=None):
        """Aplica o conjunto de credenciais, limpando o que não pertence ao auth_type."""
        self.auth_type = auth_type
        self.username = username
        if auth_type == 'token':
            self.api_token = api_token
            self.password = None
        else:
            self.password = password
            self.api_token = None

    def to_dict(self):
        # Segredos (senha/token) nunca saem da API
        return {
            'id': self.id,
            'name': self.name,
            'type': self.type,
            'apiUrl': self.api_url,
            'authType': self.auth_type,
            'username': self.username,
            'hasPassword': bool(self.password),
            'hasApiToken': bool(self.api_token),
            'verifySsl': self.verify_ssl,
            'status': self.status,
            'datacenter': self.datacenter,
            'version': self.version,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None
        }
