import pytest
import requests
from flask_jwt_extended import create_access_token

from vmforge import create_app
from vmforge.config import TestingConfig
from vmforge.extensions import db
from vmforge.models import Client, Hypervisor, Plan, User, PREDEFINED_PLANS
from vmforge.wizard.transport import ApiTransport, TransportResponse

PASSWORDS = {
    'admin': 'admin123',
    'operator': 'operator123',
    'viewer': 'viewer123',
}


def seed_database():
    """
    Popula o banco de teste:
    - planos 1..6 (S..XXXL)
    - um usuário por papel (admin, operator, viewer)
    - clientes 1 e 2
    - hypervisors 1 (proxmox) e 2 (vcenter), ambos ativos
    """
    for spec in PREDEFINED_PLANS:
        db.session.add(Plan(**spec))

    for role, password in PASSWORDS.items():
        user = User(username=role, email=f'{role}@vmforge.local', role=role)
        user.set_password(password)
        db.session.add(user)

    db.session.add(Client(id=1, name='Cliente Teste', contact_name='Fulano'))
    db.session.add(Client(id=2, name='Outro Cliente'))

    pve = Hypervisor(id=1, name='PVE Lab', type='proxmox', api_url='https://pve.test:8006')
    pve.set_credentials('token', username='root@pam', api_token='root@pam!vmforge=secret-token')
    vcenter = Hypervisor(id=2, name='vCenter Lab', type='vcenter', api_url='https://vcenter.test')
    vcenter.set_credentials('credentials', username='administrator@vsphere.local', password='vc-secret')
    db.session.add(pve)
    db.session.add(vcenter)

    db.session.commit()


def token_for(username):
    user = User.query.filter_by(username=username).first()
    return create_access_token(identity=str(user.id))


def vm_payload(**overrides):
    """Payload mínimo válido (plano catalogado M no Proxmox)."""
    payload = {
        'hypervisorType': 'proxmox',
        'planType': 'cataloged',
        'planId': 2,
        'name': 'web-01',
        'operatingSystem': 'ubuntu-22.04',
        'networkInterface': 'prod-net',
        'clientId': 1,
        'reportNumber': 'R-100'
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def app():
    """
    Instância do Flask configurada para TESTES.
    SQLite em memória, hypervisors simulados sem latência e sempre com sucesso.
    """
    app = create_app(TestingConfig)

    with app.app_context():
        db.create_all()
        seed_database()

        yield app

        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Client HTTP simulado para as rotas."""
    return app.test_client()


@pytest.fixture
def admin_headers(app):
    return {'Authorization': f'Bearer {token_for("admin")}'}


@pytest.fixture
def operator_headers(app):
    return {'Authorization': f'Bearer {token_for("operator")}'}


@pytest.fixture
def viewer_headers(app):
    return {'Authorization': f'Bearer {token_for("viewer")}'}


@pytest.fixture
def failing_hypervisors(app):
    """Todas as chamadas simuladas falham."""
    app.config['HYPERVISOR_SUCCESS_RATE'] = 0.0
    return app


class FlaskClientTransport(ApiTransport):
    """ApiTransport que fala com o test client do Flask em vez da rede."""

    def __init__(self, test_client, token=None):
        self.test_client = test_client
        super().__init__('', token=token, session=requests.Session())

    def _request(self, method, path, **kwargs):
        headers = {}
        if 'Authorization' in self.session.headers:
            headers['Authorization'] = self.session.headers['Authorization']

        response = self.test_client.open(
            path,
            method=method,
            headers=headers,
            json=kwargs.get('json'),
            query_string=kwargs.get('params')
        )
        return TransportResponse(response.status_code, response.get_json(silent=True) or {})


@pytest.fixture
def transport(client):
    """Transport autenticado como operador."""
    transport = FlaskClientTransport(client)
    transport.login('operator', PASSWORDS['operator'])
    return transport
