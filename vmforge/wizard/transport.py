from dataclasses import dataclass, field
import logging

import requests

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Falha de comunicação com a API (rede, timeout ou resposta inesperada)."""
    pass


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    body: dict = field(default_factory=dict)

    @property
    def message(self):
        if isinstance(self.body, dict):
            return self.body.get('message')
        return None


class ApiTransport:
    """
    Cliente HTTP da API VMForge usado pelo wizard.
    O token JWT obtido no login vai no cabeçalho Authorization das chamadas seguintes.
    """

    def __init__(self, base_url, token=None, timeout=30, session=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        if token:
            self.set_token(token)

    def set_token(self, token):
        self.session.headers['Authorization'] = f'Bearer {token}'

    def _request(self, method, path, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise TransportError(f"Falha de comunicação com {url}: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {'message': response.text}

        return TransportResponse(response.status_code, body)

    def _expect(self, response, status_code=200):
        if response.status_code != status_code:
            message = response.message or f"HTTP {response.status_code}"
            raise TransportError(message)
        return response.body

    def login(self, username, password):
        response = self._request('POST', '/api/auth/login', json={
            'username': username,
            'password': password
        })
        body = self._expect(response)
        self.set_token(body['accessToken'])
        logger.info(f"Autenticado como '{username}'")
        return body['user']

    def list_plans(self):
        return self._expect(self._request('GET', '/api/plans'))

    def get_options(self):
        return self._expect(self._request('GET', '/api/catalog/options'))

    def list_clients(self):
        return self._expect(self._request('GET', '/api/clients'))

    def list_hypervisors(self, hypervisor_type=None):
        params = {'type': hypervisor_type} if hypervisor_type else None
        return self._expect(self._request('GET', '/api/hypervisors', params=params))

    def create_virtual_machine(self, payload):
        """Retorna a resposta crua: o wizard interpreta 201/400/outros."""
        return self._request('POST', '/api/virtual-machines', json=payload)
