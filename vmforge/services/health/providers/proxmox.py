from urllib.parse import urlparse

from proxmoxer import ProxmoxAPI
import urllib3

from vmforge.services.health.base import HypervisorConnectivityCheck

# Silencia avisos de certificado auto-assinado (comum em Proxmox)
urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

DEFAULT_PORT = 8006


def split_api_token(token, username=None):
    """
    Quebra um token do Proxmox ('user@realm!tokenid=secret') em (user, token_name, token_value).
    Se vier só 'tokenid=secret', o usuário é o do perfil.
    """
    full_id, _, token_value = (token or '').partition('=')
    user, _, token_name = full_id.partition('!')
    if not token_name:
        user, token_name = username, full_id
    return user, token_name, token_value


class ProxmoxConnectivityCheck(HypervisorConnectivityCheck):
    label = 'Proxmox'

    def connect(self):
        url = self.hypervisor.api_url
        parsed = urlparse(url if '://' in url else f'https://{url}')
        options = {
            'port': parsed.port or DEFAULT_PORT,
            'verify_ssl': self.hypervisor.verify_ssl,
            'timeout': self.timeout
        }

        if self.hypervisor.auth_type == 'token':
            user, token_name, token_value = split_api_token(
                self.hypervisor.api_token, self.hypervisor.username
            )
            return ProxmoxAPI(
                parsed.hostname,
                user=user,
                token_name=token_name,
                token_value=token_value,
                **options
            )

        return ProxmoxAPI(
            parsed.hostname,
            user=self.hypervisor.username,
            password=self.hypervisor.password,
            **options
        )

    def check(self):
        conn = self.connect()
        version_data = conn.version.get()
        return {
            'status': 'healthy',
            'details': {
                'version': version_data.get('version'),
                'release': version_data.get('release')
            }
        }
