from urllib.parse import urlparse
import ssl

from pyVim.connect import SmartConnect, Disconnect

from vmforge.services.health.base import HypervisorConnectivityCheck

DEFAULT_PORT = 443


class VCenterConnectivityCheck(HypervisorConnectivityCheck):
    label = 'vCenter'

    def check(self):
        if self.hypervisor.auth_type == 'token':
            # O SDK (SOAP) só autentica com usuário e senha
            return {'status': 'unhealthy', 'error': 'vCenter requer autenticação por usuário e senha.'}

        url = self.hypervisor.api_url
        parsed = urlparse(url if '://' in url else f'https://{url}')
        context = None
        if not self.hypervisor.verify_ssl:
            context = ssl._create_unverified_context()

        si = SmartConnect(
            host=parsed.hostname,
            user=self.hypervisor.username,
            pwd=self.hypervisor.password,
            port=parsed.port or DEFAULT_PORT,
            sslContext=context,
            httpConnectionTimeout=self.timeout
        )
        try:
            about = si.content.about
            return {
                'status': 'healthy',
                'details': {
                    'version': about.version,
                    'build': about.build,
                    'product': about.fullName
                }
            }
        finally:
            Disconnect(si)
