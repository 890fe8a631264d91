from abc import ABC, abstractmethod
import logging
import time

logger = logging.getLogger(__name__)


class HealthCheckProvider(ABC):
    """
    Verificador de saúde de um subsistema.
    Subclasses definem `name` e `category` e implementam check().
    """

    name = None
    category = None

    @abstractmethod
    def check(self):
        """Detalhes do serviço (dict). Exceção = serviço indisponível."""

    def run(self):
        """Resultado no formato do /api/health: status, detalhes, name, category e latencyMs."""
        started = time.perf_counter()
        try:
            result = {'status': 'healthy', **(self.check() or {})}
        except Exception as e:
            logger.warning(f"Health check '{self.name}' falhou: {e}")
            result = {'status': 'unhealthy', 'error': str(e)}

        result['name'] = self.name
        result['category'] = self.category
        result['latencyMs'] = round((time.perf_counter() - started) * 1000, 2)
        return result


class HypervisorConnectivityCheck(HealthCheckProvider):
    """Base dos testes de conexão com um hypervisor cadastrado."""

    category = 'compute'
    label = None

    def __init__(self, hypervisor, timeout=10):
        self.hypervisor = hypervisor
        self.timeout = timeout

    @property
    def name(self):
        return f"{self.label}: {self.hypervisor.name}"
