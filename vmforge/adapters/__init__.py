from vmforge.errors import UnsupportedHypervisorError

from .base import AdapterOutcome, HypervisorAdapter, SimulatedAdapter
from .proxmox import ProxmoxSimulatedAdapter
from .vcenter import VCenterSimulatedAdapter

# Registro de adapters por tipo de hypervisor
ADAPTERS = {
    'proxmox': ProxmoxSimulatedAdapter,
    'vcenter': VCenterSimulatedAdapter,
}


def get_adapter(hypervisor_type, config):
    """Instancia o adapter do tipo pedido com os parâmetros de simulação do app."""
    adapter_cls = ADAPTERS.get(hypervisor_type)
    if adapter_cls is None:
        raise UnsupportedHypervisorError(f"Tipo de hypervisor não suportado: {hypervisor_type}")

    return adapter_cls(
        delay=config.get('HYPERVISOR_SIMULATED_DELAY', 1.0),
        success_rate=config.get('HYPERVISOR_SUCCESS_RATE', 0.9)
    )


__all__ = [
    'AdapterOutcome', 'HypervisorAdapter', 'SimulatedAdapter',
    'ProxmoxSimulatedAdapter', 'VCenterSimulatedAdapter', 'ADAPTERS', 'get_adapter',
]
