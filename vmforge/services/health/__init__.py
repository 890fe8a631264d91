from vmforge.models import Hypervisor, HYPERVISOR_STATUSES

from .providers import DatabaseHealthCheck, ProxmoxConnectivityCheck, VCenterConnectivityCheck

CONNECTIVITY_CHECKS = {
    'proxmox': ProxmoxConnectivityCheck,
    'vcenter': VCenterConnectivityCheck,
}


def hypervisor_summary():
    """Contagem de hypervisors por tipo e status (sem chamadas de rede)."""
    summary = {'total': 0}
    for status in HYPERVISOR_STATUSES:
        summary[status] = 0

    for hypervisor in Hypervisor.query.all():
        summary['total'] += 1
        summary[hypervisor.status] = summary.get(hypervisor.status, 0) + 1
        summary[hypervisor.type] = summary.get(hypervisor.type, 0) + 1

    return summary


def get_system_health():
    """
    Executa verificação de saúde nos subsistemas locais.
    Hypervisors entram apenas como resumo; o teste de conexão é sob demanda.
    """
    providers = [
        DatabaseHealthCheck(),
    ]

    results = []
    global_status = "healthy"

    for provider in providers:
        data = provider.run()
        if data['status'] != 'healthy':
            global_status = "unhealthy"
        results.append(data)

    report = {
        "status": global_status,
        "checks": results
    }

    # Sem banco não há como consultar os hypervisors
    if global_status == "healthy":
        report["hypervisors"] = hypervisor_summary()

    return report


def check_hypervisor(hypervisor, timeout=10):
    """Teste de conectividade de um hypervisor cadastrado."""
    check_cls = CONNECTIVITY_CHECKS.get(hypervisor.type)
    if check_cls is None:
        return {
            'status': 'unhealthy',
            'error': f'Tipo de hypervisor não suportado: {hypervisor.type}',
            'name': hypervisor.name,
            'category': 'compute'
        }
    return check_cls(hypervisor, timeout=timeout).run()
