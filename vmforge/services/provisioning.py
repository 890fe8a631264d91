import logging
import threading
from concurrent.futures import ThreadPoolExecutor, TimeoutError as DispatchTimeout

from flask import current_app

from vmforge.adapters import AdapterOutcome, get_adapter
from vmforge.errors import ValidationFailed
from vmforge.extensions import db
from vmforge.models import Client, Hypervisor, Plan, VirtualMachine
from vmforge.schemas import validate_vm_request

logger = logging.getLogger(__name__)

_pool_lock = threading.Lock()


def dispatch_pool():
    """
    Pool da aplicação para as chamadas aos adapters (HYPERVISOR_DISPATCH_WORKERS threads).
    O timeout do dispatch inclui o tempo na fila: com todas as threads ocupadas
    por chamadas lentas, pedidos novos podem expirar sem chegar ao adapter.
    """
    app = current_app._get_current_object()
    with _pool_lock:
        pool = app.extensions.get('hypervisor_dispatch')
        if pool is None:
            pool = ThreadPoolExecutor(
                max_workers=app.config.get('HYPERVISOR_DISPATCH_WORKERS', 16),
                thread_name_prefix='hypervisor-dispatch'
            )
            app.extensions['hypervisor_dispatch'] = pool
    return pool


def _field_error(field, message):
    return {'field': field, 'message': message}


def resolve_references(vm_request):
    """
    Confere as referências do pedido sem escrever nada no banco.
    Retorna (recursos, hypervisor) ou lança ValidationFailed.
    """
    errors = []

    if db.session.get(Client, vm_request.client_id) is None:
        errors.append(_field_error('clientId', f'Cliente {vm_request.client_id} não encontrado.'))

    # Plano catalogado: as specs do plano prevalecem sobre o que veio no payload
    resources = (vm_request.ram, vm_request.cpu_cores, vm_request.disk_size)
    if vm_request.plan_type == 'cataloged':
        plan = db.session.get(Plan, vm_request.plan_id)
        if plan is None:
            errors.append(_field_error('planId', f'Plano {vm_request.plan_id} não encontrado.'))
        else:
            resources = (plan.ram, plan.cpu_cores, plan.disk_size)

    hypervisor = None
    if vm_request.hypervisor_id:
        hypervisor = db.session.get(Hypervisor, vm_request.hypervisor_id)
        if hypervisor is None:
            errors.append(_field_error('hypervisorId', f'Hypervisor {vm_request.hypervisor_id} não encontrado.'))
        elif hypervisor.type != vm_request.hypervisor_type:
            errors.append(_field_error('hypervisorId', 'Hypervisor não corresponde ao hypervisorType informado.'))
        elif hypervisor.status == 'inactive':
            errors.append(_field_error('hypervisorId', 'Hypervisor inativo.'))
    else:
        # Sem id explícito, vincula o primeiro ativo do tipo (pode não existir)
        hypervisor = Hypervisor.query.filter_by(
            type=vm_request.hypervisor_type, status='active'
        ).order_by(Hypervisor.id).first()

    if errors:
        raise ValidationFailed(errors)

    return resources, hypervisor


def dispatch(adapter, vm_request, timeout):
    """Executa o adapter com tempo limite. Exceção ou timeout viram falha."""
    future = dispatch_pool().submit(adapter.create_vm, vm_request)
    try:
        return future.result(timeout=timeout)
    except DispatchTimeout:
        logger.warning(f"Adapter {adapter.hypervisor_type} excedeu {timeout}s para '{vm_request.name}'")
        return AdapterOutcome(False, f'Tempo limite de {timeout}s excedido na chamada ao hypervisor')
    except Exception as e:
        logger.error(f"Adapter {adapter.hypervisor_type} lançou exceção: {e}")
        return AdapterOutcome(False, str(e) or 'Erro inesperado no adapter')


def create_virtual_machine(payload, acting_user_id):
    """
    Pipeline de criação: valida, grava em 'creating', despacha ao adapter
    e grava o status terminal ('running' ou 'error').
    O resultado do provisionamento vai no corpo; o HTTP é sempre 201 aqui.
    """
    vm_request = validate_vm_request(payload)
    (ram, cpu_cores, disk_size), hypervisor = resolve_references(vm_request)

    # Resolve o adapter antes de qualquer escrita (tipo desconhecido => 500)
    adapter = get_adapter(vm_request.hypervisor_type, current_app.config)

    vm = VirtualMachine(
        name=vm_request.name,
        description=vm_request.description,
        hypervisor_type=vm_request.hypervisor_type,
        hypervisor_id=hypervisor.id if hypervisor else None,
        plan_type=vm_request.plan_type,
        plan_id=vm_request.plan_id if vm_request.plan_type == 'cataloged' else None,
        ram=ram,
        cpu_cores=cpu_cores,
        disk_size=disk_size,
        disk_type=vm_request.disk_type,
        operating_system=vm_request.operating_system,
        network_interface=vm_request.network_interface,
        ip_address=vm_request.ip_address,
        gateway=vm_request.gateway,
        dns=vm_request.dns,
        datastore=vm_request.datastore,
        host_group=vm_request.host_group,
        vnc_access=vm_request.vnc_access,
        cluster=vm_request.cluster,
        resource_pool=vm_request.resource_pool,
        folder=vm_request.folder,
        snapshot=vm_request.snapshot,
        backup=vm_request.backup,
        status='creating',
        client_id=vm_request.client_id,
        report_number=vm_request.report_number,
        user_id=acting_user_id
    )
    db.session.add(vm)
    db.session.commit()
    logger.info(f"VM {vm.id} ('{vm.name}') registrada em 'creating' ({vm.hypervisor_type})")

    # O adapter recebe os recursos efetivos (do plano, quando catalogado)
    effective_request = vm_request.model_copy(
        update={'ram': ram, 'cpu_cores': cpu_cores, 'disk_size': disk_size}
    )
    timeout = current_app.config.get('HYPERVISOR_DISPATCH_TIMEOUT', 30)
    outcome = dispatch(adapter, effective_request, timeout)

    vm.transition_to('running' if outcome.success else 'error')
    db.session.commit()
    logger.info(f"VM {vm.id} finalizada com status '{vm.status}': {outcome.message}")

    return {
        'id': vm.id,
        'name': vm.name,
        'status': vm.status,
        'message': outcome.message,
        'ram': vm.ram,
        'cpuCores': vm.cpu_cores,
        'diskSize': vm.disk_size
    }
