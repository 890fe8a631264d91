from flask import Blueprint, jsonify, request, current_app, abort, g

from vmforge.api.access import require_roles
from vmforge.extensions import db
from vmforge.models import VirtualMachine, VM_STATUSES
from vmforge.services.provisioning import create_virtual_machine

bp = Blueprint('virtual_machines', __name__)


def _int_arg(name):
    value = request.args.get(name)
    if value is None or value == '':
        return None
    try:
        return int(value)
    except ValueError:
        abort(400, description=f"Parâmetro '{name}' deve ser inteiro.")


@bp.route('', methods=['GET'])
@require_roles()
def list_virtual_machines():
    """
    Lista as VMs registradas (mais recentes primeiro).
    ---
    tags:
      - Máquinas Virtuais
    security:
      - Bearer: []
    parameters:
      - in: query
        name: clientId
        type: integer
      - in: query
        name: userId
        type: integer
      - in: query
        name: status
        type: string
        enum: [creating, running, error, stopped]
    responses:
      200:
        description: Lista de VMs.
      400:
        description: Filtro inválido.
    """
    query = VirtualMachine.query

    client_id = _int_arg('clientId')
    if client_id is not None:
        query = query.filter_by(client_id=client_id)

    user_id = _int_arg('userId')
    if user_id is not None:
        query = query.filter_by(user_id=user_id)

    status = request.args.get('status')
    if status:
        if status not in VM_STATUSES:
            abort(400, description=f"Status inválido: {status}")
        query = query.filter_by(status=status)

    vms = query.order_by(VirtualMachine.id.desc()).all()
    return jsonify([vm.to_dict() for vm in vms]), 200


@bp.route('/<int:vm_id>', methods=['GET'])
@require_roles()
def get_virtual_machine(vm_id):
    """
    Detalhes de uma VM.
    ---
    tags:
      - Máquinas Virtuais
    security:
      - Bearer: []
    responses:
      200:
        description: VM encontrada.
      404:
        description: VM não encontrada.
    """
    vm = db.get_or_404(VirtualMachine, vm_id, description="VM não encontrada.")
    return jsonify(vm.to_dict()), 200


@bp.route('', methods=['POST'])
@require_roles('admin', 'operator')
def create_vm():
    """
    Cria uma VM: valida, registra em 'creating', chama o hypervisor e grava o status final.
    O HTTP é 201 mesmo quando o hypervisor falha; o resultado vem em 'status' e 'message'.
    ---
    tags:
      - Máquinas Virtuais
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - hypervisorType
            - planType
            - name
            - operatingSystem
            - networkInterface
            - clientId
            - reportNumber
          properties:
            hypervisorType:
              type: string
              enum: [proxmox, vcenter]
            hypervisorId:
              type: integer
            planType:
              type: string
              enum: [cataloged, custom]
            planId:
              type: integer
              description: Obrigatório quando planType=cataloged
            name:
              type: string
              example: "web-01"
            ram:
              type: string
              example: "4 GB"
            cpuCores:
              type: string
              example: "2"
            diskSize:
              type: string
              example: "40 GB"
            diskType:
              type: string
              enum: [ssd, hdd]
            operatingSystem:
              type: string
              example: "ubuntu-22.04"
            networkInterface:
              type: string
              example: "prod-net"
            ipAddress:
              type: string
              description: Vazio => DHCP
            clientId:
              type: integer
            reportNumber:
              type: string
              example: "R-100"
    responses:
      201:
        description: VM registrada (status 'running' ou 'error').
      400:
        description: Dados inválidos (message + errors por campo).
      403:
        description: Papel sem permissão de criação.
      500:
        description: Tipo de hypervisor sem adapter.
    """
    payload = request.get_json(silent=True)
    result = create_virtual_machine(payload, acting_user_id=g.current_user.id)
    return jsonify(result), 201


@bp.route('/<int:vm_id>', methods=['DELETE'])
@require_roles('admin')
def delete_virtual_machine(vm_id):
    """
    Remove o registro de uma VM (não toca no hypervisor).
    ---
    tags:
      - Máquinas Virtuais
    security:
      - Bearer: []
    responses:
      200:
        description: Registro removido.
      404:
        description: VM não encontrada.
    """
    vm = db.get_or_404(VirtualMachine, vm_id, description="VM não encontrada.")
    db.session.delete(vm)
    db.session.commit()
    current_app.logger.info(f"VM {vm_id} removida por {g.current_user.username}")
    return jsonify({'message': 'VM removida com sucesso.', 'id': vm_id}), 200
