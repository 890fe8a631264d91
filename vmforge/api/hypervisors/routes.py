from flask import Blueprint, jsonify, request, current_app

from vmforge.api.access import require_roles
from vmforge.api.payload import json_object, require_text
from vmforge.errors import ValidationFailed
from vmforge.extensions import db
from vmforge.models import Hypervisor, HYPERVISOR_TYPES, HYPERVISOR_STATUSES, AUTH_TYPES
from vmforge.services.health import check_hypervisor

bp = Blueprint('hypervisors', __name__)

TEXT_FIELDS = {
    'name': 100, 'apiUrl': 255, 'datacenter': 100, 'version': 20,
    'username': 100, 'password': 255, 'apiToken': 255,
}


def _apply_payload(hypervisor, data, creating=False):
    """
    Copia os campos do payload para o hypervisor.
    Senha/token omitidos no update mantêm o valor atual (nunca são devolvidos pela API).
    """
    errors = []

    for key, attr in (('name', 'name'), ('apiUrl', 'api_url')):
        if creating or key in data:
            value = (data.get(key) or '').strip()
            if not value:
                errors.append({'field': key, 'message': f'{key} é obrigatório.'})
            else:
                setattr(hypervisor, attr, value)

    if creating or 'type' in data:
        if data.get('type') not in HYPERVISOR_TYPES:
            errors.append({'field': 'type', 'message': f"type deve ser um de {', '.join(HYPERVISOR_TYPES)}."})
        else:
            hypervisor.type = data['type']

    if 'status' in data:
        if data['status'] not in HYPERVISOR_STATUSES:
            errors.append({'field': 'status', 'message': f"status deve ser um de {', '.join(HYPERVISOR_STATUSES)}."})
        else:
            hypervisor.status = data['status']

    for key, attr in (('datacenter', 'datacenter'), ('version', 'version')):
        if key in data:
            setattr(hypervisor, attr, data[key] or None)

    if 'verifySsl' in data:
        hypervisor.verify_ssl = bool(data['verifySsl'])

    # Credenciais
    auth_type = data.get('authType', hypervisor.auth_type or 'credentials')
    if auth_type not in AUTH_TYPES:
        errors.append({'field': 'authType', 'message': f"authType deve ser um de {', '.join(AUTH_TYPES)}."})
    else:
        username = data.get('username', hypervisor.username)
        password = data.get('password') or (hypervisor.password if auth_type == hypervisor.auth_type else None)
        api_token = data.get('apiToken') or (hypervisor.api_token if auth_type == hypervisor.auth_type else None)

        if auth_type == 'credentials' and not (username and password):
            errors.append({'field': 'password', 'message': 'username e password são obrigatórios para authType=credentials.'})
        elif auth_type == 'token' and not api_token:
            errors.append({'field': 'apiToken', 'message': 'apiToken é obrigatório para authType=token.'})
        else:
            hypervisor.set_credentials(auth_type, username=username, password=password, api_token=api_token)

    if errors:
        raise ValidationFailed(errors)


@bp.route('', methods=['GET'])
@require_roles()
def list_hypervisors():
    """
    Lista os hypervisors cadastrados (sem segredos).
    ---
    tags:
      - Hypervisors
    security:
      - Bearer: []
    parameters:
      - in: query
        name: type
        type: string
        enum: [proxmox, vcenter]
    responses:
      200:
        description: Lista de hypervisors.
    """
    query = Hypervisor.query
    if request.args.get('type'):
        query = query.filter_by(type=request.args['type'])
    hypervisors = query.order_by(Hypervisor.id).all()
    return jsonify([h.to_dict() for h in hypervisors]), 200


@bp.route('/<int:hypervisor_id>', methods=['GET'])
@require_roles()
def get_hypervisor(hypervisor_id):
    """
    Detalhes de um hypervisor.
    ---
    tags:
      - Hypervisors
    security:
      - Bearer: []
    responses:
      200:
        description: Hypervisor encontrado.
      404:
        description: Hypervisor não encontrado.
    """
    hypervisor = db.get_or_404(Hypervisor, hypervisor_id, description="Hypervisor não encontrado.")
    return jsonify(hypervisor.to_dict()), 200


@bp.route('', methods=['POST'])
@require_roles('admin')
def create_hypervisor():
    """
    Cadastra um hypervisor.
    ---
    tags:
      - Hypervisors
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - name
            - type
            - apiUrl
          properties:
            name:
              type: string
              example: "PVE Produção"
            type:
              type: string
              enum: [proxmox, vcenter]
            apiUrl:
              type: string
              example: "https://pve.local:8006"
            authType:
              type: string
              enum: [credentials, token]
            username:
              type: string
              example: "root@pam"
            password:
              type: string
            apiToken:
              type: string
              example: "root@pam!vmforge=xxxxxxxx"
            verifySsl:
              type: boolean
            status:
              type: string
              enum: [active, inactive, maintenance]
            datacenter:
              type: string
            version:
              type: string
    responses:
      201:
        description: Hypervisor criado.
      400:
        description: Dados inválidos.
    """
    data = json_object()
    require_text(data, TEXT_FIELDS)
    hypervisor = Hypervisor()
    _apply_payload(hypervisor, data, creating=True)

    db.session.add(hypervisor)
    db.session.commit()
    current_app.logger.info(f"Hypervisor {hypervisor.id} ({hypervisor.type}) cadastrado")
    return jsonify(hypervisor.to_dict()), 201


@bp.route('/<int:hypervisor_id>', methods=['PUT'])
@require_roles('admin')
def update_hypervisor(hypervisor_id):
    """
    Atualiza um hypervisor. Senha/token omitidos são mantidos.
    ---
    tags:
      - Hypervisors
    security:
      - Bearer: []
    responses:
      200:
        description: Hypervisor atualizado.
      400:
        description: Dados inválidos.
      404:
        description: Hypervisor não encontrado.
    """
    hypervisor = db.get_or_404(Hypervisor, hypervisor_id, description="Hypervisor não encontrado.")
    data = json_object()
    require_text(data, TEXT_FIELDS)

    try:
        _apply_payload(hypervisor, data)
    except ValidationFailed:
        db.session.rollback()
        raise

    db.session.commit()
    return jsonify(hypervisor.to_dict()), 200


@bp.route('/<int:hypervisor_id>', methods=['DELETE'])
@require_roles('admin')
def delete_hypervisor(hypervisor_id):
    """
    Remove um hypervisor. Com VMs vinculadas, apenas desativa (status 'inactive').
    ---
    tags:
      - Hypervisors
    security:
      - Bearer: []
    responses:
      200:
        description: Removido, ou desativado (deactivated=true + dependentCount).
      404:
        description: Hypervisor não encontrado.
    """
    hypervisor = db.get_or_404(Hypervisor, hypervisor_id, description="Hypervisor não encontrado.")

    dependent_count = hypervisor.virtual_machines.count()
    if dependent_count:
        hypervisor.status = 'inactive'
        db.session.commit()
        current_app.logger.info(f"Hypervisor {hypervisor_id} desativado ({dependent_count} VMs vinculadas)")
        return jsonify({
            'message': f"Hypervisor possui {dependent_count} VM(s) vinculada(s); foi desativado.",
            'deactivated': True,
            'dependentCount': dependent_count
        }), 200

    db.session.delete(hypervisor)
    db.session.commit()
    return jsonify({
        'message': 'Hypervisor removido com sucesso.',
        'deactivated': False,
        'dependentCount': 0
    }), 200


@bp.route('/<int:hypervisor_id>/test', methods=['POST'])
@require_roles('admin')
def test_hypervisor(hypervisor_id):
    """
    Testa a conexão com o hypervisor (proxmoxer / pyVmomi).
    ---
    tags:
      - Hypervisors
    security:
      - Bearer: []
    responses:
      200:
        description: Resultado do teste (status 'healthy' ou 'unhealthy', latencyMs, details/error).
      404:
        description: Hypervisor não encontrado.
    """
    hypervisor = db.get_or_404(Hypervisor, hypervisor_id, description="Hypervisor não encontrado.")
    timeout = current_app.config.get('HYPERVISOR_CHECK_TIMEOUT', 10)

    result = check_hypervisor(hypervisor, timeout=timeout)
    if result['status'] != 'healthy':
        current_app.logger.warning(f"Teste de conexão falhou para hypervisor {hypervisor_id}: {result.get('error')}")
    return jsonify(result), 200
