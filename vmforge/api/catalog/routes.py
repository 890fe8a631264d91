from flask import Blueprint, jsonify, current_app
from flask_cors import cross_origin

from vmforge.api.access import require_roles
from vmforge.api.payload import json_object
from vmforge.constants import get_options
from vmforge.errors import ValidationFailed
from vmforge.extensions import db
from vmforge.models import Plan

bp = Blueprint('catalog', __name__)

PLAN_FIELDS = {
    'name': 'name',
    'description': 'description',
    'ram': 'ram',
    'cpuCores': 'cpu_cores',
    'diskSize': 'disk_size',
}

REQUIRED_PLAN_FIELDS = ('name', 'ram', 'cpuCores', 'diskSize')

# Tamanhos das colunas de plans (e do snapshot em virtual_machines)
PLAN_LIMITS = {'name': 50, 'description': 255, 'ram': 20, 'cpuCores': 10, 'diskSize': 20}


def _apply_plan(plan, data, creating=False):
    errors = []
    for key, attr in PLAN_FIELDS.items():
        if key not in data and not creating:
            continue
        value = data.get(key)
        value = str(value).strip() if value is not None else ''
        if key in REQUIRED_PLAN_FIELDS and not value:
            errors.append({'field': key, 'message': f'{key} é obrigatório.'})
            continue
        if len(value) > PLAN_LIMITS[key]:
            errors.append({'field': key, 'message': f'{key} deve ter no máximo {PLAN_LIMITS[key]} caracteres.'})
            continue
        setattr(plan, attr, value)

    if errors:
        raise ValidationFailed(errors)


# ----------------------------------------------------------------
# LEITURA (qualquer papel autenticado)
# ----------------------------------------------------------------
@bp.route('/plans', methods=['GET'])
@cross_origin()
@require_roles()
def list_plans():
    """
    Lista os planos do catálogo.
    ---
    tags:
      - Catálogo
    security:
      - Bearer: []
    responses:
      200:
        description: Lista de planos (S, M, L, XL, XXL, XXXL por padrão).
        schema:
          type: array
          items:
            type: object
            properties:
              id:
                type: integer
              name:
                type: string
              ram:
                type: string
                example: "4 GB"
              cpuCores:
                type: string
                example: "2"
              diskSize:
                type: string
                example: "40 GB"
    """
    plans = Plan.query.order_by(Plan.id).all()
    return jsonify([p.to_dict() for p in plans]), 200


@bp.route('/catalog/options', methods=['GET'])
@cross_origin()
@require_roles()
def list_options():
    """
    Opções fixas do wizard: sistemas operacionais, redes, storages, nodes, clusters...
    ---
    tags:
      - Catálogo
    security:
      - Bearer: []
    responses:
      200:
        description: Catálogo de opções.
    """
    return jsonify(get_options()), 200


# ----------------------------------------------------------------
# ROTAS ADMINISTRATIVAS
# ----------------------------------------------------------------
@bp.route('/plans', methods=['POST'])
@require_roles('admin')
def create_plan():
    """
    Cria um plano no catálogo.
    ---
    tags:
      - Catálogo
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
            - ram
            - cpuCores
            - diskSize
          properties:
            name:
              type: string
              example: "M+"
            description:
              type: string
            ram:
              type: string
              example: "6 GB"
            cpuCores:
              type: string
              example: "3"
            diskSize:
              type: string
              example: "60 GB"
    responses:
      201:
        description: Plano criado.
      400:
        description: Campos obrigatórios ausentes.
    """
    data = json_object()
    plan = Plan()
    _apply_plan(plan, data, creating=True)

    db.session.add(plan)
    db.session.commit()
    return jsonify(plan.to_dict()), 201


@bp.route('/plans/<int:plan_id>', methods=['PUT'])
@require_roles('admin')
def update_plan(plan_id):
    """
    Atualiza um plano. VMs já criadas mantêm o snapshot das specs antigas.
    ---
    tags:
      - Catálogo
    security:
      - Bearer: []
    responses:
      200:
        description: Plano atualizado.
      404:
        description: Plano não encontrado.
    """
    plan = db.get_or_404(Plan, plan_id, description="Plano não encontrado.")
    data = json_object()

    try:
        _apply_plan(plan, data)
    except ValidationFailed:
        db.session.rollback()
        raise

    db.session.commit()
    return jsonify(plan.to_dict()), 200


@bp.route('/plans/<int:plan_id>', methods=['DELETE'])
@require_roles('admin')
def delete_plan(plan_id):
    """
    Remove um plano. Bloqueado enquanto houver VMs que o referenciam.
    ---
    tags:
      - Catálogo
    security:
      - Bearer: []
    responses:
      200:
        description: Plano removido.
      404:
        description: Plano não encontrado.
      409:
        description: Plano em uso (retorna dependentCount).
    """
    plan = db.get_or_404(Plan, plan_id, description="Plano não encontrado.")

    dependent_count = plan.virtual_machines.count()
    if dependent_count:
        return jsonify({
            'message': f"Plano usado por {dependent_count} VM(s) e não pode ser removido.",
            'dependentCount': dependent_count
        }), 409

    db.session.delete(plan)
    db.session.commit()
    current_app.logger.info(f"Plano {plan_id} removido")
    return jsonify({'message': 'Plano removido com sucesso.', 'id': plan_id}), 200
