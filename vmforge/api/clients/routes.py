from flask import Blueprint, jsonify, current_app

from vmforge.api.access import require_roles
from vmforge.api.payload import json_object, require_text
from vmforge.extensions import db
from vmforge.models import Client

bp = Blueprint('clients', __name__)

EDITABLE_FIELDS = {
    'name': 'name',
    'contactName': 'contact_name',
    'email': 'email',
    'phone': 'phone',
    'department': 'department',
    'notes': 'notes',
}

TEXT_LIMITS = {
    'name': 120, 'contactName': 120, 'email': 120,
    'phone': 40, 'department': 120, 'notes': None,
}


def _name_taken(name, exclude_id=None):
    query = Client.query.filter(db.func.lower(Client.name) == name.lower())
    if exclude_id is not None:
        query = query.filter(Client.id != exclude_id)
    return query.first() is not None


@bp.route('', methods=['GET'])
@require_roles()
def list_clients():
    """
    Lista os clientes cadastrados.
    ---
    tags:
      - Clientes
    security:
      - Bearer: []
    responses:
      200:
        description: Lista de clientes.
    """
    clients = Client.query.order_by(Client.name).all()
    return jsonify([c.to_dict() for c in clients]), 200


@bp.route('/<int:client_id>', methods=['GET'])
@require_roles()
def get_client(client_id):
    """
    Detalhes de um cliente.
    ---
    tags:
      - Clientes
    security:
      - Bearer: []
    responses:
      200:
        description: Cliente encontrado.
      404:
        description: Cliente não encontrado.
    """
    client = db.get_or_404(Client, client_id, description="Cliente não encontrado.")
    return jsonify(client.to_dict()), 200


@bp.route('', methods=['POST'])
@require_roles('admin')
def create_client():
    """
    Cadastra um cliente (nome único).
    ---
    tags:
      - Clientes
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
          properties:
            name:
              type: string
              example: "Secretaria de Saúde"
            contactName:
              type: string
            email:
              type: string
            phone:
              type: string
            department:
              type: string
            notes:
              type: string
    responses:
      201:
        description: Cliente criado.
      400:
        description: Nome ausente.
      409:
        description: Nome já cadastrado.
    """
    data = json_object()
    require_text(data, TEXT_LIMITS)
    name = (data.get('name') or '').strip()

    if not name:
        return jsonify({'message': 'Nome do cliente é obrigatório.'}), 400
    if _name_taken(name):
        return jsonify({'message': f"Cliente '{name}' já existe."}), 409

    client = Client(name=name)
    for key, attr in EDITABLE_FIELDS.items():
        if key != 'name' and key in data:
            setattr(client, attr, data[key])

    db.session.add(client)
    db.session.commit()
    return jsonify(client.to_dict()), 201


@bp.route('/<int:client_id>', methods=['PUT'])
@require_roles('admin')
def update_client(client_id):
    """
    Atualiza os dados de um cliente.
    ---
    tags:
      - Clientes
    security:
      - Bearer: []
    responses:
      200:
        description: Cliente atualizado.
      404:
        description: Cliente não encontrado.
      409:
        description: Nome já usado por outro cliente.
    """
    client = db.get_or_404(Client, client_id, description="Cliente não encontrado.")
    data = json_object()
    require_text(data, TEXT_LIMITS)

    if 'name' in data:
        name = (data.get('name') or '').strip()
        if not name:
            return jsonify({'message': 'Nome do cliente é obrigatório.'}), 400
        if _name_taken(name, exclude_id=client.id):
            return jsonify({'message': f"Cliente '{name}' já existe."}), 409
        data['name'] = name

    for key, attr in EDITABLE_FIELDS.items():
        if key in data:
            setattr(client, attr, data[key])

    db.session.commit()
    return jsonify(client.to_dict()), 200


@bp.route('/<int:client_id>', methods=['DELETE'])
@require_roles('admin')
def delete_client(client_id):
    """
    Remove um cliente. Bloqueado enquanto houver VMs vinculadas.
    ---
    tags:
      - Clientes
    security:
      - Bearer: []
    responses:
      200:
        description: Cliente removido.
      404:
        description: Cliente não encontrado.
      409:
        description: Cliente possui VMs (retorna dependentCount).
    """
    client = db.get_or_404(Client, client_id, description="Cliente não encontrado.")

    dependent_count = client.virtual_machines.count()
    if dependent_count:
        return jsonify({
            'message': f"Cliente possui {dependent_count} VM(s) vinculada(s) e não pode ser removido.",
            'dependentCount': dependent_count
        }), 409

    db.session.delete(client)
    db.session.commit()
    current_app.logger.info(f"Cliente {client_id} removido")
    return jsonify({'message': 'Cliente removido com sucesso.', 'id': client_id}), 200
