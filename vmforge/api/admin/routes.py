from flask import Blueprint, jsonify, current_app, g

from vmforge.api.access import require_roles
from vmforge.api.payload import json_object, text_errors
from vmforge.errors import ValidationFailed
from vmforge.extensions import db
from vmforge.models import User, ROLES

bp = Blueprint('admin', __name__)

USER_TEXT_FIELDS = {'username': 64, 'password': None, 'fullName': 120, 'email': 120}


def _validate_role(role, errors):
    if role not in ROLES:
        errors.append({'field': 'role', 'message': f"role deve ser um de {', '.join(ROLES)}."})


def _username_taken(username, exclude_id=None):
    query = User.query.filter_by(username=username)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


# ==========================================
#  GESTÃO DE USUÁRIOS
# ==========================================

@bp.route('/users', methods=['GET'])
@require_roles('admin')
def list_users():
    """
    Lista todos os usuários.
    ---
    tags:
      - Admin Users
    security:
      - Bearer: []
    responses:
      200:
        description: Lista de usuários.
        schema:
          type: array
          items:
            type: object
            properties:
              id:
                type: integer
              username:
                type: string
              fullName:
                type: string
              email:
                type: string
              role:
                type: string
      403:
        description: Acesso negado.
    """
    users = User.query.order_by(User.id).all()
    return jsonify([u.to_dict() for u in users]), 200


@bp.route('/users', methods=['POST'])
@require_roles('admin')
def create_user():
    """
    Cria um usuário local.
    ---
    tags:
      - Admin Users
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - username
            - password
          properties:
            username:
              type: string
            password:
              type: string
            fullName:
              type: string
            email:
              type: string
            role:
              type: string
              enum: [admin, operator, viewer]
    responses:
      201:
        description: Usuário criado.
      400:
        description: Dados inválidos.
      409:
        description: Username já existe.
    """
    data = json_object()
    errors = text_errors(data, USER_TEXT_FIELDS)
    if errors:
        raise ValidationFailed(errors)

    username = (data.get('username') or '').strip()
    password = data.get('password')
    role = data.get('role', 'operator')

    if not username:
        errors.append({'field': 'username', 'message': 'username é obrigatório.'})
    if not password:
        errors.append({'field': 'password', 'message': 'password é obrigatório.'})
    _validate_role(role, errors)
    if errors:
        raise ValidationFailed(errors)

    if _username_taken(username):
        return jsonify({'message': f"Usuário '{username}' já existe."}), 409

    user = User(
        username=username,
        full_name=data.get('fullName'),
        email=data.get('email'),
        role=role
    )
    user.set_password(password)
    db.session.add(user)
    db.session.commit()

    current_app.logger.info(f"Usuário '{username}' ({role}) criado por {g.current_user.username}")
    return jsonify(user.to_dict()), 201


@bp.route('/users/<int:user_id>', methods=['PUT'])
@require_roles('admin')
def update_user(user_id):
    """
    Atualiza dados, papel ou senha de um usuário.
    ---
    tags:
      - Admin Users
    security:
      - Bearer: []
    responses:
      200:
        description: Usuário atualizado.
      400:
        description: Dados inválidos.
      404:
        description: Usuário não encontrado.
      409:
        description: Username já usado por outro usuário.
    """
    user = db.get_or_404(User, user_id, description="Usuário não encontrado.")
    data = json_object()

    errors = text_errors(data, USER_TEXT_FIELDS)
    if errors:
        raise ValidationFailed(errors)

    if 'role' in data:
        _validate_role(data['role'], errors)
    if 'username' in data and not (data.get('username') or '').strip():
        errors.append({'field': 'username', 'message': 'username não pode ser vazio.'})
    if errors:
        raise ValidationFailed(errors)

    if 'username' in data:
        username = data['username'].strip()
        if _username_taken(username, exclude_id=user.id):
            return jsonify({'message': f"Usuário '{username}' já existe."}), 409
        user.username = username

    if 'fullName' in data: user.full_name = data['fullName']
    if 'email' in data: user.email = data['email']
    if 'role' in data: user.role = data['role']
    if data.get('password'):
        user.set_password(data['password'])

    db.session.commit()
    return jsonify(user.to_dict()), 200


@bp.route('/users/<int:user_id>', methods=['DELETE'])
@require_roles('admin')
def delete_user(user_id):
    """
    Remove um usuário. As VMs criadas por ele ficam sem dono (userId nulo).
    ---
    tags:
      - Admin Users
    security:
      - Bearer: []
    responses:
      200:
        description: Usuário removido.
      400:
        description: Tentativa de remover a si mesmo.
      404:
        description: Usuário não encontrado.
    """
    user = db.get_or_404(User, user_id, description="Usuário não encontrado.")

    if user.id == g.current_user.id:
        return jsonify({'message': 'Você não pode remover o próprio usuário.'}), 400

    for vm in user.virtual_machines:
        vm.user_id = None

    db.session.delete(user)
    db.session.commit()
    current_app.logger.info(f"Usuário {user_id} removido por {g.current_user.username}")
    return jsonify({'message': 'Usuário removido com sucesso.', 'id': user_id}), 200
