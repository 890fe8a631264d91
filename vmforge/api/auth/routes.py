import secrets

from flask import Blueprint, jsonify, current_app, g
from flask_jwt_extended import create_access_token

from vmforge.api.access import require_roles
from vmforge.api.payload import json_object, require_text
from vmforge.services.ldap_service import LDAPService
from vmforge.models import User
from vmforge.extensions import db

bp = Blueprint('auth', __name__)


@bp.route('/login', methods=['POST'])
def login():
    """
    Autentica o operador e retorna um Token JWT.

    Com LDAP_ENABLED, tenta o bind no LDAP primeiro e sincroniza o usuário
    local (Shadow User, papel viewer). Se o LDAP recusar, tenta a senha local.
    ---
    tags:
      - Autenticação
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
              example: "admin"
            password:
              type: string
              example: "admin123"
    responses:
      200:
        description: Login realizado com sucesso.
        schema:
          type: object
          properties:
            accessToken:
              type: string
              description: "Token JWT para cabeçalho Authorization: Bearer <token>"
            user:
              type: object
      400:
        description: Username ou password ausentes.
      401:
        description: Credenciais inválidas.
    """
    data = json_object()
    require_text(data, {'username': 64, 'password': None})
    username = (data.get('username') or '').strip()
    password = data.get('password')

    if not username or not password:
        return jsonify({"message": "Username e password obrigatórios"}), 400

    user = User.query.filter_by(username=username).first()
    ldap_user_data = None

    # 1. TENTATIVA VIA LDAP (opcional)
    if current_app.config.get('LDAP_ENABLED'):
        ldap_user_data = LDAPService().authenticate(username, password)

    # 2. SINCRONIZAÇÃO OU FALLBACK LOCAL
    if ldap_user_data:
        if not user:
            user = User(
                username=username,
                email=ldap_user_data.get('email'),
                full_name=ldap_user_data.get('fullname'),
                role='viewer'
            )
            # Senha local aleatória: a conta é gerida pelo LDAP
            user.set_password(secrets.token_urlsafe(32))
            db.session.add(user)
            db.session.commit()
            current_app.logger.info(f"Shadow User '{username}' criado no banco local via LDAP.")
        elif ldap_user_data.get('email') and user.email != ldap_user_data['email']:
            user.email = ldap_user_data['email']
            db.session.commit()

    elif not user or not user.check_password(password):
        current_app.logger.warning(f"Login recusado para '{username}'")
        return jsonify({"message": "Credenciais inválidas"}), 401

    # 3. GERAÇÃO DO TOKEN
    access_token = create_access_token(identity=str(user.id))

    return jsonify({
        "accessToken": access_token,
        "user": user.to_dict()
    }), 200


@bp.route('/me', methods=['GET'])
@require_roles()
def get_current_user_profile():
    """
    Retorna o perfil do operador logado.
    ---
    tags:
      - Autenticação
    security:
      - Bearer: []
    responses:
      200:
        description: Perfil do usuário.
      401:
        description: Token ausente ou inválido.
    """
    return jsonify(g.current_user.to_dict()), 200
