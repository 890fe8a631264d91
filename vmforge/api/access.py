from functools import wraps

from flask import abort, g
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from vmforge.extensions import db
from vmforge.models import User


def current_operator():
    """Usuário dono do token atual (None se foi removido)."""
    user_id = get_jwt_identity()
    if user_id is None:
        return None
    return db.session.get(User, int(user_id))


def require_roles(*allowed_roles):
    """
    Exige um JWT válido e um dos papéis informados.
    Sem argumentos, qualquer usuário autenticado passa.

    Uso: @require_roles('admin', 'operator')
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            user = current_operator()
            if user is None:
                abort(401, description="Usuário do token não encontrado.")
            if allowed_roles and user.role not in allowed_roles:
                abort(403, description="Permissão insuficiente para esta operação.")
            g.current_user = user
            return func(*args, **kwargs)
        return wrapper
    return decorator
