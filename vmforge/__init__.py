from flask import Flask, jsonify
import flask
import markupsafe
# Patch para compatibilidade do Flasgger com Flask 3.0+
flask.Markup = markupsafe.Markup

from flasgger import Swagger
from werkzeug.exceptions import HTTPException
import logging

from vmforge.config import DevelopmentConfig
from vmforge.extensions import db, migrate, cors, jwt, bcrypt
from vmforge.errors import ValidationFailed, UnsupportedHypervisorError
# Registra os models no metadata antes do create_all / migrations
from vmforge import models  # noqa: F401

from vmforge.api.main import main_bp


def create_app(config_class=DevelopmentConfig):
    """Factory do aplicativo Flask"""
    app = Flask(__name__)
    app.config.from_object(config_class)

    # REGISTRO DE COMANDOS
    from vmforge.commands import init_db_command, reset_admin_password_command
    app.cli.add_command(init_db_command)
    app.cli.add_command(reset_admin_password_command)

    # Configuração do Swagger
    swagger_config = {
        "headers": [],
        "specs": [
            {
                "endpoint": 'apispec',
                "route": '/apispec.json',
                "rule_filter": lambda rule: True,
                "model_filter": lambda tag: True,
            }
        ],
        "static_url_path": "/flasgger_static",
        "swagger_ui": True,
        "specs_route": "/docs"
    }
    swagger_template = {
        "info": {
            "title": "VMForge API",
            "description": "Provisionamento de VMs em Proxmox e vCenter",
            "version": "1.0.0"
        },
        "securityDefinitions": {
            "Bearer": {
                "type": "apiKey",
                "name": "Authorization",
                "in": "header",
                "description": "JWT no formato: Bearer <token>"
            }
        }
    }

    Swagger(app, config=swagger_config, template=swagger_template)

    # 1. INICIALIZAR EXTENSÕES
    init_extensions(app)

    # 2. CONFIGURAR LOGGING
    configure_logging(app)

    # 3. REGISTRAR ROTAS
    register_blueprints(app)

    # Rota raiz e health check
    app.register_blueprint(main_bp)

    # 4. TRATAMENTO DE ERROS
    register_error_handlers(app)

    return app


def init_extensions(app):
    """Inicializa todas as extensões do Flask."""
    db.init_app(app)
    migrate.init_app(app, db)

    cors.init_app(app, resources={r"/api/*": {
        "origins": app.config.get('CORS_ORIGINS', []),
        "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        "allow_headers": ["Content-Type", "Authorization"],
        "expose_headers": ["Content-Range", "X-Total-Count"]
    }}, supports_credentials=True)

    jwt.init_app(app)
    bcrypt.init_app(app)


def configure_logging(app):
    if not app.debug:
        logging.basicConfig(level=logging.INFO)


def register_blueprints(app):
    """Registra os módulos de rotas (Blueprints)."""
    prefix = app.config.get('API_PREFIX', '/api')

    # Imports dentro da função evitam ciclos
    from vmforge.api.auth.routes import bp as auth_bp
    app.register_blueprint(auth_bp, url_prefix=f"{prefix}/auth")

    from vmforge.api.catalog.routes import bp as catalog_bp
    app.register_blueprint(catalog_bp, url_prefix=prefix)

    from vmforge.api.virtual_machines.routes import bp as virtual_machines_bp
    app.register_blueprint(virtual_machines_bp, url_prefix=f"{prefix}/virtual-machines")

    from vmforge.api.clients.routes import bp as clients_bp
    app.register_blueprint(clients_bp, url_prefix=f"{prefix}/clients")

    from vmforge.api.hypervisors.routes import bp as hypervisors_bp
    app.register_blueprint(hypervisors_bp, url_prefix=f"{prefix}/hypervisors")

    from vmforge.api.admin.routes import bp as admin_bp
    app.register_blueprint(admin_bp, url_prefix=f"{prefix}/admin")


def register_error_handlers(app):
    """Centraliza o tratamento de exceções da aplicação."""

    @app.errorhandler(ValidationFailed)
    def handle_validation_error(e):
        return jsonify({'message': e.message, 'errors': e.errors}), 400

    @app.errorhandler(UnsupportedHypervisorError)
    def handle_unsupported_hypervisor(e):
        app.logger.error(f"Hypervisor não suportado: {str(e)}")
        return jsonify({'message': str(e)}), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({'message': e.description}), e.code

    @app.errorhandler(Exception)
    def handle_generic_error(e):
        db.session.rollback()
        app.logger.exception(f"Internal Server Error: {str(e)}")
        return jsonify({'message': 'Erro interno do servidor.'}), 500

    # Respostas do Flask-JWT-Extended no mesmo formato {message}
    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({'message': f'Token ausente: {reason}'}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({'message': f'Token inválido: {reason}'}), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({'message': 'Token expirado.'}), 401
