from flask import Blueprint, jsonify
from flask_cors import cross_origin
from datetime import datetime

from vmforge.services.health import get_system_health

main_bp = Blueprint('main', __name__)


@main_bp.route('/', methods=['GET'])
def index():
    return jsonify({
        "project": "VMForge API",
        "status": "online",
        "documentation": "/docs"
    }), 200


@main_bp.route('/api/health', methods=['GET'])
@cross_origin()
def health_check():
    """
    Verifica a saúde da API: banco de dados e resumo dos hypervisors cadastrados.
    ---
    tags:
      - Sistema
    responses:
      200:
        description: Relatório de saúde (status 'healthy' ou 'unhealthy').
        schema:
          type: object
          properties:
            status:
              type: string
              example: healthy
            checks:
              type: array
              items:
                type: object
            hypervisors:
              type: object
              description: Contagem por status e por tipo
            serverTime:
              type: string
    """
    report = get_system_health()
    report['serverTime'] = datetime.utcnow().isoformat()
    return jsonify(report), 200
