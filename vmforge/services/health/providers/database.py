from sqlalchemy import text

from vmforge.extensions import db
from vmforge.services.health.base import HealthCheckProvider


class DatabaseHealthCheck(HealthCheckProvider):
    name = "Banco de Dados"
    category = "database"

    def check(self):
        db.session.execute(text('SELECT 1'))
        return {'status': 'healthy'}
