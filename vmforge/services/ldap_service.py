# vmforge/services/ldap_service.py
import logging

from ldap3 import Server, Connection, ALL, BASE
from flask import current_app

logger = logging.getLogger(__name__)


class LDAPService:
    def authenticate(self, username, password):
        """
        Valida credenciais no LDAP (bind com o DN do usuário) e retorna os dados básicos.
        Retorna None se o bind falhar.
        """
        ldap_server = current_app.config.get('LDAP_SERVER')

        # Template no config: 'cn={},ou=users,dc=vmforge,dc=local'
        user_dn = current_app.config.get('LDAP_USER_DN_TEMPLATE').format(username)

        try:
            server = Server(ldap_server, get_info=ALL)
            conn = Connection(server, user=user_dn, password=password, auto_bind=True)

            # Bind aceito: senha correta. Busca o próprio objeto para nome/email.
            conn.search(
                search_base=user_dn,
                search_filter='(objectClass=*)',
                search_scope=BASE,
                attributes=['mail', 'cn']
            )

            user_data = {
                'username': username,
                'email': None,
                'fullname': username
            }

            if conn.entries:
                entry = conn.entries[0]
                if 'mail' in entry:
                    user_data['email'] = str(entry.mail)
                if 'cn' in entry:
                    user_data['fullname'] = str(entry.cn)

            conn.unbind()
            return user_data

        except Exception as e:
            logger.warning(f"Falha de autenticação LDAP para {username}: {e}")
            return None
