from vmforge.models import Client, Hypervisor, Plan, User


def test_init_db_recreates_with_seed(app):
    result = app.test_cli_runner().invoke(args=['init-db', '--admin-password', 'inicial'])

    assert result.exit_code == 0, result.output
    assert [p.name for p in Plan.query.order_by(Plan.id)] == ['S', 'M', 'L', 'XL', 'XXL', 'XXXL']
    assert [u.username for u in User.query.all()] == ['admin']
    assert User.query.first().check_password('inicial')
    assert Client.query.count() == 1
    assert {h.type for h in Hypervisor.query.all()} == {'proxmox', 'vcenter'}


def test_reset_admin_password(app, client):
    result = app.test_cli_runner().invoke(args=['reset-admin-password', 'operator', '--password', 'nova-senha'])

    assert result.exit_code == 0, result.output
    login = client.post('/api/auth/login', json={'username': 'operator', 'password': 'nova-senha'})
    assert login.status_code == 200


def test_reset_password_unknown_user(app):
    result = app.test_cli_runner().invoke(args=['reset-admin-password', 'ninguem', '--password', 'x'])

    assert result.exit_code == 1
    assert 'não encontrado' in result.output
