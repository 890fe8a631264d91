import click
from flask.cli import with_appcontext

from vmforge.extensions import db
from vmforge.models import Client, Hypervisor, Plan, User, PREDEFINED_PLANS


@click.command('init-db')
@click.option('--admin-password', default='admin123', show_default=True,
              help='Senha inicial do usuário admin.')
@with_appcontext
def init_db_command(admin_password):
    """Limpa as tabelas existentes e cria novas com dados iniciais."""

    # 1. Limpar Banco (Cuidado em produção!)
    db.drop_all()
    db.create_all()
    click.echo('Banco de dados recriado.')

    # 2. Catálogo de planos (inseridos em ordem: ids 1..6 vêm da sequence)
    for spec in PREDEFINED_PLANS:
        db.session.add(Plan(**{k: v for k, v in spec.items() if k != 'id'}))
    db.session.flush()
    click.echo(f'{len(PREDEFINED_PLANS)} planos cadastrados.')

    # 3. Usuário Admin
    admin = User(username='admin', email='admin@vmforge.local', full_name='Administrador', role='admin')
    admin.set_password(admin_password)
    db.session.add(admin)

    # 4. Dados de exemplo: um cliente e um hypervisor de cada tipo
    db.session.add(Client(
        name='Cliente Exemplo',
        contact_name='Equipe de Infra',
        email='infra@cliente.local',
        department='TI'
    ))

    pve = Hypervisor(
        name='Proxmox Lab',
        type='proxmox',
        api_url='https://pve.local:8006',
        verify_ssl=False,
        datacenter='DC-01'
    )
    pve.set_credentials('token', username='root@pam', api_token='root@pam!vmforge=change-me')

    vcenter = Hypervisor(
        name='vCenter Lab',
        type='vcenter',
        api_url='https://vcenter.local',
        verify_ssl=False,
        datacenter='DC-01',
        version='7.0'
    )
    vcenter.set_credentials('credentials', username='administrator@vsphere.local', password='change-me')

    db.session.add(pve)
    db.session.add(vcenter)

    db.session.commit()
    click.echo('Usuário admin, cliente e hypervisors de exemplo criados com sucesso.')


@click.command('reset-admin-password')
@click.argument('username', default='admin')
@click.password_option()
@with_appcontext
def reset_admin_password_command(username, password):
    """Redefine a senha de um usuário (padrão: admin)."""
    user = User.query.filter_by(username=username).first()
    if not user:
        raise click.ClickException(f"Usuário '{username}' não encontrado.")

    user.set_password(password)
    db.session.commit()
    click.echo(f"Senha de '{username}' redefinida.")
