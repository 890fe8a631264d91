import click

from .machine import VMCreationWizard
from .state import DISK_CHOICES, HYPERVISOR_CHOICES, SubmissionStatus
from .transport import ApiTransport, TransportError


def _values(options):
    """Lista de opções pode vir como strings ou como {'value', 'label'}."""
    return [o['value'] if isinstance(o, dict) else o for o in options]


def _prompt_hypervisor(wizard):
    hypervisor_type = click.prompt(
        'Hypervisor', type=click.Choice(HYPERVISOR_CHOICES), default=HYPERVISOR_CHOICES[0]
    )
    wizard.select_hypervisor(hypervisor_type)
    wizard.advance()


def _prompt_resources(wizard, plans):
    plan_type = click.prompt(
        'Tipo de plano', type=click.Choice(['cataloged', 'custom']), default='cataloged'
    )

    while True:
        if plan_type == 'cataloged':
            for plan in plans:
                click.echo(f"  [{plan['id']}] {plan['name']}: {plan['ram']} RAM, "
                           f"{plan['cpuCores']} vCPU, {plan['diskSize']} disco")
            plan_id = click.prompt('Plano (id)', type=click.Choice([str(p['id']) for p in plans]))
            disk_type = click.prompt('Tipo de disco', type=click.Choice(DISK_CHOICES), default='ssd')
            plan = next(p for p in plans if str(p['id']) == plan_id)
            wizard.select_plan(plan, disk_type=disk_type)
        else:
            ram = click.prompt('Memória (ex: 4 GB)', default='')
            cpu_cores = click.prompt('vCPUs (ex: 2)', default='')
            disk_size = click.prompt('Disco (ex: 40 GB)', default='')
            disk_type = click.prompt('Tipo de disco', type=click.Choice(DISK_CHOICES), default='ssd')
            wizard.set_custom_config(ram, cpu_cores, disk_size, disk_type)

        if wizard.advance():
            return
        click.secho('Memória, vCPUs e disco são obrigatórios no plano customizado.', fg='red')


def _prompt_configuration(wizard, options, clients):
    os_values = _values(options['operatingSystems'])
    network_values = _values(options['networks'])

    while True:
        values = {
            'name': click.prompt('Nome da VM', default=''),
            'description': click.prompt('Descrição', default=''),
            'operating_system': click.prompt(
                'Sistema operacional', type=click.Choice(os_values), default=os_values[0]
            ),
            'network_interface': click.prompt(
                'Rede', type=click.Choice(network_values), default=network_values[0]
            ),
            'ip_address': click.prompt('IP (vazio = DHCP)', default=''),
        }
        if values['ip_address']:
            values['gateway'] = click.prompt('Gateway', default='')
            values['dns'] = click.prompt('DNS (separados por vírgula)', default='')

        if wizard.hypervisor.hypervisor_type == 'proxmox':
            proxmox = options['proxmox']
            values['datastore'] = click.prompt(
                'Storage', type=click.Choice(proxmox['storages']), default=proxmox['storages'][0]
            )
            values['host_group'] = click.prompt(
                'Node', type=click.Choice(proxmox['nodes']), default=proxmox['nodes'][0]
            )
            values['vnc_access'] = click.confirm('Habilitar acesso VNC?', default=False)
        else:
            vcenter = options['vcenter']
            values['datastore'] = click.prompt(
                'Datastore', type=click.Choice(vcenter['datastores']), default=vcenter['datastores'][0]
            )
            values['cluster'] = click.prompt(
                'Cluster', type=click.Choice(vcenter['clusters']), default=vcenter['clusters'][0]
            )
            pools = _values(vcenter['resourcePools'])
            values['resource_pool'] = click.prompt('Resource pool', type=click.Choice(pools), default=pools[0])
            folders = _values(vcenter['folders'])
            values['folder'] = click.prompt('Pasta', type=click.Choice(folders), default=folders[0])
            values['snapshot'] = click.confirm('Criar snapshot inicial?', default=False)

        values['backup'] = click.confirm('Incluir no backup?', default=False)

        for c in clients:
            click.echo(f"  [{c['id']}] {c['name']}")
        values['client_id'] = click.prompt('Cliente (id)', type=int)
        values['report_number'] = click.prompt('Número do chamado/relatório')

        errors = wizard.submit_configuration(values)
        if not errors:
            return
        for err in errors:
            click.secho(f"  {err['field']}: {err['message']}", fg='red')


def _show_review(review):
    click.echo('')
    click.secho('Revisão', bold=True)
    for key, value in review.to_payload().items():
        if value not in (None, '', False):
            click.echo(f"  {key}: {value}")


def _show_outcome(outcome):
    if outcome.status is SubmissionStatus.SUCCESS:
        vm = outcome.vm or {}
        click.secho(f"VM #{vm.get('id')} criada: {outcome.message}", fg='green')
        return

    if outcome.accepted:
        vm = outcome.vm or {}
        click.secho(f"VM #{vm.get('id')} registrada com status '{vm.get('status')}': {outcome.message}", fg='red')
    else:
        click.secho(f"Falha: {outcome.message}", fg='red')
    for err in outcome.errors:
        click.secho(f"  {err.get('field')}: {err.get('message')}", fg='red')


@click.command('vmforge-wizard')
@click.option('--url', envvar='VMFORGE_URL', default='http://localhost:5000', show_default=True,
              help='Endereço da API VMForge.')
@click.option('--username', prompt='Usuário')
@click.option('--password', prompt='Senha', hide_input=True)
def main(url, username, password):
    """Wizard interativo de criação de VMs."""
    transport = ApiTransport(url)
    try:
        transport.login(username, password)
        plans = transport.list_plans()
        options = transport.get_options()
        clients = transport.list_clients()
    except TransportError as e:
        raise click.ClickException(str(e))

    wizard = VMCreationWizard(transport)

    while True:
        _prompt_hypervisor(wizard)
        _prompt_resources(wizard, plans)
        _prompt_configuration(wizard, options, clients)
        _show_review(wizard.review)

        if not click.confirm('Enviar pedido de criação?', default=True):
            wizard.reset()
            continue

        click.echo('Criando VM...')
        outcome = wizard.submit()

        while True:
            _show_outcome(outcome)
            if outcome.status is SubmissionStatus.SUCCESS:
                action = 'n' if click.confirm('Criar outra VM?', default=False) else 'q'
            else:
                action = click.prompt(
                    '(t) tentar novamente, (n) recomeçar, (q) sair',
                    type=click.Choice(['t', 'n', 'q']), default='q'
                )
            if action != 't':
                break
            click.echo('Reenviando...')
            outcome = wizard.retry()

        if action == 'q':
            return
        wizard.reset()


if __name__ == '__main__':
    main()
