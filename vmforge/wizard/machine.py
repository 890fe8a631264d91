import logging
import threading

from .state import (
    CatalogedResources, CustomResources, DISK_CHOICES, HYPERVISOR_CHOICES,
    HypervisorChosen, ReviewReady, Step, SubmissionOutcome, SubmissionStatus, VMConfiguration,
)
from .transport import TransportError

logger = logging.getLogger(__name__)

STEPS = list(Step)


class WizardBusyError(RuntimeError):
    """Já existe uma submissão em andamento."""
    pass


class WizardStateError(RuntimeError):
    """Operação fora da etapa em que é permitida."""
    pass


def interpret_response(response):
    """Converte a resposta HTTP do POST /api/virtual-machines em SubmissionOutcome."""
    body = response.body if isinstance(response.body, dict) else {}

    if response.status_code == 201:
        # Pedido aceito: o status da VM diz se o hypervisor provisionou
        succeeded = body.get('status') == 'running'
        return SubmissionOutcome(
            status=SubmissionStatus.SUCCESS if succeeded else SubmissionStatus.ERROR,
            http_status=201,
            accepted=True,
            vm=body,
            message=body.get('message')
        )

    if response.status_code == 400:
        return SubmissionOutcome(
            status=SubmissionStatus.ERROR,
            http_status=400,
            message=body.get('message'),
            errors=tuple(body.get('errors') or ())
        )

    return SubmissionOutcome(
        status=SubmissionStatus.ERROR,
        http_status=response.status_code,
        message=body.get('message') or f"HTTP {response.status_code}"
    )


class VMCreationWizard:
    """
    Máquina de estados do wizard de criação: Hypervisor -> Recursos -> Configuração -> Revisão.
    A submissão acontece na Revisão e nunca muda a etapa.
    """

    def __init__(self, transport):
        self.transport = transport
        self._submit_lock = threading.Lock()
        self._clear()

    def _clear(self):
        self.step = Step.HYPERVISOR
        self.hypervisor = None
        self.resources = None
        self.configuration = None
        self.status = SubmissionStatus.IDLE
        self.outcome = None
        self.last_payload = None

    @property
    def busy(self):
        return self._submit_lock.locked()

    def _ensure_idle(self):
        if self.busy:
            raise WizardBusyError("Há uma criação de VM em andamento.")

    def _ensure_step(self, step):
        if self.step is not step:
            raise WizardStateError(f"Operação permitida apenas na etapa {step.name}.")

    # --- Etapa 1: Hypervisor ---
    def select_hypervisor(self, hypervisor_type, hypervisor_id=None):
        self._ensure_idle()
        self._ensure_step(Step.HYPERVISOR)
        if hypervisor_type not in HYPERVISOR_CHOICES:
            raise ValueError(f"Hypervisor inválido: {hypervisor_type}")
        self.hypervisor = HypervisorChosen(hypervisor_type, hypervisor_id)

    # --- Etapa 2: Recursos (plano catalogado OU customizado) ---
    def select_plan(self, plan, disk_type='ssd'):
        """plan: dict de GET /api/plans, ou None para desfazer a escolha."""
        self._ensure_idle()
        self._ensure_step(Step.RESOURCES)
        if plan is None:
            if isinstance(self.resources, CatalogedResources):
                self.resources = None
            return
        self.resources = CatalogedResources.from_plan(plan, disk_type=self._disk(disk_type))

    def set_custom_config(self, ram, cpu_cores, disk_size, disk_type='ssd'):
        self._ensure_idle()
        self._ensure_step(Step.RESOURCES)
        self.resources = CustomResources(
            ram=(ram or '').strip(),
            cpu_cores=str(cpu_cores or '').strip(),
            disk_size=(disk_size or '').strip(),
            disk_type=self._disk(disk_type)
        )

    @staticmethod
    def _disk(disk_type):
        if disk_type not in DISK_CHOICES:
            raise ValueError(f"Tipo de disco inválido: {disk_type}")
        return disk_type

    # --- Etapa 3: Configuração ---
    def submit_configuration(self, values):
        """
        Valida nome, sistema operacional e interface de rede.
        Com sucesso grava a configuração, avança para a Revisão e retorna [].
        """
        self._ensure_idle()
        if self.step is not Step.CONFIGURATION:
            raise WizardStateError("A configuração só pode ser enviada na etapa de Configuração.")
        if self.resources is None or not self.resources.complete:
            raise WizardStateError("Selecione um plano ou preencha os recursos customizados.")

        errors = VMConfiguration.validate(values)
        if errors:
            return errors

        self.configuration = VMConfiguration.from_values(values)
        self.step = Step.REVIEW
        return []

    # --- Navegação ---
    def can_advance(self):
        if self.step is Step.HYPERVISOR:
            return self.hypervisor is not None
        if self.step is Step.RESOURCES:
            return self.resources is not None and self.resources.complete
        if self.step is Step.CONFIGURATION:
            return self.configuration is not None
        return False

    def advance(self):
        """Avança uma etapa. Retorna False (sem mudar nada) se a etapa atual estiver incompleta."""
        if self.busy or not self.can_advance():
            return False
        self.step = STEPS[self.step.value + 1]
        return True

    def retreat(self):
        if self.busy or self.step is Step.HYPERVISOR:
            return False
        self.step = STEPS[self.step.value - 1]
        return True

    @property
    def review(self):
        if self.hypervisor is None or self.resources is None or self.configuration is None:
            return None
        return ReviewReady(self.hypervisor, self.resources, self.configuration)

    # --- Submissão ---
    def submit(self):
        if not self._submit_lock.acquire(blocking=False):
            raise WizardBusyError("Há uma criação de VM em andamento.")
        try:
            if self.step is not Step.REVIEW or self.review is None:
                raise WizardStateError("O envio só é permitido na etapa de Revisão.")
            return self._send(self.review.to_payload())
        finally:
            self._submit_lock.release()

    def retry(self):
        """Reenvia exatamente o último pedido (gera uma nova VM no servidor)."""
        if not self._submit_lock.acquire(blocking=False):
            raise WizardBusyError("Há uma criação de VM em andamento.")
        try:
            if self.last_payload is None:
                raise WizardStateError("Nenhum pedido anterior para reenviar.")
            return self._send(dict(self.last_payload))
        finally:
            self._submit_lock.release()

    def reset(self):
        self._ensure_idle()
        self._clear()

    def _send(self, payload):
        self.last_payload = payload
        self.outcome = None
        self.status = SubmissionStatus.LOADING

        try:
            response = self.transport.create_virtual_machine(payload)
        except TransportError as e:
            logger.warning(f"Falha de transporte na criação da VM: {e}")
            outcome = SubmissionOutcome(status=SubmissionStatus.ERROR, message=str(e))
        except Exception:
            self.status = SubmissionStatus.ERROR
            raise
        else:
            outcome = interpret_response(response)

        self.outcome = outcome
        self.status = outcome.status
        return outcome
