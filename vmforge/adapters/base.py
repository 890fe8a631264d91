from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging
import random
import re
import time


@dataclass(frozen=True)
class AdapterOutcome:
    success: bool
    message: str


def extract_amount(value, unit):
    """Extrai o número de uma string com unidade (ex: '4 GB' -> 4). None se não casar."""
    match = re.search(rf'(\d+)\s*{unit}', value or '', re.IGNORECASE)
    if match:
        return int(match.group(1))
    return None


def parse_count(value):
    """Converte '2' (ou '2 vCPU') em inteiro. None se não houver número no início."""
    match = re.match(r'\s*(\d+)', str(value or ''))
    return int(match.group(1)) if match else None


class HypervisorAdapter(ABC):
    """
    Interface base dos adapters de hypervisor.
    O orquestrador só conhece create_vm(); o backend concreto fica atrás dela.
    """

    @property
    @abstractmethod
    def hypervisor_type(self):
        """Tipo atendido: 'proxmox' ou 'vcenter'"""
        pass

    @abstractmethod
    def create_vm(self, request):
        """Recebe um VMCreateRequest e retorna um AdapterOutcome."""
        pass


class SimulatedAdapter(HypervisorAdapter):
    """
    Adapter simulado: monta o payload do backend, registra no log e sorteia o resultado.
    Nenhuma chamada de rede é feita.
    """

    label = None
    failure_message = None

    def __init__(self, delay=1.0, success_rate=0.9, rng=None):
        self.delay = delay
        self.success_rate = success_rate
        self.rng = rng or random.Random()
        self.logger = logging.getLogger(__name__)

    @abstractmethod
    def build_payload(self, request):
        pass

    @abstractmethod
    def success_message(self, request):
        pass

    def loggable_payload(self, payload):
        return payload

    def create_vm(self, request):
        try:
            # Latência fixa simulando a chamada à API
            if self.delay:
                time.sleep(self.delay)

            if self.rng.random() >= self.success_rate:
                raise ConnectionError(self.failure_message)

            payload = self.build_payload(request)
            self.logger.info(f"Payload de criação {self.label}: {self.loggable_payload(payload)}")

            return AdapterOutcome(True, self.success_message(request))

        except Exception as e:
            self.logger.error(f"Erro na criação de VM no {self.label}: {e}")
            return AdapterOutcome(False, str(e) or self.failure_message)
