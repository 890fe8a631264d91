from .plan import Plan, PREDEFINED_PLANS
from .hypervisor import Hypervisor, HYPERVISOR_TYPES, HYPERVISOR_STATUSES, AUTH_TYPES
from .client import Client
from .user import User, ROLES
from .virtual_machine import VirtualMachine, VM_STATUSES

__all__ = [
    'Plan', 'PREDEFINED_PLANS',
    'Hypervisor', 'HYPERVISOR_TYPES', 'HYPERVISOR_STATUSES', 'AUTH_TYPES',
    'Client', 'User', 'ROLES', 'VirtualMachine', 'VM_STATUSES',
]
