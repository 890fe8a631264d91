from .vm_request import VMCreateRequest, validate_vm_request

__all__ = ['VMCreateRequest', 'validate_vm_request']
