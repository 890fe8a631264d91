from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from vmforge.errors import ValidationFailed

CUSTOM_RESOURCE_FIELDS = ('ram', 'cpuCores', 'diskSize')

OPTIONAL_TEXT_FIELDS = (
    'description', 'ram', 'cpu_cores', 'disk_size', 'ip_address', 'gateway', 'dns',
    'datastore', 'host_group', 'cluster', 'resource_pool', 'folder',
)


class VMCreateRequest(BaseModel):
    """Payload de criação de VM (chaves camelCase no JSON)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        extra='ignore',
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
    )

    hypervisor_type: Literal['proxmox', 'vcenter']
    hypervisor_id: Optional[int] = Field(None, gt=0)
    plan_type: Literal['cataloged', 'custom']
    plan_id: Optional[int] = Field(None, gt=0)

    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=255)

    ram: Optional[str] = Field(None, max_length=20)
    cpu_cores: Optional[str] = Field(None, max_length=10)
    disk_size: Optional[str] = Field(None, max_length=20)
    disk_type: Literal['ssd', 'hdd'] = 'ssd'

    operating_system: str = Field(..., min_length=1, max_length=50)
    network_interface: str = Field(..., min_length=1, max_length=50)
    ip_address: Optional[str] = Field(None, max_length=45)
    gateway: Optional[str] = Field(None, max_length=45)
    dns: Optional[str] = Field(None, max_length=255)

    datastore: Optional[str] = Field(None, max_length=100)
    host_group: Optional[str] = Field(None, max_length=100)
    vnc_access: bool = False
    cluster: Optional[str] = Field(None, max_length=100)
    resource_pool: Optional[str] = Field(None, max_length=100)
    folder: Optional[str] = Field(None, max_length=100)
    snapshot: bool = False
    backup: bool = False

    client_id: int = Field(..., gt=0)
    report_number: str = Field(..., min_length=1, max_length=50)

    @field_validator('vnc_access', 'snapshot', 'backup', mode='before')
    @classmethod
    def _none_is_false(cls, value):
        return False if value is None else value

    @field_validator('disk_type', mode='before')
    @classmethod
    def _default_disk_type(cls, value):
        return 'ssd' if value in (None, '') else value

    @field_validator(*OPTIONAL_TEXT_FIELDS, mode='after')
    @classmethod
    def _blank_is_none(cls, value):
        return value or None


def _error(field, message):
    return {'field': field, 'message': message}


def _is_blank(value):
    return value is None or not str(value).strip()


def _plan_errors(data):
    """Regras cruzadas de planType (catalogado x customizado)."""
    errors = []
    plan_type = data.get('planType')

    if plan_type == 'cataloged':
        if _is_blank(data.get('planId')):
            errors.append(_error('planId', 'Plano obrigatório quando planType=cataloged.'))

    elif plan_type == 'custom':
        for field in CUSTOM_RESOURCE_FIELDS:
            if _is_blank(data.get(field)):
                errors.append(_error(field, f'{field} obrigatório quando planType=custom.'))
        if not _is_blank(data.get('planId')):
            errors.append(_error('planId', 'planId deve ser vazio quando planType=custom.'))

    return errors


def validate_vm_request(data):
    """
    Valida o payload completo antes de qualquer escrita.
    Retorna o VMCreateRequest ou lança ValidationFailed com todos os erros por campo.
    """
    if not isinstance(data, dict):
        raise ValidationFailed([_error('body', 'O corpo da requisição deve ser um objeto JSON.')])

    errors = []
    parsed = None
    try:
        parsed = VMCreateRequest.model_validate(data)
    except ValidationError as e:
        for err in e.errors():
            field = '.'.join(str(part) for part in err['loc'])
            errors.append(_error(field, err['msg']))

    for err in _plan_errors(data):
        if err not in errors:
            errors.append(err)

    if errors:
        raise ValidationFailed(errors)

    return parsed
