from .database import DatabaseHealthCheck
from .proxmox import ProxmoxConnectivityCheck
from .vcenter import VCenterConnectivityCheck

__all__ = ['DatabaseHealthCheck', 'ProxmoxConnectivityCheck', 'VCenterConnectivityCheck']
