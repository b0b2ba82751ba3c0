"""
Resource managers - one per management API resource.
"""

from management_api.resources.base import CRUD_OPERATIONS, ResourceManager
from management_api.resources.client_grants import ClientGrantsManager
from management_api.resources.clients import ClientsManager
from management_api.resources.connections import ConnectionsManager
from management_api.resources.grants import GrantsManager
from management_api.resources.resource_servers import ResourceServersManager
from management_api.resources.roles import RolesManager
from management_api.resources.rules import RulesManager
from management_api.resources.users import UsersManager

__all__ = [
    "CRUD_OPERATIONS",
    "ResourceManager",
    "ClientGrantsManager",
    "ClientsManager",
    "ConnectionsManager",
    "GrantsManager",
    "ResourceServersManager",
    "RolesManager",
    "RulesManager",
    "UsersManager",
]
