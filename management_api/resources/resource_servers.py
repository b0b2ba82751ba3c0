"""
Resource servers (APIs) resource.
"""

from management_api.resources.base import ResourceManager


class ResourceServersManager(ResourceManager):
    """APIs protected by the tenant, addressed by id or identifier."""

    path = "/resource-servers/:id"
