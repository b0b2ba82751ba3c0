"""
Client grants resource.

API Documentation: https://auth0.com/docs/api/management/v2#!/Client_Grants
"""

from management_api.resources.base import ResourceManager


class ClientGrantsManager(ResourceManager):
    """Grants of API scopes to clients. The API has no single-grant read."""

    path = "/client-grants/:id"
    operations = frozenset({"create", "get_all", "update", "delete"})
