"""
Clients (applications) resource.

API Documentation: https://auth0.com/docs/api/management/v2#!/Clients
"""

from management_api.resources.base import ResourceManager


class ClientsManager(ResourceManager):
    """
    Applications registered on the tenant.

    Usage:
        await management.clients.get({"client_id": CLIENT_ID})
        await management.clients.update({"client_id": CLIENT_ID}, {"name": "new name"})
    """

    path = "/clients/:client_id"
