"""
Connections (identity providers) resource.
"""

from management_api.resources.base import ResourceManager


class ConnectionsManager(ResourceManager):
    """Database, social and enterprise connections."""

    path = "/connections/:id"
