"""
User grants resource.

Grants are created implicitly when users consent, so the API only lists
and revokes them.
"""

from management_api.resources.base import ResourceManager


class GrantsManager(ResourceManager):
    path = "/grants/:id"
    operations = frozenset({"get_all", "delete"})
