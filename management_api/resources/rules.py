from management_api.resources.base import ResourceManager


class RulesManager(ResourceManager):
    """Rules run during authentication."""

    path = "/rules/:id"
