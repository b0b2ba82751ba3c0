from management_api.resources.base import ResourceManager


class RolesManager(ResourceManager):
    path = "/roles/:id"
