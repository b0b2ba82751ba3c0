"""
Users resource.
"""

from management_api.resources.base import ResourceManager


class UsersManager(ResourceManager):
    path = "/users/:id"
