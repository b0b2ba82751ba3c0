"""
Management API client.

Architecture:
- services/: REST client composition (options, tokens, retry, execution, factory)
- resources/: One manager per API resource, generic CRUD by delegation
- client.py: ManagementClient exposing every manager
- settings.py: Environment configuration
"""

from management_api.client import ManagementClient, management_options
from management_api.services import (
    ApiError,
    AuthError,
    CancelledError,
    ClientOptions,
    ConfigurationError,
    ManagementError,
    NetworkError,
    Page,
    RateLimitError,
    RestClientFactory,
    build,
)

__all__ = [
    "ManagementClient",
    "management_options",
    "ManagementError",
    "ConfigurationError",
    "AuthError",
    "NetworkError",
    "ApiError",
    "RateLimitError",
    "CancelledError",
    "ClientOptions",
    "Page",
    "RestClientFactory",
    "build",
]
