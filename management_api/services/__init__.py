"""
Service layer infrastructure - REST client composition for the management API.

Provides:
- RestClientFactory: Builds per-resource executors from shared client options
- TokenProvider / TokenCache: Static or client-credentials tokens, cached in memory
- RequestDeduplicator: At most one in-flight credential exchange per key
- RetryPolicy / RetryingExecutor: Retries transient failures with backoff
- RequestExecutor: Path resolution, authorization and error normalization
"""

from management_api.services.errors import (
    ManagementError,
    ConfigurationError,
    AuthError,
    NetworkError,
    RequestTimeoutError,
    ApiError,
    RateLimitError,
    CancelledError,
)
from management_api.services.options import (
    AuthConfig,
    StaticToken,
    ClientCredentials,
    RetryConfig,
    CacheConfig,
    ErrorFormatter,
    ResourceOptions,
    ClientOptions,
)
from management_api.services.path import PathTemplate, resolve_path
from management_api.services.cache import TokenCache, CachedCredential
from management_api.services.deduplicator import RequestDeduplicator
from management_api.services.token_provider import TokenProvider
from management_api.services.executor import Page, RequestExecutor
from management_api.services.retry import RetryDecision, RetryPolicy, RetryingExecutor
from management_api.services.factory import RestClientFactory, build

__all__ = [
    # Errors
    "ManagementError",
    "ConfigurationError",
    "AuthError",
    "NetworkError",
    "RequestTimeoutError",
    "ApiError",
    "RateLimitError",
    "CancelledError",
    # Options
    "AuthConfig",
    "StaticToken",
    "ClientCredentials",
    "RetryConfig",
    "CacheConfig",
    "ErrorFormatter",
    "ResourceOptions",
    "ClientOptions",
    # Paths
    "PathTemplate",
    "resolve_path",
    # Tokens
    "TokenCache",
    "CachedCredential",
    "RequestDeduplicator",
    "TokenProvider",
    # Execution
    "Page",
    "RequestExecutor",
    "RetryDecision",
    "RetryPolicy",
    "RetryingExecutor",
    # Factory
    "RestClientFactory",
    "build",
]
