"""
Client options - validated, immutable configuration for the REST client layer.

The authentication mode is a tagged union: either a ``StaticToken`` supplied
by the caller or ``ClientCredentials`` exchanged for a token on demand.
Supplying the fields of both (or of neither) fails validation.
"""

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator


class FrozenOptions(BaseModel):
    """Base for option models: immutable, unknown keys rejected."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class StaticToken(FrozenOptions):
    """A pre-issued API access token, used verbatim."""

    token: str = Field(min_length=1)


class ClientCredentials(FrozenOptions):
    """Client-credentials grant settings for the token endpoint."""

    domain: str = Field(min_length=1)
    client_id: str = Field(min_length=1)
    client_secret: str = Field(min_length=1)
    audience: str | None = None
    scope: str | None = None

    @property
    def issuer_url(self) -> str:
        domain = self.domain.rstrip("/")
        if "://" not in domain:
            domain = f"https://{domain}"
        return domain

    @property
    def token_url(self) -> str:
        return f"{self.issuer_url}/oauth/token"

    @property
    def resolved_audience(self) -> str:
        """Audience sent on exchange; defaults to the domain's API."""
        return self.audience or f"{self.issuer_url}/api/v2/"


AuthConfig = StaticToken | ClientCredentials


class RetryConfig(FrozenOptions):
    """Retry policy configuration."""

    enabled: bool = True
    max_retries: int = Field(default=10, ge=0)  # Retries after the first attempt
    base_delay: float = Field(default=1.0, ge=0)  # Seconds, first backoff step
    max_delay: float = Field(default=30.0, ge=0)  # Seconds, backoff ceiling


class CacheConfig(FrozenOptions):
    """Token cache configuration."""

    enabled: bool = True
    ttl_seconds: int | None = Field(default=None, gt=0)  # None: use expires_in


class ErrorFormatter(FrozenOptions):
    """Names of the remote JSON fields carrying the error message and name."""

    message: str = "message"
    name: str = "error"


class ResourceOptions(FrozenOptions):
    """Per-resource request settings."""

    headers: dict[str, str] = Field(default_factory=dict)
    repeat_params: bool = False
    error_formatter: ErrorFormatter = Field(default_factory=ErrorFormatter)


class ClientOptions(FrozenOptions):
    """Options shared by every resource built from one factory."""

    base_url: str
    headers: dict[str, str] = Field(default_factory=dict)
    auth: AuthConfig
    retry: RetryConfig = Field(default_factory=RetryConfig)
    token_cache: CacheConfig = Field(default_factory=CacheConfig)
    timeout: float = Field(default=30.0, gt=0)

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        value = value.strip()
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL as e:
            raise ValueError(f"The provided base URL is invalid: {e}") from e

        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError("The provided base URL is invalid")

        return value.rstrip("/")
