import os
from typing import Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from management_api.services.options import ClientOptions

load_dotenv()


class Settings(BaseModel):
    # Tenant
    domain: str = Field(default="", alias="MANAGEMENT_DOMAIN")

    # Static token authentication (takes precedence when set)
    api_token: str | None = Field(default=None, alias="MANAGEMENT_API_TOKEN")

    # Client credentials authentication
    client_id: str | None = Field(default=None, alias="MANAGEMENT_CLIENT_ID")
    client_secret: str | None = Field(default=None, alias="MANAGEMENT_CLIENT_SECRET")
    audience: str | None = Field(default=None, alias="MANAGEMENT_AUDIENCE")
    scope: str | None = Field(default=None, alias="MANAGEMENT_SCOPE")

    # Retry policy
    retry_enabled: bool = Field(default=True, alias="MANAGEMENT_RETRY_ENABLED")
    max_retries: int = Field(default=10, alias="MANAGEMENT_MAX_RETRIES")

    # Token cache
    token_cache_enabled: bool = Field(default=True, alias="MANAGEMENT_TOKEN_CACHE_ENABLED")
    token_cache_ttl: int | None = Field(default=None, alias="MANAGEMENT_TOKEN_CACHE_TTL")

    # Transport
    timeout: float = Field(default=30.0, alias="MANAGEMENT_TIMEOUT")
    debug: bool = Field(default=False, alias="MANAGEMENT_DEBUG")

    def to_client_options(self) -> ClientOptions:
        from management_api.client import management_options

        return management_options(
            self.domain,
            token=self.api_token,
            client_id=self.client_id,
            client_secret=self.client_secret,
            audience=self.audience,
            scope=self.scope,
            retry={"enabled": self.retry_enabled, "max_retries": self.max_retries},
            token_cache={
                "enabled": self.token_cache_enabled,
                "ttl_seconds": self.token_cache_ttl,
            },
            timeout=self.timeout,
        )


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Read settings from the environment (after ``.env`` is loaded)."""
    return Settings.model_validate(dict(os.environ if environ is None else environ))
