"""Configuration for the Bitpin SDK.

Uses Pydantic v2 for validation with sensible defaults.
"""

from __future__ import annotations

from typing import Annotated, Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    SecretStr,
    field_validator,
)

DEFAULT_BASE_URL = "https://api.bitpin.ir"
DEFAULT_API_VERSION = "v1"


class TelemetryConfig(BaseModel):
    """Logging and tracing configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    service_name: str = "bitpin-sdk"
    log_level: str = "INFO"


class BitpinConfig(BaseModel):
    """Main configuration for the Bitpin client."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    base_url: HttpUrl = Field(default=DEFAULT_BASE_URL)
    api_version: str = Field(default=DEFAULT_API_VERSION, min_length=1)

    # HTTP settings
    timeout: Annotated[float, Field(gt=0, le=300)] = 30.0
    connect_timeout: Annotated[float, Field(gt=0, le=60)] = 10.0

    # Initial credentials
    access_token: str = ""
    refresh_token: str = ""
    api_key: str = ""
    secret_key: SecretStr | None = None

    # Token lifecycle
    auto_auth: bool = True
    auto_refresh: bool = True
    refresh_margin: Annotated[float, Field(ge=0)] = 0.0  # seconds before expiry

    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    @field_validator("api_version")
    @classmethod
    def validate_api_version(cls, v: str) -> str:
        """Strip surrounding slashes so the version joins cleanly into paths."""
        v = v.strip("/")
        if not v:
            msg = "api_version must not be empty"
            raise ValueError(msg)
        return v

    @property
    def base_url_str(self) -> str:
        """Get base URL as string without trailing slash."""
        return str(self.base_url).rstrip("/")

    @property
    def secret_key_str(self) -> str:
        """Get the secret key in clear text, or an empty string."""
        return self.secret_key.get_secret_value() if self.secret_key else ""

    def api_url(self, endpoint: str, version: str | None = None) -> str:
        """Build the absolute URL for an API endpoint."""
        return f"{self.base_url_str}/api/{version or self.api_version}{endpoint}"

    def with_overrides(self, **kwargs: Any) -> Self:
        """Create new config with overridden values."""
        data = self.model_dump()
        data.update(kwargs)
        return self.__class__(**data)

    @classmethod
    def from_env(cls, prefix: str = "BITPIN_") -> Self:
        """Create config from environment variables."""
        import os

        def get_env(key: str, default: Any = None) -> Any:
            return os.environ.get(f"{prefix}{key}", default)

        def get_flag(key: str, default: bool) -> bool:
            value = get_env(key)
            if value is None:
                return default
            return value.strip().lower() in {"1", "true", "yes", "on"}

        return cls(
            base_url=get_env("BASE_URL", DEFAULT_BASE_URL),
            api_version=get_env("API_VERSION", DEFAULT_API_VERSION),
            timeout=float(get_env("TIMEOUT", "30.0")),
            access_token=get_env("ACCESS_TOKEN", ""),
            refresh_token=get_env("REFRESH_TOKEN", ""),
            api_key=get_env("API_KEY", ""),
            secret_key=get_env("SECRET_KEY"),
            auto_auth=get_flag("AUTO_AUTH", True),
            auto_refresh=get_flag("AUTO_REFRESH", True),
        )
