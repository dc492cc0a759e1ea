"""PropLedger configuration management."""

from enum import Enum

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """PropLedger configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="PROPLEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # General
    env: Environment = Environment.DEVELOPMENT
    log_level: str = "INFO"
    debug: bool = False

    # Acting user when the request does not name one (no authentication yet)
    system_user: str = Field(default="system", min_length=1)

    # Property registry
    max_properties: int = Field(default=10000, description="Max properties held in memory")
    code_lock_timeout_seconds: float = Field(
        default=5.0, description="Max wait for the per-day property code lock"
    )

    # History
    default_change_reason: str = Field(
        default="Atualização cadastral",
        max_length=500,
        description="Reason recorded when an update does not state one",
    )

    # Pagination
    default_list_limit: int = Field(default=50, description="Default list limit")
    max_list_limit: int = Field(default=200, description="Max list limit")

    # CORS configuration (explicit allowlist)
    cors_allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True,
        description="Allow credentials in CORS requests",
    )
    cors_allowed_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "OPTIONS"],
        description="Allowed HTTP methods",
    )
    cors_allowed_headers: list[str] = Field(
        default=["Authorization", "Content-Type", "X-User-ID", "X-Request-ID"],
        description="Allowed request headers",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Validators
    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port number range."""
        if not 1 <= v <= 65535:
            raise ValueError(f"Port must be between 1 and 65535, got {v}")
        return v

    @field_validator("max_properties", "default_list_limit", "max_list_limit")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Limit must be positive, got {v}")
        return v

    @field_validator("code_lock_timeout_seconds")
    @classmethod
    def validate_lock_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Lock timeout must be positive, got {v}")
        return v

    @model_validator(mode="after")
    def validate_cors(self) -> "Settings":
        """Wildcard origins cannot be combined with credentials."""
        if self.cors_allow_credentials and "*" in self.cors_allowed_origins:
            raise ValueError("cors_allowed_origins must not contain '*' when credentials are allowed")
        return self

    @model_validator(mode="after")
    def validate_list_limits(self) -> "Settings":
        if self.default_list_limit > self.max_list_limit:
            raise ValueError("default_list_limit cannot exceed max_list_limit")
        return self

    def resolve_limit(self, limit: int | None) -> int:
        """Clamp a requested page size to the configured bounds."""
        return min(limit or self.default_list_limit, self.max_list_limit)


settings = Settings()
