"""IdGate configuration management."""

from enum import Enum

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from idgate.models import AllocationStrategy

# Full range of a 16-bit worker identifier
MAX_IDENTIFIER_SPACE_SIZE = 65536


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """IdGate configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="IDGATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # General
    env: Environment = Environment.DEVELOPMENT
    log_level: str = "INFO"
    debug: bool = False

    # Lease behavior
    lease_duration_seconds: int = Field(
        default=600, description="Seconds a grant stays valid without renewal (10 min)"
    )
    identifier_space_size: int = Field(
        default=MAX_IDENTIFIER_SPACE_SIZE,
        description="Number of pre-allocated worker identifiers",
    )
    allocation_strategy: AllocationStrategy = Field(
        default=AllocationStrategy.FREE_LIST,
        description="Free slot selection: free_list or scan",
    )

    # CORS configuration (explicit allowlist)
    cors_allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="Allowed CORS origins",
    )
    cors_allowed_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        description="Allowed HTTP methods",
    )
    cors_allowed_headers: list[str] = Field(
        default=["Content-Type", "X-Trace-ID", "X-Request-ID"],
        description="Allowed request headers",
    )

    # Server (legacy COORDINATOR.* keys still honored)
    host: str = Field(
        default="0.0.0.0",
        validation_alias=AliasChoices("IDGATE_HOST", "COORDINATOR.ADDR"),
    )
    port: int = Field(
        default=8080,
        validation_alias=AliasChoices("IDGATE_PORT", "COORDINATOR.PORT"),
    )

    # Validators
    @field_validator("lease_duration_seconds")
    @classmethod
    def validate_lease_duration(cls, v: int) -> int:
        """Lease duration must be at least one second."""
        if v < 1:
            raise ValueError(f"lease_duration_seconds must be >= 1, got {v}")
        return v

    @field_validator("identifier_space_size")
    @classmethod
    def validate_identifier_space_size(cls, v: int) -> int:
        """Identifier space must fit a 16-bit worker id."""
        if not 1 <= v <= MAX_IDENTIFIER_SPACE_SIZE:
            raise ValueError(
                f"identifier_space_size must be between 1 and {MAX_IDENTIFIER_SPACE_SIZE}, got {v}"
            )
        return v

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port number range."""
        if not 1 <= v <= 65535:
            raise ValueError(f"Port must be between 1 and 65535, got {v}")
        return v


settings = Settings()
