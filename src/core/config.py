"""Application configuration using Pydantic Settings."""

from enum import StrEnum
from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MatchRetentionPolicy(StrEnum):
    """What happens to an existing match when either side unlikes."""

    RETAIN = "retain"
    DISSOLVE = "dissolve"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Doggo API")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console", description="'json' or 'console'")

    # Database
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/doggo",
        description="PostgreSQL connection URL with asyncpg driver",
    )

    # Identity provider JWT validation
    jwt_secret_key: str = Field(
        default="CHANGE-ME-IN-PRODUCTION",
        description="Shared secret for HS256 session tokens (also used by tests)",
    )
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_minutes: int = Field(default=30)
    identity_jwks_url: str = Field(
        default="",
        description="JWKS endpoint of the identity provider for RS256/ES256 tokens",
    )

    # Social engine tuning
    profile_lookup_suppression_seconds: float = Field(
        default=300.0,
        description="How long a missing profile lookup is not re-queried",
    )
    second_degree_fanout_limit: int = Field(
        default=200,
        description="Max contacts expanded per direct contact in search",
    )
    free_text_search_limit: int = Field(default=50)
    match_retention_policy: MatchRetentionPolicy = Field(default=MatchRetentionPolicy.RETAIN)

    # SMS invitations
    sms_invite_url: str = Field(
        default="",
        description="Invite edge function endpoint (empty disables SMS delivery)",
    )
    sms_api_key: str = Field(default="", description="Bearer key for the invite endpoint")
    sms_timeout_seconds: float = Field(default=10.0)
    sms_invite_template: str = Field(
        default="{from_name} liked your profile on doggo! Download the app to connect: {download_url}",
    )
    app_download_url: str = Field(default="https://doggo.app/download")

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable/disable rate limiting (disable for tests)",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:8081,http://localhost:19006",
        description="Comma-separated list of allowed origins",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver scheme.

        Hosted providers supply a standard ``postgresql://`` URL.
        SQLAlchemy's async engine requires ``postgresql+asyncpg://``.
        """
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
