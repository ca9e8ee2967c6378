from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SslMode = Literal["disable", "prefer", "require", "verify-ca", "verify-full"]

PLACEHOLDER_SECRET = "change-this-to-a-secure-random-string"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "LexOffice API"
    app_env: Literal["development", "testing", "production"] = "development"
    debug: bool = False

    # Shared pool for every tenant; tenant handles never open their own
    database_url: str
    database_migrations_url: str | None = None  # DDL role for alembic; defaults to database_url
    database_pool_size: int = Field(default=5, ge=1)
    database_max_overflow: int = Field(default=10, ge=0)
    database_pool_timeout: float = Field(default=30.0, gt=0)  # Seconds to wait for a connection
    database_command_timeout: float | None = 60.0  # Per statement, enforced by asyncpg
    database_ssl_mode: SslMode = "prefer"
    database_statement_cache_size: int = 100
    run_migrations_on_startup: bool = False

    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 8

    # Roles that skip the account-type restriction (never the tenant requirement)
    tenant_bypass_roles: list[str] = ["admin", "superadmin"]
    # Empty allows every account type
    allowed_account_types: list[str] = []

    default_page_size: int = Field(default=50, ge=1)
    max_page_size: int = Field(default=100, ge=1)

    cors_origins: list[str] = ["http://localhost:8080"]

    metrics_api_key: str | None = None  # If set, /metrics requires X-Metrics-Key

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if v == PLACEHOLDER_SECRET:
            raise ValueError(
                "JWT_SECRET_KEY still holds the example value. "
                "Generate one with: openssl rand -hex 32"
            )
        if len(v) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters")
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        if "*" in v:
            raise ValueError(
                "CORS wildcard '*' cannot be combined with credentialed requests; "
                "list the frontend origins explicitly"
            )
        return v

    @model_validator(mode="after")
    def validate_page_sizes(self) -> Self:
        if self.default_page_size > self.max_page_size:
            raise ValueError("DEFAULT_PAGE_SIZE cannot exceed MAX_PAGE_SIZE")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
