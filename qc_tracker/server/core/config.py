"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class PostgreSQLConfig(BaseModel):
    """PostgreSQL database configuration."""

    db: str = Field(default="qc_tracker", alias="POSTGRES_DB", description="PostgreSQL database name")
    user: str = Field(default="qc", alias="POSTGRES_USER", description="PostgreSQL database user")
    password: str = Field(default="changeme", alias="POSTGRES_PASSWORD", description="PostgreSQL database password")
    host: str = Field(default="postgres", alias="POSTGRES_HOST", description="PostgreSQL database host address")
    port: int = Field(default=5432, alias="POSTGRES_PORT", description="PostgreSQL database port number")

    model_config = {"populate_by_name": True}

    @property
    def url(self) -> str:
        """Async connection URL assembled from the individual settings."""
        return f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.db}"


class PaginationConfig(BaseModel):
    """Defaults applied to list endpoints when an entity does not override them."""

    default_limit: int = Field(
        default=20, alias="QC_TRACKER_DEFAULT_PAGE_LIMIT", ge=1, description="Rows per page when no limit is given"
    )
    max_limit: int = Field(
        default=200, alias="QC_TRACKER_MAX_PAGE_LIMIT", ge=1, description="Hard upper bound on rows per page"
    )

    model_config = {"populate_by_name": True}


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS", description="Allowed CORS origins (use * for all)")
    allow_credentials: bool = Field(
        default=True, alias="CORS_ALLOW_CREDENTIALS", description="Allow credentials in CORS requests"
    )
    allow_methods: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_METHODS", description="Allowed HTTP methods (use * for all)"
    )
    allow_headers: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_HEADERS", description="Allowed HTTP headers (use * for all)"
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    # =====================================================================
    # Server Configuration
    # =====================================================================
    server_host: str = Field(
        default="0.0.0.0",
        description="Server host address to bind to",
        alias="QC_TRACKER_SERVER_HOST",
    )
    server_port: int = Field(
        default=8000,
        description="Server port number",
        alias="QC_TRACKER_SERVER_PORT",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="QC_TRACKER_LOG_LEVEL",
    )

    # =====================================================================
    # Database Configuration
    # =====================================================================
    database_url: Optional[str] = Field(
        default=None,
        description="Async connection URL; assembled from the POSTGRES_* variables when unset",
        alias="DATABASE_URL",
    )
    database_echo: bool = Field(
        default=False,
        description="Echo every SQL statement through the sqlalchemy.engine logger",
        alias="DATABASE_ECHO",
    )

    # =====================================================================
    # Flattened group fields (read through the grouped properties below)
    # =====================================================================
    postgres_db: str = Field(default="qc_tracker", alias="POSTGRES_DB")
    postgres_user: str = Field(default="qc", alias="POSTGRES_USER")
    postgres_password: str = Field(default="changeme", alias="POSTGRES_PASSWORD")
    postgres_host: str = Field(default="postgres", alias="POSTGRES_HOST")
    postgres_port: int = Field(default=5432, alias="POSTGRES_PORT")

    default_page_limit: int = Field(default=20, alias="QC_TRACKER_DEFAULT_PAGE_LIMIT")
    max_page_limit: int = Field(default=200, alias="QC_TRACKER_MAX_PAGE_LIMIT")

    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(default=["*"], alias="CORS_ALLOW_METHODS")
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def postgres(self) -> PostgreSQLConfig:
        """Get PostgreSQL configuration from environment variables."""
        return PostgreSQLConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def pagination(self) -> PaginationConfig:
        """Get list pagination defaults from environment variables."""
        return PaginationConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration from environment variables."""
        return CORSConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def effective_database_url(self) -> str:
        """``DATABASE_URL`` when set, otherwise the URL built from the PostgreSQL group."""
        return self.database_url or self.postgres.url


settings = Settings()
