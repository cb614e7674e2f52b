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


class DatabaseConfig(BaseModel):
    """Application database configuration."""

    url: str = Field(
        default="sqlite+aiosqlite:///./farmops.db",
        alias="FARMOPS_DATABASE_URL",
        description="Async database connection URL (postgres URLs are normalized to asyncpg)",
    )
    echo: bool = Field(default=False, alias="FARMOPS_DATABASE_ECHO", description="Echo SQL statements")

    model_config = {"populate_by_name": True}


class AuthConfig(BaseModel):
    """Bearer token verification configuration."""

    jwt_secret: str = Field(
        default="change-me", alias="FARMOPS_JWT_SECRET", description="Shared secret used to verify session tokens"
    )
    jwt_algorithm: str = Field(default="HS256", alias="FARMOPS_JWT_ALGORITHM", description="JWT signing algorithm")
    jwt_audience: Optional[str] = Field(
        default=None, alias="FARMOPS_JWT_AUDIENCE", description="Expected token audience (optional)"
    )
    jwt_issuer: Optional[str] = Field(
        default=None, alias="FARMOPS_JWT_ISSUER", description="Expected token issuer (optional)"
    )
    invite_expiry_hours: int = Field(
        default=72, alias="FARMOPS_INVITE_EXPIRY_HOURS", description="Lifetime of employee invites in hours"
    )

    model_config = {"populate_by_name": True}


class StorageConfig(BaseModel):
    """Local file storage configuration."""

    uploads_dir: str = Field(
        default="uploads", alias="FARMOPS_UPLOADS_DIR", description="Directory for uploaded images"
    )
    documents_dir: str = Field(
        default="generated-documents",
        alias="FARMOPS_DOCUMENTS_DIR",
        description="Directory for generated PDF documents",
    )

    model_config = {"populate_by_name": True}


class StorefrontConfig(BaseModel):
    """Public storefront and production defaults."""

    min_lead_days: int = Field(
        default=2, alias="FARMOPS_STOREFRONT_MIN_LEAD_DAYS", description="Minimum days of notice for orders"
    )
    default_overage_percent: float = Field(
        default=10, alias="FARMOPS_DEFAULT_OVERAGE_PERCENT", description="Extra production added to each item"
    )
    default_yield_per_tray: float = Field(
        default=8, alias="FARMOPS_DEFAULT_YIELD_PER_TRAY", description="Yield in oz assumed when a product has none"
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


class MonitoringConfig(BaseModel):
    """Logfire monitoring configuration."""

    enabled: bool = Field(default=False, alias="FARMOPS_LOGFIRE_ENABLED", description="Enable Logfire monitoring")
    token: Optional[str] = Field(default=None, alias="FARMOPS_LOGFIRE_TOKEN", description="Logfire write token")
    service_name: str = Field(
        default="farmops-api", alias="FARMOPS_LOGFIRE_SERVICE_NAME", description="Service name reported to Logfire"
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

    # =====================================================================
    # Pydantic Configuration
    # =====================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # farmops Server Configuration
    # =====================================================================
    server_host: str = Field(
        default="0.0.0.0",
        description="farmops server host address to bind to",
        alias="FARMOPS_SERVER_HOST",
    )
    server_port: int = Field(
        default=8000,
        description="farmops server port number",
        alias="FARMOPS_SERVER_PORT",
    )
    log_level: str = Field(
        default="INFO",
        description="farmops server logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="FARMOPS_LOG_LEVEL",
    )
    log_format: str = Field(
        default="detailed",
        description="Log line format (simple, detailed, json)",
        alias="FARMOPS_LOG_FORMAT",
    )
    log_file_dir: str = Field(default="logs", description="Directory for log files", alias="FARMOPS_LOG_FILE_DIR")
    enable_file_logging: bool = Field(
        default=False, description="Write logs to a file as well", alias="FARMOPS_ENABLE_FILE_LOGGING"
    )
    environment: str = Field(
        default="development",
        description="Deployment environment (development, production, test)",
        alias="FARMOPS_ENVIRONMENT",
    )
    frontend_url: str = Field(
        default="http://localhost:5173",
        description="Base URL of the web dashboard, used in invite and payment links",
        alias="FARMOPS_FRONTEND_URL",
    )

    # =====================================================================
    # Database Configuration
    # =====================================================================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./farmops.db",
        description="Async connection URL for application database",
        alias="FARMOPS_DATABASE_URL",
    )
    database_echo: bool = Field(default=False, alias="FARMOPS_DATABASE_ECHO")

    # =====================================================================
    # Auth Configuration
    # =====================================================================
    jwt_secret: str = Field(default="change-me", alias="FARMOPS_JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="FARMOPS_JWT_ALGORITHM")
    jwt_audience: Optional[str] = Field(default=None, alias="FARMOPS_JWT_AUDIENCE")
    jwt_issuer: Optional[str] = Field(default=None, alias="FARMOPS_JWT_ISSUER")
    invite_expiry_hours: int = Field(default=72, alias="FARMOPS_INVITE_EXPIRY_HOURS")

    # =====================================================================
    # Storage Configuration
    # =====================================================================
    uploads_dir: str = Field(default="uploads", alias="FARMOPS_UPLOADS_DIR")
    documents_dir: str = Field(default="generated-documents", alias="FARMOPS_DOCUMENTS_DIR")

    # =====================================================================
    # Storefront Configuration
    # =====================================================================
    storefront_min_lead_days: int = Field(default=2, alias="FARMOPS_STOREFRONT_MIN_LEAD_DAYS")
    default_overage_percent: float = Field(default=10, alias="FARMOPS_DEFAULT_OVERAGE_PERCENT")
    default_yield_per_tray: float = Field(default=8, alias="FARMOPS_DEFAULT_YIELD_PER_TRAY")

    # =====================================================================
    # CORS Configuration
    # =====================================================================
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(default=["*"], alias="CORS_ALLOW_METHODS")
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    # =====================================================================
    # Monitoring Configuration
    # =====================================================================
    logfire_enabled: bool = Field(default=False, alias="FARMOPS_LOGFIRE_ENABLED")
    logfire_token: Optional[str] = Field(default=None, alias="FARMOPS_LOGFIRE_TOKEN")
    logfire_service_name: str = Field(default="farmops-api", alias="FARMOPS_LOGFIRE_SERVICE_NAME")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def database(self) -> DatabaseConfig:
        """Get database configuration from environment variables."""
        return DatabaseConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def auth(self) -> AuthConfig:
        """Get bearer token configuration from environment variables."""
        return AuthConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def storage(self) -> StorageConfig:
        """Get file storage configuration from environment variables."""
        return StorageConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def storefront(self) -> StorefrontConfig:
        """Get storefront configuration from environment variables."""
        return StorefrontConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration from environment variables."""
        return CORSConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def monitoring(self) -> MonitoringConfig:
        """Get Logfire monitoring configuration from environment variables."""
        return MonitoringConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
