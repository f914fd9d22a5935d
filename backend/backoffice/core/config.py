"""
Application configuration using Pydantic BaseSettings.
Loads environment variables and provides typed configuration.
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Project metadata
    PROJECT_NAME: str = "Back Office"
    VERSION: str = "0.1.0"
    API_V1_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./backoffice.db"
    AUTO_CREATE_TABLES: bool = True

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
    ]

    # Rate limiting (portal routes only)
    RATE_LIMIT_ENABLED: bool = True
    PORTAL_RATE_LIMIT: str = "30/minute"

    # Admin routes sit behind the hosting platform's auth gate
    ADMIN_AUTH_ENABLED: bool = True
    ADMIN_PRINCIPAL_HEADER: str = "X-MS-CLIENT-PRINCIPAL"

    # Portal tokens
    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"
    PORTAL_TOKEN_EXPIRE_DAYS: int = 45

    # Toggl Track
    TOGGL_API_TOKEN: str = ""
    TOGGL_WORKSPACE_ID: str = ""
    TOGGL_API_BASE: str = "https://api.track.toggl.com/api/v9"
    TOGGL_REPORTS_BASE: str = "https://api.track.toggl.com/reports/api/v3"

    # Invoice rendering (invoice-generator.com)
    INVOICE_GENERATOR_URL: str = "https://invoice-generator.com"
    INVOICE_GENERATOR_API_KEY: str = ""
    INVOICE_LINE_ITEM_LABEL: str = "Website development services"

    # Azure Blob Storage
    AZURE_STORAGE_CONNECTION_STRING: str = ""
    AZURE_STORAGE_CONTAINER: str = ""

    # Outbound HTTP
    HTTP_TIMEOUT_SECONDS: int = 30

    # Dashboard metrics
    METRICS_CACHE_TTL_SECONDS: int = 600

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
