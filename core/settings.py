"""
Centralized application settings using Pydantic.

All environment variables are read once at startup and validated.
Defaults target a local docker-compose stack; production values come from
the environment or a .env file.
"""

from pydantic import SecretStr
from pydantic_settings import BaseSettings

from extraction.core.config import (
    DEFAULT_LAYOUT,
    JOB_BACKOFF_SECONDS,
    JOB_MAX_ATTEMPTS,
    PDF_CACHE_TTL_SECONDS,
    PDF_MAX_SIZE_BYTES,
)


class DatabaseSettings(BaseSettings):
    """Database connection and pool configuration."""

    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "lumi"
    DB_USER: str = "postgres"
    DB_PASSWORD: SecretStr = SecretStr("postgres")
    DB_POOL_MIN_SIZE: int = 2
    DB_POOL_MAX_SIZE: int = 10
    DB_POOL_TIMEOUT: float = 10.0
    DB_COMMAND_TIMEOUT: float = 10.0

    model_config = {"case_sensitive": True, "env_file": ".env", "extra": "ignore"}


class RedisSettings(BaseSettings):
    """Redis cache configuration."""

    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_SOCKET_TIMEOUT: float = 5.0

    model_config = {"case_sensitive": True, "env_file": ".env", "extra": "ignore"}


class S3Settings(BaseSettings):
    """S3/MinIO storage configuration."""

    S3_ENDPOINT: str = "localhost:9000"
    S3_ACCESS_KEY: str = "minioadmin"
    S3_SECRET_KEY: SecretStr = SecretStr("minioadmin")
    S3_SECURE: bool = False
    INVOICE_INCOMING_BUCKET: str = "incoming-invoices"
    INVOICE_PROCESSED_BUCKET: str = "processed-invoices"
    S3_PRESIGNED_URL_EXPIRES_SECONDS: int = 3600

    model_config = {"case_sensitive": True, "env_file": ".env", "extra": "ignore"}


class PdfSettings(BaseSettings):
    """PDF upload and extraction configuration."""

    PDF_MAX_SIZE: int = PDF_MAX_SIZE_BYTES
    PDF_CACHE_TTL: int = PDF_CACHE_TTL_SECONDS
    DEFAULT_LAYOUT: str = DEFAULT_LAYOUT

    model_config = {"case_sensitive": True, "env_file": ".env", "extra": "ignore"}


class JobSettings(BaseSettings):
    """Invoice processing job retry configuration."""

    JOB_MAX_ATTEMPTS: int = JOB_MAX_ATTEMPTS
    JOB_BACKOFF_SECONDS: float = JOB_BACKOFF_SECONDS

    model_config = {"case_sensitive": True, "env_file": ".env", "extra": "ignore"}


class AppSettings(BaseSettings):
    """General application settings."""

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"
    CORS_ORIGINS: str = "*"

    model_config = {"case_sensitive": True, "env_file": ".env", "extra": "ignore"}

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


# Singleton instances - loaded once at module import
db_settings = DatabaseSettings()
redis_settings = RedisSettings()
s3_settings = S3Settings()
pdf_settings = PdfSettings()
job_settings = JobSettings()
app_settings = AppSettings()
