"""Application startup validation checks.

Validates critical settings and configuration before application starts.
Settings classes define data, this module validates behavior.
"""

import logging
import re

logger = logging.getLogger(__name__)

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def validate_all_settings() -> None:
    """Validate all critical settings at application startup.

    This ensures the application fails fast if environment is misconfigured,
    rather than crashing on first request.

    Raises:
        RuntimeError: If any critical setting is missing or invalid
    """
    from core.settings import (
        app_settings,
        db_settings,
        job_settings,
        pdf_settings,
        redis_settings,
        s3_settings,
    )
    from extraction.layouts.registry import build_default_registry

    critical_checks = [
        (db_settings.DB_HOST, "DB_HOST", "Database connection"),
        (db_settings.DB_NAME, "DB_NAME", "Database connection"),
        (db_settings.DB_USER, "DB_USER", "Database connection"),
        (
            db_settings.DB_PASSWORD.get_secret_value(),
            "DB_PASSWORD",
            "Database connection",
        ),
        (redis_settings.REDIS_URL, "REDIS_URL", "PDF and dashboard cache"),
        (s3_settings.S3_ENDPOINT, "S3_ENDPOINT", "S3/MinIO storage"),
        (s3_settings.S3_ACCESS_KEY, "S3_ACCESS_KEY", "S3/MinIO storage"),
        (
            s3_settings.S3_SECRET_KEY.get_secret_value(),
            "S3_SECRET_KEY",
            "S3/MinIO storage",
        ),
        (s3_settings.INVOICE_INCOMING_BUCKET, "INVOICE_INCOMING_BUCKET", "S3/MinIO storage"),
        (s3_settings.INVOICE_PROCESSED_BUCKET, "INVOICE_PROCESSED_BUCKET", "S3/MinIO storage"),
    ]

    missing = []
    for value, name, purpose in critical_checks:
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(f"  - {name} (required for {purpose})")

    if missing:
        error_msg = (
            "❌ Missing critical environment variables:\n"
            + "\n".join(missing)
            + "\n\nPlease check your .env file or environment configuration."
        )
        logger.error(error_msg)
        raise RuntimeError(error_msg)

    if not re.match(r"^rediss?://.+", redis_settings.REDIS_URL):
        raise RuntimeError(
            f"REDIS_URL={redis_settings.REDIS_URL} (must start with redis:// or rediss://)"
        )

    if not (1 <= db_settings.DB_PORT <= 65535):
        raise RuntimeError(f"DB_PORT must be 1-65535, got {db_settings.DB_PORT}")

    if db_settings.DB_POOL_MIN_SIZE > db_settings.DB_POOL_MAX_SIZE:
        raise RuntimeError(
            f"DB_POOL_MIN_SIZE ({db_settings.DB_POOL_MIN_SIZE}) "
            f"cannot exceed DB_POOL_MAX_SIZE ({db_settings.DB_POOL_MAX_SIZE})"
        )

    if s3_settings.INVOICE_INCOMING_BUCKET == s3_settings.INVOICE_PROCESSED_BUCKET:
        raise RuntimeError("INVOICE_INCOMING_BUCKET and INVOICE_PROCESSED_BUCKET must differ")

    if pdf_settings.PDF_MAX_SIZE <= 0:
        raise RuntimeError(f"PDF_MAX_SIZE must be positive, got {pdf_settings.PDF_MAX_SIZE}")

    if pdf_settings.PDF_CACHE_TTL <= 0:
        raise RuntimeError(f"PDF_CACHE_TTL must be positive, got {pdf_settings.PDF_CACHE_TTL}")

    if not build_default_registry().has(pdf_settings.DEFAULT_LAYOUT):
        raise RuntimeError(f"DEFAULT_LAYOUT={pdf_settings.DEFAULT_LAYOUT} is not a known layout")

    if job_settings.JOB_MAX_ATTEMPTS < 1:
        raise RuntimeError(
            f"JOB_MAX_ATTEMPTS must be at least 1, got {job_settings.JOB_MAX_ATTEMPTS}"
        )

    if app_settings.LOG_LEVEL.upper() not in _LOG_LEVELS:
        raise RuntimeError(f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}")

    logger.info("✅ All critical settings validated successfully")
    logger.info(
        f"  - Database: {db_settings.DB_HOST}:{db_settings.DB_PORT}/{db_settings.DB_NAME}"
    )
    logger.info(
        f"  - S3: {s3_settings.S3_ENDPOINT} "
        f"({s3_settings.INVOICE_INCOMING_BUCKET} → {s3_settings.INVOICE_PROCESSED_BUCKET})"
    )
    logger.info(f"  - Default layout: {pdf_settings.DEFAULT_LAYOUT}")
