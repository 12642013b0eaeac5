import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from redis.asyncio import Redis

from core.settings import job_settings, pdf_settings, redis_settings, s3_settings
from extraction.cache.pdf_cache import PdfCacheService
from extraction.database.invoice_repository import InvoiceRepository
from extraction.database.manager import create_database_manager_from_settings
from extraction.layouts.registry import build_default_registry
from extraction.orchestrator import PdfExtractionService
from services.dashboard_service import DashboardService
from services.invoice_service import InvoiceService
from services.storage import create_pdf_storage_from_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown tasks."""

    logger.info("Initializing database connection pool...")
    try:
        db_manager = create_database_manager_from_settings()
        await db_manager.connect()
        await db_manager.ensure_schema()
        app.state.db_manager = db_manager
        logger.info("Database pool ready")
    except Exception as e:
        logger.error(f"Database pool initialization failed: {e}", exc_info=True)
        logger.warning("Application will continue without database connectivity")
        app.state.db_manager = None

    logger.info("Initializing Redis client...")
    try:
        redis = Redis.from_url(
            redis_settings.REDIS_URL,
            decode_responses=True,
            socket_timeout=redis_settings.REDIS_SOCKET_TIMEOUT,
        )
        await redis.ping()
        app.state.redis = redis
        logger.info("Redis ready")
    except Exception as e:
        logger.error(f"Redis initialization failed: {e}", exc_info=True)
        logger.warning("Application will continue with the in-process cache only")
        app.state.redis = None

    logger.info("Initializing object storage...")
    try:
        storage = create_pdf_storage_from_settings()
        await storage.ensure_buckets()
        app.state.storage = storage
        logger.info("Object storage ready")
    except Exception as e:
        logger.error(f"Object storage initialization failed: {e}", exc_info=True)
        app.state.storage = None

    registry = build_default_registry()
    app.state.extraction_service = PdfExtractionService(
        registry=registry,
        cache=PdfCacheService(app.state.redis, ttl_seconds=pdf_settings.PDF_CACHE_TTL),
    )
    logger.info(f"Extraction service ready, layouts: {', '.join(registry.names())}")

    if app.state.db_manager and app.state.storage:
        repository = InvoiceRepository(app.state.db_manager)
        app.state.invoice_service = InvoiceService(
            repository=repository,
            storage=app.state.storage,
            extraction_service=app.state.extraction_service,
            layout_name=pdf_settings.DEFAULT_LAYOUT,
            job_max_attempts=job_settings.JOB_MAX_ATTEMPTS,
            job_backoff_seconds=job_settings.JOB_BACKOFF_SECONDS,
            pdf_url_expires_seconds=s3_settings.S3_PRESIGNED_URL_EXPIRES_SECONDS,
        )
    else:
        logger.warning("Invoice endpoints disabled (database or storage unavailable)")
        app.state.invoice_service = None

    if app.state.db_manager:
        app.state.dashboard_service = DashboardService(
            InvoiceRepository(app.state.db_manager), app.state.redis
        )
    else:
        app.state.dashboard_service = None

    yield

    if getattr(app.state, "redis", None):
        logger.info("Closing Redis client...")
        await app.state.redis.aclose()

    if getattr(app.state, "db_manager", None):
        logger.info("Closing database connection pool...")
        await app.state.db_manager.disconnect()
        logger.info("Database pool closed")
