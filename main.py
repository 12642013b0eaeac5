"""FastAPI application entry point."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic_core import ValidationError as PydanticCoreValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routes import dashboard, health, invoices, pdf
from core.error_handlers import (
    handle_app_error,
    handle_http_error,
    handle_pydantic_error,
    handle_unknown_error,
    handle_validation_error,
)
from core.lifespan import lifespan
from core.middleware import trace_id_middleware
from core.settings import app_settings
from core.validation import validate_all_settings
from extraction.core.exceptions import BaseError
from extraction.core.logging_config import configure_structured_logging

# Configure logging
configure_structured_logging(
    level=app_settings.LOG_LEVEL, json_format=app_settings.LOG_FORMAT.lower() == "json"
)
logger = logging.getLogger(__name__)

# Validate environment before starting application
validate_all_settings()

# Initialize FastAPI app
app = FastAPI(
    title="Lumi Invoice API",
    version="1.0.0",
    description="Extracts CEMIG electricity bill data and serves consumption dashboards",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# 1. Register Middleware
app.middleware("http")(trace_id_middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Trace-ID"],
)

# 2. Register Exception Handlers
app.add_exception_handler(RequestValidationError, handle_validation_error)
app.add_exception_handler(PydanticCoreValidationError, handle_pydantic_error)
app.add_exception_handler(StarletteHTTPException, handle_http_error)
app.add_exception_handler(BaseError, handle_app_error)
app.add_exception_handler(Exception, handle_unknown_error)

# Routes
app.include_router(health.router)
app.include_router(pdf.router)
app.include_router(invoices.router)
app.include_router(dashboard.router)
