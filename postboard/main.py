"""FastAPI application initialization."""

from contextlib import asynccontextmanager
from uuid import uuid4

from dotenv import load_dotenv

# Load environment variables before anything else
load_dotenv()

import asyncpg
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from postboard.api.ai import router as ai_router
from postboard.api.auth import router as auth_router
from postboard.api.comments import router as comments_router
from postboard.api.middleware import CorrelationIdMiddleware
from postboard.api.posts import router as posts_router
from postboard.api.routes import router
from postboard.api.users import router as users_router
from postboard.config import get_settings
from postboard.services.errors import ServiceError
from postboard.services.logging_service import configure_logging, get_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = get_logger("main")

    from postboard.database import close_database, init_database, run_migrations

    try:
        await init_database()
        await run_migrations()
        logger.info("database_initialized")
    except (OSError, asyncpg.PostgresError) as e:
        logger.warning(
            "database_initialization_failed",
            error=str(e),
            note="Continuing without database - requests needing storage will fail",
        )

    if not settings.token_secret:
        logger.warning(
            "token_secret_missing",
            note="Login, refresh and protected routes will answer 'missing auth configuration'",
        )

    logger.info(
        "application_started",
        log_level=settings.log_level,
        access_ttl_seconds=settings.access_token_ttl_seconds,
    )

    yield

    await close_database()
    logger.info("application_shutdown")


app = FastAPI(
    title="Postboard API",
    description="Posts, comments and users with JWT sessions",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> PlainTextResponse:
    """Render a ServiceError as its status code and plain-text message."""
    logger = structlog.get_logger()
    log_fn = logger.error if exc.status_code >= 500 else logger.info
    log_fn(
        "request_failed",
        path=request.url.path,
        method=request.method,
        status_code=exc.status_code,
        error_type=type(exc).__name__,
        detail=exc.message,
    )
    return PlainTextResponse(exc.message, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors with a 400 and the first problem."""
    correlation_id = getattr(request.state, "correlation_id", None) or str(uuid4())
    logger = structlog.get_logger()

    errors = exc.errors()
    if errors:
        first_error = errors[0]
        field = ".".join(str(loc) for loc in first_error.get("loc", ["unknown"]))
        message = first_error.get("msg", "Validation failed")
        detail = f"Field '{field}': {message}"
    else:
        detail = "Request validation failed"

    logger.warning(
        "validation_error",
        correlation_id=correlation_id,
        detail=detail,
    )

    return JSONResponse(
        status_code=400,
        content={
            "error": "Validation error",
            "detail": detail,
            "correlation_id": correlation_id,
        },
        headers={"X-Correlation-Id": correlation_id},
    )


# CORS middleware for browser clients
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(CorrelationIdMiddleware)

app.include_router(auth_router)
app.include_router(posts_router)
app.include_router(comments_router)
app.include_router(users_router)
app.include_router(ai_router)
app.include_router(router)
