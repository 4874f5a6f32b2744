"""
User Directory FastAPI Application
Main entry point for the backend API server.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from userdir.config import settings
from userdir.database import init_db, close_db
from userdir.exceptions import (
    AlreadyIdentifiedError,
    EmailAlreadyUsedError,
    InvalidKeyError,
    LoginAlreadyUsedError,
    StoreError,
    UserDirectoryError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)

_ERROR_STATUS = {
    InvalidKeyError: 400,
    LoginAlreadyUsedError: 400,
    EmailAlreadyUsedError: 400,
    AlreadyIdentifiedError: 400,
    UserNotFoundError: 404,
    StoreError: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and cleanup on shutdown.
    """
    from userdir.logging_config import setup_logging
    setup_logging(log_dir=settings.log_dir, log_level=settings.log_level)

    logger.info("Starting User Directory backend...")

    # In production, use Alembic migrations instead
    if settings.debug:
        await init_db()
        logger.info("Database initialized (debug mode)")

    yield

    logger.info("Shutting down User Directory backend...")
    await close_db()


# Create FastAPI application
app = FastAPI(
    title="User Directory",
    description="""
    ## User Directory API

    Creates, updates, resolves and existence-checks users identified by
    login, email, mobile number or numeric id.
    """,
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)


async def user_directory_error_handler(request: Request, exc: UserDirectoryError):
    status_code = next(
        (code for error_cls, code in _ERROR_STATUS.items() if isinstance(exc, error_cls)),
        500,
    )
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error_key": exc.error_key},
    )


app.add_exception_handler(UserDirectoryError, user_directory_error_handler)


# =============================================================================
# Health Check Endpoints
# =============================================================================

@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - API information."""
    return {
        "name": "User Directory API",
        "version": "0.1.0",
        "docs": "/api/docs",
        "status": "running"
    }


@app.get("/api/health", tags=["Health"])
async def health_check():
    """Health check endpoint for container orchestration."""
    return {
        "status": "healthy",
        "service": "userdir-backend",
        "version": "0.1.0"
    }


@app.get("/api/health/db", tags=["Health"])
async def database_health():
    """Database connectivity check."""
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError
    from userdir.database import AsyncSessionLocal

    try:
        async with AsyncSessionLocal() as session:
            result = await session.execute(text("SELECT 1"))
            result.fetchone()
        return {
            "status": "healthy",
            "database": "connected",
        }
    except SQLAlchemyError as e:
        return {
            "status": "unhealthy",
            "database": "disconnected",
            "error": str(e)
        }


@app.get("/api/health/redis", tags=["Health"])
async def redis_health():
    """Redis (Celery broker) connectivity check."""
    import redis.asyncio as redis_async
    from redis.exceptions import RedisError

    try:
        r = redis_async.from_url(settings.redis_url)
        await r.ping()
        await r.aclose()
        return {
            "status": "healthy",
            "redis": "connected"
        }
    except (RedisError, OSError) as e:
        return {
            "status": "unhealthy",
            "redis": "disconnected",
            "error": str(e)
        }


from userdir.api import lookup, users


# Configure rate limiting for the unauthenticated lookups
app.state.limiter = lookup.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# =============================================
# API Routers
# =============================================

app.include_router(users.router, prefix=f"{settings.api_prefix}/users", tags=["Users"])
app.include_router(lookup.router, prefix=f"{settings.api_prefix}/hd/users", tags=["Lookup"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "userdir.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
