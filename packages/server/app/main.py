from fastapi import FastAPI, Request, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import redis.asyncio as redis
import os
from sqlalchemy import text
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app import dependencies
from app.auth.config import auth_settings
from app.auth.middleware import AuthMiddleware
from app.logging_config import setup_logging, get_logger
from app.database import init_db_engine, close_db_engine, get_async_session
from app.migration_check import ensure_migrations
from app.routers import auth as auth_router
from app.routers import projects

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan - connect/disconnect Redis and database."""
    # Initialize logging first
    setup_logging()

    try:
        auth_settings.validate()
        if auth_settings.enabled:
            logger.info("Authentication is ENABLED")
        else:
            logger.warning("Authentication is DISABLED (AUTH_ENABLED=false)")
    except RuntimeError as e:
        logger.critical(f"Auth configuration error: {e}")
        raise

    # Redis is optional: without it board events are simply not published
    redis_url = os.getenv("REDIS_URL", "").strip()
    if redis_url:
        dependencies.redis_client = redis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True,
            retry_on_timeout=True,
            health_check_interval=30,
        )
        try:
            await dependencies.redis_client.ping()
            logger.info(f"Connected to Redis at {redis_url}")
        except Exception as e:
            logger.warning(f"Could not connect to Redis: {e}")
            logger.warning("API will continue without board event streaming")
    else:
        logger.info("REDIS_URL not set, board events will not be published")

    try:
        await init_db_engine()
        logger.info("Database engine initialized")
    except Exception as e:
        logger.critical(f"Could not initialize database engine: {e}")
        raise

    try:
        ensure_migrations()
    except Exception as e:
        logger.critical(f"Migration check failed: {e}")
        raise

    yield

    try:
        await close_db_engine()
        logger.info("Database engine closed")
    except Exception as e:
        logger.error(f"Error closing database engine: {e}")

    if dependencies.redis_client:
        try:
            await dependencies.redis_client.aclose()
            logger.info("Disconnected from Redis")
        except Exception as e:
            logger.error(f"Error closing Redis connection: {e}")
        dependencies.redis_client = None


app = FastAPI(
    title="Taskboard API",
    version="0.1.0",
    description="API backend for Taskboard - multi-user kanban boards",
    lifespan=lifespan,
)

# CORS
# CORS_ORIGINS env var controls allowed origins.
#   "*"              → wildcard (allow any origin, credentials disabled)
#   unset / empty    → wildcard (same default behaviour)
#   "http://a,https://b" → explicit origin list (credentials enabled)
_cors_origins_env = os.getenv("CORS_ORIGINS", "*").strip() or "*"
if _cors_origins_env == "*":
    _cors_origins = ["*"]
    _cors_credentials = False
else:
    _cors_origins = [o.strip() for o in _cors_origins_env.split(",") if o.strip()]
    _cors_credentials = True

# Auth middleware is added BEFORE CORS so that CORS wraps it.
# Starlette middleware order is LIFO: last-added runs outermost.
app.add_middleware(AuthMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=_cors_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(OperationalError)
@app.exception_handler(InterfaceError)
async def database_unavailable_handler(request: Request, exc: Exception):
    """Store unreachable or connection dropped mid-request."""
    logger.error(
        f"Database unavailable in {request.method} {request.url.path}: {exc}"
    )
    return JSONResponse(
        status_code=503,
        content={"detail": "Database unavailable", "path": str(request.url.path)},
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch unhandled exceptions and return proper JSON response."""
    error_detail = str(exc)
    error_type = type(exc).__name__

    # Log the full traceback
    logger.error(
        f"Unhandled exception in {request.method} {request.url.path}: {error_type}: {error_detail}",
        exc_info=True,
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": f"{error_type}: {error_detail}",
            "type": error_type,
            "path": str(request.url.path),
        },
    )


app.include_router(auth_router.router, prefix="/v1/auth", tags=["auth"])
app.include_router(projects.router, prefix="/v1/projects", tags=["projects"])
app.include_router(projects.moves_router, prefix="/v1/tasks", tags=["tasks"])


@app.get("/v1/status")
async def status(session: AsyncSession = Depends(get_async_session)):
    """Get API health status."""
    redis_ok = False
    if dependencies.redis_client:
        try:
            redis_ok = await dependencies.redis_client.ping()
        except Exception as e:
            logger.debug(f"Redis ping failed: {e}")

    database_ok = True
    try:
        await session.execute(text("SELECT 1"))
    except (OperationalError, InterfaceError) as e:
        logger.warning(f"Database check failed: {e}")
        database_ok = False

    return {
        "status": "ok" if database_ok else "degraded",
        "version": app.version,
        "database": database_ok,
        "redis": bool(redis_ok),
        "auth_enabled": auth_settings.enabled,
    }
