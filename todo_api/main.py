"""
FastAPI entry point for the Task List API.

Serves a Basic-auth protected task list backed by an in-memory store with a
Redis cache in front of it.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
import structlog

from todo_api.api.endpoints import router as api_router
from todo_api.config import configure_structlog, settings
from todo_api.core.cache import close_cache, initialize_cache
from todo_api.core.errors import AuthError, TodoServiceError
from todo_api.core.task_store import initialize_store

configure_structlog()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown."""
    logger.info(
        "Task List API starting up",
        version=settings.api_version,
        environment=settings.get_environment_display(),
        port=settings.port,
    )

    initialize_store()
    cache = initialize_cache(settings.redis_url, timeout_seconds=settings.cache_timeout_seconds)
    logger.info(
        "Task cache initialized",
        redis_addr=settings.redis_addr,
        ttl_seconds=settings.cache_ttl_seconds,
    )

    existing = await cache.get(settings.cache_key)
    if not existing.is_hit:
        logger.info("No cache found for key", key=settings.cache_key)

    yield

    logger.info("Task List API shutting down")
    await close_cache()


app = FastAPI(
    title=settings.api_title,
    description="Task list with a Redis cache-aside layer and Basic auth.",
    version=settings.api_version,
    debug=settings.debug,
    lifespan=lifespan,
    docs_url="/docs" if not settings.is_production() else None,
    redoc_url=None,
    openapi_url="/openapi.json" if not settings.is_production() else None,
)


@app.exception_handler(TodoServiceError)
async def service_error_handler(request: Request, exc: TodoServiceError) -> Response:
    """Map service errors to bare status responses."""
    logger.info(
        "Request failed",
        method=request.method,
        path=request.url.path,
        **exc.to_dict(),
    )
    headers = {"WWW-Authenticate": "Basic"} if isinstance(exc, AuthError) else None
    return Response(status_code=exc.status_code, headers=headers)


app.include_router(api_router)


FALLBACK_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


# Registered last: catches "/" and any request no other route fully matches.
@app.api_route("/{path:path}", methods=FALLBACK_METHODS, tags=["Root"], include_in_schema=False)
async def root(path: str = "") -> Response:
    """Log a banner and return an empty body."""
    logger.info("ToDo list", path=f"/{path}")
    return Response(status_code=200)


def run() -> None:
    """Start the server on the configured host and port."""
    import uvicorn

    uvicorn.run(app, **settings.get_server_config())


# Application startup
if __name__ == "__main__":
    run()
