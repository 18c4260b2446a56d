"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (Redis, superadmin seed,
database engine). Middleware, CORS, error handlers, and routers are all
registered here.

Error rendering lives here too: ServiceError subclasses become
{"detail", "code"} with their mapped status; anything else is logged with
its traceback and answered as a bare 500 ServerError.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from peoplehub import __version__
from peoplehub.api import api_router
from peoplehub.config import settings
from peoplehub.errors import ServerError, ServiceError

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at
    shutdown. The superadmin seed runs here, once, behind its own lock.
    """
    logger.info(
        "peoplehub.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    from peoplehub.cache import close_redis, init_redis
    try:
        await init_redis()
        logger.info("peoplehub.redis_connected")
    except Exception as e:
        logger.warning("peoplehub.redis_unavailable", error=str(e))
        # Redis is optional; only rate limiting depends on it

    from peoplehub.db.engine import async_session_factory, engine
    if settings.seed_superadmin_on_startup:
        from peoplehub.services.bootstrap import seed_superadmin
        await seed_superadmin(async_session_factory)

    yield

    logger.info("peoplehub.shutdown")
    await close_redis()
    await engine.dispose()


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if isinstance(exc, ServerError):
        logger.error("request.server_error", detail=exc.detail)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
        headers=headers,
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request.unhandled_error", error_type=type(exc).__name__)
    err = ServerError()
    return JSONResponse(
        status_code=err.status_code,
        content={"detail": err.detail, "code": err.code},
    )


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="PeopleHub",
        description="Multi-tenant HR platform — identity, invitations, and access control",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RateLimit → Security → RequestId → handler

    from peoplehub.middleware.rate_limit import RateLimitMiddleware
    from peoplehub.middleware.request_id import RequestIdMiddleware
    from peoplehub.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=settings.rate_limit_rpm,
        auth_rpm=settings.rate_limit_auth_rpm,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: peoplehub.main:app)
app = create_app()
