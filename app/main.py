import asyncio
from typing import Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import Settings, get_settings
from app.cors.allow_list import AllowList
from app.cors.middleware import OriginGateMiddleware
from app.db.mongo import connect_db, close_db
from app.frontend import mount_frontend

# Rate limiting
from slowapi.middleware import SlowAPIMiddleware
from slowapi.errors import RateLimitExceeded
from app.utils.rate_limit import build_limiter

# Logging / errors
from app.utils.logging import logger, new_request_id, request_id_ctx
from app.utils.errors import (
    handle_http_exception,
    handle_validation_error,
    handle_rate_limit,
    handle_unhandled,
)

HEALTH_PATH = "/api/health"
AUTH_PREFIX = "/api/auth"
MESSAGES_PREFIX = "/api/messages"


def create_app(
    settings: Optional[Settings] = None,
    *,
    auth_router: Optional[APIRouter] = None,
    message_router: Optional[APIRouter] = None,
) -> FastAPI:
    settings = settings or get_settings()
    logger.setLevel(settings.LOG_LEVEL.upper())

    # Raises AllowListConfigError on an empty/malformed config: no app, no traffic
    allow_list = AllowList.from_settings(settings)
    logger.info(f"CORS allow-list: {', '.join(allow_list)}")

    app = FastAPI(title=settings.APP_NAME, version="1.0.0")
    app.state.settings = settings
    app.state.allow_list = allow_list

    # ----- Middleware (last added runs first) -----
    limiter = build_limiter(settings)
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(OriginGateMiddleware, allow_list=allow_list, exempt_paths=[HEALTH_PATH])

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        token = request_id_ctx.set(new_request_id())
        try:
            response = await call_next(request)
            response.headers["X-Request-Id"] = request_id_ctx.get() or "-"
        finally:
            request_id_ctx.reset(token)
        return response

    # ----- Exception Handlers -----
    # Starlette's base class so router 404/405s share the envelope
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(RateLimitExceeded, handle_rate_limit)
    app.add_exception_handler(Exception, handle_unhandled)

    # ----- Lifecycle -----
    @app.on_event("startup")
    async def _startup():
        logger.info(f"Server is running on PORT:{settings.PORT}")
        # Connect once the listener is up; a slow or missing DB must not block binding
        app.state.db_task = asyncio.get_running_loop().create_task(connect_db(app, settings))

    @app.on_event("shutdown")
    async def _shutdown():
        task = getattr(app.state, "db_task", None)
        if task is not None and not task.done():
            task.cancel()
        await close_db(app)
        logger.info("Shutdown complete")

    # ----- Health -----
    # exemption is keyed by endpoint name; applied last so the route keeps the coroutine
    @limiter.exempt
    @app.get(HEALTH_PATH, tags=["system"])
    async def health():
        return {"status": "OK", "message": "Server is running"}

    # ----- Routers -----
    for prefix, router, tag in (
        (AUTH_PREFIX, auth_router, "auth"),
        (MESSAGES_PREFIX, message_router, "messages"),
    ):
        if router is None:
            logger.warning(f"No {tag} routes mounted at {prefix}")
            continue
        app.include_router(router, prefix=prefix, tags=[tag])

    # ----- Front-end (production only, decided once here) -----
    if settings.is_production:
        mount_frontend(app, settings.FRONTEND_DIST)

    return app


app = create_app()
