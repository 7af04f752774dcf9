from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette import status
from slowapi.errors import RateLimitExceeded

from app.cors.gate import OriginNotAllowed
from app.utils.logging import logger

class NotFoundError(HTTPException):
    def __init__(self, detail="Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

# ---- Exception handlers (registered in create_app) ----
async def handle_http_exception(request: Request, exc: HTTPException):
    logger.warning(f"HTTPException {exc.status_code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )

async def handle_origin_denied(request: Request, exc: OriginNotAllowed):
    # Only the rejection signal; nothing from downstream handlers
    logger.warning(f"Origin denied: {exc.origin} {request.method} {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": exc.detail},
        headers={"Vary": "Origin"},
    )

async def handle_validation_error(request: Request, exc: RequestValidationError | ValidationError):
    logger.warning("ValidationError")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"ok": False, "error": "validation_error", "details": exc.errors()},
    )

# sync: SlowAPIMiddleware calls this directly when a default limit trips
def handle_rate_limit(request: Request, exc: RateLimitExceeded):
    return JSONResponse(status_code=429, content={"ok": False, "error": "rate_limited"})

async def handle_unhandled(request: Request, exc: Exception):
    logger.error(f"Unhandled error: {type(exc).__name__}", exc_info=True)
    return JSONResponse(status_code=500, content={"ok": False, "error": "internal_error"})
