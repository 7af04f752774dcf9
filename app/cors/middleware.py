from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from app.cors.allow_list import AllowList
from app.cors.gate import OriginNotAllowed, enforce, permit_headers, preflight_headers
from app.utils.errors import handle_origin_denied, handle_unhandled
from app.utils.logging import logger


def _is_preflight(request: Request) -> bool:
    return (
        request.method == "OPTIONS"
        and "origin" in request.headers
        and "access-control-request-method" in request.headers
    )


class OriginGateMiddleware(BaseHTTPMiddleware):
    """Reject requests from origins outside the allow-list before any route runs.

    Permitted cross-origin responses get the exact origin echoed back together
    with the credentials flag. Paths in ``exempt_paths`` are always passed to
    their handler; they only receive credential headers when permitted.
    """

    def __init__(self, app: ASGIApp, allow_list: AllowList, exempt_paths: Iterable[str] = ()):
        super().__init__(app)
        self.allow_list = allow_list
        self.exempt_paths = frozenset(exempt_paths)

    async def _call(self, request, call_next) -> Response:
        # Unhandled errors become the 500 envelope here so permit headers still apply
        try:
            return await call_next(request)
        except Exception as exc:
            return await handle_unhandled(request, exc)

    async def dispatch(self, request, call_next):
        origin = request.headers.get("origin")
        try:
            enforce(origin, self.allow_list)
        except OriginNotAllowed as exc:
            if request.url.path not in self.exempt_paths:
                return await handle_origin_denied(request, exc)
            resp: Response = await self._call(request, call_next)
            resp.headers.add_vary_header("Origin")
            return resp

        if _is_preflight(request):
            headers = preflight_headers(origin, request.headers.get("access-control-request-headers"))
            resp = Response(status_code=204, headers=headers)
            resp.headers.add_vary_header("Origin")
            resp.headers.add_vary_header("Access-Control-Request-Headers")
            return resp

        if origin:
            logger.debug(f"Origin permitted: {origin}")
        resp = await self._call(request, call_next)
        resp.headers.update(permit_headers(origin))
        resp.headers.add_vary_header("Origin")
        return resp
