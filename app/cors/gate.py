from enum import Enum
from typing import Dict, Optional

from fastapi import HTTPException
from starlette import status

from app.cors.allow_list import AllowList

ALLOW_METHODS = "GET,HEAD,PUT,PATCH,POST,DELETE"


class OriginDecision(str, Enum):
    PERMIT = "permit"
    DENY = "deny"


class OriginNotAllowed(HTTPException):
    def __init__(self, origin: str, detail: str = "Not allowed by CORS"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
        self.origin = origin


def evaluate(request_origin: Optional[str], allow_list: AllowList) -> OriginDecision:
    """Decide whether a request declaring ``request_origin`` may proceed.

    A missing (or empty) origin is permitted: same-origin navigations, curl and
    server-to-server callers don't send one. Present origins must match an
    allow-list entry exactly.
    """
    if not request_origin:
        return OriginDecision.PERMIT
    if request_origin in allow_list:
        return OriginDecision.PERMIT
    return OriginDecision.DENY


def enforce(request_origin: Optional[str], allow_list: AllowList) -> None:
    """Raise OriginNotAllowed unless ``request_origin`` is permitted."""
    if evaluate(request_origin, allow_list) is OriginDecision.DENY:
        raise OriginNotAllowed(request_origin)


def permit_headers(request_origin: Optional[str]) -> Dict[str, str]:
    # Credentialed responses must name the origin; "*" is rejected by browsers
    if not request_origin:
        return {}
    return {
        "Access-Control-Allow-Origin": request_origin,
        "Access-Control-Allow-Credentials": "true",
    }


def preflight_headers(request_origin: str, requested_headers: Optional[str]) -> Dict[str, str]:
    headers = permit_headers(request_origin)
    headers["Access-Control-Allow-Methods"] = ALLOW_METHODS
    if requested_headers:
        headers["Access-Control-Allow-Headers"] = requested_headers
    return headers
