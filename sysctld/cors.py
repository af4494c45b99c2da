"""Cross-origin headers for browser clients."""

from __future__ import annotations

from typing import Awaitable, Callable, Dict, Iterable, Optional

from fastapi import Request
from fastapi.responses import Response

CallNext = Callable[[Request], Awaitable[Response]]

ALLOW_HEADERS = "content-type"
ALLOW_METHOD = "GET"


def cors_headers(origin: str) -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Access-Control-Allow-Method": ALLOW_METHOD,
    }


def cors_wrapper(allowed_origins: Optional[Iterable[str]] = None) -> Callable[[Request, CallNext], Awaitable[Response]]:
    """
    Build an HTTP middleware that annotates responses with CORS headers.

    The request's ``Origin`` is echoed back verbatim. With an empty
    ``allowed_origins`` every origin is echoed; otherwise only listed origins
    are. The wrapped handler always runs.

    Usage:
        app.middleware("http")(cors_wrapper())
    """
    allowed = frozenset(allowed_origins or ())

    async def add_cors_headers(request: Request, call_next: CallNext) -> Response:
        origin = request.headers.get("origin", "")
        response = await call_next(request)
        if origin and (not allowed or origin in allowed):
            response.headers.update(cors_headers(origin))
        return response

    return add_cors_headers
