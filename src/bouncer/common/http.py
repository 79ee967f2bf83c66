"""Request context utilities and middleware."""

from __future__ import annotations

import uuid

import structlog

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from bouncer.auth.headers import decode_wire


def set_request_id(value: str | None) -> None:
    """Bind the request id into the logging context."""
    if value is not None:
        structlog.contextvars.bind_contextvars(request_id=value)


def set_subject(value: str | None) -> None:
    """Bind the authenticated key id into the logging context."""
    if value is not None:
        structlog.contextvars.bind_contextvars(subject=value)


def raw_request_path(request: Request) -> str:
    """Path as sent on the wire, still percent-encoded, plus any query string."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        path = decode_wire(raw_path.split(b"?", 1)[0])
    else:
        path = request.url.path
    query = request.scope.get("query_string", b"")
    if query:
        path = f"{path}?{decode_wire(query)}"
    return path


def raw_request_headers(request: Request) -> list[tuple[str, str]]:
    """Header pairs decoded from the ASGI scope bytes."""
    return [(decode_wire(name), decode_wire(value)) for name, value in request.scope["headers"]]


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Attach a request id to each request/response and context."""

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID") -> None:
        super().__init__(app)
        self._header_name = header_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(self._header_name) or uuid.uuid4().hex
        request.state.request_id = request_id
        set_request_id(request_id)

        try:
            response = await call_next(request)
            response.headers.setdefault(self._header_name, request_id)
            return response
        finally:
            structlog.contextvars.clear_contextvars()
