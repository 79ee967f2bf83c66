"""Signed request authentication middleware."""

from __future__ import annotations

from dataclasses import dataclass

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from bouncer.auth.authenticator import Accepted, Authenticator, SignedRequest
from bouncer.auth.credentials import SettingsCredentialProvider
from bouncer.common.errors import ErrorCode, error_response
from bouncer.common.http import raw_request_headers, raw_request_path, set_subject
from bouncer.common.logging import get_logger
from bouncer.common.settings import Settings

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthContext:
    """Authenticated request context."""

    key_id: str
    method: str = "signed"


class SignedRequestAuthMiddleware(BaseHTTPMiddleware):
    """Authenticates requests carrying ``Authorization: <tag> <key_id>:<signature>``."""

    def __init__(
        self,
        app: ASGIApp,
        settings: Settings,
        authenticator: Authenticator | None = None,
    ) -> None:
        super().__init__(app)
        self._settings = settings
        self._exempt_paths = set(settings.auth_exempt_paths)
        self._authenticator = authenticator or Authenticator(
            SettingsCredentialProvider(settings),
            custom_prefix=settings.custom_header_prefix,
        )

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self._settings.auth_mode != "signed":
            return await call_next(request)

        if request.url.path in self._exempt_paths:
            return await call_next(request)

        authorization = request.headers.get("Authorization")
        if not authorization:
            return error_response(
                ErrorCode.MISSING_AUTHENTICATION,
                "Missing Authorization header",
                status_code=401,
            )

        signed = SignedRequest(
            verb=request.method,
            headers=raw_request_headers(request),
            path=raw_request_path(request),
        )
        result = self._authenticator.authenticate_header(
            signed,
            authorization,
            scheme_tag=self._settings.auth_scheme_tag,
        )
        if not isinstance(result, Accepted):
            return error_response(result.reason, "Invalid authentication", status_code=403)

        request.state.auth = AuthContext(key_id=result.key_id)
        set_subject(result.key_id)
        return await call_next(request)
