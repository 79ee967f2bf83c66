"""Shared error types, codes and response helpers."""

from __future__ import annotations

from typing import Any

from starlette.responses import JSONResponse


class ErrorCode:
    INVALID_AUTHENTICATION = "invalid_authentication"
    MISSING_AUTHENTICATION = "missing_authentication"


class AuthenticationError(Exception):
    """Internal reason a signed request was not accepted.

    Subclasses exist so the cause can be logged; callers only ever see
    ``ErrorCode.INVALID_AUTHENTICATION``.
    """

    code = "authentication_error"


class CredentialLookupFailed(AuthenticationError):
    """The admin credential could not be resolved."""

    code = "credential_lookup_failed"


class KeyIdMismatch(AuthenticationError):
    """Presented key id is not the admin key id."""

    code = "key_id_mismatch"


class SignatureMismatch(AuthenticationError):
    """Presented signature differs from the computed one."""

    code = "signature_mismatch"


class MalformedAuthorization(AuthenticationError, ValueError):
    """Authorization header does not follow ``<tag> <key_id>:<signature>``."""

    code = "malformed_authorization"


def error_response(
    code: str,
    message: str,
    status_code: int,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    payload = {
        "error": {
            "code": code,
            "message": message,
        }
    }
    if details:
        payload["error"]["details"] = details
    return JSONResponse(payload, status_code=status_code)
