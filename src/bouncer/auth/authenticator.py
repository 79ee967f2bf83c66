"""Verification of signed requests against the admin credential."""

from __future__ import annotations

import hmac
from dataclasses import dataclass

from bouncer.auth.canonical import DEFAULT_CUSTOM_PREFIX, HttpVerb
from bouncer.auth.credentials import CredentialProvider
from bouncer.auth.headers import HeaderSet
from bouncer.auth.signer import DEFAULT_SCHEME_TAG, parse_auth_header, request_signature
from bouncer.common.errors import (
    AuthenticationError,
    CredentialLookupFailed,
    ErrorCode,
    KeyIdMismatch,
    SignatureMismatch,
)
from bouncer.common.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SignedRequest:
    """The parts of an inbound request that are covered by the signature."""

    verb: HttpVerb | str
    headers: HeaderSet
    path: str


@dataclass(frozen=True)
class Accepted:
    """Request signature matched the admin credential."""

    key_id: str


@dataclass(frozen=True)
class Rejected:
    """Request was not authenticated. The reason never says which check failed."""

    reason: str = ErrorCode.INVALID_AUTHENTICATION


AuthResult = Accepted | Rejected

REJECTED = Rejected()


def _same(presented: str, expected: str) -> bool:
    return hmac.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))


class Authenticator:
    """
    Verifies ``(key_id, signature)`` pairs presented with a request.

    Holds no per-request state; one instance can serve any number of
    concurrent callers. The credential is looked up on every call.
    """

    def __init__(
        self,
        credentials: CredentialProvider,
        custom_prefix: str = DEFAULT_CUSTOM_PREFIX,
    ) -> None:
        self._credentials = credentials
        self._custom_prefix = custom_prefix

    def _verify(
        self,
        request: SignedRequest,
        presented_key_id: str,
        presented_signature: str,
    ) -> str:
        try:
            verb = HttpVerb.parse(request.verb)
        except ValueError as exc:
            raise AuthenticationError(f"Unsupported verb: {request.verb}") from exc

        try:
            credential = self._credentials.get_admin_credential()
        except AuthenticationError:
            raise
        except Exception as exc:
            logger.warning("Admin credential lookup failed", exc_info=True)
            raise CredentialLookupFailed(str(exc)) from exc
        expected = request_signature(
            verb,
            request.headers,
            request.path,
            credential.secret,
            self._custom_prefix,
        )
        # Both checks always run.
        key_ok = _same(presented_key_id, credential.key_id)
        signature_ok = _same(presented_signature, expected)
        if not key_ok:
            raise KeyIdMismatch(presented_key_id)
        if not signature_ok:
            raise SignatureMismatch(presented_key_id)
        return credential.key_id

    def authenticate(
        self,
        request: SignedRequest,
        presented_key_id: str,
        presented_signature: str,
    ) -> AuthResult:
        """
        Check a presented key id and signature against the admin credential.

        Args:
            request: Verb, headers and path of the inbound request
            presented_key_id: Key id from the Authorization header
            presented_signature: Base64 signature from the Authorization header

        Returns:
            Accepted with the key id, or the uniform Rejected result
        """
        try:
            key_id = self._verify(request, presented_key_id, presented_signature)
        except AuthenticationError as exc:
            logger.info(
                "Signed request rejected",
                cause=exc.code,
                key_id=presented_key_id,
                path=request.path,
            )
            return REJECTED

        logger.debug("Signed request accepted", key_id=key_id, path=request.path)
        return Accepted(key_id=key_id)

    def authenticate_header(
        self,
        request: SignedRequest,
        authorization: str,
        scheme_tag: str = DEFAULT_SCHEME_TAG,
    ) -> AuthResult:
        """Parse an ``Authorization`` header value and authenticate it."""
        try:
            key_id, signature = parse_auth_header(authorization, scheme_tag)
        except AuthenticationError as exc:
            logger.info("Signed request rejected", cause=exc.code, path=request.path)
            return REJECTED
        return self.authenticate(request, key_id, signature)
