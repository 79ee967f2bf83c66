"""HMAC-SHA1 request signing and the Authorization header wire format."""

from __future__ import annotations

import base64
import hashlib
import hmac

from bouncer.auth.canonical import DEFAULT_CUSTOM_PREFIX, HttpVerb, build_canonical
from bouncer.auth.credentials import Credential
from bouncer.auth.headers import HeaderSet
from bouncer.common.errors import MalformedAuthorization

DEFAULT_SCHEME_TAG = "MOSS"


def sign(canonical: bytes, secret: str) -> str:
    """Create a base64-encoded HMAC-SHA1 signature."""
    digest = hmac.new(secret.encode("utf-8"), canonical, hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def request_signature(
    verb: HttpVerb | str,
    headers: HeaderSet,
    path: str,
    secret: str,
    prefix: str = DEFAULT_CUSTOM_PREFIX,
) -> str:
    """Sign the canonical form of a request."""
    return sign(build_canonical(verb, headers, path, prefix), secret)


def build_auth_header(
    verb: HttpVerb | str,
    headers: HeaderSet,
    path: str,
    credential: Credential,
    scheme_tag: str = DEFAULT_SCHEME_TAG,
    prefix: str = DEFAULT_CUSTOM_PREFIX,
) -> str:
    """Build the ``Authorization`` header value for an outbound request."""
    signature = request_signature(verb, headers, path, credential.secret, prefix)
    return f"{scheme_tag} {credential.key_id}:{signature}"


def parse_auth_header(value: str, scheme_tag: str = DEFAULT_SCHEME_TAG) -> tuple[str, str]:
    """Split an ``Authorization`` header value into ``(key_id, signature)``."""
    tag, _, token = value.strip().partition(" ")
    if tag != scheme_tag:
        raise MalformedAuthorization(f"Unexpected auth scheme: {tag!r}")

    key_id, sep, signature = token.strip().rpartition(":")
    if not sep or not key_id or not signature:
        raise MalformedAuthorization("Expected <key_id>:<signature>")
    return key_id, signature
