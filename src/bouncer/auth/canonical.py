"""Canonical string ("string to sign") construction.

The layout follows the S3 REST authentication scheme::

    VERB \\n
    Content-MD5 \\n
    Content-Type \\n
    Date \\n
    <custom header lines, each ending in \\n>
    <resource path>

Signer and verifier both go through :func:`build_canonical`, so the two
sides cannot drift apart.
"""

from __future__ import annotations

from enum import Enum

from bouncer.auth.headers import HeaderSet, encode_wire, extract_custom, normalize

DEFAULT_CUSTOM_PREFIX = "x-amz-"


class HttpVerb(str, Enum):
    """HTTP verbs accepted by the signing scheme."""

    GET = "GET"
    HEAD = "HEAD"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, value: "HttpVerb | str") -> "HttpVerb":
        """Coerce a verb name; raises ValueError for anything outside the scheme."""
        if isinstance(value, cls):
            return value
        return cls(str(value).upper())


CanonicalFields = tuple[str, str, str, str, str, str]


def canonical_fields(
    verb: HttpVerb | str,
    headers: HeaderSet,
    path: str,
    prefix: str = DEFAULT_CUSTOM_PREFIX,
) -> CanonicalFields:
    """Return the six positional fields of the canonical string."""
    normalized = normalize(headers)
    prefix = prefix.lower()

    # The vendor date header is signed in the custom block instead.
    if f"{prefix}date" in normalized:
        date = ""
    else:
        date = normalized.get("date") or ""

    return (
        HttpVerb.parse(verb).value,
        normalized.get("content-md5") or "",
        normalized.get("content-type") or "",
        date,
        extract_custom(normalized, prefix),
        path,
    )


def build_canonical(
    verb: HttpVerb | str,
    headers: HeaderSet,
    path: str,
    prefix: str = DEFAULT_CUSTOM_PREFIX,
) -> bytes:
    """Build the canonical byte string that gets signed."""
    method, content_md5, content_type, date, custom, resource = canonical_fields(
        verb, headers, path, prefix
    )
    return encode_wire(f"{method}\n{content_md5}\n{content_type}\n{date}\n{custom}{resource}")
