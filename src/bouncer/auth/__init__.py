"""Signed request authentication."""

from bouncer.auth.authenticator import (
    Accepted,
    Authenticator,
    AuthResult,
    Rejected,
    SignedRequest,
)
from bouncer.auth.canonical import (
    DEFAULT_CUSTOM_PREFIX,
    HttpVerb,
    build_canonical,
    canonical_fields,
)
from bouncer.auth.credentials import (
    Credential,
    CredentialProvider,
    SettingsCredentialProvider,
    StaticCredentialProvider,
)
from bouncer.auth.headers import NormalizedHeaders, extract_custom, normalize
from bouncer.auth.signer import (
    DEFAULT_SCHEME_TAG,
    build_auth_header,
    parse_auth_header,
    request_signature,
    sign,
)

__all__ = [
    "Accepted",
    "AuthResult",
    "Authenticator",
    "Credential",
    "CredentialProvider",
    "DEFAULT_CUSTOM_PREFIX",
    "DEFAULT_SCHEME_TAG",
    "HttpVerb",
    "NormalizedHeaders",
    "Rejected",
    "SettingsCredentialProvider",
    "SignedRequest",
    "StaticCredentialProvider",
    "build_auth_header",
    "build_canonical",
    "canonical_fields",
    "extract_custom",
    "normalize",
    "parse_auth_header",
    "request_signature",
    "sign",
]
