"""Admin credential lookup."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from bouncer.common.errors import CredentialLookupFailed
from bouncer.common.settings import Settings


@dataclass(frozen=True)
class Credential:
    """Key id and shared secret pair."""

    key_id: str
    secret: str

    def __repr__(self) -> str:
        return f"Credential(key_id={self.key_id!r}, secret='***')"


class CredentialProvider(Protocol):
    """Resolves the admin credential the verifier trusts."""

    def get_admin_credential(self) -> Credential:
        """Return the admin credential or raise CredentialLookupFailed."""
        ...


class StaticCredentialProvider:
    """Provider holding a fixed credential (or none at all)."""

    def __init__(self, credential: Credential | None) -> None:
        self._credential = credential

    def get_admin_credential(self) -> Credential:
        if self._credential is None:
            raise CredentialLookupFailed("No admin credential configured")
        return self._credential


class SettingsCredentialProvider:
    """Provider reading the admin key id and secret from settings on every call."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def get_admin_credential(self) -> Credential:
        key_id = self._settings.admin_key_id
        secret = self._settings.admin_secret
        if not key_id or not secret:
            raise CredentialLookupFailed("Admin key id or secret not configured")
        return Credential(key_id=key_id, secret=secret)
