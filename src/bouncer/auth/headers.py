"""Header normalization for request signing.

Headers arrive from very different places (aiohttp multi-dicts, Starlette
``Headers``, plain dicts, lists of tuples) and must collapse into one
deterministic form before they can be signed.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Union

Header = tuple[str, str]
HeaderSet = Union[Mapping[Any, Any], Iterable[tuple[Any, Any]]]

# Wire bytes map to text and back without loss; invalid UTF-8 survives as
# lone surrogates.
WIRE_ENCODING = "utf-8"
WIRE_ERRORS = "surrogateescape"


def decode_wire(value: bytes) -> str:
    """Decode header or path bytes as received on the wire."""
    return value.decode(WIRE_ENCODING, WIRE_ERRORS)


def encode_wire(value: str) -> bytes:
    """Inverse of :func:`decode_wire`."""
    return value.encode(WIRE_ENCODING, WIRE_ERRORS)


def _to_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return decode_wire(bytes(value))
    return str(value)


class NormalizedHeaders:
    """Deduplicated ``(name, value)`` pairs with lowercase names, sorted by name then value."""

    __slots__ = ("_pairs",)

    def __init__(self, pairs: Iterable[Header] = ()) -> None:
        self._pairs: tuple[Header, ...] = tuple(sorted(set(pairs)))

    def get(self, name: str) -> str | None:
        """First value for ``name`` in sorted order, or None."""
        name = name.lower()
        for key, value in self._pairs:
            if key == name:
                return value
        return None

    def get_all(self, name: str) -> list[str]:
        """Every value for ``name`` in sorted order."""
        name = name.lower()
        return [value for key, value in self._pairs if key == name]

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return self.get(name) is not None

    def __iter__(self) -> Iterator[Header]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NormalizedHeaders):
            return NotImplemented
        return self._pairs == other._pairs

    def __hash__(self) -> int:
        return hash(self._pairs)

    def __repr__(self) -> str:
        return f"NormalizedHeaders({list(self._pairs)!r})"


def normalize(raw_headers: HeaderSet) -> NormalizedHeaders:
    """Lowercase header names and collapse the set into sorted unique pairs."""
    if isinstance(raw_headers, NormalizedHeaders):
        return raw_headers
    if isinstance(raw_headers, Mapping):
        items: Iterable[tuple[Any, Any]] = raw_headers.items()
    else:
        items = raw_headers
    return NormalizedHeaders((_to_text(name).lower(), _to_text(value)) for name, value in items)


def extract_custom(normalized: NormalizedHeaders, prefix: str) -> str:
    """Render vendor-prefixed headers as ``name:value`` lines in sorted order."""
    prefix = prefix.lower()
    return "".join(f"{name}:{value}\n" for name, value in normalized if name.startswith(prefix))
