"""Parse ``scheme://identifier?key=value`` secret references.

Parsing never raises: anything that is not a reference comes back as
``None`` and is treated by callers as a literal value.

Examples::

    env://DB_PASSWORD
    kv://db-password?version=3
    enc://aes256/QmFzZTY0Q2lwaGVy?iv=QmFzZTY0SVY%3D
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from urllib.parse import unquote, urlsplit

SCHEME_DELIMITER = "://"

_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_FORBIDDEN_CHARS = re.compile(r"[\s\x00-\x1f\x7f]")


@dataclass(frozen=True)
class SecretReference:
    """A parsed secret reference.

    Args:
        original: The trimmed input string; also the cache key.
        scheme: Lowercase provider scheme (``env``, ``kv``, ``enc``...).
        identifier: Authority and path joined by ``/`` with no leading or
            trailing slash. Percent-encoding is preserved.
        parameters: Decoded query parameters with lowercased keys.
    """

    original: str
    scheme: str
    identifier: str
    parameters: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}), hash=False)

    def parameter(self, name: str, default: str | None = None) -> str | None:
        """Look up a query parameter case-insensitively."""
        return self.parameters.get(name.lower(), default)

    @property
    def segments(self) -> list[str]:
        """Non-blank identifier segments, each percent-decoded."""
        return [unquote(part).strip() for part in self.identifier.split("/") if part.strip()]


def parse_secret_reference(raw: str | None) -> SecretReference | None:
    """Parse *raw* into a :class:`SecretReference`.

    Returns:
        The reference, or ``None`` when *raw* is blank, has no ``://``,
        has an invalid scheme, contains whitespace or control characters,
        or is otherwise not an absolute URI.
    """
    if raw is None or not raw.strip():
        return None

    trimmed = raw.strip()
    delimiter = trimmed.find(SCHEME_DELIMITER)
    if delimiter <= 0:
        return None

    scheme = trimmed[:delimiter]
    if not _SCHEME_PATTERN.match(scheme) or _FORBIDDEN_CHARS.search(trimmed):
        return None

    try:
        parts = urlsplit(trimmed)
    except ValueError:
        return None

    return SecretReference(
        original=trimmed,
        scheme=scheme.lower(),
        identifier=_build_identifier(parts.netloc, parts.path),
        parameters=MappingProxyType(_parse_parameters(parts.query)),
    )


def _build_identifier(authority: str, path: str) -> str:
    stripped = path.strip("/")
    if not authority:
        return stripped
    if not stripped:
        return authority
    return f"{authority}/{stripped}"


def _parse_parameters(query: str) -> dict[str, str]:
    params: dict[str, str] = {}
    for piece in query.split("&"):
        if not piece:
            continue
        key, sep, value = piece.partition("=")
        if not sep:
            continue
        params[unquote(key).lower()] = unquote(value)
    return params
