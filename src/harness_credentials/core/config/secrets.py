"""Secret manager configuration models."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT_SECONDS = 30

PROPERTY_PREFIX = "SecretManagement__"

_TRUE_VALUES = {"true", "1", "yes", "on"}


def parse_absolute_http_uri(text: str | None) -> str | None:
    """Return *text* stripped when it is an absolute http(s) URI, else ``None``."""
    if text is None or not text.strip():
        return None
    candidate = text.strip()
    try:
        parts = urlsplit(candidate)
        # raises for non-numeric or out-of-range ports
        parts.port
    except ValueError:
        return None
    if parts.scheme.lower() not in ("http", "https") or not parts.hostname:
        return None
    return candidate


def resolve_environment_value(value: str | None) -> str | None:
    """Resolve ``env://NAME`` or ``env:NAME`` indirections.

    Anything else is returned trimmed. Blank input and unset variables
    both give ``None``.
    """
    if value is None or not value.strip():
        return None

    trimmed = value.strip()
    for prefix in ("env://", "env:"):
        if trimmed.lower().startswith(prefix):
            return os.environ.get(trimmed[len(prefix):]) or None
    return trimmed


@dataclass(frozen=True)
class SecretManagerOptions:
    """Process-wide configuration for :class:`SecretManager`.

    Immutable once built; a new manager lifetime is needed to change it.
    """

    vault_uri: str | None = None
    """Default key vault base address (e.g. ``https://myvault.vault.azure.net/``)"""

    managed_identity_client_id: str | None = None
    """Managed identity client id used when acquiring vault tokens (optional)"""

    tenant_id: str | None = None
    """Tenant hint for developer credentials (optional)"""

    allow_plaintext_fallback: bool = False
    """Permit literal values and degrade failed lookups to the literal (default: False)"""

    encryption_key: str | None = None
    """Base64 AES-256 key, or an ``env://`` indirection to one (optional)"""

    secret_fetch_timeout_seconds: int = DEFAULT_FETCH_TIMEOUT_SECONDS
    """Timeout for vault token acquisition and secret fetches (default: 30)"""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.secret_fetch_timeout_seconds <= 0:
            raise ValueError("secret_fetch_timeout_seconds must be positive")

        if self.vault_uri is not None and parse_absolute_http_uri(self.vault_uri) is None:
            raise ValueError(f"vault_uri must be an absolute http(s) URI, got '{self.vault_uri}'")

    def __repr__(self) -> str:
        return (
            f"SecretManagerOptions("
            f"vault_uri={self.vault_uri!r}, "
            f"managed_identity_client_id={self.managed_identity_client_id!r}, "
            f"tenant_id={self.tenant_id!r}, "
            f"allow_plaintext_fallback={self.allow_plaintext_fallback!r}, "
            f"encryption_key={'***' if self.encryption_key else None}, "
            f"secret_fetch_timeout_seconds={self.secret_fetch_timeout_seconds!r})"
        )

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> "SecretManagerOptions":
        """Build options from flat test-runner properties.

        Reads ``SecretManagement__KeyVaultUri``,
        ``SecretManagement__AllowPlaintextFallback``,
        ``SecretManagement__ConfigurationEncryptionKey``,
        ``SecretManagement__ManagedIdentityClientId``,
        ``SecretManagement__TenantId`` and
        ``SecretManagement__SecretFetchTimeoutSeconds``. Unusable values
        fall back to defaults rather than failing.
        """

        def prop(name: str) -> str | None:
            raw = properties.get(PROPERTY_PREFIX + name)
            if raw is None:
                return None
            text = str(raw).strip()
            return text or None

        vault_text = prop("KeyVaultUri")
        vault_uri = parse_absolute_http_uri(vault_text)
        if vault_text and vault_uri is None:
            logger.warning("Ignoring invalid key vault URI '%s'", vault_text)

        fallback_text = prop("AllowPlaintextFallback")
        allow_fallback = fallback_text is not None and fallback_text.lower() in _TRUE_VALUES

        timeout = DEFAULT_FETCH_TIMEOUT_SECONDS
        timeout_text = prop("SecretFetchTimeoutSeconds")
        if timeout_text is not None:
            try:
                parsed = int(timeout_text)
            except ValueError:
                parsed = 0
            if parsed > 0:
                timeout = parsed

        return cls(
            vault_uri=vault_uri,
            managed_identity_client_id=prop("ManagedIdentityClientId"),
            tenant_id=prop("TenantId"),
            allow_plaintext_fallback=allow_fallback,
            encryption_key=resolve_environment_value(prop("ConfigurationEncryptionKey")),
            secret_fetch_timeout_seconds=timeout,
        )
