"""Resolve secret references inside configuration dictionaries.

After HOCON parsing, call :func:`resolve_config_secrets` to push every
string value through the secret manager. Each value is resolved with its
dotted key path as the logical name, so diagnostics and audit events say
which setting was involved::

    database {
      password = "kv://db-password?version=3"
      host = "postgres.internal"
      endpoint = "https://api.example.com"
    }

Only references whose scheme is a secret scheme are dispatched. Plain URLs
such as ``endpoint`` above are ordinary settings and are kept as-is.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from harness_credentials.core.config.base import SecretScheme
from harness_credentials.core.secrets.reference import parse_secret_reference

if TYPE_CHECKING:
    from harness_credentials.core.secrets.manager import SecretManager

logger = logging.getLogger(__name__)

SECRET_SCHEMES = frozenset(scheme.value for scheme in SecretScheme)
"""Schemes always treated as secret references, registered or not."""


async def resolve_config_secrets(
    config: dict[str, Any],
    manager: SecretManager,
    *,
    warn_on_plaintext: bool = False,
) -> dict[str, Any]:
    """Recursively resolve secret references in a config dictionary.

    Args:
        config: Configuration dictionary.
        manager: An initialized :class:`SecretManager`.
        warn_on_plaintext: Warn about literal values when plaintext
            fallback is disabled. Off by default since most settings in a
            config tree are not secrets.

    Returns:
        A new dictionary with references replaced by their values.

    Raises:
        SecretError: If any reference cannot be resolved under the
            manager's fallback policy.
    """
    schemes = SECRET_SCHEMES | frozenset(manager.registered_schemes)
    return await _resolve_dict(config, manager, "", warn_on_plaintext, schemes)


async def _resolve_value(
    value: Any,
    manager: SecretManager,
    path: str,
    warn: bool,
    schemes: frozenset[str],
) -> Any:
    if isinstance(value, str):
        reference = parse_secret_reference(value)
        if reference is not None and reference.scheme not in schemes:
            logger.debug("Keeping '%s' as-is; scheme '%s' is not a secret scheme", path, reference.scheme)
            return value
        return await manager.resolve(value, logical_name=path, warn_on_plaintext=warn)
    if isinstance(value, dict):
        return await _resolve_dict(value, manager, path, warn, schemes)
    if isinstance(value, list):
        return [await _resolve_value(item, manager, f"{path}[{i}]", warn, schemes) for i, item in enumerate(value)]
    return value


async def _resolve_dict(
    d: dict[str, Any],
    manager: SecretManager,
    prefix: str,
    warn: bool,
    schemes: frozenset[str],
) -> dict[str, Any]:
    resolved: dict[str, Any] = {}
    for key, val in d.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        resolved[key] = await _resolve_value(val, manager, path, warn, schemes)
    return resolved
