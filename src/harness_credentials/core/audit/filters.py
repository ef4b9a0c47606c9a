"""Configuration filter for redacting sensitive values."""

from __future__ import annotations

from typing import Any

SENSITIVE_PATTERNS: list[str] = [
    "password",
    "secret",
    "token",
    "key",
    "credential",
]

REFERENCE_SCHEMES: tuple[str, ...] = ("env://", "kv://", "keyvault://", "enc://")


class ConfigFilter:
    """Filter sensitive values from configuration dictionaries.

    Keys are matched by substring against :data:`SENSITIVE_PATTERNS`.
    Values that are still secret references are left visible, since a
    reference says where a secret lives rather than what it is.
    """

    @classmethod
    def scrub(
        cls,
        data: dict[str, Any],
        replacement: str = "***REDACTED***",
    ) -> dict[str, Any]:
        """Recursively scrub sensitive values from *data*."""
        result: dict[str, Any] = {}
        for k, v in data.items():
            if isinstance(v, dict):
                result[k] = cls.scrub(v, replacement)
            elif any(p in k.lower() for p in SENSITIVE_PATTERNS):
                result[k] = v if cls._is_reference(v) or v is None else replacement
            elif isinstance(v, list):
                result[k] = [cls.scrub(item, replacement) if isinstance(item, dict) else item for item in v]
            else:
                result[k] = v
        return result

    @staticmethod
    def _is_reference(value: Any) -> bool:
        return isinstance(value, str) and value.strip().lower().startswith(REFERENCE_SCHEMES)
