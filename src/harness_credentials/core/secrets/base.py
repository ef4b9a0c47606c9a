"""Secret provider contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from harness_credentials.core.config.secrets import SecretManagerOptions
from harness_credentials.core.secrets.exceptions import ProviderSchemeMismatchError
from harness_credentials.core.secrets.reference import SecretReference


@dataclass(frozen=True)
class SecretResolutionContext:
    """Per-call context handed to providers.

    Args:
        options: The manager's configuration.
        logical_name: Name of the setting being resolved, for diagnostics.
    """

    options: SecretManagerOptions
    logical_name: str | None = None

    def describe(self, reference: SecretReference) -> str:
        """Name to use in error messages: the setting if known, else the reference."""
        return self.logical_name or reference.original


class SecretProvider(ABC):
    """Base class for secret providers.

    A provider resolves one or more reference schemes to a value. Providers
    must be read-only: the manager may call them more than once for the
    same reference when resolutions race.
    """

    @property
    @abstractmethod
    def schemes(self) -> tuple[str, ...]:
        """Schemes this provider handles (e.g. ``("kv", "keyvault")``)."""
        ...

    @abstractmethod
    async def resolve(self, reference: SecretReference, context: SecretResolutionContext) -> str | None:
        """Resolve a single reference.

        Returns:
            The secret value, or ``None`` when the source has no value.

        Raises:
            SecretFormatError: The reference is malformed.
            SecretResolutionError: The value could not be fetched.
        """
        ...

    async def aclose(self) -> None:  # noqa: B027
        """Release network clients or other resources."""

    def _ensure_scheme(self, reference: SecretReference) -> None:
        if reference.scheme not in self.schemes:
            raise ProviderSchemeMismatchError(type(self).__name__, reference.scheme)
