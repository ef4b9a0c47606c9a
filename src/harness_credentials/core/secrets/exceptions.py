"""Secret resolution exceptions.

:class:`SecretResolutionError` is the only recoverable failure: with
plaintext fallback enabled the manager degrades it to the literal input.
Every other :class:`SecretError` is fatal regardless of policy.
"""


class SecretError(Exception):
    """Base exception for secret management errors."""


class SecretManagerStateError(SecretError):
    """The manager was used before ``initialize()`` or after ``shutdown()``."""


class UnregisteredSchemeError(SecretError):
    """No provider is registered for a reference's scheme."""

    def __init__(self, scheme: str, logical_name: str | None = None) -> None:
        self.scheme = scheme
        self.logical_name = logical_name
        target = f" (setting '{logical_name}')" if logical_name else ""
        super().__init__(f"No secret provider registered for scheme '{scheme}'{target}")


class SecretFormatError(SecretError):
    """A reference is malformed: bad base64, wrong segment count, bad vault URI."""

    def __init__(self, reference: str, reason: str) -> None:
        self.reference = reference
        self.reason = reason
        super().__init__(f"Malformed secret reference '{reference}': {reason}")


class ProviderSchemeMismatchError(SecretError):
    """A provider received a reference for a scheme it does not handle."""

    def __init__(self, provider: str, scheme: str) -> None:
        self.provider = provider
        self.scheme = scheme
        super().__init__(f"{provider} cannot handle '{scheme}://' references")


class SecretResolutionError(SecretError):
    """A well-formed reference could not be resolved.

    Args:
        reference: The reference string or logical name that failed.
        reason: Human-readable failure description.
    """

    def __init__(self, reference: str, reason: str) -> None:
        self.reference = reference
        self.reason = reason
        super().__init__(f"Failed to resolve '{reference}': {reason}")
