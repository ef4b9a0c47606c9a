"""Secret references, providers, and the secret manager."""

from harness_credentials.core.secrets.base import SecretProvider, SecretResolutionContext
from harness_credentials.core.secrets.exceptions import (
    ProviderSchemeMismatchError,
    SecretError,
    SecretFormatError,
    SecretManagerStateError,
    SecretResolutionError,
    UnregisteredSchemeError,
)
from harness_credentials.core.secrets.manager import SecretManager, SecretsCache
from harness_credentials.core.secrets.providers import (
    EncryptedSecretProvider,
    EnvSecretProvider,
    VaultSecretProvider,
)
from harness_credentials.core.secrets.reference import SecretReference, parse_secret_reference

__all__ = [
    "EncryptedSecretProvider",
    "EnvSecretProvider",
    "ProviderSchemeMismatchError",
    "SecretError",
    "SecretFormatError",
    "SecretManager",
    "SecretManagerStateError",
    "SecretProvider",
    "SecretReference",
    "SecretResolutionContext",
    "SecretResolutionError",
    "SecretsCache",
    "UnregisteredSchemeError",
    "VaultSecretProvider",
    "parse_secret_reference",
]
