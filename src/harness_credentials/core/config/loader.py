"""HOCON configuration loader using dataconf.

Values are loaded verbatim: secret references stay references until a
:class:`~harness_credentials.core.secrets.manager.SecretManager` resolves
them.
"""

from typing import TypeVar, cast

import dataconf

T = TypeVar("T")


def load_from_file(path: str, config_class: type[T]) -> T:
    """Load configuration from a HOCON file.

    Example:
        >>> config = load_from_file("harness.conf", HarnessConfig)
    """
    return cast(T, dataconf.file(path, config_class))


def load_from_string(hocon_str: str, config_class: type[T]) -> T:
    """Load configuration from a HOCON string.

    Example:
        >>> hocon = '''
        ... {
        ...   secrets { allow_plaintext_fallback: true }
        ...   credentials { password: "env://TEST_PASSWORD" }
        ... }
        ... '''
        >>> config = load_from_string(hocon, HarnessConfig)
    """
    return cast(T, dataconf.string(hocon_str, config_class))


def load_from_env(prefix: str, config_class: type[T]) -> T:
    """Load configuration from environment variables.

    Example:
        >>> # With HC_SECRETS_VAULT_URI=https://myvault.vault.azure.net/
        >>> config = load_from_env("HC_", HarnessConfig)

    Note:
        Variables use the format ``PREFIX_FIELD_NAME=value``.
    """
    return cast(T, dataconf.env(prefix, config_class))
