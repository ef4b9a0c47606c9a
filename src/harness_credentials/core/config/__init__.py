"""Configuration models for harness-credentials.

Dataclass-based models loaded from HOCON with dataconf.
"""

from harness_credentials.core.config.base import LogLevel, MetricsBackend, SecretScheme
from harness_credentials.core.config.harness import (
    CredentialsConfig,
    HarnessConfig,
    LocalJwtSettings,
)
from harness_credentials.core.config.loader import load_from_env, load_from_file, load_from_string
from harness_credentials.core.config.observability import AuditConfig, LoggingConfig, MetricsConfig
from harness_credentials.core.config.secret_resolver import resolve_config_secrets
from harness_credentials.core.config.secrets import (
    SecretManagerOptions,
    parse_absolute_http_uri,
    resolve_environment_value,
)

__all__ = [
    "AuditConfig",
    "CredentialsConfig",
    "HarnessConfig",
    "LocalJwtSettings",
    "LogLevel",
    "LoggingConfig",
    "MetricsBackend",
    "MetricsConfig",
    "SecretManagerOptions",
    "SecretScheme",
    "load_from_env",
    "load_from_file",
    "load_from_string",
    "parse_absolute_http_uri",
    "resolve_config_secrets",
    "resolve_environment_value",
]
