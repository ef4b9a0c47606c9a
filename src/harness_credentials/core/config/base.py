"""Base enums for configuration models."""

from enum import Enum


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class MetricsBackend(str, Enum):
    """Metrics collection backends."""

    MEMORY = "memory"
    PROMETHEUS = "prometheus"


class SecretScheme(str, Enum):
    """Reference schemes understood by the built-in providers."""

    ENV = "env"
    KV = "kv"
    KEYVAULT = "keyvault"
    ENC = "enc"
