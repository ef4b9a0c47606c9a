"""Logging, audit, and metrics configuration models."""

from dataclasses import dataclass

from harness_credentials.core.config.base import LogLevel, MetricsBackend


@dataclass
class LoggingConfig:
    """Configuration for logging behavior."""

    level: LogLevel = LogLevel.INFO
    """Logging level (default: INFO)"""

    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    """``logging`` format string"""


@dataclass
class AuditConfig:
    """Configuration for the credential audit trail."""

    enabled: bool = True
    """Emit audit events to the ``hc.audit`` logger (default: True)"""

    path: str | None = None
    """Also append events as JSON lines to this file (optional)"""


@dataclass
class MetricsConfig:
    """Configuration for secret resolution metrics."""

    enabled: bool = False
    """Record metrics (default: False)"""

    backend: MetricsBackend = MetricsBackend.MEMORY
    """Metrics backend to use (default: memory)"""
