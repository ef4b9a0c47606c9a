"""Harness session and command-line entry point."""

from harness_credentials.runner.session import (
    DEFAULT_ROLE,
    HarnessConfigurationError,
    HarnessSession,
    configure_logging,
)

__all__ = [
    "DEFAULT_ROLE",
    "HarnessConfigurationError",
    "HarnessSession",
    "configure_logging",
]
