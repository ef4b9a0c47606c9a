"""Shared utility functions."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any


def safe_call(
    fn: Callable[[], None],
    call_logger: logging.Logger,
    message: str,
    *message_args: Any,
) -> None:
    """Invoke *fn* and log any exception as a warning instead of raising.

    Used for audit sinks and metric registries, whose failures must never
    change the outcome of a secret resolution or token issuance.

    Args:
        fn: Zero-argument callable to invoke.
        call_logger: Logger instance for warning output.
        message: Log message template (``%s``-style).
        *message_args: Arguments interpolated into *message*.
    """
    try:
        fn()
    except Exception:
        call_logger.warning(message, *message_args, exc_info=True)


def mask(value: str | None) -> str:
    """Render a secret for display without revealing it."""
    if value is None:
        return "None"
    if not value:
        return "''"
    return f"***({len(value)} chars)"
