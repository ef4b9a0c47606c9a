"""Audit event types and models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditAction(str, Enum):
    """Auditable credential operations."""

    SECRET_RESOLVED = "secret_resolved"
    SECRET_FALLBACK = "secret_fallback"
    SECRET_FAILED = "secret_failed"
    TOKEN_ISSUED = "token_issued"
    CONFIG_LOADED = "config_loaded"


class AuditStatus(str, Enum):
    """Audit event status."""

    SUCCESS = "success"
    FAILURE = "failure"
    WARNING = "warning"


@dataclass
class AuditEvent:
    """A single audit event.

    Secret values never appear in an event; only where a value came from.

    Args:
        action: The action that occurred.
        actor: Who performed the action (e.g. ``"secret_manager"``).
        resource: What was acted upon (e.g. ``"kv:DbPassword"``).
        status: Outcome of the action.
        timestamp: When the event occurred.
        metadata: Additional key-value data.
    """

    action: AuditAction
    actor: str
    resource: str
    status: AuditStatus
    timestamp: datetime = field(default_factory=_utcnow)
    metadata: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "action": self.action.value,
            "actor": self.actor,
            "resource": self.resource,
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }
