"""Tests for audit event types."""

from __future__ import annotations

import json
from datetime import datetime, timezone

from harness_credentials.core.audit.types import (
    AuditAction,
    AuditEvent,
    AuditStatus,
)


class TestEnums:
    def test_action_values(self) -> None:
        assert AuditAction.SECRET_RESOLVED == "secret_resolved"
        assert AuditAction.SECRET_FALLBACK == "secret_fallback"
        assert AuditAction.TOKEN_ISSUED == "token_issued"

    def test_status_is_str(self) -> None:
        assert isinstance(AuditStatus.WARNING, str)


class TestAuditEvent:
    def test_default_timestamp_is_utc(self) -> None:
        event = AuditEvent(
            action=AuditAction.TOKEN_ISSUED,
            actor="harness_session",
            resource="jwt:api",
            status=AuditStatus.SUCCESS,
        )
        assert event.timestamp.tzinfo is not None
        assert event.metadata == {}

    def test_to_dict_is_json_serializable(self) -> None:
        event = AuditEvent(
            action=AuditAction.SECRET_FAILED,
            actor="secret_manager",
            resource="kv:db",
            status=AuditStatus.FAILURE,
            timestamp=datetime(2026, 1, 1, tzinfo=timezone.utc),
            metadata={"error": "404"},
        )
        data = json.loads(json.dumps(event.to_dict()))
        assert data == {
            "action": "secret_failed",
            "actor": "secret_manager",
            "resource": "kv:db",
            "status": "failure",
            "timestamp": "2026-01-01T00:00:00+00:00",
            "metadata": {"error": "404"},
        }
