"""Audit event types, sinks, and configuration filters."""

from harness_credentials.core.audit.filters import ConfigFilter
from harness_credentials.core.audit.sinks import (
    AuditSink,
    CompositeAuditSink,
    FileAuditSink,
    LoggingAuditSink,
)
from harness_credentials.core.audit.types import (
    AuditAction,
    AuditEvent,
    AuditStatus,
)

__all__ = [
    "AuditAction",
    "AuditEvent",
    "AuditSink",
    "AuditStatus",
    "CompositeAuditSink",
    "ConfigFilter",
    "FileAuditSink",
    "LoggingAuditSink",
]
