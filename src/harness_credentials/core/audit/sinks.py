"""Audit event sinks for credential access trails."""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Any

from harness_credentials.core.audit.types import AuditEvent, AuditStatus

logger = logging.getLogger(__name__)


class AuditSink(ABC):
    """Base class for audit event sinks."""

    @abstractmethod
    def emit(self, event: AuditEvent) -> None:
        """Emit a single audit event."""
        ...

    def close(self) -> None:  # noqa: B027
        """Close the sink and release resources."""


class LoggingAuditSink(AuditSink):
    """Emit audit events to Python logging.

    Args:
        logger_name: Logger name to use. Defaults to ``"hc.audit"``.
    """

    def __init__(self, logger_name: str = "hc.audit") -> None:
        self._logger = logging.getLogger(logger_name)

    def emit(self, event: AuditEvent) -> None:
        level = logging.INFO if event.status == AuditStatus.SUCCESS else logging.WARNING
        self._logger.log(
            level,
            "[AUDIT] %s | %s | %s | %s",
            event.action.value,
            event.actor,
            event.resource,
            event.status.value,
            extra={"audit_event": event.to_dict()},
        )


class FileAuditSink(AuditSink):
    """Append audit events to a JSON-lines file.

    The file is opened lazily on the first ``emit()`` call. Writes are
    serialized so concurrent resolutions never interleave lines.

    Args:
        path: Path to the audit log file.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._file: IO[Any] | None = None
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def emit(self, event: AuditEvent) -> None:
        line = json.dumps(event.to_dict()) + "\n"
        with self._lock:
            if self._file is None:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                self._file = open(self._path, "a", encoding="utf-8")  # noqa: SIM115
            self._file.write(line)
            self._file.flush()

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None


class CompositeAuditSink(AuditSink):
    """Fan out audit events to multiple sinks.

    Exceptions raised by individual sinks are caught and logged so
    that one failing sink does not prevent others from receiving events.

    Args:
        sinks: One or more audit sinks to fan out to.
    """

    def __init__(self, *sinks: AuditSink) -> None:
        self._sinks: tuple[AuditSink, ...] = sinks

    @property
    def sinks(self) -> tuple[AuditSink, ...]:
        return self._sinks

    def emit(self, event: AuditEvent) -> None:
        for sink in self._sinks:
            try:
                sink.emit(event)
            except Exception:
                logger.warning(
                    "Audit sink %s failed to emit",
                    type(sink).__name__,
                    exc_info=True,
                )

    def close(self) -> None:
        for sink in self._sinks:
            try:
                sink.close()
            except Exception:
                logger.warning(
                    "Audit sink %s failed to close",
                    type(sink).__name__,
                    exc_info=True,
                )
