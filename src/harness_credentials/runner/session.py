"""Harness session: resolve credentials at start-up and issue local tokens."""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from harness_credentials.core.audit.filters import ConfigFilter
from harness_credentials.core.audit.sinks import AuditSink, CompositeAuditSink, FileAuditSink, LoggingAuditSink
from harness_credentials.core.audit.types import AuditAction, AuditEvent, AuditStatus
from harness_credentials.core.config.base import LogLevel, MetricsBackend
from harness_credentials.core.config.harness import CredentialsConfig, HarnessConfig
from harness_credentials.core.config.loader import load_from_file, load_from_string
from harness_credentials.core.config.observability import LoggingConfig
from harness_credentials.core.jwt.factory import create_token
from harness_credentials.core.jwt.options import LocalJwtOptions
from harness_credentials.core.metrics.exporters import PrometheusRegistry
from harness_credentials.core.metrics.registry import InMemoryRegistry, MeterRegistry
from harness_credentials.core.secrets.manager import SecretManager
from harness_credentials.core.utils import safe_call

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "DefaultRole"

PACKAGE_LOGGER = "harness_credentials"


class HarnessConfigurationError(Exception):
    """The harness configuration is inconsistent after secret resolution."""


def configure_logging(settings: LoggingConfig) -> None:
    """Apply *settings* to the ``harness_credentials`` loggers.

    A root handler using ``settings.format`` is installed only when nothing
    else has configured logging yet.
    """
    if not logging.getLogger().handlers:
        logging.basicConfig(format=settings.format)
    logging.getLogger(PACKAGE_LOGGER).setLevel(LogLevel(settings.level).value)


class HarnessSession:
    """Owns one secret manager lifetime for a test run.

    The session wires audit sinks and metrics from the configuration,
    initializes the :class:`SecretManager`, and resolves every credential
    once. Resolved values are held in memory only.

    Args:
        config: Harness configuration with unresolved references.
        manager: Pre-built manager (default: one is created on ``start()``).
        metrics: Metrics registry overriding ``config.metrics``.
        audit_sink: Audit sink overriding ``config.audit``.
        apply_logging_config: Apply ``config.logging`` on ``start()``
            (default: True).
    """

    def __init__(
        self,
        config: HarnessConfig,
        *,
        manager: SecretManager | None = None,
        metrics: MeterRegistry | None = None,
        audit_sink: AuditSink | None = None,
        apply_logging_config: bool = True,
    ) -> None:
        self._config = config
        self._apply_logging_config = apply_logging_config
        self._metrics = metrics
        self._audit_sink = audit_sink
        self._manager = manager
        self._credentials: CredentialsConfig | None = None
        self._private_key: str | None = None
        self._started = False

    @classmethod
    def from_file(cls, path: str | Path, **kwargs: Any) -> HarnessSession:
        """Create a session from a HOCON configuration file."""
        return cls(load_from_file(str(path), HarnessConfig), **kwargs)

    @classmethod
    def from_string(cls, hocon_str: str, **kwargs: Any) -> HarnessSession:
        """Create a session from a HOCON string."""
        return cls(load_from_string(hocon_str, HarnessConfig), **kwargs)

    @property
    def config(self) -> HarnessConfig:
        return self._config

    @property
    def manager(self) -> SecretManager:
        if self._manager is None:
            raise HarnessConfigurationError("Session has not been started")
        return self._manager

    @property
    def metrics(self) -> MeterRegistry | None:
        return self._metrics

    @property
    def credentials(self) -> CredentialsConfig:
        """Credentials with every reference resolved."""
        if self._credentials is None:
            raise HarnessConfigurationError("Session has not been started")
        return self._credentials

    async def start(self) -> None:
        """Initialize the manager and resolve credentials. Idempotent.

        Raises:
            SecretError: If a credential reference cannot be resolved.
            HarnessConfigurationError: If local JWT issuance is enabled but
                no private key is available.
        """
        if self._started:
            return

        if self._apply_logging_config:
            configure_logging(self._config.logging)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Harness configuration: %s", ConfigFilter.scrub(dataclasses.asdict(self._config)))

        if self._metrics is None and self._config.metrics.enabled:
            self._metrics = self._build_metrics()
        if self._audit_sink is None and self._config.audit.enabled:
            self._audit_sink = self._build_audit_sink()

        if self._manager is None:
            self._manager = SecretManager(metrics=self._metrics, audit_sink=self._audit_sink)
        self._manager.initialize(self._config.secrets)

        raw = self._config.credentials
        manager = self._manager
        self._credentials = dataclasses.replace(
            raw,
            username=await manager.resolve(raw.username, "credentials.username", warn_on_plaintext=False),
            password=await manager.resolve(raw.password, "credentials.password"),
            client_secret=await manager.resolve(raw.client_secret, "credentials.client_secret"),
        )

        local_jwt = self._config.local_jwt
        self._private_key = await manager.resolve(local_jwt.private_key, "local_jwt.private_key")
        if local_jwt.enabled and not (self._private_key and self._private_key.strip()):
            raise HarnessConfigurationError(
                "local_jwt.enabled is true but no private key is configured (local_jwt.private_key)"
            )

        self._started = True
        self._audit(
            AuditEvent(
                action=AuditAction.CONFIG_LOADED,
                actor="harness_session",
                resource="credentials",
                status=AuditStatus.SUCCESS,
                metadata={"schemes": ",".join(manager.registered_schemes)},
            )
        )
        logger.info("Harness session started (schemes: %s)", ", ".join(manager.registered_schemes))

    def issue_local_token(self, role: str | None = None, *, now: datetime | None = None) -> str:
        """Sign a local token for the configured test account.

        Args:
            role: ``role`` claim; defaults to the configured role, then
                ``DefaultRole``.
            now: Issue time override.

        Raises:
            HarnessConfigurationError: Session not started or local JWT
                disabled.
            TokenIssuanceError: Signing failed.
        """
        if not self._started or self._credentials is None:
            raise HarnessConfigurationError("Session has not been started")

        settings = self._config.local_jwt
        if not settings.enabled:
            raise HarnessConfigurationError("Local JWT issuance is disabled (local_jwt.enabled = false)")

        credentials = self._credentials
        claims: dict[str, Any] = {}
        if settings.include_scope_claim and credentials.api_scope:
            claims["scp"] = credentials.api_scope

        options = LocalJwtOptions(
            algorithm=settings.algorithm,
            private_key=self._private_key,
            key_id=settings.key_id,
            issuer=settings.issuer or credentials.authority,
            audience=settings.audience or credentials.api_scope,
            subject=credentials.username or credentials.client_id,
            name=credentials.username,
            role=role or settings.role or DEFAULT_ROLE,
            client_id=credentials.client_id,
            lifetime=timedelta(minutes=settings.lifetime_minutes),
            additional_claims=claims,
        )
        token = create_token(options, now=now)
        self._audit_token(options)
        return token

    async def aclose(self) -> None:
        """Shut the manager down and close audit sinks."""
        if self._manager is not None:
            await self._manager.shutdown()
        if self._audit_sink is not None:
            sink = self._audit_sink
            safe_call(sink.close, logger, "Failed to close audit sink %s", type(sink).__name__)
        self._credentials = None
        self._private_key = None
        self._started = False

    async def __aenter__(self) -> HarnessSession:
        try:
            await self.start()
        except BaseException:
            await self.aclose()
            raise
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # -- internal helpers ---------------------------------------------------

    def _build_metrics(self) -> MeterRegistry:
        if self._config.metrics.backend == MetricsBackend.PROMETHEUS:
            return PrometheusRegistry()
        return InMemoryRegistry()

    def _build_audit_sink(self) -> AuditSink:
        sinks: list[AuditSink] = [LoggingAuditSink()]
        if self._config.audit.path:
            sinks.append(FileAuditSink(self._config.audit.path))
        return CompositeAuditSink(*sinks)

    def _audit(self, event: AuditEvent) -> None:
        sink = self._audit_sink
        if sink is None:
            return
        safe_call(lambda: sink.emit(event), logger, "Failed to emit %s audit event", event.action.value)

    def _audit_token(self, options: LocalJwtOptions) -> None:
        event = AuditEvent(
            action=AuditAction.TOKEN_ISSUED,
            actor="harness_session",
            resource=f"jwt:{options.audience or 'harness-local'}",
            status=AuditStatus.SUCCESS,
            metadata={
                "algorithm": options.algorithm,
                "subject": options.subject or "",
                "role": options.role or "",
                "lifetime_minutes": str(int(options.lifetime.total_seconds() // 60)),
            },
        )
        self._audit(event)
