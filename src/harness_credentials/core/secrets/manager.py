"""Secret manager: provider registry, resolution cache, and fallback policy.

The manager is the single entry point configuration loading uses to turn
raw strings into values. One instance is created per harness lifetime and
passed to whoever needs secrets; nothing here is module-global.

Resolution outline for a value:

1. Blank values pass through untouched.
2. Values that are not references are literals; they pass through, with a
   warning when plaintext fallback is disabled.
3. Cached references return the cached value without touching a provider.
4. Unknown schemes are always fatal.
5. The provider result is cached. An empty result is fatal unless
   plaintext fallback is enabled.
6. A provider failure propagates when fallback is disabled, otherwise it
   is logged and the literal input is returned uncached. Format errors and
   scheme mismatches always propagate.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Mapping, Sequence

from harness_credentials.core.audit.sinks import AuditSink
from harness_credentials.core.audit.types import AuditAction, AuditEvent, AuditStatus
from harness_credentials.core.config.secrets import SecretManagerOptions, resolve_environment_value
from harness_credentials.core.crypto.aes import AesEncryptionService
from harness_credentials.core.metrics.registry import MeterRegistry
from harness_credentials.core.secrets.base import SecretProvider, SecretResolutionContext
from harness_credentials.core.secrets.exceptions import (
    ProviderSchemeMismatchError,
    SecretFormatError,
    SecretManagerStateError,
    SecretResolutionError,
    UnregisteredSchemeError,
)
from harness_credentials.core.secrets.providers import (
    EncryptedSecretProvider,
    EnvSecretProvider,
    VaultSecretProvider,
)
from harness_credentials.core.secrets.reference import SecretReference, parse_secret_reference
from harness_credentials.core.utils import safe_call

logger = logging.getLogger(__name__)

VaultProviderFactory = Callable[[SecretManagerOptions], SecretProvider]

_MISSING = object()


class SecretsCache:
    """Thread-safe, non-expiring cache of resolved values.

    Keys are reference strings. ``None`` is a legitimate cached value
    (a reference that resolved to nothing under plaintext fallback), so
    lookups report hit and value separately.
    """

    def __init__(self) -> None:
        self._entries: dict[str, str | None] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> tuple[bool, str | None]:
        with self._lock:
            value = self._entries.get(key, _MISSING)
        if value is _MISSING:
            return False, None
        return True, value  # type: ignore[return-value]

    def put(self, key: str, value: str | None) -> None:
        with self._lock:
            self._entries.setdefault(key, value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class SecretManager:
    """Resolve secret references through scheme-registered providers.

    Args:
        metrics: Optional registry for cache and provider counters.
        audit_sink: Optional sink receiving one event per provider
            resolution. Secret values are never included.
        extra_providers: Additional provider variants registered at
            :meth:`initialize` after the built-in ones.
        vault_provider_factory: Builds the vault provider from the options.
            Defaults to :class:`VaultSecretProvider`.
    """

    def __init__(
        self,
        *,
        metrics: MeterRegistry | None = None,
        audit_sink: AuditSink | None = None,
        extra_providers: Sequence[SecretProvider] = (),
        vault_provider_factory: VaultProviderFactory | None = None,
    ) -> None:
        self._metrics = metrics
        self._audit_sink = audit_sink
        self._extra_providers = tuple(extra_providers)
        self._vault_provider_factory = vault_provider_factory or VaultSecretProvider
        self._lock = threading.Lock()
        self._cache = SecretsCache()
        self._providers: dict[str, SecretProvider] = {}
        self._options: SecretManagerOptions | None = None
        self._initialized = False

    # -- lifecycle ----------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def options(self) -> SecretManagerOptions:
        options, _ = self._snapshot()
        return options

    @property
    def registered_schemes(self) -> tuple[str, ...]:
        return tuple(sorted(self._providers))

    @property
    def cache(self) -> SecretsCache:
        return self._cache

    def initialize(self, options: SecretManagerOptions) -> None:
        """Build the provider registry. A second call is a no-op.

        Raises:
            EncryptionKeyError: If an encryption key is configured but is
                not a base64 256-bit key. The manager stays uninitialized.
        """
        if self._initialized:
            return

        with self._lock:
            if self._initialized:
                return

            providers: dict[str, SecretProvider] = {}
            self._add(providers, EnvSecretProvider())

            encryption_key = resolve_environment_value(options.encryption_key)
            if encryption_key:
                self._add(providers, EncryptedSecretProvider(AesEncryptionService(encryption_key)))
                logger.info("Encrypted configuration provider enabled (AES-256)")
            else:
                logger.warning("Configuration encryption key not provided; enc:// secrets will be unavailable")

            if options.vault_uri:
                self._add(providers, self._vault_provider_factory(options))
                logger.info("Key vault provider configured for vault %s", options.vault_uri)

            for provider in self._extra_providers:
                self._add(providers, provider)

            if options.allow_plaintext_fallback:
                logger.warning("Plaintext fallback is enabled. Disable it for production environments.")

            self._providers = providers
            self._options = options
            self._initialized = True
            logger.debug("Secret manager initialized with schemes: %s", ", ".join(sorted(providers)))

    async def shutdown(self) -> None:
        """Clear the cache, drop the registry, and close providers.

        The manager returns to the uninitialized state and may be
        initialized again.
        """
        with self._lock:
            providers = list({id(p): p for p in self._providers.values()}.values())
            self._providers = {}
            self._cache.clear()
            self._options = None
            self._initialized = False

        for provider in providers:
            try:
                await provider.aclose()
            except Exception:
                logger.warning("Secret provider %s failed to close", type(provider).__name__, exc_info=True)

    # -- resolution ---------------------------------------------------------

    async def resolve(
        self,
        value: str | None,
        logical_name: str | None = None,
        warn_on_plaintext: bool = True,
    ) -> str | None:
        """Resolve *value* if it is a secret reference.

        Args:
            value: Raw configuration value.
            logical_name: Name of the setting, used in warnings and errors.
            warn_on_plaintext: Warn about literal values when plaintext
                fallback is disabled.

        Returns:
            The resolved secret, or *value* itself for literals and for
            degraded lookups under plaintext fallback.

        Raises:
            SecretManagerStateError: If the manager is not initialized.
            UnregisteredSchemeError: If no provider handles the scheme.
            SecretFormatError: If the reference is malformed.
            SecretResolutionError: If resolution fails (or yields nothing)
                and plaintext fallback is disabled. Other provider errors
                propagate unchanged in that case.
        """
        options, providers = self._snapshot()

        if value is None or not value.strip():
            return value

        reference = parse_secret_reference(value)
        if reference is None:
            if warn_on_plaintext and not options.allow_plaintext_fallback and logical_name:
                logger.warning(
                    "Plaintext value detected for '%s'. Replace it with an env://, kv:// or enc:// reference.",
                    logical_name,
                )
            return value

        hit, cached = self._cache.get(reference.original)
        if hit:
            self._count("hc_secret_cache_hits", reference.scheme)
            return cached

        provider = providers.get(reference.scheme)
        if provider is None:
            raise UnregisteredSchemeError(reference.scheme, logical_name)

        context = SecretResolutionContext(options=options, logical_name=logical_name)
        self._count("hc_secret_provider_calls", reference.scheme)
        started = time.perf_counter()
        try:
            resolved = await provider.resolve(reference, context)
            if (resolved is None or not resolved.strip()) and not options.allow_plaintext_fallback:
                raise SecretResolutionError(context.describe(reference), "resolved to an empty value")
        except (SecretFormatError, ProviderSchemeMismatchError, UnregisteredSchemeError):
            raise
        except Exception as exc:
            reason = exc.reason if isinstance(exc, SecretResolutionError) else str(exc) or type(exc).__name__
            self._count("hc_secret_failures", reference.scheme)
            if not options.allow_plaintext_fallback:
                self._audit(AuditAction.SECRET_FAILED, AuditStatus.FAILURE, reference, context, reason)
                raise

            logger.warning(
                "Failed to resolve secret '%s' via scheme '%s'. Falling back to plaintext. Error: %s",
                context.describe(reference),
                reference.scheme,
                reason,
            )
            self._count("hc_secret_fallbacks", reference.scheme)
            self._audit(AuditAction.SECRET_FALLBACK, AuditStatus.WARNING, reference, context, reason)
            return value
        finally:
            self._time(reference.scheme, started)

        self._cache.put(reference.original, resolved)
        self._audit(AuditAction.SECRET_RESOLVED, AuditStatus.SUCCESS, reference, context)
        return resolved

    async def resolve_many(
        self,
        values: Mapping[str, str | None],
        warn_on_plaintext: bool = True,
    ) -> dict[str, str | None]:
        """Resolve several named values, using each key as the logical name."""
        return {
            name: await self.resolve(raw, logical_name=name, warn_on_plaintext=warn_on_plaintext)
            for name, raw in values.items()
        }

    # -- internal helpers ---------------------------------------------------

    @staticmethod
    def _add(providers: dict[str, SecretProvider], provider: SecretProvider) -> None:
        for scheme in provider.schemes:
            providers[scheme.lower()] = provider

    def _snapshot(self) -> tuple[SecretManagerOptions, dict[str, SecretProvider]]:
        options = self._options
        if not self._initialized or options is None:
            raise SecretManagerStateError(
                "SecretManager must be initialized before resolving secrets. "
                "Call initialize(options) during harness start-up."
            )
        return options, self._providers

    def _count(self, name: str, scheme: str) -> None:
        metrics = self._metrics
        if metrics is None:
            return
        safe_call(lambda: metrics.counter(name, tags={"scheme": scheme}), logger, "Failed to record metric %s", name)

    def _time(self, scheme: str, started: float) -> None:
        metrics = self._metrics
        if metrics is None:
            return
        elapsed_ms = (time.perf_counter() - started) * 1000
        safe_call(
            lambda: metrics.timer("hc_secret_resolve_duration", elapsed_ms, tags={"scheme": scheme}),
            logger,
            "Failed to record resolve duration",
        )

    def _audit(
        self,
        action: AuditAction,
        status: AuditStatus,
        reference: SecretReference,
        context: SecretResolutionContext,
        error: str | None = None,
    ) -> None:
        sink = self._audit_sink
        if sink is None:
            return
        metadata = {"scheme": reference.scheme, "identifier": _redact_identifier(reference)}
        if context.logical_name:
            metadata["setting"] = context.logical_name
        if error is not None:
            metadata["error"] = error
        event = AuditEvent(
            action=action,
            actor="secret_manager",
            resource=f"{reference.scheme}:{context.logical_name or metadata['identifier']}",
            status=status,
            metadata=metadata,
        )
        safe_call(
            lambda: sink.emit(event),
            logger,
            "Failed to emit audit event for %s reference",
            reference.scheme,
        )


def _redact_identifier(reference: SecretReference) -> str:
    # enc:// identifiers are the cipher text itself
    if reference.scheme == "enc":
        return "aes256/***"
    return reference.identifier
