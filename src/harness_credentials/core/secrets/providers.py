"""Built-in secret provider implementations."""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import os
from typing import Any
from urllib.parse import quote

import httpx

from harness_credentials.core.config.base import SecretScheme
from harness_credentials.core.config.secrets import SecretManagerOptions, parse_absolute_http_uri
from harness_credentials.core.crypto.aes import IV_SIZE_BYTES, AesEncryptionService, DecryptionError
from harness_credentials.core.secrets.base import SecretProvider, SecretResolutionContext
from harness_credentials.core.secrets.exceptions import SecretFormatError, SecretResolutionError
from harness_credentials.core.secrets.reference import SecretReference

logger = logging.getLogger(__name__)

KEY_VAULT_SCOPE = "https://vault.azure.net/.default"
KEY_VAULT_API_VERSION = "7.3"
ENCRYPTION_ALGORITHM = "aes256"


class EnvSecretProvider(SecretProvider):
    """Resolve ``env://NAME`` from the process environment.

    An unset variable resolves to ``None``; the manager decides whether
    that is fatal.
    """

    @property
    def schemes(self) -> tuple[str, ...]:
        return (SecretScheme.ENV.value,)

    async def resolve(self, reference: SecretReference, context: SecretResolutionContext) -> str | None:
        self._ensure_scheme(reference)
        if not reference.identifier:
            raise SecretFormatError(reference.original, "environment variable name is missing")
        return os.environ.get(reference.identifier)


class EncryptedSecretProvider(SecretProvider):
    """Resolve AES-256 encrypted values.

    Accepted forms::

        enc://aes256/{cipherBase64}?iv={ivBase64}
        enc://aes256/{ivBase64}/{cipherBase64}

    The ``iv`` query parameter wins over a positional IV.

    Args:
        encryption: Service holding the shared configuration key.
    """

    def __init__(self, encryption: AesEncryptionService) -> None:
        if encryption is None:
            raise ValueError("encryption service is required")
        self._encryption = encryption

    @property
    def schemes(self) -> tuple[str, ...]:
        return (SecretScheme.ENC.value,)

    async def resolve(self, reference: SecretReference, context: SecretResolutionContext) -> str | None:
        self._ensure_scheme(reference)
        segments = reference.segments
        if not segments:
            raise SecretFormatError(reference.original, "algorithm and cipher text are required")

        if segments[0].lower() != ENCRYPTION_ALGORITHM:
            raise SecretFormatError(
                reference.original,
                f"unsupported encryption algorithm '{segments[0]}', only {ENCRYPTION_ALGORITHM} is supported",
            )

        iv_text: str | None = None
        if len(segments) == 2:
            cipher_text = segments[1]
        elif len(segments) == 3:
            iv_text, cipher_text = segments[1], segments[2]
        else:
            raise SecretFormatError(
                reference.original,
                "expected enc://aes256/{cipher}?iv={iv} or enc://aes256/{iv}/{cipher}",
            )

        query_iv = reference.parameter("iv")
        if query_iv and query_iv.strip():
            iv_text = query_iv.strip()
        if not iv_text:
            raise SecretFormatError(reference.original, "an initialization vector (IV) is required")

        try:
            cipher_bytes = base64.b64decode(cipher_text, validate=True)
            iv_bytes = base64.b64decode(iv_text, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise SecretFormatError(reference.original, "contains an invalid base64 value") from exc

        if len(iv_bytes) != IV_SIZE_BYTES:
            raise SecretFormatError(reference.original, f"IV must be {IV_SIZE_BYTES} bytes, got {len(iv_bytes)}")

        try:
            return self._encryption.decrypt(cipher_bytes, iv_bytes)
        except DecryptionError as exc:
            raise SecretResolutionError(context.describe(reference), str(exc)) from exc


class VaultSecretProvider(SecretProvider):
    """Resolve ``kv://name`` and ``keyvault://name`` from a key vault.

    Issues ``GET {vault}/secrets/{name}[/{version}]?api-version=7.3`` with a
    bearer token for the vault audience and returns the JSON ``value``.
    ``version`` and ``vault`` query parameters select a secret version and
    override the configured vault respectively.

    The credential defaults to ``azure.identity.aio.DefaultAzureCredential``
    and is created lazily on the first call to :meth:`resolve`, as is the
    HTTP client.

    Args:
        options: Manager options; ``vault_uri`` is required.
        credential: Async token credential exposing ``get_token(scope)``.
        http_client: Pre-built ``httpx.AsyncClient``. Injected clients are
            not closed by :meth:`aclose`.
    """

    def __init__(
        self,
        options: SecretManagerOptions,
        *,
        credential: Any = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not options.vault_uri:
            raise ValueError("vault_uri is required")
        self._default_vault = options.vault_uri
        self._options = options
        self._timeout = float(options.secret_fetch_timeout_seconds)
        self._credential = credential
        self._owns_credential = credential is None
        self._client = http_client
        self._owns_client = http_client is None

    @property
    def schemes(self) -> tuple[str, ...]:
        return (SecretScheme.KV.value, SecretScheme.KEYVAULT.value)

    def _get_credential(self) -> Any:
        if self._credential is None:
            from azure.identity.aio import DefaultAzureCredential

            kwargs: dict[str, Any] = {}
            if self._options.managed_identity_client_id:
                kwargs["managed_identity_client_id"] = self._options.managed_identity_client_id
            if self._options.tenant_id:
                kwargs["shared_cache_tenant_id"] = self._options.tenant_id
                kwargs["visual_studio_code_tenant_id"] = self._options.tenant_id
            self._credential = DefaultAzureCredential(**kwargs)
        return self._credential

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
        return self._client

    def _vault_for(self, reference: SecretReference) -> str:
        override = reference.parameter("vault")
        if override is None:
            return self._default_vault
        vault = parse_absolute_http_uri(override)
        if vault is None:
            raise SecretFormatError(reference.original, f"vault override '{override}' is not an absolute http(s) URI")
        return vault

    def build_secret_url(self, vault: str, name: str, version: str | None = None) -> str:
        """Return ``{vault}/secrets/{name}[/{version}]`` (query added per request)."""
        path = f"secrets/{name}"
        if version:
            path += f"/{quote(version, safe='')}"
        return f"{vault.rstrip('/')}/{path}"

    async def resolve(self, reference: SecretReference, context: SecretResolutionContext) -> str | None:
        self._ensure_scheme(reference)
        name = reference.identifier
        if not name:
            raise SecretFormatError(reference.original, "secret name is missing")

        url = self.build_secret_url(self._vault_for(reference), name, reference.parameter("version"))
        target = context.describe(reference)
        access_token = await self._acquire_token(target)

        logger.debug("Fetching secret '%s' from %s", name, url)
        try:
            response = await self._get_client().get(
                url,
                params={"api-version": KEY_VAULT_API_VERSION},
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/json",
                },
            )
        except httpx.TimeoutException as exc:
            raise SecretResolutionError(target, f"timed out fetching secret '{name}' after {self._timeout:g}s") from exc
        except httpx.HTTPError as exc:
            raise SecretResolutionError(target, f"request for secret '{name}' failed: {exc}") from exc

        if not response.is_success:
            raise SecretResolutionError(
                target,
                f"vault returned {response.status_code} for secret '{name}'. Response: {response.text}",
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise SecretResolutionError(target, f"vault response for secret '{name}' is not JSON") from exc

        if not isinstance(payload, dict) or "value" not in payload:
            raise SecretResolutionError(target, f"vault response for secret '{name}' has no 'value' property")

        value = payload["value"]
        return None if value is None else str(value)

    async def _acquire_token(self, target: str) -> str:
        try:
            credential = self._get_credential()
            access_token = await asyncio.wait_for(credential.get_token(KEY_VAULT_SCOPE), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            raise SecretResolutionError(target, f"timed out acquiring a vault token after {self._timeout:g}s") from exc
        except Exception as exc:
            # credential chains raise a mix of azure-core and OS errors
            raise SecretResolutionError(target, f"could not acquire a vault token: {exc}") from exc
        return access_token.token

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
        if self._credential is not None and self._owns_credential:
            await self._credential.close()
            self._credential = None
