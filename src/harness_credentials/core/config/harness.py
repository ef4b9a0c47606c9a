"""Top-level harness configuration models."""

from dataclasses import dataclass, field

from harness_credentials.core.config.observability import AuditConfig, LoggingConfig, MetricsConfig
from harness_credentials.core.config.secrets import SecretManagerOptions

MIN_TOKEN_LIFETIME_MINUTES = 5
MAX_TOKEN_LIFETIME_MINUTES = 240


@dataclass
class CredentialsConfig:
    """Credentials the harness hands to API and browser tests.

    Any string here may be a secret reference (``env://``, ``kv://``,
    ``enc://``); it is resolved when the session starts.
    """

    username: str | None = None
    """Test account user name"""

    password: str | None = None
    """Test account password"""

    client_id: str | None = None
    """Identity provider application (client) id"""

    client_secret: str | None = None
    """Identity provider client secret"""

    api_scope: str | None = None
    """Scope requested for API tokens"""

    authority: str = "https://login.microsoftonline.com"
    """Identity provider authority, used as local token issuer fallback"""


@dataclass
class LocalJwtSettings:
    """Settings for self-signed tokens used when no identity provider is reachable."""

    enabled: bool = False
    """Issue local tokens instead of calling the identity provider (default: False)"""

    algorithm: str = "RS256"
    """Signing algorithm, ``RS256`` or ``ES256`` (default: RS256)"""

    private_key: str | None = None
    """PEM private key, normally a secret reference"""

    key_id: str | None = None
    """``kid`` header value (optional)"""

    issuer: str | None = None
    """``iss`` claim; defaults to the credentials authority"""

    audience: str | None = None
    """``aud`` claim; defaults to the credentials API scope"""

    role: str | None = None
    """Default ``role`` claim"""

    lifetime_minutes: int = 60
    """Token lifetime, clamped to [5, 240] (default: 60)"""

    include_scope_claim: bool = True
    """Add an ``scp`` claim carrying the API scope (default: True)"""

    def __post_init__(self) -> None:
        """Normalize the algorithm and clamp the lifetime."""
        self.algorithm = (self.algorithm or "RS256").strip().upper()
        self.lifetime_minutes = min(
            max(self.lifetime_minutes, MIN_TOKEN_LIFETIME_MINUTES),
            MAX_TOKEN_LIFETIME_MINUTES,
        )


@dataclass
class HarnessConfig:
    """Complete configuration for a harness session."""

    secrets: SecretManagerOptions = field(default_factory=SecretManagerOptions)
    """Secret manager options"""

    credentials: CredentialsConfig = field(default_factory=CredentialsConfig)
    """Credentials to resolve at startup"""

    local_jwt: LocalJwtSettings = field(default_factory=LocalJwtSettings)
    """Local token issuance"""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    """Logging configuration"""

    audit: AuditConfig = field(default_factory=AuditConfig)
    """Audit trail configuration"""

    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    """Metrics configuration"""
