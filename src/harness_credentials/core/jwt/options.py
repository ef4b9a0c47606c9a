"""Local token options."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Any

DEFAULT_LIFETIME = timedelta(minutes=60)


class SigningAlgorithm(str, Enum):
    """Supported JOSE signing algorithms."""

    RS256 = "RS256"
    ES256 = "ES256"


@dataclass
class LocalJwtOptions:
    """Inputs for :func:`~harness_credentials.core.jwt.factory.create_token`.

    Callers are expected to have clamped ``lifetime`` already; the factory
    only replaces a non-positive lifetime with the 60 minute default.
    """

    algorithm: str = SigningAlgorithm.RS256.value
    private_key: str | None = None
    key_id: str | None = None
    issuer: str | None = None
    audience: str | None = None
    subject: str | None = None
    name: str | None = None
    role: str | None = None
    client_id: str | None = None
    lifetime: timedelta = DEFAULT_LIFETIME
    additional_claims: dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        return (
            f"LocalJwtOptions(algorithm={self.algorithm!r}, "
            f"private_key={'***' if self.private_key else None}, "
            f"key_id={self.key_id!r}, issuer={self.issuer!r}, audience={self.audience!r}, "
            f"subject={self.subject!r}, role={self.role!r}, client_id={self.client_id!r}, "
            f"lifetime={self.lifetime!r})"
        )
