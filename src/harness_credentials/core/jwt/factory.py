"""Create signed JWTs from PEM private keys.

Issuance only: tokens are never parsed or validated here. Supported
algorithms are RS256 (RSA, PKCS#1 v1.5, SHA-256) and ES256 (P-256, SHA-256,
64-byte ``r || s`` signature).
"""

from __future__ import annotations

import base64
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature

from harness_credentials.core.jwt.exceptions import (
    KeyFormatError,
    MissingSigningKeyError,
    TokenIssuanceError,
    UnsupportedAlgorithmError,
)
from harness_credentials.core.jwt.options import DEFAULT_LIFETIME, LocalJwtOptions, SigningAlgorithm

logger = logging.getLogger(__name__)

DEFAULT_ISSUER = "urn:harness:local"
DEFAULT_AUDIENCE = "harness-local"
DEFAULT_SUBJECT = "local-user"
DEFAULT_NAME = "Local Automation Account"

CLOCK_SKEW = timedelta(seconds=60)
ES256_COORDINATE_SIZE = 32


def base64url_encode(data: bytes) -> str:
    """Base64url without padding, as JOSE requires."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def normalize_coordinate(value: bytes, size: int) -> bytes:
    """Fit a big-endian integer to exactly *size* bytes.

    Longer inputs lose their leading bytes (the DER sign-padding zero);
    shorter inputs are left-padded with zeros.
    """
    if len(value) == size:
        return value
    if len(value) > size:
        return value[len(value) - size:]
    return b"\x00" * (size - len(value)) + value


def der_to_jose(der_signature: bytes, coordinate_size: int) -> bytes:
    """Convert a DER ``SEQUENCE { INTEGER r, INTEGER s }`` to ``r || s``.

    Args:
        der_signature: ECDSA signature as produced by ``cryptography``.
        coordinate_size: Byte width of each coordinate (32 for P-256).

    Returns:
        ``2 * coordinate_size`` bytes.

    Raises:
        TokenIssuanceError: If the input is not a DER ECDSA signature.
    """
    try:
        r, s = decode_dss_signature(der_signature)
    except ValueError as exc:
        raise TokenIssuanceError("Invalid DER-encoded ECDSA signature") from exc
    if r < 0 or s < 0:
        raise TokenIssuanceError("ECDSA signature coordinates must be non-negative")

    return normalize_coordinate(_der_integer_bytes(r), coordinate_size) + normalize_coordinate(
        _der_integer_bytes(s), coordinate_size
    )


def _der_integer_bytes(value: int) -> bytes:
    # content octets of a DER INTEGER: minimal, with a leading zero when the high bit is set
    return value.to_bytes(value.bit_length() // 8 + 1, "big")


def build_claims(options: LocalJwtOptions, issued_at: datetime, expires_at: datetime) -> dict[str, Any]:
    """Build the payload in canonical order; additional claims come last and win."""
    iat = int(issued_at.timestamp())
    claims: dict[str, Any] = {
        "iat": iat,
        "nbf": iat - int(CLOCK_SKEW.total_seconds()),
        "exp": int(expires_at.timestamp()),
        "iss": options.issuer or DEFAULT_ISSUER,
        "aud": options.audience or options.client_id or DEFAULT_AUDIENCE,
        "sub": options.subject or options.client_id or DEFAULT_SUBJECT,
        "name": options.name or DEFAULT_NAME,
    }
    if options.role and options.role.strip():
        claims["role"] = options.role
    if options.client_id and options.client_id.strip():
        claims["azp"] = options.client_id
    claims.update(options.additional_claims or {})
    return claims


def create_token(options: LocalJwtOptions, *, now: datetime | None = None) -> str:
    """Sign a compact JWT (``header.payload.signature``).

    Args:
        options: Algorithm, key and claim inputs.
        now: Issue time; defaults to the current UTC time.

    Raises:
        MissingSigningKeyError: No private key was supplied.
        UnsupportedAlgorithmError: Algorithm other than RS256/ES256.
        KeyFormatError: The PEM is unreadable or the wrong key type.
        TokenIssuanceError: Claims are not JSON serializable.
    """
    if options is None:
        raise ValueError("options must not be None")
    if not options.private_key or not options.private_key.strip():
        raise MissingSigningKeyError()

    algorithm_name = (options.algorithm or SigningAlgorithm.RS256.value).strip().upper()
    try:
        algorithm = SigningAlgorithm(algorithm_name)
    except ValueError:
        raise UnsupportedAlgorithmError(algorithm_name) from None

    issued_at = now or datetime.now(timezone.utc)
    lifetime = options.lifetime if options.lifetime > timedelta(0) else DEFAULT_LIFETIME

    header: dict[str, Any] = {"alg": algorithm.value, "typ": "JWT"}
    if options.key_id and options.key_id.strip():
        header["kid"] = options.key_id

    payload = build_claims(options, issued_at, issued_at + lifetime)
    signing_input = f"{_encode_segment(header)}.{_encode_segment(payload)}"

    private_key = _load_private_key(options.private_key)
    if algorithm is SigningAlgorithm.RS256:
        signature = _sign_rs256(private_key, signing_input.encode("ascii"))
    else:
        signature = _sign_es256(private_key, signing_input.encode("ascii"))

    logger.debug("Issued local %s token for subject '%s'", algorithm.value, payload["sub"])
    return f"{signing_input}.{base64url_encode(signature)}"


def _encode_segment(obj: dict[str, Any]) -> str:
    try:
        raw = json.dumps(obj, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise TokenIssuanceError(f"Token claims are not JSON serializable: {exc}") from exc
    return base64url_encode(raw.encode("utf-8"))


def _load_private_key(pem: str) -> Any:
    try:
        return serialization.load_pem_private_key(pem.strip().encode("utf-8"), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyFormatError(f"Unable to load PEM private key: {exc}") from exc


def _sign_rs256(private_key: Any, data: bytes) -> bytes:
    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise KeyFormatError(f"RS256 requires an RSA private key, got {type(private_key).__name__}")
    return private_key.sign(data, padding.PKCS1v15(), hashes.SHA256())


def _sign_es256(private_key: Any, data: bytes) -> bytes:
    if not isinstance(private_key, ec.EllipticCurvePrivateKey):
        raise KeyFormatError(f"ES256 requires an EC private key, got {type(private_key).__name__}")
    if not isinstance(private_key.curve, ec.SECP256R1):
        raise KeyFormatError(f"ES256 requires a P-256 key, got curve {private_key.curve.name}")
    der = private_key.sign(data, ec.ECDSA(hashes.SHA256()))
    return der_to_jose(der, ES256_COORDINATE_SIZE)
