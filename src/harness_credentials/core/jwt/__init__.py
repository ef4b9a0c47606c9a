"""Local JWT issuance (RS256 / ES256)."""

from harness_credentials.core.jwt.exceptions import (
    KeyFormatError,
    MissingSigningKeyError,
    TokenIssuanceError,
    UnsupportedAlgorithmError,
)
from harness_credentials.core.jwt.factory import (
    base64url_encode,
    build_claims,
    create_token,
    der_to_jose,
    normalize_coordinate,
)
from harness_credentials.core.jwt.options import LocalJwtOptions, SigningAlgorithm

__all__ = [
    "KeyFormatError",
    "LocalJwtOptions",
    "MissingSigningKeyError",
    "SigningAlgorithm",
    "TokenIssuanceError",
    "UnsupportedAlgorithmError",
    "base64url_encode",
    "build_claims",
    "create_token",
    "der_to_jose",
    "normalize_coordinate",
]
