"""Local token issuance exceptions. None of these have a fallback."""


class TokenIssuanceError(Exception):
    """Base exception for local token issuance."""


class MissingSigningKeyError(TokenIssuanceError):
    """No private key was supplied."""

    def __init__(self) -> None:
        super().__init__("Local JWT configuration requires a private key (PEM format) to sign the token")


class UnsupportedAlgorithmError(TokenIssuanceError):
    """The requested algorithm is neither RS256 nor ES256."""

    def __init__(self, algorithm: str) -> None:
        self.algorithm = algorithm
        super().__init__(
            f"Unsupported JWT algorithm '{algorithm}'. Only RS256 and ES256 are supported for local JWTs"
        )


class KeyFormatError(TokenIssuanceError):
    """The PEM could not be loaded or does not match the algorithm."""
