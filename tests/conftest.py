"""Shared fixtures for harness-credentials tests."""

from __future__ import annotations

import base64
import logging
from collections.abc import Iterator

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from harness_credentials.core.config.secrets import SecretManagerOptions
from harness_credentials.core.crypto.aes import generate_key

ZERO_KEY = base64.b64encode(bytes(32)).decode("ascii")


@pytest.fixture(autouse=True)
def _restore_package_log_level() -> Iterator[None]:
    # sessions apply config.logging to the package logger
    package_logger = logging.getLogger("harness_credentials")
    level = package_logger.level
    yield
    package_logger.setLevel(level)


@pytest.fixture
def encryption_key() -> str:
    return generate_key()


@pytest.fixture
def zero_key() -> str:
    return ZERO_KEY


@pytest.fixture
def options() -> SecretManagerOptions:
    return SecretManagerOptions()


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def rsa_private_pem(rsa_private_key: rsa.RSAPrivateKey) -> str:
    return rsa_private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture(scope="session")
def ec_private_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def ec_private_pem(ec_private_key: ec.EllipticCurvePrivateKey) -> str:
    return ec_private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode("ascii")
