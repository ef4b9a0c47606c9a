"""Symmetric encryption for ``enc://`` configuration values."""

from harness_credentials.core.crypto.aes import (
    AesEncryptionService,
    DecryptionError,
    EncryptedValue,
    EncryptionError,
    EncryptionKeyError,
    generate_key,
)
from harness_credentials.core.crypto.references import build_encrypted_reference, encrypt_to_reference

__all__ = [
    "AesEncryptionService",
    "DecryptionError",
    "EncryptedValue",
    "EncryptionError",
    "EncryptionKeyError",
    "build_encrypted_reference",
    "encrypt_to_reference",
    "generate_key",
]
