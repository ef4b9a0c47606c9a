"""AES-256-CBC encryption for configuration secrets.

Values encrypted here are what ``enc://`` references carry: base64 cipher
text plus the base64 IV used to produce it. The service holds only the
key; every :meth:`AesEncryptionService.encrypt` call draws a fresh IV.
"""

from __future__ import annotations

import base64
import binascii
import os
from dataclasses import dataclass

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

KEY_SIZE_BYTES = 32
IV_SIZE_BYTES = 16
_BLOCK_SIZE_BITS = 128


class EncryptionError(Exception):
    """Base exception for the encryption service."""


class EncryptionKeyError(EncryptionError):
    """The configured key is missing, not base64, or not 256 bits."""


class DecryptionError(EncryptionError):
    """Cipher text could not be turned back into UTF-8 plaintext."""


@dataclass(frozen=True)
class EncryptedValue:
    """Output of :meth:`AesEncryptionService.encrypt`.

    Args:
        cipher_text: Base64-encoded cipher text.
        iv: Base64-encoded 16-byte initialization vector.
    """

    cipher_text: str
    iv: str

    def __repr__(self) -> str:
        return f"EncryptedValue(cipher_text=<{len(self.cipher_text)} chars>, iv={self.iv!r})"


def generate_key() -> str:
    """Return a new random base64-encoded 256-bit key."""
    return base64.b64encode(os.urandom(KEY_SIZE_BYTES)).decode("ascii")


class AesEncryptionService:
    """AES-256 in CBC mode with PKCS#7 padding.

    Args:
        base64_key: Base64-encoded 32-byte key.

    Raises:
        EncryptionKeyError: If the key is empty, not valid base64, or does
            not decode to exactly 32 bytes.
    """

    def __init__(self, base64_key: str) -> None:
        if not base64_key or not base64_key.strip():
            raise EncryptionKeyError("Encryption key must be provided")

        try:
            key = base64.b64decode(base64_key.strip(), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise EncryptionKeyError("Configuration encryption key must be a base64 encoded string") from exc

        if len(key) != KEY_SIZE_BYTES:
            raise EncryptionKeyError(
                f"Configuration encryption key must be {KEY_SIZE_BYTES} bytes (256 bits). "
                f"Provided key length: {len(key)} bytes"
            )
        self._key = key

    def __repr__(self) -> str:
        return "AesEncryptionService(key=***)"

    def encrypt(self, plaintext: str) -> EncryptedValue:
        """Encrypt *plaintext* under a freshly generated IV."""
        if plaintext is None:
            raise TypeError("plaintext must not be None")

        iv = os.urandom(IV_SIZE_BYTES)
        padder = padding.PKCS7(_BLOCK_SIZE_BITS).padder()
        padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

        encryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv)).encryptor()
        cipher_bytes = encryptor.update(padded) + encryptor.finalize()

        return EncryptedValue(
            cipher_text=base64.b64encode(cipher_bytes).decode("ascii"),
            iv=base64.b64encode(iv).decode("ascii"),
        )

    def decrypt(self, cipher_text: bytes, iv: bytes) -> str:
        """Decrypt raw cipher bytes with the given raw IV.

        Raises:
            DecryptionError: If the IV is not 16 bytes, the cipher text is
                not block aligned, the padding is invalid (typically a
                wrong key), or the result is not UTF-8.
        """
        if len(iv) != IV_SIZE_BYTES:
            raise DecryptionError(f"AES IV must be {IV_SIZE_BYTES} bytes (128 bits), got {len(iv)}")

        decryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv)).decryptor()
        unpadder = padding.PKCS7(_BLOCK_SIZE_BITS).unpadder()
        try:
            padded = decryptor.update(cipher_text) + decryptor.finalize()
            plain_bytes = unpadder.update(padded) + unpadder.finalize()
            return plain_bytes.decode("utf-8")
        except ValueError as exc:
            # UnicodeDecodeError is a ValueError too
            raise DecryptionError(f"Unable to decrypt value: {exc}") from exc
