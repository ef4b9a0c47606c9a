"""Build ``enc://`` references for encrypted configuration values.

This is the offline half of encrypted configuration: run it once with the
shared key, paste the resulting reference into the config file, and the
secret manager decrypts it at load time.
"""

from __future__ import annotations

from urllib.parse import quote

from harness_credentials.core.crypto.aes import AesEncryptionService


def build_encrypted_reference(cipher_text: str, iv: str) -> str:
    """Return ``enc://aes256/{cipher}?iv={iv}`` with both parts escaped.

    Base64 may contain ``/``, ``+`` and ``=``; escaping keeps the cipher
    text a single path segment and the IV a single query value.

    Raises:
        ValueError: If either component is blank.
    """
    if not cipher_text or not cipher_text.strip():
        raise ValueError("Cipher text must be provided")
    if not iv or not iv.strip():
        raise ValueError("Initialization vector must be provided")

    return f"enc://aes256/{quote(cipher_text, safe='')}?iv={quote(iv, safe='')}"


def encrypt_to_reference(plaintext: str, base64_key: str) -> str:
    """Encrypt *plaintext* with *base64_key* and return an ``enc://`` reference."""
    encrypted = AesEncryptionService(base64_key).encrypt(plaintext)
    return build_encrypted_reference(encrypted.cipher_text, encrypted.iv)
