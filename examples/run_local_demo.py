"""Local demo: resolve an encrypted password and issue a local JWT.

Generates a throwaway AES key and P-256 signing key, encrypts a password
into an ``enc://`` reference, then starts a :class:`HarnessSession` from
``harness.conf``. No vault or identity provider is required.

Usage:
    python examples/run_local_demo.py
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from harness_credentials.core.crypto import encrypt_to_reference, generate_key
from harness_credentials.core.metrics import InMemoryRegistry
from harness_credentials.core.utils import mask
from harness_credentials.runner import HarnessSession

CONFIG_PATH = Path(__file__).parent / "harness.conf"


def _prepare_environment() -> None:
    config_key = generate_key()
    signing_key = ec.generate_private_key(ec.SECP256R1())

    os.environ["HC_DEMO_CONFIG_KEY"] = config_key
    os.environ["HC_DEMO_PASSWORD_REF"] = encrypt_to_reference("demo-p@ssw0rd", config_key)
    os.environ["HC_DEMO_JWT_KEY"] = signing_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode("ascii")


async def run() -> str:
    """Start a session, print what it resolved, and return a token."""
    async with HarnessSession.from_file(CONFIG_PATH) as session:
        credentials = session.credentials
        print(f"User     : {credentials.username}")
        print(f"Password : {mask(credentials.password)}")

        token = session.issue_local_token()
        print(f"Token    : {token[:32]}...")

        if isinstance(session.metrics, InMemoryRegistry):
            print(f"Metrics  : {session.metrics.get_metrics()['counters']}")
        return token


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    _prepare_environment()
    asyncio.run(run())


if __name__ == "__main__":
    main()
