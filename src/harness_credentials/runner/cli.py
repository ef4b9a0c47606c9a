"""Command-line interface for encrypting and resolving harness credentials."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from harness_credentials.core.config.harness import HarnessConfig
from harness_credentials.core.config.loader import load_from_file
from harness_credentials.core.config.secrets import resolve_environment_value
from harness_credentials.core.crypto.aes import EncryptionError, generate_key
from harness_credentials.core.crypto.references import encrypt_to_reference
from harness_credentials.core.jwt.exceptions import TokenIssuanceError
from harness_credentials.core.secrets.exceptions import SecretError
from harness_credentials.core.secrets.manager import SecretManager
from harness_credentials.core.utils import mask
from harness_credentials.runner.session import HarnessConfigurationError, HarnessSession, configure_logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="harness-credentials",
        description="Manage secret references for test harness configuration.",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set the logging level, overriding the config file (default: WARNING).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("keygen", help="Print a new base64 AES-256 key.")

    encrypt = sub.add_parser("encrypt", help="Encrypt a value into an enc:// reference.")
    encrypt.add_argument("plaintext", help="Value to encrypt.")
    encrypt.add_argument(
        "--key",
        required=True,
        help="Base64 AES-256 key, or env://NAME to read it from the environment.",
    )

    resolve = sub.add_parser("resolve", help="Resolve one value against a harness configuration.")
    resolve.add_argument("config", help="Path to the HOCON harness configuration file.")
    resolve.add_argument("value", help="Literal or secret reference to resolve.")
    resolve.add_argument("--name", default=None, help="Logical setting name used in diagnostics.")
    resolve.add_argument(
        "--reveal",
        action="store_true",
        default=False,
        help="Print the resolved value instead of a masked summary.",
    )

    token = sub.add_parser("token", help="Issue a local JWT from a harness configuration.")
    token.add_argument("config", help="Path to the HOCON harness configuration file.")
    token.add_argument("--role", default=None, help="Role claim (default: configured role).")
    return parser


def _load_config(path: str) -> HarnessConfig | None:
    try:
        return load_from_file(path, HarnessConfig)
    except Exception as exc:
        logger.error("Failed to load configuration %s: %s", path, exc)
        return None


def _cmd_keygen(args: argparse.Namespace) -> int:
    print(generate_key())
    return 0


def _cmd_encrypt(args: argparse.Namespace) -> int:
    key = resolve_environment_value(args.key)
    if not key:
        logger.error("Encryption key '%s' is empty or unset", args.key)
        return 1
    print(encrypt_to_reference(args.plaintext, key))
    return 0


async def _resolve(config: HarnessConfig, value: str, name: str | None) -> str | None:
    manager = SecretManager()
    manager.initialize(config.secrets)
    try:
        return await manager.resolve(value, logical_name=name)
    finally:
        await manager.shutdown()


def _cmd_resolve(args: argparse.Namespace) -> int:
    config = _load_config(args.config)
    if config is None:
        return 1
    if args.log_level is None:
        configure_logging(config.logging)
    value = asyncio.run(_resolve(config, args.value, args.name))
    print(value if args.reveal else mask(value))
    return 0


async def _issue(config: HarnessConfig, role: str | None, apply_logging_config: bool) -> str:
    async with HarnessSession(config, apply_logging_config=apply_logging_config) as session:
        return session.issue_local_token(role)


def _cmd_token(args: argparse.Namespace) -> int:
    config = _load_config(args.config)
    if config is None:
        return 1
    print(asyncio.run(_issue(config, args.role, apply_logging_config=args.log_level is None)))
    return 0


_COMMANDS = {
    "keygen": _cmd_keygen,
    "encrypt": _cmd_encrypt,
    "resolve": _cmd_resolve,
    "token": _cmd_token,
}


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint.

    Args:
        argv: Command-line arguments. Defaults to ``sys.argv[1:]``.

    Returns:
        Exit code: 0 for success, 1 for failure.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level or "WARNING"),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        return _COMMANDS[args.command](args)
    except (SecretError, TokenIssuanceError, EncryptionError, HarnessConfigurationError, ValueError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
