"""Tests for harness configuration models."""

import pytest

from harness_credentials.core.config.harness import (
    MAX_TOKEN_LIFETIME_MINUTES,
    MIN_TOKEN_LIFETIME_MINUTES,
    HarnessConfig,
    LocalJwtSettings,
)


class TestLocalJwtSettings:
    @pytest.mark.parametrize(
        ("requested", "expected"),
        [
            (1, MIN_TOKEN_LIFETIME_MINUTES),
            (-10, MIN_TOKEN_LIFETIME_MINUTES),
            (60, 60),
            (240, 240),
            (1000, MAX_TOKEN_LIFETIME_MINUTES),
        ],
    )
    def test_lifetime_clamped(self, requested: int, expected: int) -> None:
        assert LocalJwtSettings(lifetime_minutes=requested).lifetime_minutes == expected

    def test_algorithm_normalized(self) -> None:
        assert LocalJwtSettings(algorithm=" es256 ").algorithm == "ES256"

    def test_blank_algorithm_defaults(self) -> None:
        assert LocalJwtSettings(algorithm="").algorithm == "RS256"


class TestHarnessConfig:
    def test_sections_are_independent(self) -> None:
        first = HarnessConfig()
        second = HarnessConfig()
        first.credentials.username = "alice"
        assert second.credentials.username is None
