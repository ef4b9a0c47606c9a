"""Tests for ConfigFilter."""

from __future__ import annotations

from harness_credentials.core.audit.filters import ConfigFilter


class TestConfigFilter:
    def test_scrubs_password(self) -> None:
        result = ConfigFilter.scrub({"password": "hunter2", "username": "alice"})
        assert result["password"] == "***REDACTED***"
        assert result["username"] == "alice"

    def test_scrubs_multiple_patterns(self) -> None:
        data = {
            "client_secret": "s",
            "private_key": "-----BEGIN",
            "api_token": "t",
            "credential_file": "/path",
            "authority": "https://login.microsoftonline.com",
        }
        result = ConfigFilter.scrub(data)
        assert result["client_secret"] == "***REDACTED***"
        assert result["private_key"] == "***REDACTED***"
        assert result["api_token"] == "***REDACTED***"
        assert result["credential_file"] == "***REDACTED***"
        assert result["authority"] == "https://login.microsoftonline.com"

    def test_references_stay_visible(self) -> None:
        data = {
            "password": "kv://automation-password",
            "encryption_key": "env://HC_KEY",
            "client_secret": "ENC://aes256/abc?iv=def",
        }
        assert ConfigFilter.scrub(data) == data

    def test_none_stays_visible(self) -> None:
        assert ConfigFilter.scrub({"password": None}) == {"password": None}

    def test_case_insensitive(self) -> None:
        result = ConfigFilter.scrub({"DB_PASSWORD": "secret"})
        assert result["DB_PASSWORD"] == "***REDACTED***"

    def test_nested_dict(self) -> None:
        result = ConfigFilter.scrub({"credentials": {"password": "secret", "username": "alice"}})
        assert result["credentials"] == {"password": "***REDACTED***", "username": "alice"}

    def test_list_with_dicts(self) -> None:
        result = ConfigFilter.scrub({"accounts": [{"password": "s1", "name": "a"}, "plain"]})
        assert result["accounts"] == [{"password": "***REDACTED***", "name": "a"}, "plain"]

    def test_custom_replacement(self) -> None:
        assert ConfigFilter.scrub({"password": "secret"}, replacement="[HIDDEN]") == {"password": "[HIDDEN]"}

    def test_input_not_mutated(self) -> None:
        data = {"password": "secret"}
        ConfigFilter.scrub(data)
        assert data == {"password": "secret"}
