"""
Tests for the Environment Overlay.

- TestEnvNameToKey: SECTION_FIELD naming to dotted keys
- TestLoadEnv: prefix filtering, raw string capture, aliases
"""

from __future__ import annotations

import pytest

from dmarc_viewer.config.env_loader import env_name_to_key, load_env


class TestEnvNameToKey:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("IMAP_HOST", "imap.host"),
            ("IMAP_PORT", "imap.port"),
            ("IMAP_USE_TLS", "imap.use_tls"),
            ("DATABASE_PATH", "database.path"),
            ("WEB_PORT", "web.port"),
            ("SYNC_ON_STARTUP", "sync.on_startup"),
            ("LOGGING_LEVEL", "logging.level"),
            ("LOG_LEVEL", "logging.level"),
            ("LOG_FORMAT", "logging.format"),
        ],
    )
    def test_known_names(self, name: str, expected: str) -> None:
        assert env_name_to_key(name) == expected

    def test_unknown_section_falls_back_to_naive_split(self) -> None:
        assert env_name_to_key("SMTP_RELAY_HOST") == "smtp.relay.host"


class TestLoadEnv:
    def test_collects_prefixed_variables_as_strings(self) -> None:
        environ = {
            "DMARC_IMAP_HOST": "imap.env.com",
            "DMARC_IMAP_PORT": "1993",
            "DMARC_IMAP_USE_TLS": "false",
        }
        assert load_env("DMARC_", environ) == {
            "imap.host": "imap.env.com",
            "imap.port": "1993",
            "imap.use_tls": "false",
        }

    def test_ignores_variables_without_prefix(self) -> None:
        environ = {"IMAP_HOST": "nope", "HOME": "/root", "OTHER_DMARC_IMAP_HOST": "nope"}
        assert load_env("DMARC_", environ) == {}

    def test_empty_values_are_unset(self) -> None:
        assert load_env("DMARC_", {"DMARC_IMAP_HOST": ""}) == {}

    def test_unknown_variables_are_kept_for_the_merge_engine(self) -> None:
        assert load_env("DMARC_", {"DMARC_IMAP_HOSTNAME": "x"}) == {"imap.hostname": "x"}

    def test_canonical_name_beats_alias(self) -> None:
        environ = {"DMARC_LOG_LEVEL": "debug", "DMARC_LOGGING_LEVEL": "error"}
        assert load_env("DMARC_", environ) == {"logging.level": "error"}

    def test_alias_alone_is_applied(self) -> None:
        assert load_env("DMARC_", {"DMARC_LOG_LEVEL": "debug"}) == {"logging.level": "debug"}

    def test_custom_prefix(self) -> None:
        assert load_env("TEST_", {"TEST_WEB_HOST": "0.0.0.0"}) == {"web.host": "0.0.0.0"}

    def test_reads_process_environment_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DMARCTEST_WEB_PORT", "9090")
        assert load_env("DMARCTEST_") == {"web.port": "9090"}
