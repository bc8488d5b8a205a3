# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging
import re

from isbot import config
from isbot.config import DEFAULT_USER_AGENT, HttpSettings, IsbotSettings
from isbot.errors import FixtureError, InvalidPatternError, IsbotError
from isbot.log import resolve_log_level, setup_logging
from isbot.patterns import (
    ascii_lower,
    load_default_patterns,
    normalize_patterns,
    parse_patterns,
    read_default_patterns,
)


def test_ascii_lower_only_touches_ascii_letters():
    assert ascii_lower("GoogleBOT/2.1") == "googlebot/2.1"
    assert ascii_lower("ÄÖÜ-ABC") == "ÄÖÜ-abc"
    assert ascii_lower("İ") == "İ"
    assert ascii_lower("") == ""


def test_parse_patterns_skips_blank_lines_and_deduplicates():
    text = "Googlebot\n\n   \ngooglebot\r\nBingPreview/\n\t\n"
    assert parse_patterns(text) == {"googlebot", "bingpreview/"}
    assert parse_patterns("") == set()


def test_parse_patterns_keeps_inner_whitespace():
    assert parse_patterns("Google Favicon\n datadog agent") == {"google favicon", " datadog agent"}


def test_normalize_patterns_drops_blank_entries():
    assert normalize_patterns(["A", "", "  ", "a"]) == {"a"}


def test_bundled_patterns_are_normalized_and_valid():
    text = read_default_patterns()
    lines = [line for line in text.splitlines() if line.strip()]
    assert len(lines) > 100
    for line in lines:
        assert line == ascii_lower(line), line
        assert line == line.strip(), line
        re.compile(line)
    assert len(set(lines)) == len(lines)


def test_load_default_patterns_honours_settings():
    assert load_default_patterns(IsbotSettings(include_default_bots=False)) == ""
    assert load_default_patterns(IsbotSettings(include_default_bots=True)) == read_default_patterns()


def test_isbot_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("ISBOT_INCLUDE_DEFAULT_BOTS", "off")
    monkeypatch.setenv("ISBOT_FIXTURES_DIR", "/tmp/ua-fixtures")

    settings = config.load_settings()

    assert settings.include_default_bots is False
    assert settings.fixtures_dir == "/tmp/ua-fixtures"


def test_isbot_settings_defaults(monkeypatch):
    monkeypatch.delenv("ISBOT_INCLUDE_DEFAULT_BOTS", raising=False)
    monkeypatch.delenv("ISBOT_FIXTURES_DIR", raising=False)

    settings = config.load_settings()

    assert settings.include_default_bots is True
    assert settings.fixtures_dir == config.DEFAULT_FIXTURES_DIR


def test_include_default_bots_truthy_variants(monkeypatch):
    for value in ("1", "true", "YES", " on "):
        monkeypatch.setenv("ISBOT_INCLUDE_DEFAULT_BOTS", value)
        assert config.load_settings().include_default_bots is True
    for value in ("0", "false", "no", ""):
        monkeypatch.setenv("ISBOT_INCLUDE_DEFAULT_BOTS", value)
        assert config.load_settings().include_default_bots is False


def test_http_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("ISBOT_HTTP_TIMEOUT", "5.5")
    monkeypatch.setenv("ISBOT_HTTP_RETRIES", "0")
    monkeypatch.setenv("ISBOT_HTTP_BACKOFF", "1.5")
    monkeypatch.setenv("ISBOT_HTTP_INITIAL_DELAY", "0.1")
    monkeypatch.setenv("ISBOT_USER_AGENT", "CustomAgent/1.0")
    monkeypatch.setenv("ISBOT_HTTP_VERIFY_SSL", "0")

    settings = config.load_http_settings()

    assert settings.timeout == 5.5
    assert settings.max_retries == 0
    assert settings.backoff_factor == 1.5
    assert settings.initial_delay == 0.1
    assert settings.user_agent == "CustomAgent/1.0"
    assert settings.verify_ssl is False


def test_http_settings_invalid_env_fall_back(monkeypatch):
    monkeypatch.setenv("ISBOT_HTTP_TIMEOUT", "not-a-number")
    monkeypatch.setenv("ISBOT_HTTP_RETRIES", "ten")
    monkeypatch.setenv("ISBOT_HTTP_BACKOFF", "")
    monkeypatch.delenv("ISBOT_USER_AGENT", raising=False)

    settings = config.load_http_settings()

    assert settings.timeout == HttpSettings.timeout
    assert settings.max_retries == HttpSettings.max_retries
    assert settings.backoff_factor == HttpSettings.backoff_factor
    assert settings.user_agent == DEFAULT_USER_AGENT


def test_error_hierarchy():
    assert issubclass(InvalidPatternError, IsbotError)
    assert issubclass(InvalidPatternError, ValueError)
    assert issubclass(FixtureError, IsbotError)
    err = InvalidPatternError("bad", pattern="(x")
    assert err.pattern == "(x"
    assert str(err) == "bad"


def test_setup_logging_accepts_level_names(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    setup_logging("debug")
    setup_logging("not-a-level")

    assert calls[0]["level"] == logging.DEBUG
    assert calls[1]["level"] == logging.WARNING


def test_resolve_log_level_reads_environment(monkeypatch):
    monkeypatch.setenv("ISBOT_LOG_LEVEL", "info")
    assert resolve_log_level() == logging.INFO
    assert resolve_log_level("error") == logging.ERROR
    monkeypatch.delenv("ISBOT_LOG_LEVEL")
    assert resolve_log_level() == logging.WARNING


def test_setup_logging_quiets_httpx_request_logs(monkeypatch):
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: None)
    httpx_logger = logging.getLogger("httpx")
    monkeypatch.setattr(httpx_logger, "level", httpx_logger.level)

    assert setup_logging("info") == logging.INFO
    assert httpx_logger.level == logging.WARNING
    setup_logging("debug")
    assert httpx_logger.level == logging.DEBUG
