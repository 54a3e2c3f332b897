"""Settings validation, redaction and JSON log formatting tests."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from weather_lab.config import Settings, load_settings
from weather_lab.exceptions import ConfigError
from weather_lab.log_setup import JsonConsoleFormatter, setup_logger
from weather_lab.redaction import REDACTED, sanitize_for_logging, sanitize_text


def test_defaults_load_without_credential(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)
    settings = Settings(_env_file=None)

    assert settings.openweather_api_key is None
    assert settings.forecast_url == "https://api.openweathermap.org/data/2.5/forecast"
    assert str(settings.normals_base_url).startswith("https://noaa-normals-pds")
    assert settings.forecast_default_days == 4


def test_empty_api_key_parses_as_none(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENWEATHER_API_KEY", "  ")
    assert Settings(_env_file=None).openweather_api_key is None


def test_api_key_is_hidden_from_repr_and_summary(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENWEATHER_API_KEY", "super-secret")
    settings = Settings(_env_file=None)

    assert "super-secret" not in repr(settings)
    assert "super-secret" not in json.dumps(settings.safe_summary())
    assert settings.safe_summary()["forecast_credential_configured"] is True


def test_base_url_override_is_joined_with_endpoint(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENWEATHER_BASE_URL", "https://owm.example.com/")
    assert Settings(_env_file=None).forecast_url == "https://owm.example.com/data/2.5/forecast"


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("FORECAST_DEFAULT_DAYS", "6"),
        ("HTTP_TIMEOUT_SECONDS", "0"),
        ("NORMALS_MAX_PRINT", "0"),
        ("OPENWEATHER_FORECAST_ENDPOINT", "data/2.5/forecast"),
        ("API_PORT", "70000"),
    ],
)
def test_invalid_values_raise_config_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path, name: str, value: str
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError, match="Invalid configuration"):
        load_settings()


def test_sanitize_text_redacts_query_credentials() -> None:
    url = "https://api.openweathermap.org/data/2.5/forecast?q=Akron&units=imperial&appid=abc123"
    sanitized = sanitize_text(f"Client error for url '{url}'")

    assert "abc123" not in sanitized
    assert f"appid={REDACTED}" in sanitized
    assert "q=Akron" in sanitized


def test_sanitize_for_logging_redacts_sensitive_keys() -> None:
    payload = {"appid": "abc", "nested": [{"api_key": "xyz", "city": "Akron"}]}
    assert sanitize_for_logging(payload) == {
        "appid": REDACTED,
        "nested": [{"api_key": REDACTED, "city": "Akron"}],
    }


def test_json_formatter_redacts_message_and_exception() -> None:
    formatter = JsonConsoleFormatter()
    try:
        raise RuntimeError("failed GET /forecast?appid=abc123")
    except RuntimeError:
        exc_info = sys.exc_info()
    record = logging.LogRecord(
        name="weather_lab",
        level=logging.ERROR,
        pathname=__file__,
        lineno=1,
        msg="request to %s failed",
        args=("/forecast?q=Akron&appid=abc123",),
        exc_info=exc_info,
    )

    event = json.loads(formatter.format(record))
    assert event["level"] == "ERROR"
    assert event["logger"] == "weather_lab"
    assert "abc123" not in event["message"]
    assert "abc123" not in event["exception"]


def test_json_formatter_includes_sanitized_context() -> None:
    formatter = JsonConsoleFormatter()
    record = logging.LogRecord(
        name="weather_lab",
        level=logging.DEBUG,
        pathname=__file__,
        lineno=1,
        msg="Loaded settings",
        args=(),
        exc_info=None,
    )
    record.context = {"forecast_url": "https://x.example.com/f?appid=abc", "api_key": "abc"}

    event = json.loads(formatter.format(record))
    assert event["context"] == {
        "forecast_url": f"https://x.example.com/f?appid={REDACTED}",
        "api_key": REDACTED,
    }


def test_setup_logger_attaches_one_handler_and_updates_level() -> None:
    name = "weather_lab.tests.setup"
    first = setup_logger(name, logging.INFO)
    second = setup_logger(name, "DEBUG")

    assert first is second
    assert len(second.handlers) == 1
    assert isinstance(second.handlers[0].formatter, JsonConsoleFormatter)
    assert second.level == logging.DEBUG
    assert second.propagate is False
