"""OpenWeatherMap provider request and normalization tests with mocked httpx."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from types import SimpleNamespace
from typing import Any

import httpx
import pytest
import respx

from weather_lab.exceptions import UnexpectedError, UpstreamError
from weather_lab.forecast import OpenWeatherForecastProvider

FORECAST_HOST = "owm.example.com"
FORECAST_PATH = "/data/2.5/forecast"
FORECAST_URL = f"https://{FORECAST_HOST}{FORECAST_PATH}"


def _make_settings(**overrides: Any) -> Any:
    defaults = {
        "forecast_url": FORECAST_URL,
        "http_timeout_seconds": 5.0,
        "http_user_agent": "weather-lab-tests/0.1",
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


@pytest.fixture
def provider() -> Iterator[OpenWeatherForecastProvider]:
    instance = OpenWeatherForecastProvider(
        settings=_make_settings(), logger=logging.getLogger("test.openweather")
    )
    yield instance
    instance.close()


@respx.mock
def test_fetch_entries_sends_imperial_query_and_normalizes(
    provider: OpenWeatherForecastProvider,
) -> None:
    route = respx.get(host=FORECAST_HOST, path=FORECAST_PATH).mock(
        return_value=httpx.Response(
            200,
            json={
                "cod": "200",
                "list": [
                    {"dt_txt": "2026-10-19 12:00:00", "main": {"temp": 61.3}, "pop": 0.2},
                    {"dt_txt": "2026-10-19 15:00:00", "main": {"temp": 63}, "pop": 0},
                ],
            },
        )
    )

    entries = provider.fetch_entries("Akron", "secret-key")

    assert route.called
    params = route.calls[0].request.url.params
    assert params["q"] == "Akron"
    assert params["units"] == "imperial"
    assert params["appid"] == "secret-key"
    assert route.calls[0].request.headers["user-agent"] == "weather-lab-tests/0.1"
    assert [e.timestamp for e in entries] == ["2026-10-19 12:00:00", "2026-10-19 15:00:00"]
    assert entries[0].temperature_f == 61.3
    assert entries[0].pop == 0.2
    assert entries[0].date == "2026-10-19"


@respx.mock
def test_entries_without_timestamp_are_skipped_and_missing_fields_are_none(
    provider: OpenWeatherForecastProvider,
) -> None:
    respx.get(host=FORECAST_HOST, path=FORECAST_PATH).mock(
        return_value=httpx.Response(
            200,
            json={
                "list": [
                    {"dt_txt": "2026-10-19 12:00:00", "main": {"temp": 50}},
                    {"dt_txt": "2026-10-19 15:00:00", "main": {}, "pop": 0.4},
                    {"dt_txt": "2026-10-19 18:00:00", "main": {"temp": "warm"}, "pop": True},
                    {"main": {"temp": 40}},
                    "garbage",
                ]
            },
        )
    )

    entries = provider.fetch_entries("Akron", "k")

    assert [e.timestamp for e in entries] == [
        "2026-10-19 12:00:00",
        "2026-10-19 15:00:00",
        "2026-10-19 18:00:00",
    ]
    assert (entries[0].temperature_f, entries[0].pop) == (50.0, None)
    assert (entries[1].temperature_f, entries[1].pop) == (None, 0.4)
    assert (entries[2].temperature_f, entries[2].pop) == (None, None)


@respx.mock
def test_non_success_status_raises_upstream_error_with_redacted_key(
    provider: OpenWeatherForecastProvider,
) -> None:
    respx.get(host=FORECAST_HOST, path=FORECAST_PATH).mock(
        return_value=httpx.Response(404, json={"cod": "404", "message": "city not found"})
    )

    with pytest.raises(UpstreamError, match="status 404") as excinfo:
        provider.fetch_entries("Atlantis", "secret-key")
    assert excinfo.value.status_code == 404
    assert "secret-key" not in str(excinfo.value)


@respx.mock
def test_non_json_body_raises_unexpected_error(provider: OpenWeatherForecastProvider) -> None:
    respx.get(host=FORECAST_HOST, path=FORECAST_PATH).mock(
        return_value=httpx.Response(200, text="<html>oops</html>")
    )

    with pytest.raises(UnexpectedError, match="non-JSON"):
        provider.fetch_entries("Akron", "k")


@respx.mock
def test_missing_list_raises_unexpected_error(provider: OpenWeatherForecastProvider) -> None:
    respx.get(host=FORECAST_HOST, path=FORECAST_PATH).mock(
        return_value=httpx.Response(200, json={"cod": "200"})
    )

    with pytest.raises(UnexpectedError, match="missing 'list'"):
        provider.fetch_entries("Akron", "k")


@respx.mock
def test_transport_error_raises_unexpected_error(provider: OpenWeatherForecastProvider) -> None:
    respx.get(host=FORECAST_HOST, path=FORECAST_PATH).mock(
        side_effect=httpx.ConnectError("connection refused")
    )

    with pytest.raises(UnexpectedError, match="request failed"):
        provider.fetch_entries("Akron", "k")
