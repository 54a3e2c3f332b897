"""OpenWeatherMap 5-day / 3-hour forecast provider."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import Settings
from ..exceptions import UnexpectedError, UpstreamError
from ..redaction import sanitize_text
from .base import ForecastProvider
from .models import ForecastEntry


class OpenWeatherForecastProvider(ForecastProvider):
    """Fetches and normalizes forecast entries from api.openweathermap.org."""

    provider_name = "openweathermap"

    def __init__(self, settings: Settings, logger: logging.Logger) -> None:
        self.settings = settings
        self.logger = logger
        self._client = httpx.Client(
            timeout=settings.http_timeout_seconds,
            headers={
                "Accept": "application/json",
                "User-Agent": settings.http_user_agent,
            },
        )

    def __enter__(self) -> OpenWeatherForecastProvider:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch_entries(self, city: str, api_key: str) -> list[ForecastEntry]:
        """Fetch the 3-hour forecast list for a city in imperial units."""
        params = {"q": city, "units": "imperial", "appid": api_key}
        payload = self._request_json(self.settings.forecast_url, params=params)

        raw_entries = payload.get("list")
        if not isinstance(raw_entries, list):
            raise UnexpectedError("OpenWeatherMap forecast payload missing 'list' array.")

        entries: list[ForecastEntry] = []
        skipped = 0
        for item in raw_entries:
            entry = self._normalize_entry(item)
            if entry is None:
                skipped += 1
                continue
            entries.append(entry)
        if skipped:
            self.logger.warning(
                "Skipped %d malformed forecast entries for city=%s", skipped, city
            )
        self.logger.info("Fetched %d forecast entries for city=%s", len(entries), city)
        return entries

    def _request_json(self, url: str, params: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self._client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise UpstreamError(
                f"OpenWeatherMap forecast failed with status {status}: "
                f"{sanitize_text(exc.response.text[:300])}",
                source=self.provider_name,
                status_code=status,
            ) from exc
        except httpx.HTTPError as exc:
            raise UnexpectedError(
                f"OpenWeatherMap forecast request failed: {sanitize_text(str(exc))}"
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise UnexpectedError("OpenWeatherMap forecast returned non-JSON response.") from exc

        if not isinstance(payload, dict):
            raise UnexpectedError(
                "OpenWeatherMap forecast returned unexpected payload type "
                f"{type(payload).__name__}."
            )
        return payload

    def _normalize_entry(self, item: Any) -> ForecastEntry | None:
        if not isinstance(item, dict):
            return None
        timestamp = item.get("dt_txt")
        if not isinstance(timestamp, str) or not timestamp.strip():
            return None
        # Unusable temperature or pop values become None; the entry still counts
        # toward whichever field it does carry.
        main = item.get("main")
        temperature = self._as_float(main.get("temp")) if isinstance(main, dict) else None
        return ForecastEntry(
            timestamp=timestamp.strip(),
            temperature_f=temperature,
            pop=self._as_float(item.get("pop")),
        )

    @staticmethod
    def _as_float(value: Any) -> float | None:
        # bool is an int subclass; reject it explicitly.
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return float(value)
        return None
