"""Group 3-hour forecast entries by date and reduce them to daily summaries."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from ..exceptions import ConfigError, InputValidationError, UpstreamError
from .base import ForecastProvider
from .models import DailyForecastSummary, ForecastEntry, ForecastOutcome

MIN_DAYS = 1
MAX_DAYS = 5

MISSING_KEY_MESSAGE = (
    "Missing API key. Please set OPENWEATHER_API_KEY in your environment or .env"
)
MISSING_CITY_MESSAGE = "Please enter a city name"
INVALID_DAYS_MESSAGE = f"Days must be between {MIN_DAYS} and {MAX_DAYS}"
FETCH_FAILED_MESSAGE = "Failed to fetch weather data"
UNEXPECTED_MESSAGE = "Unexpected error fetching weather data"


def group_entries_by_date(entries: Iterable[ForecastEntry]) -> dict[str, list[ForecastEntry]]:
    """Bucket entries by calendar date, keeping dates in encounter order."""
    daily: dict[str, list[ForecastEntry]] = {}
    for entry in entries:
        daily.setdefault(entry.date, []).append(entry)
    return daily


def _mean(values: list[float]) -> float | None:
    return sum(values) / len(values) if values else None


def _format_temp(value: float) -> str:
    return str(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _percent(fraction: float) -> int:
    return int(Decimal(fraction * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def summarize_forecast(entries: Iterable[ForecastEntry], days: int) -> list[DailyForecastSummary]:
    """Summarize the first ``days`` distinct dates.

    Dates are taken in the order the provider returned them and are not
    re-sorted. Each field is averaged over the entries that carry it; a date
    with no usable values for a field reports None for it.
    """
    daily = group_entries_by_date(entries)
    summaries: list[DailyForecastSummary] = []
    for date in list(daily)[:days]:
        bucket = daily[date]
        avg_temp = _mean([e.temperature_f for e in bucket if e.temperature_f is not None])
        avg_pop = _mean([e.pop for e in bucket if e.pop is not None])
        summaries.append(
            DailyForecastSummary(
                date=date,
                avg_temp=_format_temp(avg_temp) if avg_temp is not None else None,
                pop=_percent(avg_pop) if avg_pop is not None else None,
            )
        )
    return summaries


class ForecastAggregator:
    """Runs one forecast request and converts every failure into a message."""

    def __init__(
        self,
        api_key: str | None,
        provider: ForecastProvider,
        logger: logging.Logger,
    ) -> None:
        self._api_key = api_key
        self.provider = provider
        self.logger = logger

    def validate(self, city: str, days: int) -> tuple[str, str]:
        """Return ``(api_key, city)`` or raise before any request is made."""
        if not self._api_key or not self._api_key.strip():
            raise ConfigError(MISSING_KEY_MESSAGE)
        if not city or not city.strip():
            raise InputValidationError(MISSING_CITY_MESSAGE)
        if isinstance(days, bool) or not isinstance(days, int) or not (
            MIN_DAYS <= days <= MAX_DAYS
        ):
            raise InputValidationError(INVALID_DAYS_MESSAGE)
        return self._api_key.strip(), city.strip()

    def forecast(self, city: str, days: int) -> ForecastOutcome:
        try:
            api_key, city_name = self.validate(city, days)
        except ConfigError as exc:
            self.logger.error("Forecast configuration failure: %s", exc)
            return ForecastOutcome(city=city, days=days, error=str(exc), error_kind="config")
        except InputValidationError as exc:
            return ForecastOutcome(city=city, days=days, error=str(exc), error_kind="validation")

        try:
            entries = self.provider.fetch_entries(city_name, api_key)
            summaries = summarize_forecast(entries, days)
        except UpstreamError as exc:
            self.logger.error("Forecast fetch failure for city=%s: %s", city_name, exc)
            return ForecastOutcome(
                city=city_name, days=days, error=FETCH_FAILED_MESSAGE, error_kind="upstream"
            )
        except Exception as exc:
            self.logger.exception("Unexpected forecast failure for city=%s: %s", city_name, exc)
            return ForecastOutcome(
                city=city_name, days=days, error=UNEXPECTED_MESSAGE, error_kind="unexpected"
            )

        return ForecastOutcome(city=city_name, days=days, summaries=summaries)
