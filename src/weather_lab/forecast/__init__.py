"""Forecast pipeline: provider fetch and per-day aggregation."""

from .aggregator import ForecastAggregator, group_entries_by_date, summarize_forecast
from .base import ForecastProvider
from .models import DailyForecastSummary, ForecastEntry, ForecastOutcome
from .openweather import OpenWeatherForecastProvider

__all__ = [
    "DailyForecastSummary",
    "ForecastAggregator",
    "ForecastEntry",
    "ForecastOutcome",
    "ForecastProvider",
    "OpenWeatherForecastProvider",
    "group_entries_by_date",
    "summarize_forecast",
]
