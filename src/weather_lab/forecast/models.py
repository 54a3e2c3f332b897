"""Typed models for 3-hour forecast entries and their daily summaries."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ForecastEntry(BaseModel):
    """Single 3-hour forecast observation from the provider."""

    model_config = ConfigDict(frozen=True)

    timestamp: str = Field(description="Provider timestamp, 'YYYY-MM-DD HH:MM:SS'")
    temperature_f: float | None = None
    pop: float | None = Field(
        default=None, description="Precipitation probability as a 0-1 fraction"
    )

    @property
    def date(self) -> str:
        """Calendar date portion of the timestamp."""
        return self.timestamp.split(" ", 1)[0]


class DailyForecastSummary(BaseModel):
    """Per-date average temperature and precipitation chance."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date: str
    avg_temp: str | None = Field(
        default=None, alias="avgTemp", description="Mean temperature in F, one decimal place"
    )
    pop: int | None = Field(
        default=None, description="Mean precipitation probability as a 0-100 percentage"
    )


class ForecastOutcome(BaseModel):
    """Result of one forecast request: summaries on success, a message on failure."""

    city: str
    days: int
    summaries: list[DailyForecastSummary] = Field(default_factory=list)
    error: str | None = None
    error_kind: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
