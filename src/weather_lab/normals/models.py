"""Typed models for NOAA daily climate normals."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DailyNormal(BaseModel):
    """One parsed row of a station's daily normals CSV.

    Temperature and precipitation fields are ``None`` when the source cell was
    missing or not numeric.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    station: str
    date: str = Field(description="YYYYMMDD, zero-padded")
    mean_temp_f: float | None = Field(default=None, alias="meanTempF")
    min_temp_f: float | None = Field(default=None, alias="minTempF")
    max_temp_f: float | None = Field(default=None, alias="maxTempF")
    precip_in: float | None = Field(default=None, alias="precipIn")


class NormalsSummary(BaseModel):
    """Aggregate statistics over a set of daily normals."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    count: int = 0
    mean_of_mean_temp_f: float | None = Field(default=None, alias="meanOfMeanTempF")
    min_of_min_temp_f: float | None = Field(default=None, alias="minOfMinTempF")
    max_of_max_temp_f: float | None = Field(default=None, alias="maxOfMaxTempF")


class NormalsResponse(BaseModel):
    """Payload returned by the normals endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    station: str
    start_date: str | None = Field(default=None, alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")
    records: list[DailyNormal] = Field(default_factory=list)
    summary: NormalsSummary
