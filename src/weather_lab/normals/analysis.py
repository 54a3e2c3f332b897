"""Pure filtering and aggregation over parsed daily normals."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from ..exceptions import InputValidationError
from .models import DailyNormal, NormalsSummary

STATION_RE = re.compile(r"^[A-Za-z0-9_-]+$")
DATE_RE = re.compile(r"^\d{8}$")

MISSING_STATION_MESSAGE = "Missing or invalid 'station' parameter"


def validate_normals_query(
    station: str | None,
    start_date: str | None,
    end_date: str | None,
) -> tuple[str, str | None, str | None]:
    """Normalize a station id and optional date bounds.

    Raises InputValidationError for a missing or unsafe station id, or for a
    bound that is not an 8-digit ``YYYYMMDD`` string. Empty bounds become None.
    """
    if station is None or not station.strip() or not STATION_RE.match(station.strip()):
        raise InputValidationError(MISSING_STATION_MESSAGE)

    bounds: list[str | None] = []
    for name, value in (("startDate", start_date), ("endDate", end_date)):
        if value is None or value == "":
            bounds.append(None)
            continue
        if not DATE_RE.match(value):
            raise InputValidationError(f"Invalid '{name}' parameter; expected YYYYMMDD")
        bounds.append(value)
    return station.strip(), bounds[0], bounds[1]


def filter_normals_by_date(
    records: Iterable[DailyNormal],
    start_date: str | None = None,
    end_date: str | None = None,
) -> list[DailyNormal]:
    """Keep records whose date lies in the inclusive ``[start_date, end_date]`` range.

    Dates are compared as plain strings. That ordering is only chronological
    for fixed-width, zero-padded ``YYYYMMDD`` values, which both the NOAA files
    and the HTTP layer guarantee. A missing or empty bound is unconstrained.
    """
    filtered = list(records)
    if start_date:
        filtered = [r for r in filtered if r.date >= start_date]
    if end_date:
        filtered = [r for r in filtered if r.date <= end_date]
    return filtered


def summarize_normals(records: Sequence[DailyNormal]) -> NormalsSummary:
    """Count records and aggregate the temperature fields that are present."""
    means = [r.mean_temp_f for r in records if r.mean_temp_f is not None]
    mins = [r.min_temp_f for r in records if r.min_temp_f is not None]
    maxes = [r.max_temp_f for r in records if r.max_temp_f is not None]

    return NormalsSummary(
        count=len(records),
        mean_of_mean_temp_f=sum(means) / len(means) if means else None,
        min_of_min_temp_f=min(mins) if mins else None,
        max_of_max_temp_f=max(maxes) if maxes else None,
    )
