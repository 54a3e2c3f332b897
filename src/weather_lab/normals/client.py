"""NOAA daily normals client: fetch a station CSV and parse it into records."""

from __future__ import annotations

import logging
import math
import re
from typing import Any

import httpx

from ..config import Settings
from ..exceptions import UnexpectedError, UpstreamError
from ..redaction import sanitize_text
from .models import DailyNormal

# Column layout of the per-station file: date, mean, max, min, precip.
CSV_COLUMNS = ("date", "mean", "max", "min", "precip")

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_NUMERIC_PREFIX_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_number(value: str | None) -> float | None:
    """Parse the leading numeric part of a cell, or return None.

    Mirrors how loosely-typed CSV consumers read cells: ``"45.2F"`` yields
    45.2, while ``""``, text without a leading number such as ``"N/A"``, and
    non-finite values yield None.
    """
    if value is None:
        return None
    match = _NUMERIC_PREFIX_RE.match(value.strip())
    if match is None:
        return None
    number = float(match.group(0))
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _cell(cells: list[str], index: int) -> str | None:
    if index < len(cells):
        return cells[index].strip()
    return None


def parse_normals_csv(station: str, csv_text: str) -> list[DailyNormal]:
    """Parse a station's normals CSV body into records, one per data line.

    Blank lines are dropped and a first line mentioning ``date`` is treated as
    a header. Rows never fail: unparseable numeric cells become None.
    """
    lines = [line for line in _LINE_SPLIT_RE.split(csv_text) if line.strip()]
    if not lines:
        return []
    if "date" in lines[0].lower():
        lines = lines[1:]

    records: list[DailyNormal] = []
    for line in lines:
        cells = line.split(",")
        row = {name: _cell(cells, idx) for idx, name in enumerate(CSV_COLUMNS)}
        records.append(
            DailyNormal(
                station=station,
                date=row["date"] or "",
                mean_temp_f=parse_number(row["mean"]),
                max_temp_f=parse_number(row["max"]),
                min_temp_f=parse_number(row["min"]),
                precip_in=parse_number(row["precip"]),
            )
        )
    return records


class NormalsClient:
    """Fetches per-station daily normals files from the NOAA object store."""

    source_name = "noaa-normals"

    def __init__(self, settings: Settings, logger: logging.Logger) -> None:
        self.settings = settings
        self.logger = logger
        self._base_url = str(settings.normals_base_url).rstrip("/")
        self._client = httpx.Client(
            timeout=settings.http_timeout_seconds,
            headers={"User-Agent": settings.http_user_agent},
        )

    def __enter__(self) -> NormalsClient:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def station_url(self, station: str) -> str:
        return f"{self._base_url}/{station}.csv"

    def fetch_normals_for_station(self, station: str) -> list[DailyNormal]:
        """Download and parse the full normals dataset for one station."""
        csv_text = self._request_text(self.station_url(station), station=station)
        records = parse_normals_csv(station, csv_text)
        self.logger.info("Parsed %d normals records for station=%s", len(records), station)
        return records

    def _request_text(self, url: str, station: str) -> str:
        try:
            response = self._client.get(url)
        except httpx.HTTPError as exc:
            raise UnexpectedError(
                f"NOAA normals request failed for station {station}: {sanitize_text(str(exc))}"
            ) from exc

        if response.status_code >= 400:
            raise UpstreamError(
                f"HTTP {response.status_code} from NOAA for station {station}",
                source=self.source_name,
                status_code=response.status_code,
            )
        return response.text
