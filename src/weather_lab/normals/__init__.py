"""Climate normals pipeline: fetch, parse, filter and summarize."""

from .analysis import (
    MISSING_STATION_MESSAGE,
    filter_normals_by_date,
    summarize_normals,
    validate_normals_query,
)
from .client import NormalsClient, parse_normals_csv, parse_number
from .models import DailyNormal, NormalsResponse, NormalsSummary

__all__ = [
    "MISSING_STATION_MESSAGE",
    "DailyNormal",
    "NormalsClient",
    "NormalsResponse",
    "NormalsSummary",
    "filter_normals_by_date",
    "parse_normals_csv",
    "parse_number",
    "summarize_normals",
    "validate_normals_query",
]
