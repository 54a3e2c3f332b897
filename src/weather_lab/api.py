"""HTTP API exposing the climate normals and forecast pipelines."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import Settings, load_settings
from .exceptions import InputValidationError
from .forecast import ForecastAggregator, OpenWeatherForecastProvider
from .log_setup import setup_logger
from .normals import (
    NormalsClient,
    NormalsResponse,
    filter_normals_by_date,
    summarize_normals,
    validate_normals_query,
)

NORMALS_FALLBACK_MESSAGE = "Failed to fetch climate normals"

_FORECAST_STATUS = {
    "config": 400,
    "validation": 400,
    "upstream": 502,
    "unexpected": 500,
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI app; settings are loaded from the environment when omitted."""
    settings = settings or load_settings()
    logger = setup_logger(level=settings.log_level)

    app = FastAPI(title="Climate Normals Explorer", version="0.1.0")
    app.state.settings = settings
    app.state.logger = logger

    @app.get("/api/normals")
    def get_normals(
        request: Request,
        station: str | None = None,
        startDate: str | None = None,  # noqa: N803 - query parameter name
        endDate: str | None = None,  # noqa: N803 - query parameter name
    ) -> JSONResponse:
        """Station normals filtered to a date range, with summary statistics."""
        app_settings: Settings = request.app.state.settings
        app_logger: logging.Logger = request.app.state.logger

        try:
            station_id, start, end = validate_normals_query(station, startDate, endDate)
        except InputValidationError as exc:
            return _error(400, str(exc))

        try:
            with NormalsClient(settings=app_settings, logger=app_logger) as client:
                records = client.fetch_normals_for_station(station_id)
            filtered = filter_normals_by_date(records, start, end)
            summary = summarize_normals(filtered)
        except Exception as exc:
            app_logger.exception("Normals request failed for station=%s", station_id)
            return _error(500, str(exc) or NORMALS_FALLBACK_MESSAGE)

        response = NormalsResponse(
            station=station_id,
            start_date=start,
            end_date=end,
            records=filtered,
            summary=summary,
        )
        payload = response.model_dump(mode="json", by_alias=True)
        if start is None:
            payload.pop("startDate")
        if end is None:
            payload.pop("endDate")
        return JSONResponse(status_code=200, content=payload)

    @app.get("/api/forecast")
    def get_forecast(request: Request, city: str = "", days: int | None = None) -> JSONResponse:
        """Daily forecast summaries for a city."""
        app_settings: Settings = request.app.state.settings
        app_logger: logging.Logger = request.app.state.logger
        requested_days = days if days is not None else app_settings.forecast_default_days

        with OpenWeatherForecastProvider(settings=app_settings, logger=app_logger) as provider:
            aggregator = ForecastAggregator(
                api_key=app_settings.openweather_api_key,
                provider=provider,
                logger=app_logger,
            )
            outcome = aggregator.forecast(city, requested_days)

        if not outcome.ok:
            return _error(_FORECAST_STATUS.get(outcome.error_kind or "", 500), outcome.error or "")
        return JSONResponse(
            status_code=200,
            content=outcome.model_dump(
                mode="json", by_alias=True, exclude={"error", "error_kind"}
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def _query_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
            for err in exc.errors()
        )
        return _error(400, f"Invalid request parameters: {details}")

    return app
