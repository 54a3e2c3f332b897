"""Command-line entry point: forecast summaries, station normals and the API server."""

from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console
from rich.table import Table

from .config import Settings, load_settings
from .exceptions import ConfigError, InputValidationError, WeatherLabError
from .forecast import ForecastAggregator, ForecastOutcome, OpenWeatherForecastProvider
from .log_setup import setup_logger
from .normals import (
    DailyNormal,
    NormalsClient,
    NormalsSummary,
    filter_normals_by_date,
    summarize_normals,
    validate_normals_query,
)

EXIT_OK = 0
EXIT_CONFIG = 2
EXIT_PIPELINE = 4
EXIT_UNEXPECTED = 99


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="weather-lab",
        description="Daily forecast summaries and NOAA climate normals.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    forecast = subparsers.add_parser("forecast", help="Summarize the 5-day forecast for a city.")
    forecast.add_argument("city", help="City name, e.g. 'Akron' or 'Akron,US'.")
    forecast.add_argument(
        "--days",
        type=int,
        default=None,
        help="Number of days to summarize (1-5). Defaults to FORECAST_DEFAULT_DAYS.",
    )

    normals = subparsers.add_parser("normals", help="Summarize daily normals for a station.")
    normals.add_argument("station", help="Station identifier, e.g. USW00014820.")
    normals.add_argument("--start", default=None, help="Inclusive start date (YYYYMMDD).")
    normals.add_argument("--end", default=None, help="Inclusive end date (YYYYMMDD).")
    normals.add_argument(
        "--max-print",
        type=int,
        default=None,
        help="Number of records to print. Defaults to NORMALS_MAX_PRINT.",
    )

    serve = subparsers.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default=None, help="Bind host. Defaults to API_HOST.")
    serve.add_argument("--port", type=int, default=None, help="Bind port. Defaults to API_PORT.")

    return parser.parse_args(argv)


def _print_forecast(console: Console, outcome: ForecastOutcome) -> None:
    if not outcome.summaries:
        console.print(f"No forecast data returned for {outcome.city}.")
        return

    table = Table(title=f"Forecast for {outcome.city}")
    table.add_column("Date")
    table.add_column("Avg Temp (F)", justify="right")
    table.add_column("Rain chance", justify="right")
    for summary in outcome.summaries:
        table.add_row(
            summary.date,
            summary.avg_temp or "-",
            "-" if summary.pop is None else f"{summary.pop}%",
        )
    console.print(table)


def _fmt(value: float | None, digits: int = 1) -> str:
    return "-" if value is None else f"{value:.{digits}f}"


def _print_normals(
    console: Console,
    station: str,
    records: list[DailyNormal],
    summary: NormalsSummary,
    max_print: int,
) -> None:
    console.print(
        f"Station={station} records={summary.count} "
        f"mean={_fmt(summary.mean_of_mean_temp_f, 2)} "
        f"min={_fmt(summary.min_of_min_temp_f)} "
        f"max={_fmt(summary.max_of_max_temp_f)}"
    )
    if not records:
        console.print("No normals records in the requested range.")
        return

    table = Table(title=f"Daily Normals ({station})")
    table.add_column("Date")
    table.add_column("Mean (F)", justify="right")
    table.add_column("Min (F)", justify="right")
    table.add_column("Max (F)", justify="right")
    table.add_column("Precip (in)", justify="right")
    for record in records[:max_print]:
        table.add_row(
            record.date,
            _fmt(record.mean_temp_f),
            _fmt(record.min_temp_f),
            _fmt(record.max_temp_f),
            _fmt(record.precip_in, 2),
        )
    console.print(table)
    if len(records) > max_print:
        console.print(f"... {len(records) - max_print} more records not shown.")


def run_forecast(
    args: argparse.Namespace, settings: Settings, logger: logging.Logger, console: Console
) -> int:
    days = args.days if args.days is not None else settings.forecast_default_days
    with OpenWeatherForecastProvider(settings=settings, logger=logger) as provider:
        aggregator = ForecastAggregator(
            api_key=settings.openweather_api_key,
            provider=provider,
            logger=logger,
        )
        outcome = aggregator.forecast(args.city, days)

    if not outcome.ok:
        console.print(f"[red]{outcome.error}[/red]")
        return EXIT_CONFIG if outcome.error_kind == "config" else EXIT_PIPELINE
    _print_forecast(console, outcome)
    return EXIT_OK


def run_normals(
    args: argparse.Namespace, settings: Settings, logger: logging.Logger, console: Console
) -> int:
    if args.max_print is not None and args.max_print <= 0:
        raise InputValidationError("--max-print must be > 0 when provided.")
    station, start, end = validate_normals_query(args.station, args.start, args.end)

    with NormalsClient(settings=settings, logger=logger) as client:
        records = client.fetch_normals_for_station(station)
    filtered = filter_normals_by_date(records, start, end)
    summary = summarize_normals(filtered)

    max_print = args.max_print or settings.normals_max_print
    _print_normals(console, station, filtered, summary, max_print)
    return EXIT_OK


def run_serve(args: argparse.Namespace, settings: Settings) -> int:
    import uvicorn

    uvicorn.run(
        "weather_lab.api:create_app",
        factory=True,
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
    )
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Run one CLI command and return its exit code."""
    args = parse_args(argv)
    logger = setup_logger()
    console = Console()

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return EXIT_CONFIG
    logger.setLevel(settings.log_level)
    logger.debug("Loaded settings", extra={"context": settings.safe_summary()})

    try:
        if args.command == "forecast":
            return run_forecast(args, settings, logger, console)
        if args.command == "normals":
            return run_normals(args, settings, logger, console)
        return run_serve(args, settings)
    except WeatherLabError as exc:
        logger.error("%s failure: %s", args.command, exc)
        console.print(f"[red]{exc}[/red]")
        return EXIT_PIPELINE
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected %s failure: %s", args.command, exc)
        return EXIT_UNEXPECTED


if __name__ == "__main__":
    sys.exit(main())
