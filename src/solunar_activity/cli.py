"""Solunar CLI: compute one day's periods and activity scores and journal the run."""

from __future__ import annotations

import argparse
import sys
import uuid
from datetime import date, datetime
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .astronomy.base import AstronomyProvider
from .astronomy.skyfield_provider import SkyfieldAstronomyProvider
from .calculator import SolunarCalculator
from .config import SLICE_MINUTE_CHOICES, Settings, load_settings
from .exceptions import (
    AstronomyProviderError,
    ConfigError,
    ExportError,
    InputDataError,
    JournalError,
)
from .export import export_all
from .inputs import load_modifier_weights, load_tide_events, load_weather_observations
from .journal import JournalWriter
from .log_setup import setup_logger
from .models import SolunarInput, SolunarResult
from .timezones import resolve_timezone

TIME_FORMAT = "%H:%M"


def parse_args() -> argparse.Namespace:
    """Parse solunar CLI arguments; unset values fall back to settings."""
    parser = argparse.ArgumentParser(
        description="Compute solunar periods and fish activity scores for one day."
    )
    parser.add_argument("--lat", type=float, default=None, help="Latitude in degrees.")
    parser.add_argument("--lon", type=float, default=None, help="Longitude in degrees.")
    parser.add_argument("--date", type=str, default=None, help="Target date (YYYY-MM-DD).")
    parser.add_argument("--timezone", type=str, default=None, help="IANA time zone name.")
    parser.add_argument(
        "--slice-minutes",
        type=int,
        choices=list(SLICE_MINUTE_CHOICES),
        default=None,
        help="Activity slice length in minutes.",
    )
    parser.add_argument("--weather-file", type=Path, default=None, help="Weather JSON file.")
    parser.add_argument("--tide-file", type=Path, default=None, help="Tide JSON file.")
    parser.add_argument("--weights-file", type=Path, default=None, help="Weights JSON file.")
    parser.add_argument("--no-csv", action="store_true", help="Skip CSV exports.")
    parser.add_argument(
        "--max-print",
        type=int,
        default=None,
        help="Number of activity rows to print.",
    )
    return parser.parse_args()


def _build_provider(settings: Settings) -> AstronomyProvider:
    return SkyfieldAstronomyProvider(settings.ephemeris_dir, settings.ephemeris_file)


def _resolve_date(args: argparse.Namespace, settings: Settings, timezone: str) -> date:
    if args.date:
        try:
            return date.fromisoformat(args.date)
        except ValueError as exc:
            raise InputDataError(f"Invalid --date {args.date!r}; expected YYYY-MM-DD.") from exc
    if settings.target_date is not None:
        return settings.target_date
    return datetime.now(resolve_timezone(timezone)).date()


def _build_request(args: argparse.Namespace, settings: Settings) -> SolunarInput:
    if args.max_print is not None and args.max_print <= 0:
        raise InputDataError("--max-print must be > 0 when provided.")

    lat = args.lat if args.lat is not None else settings.latitude
    lon = args.lon if args.lon is not None else settings.longitude
    if lat is None or lon is None:
        raise InputDataError(
            "Missing location input: pass --lat and --lon or set "
            "SOLUNAR_LATITUDE/SOLUNAR_LONGITUDE."
        )

    timezone = args.timezone or settings.timezone
    weather_path = args.weather_file or settings.weather_path
    tide_path = args.tide_file or settings.tide_path
    weights = (
        load_modifier_weights(args.weights_file)
        if args.weights_file is not None
        else settings.modifier_weights
    )

    try:
        return SolunarInput(
            latitude=lat,
            longitude=lon,
            target_date=_resolve_date(args, settings, timezone),
            timezone=timezone,
            slice_minutes=args.slice_minutes or settings.slice_minutes,
            weather_observations=load_weather_observations(weather_path),
            tide_events=load_tide_events(tide_path),
            weights=weights,
        )
    except ValidationError as exc:
        raise InputDataError(f"Invalid calculation input: {exc}") from exc


def _fmt(value: datetime | None) -> str:
    return value.strftime(TIME_FORMAT) if value is not None else "-"


def _print_result(console: Console, result: SolunarResult, max_print: int) -> None:
    console.print(
        f"Date={result.target_date.isoformat()} tz={result.timezone} "
        f"location=({result.location.latitude:.4f}, {result.location.longitude:.4f}) "
        f"phase={result.moon_phase.phase_name} "
        f"illumination={result.moon_phase.illumination:.0%} "
        f"rating={result.rating} avg={result.average_score:.2f}"
    )
    astro = result.astronomy
    console.print(
        f"Sunrise={_fmt(astro.sunrise_local)} sunset={_fmt(astro.sunset_local)} "
        f"solar_noon={_fmt(astro.sun_culmination_local)} "
        f"moonrise={_fmt(astro.moonrise_local)} moonset={_fmt(astro.moonset_local)}"
    )

    periods = [*result.major_periods, *result.minor_periods]
    if periods:
        table = Table(title="Solunar Periods (local)")
        table.add_column("Type")
        table.add_column("Start")
        table.add_column("Center")
        table.add_column("End")
        table.add_column("Minutes", justify="right")
        for period in periods:
            kind = "Major" if period.period_type.is_major else "Minor"
            table.add_row(
                f"{kind} {period.period_type.value.replace('_', ' ')}",
                _fmt(period.start_local),
                _fmt(period.center_local),
                _fmt(period.end_local),
                f"{period.duration_minutes:.0f}",
            )
        console.print(table)
    else:
        console.print("No solunar periods for this date.")

    table = Table(title="Activity")
    table.add_column("Time")
    table.add_column("Score", justify="right")
    breakdown = result.breakdown
    if breakdown:
        table.add_column("Solunar", justify="right")
        table.add_column("Bonus", justify="right")
        table.add_column("Weather", justify="right")
        table.add_column("Tide", justify="right")

    ranked = sorted(
        range(len(result.activity)), key=lambda i: (-result.activity[i].score, i)
    )[:max_print]
    for index in sorted(ranked):
        sample = result.activity[index]
        row = [f"{sample.hour:02d}:{sample.minute:02d}", str(sample.score)]
        if breakdown:
            item = breakdown[index]
            row += [
                f"{item.solunar_score:.1f}",
                f"{item.overlap_bonus:.0f}",
                f"{item.weather_modifier:+.1f}",
                f"{item.tide_modifier:+.1f}",
            ]
        table.add_row(*row)
    console.print(table)


def main() -> int:
    """Run one solunar calculation."""
    args = parse_args()
    session_id = uuid.uuid4().hex[:12]
    logger = setup_logger(session_id=session_id)
    console = Console()
    journal: JournalWriter | None = None

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2

    try:
        journal = JournalWriter(
            journal_dir=settings.journal_dir,
            output_dir=settings.output_dir,
            session_id=session_id,
        )
        journal.write_event(
            event_type="solunar_startup",
            payload={"config": settings.safe_summary()},
            metadata={"session_id": session_id},
        )
    except JournalError as exc:
        logger.error("Failed to initialize solunar journal: %s", exc)
        return 3

    exit_code = 0
    try:
        request = _build_request(args, settings)
        journal.write_event(
            "inputs_loaded",
            payload={
                "latitude": request.latitude,
                "longitude": request.longitude,
                "target_date": request.target_date.isoformat(),
                "timezone": request.timezone,
                "slice_minutes": request.slice_minutes,
                "weather_observations": len(request.weather_observations or []),
                "tide_events": len(request.tide_events or []),
                "custom_weights": request.weights is not None,
            },
            metadata={"session_id": session_id},
        )

        calculator = SolunarCalculator(_build_provider(settings), logger=logger)
        result = calculator.calculate(request)
        result_path = journal.write_result(result)

        export_paths: list[str] = []
        if settings.export_csv and not args.no_csv:
            export_paths = [str(path) for path in export_all(result, settings.output_dir)]

        journal.write_event(
            "calculation_summary",
            payload={
                "rating": result.rating,
                "average_score": result.average_score,
                "moon_phase": result.moon_phase.phase.value,
                "major_periods": len(result.major_periods),
                "minor_periods": len(result.minor_periods),
                "has_weather_modifiers": result.has_weather_modifiers,
                "has_tide_modifiers": result.has_tide_modifiers,
                "result_path": str(result_path),
                "csv_paths": export_paths,
            },
            metadata={"session_id": session_id},
        )

        max_print = args.max_print or settings.max_print
        _print_result(console, result=result, max_print=max_print)
    except (InputDataError, AstronomyProviderError, ExportError, JournalError) as exc:
        exit_code = 4
        logger.error("Solunar calculation failure: %s", exc)
        try:
            journal.write_event(
                "run_failure",
                payload={"error": str(exc), "type": type(exc).__name__},
                metadata={"session_id": session_id},
            )
        except JournalError:
            logger.error("Failed to write run_failure event.")
    except Exception as exc:  # pragma: no cover - defensive catch for CLI runtime
        exit_code = 99
        logger.exception("Unexpected solunar CLI failure: %s", exc)
        try:
            journal.write_event(
                "run_failure",
                payload={"error": str(exc), "type": type(exc).__name__, "unhandled": True},
                metadata={"session_id": session_id},
            )
        except JournalError:
            logger.error("Failed to write run_failure event.")
    finally:
        if journal is not None:
            try:
                journal.write_event(
                    "solunar_shutdown",
                    payload={"exit_code": exit_code},
                    metadata={"session_id": session_id},
                )
            except JournalError:
                logger.error("Failed to write solunar_shutdown event.")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
