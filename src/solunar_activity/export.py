"""CSV exports of a calculation result for spreadsheet analysis."""

from __future__ import annotations

import csv
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from .exceptions import ExportError
from .journal import result_stem
from .models import PeriodReport, SolunarResult

PEAK_SCORE = 80
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

PERIOD_LABELS = {
    "upper_transit": "Major - Upper Transit",
    "lower_transit": "Major - Lower Transit",
    "moonrise": "Minor - Moonrise",
    "moonset": "Minor - Moonset",
}


def _write_rows(path: Path, header: Sequence[str], rows: Iterable[Sequence[Any]]) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as fh:
            writer = csv.writer(fh)
            writer.writerow(header)
            writer.writerows(rows)
    except OSError as exc:
        raise ExportError(f"Failed writing CSV export {path}: {exc}") from exc
    return path


def _period_row(period: PeriodReport) -> list[Any]:
    return [
        PERIOD_LABELS[period.period_type.value],
        period.start_local.strftime(TIME_FORMAT),
        period.end_local.strftime(TIME_FORMAT),
        period.center_local.strftime(TIME_FORMAT),
        period.center_utc.strftime(TIME_FORMAT),
        f"{period.duration_minutes:.0f}",
    ]


def export_periods_csv(result: SolunarResult, output_dir: Path) -> Path:
    """Major then minor periods, local times plus the UTC center."""
    rows = [_period_row(period) for period in [*result.major_periods, *result.minor_periods]]
    return _write_rows(
        output_dir / f"solunar_periods_{result_stem(result)}.csv",
        ["period_type", "start_local", "end_local", "center_local", "center_utc", "duration_min"],
        rows,
    )


def export_activity_csv(result: SolunarResult, output_dir: Path) -> Path:
    """One row per slice; breakdown columns are added when modifiers were applied."""
    header = ["hour", "minute", "local_time", "utc_time", "score"]
    breakdown = result.breakdown or []
    if breakdown:
        header += ["solunar_score", "overlap_bonus", "weather_modifier", "tide_modifier"]

    rows: list[list[Any]] = []
    for index, sample in enumerate(result.activity):
        row: list[Any] = [
            sample.hour,
            sample.minute,
            sample.local_time.strftime(TIME_FORMAT),
            sample.utc_time.strftime(TIME_FORMAT),
            sample.score,
        ]
        if breakdown:
            item = breakdown[index]
            row += [
                f"{item.solunar_score:.2f}",
                f"{item.overlap_bonus:.2f}",
                f"{item.weather_modifier:.2f}",
                f"{item.tide_modifier:.2f}",
            ]
        rows.append(row)

    return _write_rows(output_dir / f"solunar_activity_{result_stem(result)}.csv", header, rows)


def _optional(value: Any, fmt: str) -> str:
    return format(value, fmt) if value is not None else ""


def summary_rows(result: SolunarResult) -> list[tuple[str, Any]]:
    """Property/value pairs describing the day."""
    scores = [sample.score for sample in result.activity]
    return [
        ("date", result.target_date.isoformat()),
        ("latitude", f"{result.location.latitude:.6f}"),
        ("longitude", f"{result.location.longitude:.6f}"),
        ("timezone", result.timezone),
        ("moon_phase", result.moon_phase.phase_name),
        ("moon_illumination", f"{result.moon_phase.illumination:.1%}"),
        ("moon_distance_km", _optional(result.astronomy.moon_distance_km, ".0f")),
        ("solar_noon_local", _optional(result.astronomy.sun_culmination_local, TIME_FORMAT)),
        ("rating", result.rating),
        ("weather_modifiers", result.has_weather_modifiers),
        ("tide_modifiers", result.has_tide_modifiers),
        ("average_score", f"{result.average_score:.2f}"),
        ("max_score", max(scores, default=0)),
        ("min_score", min(scores, default=0)),
        ("peak_slices", sum(1 for score in scores if score >= PEAK_SCORE)),
        ("major_periods", len(result.major_periods)),
        ("minor_periods", len(result.minor_periods)),
    ]


def export_summary_csv(result: SolunarResult, output_dir: Path) -> Path:
    return _write_rows(
        output_dir / f"solunar_summary_{result_stem(result)}.csv",
        ["property", "value"],
        summary_rows(result),
    )


def export_all(result: SolunarResult, output_dir: Path) -> list[Path]:
    """Write the periods, activity and summary CSVs and return their paths."""
    return [
        export_periods_csv(result, output_dir),
        export_activity_csv(result, output_dir),
        export_summary_csv(result, output_dir),
    ]
