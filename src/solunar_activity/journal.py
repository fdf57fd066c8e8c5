"""Append-only JSONL run journal and JSON result snapshots."""

from __future__ import annotations

import json
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

from .exceptions import JournalError
from .models import SolunarResult


def _json_default(value: Any) -> Any:
    """Fallback serializer for non-JSON native values."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC).isoformat()
        return value.astimezone(UTC).isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Path):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def result_stem(result: SolunarResult) -> str:
    """Deterministic ``{lat}_{lon}_{date}`` stem shared by result files."""
    return (
        f"{result.location.latitude:g}_{result.location.longitude:g}_"
        f"{result.target_date.isoformat()}"
    )


class JournalWriter:
    """Writes event records to JSONL and calculation results to disk."""

    def __init__(self, journal_dir: Path, output_dir: Path, session_id: str) -> None:
        self.journal_dir = journal_dir
        self.output_dir = output_dir
        self.session_id = session_id
        self.journal_dir.mkdir(parents=True, exist_ok=True)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.events_path = self.journal_dir / f"{datetime.now(UTC):%Y%m%d}.jsonl"

    def write_event(
        self,
        event_type: str,
        payload: dict[str, Any],
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Append a single event record to the JSONL journal."""
        record: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "event_type": event_type,
            "session_id": self.session_id,
            "payload": payload,
            "metadata": metadata or {},
        }
        try:
            with self.events_path.open("a", encoding="utf-8") as fh:
                fh.write(json.dumps(record, default=_json_default))
                fh.write("\n")
        except (OSError, TypeError, ValueError) as exc:
            raise JournalError(f"Failed writing event journal: {exc}") from exc

    def write_result(self, result: SolunarResult) -> Path:
        """Write the full result as indented JSON and return the file path."""
        output_path = self.output_dir / f"solunar_{result_stem(result)}.json"
        try:
            with output_path.open("w", encoding="utf-8") as fh:
                json.dump(
                    result.model_dump(mode="json", exclude_none=True),
                    fh,
                    ensure_ascii=False,
                    indent=2,
                )
                fh.write("\n")
        except (OSError, TypeError, ValueError) as exc:
            raise JournalError(f"Failed writing result snapshot: {exc}") from exc
        return output_path
