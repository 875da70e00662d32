"""Load and write analytics record files (.jsonl, one record per line)."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from graph_analytics.errors import ParseError
from graph_analytics.formats.analytics_record import AnalyticsRecord, GraphRecord

M = TypeVar("M", bound=BaseModel)


def load_records(path: str | Path) -> list[AnalyticsRecord]:
    """Load AnalyticsRecords from a JSON Lines file; blank lines are ignored."""
    return _load(path, AnalyticsRecord)


def load_graph_records(path: str | Path) -> list[GraphRecord]:
    """Load GraphRecords from a JSON Lines file."""
    return _load(path, GraphRecord)


def write_records(records: Iterable[BaseModel], path: str | Path) -> int:
    """Write records as JSON Lines and return how many were written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with path.open("w", encoding="utf-8") as f:
        for record in records:
            f.write(record.model_dump_json())
            f.write("\n")
            count += 1
    return count


def _load(path: str | Path, model: type[M]) -> list[M]:
    records: list[M] = []
    with Path(path).open(encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                records.append(model.model_validate_json(line))
            except ValidationError as e:
                raise ParseError(
                    f"{path}:{line_no}: invalid {model.__name__}: {e.error_count()} error(s)",
                    stage="load",
                    details={"line": line_no},
                ) from e
    return records
