from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Protocol, Sequence, Union
import json
import logging

logger = logging.getLogger(__name__)

DEFAULT_UNIT_FIELD = "Organization"


class RecordFetchError(RuntimeError):
    """The record store could not return the requested records."""


@dataclass(frozen=True)
class AssessmentRecord:
    unit_name: str
    fields: Mapping[str, str] = field(default_factory=dict)


class RecordStore(Protocol):
    def fetch_records(self, unit_names: Sequence[str]) -> List[AssessmentRecord]:
        ...


def escape_filter_value(value: str) -> str:
    return value.replace("'", "''")


def build_unit_filter(unit_names: Sequence[str], unit_field: str = DEFAULT_UNIT_FIELD) -> str:
    """OData-style predicate matching any of the given units, e.g.
    ``Organization eq 'HR' or Organization eq 'O''Reilly Division'``.
    """
    if not unit_names:
        raise ValueError("At least one unit name is required to build a filter")
    return " or ".join(f"{unit_field} eq '{escape_filter_value(name)}'" for name in unit_names)


def record_from_row(
    row: Mapping[str, Any],
    field_ids: Iterable[str],
    unit_field: str = DEFAULT_UNIT_FIELD,
) -> AssessmentRecord:
    values: Dict[str, str] = {}
    for fid in field_ids:
        v = row.get(fid)
        if v is None:
            continue
        text = str(v).strip()
        if text:
            values[fid] = text
    return AssessmentRecord(unit_name=str(row.get(unit_field) or "").strip(), fields=values)


class FilterQueryRecordStore:
    """Record store over a list service queried with a filter expression.

    ``query`` receives the composed filter and returns raw rows; it is called
    once per fetch whatever the number of units.
    """

    def __init__(
        self,
        query: Callable[[str], List[Mapping[str, Any]]],
        field_ids: Sequence[str],
        unit_field: str = DEFAULT_UNIT_FIELD,
    ):
        self.query = query
        self.field_ids = list(field_ids)
        self.unit_field = unit_field

    def fetch_records(self, unit_names: Sequence[str]) -> List[AssessmentRecord]:
        expr = build_unit_filter(unit_names, self.unit_field)
        try:
            rows = self.query(expr)
        except Exception as exc:
            raise RecordFetchError(f"Record query failed for filter: {expr}") from exc
        return [record_from_row(r, self.field_ids, self.unit_field) for r in rows]


class JsonRecordStore:
    """Record store backed by a JSON snapshot: {"records": [{"Organization": ..., "<field>": ...}]}."""

    def __init__(
        self,
        path: Union[str, Path],
        field_ids: Sequence[str],
        unit_field: str = DEFAULT_UNIT_FIELD,
    ):
        self.path = Path(path)
        self.field_ids = list(field_ids)
        self.unit_field = unit_field

    def fetch_records(self, unit_names: Sequence[str]) -> List[AssessmentRecord]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as exc:
            raise RecordFetchError(f"Could not read records from {self.path}") from exc

        wanted = set(unit_names)
        out: List[AssessmentRecord] = []
        for row in raw.get("records", []):
            rec = record_from_row(row, self.field_ids, self.unit_field)
            if rec.unit_name in wanted:
                out.append(rec)
        return out


def select_records(rollup_units: Sequence[str], store: RecordStore) -> List[AssessmentRecord]:
    """Fetch every record for the rollup units in a single store call."""
    if not rollup_units:
        raise ValueError("rollup_units must contain at least the root unit")
    try:
        records = store.fetch_records(list(rollup_units))
    except Exception:
        logger.error("Record fetch failed for %d rollup units", len(rollup_units))
        raise
    logger.info("Fetched %d records for %d rollup units", len(records), len(rollup_units))
    return records
