from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol, Set, Union
import json
import logging

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 2


@dataclass(frozen=True)
class OrganizationalUnit:
    name: str
    parent_name: Optional[str] = None


class UnitDirectory(Protocol):
    def list_organizational_units(self) -> List[OrganizationalUnit]:
        ...


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def units_from_rows(
    rows: Iterable[Dict[str, Any]],
    name_field: str = "Title",
    parent_field: str = "ParentOrganization",
) -> List[OrganizationalUnit]:
    """Map raw directory rows to units. Rows without a name are skipped."""
    out: List[OrganizationalUnit] = []
    for row in rows:
        name = _clean(row.get(name_field))
        if name is None:
            continue
        out.append(OrganizationalUnit(name=name, parent_name=_clean(row.get(parent_field))))
    return out


class JsonUnitDirectory:
    """Unit directory backed by a JSON snapshot: {"units": [{"name": ..., "parent": ...}]}."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def list_organizational_units(self) -> List[OrganizationalUnit]:
        if not self.path.exists():
            logger.warning("No hierarchy data at %s; rollups fall back to single-unit mode", self.path)
            return []
        with open(self.path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        units = units_from_rows(raw.get("units") or [], name_field="name", parent_field="parent")
        if not units:
            logger.warning("No hierarchy data in %s; rollups fall back to single-unit mode", self.path)
        return units


def resolve_rollup_units(
    root_unit: str,
    all_units: Optional[Iterable[OrganizationalUnit]],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> List[str]:
    """Root unit followed by its descendants, breadth-first, at most ``max_depth`` levels down.

    A unit is collected at most once, so self- or mutually-referencing parents
    stop at the first repeat; the depth bound truncates everything else.
    """
    if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 0:
        raise ValueError(f"max_depth must be a non-negative integer; got {max_depth!r}")

    children: Dict[str, List[str]] = {}
    for u in all_units or []:
        if u.parent_name is not None:
            children.setdefault(u.parent_name, []).append(u.name)

    out: List[str] = [root_unit]
    seen: Set[str] = {root_unit}
    frontier = [root_unit]
    depth = 0
    while frontier and depth < max_depth:
        next_level: List[str] = []
        for parent in frontier:
            for child in children.get(parent, []):
                if child in seen:
                    continue
                seen.add(child)
                out.append(child)
                next_level.append(child)
        frontier = next_level
        depth += 1

    if len(out) == 1:
        logger.info("No descendants found for %s; rolling up the unit alone", root_unit)
    else:
        logger.info("Resolved %d rollup units under %s (max_depth=%d)", len(out), root_unit, max_depth)
    return out
