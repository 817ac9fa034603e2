from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple
import logging
import math

from .hierarchy import DEFAULT_MAX_DEPTH, UnitDirectory, resolve_rollup_units
from .levels import score_to_level
from .records import RecordStore, select_records
from .scoring import FieldAverage, OverallScore, SectionAverage, aggregate
from .sections import SectionConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RollupOptions:
    max_depth: int = DEFAULT_MAX_DEPTH
    # Dropped after resolution; their own descendants are kept.
    excluded_units: FrozenSet[str] = frozenset()
    unit_weights: Mapping[str, float] = field(default_factory=dict)
    weighted_sections: bool = False


@dataclass(frozen=True)
class RollupResult:
    root_unit: str
    rollup_units: Tuple[str, ...]
    record_count: int
    field_averages: Tuple[FieldAverage, ...]
    section_averages: Tuple[SectionAverage, ...]
    overall: OverallScore

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root_unit": self.root_unit,
            "rollup_units": list(self.rollup_units),
            "record_count": self.record_count,
            "field_averages": [
                {"field_id": fa.field_id, "value": fa.value, "level": score_to_level(fa.value)}
                for fa in self.field_averages
            ],
            "section_averages": [
                {
                    "section_id": sa.section_id,
                    "value": sa.value,
                    "level": score_to_level(sa.value) if sa.value > 0 else None,
                }
                for sa in self.section_averages
            ],
            "overall": {
                "average": self.overall.average,
                "floored_score": self.overall.floored_score,
                "level": score_to_level(self.overall.average) if self.overall.average > 0 else None,
            },
        }


def _validate_options(root_unit: str, options: RollupOptions, config: SectionConfig) -> None:
    if root_unit in options.excluded_units:
        raise ValueError(f"The root unit {root_unit!r} cannot be excluded from its own rollup")
    for unit, w in options.unit_weights.items():
        if not _is_positive(w):
            raise ValueError(f"Weight for {unit!r} must be a positive number; got {w}")
    if options.weighted_sections:
        bad = [s.id for s in config.sections if not _is_positive(s.weight)]
        if bad:
            raise ValueError(f"Sections need positive weights for a weighted rollup: {bad}")


def _is_positive(weight: float) -> bool:
    w = float(weight)
    return math.isfinite(w) and w > 0


def run_rollup(
    root_unit: str,
    directory: Optional[UnitDirectory],
    store: RecordStore,
    config: SectionConfig,
    options: Optional[RollupOptions] = None,
) -> RollupResult:
    """Resolve the hierarchy under ``root_unit``, fetch its records once, and aggregate them."""
    opts = options or RollupOptions()
    _validate_options(root_unit, opts, config)

    all_units = directory.list_organizational_units() if directory is not None else []
    if not all_units:
        logger.warning("Hierarchy data unavailable; rolling up %s on its own", root_unit)

    units = resolve_rollup_units(root_unit, all_units, opts.max_depth)
    if opts.excluded_units:
        kept: List[str] = [u for u in units if u not in opts.excluded_units]
        logger.info("Excluded %d units from rollup of %s", len(units) - len(kept), root_unit)
        units = kept

    records = select_records(units, store)

    section_weights = None
    if opts.weighted_sections:
        section_weights = {s.id: s.weight for s in config.sections}
    fields, sections, overall = aggregate(records, config, opts.unit_weights, section_weights)

    return RollupResult(
        root_unit=root_unit,
        rollup_units=tuple(units),
        record_count=len(records),
        field_averages=tuple(fields),
        section_averages=tuple(sections),
        overall=overall,
    )
