from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple
import logging
import math

from .levels import level_to_score, round2
from .records import AssessmentRecord
from .sections import SectionConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldAverage:
    field_id: str
    value: float


@dataclass(frozen=True)
class SectionAverage:
    section_id: str
    value: float


@dataclass(frozen=True)
class OverallScore:
    average: float
    floored_score: int


def _weighted_mean(samples: Sequence[Tuple[float, float]]) -> float:
    total_weight = sum(w for _, w in samples)
    if total_weight <= 0:
        return 0.0
    return sum(v * w for v, w in samples) / total_weight


def compute_field_averages(
    records: Sequence[AssessmentRecord],
    config: SectionConfig,
    unit_weights: Optional[Mapping[str, float]] = None,
) -> List[FieldAverage]:
    """Mean score per tracked field over every record that answered it.

    Each record is one sample, so a unit with two records counts twice. Fields
    nobody answered get no entry at all.
    """
    weights = unit_weights or {}
    samples: Dict[str, List[Tuple[float, float]]] = {fid: [] for fid in config.tracked_field_ids()}
    for rec in records:
        w = float(weights.get(rec.unit_name, 1.0))
        for fid, values in samples.items():
            level = rec.fields.get(fid)
            if level is None or level == "":
                continue
            values.append((level_to_score(level), w))

    out: List[FieldAverage] = []
    for fid, values in samples.items():
        if values:
            out.append(FieldAverage(field_id=fid, value=round2(_weighted_mean(values))))
    return out


def compute_section_averages(
    field_averages: Sequence[FieldAverage],
    config: SectionConfig,
) -> List[SectionAverage]:
    by_field = {fa.field_id: fa.value for fa in field_averages}
    out: List[SectionAverage] = []
    for s in config.sections:
        vals = [by_field[f.id] for f in s.actual_fields() if f.id in by_field]
        value = round2(sum(vals) / len(vals)) if vals else 0.0
        out.append(SectionAverage(section_id=s.id, value=value))
    return out


def compute_overall_score(
    section_averages: Sequence[SectionAverage],
    section_weights: Optional[Mapping[str, float]] = None,
) -> OverallScore:
    """Average of the sections that have data, floored for the whole-number score.

    With ``section_weights`` the average is weighted; sections missing from the
    mapping weigh 1.0.
    """
    scored = [sa for sa in section_averages if sa.value > 0]
    if not scored:
        return OverallScore(average=0.0, floored_score=0)

    weights = section_weights or {}
    avg = round2(_weighted_mean([(sa.value, float(weights.get(sa.section_id, 1.0))) for sa in scored]))
    return OverallScore(average=avg, floored_score=int(math.floor(avg)))


def aggregate(
    records: Sequence[AssessmentRecord],
    config: SectionConfig,
    unit_weights: Optional[Mapping[str, float]] = None,
    section_weights: Optional[Mapping[str, float]] = None,
) -> Tuple[List[FieldAverage], List[SectionAverage], OverallScore]:
    fields = compute_field_averages(records, config, unit_weights)
    sections = compute_section_averages(fields, config)
    overall = compute_overall_score(sections, section_weights)
    logger.info(
        "Aggregated %d records: %d field averages, %d/%d sections with data, overall %.2f",
        len(records), len(fields), sum(1 for s in sections if s.value > 0), len(sections), overall.average,
    )
    return fields, sections, overall
