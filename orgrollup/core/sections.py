from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Set, Tuple, Union
import json
import math


@dataclass(frozen=True)
class FieldSpec:
    id: str
    label: str
    is_header: bool = False


@dataclass(frozen=True)
class SectionSpec:
    id: str
    name: str
    fields: Tuple[FieldSpec, ...]
    weight: float = 1.0

    def actual_fields(self) -> Tuple[FieldSpec, ...]:
        return tuple(f for f in self.fields if not f.is_header)


@dataclass(frozen=True)
class SectionConfig:
    """Which fields belong to which section, and which are header placeholders."""

    sections: Tuple[SectionSpec, ...]

    def tracked_field_ids(self) -> List[str]:
        return [f.id for s in self.sections for f in s.actual_fields()]

    def header_field_ids(self) -> List[str]:
        return [f.id for s in self.sections for f in s.fields if f.is_header]


def build_section_config(raw: dict) -> SectionConfig:
    sections: List[SectionSpec] = []
    section_ids: Set[str] = set()
    field_ids: Set[str] = set()
    for s in raw.get("sections", []):
        sid = s["id"]
        if sid in section_ids:
            raise ValueError(f"Duplicate section id: {sid}")
        section_ids.add(sid)

        fields: List[FieldSpec] = []
        for f in s.get("fields", []):
            fid = f["id"]
            if fid in field_ids:
                raise ValueError(f"Field {fid} appears in more than one place")
            field_ids.add(fid)
            fields.append(FieldSpec(id=fid, label=str(f.get("label", fid)), is_header=bool(f.get("header", False))))

        weight = float(s.get("weight", 1.0))
        if not math.isfinite(weight) or weight <= 0:
            raise ValueError(f"Section {sid} must have a positive weight; got {weight}")
        sections.append(SectionSpec(id=sid, name=str(s.get("name", sid)), fields=tuple(fields), weight=weight))

    return SectionConfig(sections=tuple(sections))


def load_section_config(path: Union[str, Path]) -> SectionConfig:
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    return build_section_config(raw)


def get_section_by_id(config: SectionConfig, section_id: str) -> Optional[SectionSpec]:
    for s in config.sections:
        if s.id == section_id:
            return s
    return None
