from pathlib import Path
from typing import List, Sequence

import pytest

from orgrollup.core.hierarchy import OrganizationalUnit
from orgrollup.core.records import AssessmentRecord
from orgrollup.core.sections import FieldSpec, SectionConfig, SectionSpec

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class RecordingStore:
    """In-memory record store that remembers every fetch."""

    def __init__(self, records: Sequence[AssessmentRecord] = ()):
        self.records = list(records)
        self.calls: List[List[str]] = []

    def fetch_records(self, unit_names):
        self.calls.append(list(unit_names))
        wanted = set(unit_names)
        return [r for r in self.records if r.unit_name in wanted]


class StaticDirectory:
    def __init__(self, units: Sequence[OrganizationalUnit] = ()):
        self.units = list(units)

    def list_organizational_units(self):
        return list(self.units)


@pytest.fixture
def config() -> SectionConfig:
    return SectionConfig(sections=(
        SectionSpec(
            id="S1",
            name="Section One",
            fields=(
                FieldSpec("H1", "Section One", is_header=True),
                FieldSpec("F1", "Field one"),
                FieldSpec("F2", "Field two"),
            ),
        ),
        SectionSpec(
            id="S2",
            name="Section Two",
            fields=(
                FieldSpec("H2", "Section Two", is_header=True),
                FieldSpec("F3", "Field three"),
            ),
            weight=3.0,
        ),
    ))


@pytest.fixture
def hr_units() -> List[OrganizationalUnit]:
    return [
        OrganizationalUnit("HR"),
        OrganizationalUnit("Recruiting", "HR"),
        OrganizationalUnit("Benefits", "HR"),
        OrganizationalUnit("Finance"),
    ]
