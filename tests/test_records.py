import json

import pytest

from orgrollup.core.records import (
    AssessmentRecord,
    FilterQueryRecordStore,
    JsonRecordStore,
    RecordFetchError,
    build_unit_filter,
    escape_filter_value,
    record_from_row,
    select_records,
)

from conftest import RecordingStore


def test_escape_doubles_apostrophes():
    assert escape_filter_value("O'Reilly Division") == "O''Reilly Division"
    assert escape_filter_value("Plain") == "Plain"


def test_filter_escapes_every_unit():
    expr = build_unit_filter(["HR", "O'Reilly Division"])
    assert expr == "Organization eq 'HR' or Organization eq 'O''Reilly Division'"


def test_filter_custom_field():
    assert build_unit_filter(["HR"], unit_field="Org") == "Org eq 'HR'"


def test_filter_requires_units():
    with pytest.raises(ValueError):
        build_unit_filter([])


def test_record_from_row_drops_absent_and_untracked():
    row = {"Organization": "HR", "F1": "Optimal", "F2": None, "F3": "  ", "Extra": "Beginning"}
    rec = record_from_row(row, ["F1", "F2", "F3"])
    assert rec == AssessmentRecord("HR", {"F1": "Optimal"})


def test_filter_store_queries_once_with_escaped_filter():
    seen = []

    def query(expr):
        seen.append(expr)
        return [
            {"Organization": "O'Reilly Division", "F1": "Optimal"},
            {"Organization": "HR", "F1": "Beginning"},
        ]

    store = FilterQueryRecordStore(query, ["F1"])
    records = store.fetch_records(["HR", "Benefits", "O'Reilly Division"])
    assert len(seen) == 1
    assert "'O''Reilly Division'" in seen[0]
    assert "'O'Reilly" not in seen[0]
    assert [r.unit_name for r in records] == ["O'Reilly Division", "HR"]


def test_filter_store_wraps_query_failure():
    def query(expr):
        raise ConnectionError("list service unavailable")

    store = FilterQueryRecordStore(query, ["F1"])
    with pytest.raises(RecordFetchError) as exc_info:
        store.fetch_records(["HR"])
    assert isinstance(exc_info.value.__cause__, ConnectionError)


def test_json_store_filters_by_unit(tmp_path):
    path = tmp_path / "records.json"
    path.write_text(json.dumps({"records": [
        {"Organization": "HR", "F1": "Optimal"},
        {"Organization": "Finance", "F1": "Beginning"},
        {"Organization": "Recruiting", "F1": "Developing"},
    ]}), encoding="utf-8")
    store = JsonRecordStore(path, ["F1"])
    records = store.fetch_records(["HR", "Recruiting"])
    assert [r.unit_name for r in records] == ["HR", "Recruiting"]


def test_json_store_missing_file_is_fetch_error(tmp_path):
    store = JsonRecordStore(tmp_path / "missing.json", ["F1"])
    with pytest.raises(RecordFetchError):
        store.fetch_records(["HR"])


def test_select_records_single_fetch():
    store = RecordingStore([AssessmentRecord("HR", {"F1": "Optimal"}), AssessmentRecord("Benefits", {})])
    records = select_records(["HR", "Recruiting", "Benefits"], store)
    assert len(store.calls) == 1
    assert store.calls[0] == ["HR", "Recruiting", "Benefits"]
    assert len(records) == 2


def test_select_records_empty_result_is_not_an_error():
    assert select_records(["HR"], RecordingStore()) == []


def test_select_records_rejects_empty_units():
    with pytest.raises(ValueError):
        select_records([], RecordingStore())


def test_select_records_propagates_failure():
    class Broken:
        def fetch_records(self, unit_names):
            raise RecordFetchError("boom")

    with pytest.raises(RecordFetchError):
        select_records(["HR"], Broken())
