# main.py
from __future__ import annotations

import json
from typing import List

import streamlit as st

from orgrollup.components.charts import radar_chart, section_chart_data
from orgrollup.config import get_settings
from orgrollup.core.hierarchy import JsonUnitDirectory
from orgrollup.core.levels import score_to_level
from orgrollup.core.records import JsonRecordStore
from orgrollup.core.rollup import RollupOptions, RollupResult, run_rollup
from orgrollup.core.sections import SectionConfig, load_section_config
from orgrollup.logging_setup import configure_logging


# ----------------------------
# Tables
# ----------------------------
def section_rows(config: SectionConfig, result: RollupResult) -> List[dict]:
    values = {sa.section_id: sa.value for sa in result.section_averages}
    rows = []
    for s in config.sections:
        v = values.get(s.id, 0.0)
        rows.append({
            "Section": s.name,
            "Average": v if v > 0 else None,
            "Level": score_to_level(v) if v > 0 else "No data",
        })
    return rows


def field_rows(config: SectionConfig, result: RollupResult) -> List[dict]:
    values = {fa.field_id: fa.value for fa in result.field_averages}
    rows = []
    for s in config.sections:
        for f in s.actual_fields():
            v = values.get(f.id)
            rows.append({
                "Section": s.name,
                "Field": f.label,
                "Average": v,
                "Level": score_to_level(v) if v is not None else "No data",
            })
    return rows


# ----------------------------
# Main app
# ----------------------------
def main():
    settings = get_settings()
    configure_logging(settings.log_level)

    st.set_page_config(page_title="Organizational Rollup", layout="wide")
    st.title("Organizational Assessment Rollup")
    st.caption("Averages every assessment in a unit and its sub-units. Levels use half-point boundaries.")

    config = load_section_config(settings.sections_path)
    directory = JsonUnitDirectory(settings.units_path)
    store = JsonRecordStore(settings.records_path, config.tracked_field_ids(), settings.unit_field)

    # Sidebar
    st.sidebar.header("Rollup")
    unit_names = sorted(u.name for u in directory.list_organizational_units())
    if unit_names:
        root_unit = st.sidebar.selectbox("Organization", unit_names)
    else:
        st.sidebar.info("No hierarchy data found. Rolling up a single unit.")
        root_unit = st.sidebar.text_input("Organization", "")
    max_depth = st.sidebar.slider("Levels below the organization", 0, 5, settings.default_max_depth)

    if not root_unit:
        st.info("Choose an organization to see its rollup.")
        return

    result = run_rollup(root_unit, directory, store, config, RollupOptions(max_depth=max_depth))

    c1, c2, c3 = st.columns(3)
    if result.overall.average > 0:
        c1.metric("Overall Score", result.overall.floored_score)
        c2.metric("Overall Average", f"{result.overall.average:.2f}")
        c3.metric("Level", score_to_level(result.overall.average))
    else:
        c1.metric("Overall Score", "No data")
        c2.metric("Records", result.record_count)
        c3.metric("Units", len(result.rollup_units))

    st.markdown("### Units in this rollup")
    st.write(", ".join(result.rollup_units))

    left, right = st.columns([1, 1])
    with left:
        st.markdown("### Section Averages")
        st.dataframe(section_rows(config, result), hide_index=True)

    with right:
        labels, vals = section_chart_data(config, result.section_averages)
        if labels and any(v > 0 for v in vals):
            st.pyplot(radar_chart(labels, vals))
        else:
            st.info("No assessment data for these units yet.")

    st.markdown("### Field Averages")
    st.dataframe(field_rows(config, result), hide_index=True)

    st.download_button(
        "Download JSON rollup",
        data=json.dumps(result.to_dict(), indent=2),
        file_name=f"rollup_{root_unit}.json",
        mime="application/json",
    )


if __name__ == "__main__":
    main()
