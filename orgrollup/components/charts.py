from __future__ import annotations
from typing import List, Sequence, Tuple
import math
import matplotlib.pyplot as plt

from orgrollup.core.levels import LEVELS
from orgrollup.core.scoring import SectionAverage
from orgrollup.core.sections import SectionConfig


def section_chart_data(
    config: SectionConfig, section_averages: Sequence[SectionAverage]
) -> Tuple[List[str], List[float]]:
    """Labels and values in config order; sections without data are plotted at 0 and tagged."""
    by_id = {sa.section_id: sa.value for sa in section_averages}
    labels: List[str] = []
    values: List[float] = []
    for s in config.sections:
        v = by_id.get(s.id, 0.0)
        labels.append(s.name if v > 0 else f"{s.name} (no data)")
        values.append(v)
    return labels, values


def radar_chart(labels: Sequence[str], values: Sequence[float]):
    """Polar plot of section averages with one ring per maturity level."""
    if len(labels) != len(values):
        raise ValueError("labels and values must match length")
    if not labels:
        raise ValueError("at least one section is required")

    step = 2 * math.pi / len(labels)
    theta = [i * step for i in range(len(labels))]

    fig, ax = plt.subplots(figsize=(6, 6), subplot_kw={"polar": True})
    ax.set_theta_zero_location("N")
    ax.set_theta_direction(-1)
    ax.set_xticks(theta)
    ax.set_xticklabels(list(labels))
    ax.set_ylim(0, len(LEVELS))
    ax.set_rgrids(range(1, len(LEVELS) + 1), labels=list(LEVELS), fontsize=7)

    ring = list(values) + [values[0]]
    ax.plot(theta + [theta[0]], ring, linewidth=2)
    ax.fill(theta + [theta[0]], ring, alpha=0.2)
    return fig
