"""
Static summary chart: the baseline/increase circle grid next to the
spontaneity breakdown (Yes / No / Unavailable) per year-scope.
"""

import math
from pathlib import Path
from typing import Sequence, Union

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
from loguru import logger
from matplotlib.patches import Circle, Patch

from processing.models import IncidentRecord

from .summary import circle_grid, spontaneity_by_year

GRID_COLORS = {"baseline": "#9e9e9e", "increase": "#c62828"}
SPONTANEITY_COLORS = {"Yes": "#c62828", "No": "#1565c0", "Unavailable": "#bdbdbd"}


def draw_circle_grid(ax, baseline: int, total: int, columns: int = 20) -> None:
    cells = circle_grid(baseline, total)
    rows = max(math.ceil(len(cells) / columns), 1)
    for i, cls in enumerate(cells):
        row, col = divmod(i, columns)
        ax.add_patch(Circle((col + 0.5, rows - row - 0.5), 0.4, color=GRID_COLORS[cls]))
    ax.set_xlim(0, columns)
    ax.set_ylim(0, rows)
    ax.set_aspect("equal")
    ax.set_axis_off()
    ax.legend(
        handles=[
            Patch(color=GRID_COLORS["baseline"], label=f"Baseline ({min(baseline, total)})"),
            Patch(color=GRID_COLORS["increase"], label=f"Increase ({max(total - baseline, 0)})"),
        ],
        loc="upper center",
        bbox_to_anchor=(0.5, 0),
        ncol=2,
        frameon=False,
    )


def draw_spontaneity_bars(ax, records: Sequence[IncidentRecord]) -> None:
    table = spontaneity_by_year(records)
    if table.empty:
        ax.text(0.5, 0.5, "No incidents recorded", ha="center", va="center")
        ax.set_axis_off()
        return

    table.index = [str(i) or "Unspecified" for i in table.index]
    table.plot(
        kind="bar",
        stacked=True,
        ax=ax,
        color=[SPONTANEITY_COLORS[c] for c in table.columns],
        edgecolor="white",
    )
    ax.set_xlabel("")
    ax.set_ylabel("Incidents")
    ax.set_title("Spontaneous mob?", fontsize=12)
    ax.tick_params(axis="x", rotation=0)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)


def create_summary_chart(
    records: Sequence[IncidentRecord],
    output_path: Union[str, Path],
    baseline: int = 38,
    total: int = 139,
    dpi: int = 150,
) -> bool:
    """Render the summary figure to ``output_path``. Returns success status."""
    logger.info("📊 Creating summary chart...")
    try:
        fig, (grid_ax, bar_ax) = plt.subplots(
            1, 2, figsize=(14, 6), gridspec_kw={"width_ratios": [3, 2]}
        )
        draw_circle_grid(grid_ax, baseline, total)
        grid_ax.set_title(f"{total} incidents vs. a baseline of {baseline}", fontsize=12)
        draw_spontaneity_bars(bar_ax, records)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        plt.savefig(output_path, bbox_inches="tight", dpi=dpi, facecolor="white")
        plt.close(fig)
        logger.success(f"  ✅ Summary chart saved: {output_path}")
        return True

    except Exception as e:
        logger.error(f"❌ Error creating summary chart: {e}")
        plt.close("all")
        return False
