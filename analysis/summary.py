"""
Record-set summaries for the textual overview and the summary chart.
"""

from dataclasses import asdict, fields
from typing import Dict, List, Optional, Sequence

import pandas as pd
from loguru import logger

from processing.models import IncidentRecord, Spontaneity

SPONTANEITY_LABELS = [s.label for s in Spontaneity]


def records_to_frame(records: Sequence[IncidentRecord]) -> pd.DataFrame:
    """Tabular view of the record set, with the spontaneity label as a column."""
    rows = []
    for record in records:
        row = asdict(record)
        row["spontaneous"] = record.spontaneity_label
        rows.append(row)

    columns = [f.name for f in fields(IncidentRecord)]
    return pd.DataFrame(rows, columns=columns)


def year_counts(records: Sequence[IncidentRecord]) -> Dict[str, int]:
    """Incident count per year-scope, ordered by year-scope."""
    df = records_to_frame(records)
    if df.empty:
        return {}
    counts = df["year_sheet"].value_counts().sort_index()
    return {str(k): int(v) for k, v in counts.items()}


def spontaneity_by_year(records: Sequence[IncidentRecord]) -> pd.DataFrame:
    """Year-scope x spontaneity label counts (Yes / No / Unavailable columns)."""
    df = records_to_frame(records)
    if df.empty:
        return pd.DataFrame(columns=SPONTANEITY_LABELS, dtype=int)
    table = df.groupby(["year_sheet", "spontaneous"]).size().unstack(fill_value=0)
    return table.reindex(columns=SPONTANEITY_LABELS, fill_value=0).sort_index()


def percent_change(before: int, after: int) -> Optional[float]:
    if before <= 0:
        return None
    return (after - before) / before * 100


def summary_text(records: Sequence[IncidentRecord]) -> str:
    """One-paragraph overview: counts per year-scope and the latest change."""
    counts = year_counts(records)
    if not counts:
        return "No incidents recorded."

    parts = [f"{year or 'Unspecified'}: {count:,}" for year, count in counts.items()]
    text = f"{sum(counts.values()):,} incidents recorded ({', '.join(parts)})."

    dated = [(year, count) for year, count in counts.items() if year]
    if len(dated) >= 2:
        (prev_year, prev_count), (last_year, last_count) = dated[-2], dated[-1]
        change = percent_change(prev_count, last_count)
        if change is not None:
            direction = "increase" if change >= 0 else "decrease"
            text += f" {last_year} shows a {abs(change):.0f}% {direction} over {prev_year}."

    logger.debug(f"Summary: {text}")
    return text


def circle_grid(baseline: int, total: int) -> List[str]:
    """Cell classes for the comparison grid: ``baseline`` cells, then increases."""
    if total < 0 or baseline < 0:
        raise ValueError("baseline and total must be non-negative")
    baseline = min(baseline, total)
    return ["baseline"] * baseline + ["increase"] * (total - baseline)
