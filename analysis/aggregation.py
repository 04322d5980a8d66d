"""
District aggregation and choropleth color scale.

Two passes, both through the same canonicalizer:
1. count incidents per canonical district key (records with an empty key are
   skipped)
2. look up each boundary polygon's key in those counts (default zero)

Zero counts and unresolved polygons share one "no data" treatment; positive
counts go through a quantized scale whose upper bound is clamped, so large
counts saturate at the darkest color.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np
from loguru import logger

from processing.models import BoundaryFeature, IncidentRecord

NO_DATA = -1

DEFAULT_PALETTE = ["#fee5d9", "#fcae91", "#fb6a4a", "#de2d26", "#a50f15"]
DEFAULT_NO_DATA_COLOR = "#d9d9d9"


@dataclass(frozen=True)
class DistrictCount:
    """Aggregated incident count for one boundary polygon."""

    key: str
    display_name: str
    count: int
    feature: BoundaryFeature

    @property
    def has_data(self) -> bool:
        return bool(self.key) and self.count > 0


def filter_by_year(records: Iterable[IncidentRecord], year: str) -> List[IncidentRecord]:
    """Restrict records to one year-scope ("all" keeps everything)."""
    return [r for r in records if r.matches_year(year)]


def count_by_district(records: Iterable[IncidentRecord]) -> Dict[str, int]:
    """Count incidents per canonical district key, skipping unresolved rows."""
    counts: Counter = Counter()
    skipped = 0
    for record in records:
        if not record.district_key:
            skipped += 1
            continue
        counts[record.district_key] += 1

    if skipped:
        logger.debug(f"  {skipped} records excluded from aggregation (no district)")
    return dict(counts)


def aggregate_features(
    features: Sequence[BoundaryFeature], counts: Dict[str, int]
) -> List[DistrictCount]:
    """Attach an incident count to every boundary feature, in feature order."""
    results = [
        DistrictCount(
            key=f.key,
            display_name=f.display_name,
            count=counts.get(f.key, 0) if f.key else 0,
            feature=f,
        )
        for f in features
    ]

    matched = {r.key for r in results if r.count > 0}
    unmatched = sorted(set(counts) - matched)
    if unmatched:
        logger.warning(
            f"  ⚠️ {len(unmatched)} district keys have no boundary polygon: {unmatched[:5]}"
        )
    return results


def aggregate_districts(
    records: Iterable[IncidentRecord], features: Sequence[BoundaryFeature], year: str = "all"
) -> List[DistrictCount]:
    """Year-scoped counts per boundary feature."""
    return aggregate_features(features, count_by_district(filter_by_year(records, year)))


class ColorScale:
    """Quantized color scale over positive counts with a clamped upper bound.

    ``bucket`` returns a palette index, or ``NO_DATA`` for zero counts and
    unresolved keys.
    """

    def __init__(
        self,
        palette: Optional[Sequence[str]] = None,
        max_count: int = 20,
        thresholds: Optional[Sequence[float]] = None,
        no_data_color: str = DEFAULT_NO_DATA_COLOR,
    ):
        self.palette = list(palette or DEFAULT_PALETTE)
        if not self.palette:
            raise ValueError("Color palette must not be empty")
        self.max_count = max(int(max_count), 1)
        self.no_data_color = no_data_color

        if thresholds:
            if len(thresholds) != len(self.palette) - 1:
                raise ValueError(
                    f"Expected {len(self.palette) - 1} thresholds for {len(self.palette)} colors, "
                    f"got {len(thresholds)}"
                )
            self.thresholds = np.asarray(sorted(thresholds), dtype=float)
        else:
            # Equal-width buckets across [1, max_count]
            self.thresholds = np.linspace(1, self.max_count, len(self.palette) + 1)[1:-1]

    def bucket(self, count: int, key: Optional[str] = None) -> int:
        """Palette index for ``count``; NO_DATA for zero or an unresolved key."""
        if count is None or count <= 0 or key == "":
            return NO_DATA
        clamped = min(float(count), float(self.max_count))
        index = int(np.digitize(clamped, self.thresholds))
        return min(index, len(self.palette) - 1)

    def color(self, count: int, key: Optional[str] = None) -> str:
        index = self.bucket(count, key)
        return self.no_data_color if index == NO_DATA else self.palette[index]

    def legend(self) -> List[Dict[str, str]]:
        """Legend entries (label, color), "No data" first."""
        edges = [1.0] + [float(t) for t in self.thresholds] + [float(self.max_count)]
        entries = [{"label": "No data", "color": self.no_data_color}]
        for i, color in enumerate(self.palette):
            lo, hi = edges[i], edges[i + 1]
            if i == len(self.palette) - 1:
                label = f"{lo:g}+"
            else:
                label = f"{lo:g}-{hi:g}"
            entries.append({"label": label, "color": color})
        return entries

    @classmethod
    def from_config(cls, config) -> "ColorScale":
        return cls(
            palette=config.get("map.palette"),
            max_count=config.get("map.max_count", 20),
            thresholds=config.get("map.thresholds"),
            no_data_color=config.get("map.no_data_color", DEFAULT_NO_DATA_COLOR),
        )
