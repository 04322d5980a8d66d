"""
Data model
==========

Each data row of the incident source becomes an immutable ``IncidentRecord``;
each polygon of the boundary source becomes a ``BoundaryFeature``. Records are
created once per load and never modified; a reload replaces the whole set.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class Spontaneity(Enum):
    """Ternary flag derived from the free-text spontaneous-mob column."""

    YES = "yes"
    NO = "no"
    INDETERMINATE = "indeterminate"

    @classmethod
    def from_cell(cls, value: Optional[str]) -> "Spontaneity":
        """Exact, case-insensitive match on "yes"/"no"; anything else is indeterminate."""
        text = (value or "").strip().lower()
        if text == "yes":
            return cls.YES
        if text == "no":
            return cls.NO
        return cls.INDETERMINATE

    @property
    def label(self) -> str:
        return {"yes": "Yes", "no": "No"}.get(self.value, "Unavailable")


@dataclass(frozen=True)
class IncidentRecord:
    """One validated incident row. Every text field is a string, possibly empty."""

    district: str
    district_key: str
    date: str
    name: str
    age: str
    accused_of: str
    cause_of_death: str
    news_brief: str
    source_url_1: str
    source_url_2: str
    year_sheet: str
    spontaneous: Spontaneity = Spontaneity.INDETERMINATE

    @property
    def spontaneity_label(self) -> str:
        return self.spontaneous.label

    def matches_year(self, year_filter: str) -> bool:
        """True when the record belongs to ``year_filter`` ("all" matches everything)."""
        if year_filter == "all":
            return True
        return self.year_sheet.strip() == year_filter


@dataclass(frozen=True)
class BoundaryFeature:
    """One polygon from the boundary source.

    The geometry mapping is carried through untouched; only its type tag is
    inspected. ``key`` is empty when no display name could be resolved.
    """

    geometry: Dict[str, Any]
    display_name: str
    key: str
    properties: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_resolved(self) -> bool:
        return self.key != ""
