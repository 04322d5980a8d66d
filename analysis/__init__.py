"""
Analysis package for the Mob Violence Incident Tracker

District aggregation, pagination and table state, the session controller,
summaries, and the HTML / map / chart outputs built from them.
"""

from .aggregation import NO_DATA, ColorScale, DistrictCount, aggregate_districts, count_by_district
from .pagination import ELLIPSIS, page_tokens, total_pages
from .session import IncidentSession
from .view_state import TableViewState

__all__ = [
    "NO_DATA",
    "ColorScale",
    "DistrictCount",
    "aggregate_districts",
    "count_by_district",
    "ELLIPSIS",
    "page_tokens",
    "total_pages",
    "IncidentSession",
    "TableViewState",
]
