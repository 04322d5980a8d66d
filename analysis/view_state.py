"""
Table view state.

The one mutable piece of the session: the active year filter and the current
page. Changing the filter always returns to page 1; invalid or redundant
requests are ignored rather than raised.
"""

from typing import List, Optional, Sequence

from loguru import logger

from processing.models import IncidentRecord

from .pagination import PageToken, is_valid_page_request, page_tokens, total_pages

DEFAULT_FILTER = "all"


class TableViewState:
    """Filter/page state over a read-only record set.

    Args:
        records: Records shared with the session, in source order
        page_size: Rows per page
        filters: Closed set of accepted filter tags ("all" always included)
    """

    def __init__(
        self,
        records: Sequence[IncidentRecord],
        page_size: int = 10,
        filters: Optional[Sequence[str]] = None,
    ):
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._records = tuple(records)
        self.page_size = page_size
        self.filters = [DEFAULT_FILTER] + [f for f in (filters or []) if f != DEFAULT_FILTER]
        self.active_filter = DEFAULT_FILTER
        self.current_page = 1

    @property
    def filtered_records(self) -> List[IncidentRecord]:
        return [r for r in self._records if r.matches_year(self.active_filter)]

    @property
    def total_pages(self) -> int:
        return total_pages(len(self.filtered_records), self.page_size)

    @property
    def page_tokens(self) -> List[PageToken]:
        return page_tokens(self.total_pages, self.current_page)

    @property
    def window_start(self) -> int:
        return (self.current_page - 1) * self.page_size

    @property
    def visible_window(self) -> List[IncidentRecord]:
        """Records on the current page of the active filter."""
        start = self.window_start
        return self.filtered_records[start : start + self.page_size]

    def set_filter(self, new_filter: str) -> bool:
        """Switch filter and reset to page 1. Returns False when nothing changed."""
        new_filter = str(new_filter or DEFAULT_FILTER).strip()
        if new_filter == self.active_filter:
            return False
        if new_filter not in self.filters:
            logger.debug(f"Ignoring unknown table filter: {new_filter!r}")
            return False

        self.active_filter = new_filter
        self.current_page = 1
        logger.debug(f"Table filter -> {new_filter}, page reset to 1")
        return True

    def set_page(self, requested: int) -> bool:
        """Move to ``requested``. Returns False for out-of-range or redundant requests."""
        try:
            requested = int(requested)
        except (TypeError, ValueError):
            return False
        if not is_valid_page_request(requested, self.current_page, self.total_pages):
            return False

        self.current_page = requested
        return True
