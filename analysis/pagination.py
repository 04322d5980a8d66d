"""
Pagination planner.

Produces the page count for a result set and a compact token sequence for a
bounded-width page selector: page numbers mixed with an ellipsis marker, never
more than nine tokens.

    page_tokens(20, 1)  -> [1, 2, 3, 4, "...", 19, 20]
    page_tokens(20, 10) -> [1, 2, "...", 9, 10, 11, "...", 19, 20]
    page_tokens(5, 3)   -> [1, 2, 3, 4, 5]
"""

from typing import List, Union

ELLIPSIS = "..."
MAX_UNCOLLAPSED_PAGES = 8

PageToken = Union[int, str]


def total_pages(total_items: int, page_size: int) -> int:
    """Ceiling division; zero items means zero pages (no controls)."""
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    if total_items <= 0:
        return 0
    return -(-total_items // page_size)


def page_tokens(total: int, page: int) -> List[PageToken]:
    """Token sequence for a selector over ``total`` pages with ``page`` current."""
    if total <= MAX_UNCOLLAPSED_PAGES:
        return list(range(1, total + 1))
    if page <= 4:
        return [1, 2, 3, 4, ELLIPSIS, total - 1, total]
    if page >= total - 3:
        return [1, 2, ELLIPSIS, total - 3, total - 2, total - 1, total]
    return [1, 2, ELLIPSIS, page - 1, page, page + 1, ELLIPSIS, total - 1, total]


def is_valid_page_request(requested: int, current: int, total: int) -> bool:
    """False for pages outside [1, total] or equal to the current page."""
    return 1 <= requested <= total and requested != current
