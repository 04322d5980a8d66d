"""
HTML fragments for the incident table and its pagination controls.

Each record renders as a clickable primary row followed by a hidden detail
row holding the narrative and the source links. Event binding and styling
live in the page; this module only produces markup from the session state.
"""

from html import escape
from typing import List, Tuple
from urllib.parse import urljoin, urlparse

from processing.models import IncidentRecord

from .pagination import ELLIPSIS
from .session import IncidentSession

COLUMN_COUNT = 6
EMPTY_FILTER_MESSAGE = "No rows found for this filter."


def safe_url(url: str, base: str = "https://localhost/") -> str:
    """Resolve ``url`` and keep it only if it is http(s); otherwise ''."""
    value = str(url or "").strip()
    if not value:
        return ""
    try:
        resolved = urljoin(base, value)
        parsed = urlparse(resolved)
    except ValueError:
        return ""
    if parsed.scheme in ("http", "https") and parsed.netloc:
        return resolved
    return ""


def source_links(record: IncidentRecord) -> List[Tuple[str, str]]:
    """(label, url) pairs for the record's usable source URLs."""
    links = []
    for label, url in (("1", record.source_url_1), ("2", record.source_url_2)):
        safe = safe_url(url)
        if safe:
            links.append((label, safe))
    return links


def _h(value: str) -> str:
    return escape(str(value or ""), quote=True)


def news_sources_html(record: IncidentRecord) -> str:
    links = [
        f'<a href="{_h(url)}" target="_blank" rel="noopener noreferrer">{label}</a>'
        for label, url in source_links(record)
    ]
    if not links:
        return "N/A"
    return '<span class="divider">|</span>'.join(links)


def status_row(message: str) -> str:
    return f'<tr class="status-row"><td colspan="{COLUMN_COUNT}">{_h(message)}</td></tr>'


def render_record_rows(record: IncidentRecord, index: int) -> str:
    """Primary + detail row pair; ``index`` is the record's position in the filtered set."""
    detail_id = f"detail-{index}"
    return f"""
        <tr class="primary-row" tabindex="0" role="button" aria-expanded="false" data-target="{detail_id}">
          <td>{_h(record.date)}</td>
          <td>{_h(record.name)}</td>
          <td>{_h(record.age)}</td>
          <td>{_h(record.accused_of)}</td>
          <td>{_h(record.cause_of_death)}</td>
          <td class="toggle-cell"><span class="toggle-icon">+</span></td>
        </tr>
        <tr class="detail-row" id="{detail_id}" hidden>
          <td colspan="{COLUMN_COUNT}">
            <div class="detail-content">
              <p>{_h(record.news_brief)}</p>
              <p class="news-source">News Source: {news_sources_html(record)}</p>
            </div>
          </td>
        </tr>
    """


def render_table_page(session: IncidentSession) -> str:
    """Table body markup for the session's current window."""
    if session.table_status:
        return status_row(session.table_status)

    view = session.view
    if not view.filtered_records:
        return status_row(EMPTY_FILTER_MESSAGE)

    start = view.window_start
    return "".join(
        render_record_rows(record, start + offset)
        for offset, record in enumerate(view.visible_window)
    )


def render_pagination(session: IncidentSession) -> str:
    """Prev / numbered / next controls; empty when there is at most one page."""
    view = session.view
    pages = view.total_pages
    if session.table_status or pages <= 1:
        return ""

    current = view.current_page
    prev_disabled = " disabled" if current == 1 else ""
    next_disabled = " disabled" if current == pages else ""

    parts = [
        f'<button type="button" class="pager-prev"{prev_disabled} data-page="{current - 1}">&lt;</button>'
    ]
    for token in view.page_tokens:
        if token == ELLIPSIS:
            parts.append('<span class="ellipsis">...</span>')
            continue
        current_class = " current" if token == current else ""
        parts.append(
            f'<button type="button" class="pager-number{current_class}" data-page="{token}">{token}</button>'
        )
    parts.append(
        f'<button type="button" class="pager-next"{next_disabled} data-page="{current + 1}">&gt;</button>'
    )
    return "".join(parts)


def render_year_toggle(session: IncidentSession) -> str:
    """Filter buttons with the active one marked."""
    buttons = []
    for year in session.view.filters:
        active = year == session.view.active_filter
        label = "All" if year == "all" else year
        buttons.append(
            f'<button type="button" class="year-btn{" is-active" if active else ""}" '
            f'data-year="{_h(year)}" aria-pressed="{"true" if active else "false"}">{_h(label)}</button>'
        )
    return "".join(buttons)


def render_table_document(session: IncidentSession, title: str) -> str:
    """Standalone HTML page for the current table state."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>{_h(title)}</title></head>
<body>
  <h1>{_h(title)}</h1>
  <div class="table-toolbar">{render_year_toggle(session)}</div>
  <table class="mob-table">
    <thead>
      <tr><th>Date</th><th>Name</th><th>Age</th><th>Accused of</th><th>Cause of death</th><th></th></tr>
    </thead>
    <tbody id="mob-table-body">{render_table_page(session)}</tbody>
  </table>
  <nav id="table-pagination">{render_pagination(session)}</nav>
</body>
</html>
"""
