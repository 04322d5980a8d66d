"""
Incident loader (delimited text -> IncidentRecord list)
=======================================================

Pipeline: raw text -> parse_delimited_text -> header normalization ->
required-column check -> one IncidentRecord per data row.

Key ideas:
- The schema check reports every missing column at once.
- Once the schema check passes, no individual row can fail: absent cells
  become empty strings and odd spontaneity answers become indeterminate.
- The district join key and the spontaneity flag are derived here, once.
"""

from typing import Dict, List, Mapping, Optional, Sequence

from loguru import logger

from .csv_parser import parse_delimited_text
from .data_utils import missing_columns, sanitize_headers
from .errors import MissingColumnsError
from .geo_names import canonicalize_place_name
from .models import IncidentRecord, Spontaneity

REQUIRED_COLUMNS = [
    "district",
    "date",
    "name",
    "age",
    "accused_of",
    "cause_of_death",
    "source_url_1",
    "source_url_2",
    "year_sheet",
    "spontaneous_mob",
]

# The narrative column appears under either spelling in exported sheets
NARRATIVE_COLUMNS = ("news_brief", "new_brief")


def validate_headers(headers: Sequence[str]) -> None:
    """Raise MissingColumnsError naming every absent required column."""
    missing = missing_columns(headers, REQUIRED_COLUMNS, alternatives=[NARRATIVE_COLUMNS])
    if missing:
        raise MissingColumnsError(missing)


def _row_to_cells(headers: Sequence[str], cells: Sequence[str]) -> Dict[str, str]:
    obj: Dict[str, str] = {}
    for idx, header in enumerate(headers):
        obj[header] = (cells[idx] if idx < len(cells) else "").strip()
    return obj


def map_rows(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    aliases: Optional[Mapping[str, str]] = None,
) -> List[IncidentRecord]:
    """Map data rows onto IncidentRecords after validating the header set.

    Args:
        headers: Canonical header names
        rows: Data rows (header row excluded)
        aliases: Folded district alias table

    Returns:
        Records in source order

    Raises:
        MissingColumnsError: required columns are absent
    """
    validate_headers(headers)

    records: List[IncidentRecord] = []
    for cells in rows:
        obj = _row_to_cells(headers, cells)
        district = obj.get("district", "")
        records.append(
            IncidentRecord(
                district=district,
                district_key=canonicalize_place_name(district, aliases),
                date=obj.get("date", ""),
                name=obj.get("name", ""),
                age=obj.get("age", ""),
                accused_of=obj.get("accused_of", ""),
                cause_of_death=obj.get("cause_of_death", ""),
                news_brief=obj.get("news_brief") or obj.get("new_brief") or "",
                source_url_1=obj.get("source_url_1", ""),
                source_url_2=obj.get("source_url_2", ""),
                year_sheet=obj.get("year_sheet", ""),
                spontaneous=Spontaneity.from_cell(obj.get("spontaneous_mob")),
            )
        )
    return records


def parse_incidents(text: str, aliases: Optional[Mapping[str, str]] = None) -> List[IncidentRecord]:
    """Run the full ingestion pipeline over the source text.

    Empty input yields no records; a header row on its own is still
    validated.
    """
    raw = parse_delimited_text(text)
    if not raw:
        logger.warning("⚠️ Incident source contains no rows")
        return []

    headers = sanitize_headers(raw[0])
    records = map_rows(headers, raw[1:], aliases)

    unresolved = sum(1 for r in records if not r.district_key)
    logger.info(f"  ✅ Mapped {len(records):,} incident records")
    if unresolved:
        logger.debug(f"  {unresolved} records have no resolvable district")
    return records
