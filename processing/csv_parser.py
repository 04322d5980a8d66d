"""
Delimited-text parser.

Turns the full source text into rows of string fields. Quoted fields may hold
the delimiter, line breaks, or doubled quotes; CRLF and LF both end a row.
The parser is permissive: an unterminated quote simply runs to the end of the
input, and rows made only of blank fields are dropped.
"""

from typing import List

from loguru import logger

QUOTE = '"'


def parse_delimited_text(text: str, delimiter: str = ",") -> List[List[str]]:
    """Parse delimited text into a list of rows of raw field strings."""
    rows: List[List[str]] = []
    row: List[str] = []
    field: List[str] = []
    in_quotes = False
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]

        if ch == QUOTE:
            if in_quotes and i + 1 < n and text[i + 1] == QUOTE:
                field.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
            i += 1
            continue

        if in_quotes:
            field.append(ch)
        elif ch == delimiter:
            row.append("".join(field))
            field = []
        elif ch == "\n" or ch == "\r":
            if ch == "\r" and i + 1 < n and text[i + 1] == "\n":
                i += 1
            row.append("".join(field))
            rows.append(row)
            row = []
            field = []
        else:
            field.append(ch)
        i += 1

    if in_quotes:
        logger.debug("Unterminated quoted field at end of input; keeping accumulated text")

    # Final row without a trailing terminator
    if field or row:
        row.append("".join(field))
        rows.append(row)

    kept = [r for r in rows if any(cell.strip() for cell in r)]
    if len(kept) < len(rows):
        logger.debug(f"Dropped {len(rows) - len(kept)} blank rows")
    return kept


def quote_field(value: str, delimiter: str = ",") -> str:
    """Quote a field for writing when it holds a delimiter, quote or line break."""
    if any(c in value for c in (delimiter, QUOTE, "\n", "\r")):
        return QUOTE + value.replace(QUOTE, QUOTE * 2) + QUOTE
    return value
