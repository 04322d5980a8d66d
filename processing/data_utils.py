#!/usr/bin/env python3
"""
data_utils.py - Shared Data Processing Utilities

Header normalization, required-column validation and pattern-based key
lookup shared by the incident and boundary loaders.
"""

import re
from typing import Iterable, List, Mapping, Optional, Sequence

from loguru import logger

NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_header(value: object) -> str:
    """Canonicalize one column name to snake_case.

    Trims, lowercases, collapses every run of non-alphanumeric characters to a
    single underscore and strips leading/trailing underscores. A header made
    only of punctuation becomes an empty string.
    """
    clean = str(value if value is not None else "").strip().lower()
    clean = NON_ALNUM.sub("_", clean)
    return clean.strip("_")


def sanitize_headers(raw_headers: Sequence[str]) -> List[str]:
    """Normalize a header row, logging the names that changed.

    Args:
        raw_headers: Header cells exactly as parsed

    Returns:
        Canonical header names in the original order
    """
    clean_headers = [normalize_header(h) for h in raw_headers]

    changed = [(orig, new) for orig, new in zip(raw_headers, clean_headers) if orig != new]
    if changed:
        logger.debug(f"  📝 Cleaned {len(changed)} column names:")
        for orig, new in changed[:5]:
            logger.debug(f"    '{orig}' → '{new}'")
        if len(changed) > 5:
            logger.debug(f"    ... and {len(changed) - 5} more")

    return clean_headers


def missing_columns(
    headers: Iterable[str],
    required: Sequence[str],
    alternatives: Sequence[Sequence[str]] = (),
) -> List[str]:
    """Return every required column absent from ``headers``.

    Args:
        headers: Canonical header names
        required: Columns that must all be present
        alternatives: Groups of accepted spellings; one member of each group
            must be present. A missing group is reported as
            ``"first (or second)"``.

    Returns:
        All missing columns in declaration order (empty when valid)
    """
    present = set(headers)
    missing = [col for col in required if col not in present]

    for group in alternatives:
        if not present.intersection(group):
            first, *rest = group
            missing.append(f"{first} (or {', '.join(rest)})" if rest else first)

    if missing:
        logger.error(f"❌ Missing required columns: {missing}")
        logger.info(f"Available columns: {sorted(present)}")

    return missing


def find_key_by_pattern(
    mapping: Mapping[str, object], patterns: Sequence[str], description: str = "key"
) -> Optional[str]:
    """Find the first key matching any pattern (case-insensitive substring).

    Patterns are tried in priority order; within a pattern, keys are tried in
    mapping order. Keys whose value is blank are skipped.

    Returns:
        Matching key, or None if nothing matched
    """
    for pattern in patterns:
        for key in mapping:
            if pattern.lower() in str(key).lower() and _has_text(mapping[key]):
                logger.trace(f"  📍 Found {description} key: {key} (pattern: {pattern})")
                return key
    return None


def _has_text(value: object) -> bool:
    return isinstance(value, str) and value.strip() != ""
