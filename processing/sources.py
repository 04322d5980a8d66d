"""
Resource loading from ordered candidate locations.

Both inputs (the incident CSV and the boundary GeoJSON) are looked up in a
list of candidate locations. ``first_success`` tries each in turn and returns
the first non-empty result; individual failures are logged and suppressed
until the list is exhausted, at which point ``ResourceUnavailableError`` is
raised.
"""

from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar, Union

import requests
from loguru import logger

from .errors import ResourceUnavailableError

T = TypeVar("T")

URL_SCHEMES = ("http://", "https://")


def first_success(
    attempts: Sequence[Tuple[str, Callable[[], T]]],
    label: str,
    is_empty: Callable[[T], bool] = lambda value: not value,
) -> T:
    """Return the result of the first attempt that succeeds with non-empty content.

    Args:
        attempts: Ordered (description, zero-argument callable) pairs
        label: Resource label used in the failure message
        is_empty: Predicate rejecting results that count as "no content"

    Returns:
        The first acceptable result

    Raises:
        ResourceUnavailableError: every attempt raised or returned empty content
    """
    failures: List[Tuple[str, str]] = []

    for description, attempt in attempts:
        try:
            result = attempt()
        except Exception as e:
            logger.debug(f"  ⏭️ {label}: {description} failed: {e}")
            failures.append((description, str(e)))
            continue

        if is_empty(result):
            logger.debug(f"  ⏭️ {label}: {description} returned empty content")
            failures.append((description, "empty content"))
            continue

        logger.debug(f"  ✅ {label}: loaded from {description}")
        return result

    logger.error(f"❌ Could not load {label} from any of {len(attempts)} candidate locations")
    raise ResourceUnavailableError(label, [d for d, _ in attempts], failures)


def read_text_candidate(
    location: str, base_dir: Optional[Union[str, Path]] = None, timeout: float = 10
) -> str:
    """Read one candidate location as text.

    ``http(s)://`` locations are fetched with requests; anything else is a
    file path, resolved against ``base_dir`` when relative.
    """
    if location.lower().startswith(URL_SCHEMES):
        response = requests.get(location, timeout=timeout, headers={"Cache-Control": "no-store"})
        response.raise_for_status()
        return response.text

    path = Path(location)
    if not path.is_absolute() and base_dir is not None:
        path = Path(base_dir) / path
    # utf-8-sig drops a leading BOM that spreadsheet exports like to add
    return path.read_text(encoding="utf-8-sig")


def load_text_resource(
    candidates: Sequence[str],
    label: str,
    base_dir: Optional[Union[str, Path]] = None,
    timeout: float = 10,
) -> str:
    """Load the first candidate location with non-blank text."""
    logger.info(f"📥 Loading {label} ({len(candidates)} candidate locations)")
    attempts = [
        (location, lambda location=location: read_text_candidate(location, base_dir, timeout))
        for location in candidates
    ]
    return first_success(attempts, label, is_empty=lambda text: not text.strip())
