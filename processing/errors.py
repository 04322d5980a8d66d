"""
Error types raised by the ingestion pipeline.

Only two failure kinds are exceptions: a resource that could not be loaded
from any candidate location, and a tabular source missing required columns.
Unresolved district names and out-of-range navigation are ordinary outcomes.
"""

from typing import List, Optional, Sequence, Tuple


class TrackerError(Exception):
    """Base class for incident tracker failures."""


class ResourceUnavailableError(TrackerError):
    """Every candidate location for a resource failed or returned empty content."""

    def __init__(
        self,
        label: str,
        candidates: Sequence[str] = (),
        failures: Optional[List[Tuple[str, str]]] = None,
    ):
        self.label = label
        self.candidates = list(candidates)
        self.failures = failures or []
        super().__init__(f"Could not load {label}")


class MissingColumnsError(TrackerError, ValueError):
    """The tabular source lacks one or more required columns."""

    def __init__(self, missing: Sequence[str]):
        self.missing = list(missing)
        super().__init__(f"Missing CSV columns: {', '.join(self.missing)}")
