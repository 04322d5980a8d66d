"""
Processing package for the Mob Violence Incident Tracker

Ingestion: delimited-text parsing, header normalization, record mapping,
resource loading, district name canonicalization and boundary loading.
"""

__version__ = "0.1.0"

from .boundaries import load_boundary_features, resolve_display_name
from .csv_parser import parse_delimited_text
from .data_utils import normalize_header
from .errors import MissingColumnsError, ResourceUnavailableError, TrackerError
from .geo_names import build_alias_table, canonicalize_place_name
from .incidents import REQUIRED_COLUMNS, map_rows, parse_incidents
from .models import BoundaryFeature, IncidentRecord, Spontaneity
from .sources import first_success, load_text_resource

__all__ = [
    "parse_delimited_text",
    "normalize_header",
    "map_rows",
    "parse_incidents",
    "REQUIRED_COLUMNS",
    "canonicalize_place_name",
    "build_alias_table",
    "load_boundary_features",
    "resolve_display_name",
    "first_success",
    "load_text_resource",
    "IncidentRecord",
    "BoundaryFeature",
    "Spontaneity",
    "TrackerError",
    "MissingColumnsError",
    "ResourceUnavailableError",
]
