"""
Session controller.

Owns the record set, the boundary features and the single table view state.
The record set is written once per load (replaced, never merged) and shared
read-only with the table, the aggregator and the summaries.

The table and the map degrade independently: a failed boundary load leaves
the table usable and vice versa. Failures are kept as inline status messages
instead of propagating out of ``bootstrap``.
"""

from typing import List, Optional, Sequence, Tuple

from loguru import logger

from ops.config_loader import Config
from processing.boundaries import load_boundary_features
from processing.errors import MissingColumnsError, ResourceUnavailableError
from processing.geo_names import build_alias_table
from processing.incidents import parse_incidents
from processing.models import BoundaryFeature, IncidentRecord
from processing.sources import load_text_resource

from .aggregation import ColorScale, DistrictCount, aggregate_districts
from .view_state import TableViewState

INCIDENTS_LABEL = "incident data"
BOUNDARIES_LABEL = "district boundaries"
INCIDENTS_HINT = "Ensure mob_violence_cleaned.csv is reachable from one of the configured sources."


class IncidentSession:
    """Session-level state for one run of the tracker."""

    def __init__(self, config: Config):
        self.config = config
        self.aliases = build_alias_table(config.get("geo.aliases") or {})
        self.name_keys = config.get("geo.name_keys")
        self.color_scale = ColorScale.from_config(config)

        self._records: Tuple[IncidentRecord, ...] = ()
        self._features: Tuple[BoundaryFeature, ...] = ()
        self.table_status: Optional[str] = None
        self.map_status: Optional[str] = None
        self.view = self._new_view()

    @property
    def records(self) -> Tuple[IncidentRecord, ...]:
        return self._records

    @property
    def features(self) -> Tuple[BoundaryFeature, ...]:
        return self._features

    @property
    def table_loaded(self) -> bool:
        return self.table_status is None

    @property
    def map_loaded(self) -> bool:
        return self.map_status is None and bool(self._features)

    def _new_view(self) -> TableViewState:
        return TableViewState(
            self._records,
            page_size=self.config.get_page_size(),
            filters=self.config.get_year_filters(),
        )

    def _timeout(self) -> float:
        return float(self.config.get("sources.timeout", 10))

    def set_records(self, records: Sequence[IncidentRecord]) -> None:
        """Replace the whole record set and start a fresh view on page 1."""
        self._records = tuple(records)
        self.view = self._new_view()

    def load_incidents(self) -> None:
        """Load and map the incident source. Raises on failure."""
        text = load_text_resource(
            self.config.get_source_candidates("incidents"),
            INCIDENTS_LABEL,
            base_dir=self.config.project_root,
            timeout=self._timeout(),
        )
        self.set_records(parse_incidents(text, self.aliases))

    def load_boundaries(self) -> None:
        """Load boundary polygons. Raises on failure."""
        text = load_text_resource(
            self.config.get_source_candidates("boundaries"),
            BOUNDARIES_LABEL,
            base_dir=self.config.project_root,
            timeout=self._timeout(),
        )
        self._features = tuple(load_boundary_features(text, self.aliases, self.name_keys))

    def bootstrap(self, include_map: bool = True) -> "IncidentSession":
        """Load both resources, recording failures as status messages."""
        try:
            self.load_incidents()
            self.table_status = None
        except (ResourceUnavailableError, MissingColumnsError) as e:
            self.table_status = f"{e}. {INCIDENTS_HINT}"
            self.set_records([])
            logger.error(f"❌ Table unavailable: {e}")

        if include_map:
            try:
                self.load_boundaries()
                self.map_status = None
            except ResourceUnavailableError as e:
                self.map_status = str(e)
                self._features = ()
                logger.error(f"❌ Map unavailable: {e}")
            except ValueError as e:
                # json.JSONDecodeError is a ValueError
                self.map_status = f"Could not read {BOUNDARIES_LABEL}: {e}"
                self._features = ()
                logger.error(f"❌ Map unavailable: {e}")

        return self

    # ---------------- Inbound calls from rendering ----------------
    def set_filter(self, new_filter: str) -> bool:
        return self.view.set_filter(new_filter)

    def set_page(self, requested: int) -> bool:
        return self.view.set_page(requested)

    # ---------------- Derived outputs ----------------
    def map_layer(self, year: Optional[str] = None) -> List[DistrictCount]:
        """Per-feature counts for one year-scope (default: map.default_year)."""
        year = str(year or self.config.get("map.default_year", "all"))
        return aggregate_districts(self._records, self._features, year)
