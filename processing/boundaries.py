"""
Boundary loading (GeoJSON -> BoundaryFeature list)

Each polygon feature gets a display name and a canonical join key. Display
names are resolved from the feature's property bag by a fixed probe order:

1. the configured name keys, in order
2. any key that looks like a district field (district, dist, zila, adm2)
3. any key that looks like a name field
4. "Unknown", with an empty (unresolved) key

Geometry is never inspected beyond its type tag.
"""

import json
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import geopandas as gpd
from loguru import logger

from .data_utils import find_key_by_pattern
from .geo_names import canonicalize_place_name
from .models import BoundaryFeature

UNKNOWN_NAME = "Unknown"
DEFAULT_NAME_KEYS = ["district", "District", "DISTRICT", "ADM2_EN", "NAME_2", "shapeName", "name", "NAME"]
DISTRICT_PATTERNS = ["district", "dist", "zila", "adm2"]
NAME_PATTERNS = ["name"]


def parse_feature_collection(text: str) -> List[Dict[str, Any]]:
    """Decode GeoJSON text into a list of feature mappings.

    Accepts a FeatureCollection, a single Feature or a bare list of features.
    Anything else yields no features.
    """
    data = json.loads(text)

    if isinstance(data, list):
        features = data
    elif isinstance(data, dict) and data.get("type") == "FeatureCollection":
        features = data.get("features") or []
        if not isinstance(features, list):
            logger.warning("⚠️ FeatureCollection \"features\" is not a list")
            return []
    elif isinstance(data, dict) and data.get("type") == "Feature":
        features = [data]
    else:
        logger.warning("⚠️ Boundary source is not a FeatureCollection or Feature")
        return []

    return [f for f in features if isinstance(f, dict)]


def is_polygon_feature(feature: Mapping[str, Any]) -> bool:
    """True when the geometry type tag names a polygon (Polygon, MultiPolygon)."""
    geometry = feature.get("geometry") or {}
    geom_type = geometry.get("type") if isinstance(geometry, dict) else None
    return isinstance(geom_type, str) and "polygon" in geom_type.lower()


def resolve_display_name(
    properties: Optional[Mapping[str, Any]], name_keys: Optional[Sequence[str]] = None
) -> str:
    """Pick a display name from a feature's properties, first match wins."""
    props = properties or {}
    for key in name_keys or DEFAULT_NAME_KEYS:
        value = props.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()

    for patterns, description in ((DISTRICT_PATTERNS, "district-like"), (NAME_PATTERNS, "name-like")):
        key = find_key_by_pattern(props, patterns, description)
        if key is not None:
            return str(props[key]).strip()

    return UNKNOWN_NAME


def build_boundary_feature(
    feature: Mapping[str, Any],
    aliases: Optional[Mapping[str, str]] = None,
    name_keys: Optional[Sequence[str]] = None,
) -> BoundaryFeature:
    properties = feature.get("properties")
    properties = dict(properties) if isinstance(properties, Mapping) else {}
    display_name = resolve_display_name(properties, name_keys)
    key = "" if display_name == UNKNOWN_NAME else canonicalize_place_name(display_name, aliases)
    return BoundaryFeature(
        geometry=feature.get("geometry") or {},
        display_name=display_name,
        key=key,
        properties=properties,
    )


def load_boundary_features(
    text: str,
    aliases: Optional[Mapping[str, str]] = None,
    name_keys: Optional[Sequence[str]] = None,
) -> List[BoundaryFeature]:
    """Parse boundary GeoJSON into polygon BoundaryFeatures."""
    raw_features = parse_feature_collection(text)
    polygons = [f for f in raw_features if is_polygon_feature(f)]
    if len(polygons) < len(raw_features):
        logger.debug(f"  Skipped {len(raw_features) - len(polygons)} non-polygon features")

    features = [build_boundary_feature(f, aliases, name_keys) for f in polygons]

    unresolved = [f for f in features if not f.is_resolved]
    logger.info(f"  ✅ Loaded {len(features):,} boundary polygons")
    if unresolved:
        logger.warning(f"  ⚠️ {len(unresolved)} polygons have no resolvable district name")
    return features


def features_to_geodataframe(
    features: Iterable[BoundaryFeature], columns: Optional[Mapping[str, Sequence[Any]]] = None
) -> gpd.GeoDataFrame:
    """Build a WGS84 GeoDataFrame from boundary features.

    Args:
        features: Boundary features, in order
        columns: Extra per-feature columns (same length and order as features)

    Returns:
        GeoDataFrame with display_name, district_key and any extra columns
    """
    features = list(features)
    records = [
        {
            "type": "Feature",
            "geometry": f.geometry,
            "properties": {"display_name": f.display_name, "district_key": f.key},
        }
        for f in features
    ]
    if records:
        gdf = gpd.GeoDataFrame.from_features(records, crs="EPSG:4326")
    else:
        gdf = gpd.GeoDataFrame(
            {"display_name": [], "district_key": []}, geometry=[], crs="EPSG:4326"
        )

    for name, values in (columns or {}).items():
        gdf[name] = list(values)
    return gdf
