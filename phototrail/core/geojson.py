"""Typed adapter for external boundary GeoJSON payloads."""
from typing import Any, Dict, List, Optional, Sequence
from shapely.errors import ShapelyError
from shapely.geometry import shape
from phototrail.core.exceptions import BoundarySourceError
from phototrail.core.models import RawFeature
from phototrail.utils.logging import log_structured

POLYGON_TYPES = ("Polygon", "MultiPolygon")

# Property keys tried in order when reading a feature's name
PREFECTURE_NAME_KEYS = ("nam_ja", "name_ja", "name", "NAME", "nam")
CITY_NAME_KEYS = ("N03_004", "name", "N03_003", "NAME")
TOWN_NAME_KEYS = ("label", "name")

NAME_KEYS_BY_LEVEL = {
    "prefecture": PREFECTURE_NAME_KEYS,
    "city": CITY_NAME_KEYS,
    "town": TOWN_NAME_KEYS,
}


def _string_properties(properties: Any) -> Dict[str, str]:
    if not isinstance(properties, dict):
        return {}
    return {str(k): str(v) for k, v in properties.items() if v is not None}


def parse_feature_collection(payload: Any) -> List[RawFeature]:
    """
    Parse a GeoJSON FeatureCollection into polygon RawFeatures.

    Features whose geometry is missing, not a (Multi)Polygon, or invalid
    GeoJSON are skipped.

    Args:
        payload: Decoded JSON document

    Returns:
        List of RawFeature in source order

    Raises:
        BoundarySourceError: If the payload is not a FeatureCollection
    """
    if not isinstance(payload, dict) or payload.get("type") != "FeatureCollection":
        raise BoundarySourceError("Invalid GeoJSON format: not a FeatureCollection")
    if not isinstance(payload.get("features"), list):
        raise BoundarySourceError("Invalid GeoJSON format: features is not a list")

    features = []
    skipped = 0
    for raw in payload["features"]:
        geometry = raw.get("geometry") if isinstance(raw, dict) else None
        if not isinstance(geometry, dict) or geometry.get("type") not in POLYGON_TYPES:
            skipped += 1
            continue
        try:
            geom = shape(geometry)
        except (ShapelyError, ValueError, TypeError, KeyError, IndexError):
            skipped += 1
            continue
        features.append(RawFeature(properties=_string_properties(raw.get("properties")), geometry=geom))

    if skipped:
        log_structured("debug", "Skipped non-polygon boundary features", skipped=skipped)
    return features


def feature_name(feature: RawFeature, keys: Sequence[str]) -> Optional[str]:
    """Return the first non-empty property among ``keys``."""
    for key in keys:
        value = feature.properties.get(key)
        if value and value.strip():
            return value.strip()
    return None
