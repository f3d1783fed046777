"""Matching of aggregated area names against boundary polygon features."""
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple
from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry
from phototrail.core.config import UNKNOWN_AREA
from phototrail.core.geojson import NAME_KEYS_BY_LEVEL, feature_name
from phototrail.core.models import AreaCount, BoundaryFeature, BoundaryFeatureCollection, RawFeature
from phototrail.core.normalization import normalize_city, normalize_prefecture, normalize_town
from phototrail.core.remote_islands import REMOTE_ISLANDS_SUFFIX, split_remote_islands
from phototrail.utils.logging import log_structured

LatLng = Tuple[float, float]


@dataclass(frozen=True)
class LevelRules:
    """How names are read and normalized for one administrative level."""
    name_keys: Tuple[str, ...]
    normalize: Callable[[str], str]


LEVEL_RULES = {
    "prefecture": LevelRules(NAME_KEYS_BY_LEVEL["prefecture"], normalize_prefecture),
    "city": LevelRules(NAME_KEYS_BY_LEVEL["city"], normalize_city),
    "town": LevelRules(NAME_KEYS_BY_LEVEL["town"], normalize_town),
}


@dataclass(frozen=True)
class _NamedFeature:
    feature: RawFeature
    name: str
    normalized: str


def names_match(target: str, candidate: str) -> bool:
    """Normalized names match when equal or when either contains the other."""
    return target == candidate or candidate in target or target in candidate


def _polygons(geometry: BaseGeometry) -> List[Polygon]:
    if isinstance(geometry, Polygon):
        return [geometry]
    if isinstance(geometry, MultiPolygon):
        return list(geometry.geoms)
    return []


def polygon_centroid(geometry: BaseGeometry) -> Optional[LatLng]:
    """
    Mean (lat, lng) of all exterior ring vertices of a (Multi)Polygon.

    This is a vertex mean, not an area centroid; it is only used to rank
    same-named candidates against each other.
    """
    lat_sum = lng_sum = 0.0
    n = 0
    for polygon in _polygons(geometry):
        for lng, lat, *_ in polygon.exterior.coords:
            lat_sum += lat
            lng_sum += lng
            n += 1
    if n == 0:
        return None
    return lat_sum / n, lng_sum / n


def squared_distance(a: LatLng, b: LatLng) -> float:
    """Squared Euclidean distance in degree space."""
    return (a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2


def _named_features(features: Sequence[RawFeature], rules: LevelRules) -> List[_NamedFeature]:
    named = []
    for feature in features:
        name = feature_name(feature, rules.name_keys)
        if not name:
            continue
        normalized = rules.normalize(name)
        # An empty normalized name would be contained in every target
        if not normalized:
            continue
        named.append(_NamedFeature(feature, name, normalized))
    return named


def _pick_nearest(
    candidates: List[int],
    named: List[_NamedFeature],
    hint: LatLng,
    centroids: Dict[int, Optional[LatLng]]
) -> int:
    best_index = candidates[0]
    best_distance = None
    for index in candidates:
        if index not in centroids:
            centroids[index] = polygon_centroid(named[index].feature.geometry)
        centroid = centroids[index]
        if centroid is None:
            continue
        distance = squared_distance(centroid, hint)
        if best_distance is None or distance < best_distance:
            best_index = index
            best_distance = distance
    return best_index


def _annotate(
    named_feature: _NamedFeature,
    key: str,
    area: AreaCount,
    level: str
) -> List[BoundaryFeature]:
    if level == "prefecture":
        parts = split_remote_islands(named_feature.normalized, named_feature.feature.geometry)
        if parts is not None:
            mainland, islands = parts
            return [
                BoundaryFeature(
                    name=named_feature.name,
                    matched_key=key,
                    count=area.count,
                    intensity=area.intensity,
                    geometry=mainland,
                    part="mainland",
                ),
                BoundaryFeature(
                    name=f"{named_feature.name}{REMOTE_ISLANDS_SUFFIX}",
                    matched_key=key,
                    count=area.count,
                    intensity=area.intensity,
                    geometry=islands,
                    part="remote_islands",
                ),
            ]

    return [BoundaryFeature(
        name=named_feature.name,
        matched_key=key,
        count=area.count,
        intensity=area.intensity,
        geometry=named_feature.feature.geometry,
    )]


def match_boundaries(
    features: Sequence[RawFeature],
    area_counts: Mapping[str, AreaCount],
    level: str,
    centers: Optional[Mapping[str, LatLng]] = None
) -> BoundaryFeatureCollection:
    """
    Match aggregated areas to boundary polygons by normalized name.

    Each target is matched by equality or substring containment of
    normalized names. When several polygons match one target and a
    centroid hint exists for it, the polygon whose vertex-mean centroid is
    nearest to the hint wins; otherwise the first match in source order.
    A polygon is assigned to at most one target. Unmatched targets and the
    "不明" bucket are omitted.

    Args:
        features: Boundary polygons for one level
        area_counts: Area name -> count/intensity, in display order
        level: "prefecture", "city" or "town"
        centers: Optional area name -> (lat, lng) hints

    Returns:
        New BoundaryFeatureCollection of matched polygons
    """
    if level not in LEVEL_RULES:
        raise ValueError(f"Unknown admin level: {level}")
    rules = LEVEL_RULES[level]

    named = _named_features(features, rules)
    claimed = set()
    centroids: Dict[int, Optional[LatLng]] = {}
    matched: List[BoundaryFeature] = []
    unmatched = 0

    for key, area in area_counts.items():
        if key == UNKNOWN_AREA:
            continue
        target = rules.normalize(key)
        if not target:
            unmatched += 1
            continue

        candidates = [
            index for index, item in enumerate(named)
            if index not in claimed and names_match(target, item.normalized)
        ]
        if not candidates:
            unmatched += 1
            continue

        chosen = candidates[0]
        hint = centers.get(key) if centers else None
        if len(candidates) > 1 and hint is not None:
            chosen = _pick_nearest(candidates, named, hint, centroids)

        claimed.add(chosen)
        matched.extend(_annotate(named[chosen], key, area, level))

    log_structured(
        "debug",
        "Boundary match pass completed",
        admin_level=level,
        polygons=len(named),
        matched=len(claimed),
        unmatched=unmatched,
    )
    return BoundaryFeatureCollection(features=matched)


def match_prefecture_features(
    features: Sequence[RawFeature],
    area_counts: Mapping[str, AreaCount],
    centers: Optional[Mapping[str, LatLng]] = None
) -> BoundaryFeatureCollection:
    return match_boundaries(features, area_counts, "prefecture", centers)


def match_city_features(
    features: Sequence[RawFeature],
    area_counts: Mapping[str, AreaCount],
    centers: Optional[Mapping[str, LatLng]] = None
) -> BoundaryFeatureCollection:
    return match_boundaries(features, area_counts, "city", centers)


def match_town_features(
    features: Sequence[RawFeature],
    area_counts: Mapping[str, AreaCount],
    centers: Optional[Mapping[str, LatLng]] = None
) -> BoundaryFeatureCollection:
    return match_boundaries(features, area_counts, "town", centers)
