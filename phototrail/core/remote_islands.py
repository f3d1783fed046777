"""Mainland / remote-island split for prefecture polygons.

Tokyo's polygon is a MultiPolygon covering both the metropolitan mainland and
the Izu and Ogasawara islands hundreds of kilometers to the south. Drawing it
as one feature gives the visual layer a bounding box spanning most of the
Pacific, so the islands are emitted as a separate feature.
"""
from typing import List, Optional, Tuple
from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry

# Normalized prefecture names the split applies to
SPLIT_PREFECTURES = ("東京",)

# A ring whose mean vertex falls east of this longitude is a remote island
REMOTE_ISLAND_MIN_LNG = 140.5
# A ring whose mean vertex falls south of this latitude is a remote island
REMOTE_ISLAND_MAX_LAT = 35.2

REMOTE_ISLANDS_SUFFIX = "（島しょ部）"


def ring_mean(polygon: Polygon) -> Tuple[float, float]:
    """Mean (lat, lng) of a polygon's exterior ring vertices."""
    coords = list(polygon.exterior.coords)
    lng = sum(c[0] for c in coords) / len(coords)
    lat = sum(c[1] for c in coords) / len(coords)
    return lat, lng


def is_remote_island(polygon: Polygon) -> bool:
    lat, lng = ring_mean(polygon)
    return lng > REMOTE_ISLAND_MIN_LNG or lat < REMOTE_ISLAND_MAX_LAT


def split_remote_islands(
    normalized_name: str,
    geometry: BaseGeometry
) -> Optional[Tuple[MultiPolygon, MultiPolygon]]:
    """
    Split a prefecture geometry into (mainland, remote islands).

    Returns None when the prefecture is not subject to the split, the
    geometry is not a MultiPolygon, or either part would be empty.
    """
    if normalized_name not in SPLIT_PREFECTURES:
        return None
    if not isinstance(geometry, MultiPolygon):
        return None

    mainland: List[Polygon] = []
    islands: List[Polygon] = []
    for polygon in geometry.geoms:
        (islands if is_remote_island(polygon) else mainland).append(polygon)

    if not mainland or not islands:
        return None
    return MultiPolygon(mainland), MultiPolygon(islands)
