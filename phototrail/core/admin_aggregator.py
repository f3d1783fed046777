"""Aggregation of observations by resolved administrative area."""
from typing import Dict, List, Optional, Sequence
from phototrail.core.config import ADMIN_LEVELS, UNKNOWN_AREA
from phototrail.core.intensity import log_intensity
from phototrail.core.models import (
    AddressedObservation,
    AdminAddress,
    AdminAreaCell,
    AdminBoundaryStats,
    LocatedObservation,
)
from phototrail.utils.timing import time_function


def _join(parent: Optional[str], child: Optional[str]) -> Optional[str]:
    # Parent is prefixed so same-named children in different parents stay apart
    if parent and child:
        return f"{parent} {child}"
    return child


def area_key_for(address: AdminAddress, level: str) -> str:
    """
    Derive the aggregation key for an address at one administrative level.

    Args:
        address: Resolved address
        level: "prefecture", "city" or "town"

    Returns:
        Area key, or the "不明" sentinel when the level's field is missing
    """
    if level == "prefecture":
        key = address.prefecture
    elif level == "city":
        key = _join(address.prefecture, address.city)
    elif level == "town":
        key = _join(address.city, address.town)
    else:
        raise ValueError(f"Unknown admin level: {level}")
    return key or UNKNOWN_AREA


class _AreaAccumulator:
    """Running member list and streaming-mean centroid for one area."""

    def __init__(self):
        self.observations: List[LocatedObservation] = []
        self.center_lat = 0.0
        self.center_lng = 0.0

    def add(self, observation: LocatedObservation):
        self.observations.append(observation)
        n = len(self.observations)
        self.center_lat = (self.center_lat * (n - 1) + observation.latitude) / n
        self.center_lng = (self.center_lng * (n - 1) + observation.longitude) / n


@time_function
def build_admin_boundary_stats(
    observations: Sequence[AddressedObservation],
    level: str
) -> AdminBoundaryStats:
    """
    Group addressed observations by administrative area name.

    City keys are "{prefecture} {city}" and town keys "{city} {town}" when
    both parts are known. Observations without the level's field fall into
    the "不明" bucket.

    Args:
        observations: Observations with their resolved addresses
        level: "prefecture", "city" or "town"

    Returns:
        AdminBoundaryStats with cells sorted by count descending
    """
    if level not in ADMIN_LEVELS:
        raise ValueError(f"Unknown admin level: {level}")

    if not observations:
        return AdminBoundaryStats(cells=[], max_count=0, level=level)

    areas: Dict[str, _AreaAccumulator] = {}
    for item in observations:
        key = area_key_for(item.address, level)
        areas.setdefault(key, _AreaAccumulator()).add(item.observation)

    max_count = max(len(area.observations) for area in areas.values())

    cells = []
    for name, area in areas.items():
        count = len(area.observations)
        cells.append(AdminAreaCell(
            id=name,
            name=name,
            level=level,
            observations=area.observations,
            count=count,
            intensity=log_intensity(count, max_count),
            center=(area.center_lat, area.center_lng),
        ))

    cells.sort(key=lambda c: c.count, reverse=True)

    return AdminBoundaryStats(cells=cells, max_count=max_count, level=level)


def admin_level_label(level: str) -> str:
    """Return the Japanese display label for an administrative level."""
    try:
        return ADMIN_LEVELS[level]
    except KeyError:
        raise ValueError(f"Unknown admin level: {level}") from None
