"""Uniform geodesic grid aggregation of photo locations."""
import math
from typing import Dict, List, Sequence, Tuple
from phototrail.core.config import GRID_CELL_SIZE_METERS
from phototrail.core.degrees import meters_to_lat_degrees, meters_to_lng_degrees
from phototrail.core.intensity import log_intensity
from phototrail.core.models import GridBounds, GridCell, GridStats, LocatedObservation
from phototrail.utils.timing import time_function


def grid_index(
    lat: float,
    lng: float,
    origin_lat: float,
    origin_lng: float,
    cell_size_lat: float,
    cell_size_lng: float
) -> Tuple[int, int]:
    """Return the (row, col) of the cell containing a coordinate."""
    row = math.floor((lat - origin_lat) / cell_size_lat)
    col = math.floor((lng - origin_lng) / cell_size_lng)
    return row, col


@time_function
def build_photo_grid(
    observations: Sequence[LocatedObservation],
    cell_size_meters: float = GRID_CELL_SIZE_METERS
) -> GridStats:
    """
    Bucket observations into a uniform grid and compute per-cell intensity.

    The bounding box of all observations is padded by one cell on every side.
    Cell size in degrees is evaluated once at the bounding-box center latitude
    and reused for every observation, so cells are only approximately uniform
    in ground area away from that latitude.

    Args:
        observations: Located observations to aggregate
        cell_size_meters: Cell edge length in meters

    Returns:
        GridStats with cells sorted by count descending
    """
    if cell_size_meters <= 0:
        raise ValueError(f"cell_size_meters must be positive, got {cell_size_meters}")

    if not observations:
        return GridStats(cells=[], max_count=0, cell_size_meters=cell_size_meters)

    min_lat = min(o.latitude for o in observations)
    max_lat = max(o.latitude for o in observations)
    min_lng = min(o.longitude for o in observations)
    center_lat = (min_lat + max_lat) / 2

    cell_size_lat = meters_to_lat_degrees(cell_size_meters)
    cell_size_lng = meters_to_lng_degrees(cell_size_meters, center_lat)

    # One cell of padding keeps edge points off the outer boundary
    origin_lat = min_lat - cell_size_lat
    origin_lng = min_lng - cell_size_lng

    groups: Dict[Tuple[int, int], List[LocatedObservation]] = {}
    for observation in observations:
        key = grid_index(
            observation.latitude,
            observation.longitude,
            origin_lat,
            origin_lng,
            cell_size_lat,
            cell_size_lng,
        )
        groups.setdefault(key, []).append(observation)

    max_count = max(len(members) for members in groups.values())

    cells = []
    for (row, col), members in groups.items():
        cell_min_lat = origin_lat + row * cell_size_lat
        cell_max_lat = cell_min_lat + cell_size_lat
        cell_min_lng = origin_lng + col * cell_size_lng
        cell_max_lng = cell_min_lng + cell_size_lng
        count = len(members)

        cells.append(GridCell(
            id=f"{row}:{col}",
            row=row,
            col=col,
            center=((cell_min_lat + cell_max_lat) / 2, (cell_min_lng + cell_max_lng) / 2),
            bounds=GridBounds(
                min_lat=cell_min_lat,
                max_lat=cell_max_lat,
                min_lng=cell_min_lng,
                max_lng=cell_max_lng,
            ),
            observations=members,
            count=count,
            intensity=log_intensity(count, max_count),
        ))

    # Stable sort keeps first-seen order among equal counts
    cells.sort(key=lambda c: c.count, reverse=True)

    return GridStats(cells=cells, max_count=max_count, cell_size_meters=cell_size_meters)
