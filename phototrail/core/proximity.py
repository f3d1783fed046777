"""Great-circle distance helpers."""
import math
from typing import List, Sequence, Tuple
from phototrail.core.models import LocatedObservation

# Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Calculate distance between two points using the Haversine formula.

    Args:
        lat1: Latitude of first point
        lng1: Longitude of first point
        lat2: Latitude of second point
        lng2: Longitude of second point

    Returns:
        Distance in kilometers
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlng / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def observations_within(
    latitude: float,
    longitude: float,
    observations: Sequence[LocatedObservation],
    radius_km: float
) -> List[Tuple[LocatedObservation, float]]:
    """Return (observation, distance_km) pairs within ``radius_km``, in input order."""
    results = []
    for observation in observations:
        distance = haversine_km(latitude, longitude, observation.latitude, observation.longitude)
        if distance <= radius_km:
            results.append((observation, distance))
    return results
