"""Metric distance to latitude/longitude degree conversion."""
import math

# Approximate length of one degree of latitude in meters
METERS_PER_DEGREE = 111320.0


def meters_to_lat_degrees(meters: float) -> float:
    """Convert a north-south distance in meters to degrees of latitude."""
    return meters / METERS_PER_DEGREE


def meters_to_lng_degrees(meters: float, at_latitude: float) -> float:
    """
    Convert an east-west distance in meters to degrees of longitude.

    The size of a longitude degree shrinks with latitude, so the caller passes
    one representative latitude (usually the bounding-box center) and reuses
    the result for a whole grid run.

    Args:
        meters: Distance in meters
        at_latitude: Reference latitude in degrees

    Returns:
        Longitude delta in degrees (``inf`` at the poles)
    """
    cos_lat = math.cos(math.radians(at_latitude))
    if cos_lat == 0:
        return math.inf
    return meters / (METERS_PER_DEGREE * cos_lat)
