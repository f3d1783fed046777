"""Exception types raised at the I/O edges of the core."""


class PhotoTrailError(Exception):
    """Base class for errors raised by the PhotoTrail core."""


class GeocodingError(PhotoTrailError):
    """Reverse geocoding request failed or returned an unusable payload."""


class BoundarySourceError(PhotoTrailError):
    """Boundary GeoJSON could not be fetched or parsed."""
