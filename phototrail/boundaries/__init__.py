"""Boundary polygon sources and caching."""
from phototrail.boundaries.base import BoundarySource
from phototrail.boundaries.cache import BoundaryCache
from phototrail.boundaries.loader import BoundaryLoader
from phototrail.boundaries.sources import (
    MunicipalityBoundarySource,
    PrefectureBoundarySource,
    SmallAreaBoundarySource,
)

__all__ = [
    "BoundarySource",
    "BoundaryCache",
    "BoundaryLoader",
    "PrefectureBoundarySource",
    "MunicipalityBoundarySource",
    "SmallAreaBoundarySource",
]
