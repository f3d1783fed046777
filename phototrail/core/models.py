"""Data models for observations, aggregates and boundary features."""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, List, Dict, Any, Tuple
import geopandas as gpd
from shapely.geometry import box, mapping
from shapely.geometry.base import BaseGeometry
from phototrail.core.config import UNKNOWN_AREA


@dataclass(frozen=True)
class LocatedObservation:
    """A photo location extracted from EXIF data."""
    id: str
    latitude: float
    longitude: float
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class AdminAddress:
    """Administrative address resolved for one observation.

    ``None`` means unresolved; fields are never empty strings.
    """
    prefecture: Optional[str] = None
    city: Optional[str] = None
    town: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        return any((self.prefecture, self.city, self.town))

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"prefecture": self.prefecture, "city": self.city, "town": self.town}


@dataclass(frozen=True)
class AddressedObservation:
    """Observation paired with its resolved administrative address."""
    observation: LocatedObservation
    address: AdminAddress

    @property
    def latitude(self) -> float:
        return self.observation.latitude

    @property
    def longitude(self) -> float:
        return self.observation.longitude


@dataclass(frozen=True)
class ContextEntry:
    """Ancestor tag from a geocoding response context chain."""
    id: str
    text: Optional[str]

    @property
    def category(self) -> str:
        return self.id.split(".", 1)[0]


@dataclass(frozen=True)
class PlaceFeature:
    """One ranked feature from a reverse geocoding response."""
    place_types: Tuple[str, ...]
    text: Optional[str]
    context: Tuple[ContextEntry, ...] = ()

    @property
    def category(self) -> Optional[str]:
        return self.place_types[0] if self.place_types else None


@dataclass(frozen=True)
class GridBounds:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float


@dataclass
class GridCell:
    """One cell of a geodesic grid run. ``id`` is only stable within a run."""
    id: str
    row: int
    col: int
    center: Tuple[float, float]
    bounds: GridBounds
    observations: List[LocatedObservation]
    count: int
    intensity: float


@dataclass
class GridStats:
    """Result of bucketing observations into a uniform grid."""
    cells: List[GridCell]
    max_count: int
    cell_size_meters: float

    @property
    def total_cells(self) -> int:
        return len(self.cells)

    def to_geodataframe(self) -> gpd.GeoDataFrame:
        """Convert grid cells to a GeoDataFrame of cell rectangles (EPSG:4326)."""
        records = [
            {
                "id": cell.id,
                "row": cell.row,
                "col": cell.col,
                "count": cell.count,
                "intensity": cell.intensity,
                "geometry": box(
                    cell.bounds.min_lng,
                    cell.bounds.min_lat,
                    cell.bounds.max_lng,
                    cell.bounds.max_lat,
                ),
            }
            for cell in self.cells
        ]
        if not records:
            return gpd.GeoDataFrame(
                columns=["id", "row", "col", "count", "intensity", "geometry"],
                geometry="geometry",
                crs="EPSG:4326",
            )
        return gpd.GeoDataFrame(records, geometry="geometry", crs="EPSG:4326")


@dataclass(frozen=True)
class AreaCount:
    """Count and intensity for one aggregated area, as consumed by boundary matching."""
    count: int
    intensity: float


@dataclass
class AdminAreaCell:
    """Observations grouped under one administrative area name."""
    id: str
    name: str
    level: str
    observations: List[LocatedObservation]
    count: int
    intensity: float
    center: Tuple[float, float]


@dataclass
class AdminBoundaryStats:
    """Result of aggregating observations by administrative area."""
    cells: List[AdminAreaCell]
    max_count: int
    level: str

    @property
    def total_areas(self) -> int:
        return len(self.cells)

    def counts_by_name(self, include_unknown: bool = False) -> Dict[str, AreaCount]:
        """Build the name -> count/intensity map used by boundary matching."""
        return {
            cell.name: AreaCount(cell.count, cell.intensity)
            for cell in self.cells
            if include_unknown or cell.name != UNKNOWN_AREA
        }

    def centers_by_name(self) -> Dict[str, Tuple[float, float]]:
        """Build the name -> (lat, lng) centroid hints used for disambiguation."""
        return {cell.name: cell.center for cell in self.cells}


@dataclass(frozen=True)
class RawFeature:
    """Boundary polygon parsed from an external GeoJSON source."""
    properties: Dict[str, str]
    geometry: BaseGeometry


@dataclass
class BoundaryFeature:
    """Boundary polygon annotated with the area it was matched to."""
    name: str
    matched_key: str
    count: int
    intensity: float
    geometry: BaseGeometry
    part: Optional[str] = None

    def to_geojson(self) -> Dict[str, Any]:
        properties = {
            "name": self.name,
            "matched_key": self.matched_key,
            "count": self.count,
            "intensity": self.intensity,
        }
        if self.part:
            properties["part"] = self.part
        return {
            "type": "Feature",
            "properties": properties,
            "geometry": mapping(self.geometry),
        }


@dataclass
class BoundaryFeatureCollection:
    """Matched boundary features produced by one match pass."""
    features: List[BoundaryFeature] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.features)

    def to_geojson(self) -> Dict[str, Any]:
        return {
            "type": "FeatureCollection",
            "features": [feature.to_geojson() for feature in self.features],
        }

    def to_geodataframe(self) -> gpd.GeoDataFrame:
        columns = ["name", "matched_key", "count", "intensity", "part", "geometry"]
        if not self.features:
            return gpd.GeoDataFrame(columns=columns, geometry="geometry", crs="EPSG:4326")
        records = [
            {
                "name": f.name,
                "matched_key": f.matched_key,
                "count": f.count,
                "intensity": f.intensity,
                "part": f.part,
                "geometry": f.geometry,
            }
            for f in self.features
        ]
        return gpd.GeoDataFrame(records, columns=columns, geometry="geometry", crs="EPSG:4326")


@dataclass
class DayStats:
    """Summary of a photo trail over one set of observations."""
    total_photos: int
    total_distance_km: float
    start_time: Optional[datetime]
    end_time: Optional[datetime]
    duration_minutes: int
    locations: List[LocatedObservation]


@dataclass
class EventItem:
    """A planned event that observations can mark as visited."""
    id: str
    name: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    event_start: Optional[date] = None
    event_end: Optional[date] = None
    visited: bool = False


@dataclass(frozen=True)
class EventVisit:
    """An event matched to the observation that proves the visit."""
    event_id: str
    observation_id: str
    visited_at: Optional[datetime]
