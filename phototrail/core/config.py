"""Configuration management for the PhotoTrail geospatial core."""
import os
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Mapbox reverse geocoding settings
MAPBOX_ACCESS_TOKEN: Optional[str] = os.getenv("MAPBOX_ACCESS_TOKEN")
MAPBOX_GEOCODING_URL: str = os.getenv(
    "MAPBOX_GEOCODING_URL",
    "https://api.mapbox.com/geocoding/v5/mapbox.places",
)
GEOCODE_PLACE_TYPES = ("region", "district", "place", "locality", "neighborhood", "address")
GEOCODE_LANGUAGE: str = os.getenv("GEOCODE_LANGUAGE", "ja")
GEOCODE_TIMEOUT_SEC: float = float(os.getenv("GEOCODE_TIMEOUT_SEC", "10"))
# Mapbox free tier allows roughly 10 requests per second
GEOCODE_REQUEST_DELAY_SEC: float = float(os.getenv("GEOCODE_REQUEST_DELAY_SEC", "0.12"))

# Grid settings
GRID_CELL_SIZE_METERS: float = float(os.getenv("GRID_CELL_SIZE_METERS", "500"))

# Boundary source settings
PREFECTURE_GEOJSON_URL: str = os.getenv(
    "PREFECTURE_GEOJSON_URL",
    "https://raw.githubusercontent.com/dataofjapan/land/master/japan.geojson",
)
MUNICIPALITY_GEOJSON_URL_TEMPLATE: str = os.getenv(
    "MUNICIPALITY_GEOJSON_URL_TEMPLATE",
    "https://raw.githubusercontent.com/smartnews-smri/japan-topography/main/data/municipality/geojson/s0010/N03-21_{code}_210101.json",
)
SMALL_AREA_GEOJSON_URL_TEMPLATE: str = os.getenv(
    "SMALL_AREA_GEOJSON_URL_TEMPLATE",
    "https://frogcat.github.io/japan-small-area/{code}.json",
)
BOUNDARY_FETCH_TIMEOUT_SEC: float = float(os.getenv("BOUNDARY_FETCH_TIMEOUT_SEC", "30"))
BOUNDARY_FETCH_WORKERS: int = int(os.getenv("BOUNDARY_FETCH_WORKERS", "4"))

# Logging and error tracking
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
SENTRY_DSN: Optional[str] = os.getenv("SENTRY_DSN")
ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

# Administrative levels and their display labels
ADMIN_LEVELS = {
    "prefecture": "都道府県",
    "city": "市区町村",
    "town": "町丁目",
}

# Sentinel bucket for observations without a resolved area
UNKNOWN_AREA = "不明"
