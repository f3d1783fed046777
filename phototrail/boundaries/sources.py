"""Boundary sources for prefecture, municipality and small-area polygons."""
from phototrail.boundaries.base import BoundarySource
from phototrail.core.config import (
    MUNICIPALITY_GEOJSON_URL_TEMPLATE,
    PREFECTURE_GEOJSON_URL,
    SMALL_AREA_GEOJSON_URL_TEMPLATE,
)

# The national prefecture file is not split by region
NATIONAL_CODE = "japan"


class PrefectureBoundarySource(BoundarySource):
    """All 47 prefectures in a single simplified GeoJSON (dataofjapan/land)."""

    level = "prefecture"

    def __init__(self, url: str = PREFECTURE_GEOJSON_URL, **kwargs):
        super().__init__(**kwargs)
        self.url = url

    def url_for(self, code: str = NATIONAL_CODE) -> str:
        return self.url

    def get_name(self) -> str:
        return "prefecture"


class MunicipalityBoundarySource(BoundarySource):
    """Municipality polygons per prefecture (smartnews-smri/japan-topography, N03)."""

    level = "city"

    def __init__(self, url_template: str = MUNICIPALITY_GEOJSON_URL_TEMPLATE, **kwargs):
        super().__init__(**kwargs)
        self.url_template = url_template

    def url_for(self, code: str) -> str:
        return self.url_template.format(code=code)

    def get_name(self) -> str:
        return "municipality"


class SmallAreaBoundarySource(BoundarySource):
    """Town / chome polygons per prefecture (frogcat/japan-small-area)."""

    level = "town"

    def __init__(self, url_template: str = SMALL_AREA_GEOJSON_URL_TEMPLATE, **kwargs):
        super().__init__(**kwargs)
        self.url_template = url_template

    def url_for(self, code: str) -> str:
        return self.url_template.format(code=code)

    def get_name(self) -> str:
        return "small_area"
