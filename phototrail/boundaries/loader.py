"""Loading of boundary polygons for the administrative levels in use."""
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional
import requests
from phototrail.boundaries.base import BoundarySource
from phototrail.boundaries.cache import BoundaryCache
from phototrail.boundaries.sources import (
    NATIONAL_CODE,
    MunicipalityBoundarySource,
    PrefectureBoundarySource,
    SmallAreaBoundarySource,
)
from phototrail.core.config import BOUNDARY_FETCH_WORKERS
from phototrail.core.models import RawFeature
from phototrail.core.prefectures import prefecture_code
from phototrail.utils.logging import log_structured
from phototrail.utils.timing import Timer


class BoundaryLoader:
    """Fetches boundary polygons through a shared BoundaryCache."""

    def __init__(
        self,
        cache: Optional[BoundaryCache] = None,
        session: Optional[requests.Session] = None,
        max_workers: int = BOUNDARY_FETCH_WORKERS,
        prefecture_source: Optional[BoundarySource] = None,
        municipality_source: Optional[BoundarySource] = None,
        small_area_source: Optional[BoundarySource] = None
    ):
        """
        Initialize loader.

        Args:
            cache: Shared cache (a private one is created if omitted)
            session: requests session shared by the default sources
            max_workers: Concurrent fetches for multi-prefecture loads
            prefecture_source: Override for the prefecture source
            municipality_source: Override for the municipality source
            small_area_source: Override for the small-area source
        """
        self.cache = cache if cache is not None else BoundaryCache()
        self.max_workers = max(1, max_workers)
        self.prefecture_source = prefecture_source or PrefectureBoundarySource(session=session)
        self.municipality_source = municipality_source or MunicipalityBoundarySource(session=session)
        self.small_area_source = small_area_source or SmallAreaBoundarySource(session=session)

    def _load_code(self, source: BoundarySource, code: str):
        return self.cache.get_or_fetch(source.cache_key(code), lambda: source.fetch(code))

    def load_prefectures(self) -> Optional[List[RawFeature]]:
        """Load the national prefecture polygons, or None if unavailable."""
        features = self._load_code(self.prefecture_source, NATIONAL_CODE)
        return list(features) if features else None

    def load_cities(self, prefecture_names: Iterable[str]) -> Optional[List[RawFeature]]:
        """Load municipality polygons for the given prefectures."""
        return self._load_by_prefecture(self.municipality_source, prefecture_names)

    def load_towns(self, prefecture_names: Iterable[str]) -> Optional[List[RawFeature]]:
        """Load town / chome polygons for the given prefectures."""
        return self._load_by_prefecture(self.small_area_source, prefecture_names)

    def load_level(self, level: str, prefecture_names: Iterable[str] = ()) -> Optional[List[RawFeature]]:
        if level == "prefecture":
            return self.load_prefectures()
        if level == "city":
            return self.load_cities(prefecture_names)
        if level == "town":
            return self.load_towns(prefecture_names)
        raise ValueError(f"Unknown admin level: {level}")

    def _load_by_prefecture(
        self,
        source: BoundarySource,
        prefecture_names: Iterable[str]
    ) -> Optional[List[RawFeature]]:
        """
        Fetch one file per prefecture code concurrently and merge the features.

        A region that fails to load contributes nothing; the others are
        still returned. Returns None when no region produced features, in
        which case callers fall back to point markers.
        """
        codes: List[str] = []
        for name in prefecture_names:
            code = prefecture_code(name)
            if code is None:
                log_structured("debug", "No prefecture code for name", prefecture=name)
                continue
            if code not in codes:
                codes.append(code)

        if not codes:
            return None

        with Timer("load_boundaries", source=source.get_name(), codes=codes):
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(codes))) as executor:
                results = list(executor.map(lambda code: self._load_code(source, code), codes))

        features: List[RawFeature] = []
        for code, loaded in zip(codes, results):
            if loaded is None:
                log_structured("warning", "No polygon data for region", source=source.get_name(), code=code)
                continue
            features.extend(loaded)

        return features or None
