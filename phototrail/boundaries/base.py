"""Base class for boundary GeoJSON sources."""
from abc import ABC, abstractmethod
from typing import List, Optional
import requests
from phototrail.core.config import BOUNDARY_FETCH_TIMEOUT_SEC
from phototrail.core.exceptions import BoundarySourceError
from phototrail.core.geojson import parse_feature_collection
from phototrail.core.models import RawFeature


class BoundarySource(ABC):
    """Base class for externally hosted boundary polygon datasets."""

    #: Administrative level the source provides polygons for
    level: str = ""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = BOUNDARY_FETCH_TIMEOUT_SEC
    ):
        """
        Initialize boundary source.

        Args:
            session: Optional requests session
            timeout: Request timeout in seconds
        """
        self.session = session or requests.Session()
        self.timeout = timeout

    @abstractmethod
    def url_for(self, code: str) -> str:
        """
        Get the download URL for one region code.

        Args:
            code: Two-digit prefecture code, or a fixed key for national files
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Get source name."""
        pass

    def cache_key(self, code: str) -> str:
        return f"{self.get_name()}:{code}"

    def fetch(self, code: str) -> List[RawFeature]:
        """
        Download and parse the polygons for one region code.

        Raises:
            BoundarySourceError: On transport errors, non-2xx status or a
                payload that is not a FeatureCollection
        """
        url = self.url_for(code)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            raise BoundarySourceError(f"Failed to fetch GeoJSON from {url}: {e}") from e
        except ValueError as e:
            raise BoundarySourceError(f"GeoJSON from {url} is not valid JSON") from e

        return parse_feature_collection(payload)
