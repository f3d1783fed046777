"""Reverse geocoding of photo locations into administrative addresses."""
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence, Tuple
import requests
from phototrail.core.admin_resolver import parse_place_features, resolve_admin_address
from phototrail.core.config import (
    GEOCODE_LANGUAGE,
    GEOCODE_PLACE_TYPES,
    GEOCODE_REQUEST_DELAY_SEC,
    GEOCODE_TIMEOUT_SEC,
    MAPBOX_ACCESS_TOKEN,
    MAPBOX_GEOCODING_URL,
)
from phototrail.core.exceptions import GeocodingError
from phototrail.core.models import (
    AddressedObservation,
    AdminAddress,
    LocatedObservation,
    PlaceFeature,
)
from phototrail.utils.error_handler import safe_execute
from phototrail.utils.logging import log_structured
from phototrail.utils.timing import Timer

ProgressCallback = Callable[[int, int], None]


class ReverseGeocoder(ABC):
    """Base class for reverse geocoding providers."""

    @abstractmethod
    def reverse_geocode(self, latitude: float, longitude: float) -> AdminAddress:
        """
        Resolve a coordinate to an administrative address.

        Implementations never raise for provider failures; they return an
        unresolved AdminAddress instead.
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Get provider name."""
        pass


class MapboxReverseGeocoder(ReverseGeocoder):
    """Reverse geocoder backed by the Mapbox Geocoding v5 places endpoint."""

    def __init__(
        self,
        access_token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        timeout: float = GEOCODE_TIMEOUT_SEC
    ):
        """
        Initialize Mapbox geocoder.

        Args:
            access_token: Mapbox token (defaults to MAPBOX_ACCESS_TOKEN)
            session: Optional requests session for connection reuse
            base_url: Places endpoint (defaults to MAPBOX_GEOCODING_URL)
            timeout: Request timeout in seconds
        """
        self.access_token = access_token or MAPBOX_ACCESS_TOKEN
        self.session = session or requests.Session()
        self.base_url = (base_url or MAPBOX_GEOCODING_URL).rstrip("/")
        self.timeout = timeout

    def get_name(self) -> str:
        return "Mapbox"

    def fetch_features(self, latitude: float, longitude: float) -> List[PlaceFeature]:
        """
        Request ranked place features for a coordinate.

        Raises:
            GeocodingError: On missing token, transport error, non-2xx status
                or a payload that is not a feature collection
        """
        if not self.access_token:
            raise GeocodingError("Mapbox access token is not configured")

        url = f"{self.base_url}/{longitude},{latitude}.json"
        params = {
            "types": ",".join(GEOCODE_PLACE_TYPES),
            "language": GEOCODE_LANGUAGE,
            "access_token": self.access_token,
        }

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            raise GeocodingError(f"Geocoding request failed: {type(e).__name__}") from e
        except ValueError as e:
            raise GeocodingError("Geocoding response is not valid JSON") from e

        return parse_place_features(payload)

    def reverse_geocode(self, latitude: float, longitude: float) -> AdminAddress:
        try:
            features = self.fetch_features(latitude, longitude)
        except GeocodingError as e:
            log_structured(
                "warning",
                "Reverse geocoding failed",
                provider=self.get_name(),
                latitude=latitude,
                longitude=longitude,
                reason=str(e),
            )
            return AdminAddress()
        return resolve_admin_address(features)


def batch_reverse_geocode(
    geocoder: ReverseGeocoder,
    coordinates: Sequence[Tuple[float, float]],
    on_progress: Optional[ProgressCallback] = None,
    cancel_event: Optional[threading.Event] = None,
    delay_sec: float = GEOCODE_REQUEST_DELAY_SEC
) -> List[AdminAddress]:
    """
    Reverse geocode coordinates one at a time with a fixed delay between requests.

    Requests are issued sequentially to respect the provider rate limit.
    Cancellation is cooperative: once ``cancel_event`` is set no new request
    is started and the results gathered so far are returned.

    Args:
        geocoder: Provider used for each coordinate
        coordinates: (latitude, longitude) pairs
        on_progress: Called with (completed, total) after every request
        cancel_event: Event signalling cancellation
        delay_sec: Minimum pause between consecutive requests

    Returns:
        One AdminAddress per processed coordinate, in input order
    """
    results: List[AdminAddress] = []
    total = len(coordinates)

    with Timer("batch_reverse_geocode", total=total, provider=geocoder.get_name()):
        for i, (latitude, longitude) in enumerate(coordinates):
            if cancel_event is not None and cancel_event.is_set():
                log_structured("info", "Reverse geocoding cancelled", completed=i, total=total)
                break

            address = safe_execute(
                geocoder.reverse_geocode,
                latitude,
                longitude,
                default_return=AdminAddress(),
            )
            results.append(address)

            if on_progress:
                on_progress(i + 1, total)

            if i < total - 1 and delay_sec > 0:
                time.sleep(delay_sec)

    return results


def geocode_observations(
    geocoder: ReverseGeocoder,
    observations: Sequence[LocatedObservation],
    on_progress: Optional[ProgressCallback] = None,
    cancel_event: Optional[threading.Event] = None,
    delay_sec: float = GEOCODE_REQUEST_DELAY_SEC
) -> List[AddressedObservation]:
    """Reverse geocode observations and pair each with its address."""
    addresses = batch_reverse_geocode(
        geocoder,
        [(o.latitude, o.longitude) for o in observations],
        on_progress=on_progress,
        cancel_event=cancel_event,
        delay_sec=delay_sec,
    )
    return attach_admin_addresses(observations, addresses)


def attach_admin_addresses(
    observations: Sequence[LocatedObservation],
    addresses: Sequence[AdminAddress]
) -> List[AddressedObservation]:
    """Pair observations with resolved addresses; unmatched tails are dropped."""
    return [
        AddressedObservation(observation=observation, address=address)
        for observation, address in zip(observations, addresses)
    ]
