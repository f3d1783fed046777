"""Pytest configuration and fixtures."""
from datetime import datetime
import pytest
import requests
from shapely.geometry import MultiPolygon, Polygon
from phototrail.core.models import AddressedObservation, AdminAddress, LocatedObservation, RawFeature


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, json_data=None, status_code=200, invalid_json=False):
        self._json_data = json_data
        self.status_code = status_code
        self.invalid_json = invalid_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self.invalid_json:
            raise ValueError("No JSON object could be decoded")
        return self._json_data


class FakeSession:
    """Records GET calls and answers them from a handler or a fixed response."""

    def __init__(self, handler):
        self.handler = handler
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        result = self.handler(url, params) if callable(self.handler) else self.handler
        if isinstance(result, Exception):
            raise result
        return result


def square(lng: float, lat: float, size: float = 0.01) -> Polygon:
    """Axis-aligned square polygon with its lower-left corner at (lng, lat)."""
    return Polygon([
        (lng, lat), (lng + size, lat), (lng + size, lat + size), (lng, lat + size), (lng, lat)
    ])


def feature_collection(*features):
    return {"type": "FeatureCollection", "features": list(features)}


def polygon_feature(properties, lng: float = 139.7, lat: float = 35.7, size: float = 0.01):
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": {
            "type": "Polygon",
            "coordinates": [[
                [lng, lat], [lng + size, lat], [lng + size, lat + size], [lng, lat + size], [lng, lat]
            ]],
        },
    }


@pytest.fixture
def make_session():
    """Factory for fake requests sessions."""
    return FakeSession


@pytest.fixture
def make_response():
    """Factory for fake responses."""
    return FakeResponse


@pytest.fixture
def make_square():
    return square


@pytest.fixture
def make_feature_collection():
    return feature_collection


@pytest.fixture
def make_polygon_feature():
    return polygon_feature


@pytest.fixture
def sample_observations():
    """Three photo locations around Tokyo, the last one far from the others."""
    return [
        LocatedObservation("p1", 35.70, 139.70, datetime(2024, 5, 3, 9, 0)),
        LocatedObservation("p2", 35.701, 139.701, datetime(2024, 5, 3, 9, 30)),
        LocatedObservation("p3", 35.80, 139.90, datetime(2024, 5, 3, 11, 15)),
    ]


@pytest.fixture
def addressed_observations():
    """Observations with resolved addresses across two wards and one unknown."""
    items = [
        ("a1", 35.70, 139.66, AdminAddress("東京都", "中野区", "中央3丁目")),
        ("a2", 35.71, 139.67, AdminAddress("東京都", "中野区", None)),
        ("a3", 35.68, 139.70, AdminAddress("東京都", "新宿区", "西新宿2丁目")),
        ("a4", 35.00, 135.00, AdminAddress()),
    ]
    return [
        AddressedObservation(LocatedObservation(obs_id, lat, lng), address)
        for obs_id, lat, lng, address in items
    ]


@pytest.fixture
def nakano_payload():
    """Reverse geocoding response for a point in Nakano ward."""
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "id": "address.1",
                "place_type": ["address"],
                "text": "中央三丁目",
                "place_name": "中央三丁目5番, 中野区, 東京都, 日本",
                "context": [
                    {"id": "locality.10", "text": "中野区"},
                    {"id": "place.20", "text": "東京都"},
                    {"id": "region.30", "text": "東京都"},
                    {"id": "country.40", "text": "日本"},
                ],
            },
            {"id": "locality.10", "place_type": ["locality"], "text": "中野区"},
            {"id": "place.20", "place_type": ["place"], "text": "東京都"},
            {"id": "region.30", "place_type": ["region"], "text": "東京都"},
        ],
    }


@pytest.fixture
def tokyo_feature():
    """Tokyo as a MultiPolygon of mainland plus Izu and Ogasawara islands."""
    mainland = square(139.3, 35.6, 0.5)
    oshima = square(139.35, 34.7, 0.1)
    chichijima = square(142.15, 27.05, 0.05)
    return RawFeature(
        properties={"nam_ja": "東京都"},
        geometry=MultiPolygon([mainland, oshima, chichijima]),
    )
