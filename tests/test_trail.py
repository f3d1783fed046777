"""Tests for trail statistics, proximity and event visit matching."""
from datetime import date, datetime
import pytest
from phototrail.core.event_matching import match_observations_to_events
from phototrail.core.models import EventItem, LocatedObservation
from phototrail.core.proximity import haversine_km, observations_within
from phototrail.core.trail_stats import calculate_day_stats, format_duration


def test_haversine_km():
    """Test great-circle distance."""
    assert haversine_km(35.0, 139.0, 35.0, 139.0) == 0
    # One degree of latitude is about 111 km
    assert haversine_km(35.0, 139.0, 36.0, 139.0) == pytest.approx(111.19, abs=0.1)
    assert haversine_km(35.0, 139.0, 36.0, 140.0) == pytest.approx(haversine_km(36.0, 140.0, 35.0, 139.0))


def test_observations_within(sample_observations):
    """Test radius filter keeps input order and distances."""
    nearby = observations_within(35.70, 139.70, sample_observations, 1.0)
    assert [o.id for o, _ in nearby] == ["p1", "p2"]
    assert nearby[0][1] == 0


def test_calculate_day_stats(sample_observations):
    """Test distance, time span and ordering."""
    stats = calculate_day_stats(list(reversed(sample_observations)))

    assert stats.total_photos == 3
    assert [o.id for o in stats.locations] == ["p1", "p2", "p3"]
    assert stats.start_time == datetime(2024, 5, 3, 9, 0)
    assert stats.end_time == datetime(2024, 5, 3, 11, 15)
    assert stats.duration_minutes == 135
    expected = haversine_km(35.70, 139.70, 35.701, 139.701) + haversine_km(35.701, 139.701, 35.80, 139.90)
    assert stats.total_distance_km == pytest.approx(round(expected, 2))


def test_calculate_day_stats_without_timestamps():
    """Test observations without timestamps have no duration."""
    stats = calculate_day_stats([LocatedObservation("a", 35.0, 139.0), LocatedObservation("b", 35.0, 139.0)])
    assert stats.duration_minutes == 0
    assert stats.start_time is None
    assert stats.total_distance_km == 0


def test_calculate_day_stats_empty():
    """Test empty input."""
    stats = calculate_day_stats([])
    assert stats.total_photos == 0
    assert stats.locations == []


@pytest.mark.parametrize("minutes,expected", [
    (0, "0分"),
    (45, "45分"),
    (60, "1時間"),
    (125, "2時間 5分"),
])
def test_format_duration(minutes, expected):
    """Test Japanese duration formatting."""
    assert format_duration(minutes) == expected


def test_event_visit_within_radius_and_dates(sample_observations):
    """Test an event near a photo taken during the event is visited."""
    event = EventItem(
        "e1", "中野まつり", latitude=35.705, longitude=139.705,
        event_start=date(2024, 5, 1), event_end=date(2024, 5, 3),
    )
    visits = match_observations_to_events(sample_observations, [event])

    assert len(visits) == 1
    assert visits[0].event_id == "e1"
    assert visits[0].observation_id == "p1"
    assert visits[0].visited_at == datetime(2024, 5, 3, 9, 0)


def test_event_outside_dates_not_visited(sample_observations):
    """Test photos outside the event dates do not count."""
    event = EventItem(
        "e1", "花火大会", latitude=35.70, longitude=139.70,
        event_start=date(2024, 8, 1), event_end=date(2024, 8, 2),
    )
    assert match_observations_to_events(sample_observations, [event]) == []


def test_event_without_dates_matches_on_distance(sample_observations):
    """Test undated events match on distance alone."""
    event = EventItem("e2", "展望台", latitude=35.80, longitude=139.90)
    visits = match_observations_to_events(sample_observations, [event])
    assert [v.observation_id for v in visits] == ["p3"]


def test_event_too_far_or_skipped(sample_observations):
    """Test far, already visited and unlocated events are skipped."""
    events = [
        EventItem("far", "札幌", latitude=43.06, longitude=141.35),
        EventItem("done", "済み", latitude=35.70, longitude=139.70, visited=True),
        EventItem("nowhere", "未定"),
    ]
    assert match_observations_to_events(sample_observations, events) == []


def test_event_radius(sample_observations):
    """Test the radius is configurable."""
    event = EventItem("e3", "公園", latitude=35.75, longitude=139.80)
    assert match_observations_to_events(sample_observations, [event], radius_km=1.0) == []
    assert len(match_observations_to_events(sample_observations, [event], radius_km=20.0)) == 1
