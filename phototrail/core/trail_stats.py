"""Daily trail statistics over a set of photo locations."""
from datetime import datetime
from typing import Sequence
from phototrail.core.models import DayStats, LocatedObservation
from phototrail.core.proximity import haversine_km


def calculate_day_stats(observations: Sequence[LocatedObservation]) -> DayStats:
    """
    Summarize a photo trail: leg distance, start/end time and duration.

    Observations are ordered by timestamp; those without one sort first.

    Args:
        observations: Located observations for one trail

    Returns:
        DayStats with distance in km (2 decimals) and duration in minutes
    """
    if not observations:
        return DayStats(
            total_photos=0,
            total_distance_km=0.0,
            start_time=None,
            end_time=None,
            duration_minutes=0,
            locations=[],
        )

    ordered = sorted(observations, key=lambda o: (o.timestamp is not None, o.timestamp or datetime.min))

    total_distance = 0.0
    for previous, current in zip(ordered, ordered[1:]):
        total_distance += haversine_km(
            previous.latitude, previous.longitude,
            current.latitude, current.longitude,
        )

    start_time = ordered[0].timestamp
    end_time = ordered[-1].timestamp
    duration = 0
    if start_time is not None and end_time is not None:
        duration = round((end_time - start_time).total_seconds() / 60)

    return DayStats(
        total_photos=len(observations),
        total_distance_km=round(total_distance, 2),
        start_time=start_time,
        end_time=end_time,
        duration_minutes=duration,
        locations=ordered,
    )


def format_duration(minutes: int) -> str:
    """Format minutes as e.g. "45分", "2時間", "2時間 5分"."""
    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f"{mins}分"
    if mins > 0:
        return f"{hours}時間 {mins}分"
    return f"{hours}時間"
