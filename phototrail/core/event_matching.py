"""Matching of photo locations to planned events (visit detection)."""
from typing import List, Sequence
from phototrail.core.models import EventItem, EventVisit, LocatedObservation
from phototrail.core.proximity import observations_within

# Photos taken within this distance of an event count as a visit
DEFAULT_VISIT_RADIUS_KM = 2.0


def _within_dates(event: EventItem, observation: LocatedObservation) -> bool:
    if event.event_start is None or event.event_end is None:
        return True
    if observation.timestamp is None:
        return False
    # End date is inclusive
    return event.event_start <= observation.timestamp.date() <= event.event_end


def match_observations_to_events(
    observations: Sequence[LocatedObservation],
    events: Sequence[EventItem],
    radius_km: float = DEFAULT_VISIT_RADIUS_KM
) -> List[EventVisit]:
    """
    Find the first observation proving a visit to each unvisited event.

    An observation matches when it lies within ``radius_km`` of the event
    and, if the event has both a start and end date, was taken within that
    date range. Events without coordinates are skipped.

    Args:
        observations: Candidate photo locations, in priority order
        events: Events to check
        radius_km: Match radius in kilometers

    Returns:
        One EventVisit per matched event
    """
    visits = []
    for event in events:
        if event.visited or event.latitude is None or event.longitude is None:
            continue
        nearby = observations_within(event.latitude, event.longitude, observations, radius_km)
        for observation, _distance in nearby:
            if not _within_dates(event, observation):
                continue
            visits.append(EventVisit(
                event_id=event.id,
                observation_id=observation.id,
                visited_at=observation.timestamp,
            ))
            break
    return visits
