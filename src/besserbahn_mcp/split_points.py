"""Derive promising split stations from a journey's own stopovers.

A stopover with a long scheduled dwell is more likely a real interchange than
a signal or technical stop. This is a heuristic: nothing guarantees that a
journey can actually be split at the returned stations.
"""

from datetime import timedelta

from .models import JourneyCandidate

MIN_DWELL_SECONDS = 120
MAX_SPLIT_POINTS = 3


def split_points(
    candidate: JourneyCandidate,
    max_points: int = MAX_SPLIT_POINTS,
    min_dwell_seconds: int = MIN_DWELL_SECONDS,
) -> list[str]:
    """Return up to `max_points` station names, longest dwell first.

    Stopovers without both planned times are ignored. A station seen in more
    than one leg counts once, with its longest dwell. The journey's own origin
    and destination are never returned.
    """
    endpoints = {candidate.legs[0].origin.name, candidate.legs[-1].destination.name}
    threshold = timedelta(seconds=min_dwell_seconds)

    dwell_by_name: dict[str, timedelta] = {}
    for leg in candidate.legs:
        for stopover in leg.stopovers:
            dwell = stopover.dwell
            name = stopover.station.name
            if dwell is None or dwell < threshold or name in endpoints:
                continue
            if name not in dwell_by_name or dwell > dwell_by_name[name]:
                dwell_by_name[name] = dwell

    # sorted() is stable, so equal dwells keep their schedule order
    ranked = sorted(dwell_by_name.items(), key=lambda item: item[1], reverse=True)
    return [name for name, _ in ranked[:max_points]]
