"""Price extraction, cheapest-candidate selection and duration formatting."""

import logging
import math
from collections.abc import Iterable, Sequence
from datetime import timedelta
from typing import Any

from .exceptions import NoPriceDataError
from .models import JourneyCandidate, Leg

logger = logging.getLogger(__name__)

UNKNOWN_DURATION = "Unknown"


def _as_amount(value: Any) -> float | None:
    # bool is an int subclass but never a price
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return float(value)


def extract_price(candidate: Any) -> float | None:
    """Return a comparable amount for a candidate or a raw price value.

    Accepts a structured {"amount": ..., "currency": ...} price or a bare
    number. Anything else, including a missing price, yields None.
    """
    price = candidate.price if isinstance(candidate, JourneyCandidate) else candidate
    if isinstance(price, dict):
        return _as_amount(price.get("amount"))
    return _as_amount(price)


def require_price(candidate: JourneyCandidate) -> float:
    """Like extract_price, but raise NoPriceDataError when there is no amount."""
    amount = extract_price(candidate)
    if amount is None:
        raise NoPriceDataError("Journey candidate has no usable price")
    return amount


def cheapest(candidates: Iterable[JourneyCandidate]) -> JourneyCandidate | None:
    """Pick the lowest priced candidate; on ties the first one in provider order wins."""
    best: JourneyCandidate | None = None
    best_amount = 0.0
    for candidate in candidates:
        try:
            amount = require_price(candidate)
        except NoPriceDataError:
            continue
        if best is None or amount < best_amount:
            best, best_amount = candidate, amount
    return best


def format_duration(elapsed: timedelta) -> str:
    """Format as "<hours>h <minutes>m", truncating; negative values clamp to zero."""
    total_seconds = elapsed.total_seconds()
    if total_seconds < 0:
        logger.warning(f"Negative journey duration {elapsed} clamped to zero")
        total_seconds = 0
    total_minutes = int(total_seconds // 60)
    return f"{total_minutes // 60}h {total_minutes % 60}m"


def duration_of(legs: Sequence[Leg]) -> str:
    """Elapsed time from the first leg's departure to the last leg's arrival."""
    if not legs:
        return UNKNOWN_DURATION
    return format_duration(legs[-1].arrival - legs[0].departure)


def duration_between(first: JourneyCandidate, second: JourneyCandidate) -> str:
    """Door-to-door time of a split journey made of two candidates."""
    return format_duration(second.arrival - first.departure)
