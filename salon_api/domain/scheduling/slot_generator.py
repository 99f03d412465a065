"""Slot generator: bookable start times from working and occupied intervals"""

from typing import Iterable

from .time_calculator import Interval, has_overlap


def generate_slots(
    working: Iterable[Interval],
    occupied: Iterable[Interval],
    total_duration: int,
    granularity: int = 15,
) -> list[int]:
    """Walk each working interval in ``granularity`` steps from its start.

    A start ``t`` is kept when ``[t, t + total_duration)`` fits inside the
    interval and overlaps no occupied interval. Returns ascending minutes
    since midnight; an empty list is a valid result.
    """
    if total_duration <= 0:
        raise ValueError("total_duration must be positive")
    if granularity <= 0:
        raise ValueError("granularity must be positive")

    occupied = sorted(occupied)
    slots = []
    for interval in sorted(working):
        t = interval.start
        while t + total_duration <= interval.end:
            candidate = Interval(t, t + total_duration)
            if not any(has_overlap(candidate, busy) for busy in occupied):
                slots.append(t)
            t += granularity
    return slots
