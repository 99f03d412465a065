"""
Unit tests for the buffer-padded booking conflict index.
"""

import logging
from datetime import date, datetime

from salon_api.domain.scheduling.conflict_index import BookedInterval, build_conflict_index
from salon_api.domain.scheduling.time_calculator import Interval

MONDAY = date(2030, 6, 3)


def at(hour, minute=0, day=3):
    return datetime(2030, 6, day, hour, minute)


def test_bookings_are_padded_and_sorted():
    bookings = [
        BookedInterval(2, at(11), at(11, 30)),
        BookedInterval(1, at(10), at(10, 30)),
    ]
    index = build_conflict_index(bookings, MONDAY, buffer_before=10, buffer_after=10)

    assert index.intervals == [Interval(590, 640), Interval(650, 700)]
    assert index.booking_ids == [1, 2]
    assert index.integrity_warnings == []


def test_overlapping_bookings_are_reported_not_merged(caplog):
    bookings = [
        BookedInterval(1, at(10), at(10, 30)),
        BookedInterval(2, at(10, 20), at(11)),
    ]
    with caplog.at_level(logging.WARNING):
        index = build_conflict_index(bookings, MONDAY, buffer_before=5, buffer_after=5)

    assert index.intervals == [Interval(595, 635), Interval(615, 665)]
    assert index.integrity_warnings == [(1, 2)]
    assert "Data integrity" in caplog.text


def test_excluded_booking_is_left_out():
    bookings = [
        BookedInterval(1, at(10), at(10, 30)),
        BookedInterval(2, at(11), at(11, 30)),
    ]
    index = build_conflict_index(bookings, MONDAY, exclude_booking_id=1)
    assert index.booking_ids == [2]


def test_booking_from_previous_night_blocks_the_morning():
    booking = BookedInterval(7, at(23, 30, day=2), at(0, 30, day=3))
    index = build_conflict_index([booking], MONDAY)
    assert index.intervals == [Interval(-30, 30)]
    assert index.conflicts_with(Interval(0, 30)) == [7]


def test_conflicts_with_uses_half_open_intervals():
    index = build_conflict_index([BookedInterval(1, at(10), at(10, 30))], MONDAY, 10, 10)
    assert index.conflicts_with(Interval(640, 670)) == []
    assert index.conflicts_with(Interval(560, 590)) == []
    assert index.conflicts_with(Interval(630, 660)) == [1]


def test_booking_at_the_buffer_edge_is_consistent(caplog):
    # 10:40 is the first start the validator accepts after a 10:00 haircut
    bookings = [
        BookedInterval(1, at(10), at(10, 30)),
        BookedInterval(2, at(10, 40), at(11, 10)),
    ]
    with caplog.at_level(logging.WARNING):
        index = build_conflict_index(bookings, MONDAY, buffer_before=10, buffer_after=10)

    assert index.intervals == [Interval(590, 640), Interval(630, 680)]
    assert index.integrity_warnings == []
    assert "Data integrity" not in caplog.text


def test_uneven_buffers_accept_either_booking_order():
    # 09:30 misses the padded 10:00 booking, only the 09:30 padding reaches 10:00
    bookings = [
        BookedInterval(1, at(10), at(10, 30)),
        BookedInterval(2, at(9, 30), at(10)),
    ]
    index = build_conflict_index(bookings, MONDAY, buffer_before=0, buffer_after=10)

    assert index.intervals == [Interval(570, 610), Interval(600, 640)]
    assert 1 not in index.conflicts_with(Interval(570, 600))
    assert index.integrity_warnings == []


def test_segments_of_one_booking_are_not_compared(caplog):
    segments = [
        BookedInterval(1, at(10), at(10, 30)),
        BookedInterval(1, at(10, 30), at(11, 30)),
    ]
    with caplog.at_level(logging.WARNING):
        index = build_conflict_index(segments, MONDAY, buffer_before=5, buffer_after=5)

    assert index.booking_ids == [1, 1]
    assert index.integrity_warnings == []
    assert "Data integrity" not in caplog.text
