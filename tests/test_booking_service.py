"""
Tests for booking creation, lifecycle and expiration.
"""

from datetime import date, datetime, timedelta

import pytest

from salon_api.domain.scheduling.booking_service import BookingService, expire_pending_bookings
from salon_api.domain.scheduling.errors import (
    InvalidBookingRequest,
    OutsideWorkingHours,
    SchedulingNotFound,
    SlotConflict,
)
from salon_api.domain.scheduling.repository import SchedulingRepository
from salon_api.domain.scheduling.schemas import BookingCreate, BookingReschedule
from salon_api.models import Booking, Salon, Staff


def at(hour, minute=0, day=3):
    return datetime(2030, 6, day, hour, minute)


@pytest.fixture
def service(db, now):
    return BookingService(db, now=now)


def request(seeded, start, *services, client_id=None, notes=None, status="CONFIRMED"):
    return BookingCreate(
        salonId=seeded.salon_id,
        clientId=client_id or seeded.client_id,
        startTime=start,
        services=[{"serviceId": s, "staffId": staff} for s, staff in services],
        notes=notes,
        status=status,
    )


def test_single_service_booking(service, seeded):
    booking = service.create_booking(
        request(seeded, at(10), (seeded.haircut_id, seeded.staff_id), notes="Short on the sides")
    )

    assert booking.status == "CONFIRMED"
    assert booking.staff_id == seeded.staff_id
    assert booking.service_id == seeded.haircut_id
    assert booking.end_time == at(10, 30)
    assert booking.duration == 30
    assert booking.price == 35.0
    assert booking.is_multi_service is False
    assert booking.booking_services == []


def test_processing_time_is_booked(service, db, seeded):
    db.get(Salon, seeded.salon_id).processing_time = 15
    db.commit()

    booking = service.create_booking(request(seeded, at(10), (seeded.haircut_id, seeded.staff_id)))

    assert booking.end_time == at(10, 45)
    assert booking.duration == 45


def test_multi_service_booking_is_chained(service, seeded):
    booking = service.create_booking(
        request(
            seeded,
            at(9),
            (seeded.haircut_id, seeded.other_staff_id),
            (seeded.coloring_id, seeded.staff_id),
        )
    )

    assert booking.is_multi_service is True
    assert booking.staff_id is None
    assert booking.end_time == at(10, 30)
    assert booking.price == 115.0
    segments = booking.booking_services
    assert [(s.staff_id, s.start_time, s.end_time, s.order) for s in segments] == [
        (seeded.other_staff_id, at(9), at(9, 30), 1),
        (seeded.staff_id, at(9, 30), at(10, 30), 2),
    ]


def test_overlapping_booking_is_rejected(service, seeded):
    service.create_booking(request(seeded, at(10), (seeded.haircut_id, seeded.staff_id)))

    with pytest.raises(SlotConflict):
        service.create_booking(
            request(seeded, at(10, 15), (seeded.haircut_id, seeded.staff_id), client_id=seeded.other_client_id)
        )


def test_back_to_back_booking_is_accepted(service, seeded):
    service.create_booking(request(seeded, at(10), (seeded.haircut_id, seeded.staff_id)))
    second = service.create_booking(
        request(seeded, at(10, 30), (seeded.haircut_id, seeded.staff_id), client_id=seeded.other_client_id)
    )
    assert second.start_time == at(10, 30)


def test_buffers_are_enforced(service, db, seeded):
    salon = db.get(Salon, seeded.salon_id)
    salon.buffer_before = 10
    salon.buffer_after = 10
    db.commit()
    first = service.create_booking(request(seeded, at(10), (seeded.haircut_id, seeded.staff_id)))

    with pytest.raises(SlotConflict):
        service.create_booking(
            request(seeded, at(10, 30), (seeded.haircut_id, seeded.staff_id), client_id=seeded.other_client_id)
        )
    booking = service.create_booking(
        request(seeded, at(10, 40), (seeded.haircut_id, seeded.staff_id), client_id=seeded.other_client_id)
    )
    assert booking.start_time == at(10, 40)

    index = SchedulingRepository.load_conflict_index(db, salon, seeded.staff_id, date(2030, 6, 3))
    assert index.booking_ids == [first.id, booking.id]
    assert index.integrity_warnings == []


def test_booking_outside_hours_is_rejected(service, seeded):
    with pytest.raises(OutsideWorkingHours):
        service.create_booking(request(seeded, at(11, 45), (seeded.haircut_id, seeded.staff_id)))
    with pytest.raises(OutsideWorkingHours):
        service.create_booking(request(seeded, at(10, day=2), (seeded.haircut_id, seeded.staff_id)))


def test_any_staff_picks_a_free_member(service, seeded):
    service.create_booking(request(seeded, at(10), (seeded.haircut_id, seeded.staff_id)))

    booking = service.create_booking(
        request(seeded, at(10), (seeded.haircut_id, "any"), client_id=seeded.other_client_id)
    )

    assert booking.staff_id == seeded.other_staff_id


def test_any_staff_with_nobody_free(service, seeded):
    service.create_booking(request(seeded, at(10), (seeded.haircut_id, seeded.staff_id)))
    service.create_booking(
        request(seeded, at(10), (seeded.haircut_id, seeded.other_staff_id), client_id=seeded.other_client_id)
    )

    with pytest.raises(SlotConflict):
        service.create_booking(request(seeded, at(10), (seeded.haircut_id, "any"), client_id=seeded.other_client_id))


def test_client_cannot_double_book_themselves(service, seeded):
    service.create_booking(request(seeded, at(10), (seeded.haircut_id, seeded.staff_id)))

    with pytest.raises(SlotConflict):
        service.create_booking(request(seeded, at(10), (seeded.haircut_id, seeded.other_staff_id)))


def test_past_and_unknown_requests(service, seeded):
    with pytest.raises(InvalidBookingRequest):
        service.create_booking(request(seeded, datetime(2030, 5, 31, 10), (seeded.haircut_id, seeded.staff_id)))
    with pytest.raises(SchedulingNotFound):
        service.create_booking(request(seeded, at(10), (999, seeded.staff_id)))
    with pytest.raises(SchedulingNotFound):
        service.create_booking(request(seeded, at(10), (seeded.haircut_id, 999)))
    with pytest.raises(SchedulingNotFound):
        service.create_booking(request(seeded, at(10), (seeded.haircut_id, seeded.staff_id), client_id=999))


def test_inactive_staff_cannot_be_booked(service, db, seeded):
    db.get(Staff, seeded.staff_id).is_active = False
    db.commit()
    with pytest.raises(InvalidBookingRequest):
        service.create_booking(request(seeded, at(10), (seeded.haircut_id, seeded.staff_id)))


def test_failed_booking_leaves_nothing_behind(service, db, seeded):
    with pytest.raises(OutsideWorkingHours):
        service.create_booking(
            request(
                seeded,
                at(11, 30),
                (seeded.haircut_id, seeded.staff_id),
                (seeded.coloring_id, seeded.staff_id),
            )
        )
    assert db.query(Booking).count() == 0


# ----------------------------------------------------------------------------
# Lifecycle
# ----------------------------------------------------------------------------


def test_status_transitions(service, seeded):
    booking = service.create_booking(request(seeded, at(10), (seeded.haircut_id, seeded.staff_id)))

    assert service.update_status(booking.id, "in_progress").status == "IN_PROGRESS"
    assert service.update_status(booking.id, "COMPLETED").status == "COMPLETED"
    with pytest.raises(InvalidBookingRequest):
        service.update_status(booking.id, "CANCELED")


def test_unknown_status_is_rejected(service, seeded):
    booking = service.create_booking(request(seeded, at(10), (seeded.haircut_id, seeded.staff_id)))
    with pytest.raises(InvalidBookingRequest):
        service.update_status(booking.id, "ARCHIVED")


def test_cancel_frees_the_slot(service, seeded, now):
    booking = service.create_booking(request(seeded, at(10), (seeded.haircut_id, seeded.staff_id)))

    canceled = service.update_status(booking.id, "CANCELED")

    assert canceled.canceled_at == now()
    rebooked = service.create_booking(
        request(seeded, at(10), (seeded.haircut_id, seeded.staff_id), client_id=seeded.other_client_id)
    )
    assert rebooked.id != booking.id


def test_client_cancellation(service, seeded):
    booking = service.create_booking(request(seeded, at(10), (seeded.haircut_id, seeded.staff_id)))

    with pytest.raises(SchedulingNotFound):
        service.cancel_by_client(booking.id, seeded.other_client_id)

    assert service.cancel_by_client(booking.id, seeded.client_id).status == "CANCELED"
    with pytest.raises(InvalidBookingRequest):
        service.cancel_by_client(booking.id, seeded.client_id)


def test_reschedule(service, seeded):
    first = service.create_booking(request(seeded, at(10), (seeded.haircut_id, seeded.staff_id)))
    service.create_booking(
        request(seeded, at(11), (seeded.haircut_id, seeded.staff_id), client_id=seeded.other_client_id)
    )

    # Overlapping its own old slot is fine
    moved = service.reschedule(first.id, BookingReschedule(startTime=at(10, 15)))
    assert (moved.start_time, moved.end_time) == (at(10, 15), at(10, 45))

    with pytest.raises(SlotConflict):
        service.reschedule(first.id, BookingReschedule(startTime=at(11)))

    switched = service.reschedule(
        first.id, BookingReschedule(startTime=at(11), staffId=seeded.other_staff_id)
    )
    assert switched.staff_id == seeded.other_staff_id


def test_reschedule_multi_service_moves_every_segment(service, seeded):
    booking = service.create_booking(
        request(
            seeded,
            at(9),
            (seeded.haircut_id, seeded.staff_id),
            (seeded.coloring_id, seeded.staff_id),
        )
    )

    moved = service.reschedule(booking.id, BookingReschedule(startTime=at(14)))

    assert moved.end_time == at(15, 30)
    assert [(s.start_time, s.end_time) for s in moved.booking_services] == [
        (at(14), at(14, 30)),
        (at(14, 30), at(15, 30)),
    ]


def test_list_bookings_by_staff_includes_segments(service, seeded):
    single = service.create_booking(request(seeded, at(10), (seeded.haircut_id, seeded.staff_id)))
    multi = service.create_booking(
        request(
            seeded,
            at(14),
            (seeded.haircut_id, seeded.other_staff_id),
            (seeded.coloring_id, seeded.staff_id),
            client_id=seeded.other_client_id,
        )
    )

    alice = service.list_bookings(staff_id=seeded.staff_id)
    bruno = service.list_bookings(staff_id=seeded.other_staff_id)

    assert [b.id for b in alice] == [single.id, multi.id]
    assert [b.id for b in bruno] == [multi.id]
    assert service.list_bookings(salon_id=seeded.salon_id, start=at(12), end=at(18)) == [multi]


def test_expire_pending_bookings(db, seeded):
    now = at(9)
    stale = Booking(
        salon_id=seeded.salon_id,
        client_id=seeded.client_id,
        staff_id=seeded.staff_id,
        start_time=at(10),
        end_time=at(10, 30),
        duration=30,
        status="PENDING",
        created_at=now - timedelta(minutes=15),
    )
    fresh = Booking(
        salon_id=seeded.salon_id,
        client_id=seeded.other_client_id,
        staff_id=seeded.other_staff_id,
        start_time=at(10),
        end_time=at(10, 30),
        duration=30,
        status="PENDING",
        created_at=now - timedelta(minutes=5),
    )
    db.add_all([stale, fresh])
    db.commit()

    assert expire_pending_bookings(db, now, hold_minutes=10) == 1

    db.refresh(stale)
    db.refresh(fresh)
    assert stale.status == "CANCELED"
    assert stale.canceled_at == now
    assert fresh.status == "PENDING"


def test_multi_service_booking_with_one_staff_is_not_flagged(service, db, seeded):
    salon = db.get(Salon, seeded.salon_id)
    salon.buffer_before = 5
    salon.buffer_after = 5
    db.commit()

    booking = service.create_booking(
        request(
            seeded,
            at(10),
            (seeded.haircut_id, seeded.staff_id),
            (seeded.coloring_id, seeded.staff_id),
        )
    )

    index = SchedulingRepository.load_conflict_index(db, salon, seeded.staff_id, date(2030, 6, 3))
    assert index.booking_ids == [booking.id, booking.id]
    assert index.integrity_warnings == []


def test_pending_booking_is_held_then_released(service, db, seeded, now):
    held = service.create_booking(
        request(seeded, at(10), (seeded.haircut_id, seeded.staff_id), status="pending")
    )
    assert held.status == "PENDING"

    with pytest.raises(SlotConflict):
        service.create_booking(
            request(seeded, at(10), (seeded.haircut_id, seeded.staff_id), client_id=seeded.other_client_id)
        )

    assert expire_pending_bookings(db, now() + timedelta(minutes=15), hold_minutes=10) == 1
    db.refresh(held)
    assert held.status == "CANCELED"

    rebooked = service.create_booking(
        request(seeded, at(10), (seeded.haircut_id, seeded.staff_id), client_id=seeded.other_client_id)
    )
    assert rebooked.status == "CONFIRMED"


def test_new_booking_cannot_start_in_a_later_status(seeded):
    with pytest.raises(ValueError):
        request(seeded, at(10), (seeded.haircut_id, seeded.staff_id), status="COMPLETED")
