"""
Convert legacy schedule storage into TimeSlot rows
Run with: python -m migrations.migrate_schedules_to_timeslots

Legacy shapes handled:
- schedules.open_time / schedules.close_time (one range per salon day)
- staff_schedules (staff_id, day_of_week, start_time, end_time) rows

Schedules that already have time slots are left untouched, so the script can
be re-run safely.
"""

import sys
from collections import defaultdict
from pathlib import Path

from sqlalchemy import inspect, text

sys.path.insert(0, str(Path(__file__).parent.parent))

from salon_api.database import SessionLocal  # noqa: E402
from salon_api.domain.scheduling.errors import InvalidTimeFormat  # noqa: E402
from salon_api.domain.scheduling.legacy_schedule import (  # noqa: E402
    merge_staff_rows,
    normalize_schedule,
)
from salon_api.models import Schedule, TimeSlot  # noqa: E402


def migrate_salon_hours(db) -> tuple[int, int]:
    """Turn open_time/close_time columns into a single TimeSlot per day"""
    columns = {c["name"] for c in inspect(db.connection()).get_columns("schedules")}
    if not {"open_time", "close_time"} <= columns:
        print("ℹ️  schedules has no open_time/close_time columns, nothing to convert")
        return 0, 0

    rows = db.execute(
        text("SELECT id, day_of_week, is_closed, open_time, close_time FROM schedules")
    ).mappings().all()

    migrated = skipped = 0
    for row in rows:
        schedule = db.get(Schedule, row["id"])
        if schedule.time_slots:
            skipped += 1
            continue

        try:
            day = normalize_schedule(dict(row))
        except InvalidTimeFormat as e:
            print(f"⚠️  Skipping schedule {row['id']}: {e.message}")
            skipped += 1
            continue

        if day.is_closed or not day.time_slots:
            schedule.is_closed = True
        else:
            schedule.time_slots = [
                TimeSlot(start_time=slot.start_time, end_time=slot.end_time, order=slot.order)
                for slot in day.time_slots
            ]
        migrated += 1

    return migrated, skipped


def migrate_staff_hours(db) -> tuple[int, int]:
    """Turn per-day staff_schedules rows into staff-owned Schedule rows"""
    if not inspect(db.connection()).has_table("staff_schedules"):
        print("ℹ️  No staff_schedules table, nothing to convert")
        return 0, 0

    rows = db.execute(
        text("SELECT staff_id, day_of_week, start_time, end_time FROM staff_schedules")
    ).mappings().all()

    by_staff = defaultdict(list)
    for row in rows:
        by_staff[row["staff_id"]].append(dict(row))

    migrated = skipped = 0
    for staff_id, staff_rows in by_staff.items():
        existing = {
            s.day_of_week for s in db.query(Schedule).filter(Schedule.staff_id == staff_id).all()
        }
        for day_of_week in range(7):
            if day_of_week in existing:
                skipped += 1
                continue
            try:
                day = merge_staff_rows(staff_rows, day_of_week)
            except InvalidTimeFormat as e:
                print(f"⚠️  Skipping staff {staff_id} day {day_of_week}: {e.message}")
                skipped += 1
                continue

            # A day without rows means the staff member does not work that day
            schedule = Schedule(staff_id=staff_id, day_of_week=day_of_week, is_closed=day is None)
            if day is not None:
                schedule.time_slots = [
                    TimeSlot(start_time=slot.start_time, end_time=slot.end_time, order=slot.order)
                    for slot in day.time_slots
                ]
            db.add(schedule)
            migrated += 1

    return migrated, skipped


def migrate(db) -> dict:
    print("🚀 Starting schedule migration...")
    salon_migrated, salon_skipped = migrate_salon_hours(db)
    staff_migrated, staff_skipped = migrate_staff_hours(db)
    db.commit()

    summary = {
        "salonSchedules": salon_migrated,
        "staffSchedules": staff_migrated,
        "skipped": salon_skipped + staff_skipped,
    }
    print(f"\n✅ Complete! {summary}")
    return summary


def main():
    db = SessionLocal()
    try:
        migrate(db)
    except Exception as e:
        print(f"\n❌ ERROR: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
