"""Salon repository - Database operations for salon configuration"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Absence, ClosedDay, Salon, Schedule, Service, Staff, TimeSlot


class SalonRepository:
    """Repository for salon, staff, service and calendar configuration"""

    # Salons
    @staticmethod
    def get_salon(db: Session, salon_id: int) -> Optional[Salon]:
        return db.query(Salon).filter(Salon.id == salon_id).first()

    @staticmethod
    def get_salon_by_slug(db: Session, slug: str) -> Optional[Salon]:
        return db.query(Salon).filter(Salon.slug == slug).first()

    @staticmethod
    def create_salon(db: Session, schedules: list[Schedule], **salon_data) -> Salon:
        """Create a salon together with its weekly schedules"""
        salon = Salon(**salon_data)
        salon.schedules = schedules
        db.add(salon)
        db.commit()
        db.refresh(salon)
        return salon

    @staticmethod
    def update(db: Session, entity, **updates):
        """Update an entity with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(entity, key):
                setattr(entity, key, value)
        db.commit()
        db.refresh(entity)
        return entity

    # Staff
    @staticmethod
    def get_staff(db: Session, staff_id: int, salon_id: int) -> Optional[Staff]:
        return db.query(Staff).filter(Staff.id == staff_id, Staff.salon_id == salon_id).first()

    @staticmethod
    def list_staff(db: Session, salon_id: int, include_inactive: bool = False) -> list[Staff]:
        query = db.query(Staff).filter(Staff.salon_id == salon_id)
        if not include_inactive:
            query = query.filter(Staff.is_active.is_(True))
        return query.order_by(Staff.last_name, Staff.first_name).all()

    @staticmethod
    def create_staff(db: Session, salon_id: int, **staff_data) -> Staff:
        staff = Staff(salon_id=salon_id, **staff_data)
        db.add(staff)
        db.commit()
        db.refresh(staff)
        return staff

    # Services
    @staticmethod
    def get_service(db: Session, service_id: int, salon_id: int) -> Optional[Service]:
        return db.query(Service).filter(Service.id == service_id, Service.salon_id == salon_id).first()

    @staticmethod
    def list_services(db: Session, salon_id: int, include_inactive: bool = False) -> list[Service]:
        query = db.query(Service).filter(Service.salon_id == salon_id)
        if not include_inactive:
            query = query.filter(Service.is_active.is_(True))
        return query.order_by(Service.category, Service.name).all()

    @staticmethod
    def create_service(db: Session, salon_id: int, **service_data) -> Service:
        service = Service(salon_id=salon_id, **service_data)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    # Schedules
    @staticmethod
    def list_schedules(db: Session, salon_id: Optional[int] = None, staff_id: Optional[int] = None) -> list[Schedule]:
        query = db.query(Schedule)
        if staff_id is not None:
            query = query.filter(Schedule.staff_id == staff_id)
        else:
            query = query.filter(Schedule.salon_id == salon_id)
        return query.order_by(Schedule.day_of_week).all()

    @staticmethod
    def replace_schedule(
        db: Session,
        day_of_week: int,
        is_closed: bool,
        slots: list[tuple[str, str]],
        salon_id: Optional[int] = None,
        staff_id: Optional[int] = None,
    ) -> Schedule:
        """Create or overwrite one owner's schedule for a weekday"""
        query = db.query(Schedule).filter(Schedule.day_of_week == day_of_week)
        if staff_id is not None:
            query = query.filter(Schedule.staff_id == staff_id)
        else:
            query = query.filter(Schedule.salon_id == salon_id)
        schedule = query.first()

        if schedule is None:
            schedule = Schedule(salon_id=salon_id, staff_id=staff_id, day_of_week=day_of_week)
            db.add(schedule)

        schedule.is_closed = is_closed
        schedule.time_slots = [
            TimeSlot(start_time=start, end_time=end, order=order)
            for order, (start, end) in enumerate(slots)
        ]
        db.commit()
        db.refresh(schedule)
        return schedule

    @staticmethod
    def delete_staff_schedules(db: Session, staff_id: int) -> int:
        schedules = db.query(Schedule).filter(Schedule.staff_id == staff_id).all()
        for schedule in schedules:
            db.delete(schedule)
        db.commit()
        return len(schedules)

    # Closed days
    @staticmethod
    def get_closed_day(db: Session, closed_day_id: int, salon_id: int) -> Optional[ClosedDay]:
        return (
            db.query(ClosedDay)
            .filter(ClosedDay.id == closed_day_id, ClosedDay.salon_id == salon_id)
            .first()
        )

    @staticmethod
    def find_closed_day(db: Session, salon_id: int, day: date) -> Optional[ClosedDay]:
        return db.query(ClosedDay).filter(ClosedDay.salon_id == salon_id, ClosedDay.date == day).first()

    @staticmethod
    def list_closed_days(db: Session, salon_id: int, from_date: Optional[date] = None) -> list[ClosedDay]:
        query = db.query(ClosedDay).filter(ClosedDay.salon_id == salon_id)
        if from_date is not None:
            query = query.filter(ClosedDay.date >= from_date)
        return query.order_by(ClosedDay.date).all()

    @staticmethod
    def create_closed_day(db: Session, salon_id: int, day: date, reason: Optional[str]) -> ClosedDay:
        closed_day = ClosedDay(salon_id=salon_id, date=day, reason=reason)
        db.add(closed_day)
        db.commit()
        db.refresh(closed_day)
        return closed_day

    @staticmethod
    def delete(db: Session, entity) -> None:
        db.delete(entity)
        db.commit()

    @staticmethod
    def delete_closed_days_before(db: Session, day: date) -> int:
        count = db.query(ClosedDay).filter(ClosedDay.date < day).delete(synchronize_session=False)
        db.commit()
        return count

    # Absences
    @staticmethod
    def get_absence(db: Session, absence_id: int, salon_id: int) -> Optional[Absence]:
        return db.query(Absence).filter(Absence.id == absence_id, Absence.salon_id == salon_id).first()

    @staticmethod
    def find_overlapping_absence(db: Session, staff_id: int, start: datetime, end: datetime) -> Optional[Absence]:
        """A pending or approved absence of ``staff_id`` intersecting ``[start, end]``"""
        return (
            db.query(Absence)
            .filter(
                Absence.staff_id == staff_id,
                Absence.status.in_(("PENDING", "APPROVED")),
                Absence.start_date <= end,
                Absence.end_date >= start,
            )
            .first()
        )

    @staticmethod
    def list_absences(
        db: Session, salon_id: int, staff_id: Optional[int] = None, status: Optional[str] = None
    ) -> list[Absence]:
        query = db.query(Absence).filter(Absence.salon_id == salon_id)
        if staff_id is not None:
            query = query.filter(Absence.staff_id == staff_id)
        if status:
            query = query.filter(Absence.status == status.upper())
        return query.order_by(Absence.start_date.desc()).all()

    @staticmethod
    def create_absence(db: Session, **absence_data) -> Absence:
        absence = Absence(**absence_data)
        db.add(absence)
        db.commit()
        db.refresh(absence)
        return absence
