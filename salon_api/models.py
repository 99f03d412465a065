from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

# Booking lifecycle
BOOKING_STATUSES = ("PENDING", "CONFIRMED", "IN_PROGRESS", "COMPLETED", "CANCELED", "NO_SHOW")
# Statuses that occupy a staff member's calendar
ACTIVE_BOOKING_STATUSES = ("PENDING", "CONFIRMED", "IN_PROGRESS")

ABSENCE_TYPES = ("VACATION", "SICK_LEAVE", "PERSONAL", "OTHER")
ABSENCE_STATUSES = ("PENDING", "APPROVED", "REJECTED")

STAFF_ROLES = ("MANAGER", "EMPLOYEE")


class Salon(Base):
    __tablename__ = "salons"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    address = Column(String(500), nullable=True)
    city = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    buffer_before = Column(Integer, default=0, nullable=False)  # minutes
    buffer_after = Column(Integer, default=0, nullable=False)  # minutes
    processing_time = Column(Integer, default=0, nullable=False)  # minutes, added to every service
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    schedules = relationship("Schedule", back_populates="salon", cascade="all, delete-orphan")
    staff = relationship("Staff", back_populates="salon", cascade="all, delete-orphan")
    services = relationship("Service", back_populates="salon", cascade="all, delete-orphan")
    closed_days = relationship("ClosedDay", back_populates="salon", cascade="all, delete-orphan")
    bookings = relationship("Booking", back_populates="salon")


class Schedule(Base):
    """Weekly opening hours for one day, owned by a salon or by a staff member"""

    __tablename__ = "schedules"
    __table_args__ = (
        UniqueConstraint("salon_id", "day_of_week", name="uq_schedule_salon_day"),
        UniqueConstraint("staff_id", "day_of_week", name="uq_schedule_staff_day"),
        CheckConstraint(
            "(salon_id IS NULL) <> (staff_id IS NULL)", name="ck_schedule_single_owner"
        ),
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_schedule_day_of_week"),
    )

    id = Column(Integer, primary_key=True, index=True)
    salon_id = Column(Integer, ForeignKey("salons.id"), nullable=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=True, index=True)
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday ... 6 = Saturday
    is_closed = Column(Boolean, default=False, nullable=False)

    salon = relationship("Salon", back_populates="schedules")
    staff = relationship("Staff", back_populates="schedules")
    time_slots = relationship(
        "TimeSlot",
        back_populates="schedule",
        cascade="all, delete-orphan",
        order_by="TimeSlot.order",
    )


class TimeSlot(Base):
    __tablename__ = "time_slots"

    id = Column(Integer, primary_key=True, index=True)
    schedule_id = Column(Integer, ForeignKey("schedules.id"), nullable=False, index=True)
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)  # HH:MM
    order = Column(Integer, default=0, nullable=False)

    schedule = relationship("Schedule", back_populates="time_slots")


class Staff(Base):
    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, index=True)
    salon_id = Column(Integer, ForeignKey("salons.id"), nullable=False, index=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    specialties = Column(String(500), nullable=True)
    role = Column(String(50), default="EMPLOYEE", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    salon = relationship("Salon", back_populates="staff")
    schedules = relationship("Schedule", back_populates="staff", cascade="all, delete-orphan")
    absences = relationship("Absence", back_populates="staff", cascade="all, delete-orphan")
    bookings = relationship("Booking", back_populates="staff")


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    salon_id = Column(Integer, ForeignKey("salons.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=True)
    description = Column(String(1000), nullable=True)
    duration = Column(Integer, nullable=False)  # minutes of active work
    price = Column(Float, nullable=False, default=0)
    is_active = Column(Boolean, default=True, nullable=False)

    salon = relationship("Salon", back_populates="services")


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    salon_id = Column(Integer, ForeignKey("salons.id"), nullable=True, index=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    bookings = relationship("Booking", back_populates="client")


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (Index("ix_bookings_staff_window", "staff_id", "start_time", "end_time"),)

    id = Column(Integer, primary_key=True, index=True)
    salon_id = Column(Integer, ForeignKey("salons.id"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    # Null for multi-service bookings, whose staff live on each BookingService
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=True, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=True)
    start_time = Column(DateTime, nullable=False)  # salon local time
    end_time = Column(DateTime, nullable=False)  # includes processing time, excludes buffers
    duration = Column(Integer, nullable=False)  # minutes
    price = Column(Float, nullable=False, default=0)
    status = Column(String(20), default="CONFIRMED", nullable=False, index=True)
    notes = Column(Text, nullable=True)
    is_multi_service = Column(Boolean, default=False, nullable=False)
    canceled_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    salon = relationship("Salon", back_populates="bookings")
    client = relationship("Client", back_populates="bookings")
    staff = relationship("Staff", back_populates="bookings")
    service = relationship("Service")
    booking_services = relationship(
        "BookingService",
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="BookingService.order",
    )


class BookingService(Base):
    """One chained service inside a multi-service booking"""

    __tablename__ = "booking_services"
    __table_args__ = (
        Index("ix_booking_services_staff_window", "staff_id", "start_time", "end_time"),
    )

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    duration = Column(Integer, nullable=False)
    price = Column(Float, nullable=False, default=0)
    order = Column(Integer, nullable=False, default=1)

    booking = relationship("Booking", back_populates="booking_services")
    service = relationship("Service")
    staff = relationship("Staff")


class ClosedDay(Base):
    __tablename__ = "closed_days"
    __table_args__ = (UniqueConstraint("salon_id", "date", name="uq_closed_day_salon_date"),)

    id = Column(Integer, primary_key=True, index=True)
    salon_id = Column(Integer, ForeignKey("salons.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    reason = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    salon = relationship("Salon", back_populates="closed_days")


class Absence(Base):
    __tablename__ = "absences"

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False, index=True)
    salon_id = Column(Integer, ForeignKey("salons.id"), nullable=False, index=True)
    type = Column(String(20), nullable=False)  # VACATION, SICK_LEAVE, PERSONAL, OTHER
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    status = Column(String(20), default="PENDING", nullable=False)  # PENDING, APPROVED, REJECTED
    reason = Column(String(500), nullable=True)
    notes = Column(Text, nullable=True)
    approved_by = Column(String(255), nullable=True)
    approved_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    staff = relationship("Staff", back_populates="absences")
