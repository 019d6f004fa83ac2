"""Appointment model definitions."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Integer, String, Time, func, text
from sqlalchemy.orm import relationship

from barbershop.database import Base
from barbershop.models.service import Service
from barbershop.models.user import User


STATUS_PENDING = "pending"
STATUS_SCHEDULED = "scheduled"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"

APPOINTMENT_STATUSES = (STATUS_PENDING, STATUS_SCHEDULED, STATUS_COMPLETED, STATUS_CANCELLED)

_ACTIVE_SLOT_PREDICATE = text("status != 'cancelled'")


class Appointment(Base):
    """Represents a booked appointment."""
    __tablename__ = "appointments"
    __table_args__ = (
        # At most one non-cancelled appointment per date and start time.
        Index(
            "uq_appointments_active_slot",
            "appointment_date",
            "appointment_time",
            unique=True,
            postgresql_where=_ACTIVE_SLOT_PREDICATE,
            sqlite_where=_ACTIVE_SLOT_PREDICATE,
        ),
    )

    id = Column(Integer, primary_key=True)
    client_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)
    appointment_date = Column(Date, nullable=False, index=True)
    appointment_time = Column(Time, nullable=False)
    status = Column(String, nullable=False, default=STATUS_PENDING)
    notes = Column(String)
    created_at = Column(DateTime, server_default=func.now())

    client = relationship(User)
    service = relationship(Service)
