"""Blocked time model definitions."""

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String, Time, func

from barbershop.database import Base


class BlockedTime(Base):
    """A full day or a time range on one date during which nothing can be booked."""
    __tablename__ = "blocked_times"

    id = Column(Integer, primary_key=True)
    blocked_date = Column(Date, nullable=False, index=True)
    is_full_day = Column(Boolean, nullable=False, default=False)
    start_time = Column(Time)
    end_time = Column(Time)
    reason = Column(String)
    created_at = Column(DateTime, server_default=func.now())
