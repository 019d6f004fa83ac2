"""Database-backed availability: fetch the engine inputs, then compute."""

import logging
from datetime import date, time

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from barbershop.core.errors import ConfigurationError, DataUnavailableError, SlotNoLongerAvailable
from barbershop.models.appointment import STATUS_CANCELLED, Appointment
from barbershop.models.blocked_time import BlockedTime
from barbershop.models.setting import CLOSED_DAYS_KEY, WORKING_HOURS_KEY, Setting
from barbershop.scheduling.slots import compute_available_slots
from barbershop.scheduling.working_hours import WorkingHours, resolve_closed_days, resolve_working_hours

logger = logging.getLogger(__name__)


def get_setting_value(db: Session, key: str):
    setting = db.query(Setting).filter(Setting.key == key).first()
    return setting.value if setting else None


def load_working_hours(db: Session) -> WorkingHours:
    return resolve_working_hours(get_setting_value(db, WORKING_HOURS_KEY))


def load_closed_days(db: Session) -> frozenset[int]:
    return resolve_closed_days(get_setting_value(db, CLOSED_DAYS_KEY))


def get_blocked_times(db: Session, day: date) -> list[BlockedTime]:
    return db.query(BlockedTime).filter(BlockedTime.blocked_date == day).all()


def get_active_appointments(db: Session, day: date) -> list[Appointment]:
    return db.query(Appointment).filter(
        Appointment.appointment_date == day,
        Appointment.status != STATUS_CANCELLED,
    ).order_by(Appointment.appointment_time.asc()).all()


def get_available_slots(db: Session, day: date) -> list[time]:
    """Bookable start times for ``day``.

    A failed read raises ``DataUnavailableError``; availability is never
    computed from partial exclusion data.
    """
    try:
        raw_working_hours = get_setting_value(db, WORKING_HOURS_KEY)
        raw_closed_days = get_setting_value(db, CLOSED_DAYS_KEY)
        blocked_times = get_blocked_times(db, day)
        appointments = get_active_appointments(db, day)
    except SQLAlchemyError as exc:
        logger.exception('Could not load availability data for %s.', day.isoformat())
        raise DataUnavailableError('Availability data could not be loaded.') from exc

    try:
        working_hours = resolve_working_hours(raw_working_hours)
        closed_days = resolve_closed_days(raw_closed_days)
        return compute_available_slots(day, working_hours, closed_days, blocked_times, appointments)
    except ConfigurationError as exc:
        logger.error('Business hours configuration is invalid: %s', exc)
        raise


def ensure_slot_available(db: Session, day: date, slot_time: time) -> None:
    if slot_time not in get_available_slots(db, day):
        raise SlotNoLongerAvailable()
