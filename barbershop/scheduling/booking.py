"""Appointment creation and status changes."""

import logging
from datetime import date, time

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from barbershop.core.errors import InvalidStatusTransition, SlotNoLongerAvailable
from barbershop.models.appointment import (
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_PENDING,
    STATUS_SCHEDULED,
    Appointment,
)
from barbershop.scheduling.availability import ensure_slot_available

logger = logging.getLogger(__name__)

# action -> (allowed current statuses, resulting status)
STATUS_ACTIONS = {
    'accept': ({STATUS_PENDING}, STATUS_SCHEDULED),
    'reject': ({STATUS_PENDING}, STATUS_CANCELLED),
    'complete': ({STATUS_SCHEDULED}, STATUS_COMPLETED),
    'cancel': ({STATUS_SCHEDULED}, STATUS_CANCELLED),
}

CLIENT_CANCELLABLE_STATUSES = {STATUS_PENDING, STATUS_SCHEDULED}


def is_slot_taken(db: Session, appointment_date: date, appointment_time: time) -> bool:
    existing = db.query(Appointment.id).filter(
        Appointment.appointment_date == appointment_date,
        Appointment.appointment_time == appointment_time,
        Appointment.status != STATUS_CANCELLED,
    ).first()
    return existing is not None


def create_appointment(
    db: Session,
    *,
    client_id: int,
    service_id: int,
    appointment_date: date,
    appointment_time: time,
    notes: str | None = None,
    status: str = STATUS_PENDING,
    check_availability: bool = True,
) -> Appointment:
    """Insert an appointment only if its date/time is still free.

    The pre-check gives a clean error in the common case; the partial unique
    index on (appointment_date, appointment_time) catches concurrent inserts
    that pass the pre-check at the same moment.
    """
    appointment_time = appointment_time.replace(second=0, microsecond=0)

    if check_availability:
        ensure_slot_available(db, appointment_date, appointment_time)

    if is_slot_taken(db, appointment_date, appointment_time):
        logger.warning(
            'Rejected booking for %s %s: slot already taken.',
            appointment_date.isoformat(),
            appointment_time.strftime('%H:%M'),
        )
        raise SlotNoLongerAvailable()

    appointment = Appointment(
        client_id=client_id,
        service_id=service_id,
        appointment_date=appointment_date,
        appointment_time=appointment_time,
        status=status,
        notes=notes,
    )
    db.add(appointment)

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning(
            'Concurrent booking for %s %s lost the race.',
            appointment_date.isoformat(),
            appointment_time.strftime('%H:%M'),
        )
        raise SlotNoLongerAvailable() from exc

    db.refresh(appointment)
    logger.info(
        'Appointment %s created for client %s on %s at %s (%s).',
        appointment.id,
        client_id,
        appointment_date.isoformat(),
        appointment_time.strftime('%H:%M'),
        status,
    )
    return appointment


def apply_status_action(appointment: Appointment, action: str) -> Appointment:
    if action not in STATUS_ACTIONS:
        raise InvalidStatusTransition(f'Unknown action: {action}.')

    allowed_statuses, new_status = STATUS_ACTIONS[action]
    if appointment.status not in allowed_statuses:
        raise InvalidStatusTransition(f'Cannot {action} an appointment that is {appointment.status}.')

    logger.info('Appointment %s: %s -> %s.', appointment.id, appointment.status, new_status)
    appointment.status = new_status
    return appointment


def cancel_client_appointment(appointment: Appointment) -> Appointment:
    if appointment.status not in CLIENT_CANCELLABLE_STATUSES:
        raise InvalidStatusTransition(f'Cannot cancel an appointment that is {appointment.status}.')

    logger.info('Appointment %s cancelled by client %s.', appointment.id, appointment.client_id)
    appointment.status = STATUS_CANCELLED
    return appointment
