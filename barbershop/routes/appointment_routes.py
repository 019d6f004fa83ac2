from datetime import date, datetime, time
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, field_serializer, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from barbershop.auth.dependencies import get_current_user, get_db, require_admin
from barbershop.core import config
from barbershop.core.errors import BookingError
from barbershop.models.appointment import STATUS_SCHEDULED, Appointment
from barbershop.models.user import User
from barbershop.routes.common import booking_error_to_http, database_unavailable, ensure_database_ready
from barbershop.routes.service_routes import get_service_or_404
from barbershop.scheduling.booking import apply_status_action, cancel_client_appointment, create_appointment

router = APIRouter(tags=['appointments'])


class CreateAppointmentRequest(BaseModel):
    service_id: int
    appointment_date: date
    appointment_time: time
    notes: str | None = None

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        if value is None:
            return None

        normalized = value.strip()
        if not normalized:
            return None

        if len(normalized) > config.BOOKING_NOTES_MAX_LENGTH:
            raise ValueError(f'Notes must be {config.BOOKING_NOTES_MAX_LENGTH} characters or fewer.')

        return normalized


class ManualAppointmentRequest(CreateAppointmentRequest):
    client_id: int


class StatusActionRequest(BaseModel):
    action: Literal['accept', 'reject', 'complete', 'cancel']


class AppointmentResponse(BaseModel):
    id: int
    client_id: int
    client_name: str | None = None
    service_id: int
    service_name: str | None = None
    appointment_date: date
    appointment_time: time
    status: str
    notes: str | None = None

    @field_serializer('appointment_time')
    def serialize_appointment_time(self, value: time) -> str:
        return value.strftime('%H:%M')


def to_appointment_response(appointment: Appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=appointment.id,
        client_id=appointment.client_id,
        client_name=appointment.client.name if appointment.client else None,
        service_id=appointment.service_id,
        service_name=appointment.service.name if appointment.service else None,
        appointment_date=appointment.appointment_date,
        appointment_time=appointment.appointment_time,
        status=appointment.status,
        notes=appointment.notes,
    )


def validate_future_start(appointment_date: date, appointment_time: time) -> None:
    if datetime.combine(appointment_date, appointment_time) <= datetime.now():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Appointments must be scheduled in the future.',
        )


def get_appointment_or_404(db: Session, appointment_id: int) -> Appointment:
    appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
    if appointment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Appointment not found.')
    return appointment


@router.post('', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def book_appointment(
    data: CreateAppointmentRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    validate_future_start(data.appointment_date, data.appointment_time)
    ensure_database_ready()

    try:
        get_service_or_404(db, data.service_id)
        appointment = create_appointment(
            db,
            client_id=current_user.id,
            service_id=data.service_id,
            appointment_date=data.appointment_date,
            appointment_time=data.appointment_time,
            notes=data.notes,
        )
        return to_appointment_response(appointment)
    except BookingError as exc:
        raise booking_error_to_http(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.get('/me', response_model=list[AppointmentResponse])
def list_my_appointments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_database_ready()

    try:
        appointments = db.query(Appointment).filter(
            Appointment.client_id == current_user.id,
        ).order_by(Appointment.appointment_date.desc(), Appointment.appointment_time.desc()).all()

        return [to_appointment_response(appointment) for appointment in appointments]
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.post('/{appointment_id}/cancel', response_model=AppointmentResponse)
def cancel_my_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_database_ready()

    try:
        appointment = get_appointment_or_404(db, appointment_id)

        if appointment.client_id != current_user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail='Only the client who booked this appointment can cancel it.',
            )

        cancel_client_appointment(appointment)
        db.commit()
        db.refresh(appointment)

        return to_appointment_response(appointment)
    except BookingError as exc:
        raise booking_error_to_http(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.get('', response_model=list[AppointmentResponse])
def list_appointments_for_date(
    day: date | None = Query(default=None, alias='date'),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    ensure_database_ready()

    try:
        appointments = db.query(Appointment).filter(
            Appointment.appointment_date == (day or date.today()),
        ).order_by(Appointment.appointment_time.asc()).all()

        return [to_appointment_response(appointment) for appointment in appointments]
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.post('/manual', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_manual_appointment(
    data: ManualAppointmentRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    ensure_database_ready()

    try:
        client = db.query(User).filter(User.id == data.client_id).first()
        if client is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Client not found.')
        get_service_or_404(db, data.service_id)

        # Admin entries skip the offered-slot check but never double-book.
        appointment = create_appointment(
            db,
            client_id=data.client_id,
            service_id=data.service_id,
            appointment_date=data.appointment_date,
            appointment_time=data.appointment_time,
            notes=data.notes,
            status=STATUS_SCHEDULED,
            check_availability=False,
        )
        return to_appointment_response(appointment)
    except BookingError as exc:
        raise booking_error_to_http(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.post('/{appointment_id}/status', response_model=AppointmentResponse)
def update_appointment_status(
    appointment_id: int,
    data: StatusActionRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    ensure_database_ready()

    try:
        appointment = get_appointment_or_404(db, appointment_id)
        apply_status_action(appointment, data.action)
        db.commit()
        db.refresh(appointment)

        return to_appointment_response(appointment)
    except BookingError as exc:
        raise booking_error_to_http(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc
