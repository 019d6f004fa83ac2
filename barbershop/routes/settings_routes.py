from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from barbershop.auth.dependencies import get_current_user, get_db, require_admin
from barbershop.core.errors import ConfigurationError
from barbershop.models.setting import CLOSED_DAYS_KEY, WORKING_HOURS_KEY, Setting
from barbershop.models.user import User
from barbershop.routes.common import booking_error_to_http, database_unavailable, ensure_database_ready
from barbershop.scheduling.availability import load_closed_days, load_working_hours
from barbershop.scheduling.working_hours import WorkingHours, validate_working_hours

router = APIRouter(tags=['settings'])


class ClosedDaysPayload(BaseModel):
    closed_days: list[int]

    @field_validator('closed_days')
    @classmethod
    def validate_closed_days(cls, value: list[int]) -> list[int]:
        for day in value:
            if not 0 <= day <= 6:
                raise ValueError('Closed days must be weekday numbers from 0 (Sunday) to 6 (Saturday).')
        return sorted(set(value))


def save_setting(db: Session, key: str, value) -> None:
    setting = db.query(Setting).filter(Setting.key == key).first()
    if setting is None:
        db.add(Setting(key=key, value=value))
    else:
        setting.value = value
    db.commit()


@router.get('/working-hours', response_model=WorkingHours)
def get_working_hours(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_database_ready()

    try:
        return load_working_hours(db)
    except ConfigurationError as exc:
        raise booking_error_to_http(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.put('/working-hours', response_model=WorkingHours)
def update_working_hours(
    data: WorkingHours,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    try:
        validate_working_hours(data)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    ensure_database_ready()

    try:
        save_setting(db, WORKING_HOURS_KEY, data.model_dump(mode='json'))
        return data
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.get('/closed-days', response_model=ClosedDaysPayload)
def get_closed_days(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_database_ready()

    try:
        return ClosedDaysPayload(closed_days=sorted(load_closed_days(db)))
    except ConfigurationError as exc:
        raise booking_error_to_http(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.put('/closed-days', response_model=ClosedDaysPayload)
def update_closed_days(
    data: ClosedDaysPayload,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    ensure_database_ready()

    try:
        save_setting(db, CLOSED_DAYS_KEY, data.closed_days)
        return data
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc
