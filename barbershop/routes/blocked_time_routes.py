from datetime import date, time

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator, model_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from barbershop.auth.dependencies import get_db, require_admin
from barbershop.models.blocked_time import BlockedTime
from barbershop.models.user import User
from barbershop.routes.common import database_unavailable, ensure_database_ready

router = APIRouter(tags=['blocked-times'])


class BlockedTimeRequest(BaseModel):
    blocked_date: date
    is_full_day: bool = False
    start_time: time | None = None
    end_time: time | None = None
    reason: str | None = None

    @field_validator('reason')
    @classmethod
    def normalize_reason(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @model_validator(mode='after')
    def validate_period(self) -> 'BlockedTimeRequest':
        if self.is_full_day:
            self.start_time = None
            self.end_time = None
            return self

        if self.start_time is None or self.end_time is None:
            raise ValueError('Start and end times are required unless the whole day is blocked.')

        if self.start_time >= self.end_time:
            raise ValueError('Start time must be earlier than end time.')

        return self


class BlockedTimeResponse(BaseModel):
    id: int
    blocked_date: date
    is_full_day: bool
    start_time: time | None = None
    end_time: time | None = None
    reason: str | None = None

    class Config:
        from_attributes = True


def get_blocked_time_or_404(db: Session, blocked_time_id: int) -> BlockedTime:
    blocked_time = db.query(BlockedTime).filter(BlockedTime.id == blocked_time_id).first()
    if blocked_time is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Blocked time not found.')
    return blocked_time


@router.get('', response_model=list[BlockedTimeResponse])
def list_blocked_times(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    ensure_database_ready()

    try:
        return db.query(BlockedTime).filter(
            BlockedTime.blocked_date >= date.today(),
        ).order_by(BlockedTime.blocked_date.asc(), BlockedTime.start_time.asc()).all()
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.post('', response_model=BlockedTimeResponse, status_code=status.HTTP_201_CREATED)
def create_blocked_time(
    data: BlockedTimeRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    ensure_database_ready()

    try:
        blocked_time = BlockedTime(**data.model_dump())
        db.add(blocked_time)
        db.commit()
        db.refresh(blocked_time)

        return blocked_time
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.put('/{blocked_time_id}', response_model=BlockedTimeResponse)
def update_blocked_time(
    blocked_time_id: int,
    data: BlockedTimeRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    ensure_database_ready()

    try:
        blocked_time = get_blocked_time_or_404(db, blocked_time_id)
        for field_name, value in data.model_dump().items():
            setattr(blocked_time, field_name, value)
        db.commit()
        db.refresh(blocked_time)

        return blocked_time
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.delete('/{blocked_time_id}', status_code=status.HTTP_204_NO_CONTENT)
def remove_blocked_time(
    blocked_time_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    ensure_database_ready()

    try:
        blocked_time = get_blocked_time_or_404(db, blocked_time_id)
        db.delete(blocked_time)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc
