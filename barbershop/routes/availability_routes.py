from datetime import date

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from barbershop.auth.dependencies import get_current_user, get_db
from barbershop.core.errors import BookingError
from barbershop.models.user import User
from barbershop.routes.common import booking_error_to_http, ensure_database_ready
from barbershop.scheduling.availability import get_available_slots

router = APIRouter(tags=['availability'])


class AvailableSlotsResponse(BaseModel):
    date: date
    slots: list[str]


@router.get('/slots', response_model=AvailableSlotsResponse)
def list_available_slots(
    day: date = Query(..., alias='date'),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_database_ready()

    try:
        slots = get_available_slots(db, day)
    except BookingError as exc:
        raise booking_error_to_http(exc) from exc

    return AvailableSlotsResponse(date=day, slots=[slot_time.strftime('%H:%M') for slot_time in slots])
