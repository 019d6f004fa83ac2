from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from barbershop.core.errors import (
    BookingError,
    ConfigurationError,
    DataUnavailableError,
    InvalidStatusTransition,
    SlotNoLongerAvailable,
)
from barbershop.database import ensure_schema

DATABASE_UNAVAILABLE_DETAIL = 'Database unavailable. Verify DATABASE_URL and database credentials.'


def database_unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=DATABASE_UNAVAILABLE_DETAIL,
    )


def ensure_database_ready() -> None:
    try:
        ensure_schema()
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


def booking_error_to_http(exc: BookingError) -> HTTPException:
    if isinstance(exc, ConfigurationError):
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f'Business hours are misconfigured: {exc}',
        )
    if isinstance(exc, DataUnavailableError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail='Availability could not be verified. Please try again later.',
        )
    if isinstance(exc, (SlotNoLongerAvailable, InvalidStatusTransition)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
