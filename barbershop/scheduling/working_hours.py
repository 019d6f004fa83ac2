"""Business-hours and closed-day configuration for slot generation.

Both values are stored as JSON rows in the ``settings`` table. They are parsed
here into typed objects once per availability computation and handed to the
slot generator and exclusion filter as explicit arguments.
"""

from datetime import date, time

from pydantic import BaseModel, Field, ValidationError, field_serializer, field_validator

from barbershop.core.errors import ConfigurationError


class WorkingHours(BaseModel):
    opening_time: time
    closing_time: time
    slot_interval: int = Field(strict=True)

    class Config:
        extra = 'forbid'
        frozen = True

    @field_validator('opening_time', 'closing_time')
    @classmethod
    def validate_time_of_day(cls, value: time) -> time:
        if value.tzinfo is not None:
            raise ValueError('Times must not carry a timezone offset.')
        if value.second or value.microsecond:
            raise ValueError('Times must be whole minutes (HH:MM).')
        return value

    @field_serializer('opening_time', 'closing_time')
    def serialize_time(self, value: time) -> str:
        return value.strftime('%H:%M')


DEFAULT_WORKING_HOURS = WorkingHours(
    opening_time=time(8, 0),
    closing_time=time(19, 0),
    slot_interval=30,
)


def resolve_working_hours(raw: dict | None) -> WorkingHours:
    """Return the effective working hours for a stored settings payload.

    A missing record is the first-run state and yields the default. A payload
    that does not match the schema raises ``ConfigurationError``. Ordering
    problems (opening >= closing) are passed through; ``validate_working_hours``
    reports those.
    """
    if raw is None:
        return DEFAULT_WORKING_HOURS

    if not isinstance(raw, dict):
        raise ConfigurationError('Working hours setting must be an object.')

    try:
        return WorkingHours.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(f'Working hours setting is malformed: {exc.errors()}') from exc


def validate_working_hours(hours: WorkingHours) -> None:
    if hours.slot_interval <= 0:
        raise ConfigurationError('Slot interval must be a positive number of minutes.')

    if hours.opening_time >= hours.closing_time:
        raise ConfigurationError('Opening time must be earlier than closing time.')


def resolve_closed_days(raw) -> frozenset[int]:
    if raw is None:
        return frozenset()

    if not isinstance(raw, list):
        raise ConfigurationError('Closed days setting must be a list of weekday numbers.')

    for day in raw:
        # bool is an int subclass; True/False are not weekdays.
        if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
            raise ConfigurationError(f'Invalid closed weekday: {day!r}. Expected 0 (Sunday) to 6 (Saturday).')

    return frozenset(raw)


def weekday_index(day: date) -> int:
    """Weekday number with 0 = Sunday .. 6 = Saturday."""
    return day.isoweekday() % 7
