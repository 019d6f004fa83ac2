"""Slot generation and exclusion.

Everything in this module is a pure function of its arguments: no database
access and no clock reads. Callers fetch the inputs first.
"""

from dataclasses import dataclass
from datetime import date, time
from typing import Iterable, Protocol

from barbershop.core.errors import ConfigurationError
from barbershop.models.appointment import STATUS_CANCELLED
from barbershop.scheduling.working_hours import WorkingHours, validate_working_hours, weekday_index


class BlockedTimeLike(Protocol):
    blocked_date: date
    is_full_day: bool
    start_time: time | None
    end_time: time | None


class AppointmentLike(Protocol):
    appointment_date: date
    appointment_time: time
    status: str


@dataclass(frozen=True)
class BlockedPeriod:
    blocked_date: date
    is_full_day: bool = False
    start_time: time | None = None
    end_time: time | None = None


@dataclass(frozen=True)
class BookedSlot:
    appointment_date: date
    appointment_time: time
    status: str


def _seconds_of_day(value: time) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second


def generate_slots(opening_time: time, closing_time: time, slot_interval: int) -> list[time]:
    if slot_interval <= 0:
        raise ConfigurationError('Slot interval must be a positive number of minutes.')

    # Seconds from midnight; an interval longer than the day stops after one slot.
    step = slot_interval * 60
    current = _seconds_of_day(opening_time)
    end = _seconds_of_day(closing_time)

    slots: list[time] = []
    while current < end:
        hours, remainder = divmod(current, 3600)
        minutes, seconds = divmod(remainder, 60)
        slots.append(time(hours, minutes, seconds))
        current += step

    return slots


def is_within_blocked_range(slot_time: time, blocked: BlockedTimeLike) -> bool:
    if blocked.start_time is None or blocked.end_time is None:
        return False
    return blocked.start_time <= slot_time < blocked.end_time


def filter_available(
    candidate_slots: Iterable[time],
    day: date,
    closed_days: Iterable[int],
    blocked_times: Iterable[BlockedTimeLike],
    booked_appointments: Iterable[AppointmentLike],
) -> list[time]:
    if weekday_index(day) in set(closed_days):
        return []

    day_blocks = [blocked for blocked in blocked_times if blocked.blocked_date == day]
    if any(blocked.is_full_day for blocked in day_blocks):
        return []

    ranged_blocks = [blocked for blocked in day_blocks if not blocked.is_full_day]
    booked_times = {
        appointment.appointment_time
        for appointment in booked_appointments
        if appointment.appointment_date == day and appointment.status != STATUS_CANCELLED
    }

    return [
        slot_time
        for slot_time in candidate_slots
        if slot_time not in booked_times
        and not any(is_within_blocked_range(slot_time, blocked) for blocked in ranged_blocks)
    ]


def compute_available_slots(
    day: date,
    working_hours: WorkingHours,
    closed_days: Iterable[int],
    blocked_times: Iterable[BlockedTimeLike],
    booked_appointments: Iterable[AppointmentLike],
) -> list[time]:
    validate_working_hours(working_hours)

    candidates = generate_slots(
        working_hours.opening_time,
        working_hours.closing_time,
        working_hours.slot_interval,
    )
    return filter_available(candidates, day, closed_days, blocked_times, booked_appointments)
