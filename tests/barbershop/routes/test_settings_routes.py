from datetime import time

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from barbershop.models.setting import WORKING_HOURS_KEY, Setting
from barbershop.routes.settings_routes import (
    ClosedDaysPayload,
    get_closed_days,
    get_working_hours,
    update_closed_days,
    update_working_hours,
)
from barbershop.scheduling.working_hours import WorkingHours


def test_get_working_hours_defaults_on_first_run(db, client_user) -> None:
    hours = get_working_hours(db=db, current_user=client_user)

    assert hours.model_dump(mode='json') == {'opening_time': '08:00', 'closing_time': '19:00', 'slot_interval': 30}


def test_update_working_hours_persists_value(db, admin_user, client_user) -> None:
    update_working_hours(
        data=WorkingHours(opening_time='09:00', closing_time='17:00', slot_interval=20),
        db=db,
        admin=admin_user,
    )
    update_working_hours(
        data=WorkingHours(opening_time='10:00', closing_time='18:00', slot_interval=15),
        db=db,
        admin=admin_user,
    )

    hours = get_working_hours(db=db, current_user=client_user)

    assert hours.opening_time == time(10, 0)
    assert hours.slot_interval == 15
    assert db.query(Setting).filter(Setting.key == WORKING_HOURS_KEY).one().value == {
        'opening_time': '10:00',
        'closing_time': '18:00',
        'slot_interval': 15,
    }


@pytest.mark.parametrize(
    ('opening', 'closing', 'interval'),
    [('18:00', '09:00', 30), ('09:00', '09:00', 30), ('09:00', '18:00', 0)],
)
def test_update_working_hours_rejects_invalid_values(db, admin_user, opening, closing, interval) -> None:
    with pytest.raises(HTTPException) as exception_info:
        update_working_hours(
            data=WorkingHours(opening_time=opening, closing_time=closing, slot_interval=interval),
            db=db,
            admin=admin_user,
        )

    assert exception_info.value.status_code == 422
    assert db.query(Setting).count() == 0


def test_get_working_hours_surfaces_malformed_payload(db, client_user) -> None:
    db.add(Setting(key=WORKING_HOURS_KEY, value={'opening_time': '08:00'}))
    db.commit()

    with pytest.raises(HTTPException) as exception_info:
        get_working_hours(db=db, current_user=client_user)

    assert exception_info.value.status_code == 500


def test_closed_days_payload_deduplicates_and_sorts() -> None:
    assert ClosedDaysPayload(closed_days=[6, 0, 6]).closed_days == [0, 6]


def test_closed_days_payload_rejects_out_of_range_day() -> None:
    with pytest.raises(ValidationError):
        ClosedDaysPayload(closed_days=[7])


def test_closed_days_round_trip_through_settings(db, admin_user, client_user) -> None:
    assert get_closed_days(db=db, current_user=client_user).closed_days == []

    update_closed_days(data=ClosedDaysPayload(closed_days=[1, 0]), db=db, admin=admin_user)

    assert get_closed_days(db=db, current_user=client_user).closed_days == [0, 1]


@pytest.mark.parametrize(
    'stored',
    [
        {'opening_time': '08:00Z', 'closing_time': '19:00', 'slot_interval': 30},
        {'opening_time': '08:00', 'closing_time': '19:00', 'slot_interval': '30'},
    ],
)
def test_get_working_hours_rejects_loosely_typed_payload(db, client_user, stored) -> None:
    db.add(Setting(key=WORKING_HOURS_KEY, value=stored))
    db.commit()

    with pytest.raises(HTTPException) as exception_info:
        get_working_hours(db=db, current_user=client_user)

    assert exception_info.value.status_code == 500


def test_working_hours_body_with_offset_is_rejected_before_saving() -> None:
    with pytest.raises(ValidationError):
        WorkingHours.model_validate({'opening_time': '08:00Z', 'closing_time': '19:00', 'slot_interval': 30})
