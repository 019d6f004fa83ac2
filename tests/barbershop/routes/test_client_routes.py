from datetime import date, time

import pytest
from fastapi import HTTPException

from barbershop.models.appointment import Appointment
from barbershop.models.user import User
from barbershop.routes.client_routes import UpdateClientRequest, delete_client, list_clients, update_client


def _appointment(client, service, day, status) -> Appointment:
    return Appointment(
        client_id=client.id,
        service_id=service.id,
        appointment_date=day,
        appointment_time=time(9, 0),
        status=status,
    )


def test_list_clients_excludes_admins_and_reports_last_visit(db, make_user, admin_user, haircut) -> None:
    ana = make_user(email='ana@example.com', name='Ana', phone='555-0101')
    bruno = make_user(email='bruno@example.com', name='Bruno', role=None)
    db.add_all([
        _appointment(ana, haircut, date(2026, 1, 5), 'completed'),
        _appointment(ana, haircut, date(2026, 2, 5), 'completed'),
        _appointment(ana, haircut, date(2026, 3, 5), 'scheduled'),
    ])
    db.commit()

    clients = list_clients(search=None, db=db, admin=admin_user)

    by_name = {client.name: client for client in clients}
    assert set(by_name) == {'Ana', 'Bruno'}
    assert by_name['Ana'].last_visit == date(2026, 2, 5)
    assert by_name['Bruno'].last_visit is None
    assert bruno.id in {client.id for client in clients}


@pytest.mark.parametrize('search', ['ana', 'ANA@EXAMPLE', '0101'])
def test_list_clients_searches_name_email_and_phone(db, make_user, admin_user, search: str) -> None:
    make_user(email='ana@example.com', name='Ana', phone='555-0101')
    make_user(email='bruno@example.com', name='Bruno', phone='555-0202')

    clients = list_clients(search=search, db=db, admin=admin_user)

    assert [client.name for client in clients] == ['Ana']


def test_update_client_turns_blank_phone_into_null(db, client_user, admin_user) -> None:
    updated = update_client(
        client_id=client_user.id,
        data=UpdateClientRequest(name=' New Name ', phone='  ', email='NEW@EXAMPLE.COM'),
        db=db,
        admin=admin_user,
    )

    assert updated.name == 'New Name'
    assert updated.phone is None
    assert updated.email == 'new@example.com'


def test_update_client_refuses_admin_accounts(db, admin_user) -> None:
    with pytest.raises(HTTPException) as exception_info:
        update_client(client_id=admin_user.id, data=UpdateClientRequest(name='X'), db=db, admin=admin_user)

    assert exception_info.value.status_code == 404


def test_delete_client_removes_their_appointments(db, client_user, admin_user, haircut) -> None:
    db.add(_appointment(client_user, haircut, date(2026, 1, 5), 'scheduled'))
    db.commit()

    delete_client(client_id=client_user.id, db=db, admin=admin_user)

    assert db.query(Appointment).count() == 0
    assert db.query(User).filter(User.id == client_user.id).first() is None
