import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from barbershop.routes.user_routes import UpdateRoleRequest, list_users, update_user_role


def test_list_users_includes_staff_and_clients(db, client_user, admin_user) -> None:
    users = list_users(search=None, db=db, admin=admin_user)

    assert [(user.name, user.role) for user in users] == [('Admin', 'admin'), ('Client', 'user')]


def test_update_role_request_rejects_unknown_role() -> None:
    with pytest.raises(ValidationError):
        UpdateRoleRequest(role='barber')


def test_promote_and_remove_role(db, client_user, admin_user) -> None:
    promoted = update_user_role(user_id=client_user.id, data=UpdateRoleRequest(role='admin'), db=db, admin=admin_user)
    assert promoted.role == 'admin'

    removed = update_user_role(user_id=client_user.id, data=UpdateRoleRequest(role='none'), db=db, admin=admin_user)
    assert removed.role is None


def test_admin_cannot_remove_own_admin_role(db, admin_user) -> None:
    with pytest.raises(HTTPException) as exception_info:
        update_user_role(user_id=admin_user.id, data=UpdateRoleRequest(role='user'), db=db, admin=admin_user)

    assert exception_info.value.status_code == 400
    assert exception_info.value.detail == 'You cannot remove your own admin role.'


def test_update_role_returns_not_found_when_missing(db, admin_user) -> None:
    with pytest.raises(HTTPException) as exception_info:
        update_user_role(user_id=999, data=UpdateRoleRequest(role='user'), db=db, admin=admin_user)

    assert exception_info.value.status_code == 404
