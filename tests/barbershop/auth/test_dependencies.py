import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from barbershop.auth import jwt_handler
from barbershop.auth.dependencies import get_current_user, require_admin
from barbershop.routes.auth_routes import me


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme='Bearer', credentials=token)


def test_token_round_trip_keeps_subject() -> None:
    token = jwt_handler.create_access_token('client@example.com')

    payload = jwt_handler.decode_access_token(token)

    assert payload['sub'] == 'client@example.com'
    assert payload['exp'] > payload['iat']


def test_get_current_user_resolves_token_subject(db, client_user) -> None:
    token = jwt_handler.create_access_token('Client@Example.com')

    user = get_current_user(credentials=_credentials(token), db=db)

    assert user.id == client_user.id
    assert me(current_user=user) == {
        'id': client_user.id,
        'email': 'client@example.com',
        'name': 'Client',
        'role': 'user',
    }


def test_get_current_user_rejects_garbage_token(db) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_current_user(credentials=_credentials('not-a-jwt'), db=db)

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == 'Invalid token'


def test_get_current_user_rejects_unknown_user(db) -> None:
    token = jwt_handler.create_access_token('ghost@example.com')

    with pytest.raises(HTTPException) as exception_info:
        get_current_user(credentials=_credentials(token), db=db)

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == 'User not found'


def test_require_admin(client_user, admin_user) -> None:
    assert require_admin(current_user=admin_user) is admin_user

    with pytest.raises(HTTPException) as exception_info:
        require_admin(current_user=client_user)

    assert exception_info.value.status_code == 403
