from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, field_validator
from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from barbershop.auth.dependencies import get_db, require_admin
from barbershop.models.appointment import STATUS_COMPLETED, Appointment
from barbershop.models.user import ROLE_ADMIN, User
from barbershop.routes.common import database_unavailable, ensure_database_ready

router = APIRouter(tags=['clients'])


class UpdateClientRequest(BaseModel):
    name: str
    phone: str | None = None
    email: str | None = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Client name is required.')
        return normalized

    @field_validator('phone', 'email')
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class ClientResponse(BaseModel):
    id: int
    name: str
    phone: str | None = None
    email: str | None = None
    created_at: datetime | None = None
    last_visit: date | None = None


def search_filter(search: str | None):
    if not search or not search.strip():
        return None

    pattern = f'%{search.strip()}%'
    return or_(User.name.ilike(pattern), User.email.ilike(pattern), User.phone.ilike(pattern))


def get_last_visits(db: Session) -> dict[int, date]:
    rows = db.query(Appointment.client_id, func.max(Appointment.appointment_date)).filter(
        Appointment.status == STATUS_COMPLETED,
    ).group_by(Appointment.client_id).all()
    return {client_id: last_visit for client_id, last_visit in rows}


def get_client_or_404(db: Session, client_id: int) -> User:
    client = db.query(User).filter(User.id == client_id).first()
    if client is None or client.is_admin:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Client not found.')
    return client


def to_client_response(client: User, last_visit: date | None = None) -> ClientResponse:
    return ClientResponse(
        id=client.id,
        name=client.name,
        phone=client.phone,
        email=client.email,
        created_at=client.created_at,
        last_visit=last_visit,
    )


@router.get('', response_model=list[ClientResponse])
def list_clients(
    search: str | None = Query(default=None),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    ensure_database_ready()

    try:
        query = db.query(User).filter(or_(User.role.is_(None), User.role != ROLE_ADMIN))
        condition = search_filter(search)
        if condition is not None:
            query = query.filter(condition)

        clients = query.order_by(User.created_at.desc(), User.id.desc()).all()
        last_visits = get_last_visits(db)

        return [to_client_response(client, last_visits.get(client.id)) for client in clients]
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.put('/{client_id}', response_model=ClientResponse)
def update_client(
    client_id: int,
    data: UpdateClientRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    ensure_database_ready()

    try:
        client = get_client_or_404(db, client_id)
        client.name = data.name
        client.phone = data.phone
        if data.email is not None:
            client.email = data.email.lower()
        db.commit()
        db.refresh(client)

        return to_client_response(client, get_last_visits(db).get(client.id))
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.delete('/{client_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_client(
    client_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    ensure_database_ready()

    try:
        client = get_client_or_404(db, client_id)
        db.query(Appointment).filter(Appointment.client_id == client_id).delete(synchronize_session=False)
        db.delete(client)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc
