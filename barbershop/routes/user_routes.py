import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from barbershop.auth.dependencies import get_db, require_admin
from barbershop.models.user import ROLE_ADMIN, User
from barbershop.routes.client_routes import search_filter
from barbershop.routes.common import database_unavailable, ensure_database_ready

router = APIRouter(tags=['users'])

logger = logging.getLogger(__name__)


class UpdateRoleRequest(BaseModel):
    role: Literal['admin', 'user', 'none']


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    phone: str | None = None
    role: str | None = None

    class Config:
        from_attributes = True


@router.get('', response_model=list[UserResponse])
def list_users(
    search: str | None = Query(default=None),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    ensure_database_ready()

    try:
        query = db.query(User)
        condition = search_filter(search)
        if condition is not None:
            query = query.filter(condition)

        return query.order_by(User.name.asc(), User.id.asc()).all()
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.put('/{user_id}/role', response_model=UserResponse)
def update_user_role(
    user_id: int,
    data: UpdateRoleRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    if user_id == admin.id and data.role != ROLE_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='You cannot remove your own admin role.',
        )

    ensure_database_ready()

    try:
        user = db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='User not found.')

        new_role = None if data.role == 'none' else data.role
        logger.info('User %s role changed from %s to %s by %s.', user.id, user.role, new_role, admin.email)
        user.role = new_role
        db.commit()
        db.refresh(user)

        return user
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc
