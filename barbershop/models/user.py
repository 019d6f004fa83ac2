"""User model definitions."""

from sqlalchemy import Column, DateTime, Integer, String, func

from barbershop.database import Base


ROLE_ADMIN = "admin"


class User(Base):
    """Represents an application user (client or staff)."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False, default="")
    phone = Column(String)
    role = Column(String)  # admin/user, NULL when no role is assigned
    created_at = Column(DateTime, server_default=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
