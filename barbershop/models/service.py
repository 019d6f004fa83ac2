"""Service model definitions."""

from sqlalchemy import Column, Integer, Numeric, String

from barbershop.database import Base


class Service(Base):
    """Represents a bookable service (haircut, beard trim, ...)."""
    __tablename__ = "services"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    duration_minutes = Column(Integer, nullable=False)
