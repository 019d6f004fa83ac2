"""Key/value settings model definitions."""

from sqlalchemy import JSON, Column, Integer, String

from barbershop.database import Base


WORKING_HOURS_KEY = "working_hours"
CLOSED_DAYS_KEY = "closed_days"


class Setting(Base):
    """A named JSON configuration value."""
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True)
    key = Column(String, unique=True, nullable=False, index=True)
    value = Column(JSON)
