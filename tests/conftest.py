import os

os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')
os.environ.setdefault('JWT_SECRET_KEY', 'barbershop-test-secret-key-0123456789')

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from barbershop.database import Base  # noqa: E402
from barbershop.models.appointment import Appointment  # noqa: E402
from barbershop.models.blocked_time import BlockedTime  # noqa: E402
from barbershop.models.service import Service  # noqa: E402
from barbershop.models.setting import Setting  # noqa: E402
from barbershop.models.user import User  # noqa: E402

TABLES = [User.__table__, Service.__table__, Appointment.__table__, BlockedTime.__table__, Setting.__table__]


@pytest.fixture
def db():
    engine = create_engine('sqlite:///:memory:')
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine, tables=TABLES)

    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine, tables=list(reversed(TABLES)))


@pytest.fixture
def make_user(db):
    def _make_user(email: str = 'client@example.com', name: str = 'Client', role: str | None = 'user', phone=None):
        user = User(email=email, name=name, role=role, phone=phone)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def client_user(make_user):
    return make_user()


@pytest.fixture
def admin_user(make_user):
    return make_user(email='admin@example.com', name='Admin', role='admin')


@pytest.fixture
def haircut(db):
    service = Service(name='Haircut', price=40, duration_minutes=30)
    db.add(service)
    db.commit()
    db.refresh(service)
    return service
