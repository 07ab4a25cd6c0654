from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import ADMIN, EMPLOYEE, hash_password
from app.db.session import Base, get_session
from app.domains.metrics.service import get_clock
from app.main import app
from app.models import ChargeCode, TimeEntry, User
from timesheet.clock import FixedClock

TODAY = date(2024, 3, 14)

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_session] = override_get_session
app.dependency_overrides[get_clock] = lambda: FixedClock(TODAY)


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def make_user(db, email: str, roles: list[str], name: str | None = None) -> User:
    user = User(
        email=email,
        name=name,
        hashed_password=hash_password("supersecure"),
        roles=roles,
        api_token=f"token-{email}",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_header(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {user.api_token}"}


@pytest.fixture
def admin(db):
    return make_user(db, "admin@example.com", [ADMIN], name="Alice Admin")


@pytest.fixture
def employee(db):
    return make_user(db, "employee@example.com", [EMPLOYEE], name="John Employee")


@pytest.fixture
def charge_code(db):
    row = ChargeCode(code="PROJ-001", description="Client Project Alpha - Development")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def log_hours(db, user: User, code: ChargeCode, days: list[date], hours: int) -> None:
    db.add_all(
        [TimeEntry(user_id=user.id, charge_code_id=code.id, work_date=day, hours=hours) for day in days]
    )
    db.commit()
