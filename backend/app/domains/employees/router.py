from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import Field, field_validator
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.logging import get_logger
from app.core.schemas import CamelModel
from app.core.security import EMPLOYEE, hash_password, require_admin
from app.db.session import get_session
from app.models.time_entry import TimeEntry
from app.models.user import User

router = APIRouter(prefix="/admin/employees", tags=["employees"])
logger = get_logger(__name__)


class EmployeeCreate(CamelModel):
    email: str
    name: str | None = None
    password: str = Field(..., min_length=8)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        email = value.strip()
        if "@" not in email:
            raise ValueError("Invalid email format")
        return email


class EmployeeOut(CamelModel):
    id: int
    email: str
    name: str | None
    roles: list[str]
    created_at: datetime
    time_entry_count: int = 0


def _employees(db: Session):
    # roles is a JSON list, so membership is checked in Python
    return [user for user in db.query(User).order_by(User.email.asc()).all() if user.has_role(EMPLOYEE)]


@router.get("", response_model=list[EmployeeOut])
def list_employees(
    search: str = Query(default=""),
    db: Session = Depends(get_session),
    _: User = Depends(require_admin),
) -> list[EmployeeOut]:
    term = search.strip().lower()
    employees = _employees(db)
    if term:
        employees = [
            e for e in employees if term in e.email.lower() or term in (e.name or "").lower()
        ]

    counts = dict(
        db.query(TimeEntry.user_id, func.count(TimeEntry.id))
        .filter(TimeEntry.user_id.in_([e.id for e in employees]))
        .group_by(TimeEntry.user_id)
        .all()
    )
    return [
        EmployeeOut(
            id=e.id,
            email=e.email,
            name=e.name,
            roles=list(e.roles),
            created_at=e.created_at or datetime.utcnow(),
            time_entry_count=counts.get(e.id, 0),
        )
        for e in employees
    ]


@router.post("", response_model=EmployeeOut, status_code=201)
def create_employee(
    payload: EmployeeCreate,
    db: Session = Depends(get_session),
    admin: User = Depends(require_admin),
) -> EmployeeOut:
    existing_user = (
        db.query(User)
        .filter(func.lower(User.email) == payload.email.lower())
        .one_or_none()
    )
    if existing_user:
        raise HTTPException(status_code=400, detail="User already exists")

    user = User(
        email=payload.email,
        name=payload.name,
        hashed_password=hash_password(payload.password),
        roles=[EMPLOYEE],
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("employee_created", email=user.email, admin_id=admin.id)
    return EmployeeOut(id=user.id, email=user.email, name=user.name, roles=list(user.roles), created_at=user.created_at)
