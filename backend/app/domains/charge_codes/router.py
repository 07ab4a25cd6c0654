from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import Field
from sqlalchemy.orm import Session

from app.core.logging import get_logger
from app.core.schemas import CamelModel
from app.core.security import get_current_user, require_admin
from app.db.session import get_session
from app.models.charge_code import ChargeCode
from app.models.user import User

router = APIRouter(prefix="/charge-codes", tags=["charge-codes"])
logger = get_logger(__name__)


class ChargeCodeCreate(CamelModel):
    code: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=255)


class ChargeCodeUpdate(CamelModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, min_length=1, max_length=255)
    is_active: bool | None = None


class ChargeCodeOut(CamelModel):
    id: int
    code: str
    description: str
    is_active: bool


def _code_taken(db: Session, code: str, exclude_id: int | None = None) -> bool:
    query = db.query(ChargeCode).filter(ChargeCode.code == code)
    if exclude_id is not None:
        query = query.filter(ChargeCode.id != exclude_id)
    return db.query(query.exists()).scalar()


@router.get("", response_model=list[ChargeCodeOut])
def list_charge_codes(
    include_inactive: bool = Query(default=False, alias="includeInactive"),
    db: Session = Depends(get_session),
    _: User = Depends(get_current_user),
) -> list[ChargeCode]:
    query = db.query(ChargeCode)
    if not include_inactive:
        query = query.filter(ChargeCode.is_active.is_(True))
    return query.order_by(ChargeCode.code.asc()).all()


@router.post("", response_model=ChargeCodeOut, status_code=201)
def create_charge_code(
    payload: ChargeCodeCreate,
    db: Session = Depends(get_session),
    admin: User = Depends(require_admin),
) -> ChargeCode:
    code = payload.code.strip()
    if _code_taken(db, code):
        raise HTTPException(status_code=400, detail="Charge code already exists")

    row = ChargeCode(code=code, description=payload.description.strip(), is_active=True)
    db.add(row)
    db.commit()
    db.refresh(row)

    logger.info("charge_code_created", code=row.code, admin_id=admin.id)
    return row


@router.patch("/{charge_code_id}", response_model=ChargeCodeOut)
def update_charge_code(
    charge_code_id: int,
    payload: ChargeCodeUpdate,
    db: Session = Depends(get_session),
    admin: User = Depends(require_admin),
) -> ChargeCode:
    row = db.query(ChargeCode).filter(ChargeCode.id == charge_code_id).one_or_none()
    if not row:
        raise HTTPException(status_code=404, detail="Charge code not found")

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "code" in changes and _code_taken(db, changes["code"], exclude_id=row.id):
        raise HTTPException(status_code=400, detail="Charge code already exists")
    for field, value in changes.items():
        setattr(row, field, value)
    db.commit()
    db.refresh(row)

    logger.info("charge_code_updated", charge_code_id=row.id, fields=sorted(changes), admin_id=admin.id)
    return row
