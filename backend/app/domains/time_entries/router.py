from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import Field
from sqlalchemy.orm import Session, joinedload

from app.core.logging import get_logger
from app.core.schemas import CamelModel
from app.core.security import ADMIN, get_current_user
from app.db.session import get_session
from app.models.charge_code import ChargeCode
from app.models.time_entry import TimeEntry
from app.models.user import User
from timesheet.clock import parse_day
from timesheet.models import MAX_ENTRY_HOURS, MIN_ENTRY_HOURS

router = APIRouter(prefix="/time-entries", tags=["time-entries"])
logger = get_logger(__name__)


class TimeEntryInput(CamelModel):
    charge_code_id: int
    work_date: date = Field(..., alias="date")
    hours: int = Field(..., ge=MIN_ENTRY_HOURS, le=MAX_ENTRY_HOURS, strict=True)


class ChargeCodeRef(CamelModel):
    id: int
    code: str
    description: str


class TimeEntryOut(CamelModel):
    id: int
    user_id: int
    charge_code_id: int
    work_date: date = Field(..., alias="date")
    hours: int
    charge_code: ChargeCodeRef


class RemovalResult(CamelModel):
    removed: int


def _to_out(entry: TimeEntry) -> TimeEntryOut:
    return TimeEntryOut(
        id=entry.id,
        user_id=entry.user_id,
        charge_code_id=entry.charge_code_id,
        work_date=entry.work_date,
        hours=entry.hours,
        charge_code=ChargeCodeRef.model_validate(entry.charge_code),
    )


@router.get("", response_model=list[TimeEntryOut])
def list_time_entries(
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    user_id: int | None = Query(default=None, alias="userId"),
    db: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> list[TimeEntryOut]:
    target_user_id = user.id
    if user_id is not None and user.has_role(ADMIN):
        target_user_id = user_id

    query = (
        db.query(TimeEntry)
        .options(joinedload(TimeEntry.charge_code))
        .join(ChargeCode, TimeEntry.charge_code_id == ChargeCode.id)
        .filter(TimeEntry.user_id == target_user_id)
    )
    start, end = parse_day(start_date), parse_day(end_date)
    if start and end:
        query = query.filter(TimeEntry.work_date >= start, TimeEntry.work_date <= end)

    entries = query.order_by(TimeEntry.work_date.asc(), ChargeCode.code.asc()).all()
    return [_to_out(entry) for entry in entries]


@router.post("", response_model=TimeEntryOut)
def upsert_time_entry(
    payload: TimeEntryInput,
    db: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> TimeEntryOut:
    charge_code = db.query(ChargeCode).filter(ChargeCode.id == payload.charge_code_id).one_or_none()
    if not charge_code:
        raise HTTPException(status_code=404, detail="Charge code not found")

    entry = (
        db.query(TimeEntry)
        .filter(
            TimeEntry.user_id == user.id,
            TimeEntry.charge_code_id == payload.charge_code_id,
            TimeEntry.work_date == payload.work_date,
        )
        .one_or_none()
    )
    if entry:
        entry.hours = payload.hours
    else:
        entry = TimeEntry(
            user_id=user.id,
            charge_code_id=payload.charge_code_id,
            work_date=payload.work_date,
            hours=payload.hours,
        )
        db.add(entry)
    db.commit()
    db.refresh(entry)

    logger.info(
        "time_entry_upserted",
        entry_id=entry.id,
        charge_code=charge_code.code,
        work_date=entry.work_date.isoformat(),
        hours=entry.hours,
    )
    return _to_out(entry)


@router.delete("/{entry_id}", status_code=204)
def delete_time_entry(
    entry_id: int,
    db: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    entry = db.query(TimeEntry).filter(TimeEntry.id == entry_id).one_or_none()
    if not entry:
        raise HTTPException(status_code=404, detail="Time entry not found")
    if entry.user_id != user.id and not user.has_role(ADMIN):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    db.delete(entry)
    db.commit()
    logger.info("time_entry_deleted", entry_id=entry_id)
    return None


@router.delete("", response_model=RemovalResult)
def remove_charge_code(
    charge_code_id: int = Query(..., alias="chargeCodeId"),
    start_date: str = Query(..., alias="startDate"),
    end_date: str = Query(..., alias="endDate"),
    db: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> RemovalResult:
    """Drop a charge code row from the caller's timesheet for a date range.

    Each entry is deleted and committed on its own; a failure part way
    through leaves the earlier deletions in place.
    """
    start, end = parse_day(start_date), parse_day(end_date)
    if not start or not end:
        raise HTTPException(status_code=400, detail="Invalid date range")

    entry_ids = [
        row.id
        for row in db.query(TimeEntry.id).filter(
            TimeEntry.user_id == user.id,
            TimeEntry.charge_code_id == charge_code_id,
            TimeEntry.work_date >= start,
            TimeEntry.work_date <= end,
        )
    ]
    removed = 0
    for entry_id in entry_ids:
        deleted = db.query(TimeEntry).filter(TimeEntry.id == entry_id).delete(synchronize_session=False)
        db.commit()
        removed += deleted

    logger.info("charge_code_removed", charge_code_id=charge_code_id, removed=removed)
    return RemovalResult(removed=removed)
