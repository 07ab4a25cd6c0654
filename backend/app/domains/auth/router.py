from __future__ import annotations

import secrets
from hmac import compare_digest
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.logging import get_logger
from app.core.security import ADMIN, EMPLOYEE, hash_password
from app.db.session import get_session
from app.models.user import User

router = APIRouter(prefix="/auth", tags=["auth"])
logger = get_logger(__name__)


class LoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    password: str = Field(..., min_length=8)
    login_type: Literal["employee", "admin"] = Field(default="employee", alias="loginType")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        email = value.strip()
        if "@" not in email:
            raise ValueError("Invalid email")
        return email


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    email: str
    roles: list[str]


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_session)) -> LoginResponse:
    logger.info("login_attempt", email=payload.email, login_type=payload.login_type)
    user = (
        db.query(User)
        .filter(func.lower(User.email) == payload.email.lower())
        .one_or_none()
    )

    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    if not compare_digest(user.hashed_password, hash_password(payload.password)):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    required_role = ADMIN if payload.login_type == "admin" else EMPLOYEE
    if not user.has_role(required_role):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    user.api_token = secrets.token_urlsafe(32)
    db.commit()
    logger.info("login_success", email=payload.email, roles=user.roles)

    return LoginResponse(access_token=user.api_token, email=user.email, roles=list(user.roles))
