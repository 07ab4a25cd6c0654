from hashlib import sha256

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.logging import bind_request_context, get_logger
from app.db.session import get_session
from app.models.user import User
from timesheet.models import Role

ADMIN = Role.ADMIN.value
EMPLOYEE = Role.EMPLOYEE.value

bearer_scheme = HTTPBearer(auto_error=False)
logger = get_logger(__name__)


def hash_password(raw: str) -> str:
    return sha256(raw.encode("utf-8")).hexdigest()


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_session),
) -> User:
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    user = db.query(User).filter(User.api_token == credentials.credentials).one_or_none()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    bind_request_context(user_id=user.id)
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.has_role(ADMIN):
        logger.warning("admin_access_denied", user_id=user.id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return user
