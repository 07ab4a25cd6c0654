from sqlalchemy.orm import Session

from app.core.logging import get_logger
from app.core.security import ADMIN, EMPLOYEE, hash_password
from app.models import ChargeCode, User

logger = get_logger(__name__)

CHARGE_CODES = [
    ("PROJ-001", "Client Project Alpha - Development"),
    ("PROJ-002", "Client Project Beta - Design"),
    ("PROJ-003", "Internal Tools Development"),
    ("ADMIN-001", "Administrative Tasks"),
    ("TRAIN-001", "Training & Learning"),
    ("MTG-001", "Meetings & Collaboration"),
    ("SUPP-001", "Customer Support"),
    ("RND-001", "Research & Development"),
]

USERS = [
    ("employee@example.com", "John Employee", [EMPLOYEE]),
    ("admin@example.com", "Alice Admin", [ADMIN]),
    ("both@example.com", "Bob Both", [EMPLOYEE, ADMIN]),
]

DEFAULT_PASSWORD = "password123"


def seed(session: Session) -> None:
    """Insert reference charge codes and demo users; existing rows are left alone."""
    existing_codes = {code for (code,) in session.query(ChargeCode.code).all()}
    for code, description in CHARGE_CODES:
        if code not in existing_codes:
            session.add(ChargeCode(code=code, description=description))

    existing_emails = {email for (email,) in session.query(User.email).all()}
    for email, name, roles in USERS:
        if email not in existing_emails:
            session.add(
                User(email=email, name=name, hashed_password=hash_password(DEFAULT_PASSWORD), roles=roles)
            )

    session.commit()
    logger.info("seed_complete", charge_codes=len(CHARGE_CODES), users=len(USERS))


if __name__ == "__main__":
    from app.db.session import Base, engine, session_scope

    Base.metadata.create_all(bind=engine)
    with session_scope() as db:
        seed(db)
