from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from app.db.session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(200), nullable=True)
    hashed_password = Column(String(255), nullable=False)
    roles = Column(JSON, nullable=False, default=lambda: ["EMPLOYEE"])  # EMPLOYEE and/or ADMIN
    api_token = Column(String(64), nullable=True, unique=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    time_entries = relationship("TimeEntry", back_populates="user", cascade="all, delete-orphan")

    def has_role(self, role: str) -> bool:
        return role in (self.roles or [])
