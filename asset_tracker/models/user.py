from __future__ import annotations

from sqlalchemy import Column, Integer, Text

from ..core.roles import DEFAULT_ROLE
from ..db.session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(Text, nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    role = Column(Text, nullable=False, default=DEFAULT_ROLE)
    created_at = Column(Text, nullable=False)


__all__ = ["User"]
