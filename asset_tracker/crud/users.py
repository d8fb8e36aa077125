"""User accounts: lookup, creation, deletion and the boot-time admin seed."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import DuplicateKeyError, InvalidCredentialsError, NotFoundError, RecordValidationError
from ..core.roles import DEFAULT_ROLE, ROLE_ADMIN, ROLE_CHOICES, Principal, is_valid_role
from ..core.security import hash_password, verify_password
from ..models.user import User

logger = logging.getLogger("asset_tracker.users")


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def _normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def to_principal(user: User) -> Principal:
    return Principal(id=str(user.id), role=user.role, email=user.email)


def list_users(db: Session) -> list[User]:
    return db.execute(select(User).order_by(User.email)).scalars().all()


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> User | None:
    stmt = select(User).where(User.email == _normalize_email(email))
    return db.execute(stmt).scalars().first()


def create_user(db: Session, email: str, password: str, role: str | None = None) -> User:
    normalized = _normalize_email(email)
    role = role or DEFAULT_ROLE
    errors = []
    if not normalized:
        errors.append("email is required")
    if not password:
        errors.append("password is required")
    if not is_valid_role(role):
        errors.append(f"`{role}` is not a valid role; expected one of: {', '.join(ROLE_CHOICES)}")
    if errors:
        raise RecordValidationError(errors)
    if get_user_by_email(db, normalized) is not None:
        raise DuplicateKeyError("User already exists")

    user = User(email=normalized, password_hash=hash_password(password), role=role, created_at=_utcnow())
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateKeyError("User already exists") from exc
    db.refresh(user)
    logger.info("user.created", extra={"extra_data": {"id": user.id, "email": user.email, "role": user.role}})
    return user


def delete_user(db: Session, user_id: int, *, acting_user_id: str) -> None:
    """Hard-delete a user. Nobody may delete their own account."""

    if str(user_id) == str(acting_user_id):
        raise RecordValidationError("Cannot delete your own account")
    user = get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    db.delete(user)
    db.commit()
    logger.info("user.deleted", extra={"extra_data": {"id": user_id, "by": acting_user_id}})


def authenticate_user(db: Session, email: str, password: str) -> User:
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        raise InvalidCredentialsError()
    return user


def seed_admin_user(db: Session, email: str, password: str) -> User | None:
    """Create the first Admin account unless it already exists."""

    if get_user_by_email(db, email) is not None:
        return None
    user = create_user(db, email, password, ROLE_ADMIN)
    logger.info("user.admin_seeded", extra={"extra_data": {"email": user.email}})
    return user
