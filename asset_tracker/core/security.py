from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from .config import settings
from .roles import Principal

ALGORITHM = "HS256"
AUDIENCE = "asset-tracker-clients"
ISSUER = "asset-tracker"
BCRYPT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes of a secret.
BCRYPT_MAX_BYTES = 72


class TokenPayload(BaseModel):
    sub: str
    exp: datetime
    iat: datetime
    aud: str
    iss: str
    user: Principal


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def issue_access_token(principal: Principal, expires_delta: timedelta | None = None) -> str:
    now = _now()
    delta = expires_delta if expires_delta is not None else timedelta(minutes=settings.JWT_TTL_MIN)
    payload: dict[str, Any] = {
        "sub": principal.id,
        "iat": int(now.timestamp()),
        "exp": int((now + delta).timestamp()),
        "aud": AUDIENCE,
        "iss": ISSUER,
        "user": principal.model_dump(),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


def decode_token(token: str) -> TokenPayload:
    try:
        decoded = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[ALGORITHM],
            audience=AUDIENCE,
            issuer=ISSUER,
        )
    except JWTError as exc:
        raise ValueError("Invalid token") from exc
    try:
        return TokenPayload.model_validate(decoded)
    except ValidationError as exc:
        raise ValueError("Invalid token payload") from exc


def authenticate(token: str) -> Principal:
    """Resolve an access token to the principal it was issued for."""

    return decode_token(token).user


def _secret_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_secret_bytes(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(_secret_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        return False
