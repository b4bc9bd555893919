from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi.security import HTTPBearer
from pydantic import BaseModel
from enum import Enum
from functools import lru_cache

from .config import Settings, settings

# Password hashing
@lru_cache()
def password_context(rounds: int) -> CryptContext:
    """bcrypt context hashing at the given work factor."""
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=rounds,
    )


pwd_context = password_context(settings.BCRYPT_ROUNDS)

# Missing credentials are reported by the auth gate itself, not by HTTPBearer
security = HTTPBearer(auto_error=False)


class UserRole(str, Enum):
    ADMIN = "admin"
    PATIENT = "patient"


class TokenPayload(BaseModel):
    sub: Optional[str] = None
    role: Optional[str] = None
    iat: Optional[int] = None
    exp: Optional[int] = None


class Identity(BaseModel):
    """Decoded caller identity attached to an authenticated request."""

    user_id: str
    role: UserRole


# Password utilities
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str, rounds: Optional[int] = None) -> str:
    """Generate password hash."""
    return password_context(rounds or settings.BCRYPT_ROUNDS).hash(password)


def dummy_verify_password(rounds: Optional[int] = None) -> None:
    """Burn the same time as a real verification for unknown accounts."""
    password_context(rounds or settings.BCRYPT_ROUNDS).dummy_verify()


# JWT utilities
def create_access_token(
    user_id: str,
    role: UserRole,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed JWT carrying the caller's id and role."""
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)

    to_encode = {
        "sub": user_id,
        "role": role.value,
        "iat": now,
        "exp": now + expires_delta,
    }

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )


def verify_token(token: str, settings: Settings) -> Optional[TokenPayload]:
    """Verify signature and expiry; None when the token cannot be trusted."""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )

        return TokenPayload(**payload)

    except (JWTError, ValueError):
        return None


def identity_from_payload(payload: TokenPayload) -> Optional[Identity]:
    if not payload.sub or not payload.role:
        return None
    try:
        role = UserRole(payload.role)
    except ValueError:
        return None
    return Identity(user_id=payload.sub, role=role)
