"""Authentication utilities."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from config import get_settings
from core.exceptions import InvalidTokenError, MissingTokenError

settings = get_settings()

# JWT Bearer
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """Identity carried by a valid access token."""

    user_id: str
    email: Optional[str]


def hash_password(password: str) -> str:
    """Hash a password."""
    password_bytes = password.encode("utf-8")
    # Truncate to 72 bytes if needed (bcrypt limitation)
    if len(password_bytes) > 72:
        password_bytes = password_bytes[:72]
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    password_bytes = plain_password.encode("utf-8")
    # Truncate to 72 bytes if needed
    if len(password_bytes) > 72:
        password_bytes = password_bytes[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed or foreign hash
        return False


def create_access_token(
    subject_id: str, email: Optional[str], expires_delta: Optional[timedelta] = None
) -> str:
    """Create a JWT access token."""
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.jwt_expire_minutes)

    to_encode = {"sub": subject_id, "email": email, "exp": expire, "type": "access"}

    return jwt.encode(
        to_encode,
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )


def decode_access_token(token: str) -> Principal:
    """Validate a JWT access token and return its principal."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        raise InvalidTokenError()

    if payload.get("type") != "access":
        raise InvalidTokenError()

    user_id = payload.get("sub")
    if not user_id:
        raise InvalidTokenError()

    return Principal(user_id=str(user_id), email=payload.get("email"))


def bind_principal(request: Request, principal: Principal) -> None:
    """Attach caller identity to the request so the audit row records it."""
    request.state.user_id = principal.user_id
    request.state.user_email = principal.email


async def get_current_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Principal:
    """Get the authenticated caller or fail with 401."""
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()

    principal = decode_access_token(credentials.credentials)
    bind_principal(request, principal)
    return principal
