"""
Notebench Backend — Authentication Gate
=========================================

What:  Bearer-token authentication for every protected route, plus the helpers
       that issue tokens and hash passwords for the user account routes.
Why:   Handlers only ever see a verified caller; an unauthenticated request is
       rejected with 401 before any handler code runs.
How:   `get_current_user` is a FastAPI dependency. It reads the Authorization
       header via HTTPBearer, verifies the JWT with python-jose, loads the user
       the `sub` claim names, and records the id on request.state.

Token format:
    HS256 JWT with {"sub": <user uuid>, "iat": <unix>, "exp": <unix>}
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from notebench.config import settings
from notebench.database import get_db_session
from notebench.exceptions import AuthenticationError
from notebench.models.user import User

logger = logging.getLogger(__name__)

# auto_error=False: missing credentials go through our own 401 envelope
bearer = HTTPBearer(auto_error=False)

pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__rounds=settings.password_hash_rounds,
)


# ── Passwords ─────────────────────────────────────────────────────────────

def hash_password(plain: str) -> str:
    """Hash a plaintext password and return the encoded hash string."""
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """Return True when `plain` matches the stored hash; never raises."""
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


# ── Tokens ────────────────────────────────────────────────────────────────

def create_access_token(user_id: uuid.UUID, expires_minutes: Optional[int] = None) -> str:
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=expires_minutes or settings.jwt_exp_minutes)
    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> uuid.UUID:
    """
    Verify a token and return the user id it names.

    Raises:
        AuthenticationError: bad signature, expired, or missing/malformed `sub`.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise AuthenticationError(
            message="Invalid or expired token",
            context={"reason": type(e).__name__},
        )

    sub = payload.get("sub")
    try:
        return uuid.UUID(str(sub))
    except ValueError:
        raise AuthenticationError(message="Invalid token")


# ── Dependency ────────────────────────────────────────────────────────────

async def get_current_user(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """
    Resolve the authenticated caller or reject the request.

    Raises:
        AuthenticationError: no bearer credentials, an invalid token, or a
            token naming a user that no longer exists (→ 401).
    """
    if creds is None or creds.scheme.lower() != "bearer":
        raise AuthenticationError(message="You must be logged in")

    user_id = decode_token(creds.credentials)

    user = await db.get(User, user_id)
    if user is None:
        logger.info("Token for unknown user %s rejected", user_id)
        raise AuthenticationError(message="Invalid token")

    request.state.user_id = str(user.id)
    return user
