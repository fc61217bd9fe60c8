"""
Notebench Backend — User Account Service
==========================================

What:  Registration, login and profile lookup.
Why:   Protected routes need a caller identity. This service creates accounts
       and exchanges credentials for bearer tokens the authentication gate
       accepts.
How:   Passwords are hashed with passlib (see notebench.security); tokens are
       JWTs naming the user id. Login failures never reveal whether the
       username or the password was wrong.
"""

import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notebench.exceptions import AuthenticationError, ConflictError, DatabaseError
from notebench.models.user import User
from notebench.schemas.user import AuthResponse, LoginRequest, UserCreate, UserResponse
from notebench.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


class UserService:

    def _auth_response(self, user: User) -> AuthResponse:
        return AuthResponse(
            token=create_access_token(user.id),
            user=UserResponse.model_validate(user),
        )

    async def register(self, db: AsyncSession, payload: UserCreate) -> AuthResponse:
        """
        Create an account and return a token for it.

        Raises:
            ConflictError: username or email already taken (→ 409)
        """
        try:
            existing = await db.execute(
                select(User.id).where(
                    or_(User.username == payload.username, User.email == payload.email)
                )
            )
            if existing.first() is not None:
                raise ConflictError(message="Username or email is already registered")

            user = User(
                username=payload.username,
                email=payload.email,
                password_hash=hash_password(payload.password),
            )
            db.add(user)
            await db.flush()
            await db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same name
            await db.rollback()
            raise ConflictError(message="Username or email is already registered")
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error registering user: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        logger.info("Registered user %s", user.id)
        return self._auth_response(user)

    async def login(self, db: AsyncSession, payload: LoginRequest) -> AuthResponse:
        """
        Exchange credentials for a token.

        Raises:
            AuthenticationError: unknown user or wrong password (→ 401)
        """
        if payload.username:
            query = select(User).where(User.username == payload.username)
        else:
            query = select(User).where(User.email == payload.email.strip().lower())

        try:
            result = await db.execute(query)
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error during login: %s", str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})

        if user is None or not verify_password(payload.password, user.password_hash):
            raise AuthenticationError(message="Incorrect username or password")

        return self._auth_response(user)


user_service = UserService()
