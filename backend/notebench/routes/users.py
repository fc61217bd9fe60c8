"""
Notebench Backend — User Account Routes
=========================================

POST /api/users         register, returns {token, user}
POST /api/users/login   returns {token, user}
GET  /api/users/me      the authenticated caller's profile
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from notebench.database import get_db_session
from notebench.models.user import User
from notebench.schemas.common import ErrorResponse
from notebench.schemas.user import AuthResponse, LoginRequest, UserCreate, UserResponse
from notebench.security import get_current_user
from notebench.services.user_service import user_service

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post(
    "",
    status_code=201,
    response_model=AuthResponse,
    responses={
        400: {"description": "Invalid registration", "model": ErrorResponse},
        409: {"description": "Username or email taken", "model": ErrorResponse},
    },
    summary="Register a new account",
)
async def register(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await user_service.register(db, payload)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"description": "Bad credentials", "model": ErrorResponse}},
    summary="Exchange credentials for a bearer token",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await user_service.login(db, payload)


@router.get(
    "/me",
    response_model=UserResponse,
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
    summary="The authenticated caller",
)
async def me(user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(user)
