"""Account router: /users/* endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from crownhike.auth.dependencies import get_current_user
from crownhike.auth.jwt import create_access_token
from crownhike.auth.password import PasswordStrengthError, verify_password
from crownhike.database import get_session
from crownhike.db.models import User
from crownhike.schemas import OkResponse
from crownhike.users.schemas import (
    LoginRequest,
    LoginResponse,
    PasswordChangeRequest,
    ProfileEnvelope,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    RegisterResponse,
    UserSummary,
)
from crownhike.users.service import (
    EmailTakenError,
    InvalidPasswordError,
    NothingToUpdateError,
    change_password,
    delete_user,
    get_user_by_email,
    register_user,
    update_profile,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_session),
) -> RegisterResponse:
    try:
        user = await register_user(db, body.username, body.email, body.password)
    except (PasswordStrengthError, EmailTakenError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return RegisterResponse(user_id=user.id)


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_session),
) -> LoginResponse:
    """Exchange email and password for a bearer token."""
    user = await get_user_by_email(db, body.email)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    if not verify_password(body.password, user.password_hash):
        logger.info("login_failed", user_id=user.id)
        raise HTTPException(status_code=401, detail="Invalid password")

    return LoginResponse(
        user=UserSummary.model_validate(user),
        token=create_access_token(user.id, user.email),
    )


@router.get("/me", response_model=ProfileEnvelope)
async def get_profile(user: User = Depends(get_current_user)) -> ProfileEnvelope:
    return ProfileEnvelope(data=ProfileResponse.model_validate(user))


@router.put("/me", response_model=OkResponse, response_model_exclude_none=True)
async def update_my_profile(
    body: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> OkResponse:
    try:
        await update_profile(
            db,
            user,
            username=body.username,
            allow_location_sharing=body.allow_location_sharing,
        )
    except NothingToUpdateError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return OkResponse()


@router.put("/password", response_model=OkResponse)
async def update_password(
    body: PasswordChangeRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> OkResponse:
    try:
        await change_password(db, user, body.old_password, body.new_password)
    except PasswordStrengthError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except InvalidPasswordError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e
    await db.commit()
    return OkResponse(message="Password updated")


@router.delete("/me", response_model=OkResponse)
async def delete_account(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> OkResponse:
    """Delete the account and all of its hikes, ascents, badges and emergency data."""
    await delete_user(db, user.id)
    await db.commit()
    return OkResponse(message="Account deleted")
