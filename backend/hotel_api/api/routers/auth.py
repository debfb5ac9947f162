# hotel_api/api/routers/auth.py
import logging
from typing import Dict, Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_api.api.dependencies import get_current_user
from hotel_api.db.session import get_db
from hotel_api.db import crud_users
from hotel_api.schemas.auth import Token
from hotel_api.schemas.user import (
    ForgotPassword,
    PasswordChange,
    PasswordReset,
    ProfileUpdate,
    UserCreate,
    UserLogin,
    UserOut,
)
from hotel_api.core.security import (
    create_access_token,
    generate_reset_token,
    hash_reset_token,
    verify_password,
)
from hotel_api.services.mailer import Mailer, get_mailer
from hotel_api.services.notifications import compose_password_reset

logger = logging.getLogger("uvicorn.error")
router = APIRouter()


def _token_response(user) -> Dict[str, Any]:
    """
    Return a simple dict matching the Token pydantic model:
    { access_token, token_type, user }
    """
    access = create_access_token({"sub": str(user.id), "role": user.role})
    return {
        "access_token": access,
        "token_type": "bearer",
        "user": UserOut.model_validate(user),
    }


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(payload: UserCreate, db: AsyncSession = Depends(get_db)):
    existing = await crud_users.get_user_by_email(db, payload.email)
    if existing:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")

    user = await crud_users.create_user(
        db=db,
        first_name=payload.first_name,
        last_name=payload.last_name or "",
        email=payload.email,
        password=payload.password,
    )
    return _token_response(user)


@router.post("/login", response_model=Token)
async def login(payload: UserLogin, db: AsyncSession = Depends(get_db)):
    user = await crud_users.get_user_by_email(db, payload.email)
    if not user or not verify_password(payload.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    return _token_response(user)


@router.post("/forgot-password")
async def forgot_password(
    payload: ForgotPassword,
    request: Request,
    db: AsyncSession = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    user = await crud_users.get_user_by_email(db, payload.email)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    raw_token, token_hash, expires = generate_reset_token()
    await crud_users.set_reset_token(db, user, token_hash, expires)

    reset_url = str(request.url_for("reset_password", token=raw_token))
    try:
        await mailer.send(
            to=user.email,
            subject="Password Reset",
            html=compose_password_reset(reset_url),
        )
    except Exception:
        logger.exception("password reset email to %s failed", user.email)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send reset email",
        )
    return {"message": "Reset link sent to email"}


@router.post("/reset-password/{token}", name="reset_password")
async def reset_password(
    token: str,
    payload: PasswordReset,
    db: AsyncSession = Depends(get_db),
):
    user = await crud_users.get_user_by_reset_token(db, hash_reset_token(token))
    if not user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired token")

    await crud_users.set_password(db, user, payload.password)
    return {"message": "Password reset successful"}


@router.post("/change-password")
async def change_password(
    payload: PasswordChange,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user),
):
    if not verify_password(payload.current_password, current_user.hashed_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect")

    await crud_users.set_password(db, current_user, payload.new_password)
    return {"message": "Password changed successfully"}


@router.patch("/update-profile")
async def update_profile(
    payload: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user),
):
    user = await crud_users.update_profile(db, current_user, payload.model_dump())
    return {"message": "Profile updated", "user": UserOut.model_validate(user)}


@router.post("/logout")
async def logout(current_user=Depends(get_current_user)):
    # tokens are stateless; the client drops its copy
    return {"ok": True}
