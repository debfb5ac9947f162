# hotel_api/db/crud_users.py

from datetime import datetime
from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_api.db.models import User
from hotel_api.core.security import get_password_hash


async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    res = await db.execute(select(User).where(User.id == user_id))
    return res.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    res = await db.execute(select(User).where(User.email == email.strip().lower()))
    return res.scalar_one_or_none()


async def list_users(db: AsyncSession) -> List[User]:
    res = await db.execute(select(User).order_by(User.id.desc()))
    return list(res.scalars().all())


async def create_user(
    db: AsyncSession,
    first_name: str,
    email: str,
    password: str,
    last_name: str = "",
    role: str = "user",
) -> User:
    """
    Create a user with hashed password. Email is stored lower-cased.
    """
    user = User(
        first_name=first_name,
        last_name=last_name or "",
        email=email.strip().lower(),
        hashed_password=get_password_hash(password),
        role=role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def update_profile(db: AsyncSession, user: User, data: dict) -> User:
    for k, v in data.items():
        if v is not None:
            setattr(user, k, v)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def set_password(db: AsyncSession, user: User, password: str) -> User:
    """
    Replace the password hash and invalidate any outstanding reset token.
    """
    user.hashed_password = get_password_hash(password)
    user.reset_password_token = None
    user.reset_password_expires = None
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def set_reset_token(
    db: AsyncSession, user: User, token_hash: str, expires: datetime
) -> None:
    user.reset_password_token = token_hash
    user.reset_password_expires = expires
    db.add(user)
    await db.commit()


async def get_user_by_reset_token(db: AsyncSession, token_hash: str) -> Optional[User]:
    """
    Only returns the user while the token is still valid.
    """
    res = await db.execute(
        select(User).where(
            User.reset_password_token == token_hash,
            User.reset_password_expires > datetime.utcnow(),
        )
    )
    return res.scalar_one_or_none()
