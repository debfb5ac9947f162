# hotel_api/api/dependencies.py
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_api.db.session import get_db
from hotel_api.db.models import User
from hotel_api.db import crud_users
from hotel_api.core.security import verify_access_token

logger = logging.getLogger("uvicorn.error")
security = HTTPBearer(auto_error=False)


async def _user_from_credentials(
    db: AsyncSession, credentials: HTTPAuthorizationCredentials
) -> User:
    token = credentials.credentials
    try:
        payload = verify_access_token(token)
    except JWTError:
        logger.warning("token decode error")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token"
        )

    try:
        uid = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token user id"
        )

    user = await crud_users.get_user(db, uid)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found"
        )
    return user


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> User:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated"
        )
    return await _user_from_credentials(db, credentials)


async def get_optional_user(
    db: AsyncSession = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[User]:
    """
    For public endpoints: no Authorization header means anonymous,
    a bad one is still rejected.
    """
    if credentials is None:
        return None
    return await _user_from_credentials(db, credentials)


def require_role(role: str):
    async def dep(user: User = Depends(get_current_user)) -> User:
        # allow role OR admin to pass
        if user.role != role and user.role != "admin":
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions"
            )
        return user

    return dep
