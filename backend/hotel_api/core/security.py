# hotel_api/core/security.py

import hashlib
import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, Tuple

from jose import jwt, JWTError
from passlib.context import CryptContext

from hotel_api.core.config import settings

# --------------------------------------
# Password hashing config
# --------------------------------------
# pbkdf2_sha256: no 72-byte input limit, no bcrypt backend needed
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


# --------------------------------------
# Access tokens
# --------------------------------------

def create_access_token(data: Dict[str, Any]) -> str:
    to_encode = data.copy()
    now = datetime.utcnow()
    to_encode.update(
        {
            "iat": now,
            "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            "type": "access",
        }
    )
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate an *access* token.
    Used by get_current_user.
    """
    payload = jwt.decode(
        token,
        settings.JWT_SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
    )

    if payload.get("type") != "access":
        raise JWTError("Invalid token type")

    if "sub" not in payload:
        raise JWTError("Missing sub in token")

    return payload


# --------------------------------------
# Password reset tokens
# --------------------------------------

def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_reset_token() -> Tuple[str, str, datetime]:
    """
    Returns (raw token for the email link, sha256 hash to store, expiry).
    Only the hash is ever persisted.
    """
    raw = secrets.token_hex(20)
    expires = datetime.utcnow() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
    return raw, hash_reset_token(raw), expires
