"""
Password hashing and JWT helpers for staff authentication.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import jwt

from clinica.core.config import settings

SECRET_KEY = settings.SECRET_KEY
ALGORITHM = settings.ALGORITHM

PASSWORD_MIN_LENGTH = 8
_SPECIAL_CHAR = re.compile(r"[^A-Za-z0-9]")


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


def password_policy_error(password: str) -> Optional[str]:
    """Return the first policy violation for a new staff password, or None."""
    if not password:
        return "La contraseña es requerida"
    if len(password) < PASSWORD_MIN_LENGTH:
        return f"La contraseña debe tener al menos {PASSWORD_MIN_LENGTH} caracteres"
    if not _SPECIAL_CHAR.search(password):
        return "La contraseña debe contener al menos un caracter especial"
    return None


def create_access_token(
    data: dict,
    token_version: int = 1,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed access token.

    The token carries the user id in `sub` and the user's token_version in `tv`;
    bumping token_version invalidates every token issued before.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire, "tv": token_version})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
