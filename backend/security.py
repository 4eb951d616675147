"""Password hashing and JWT issue/verify."""
from __future__ import annotations

import hashlib
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from passlib.context import CryptContext

import config

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=config.BCRYPT_ROUNDS,
)

# bcrypt only reads the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


def _bcrypt_secret(password: str) -> str:
    raw = password.encode("utf-8")
    if len(raw) <= BCRYPT_MAX_BYTES:
        return password
    return hashlib.sha256(raw).hexdigest()


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("password must not be blank")
    return pwd_context.hash(_bcrypt_secret(password))


def verify_password(plain: str, hashed: str) -> bool:
    """False for a wrong password and for a stored hash passlib cannot identify."""
    if not plain or not hashed:
        return False
    try:
        return pwd_context.verify(_bcrypt_secret(plain), hashed)
    except ValueError:
        return False


def create_access_token(user_id: int, email: str, role: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "user_id": user_id,
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + timedelta(days=config.JWT_EXPIRE_DAYS),
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """Return the payload, or None if the token is malformed, expired or badly signed."""
    try:
        return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except jwt.InvalidTokenError:
        return None
