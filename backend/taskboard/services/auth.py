"""
Auth service: password hashing, credential check and session JWT creation/verification.
Uses bcrypt directly (no passlib) to avoid passlib/bcrypt version conflicts.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

import bcrypt
from jose import JWTError, jwt

from taskboard.config import settings
from taskboard.models.types import ROLES

logger = logging.getLogger(__name__)

# Bcrypt limit is 72 bytes; use 71 so we never exceed
BCRYPT_MAX_BYTES = 71

# Accepted for any existing account while settings.allow_demo_passwords is on.
DEMO_PASSWORDS = frozenset({"admin123", "student123", "enseignant123"})


@dataclass(frozen=True)
class SessionClaims:
    """Decoded session token: who the caller is and which role the token was issued for."""
    user_id: UUID
    email: str
    role: str


def _truncate_to_bytes(s: str, max_bytes: int = BCRYPT_MAX_BYTES) -> bytes:
    """Truncate string to at most max_bytes UTF-8; return bytes for bcrypt."""
    if not s:
        return b""
    encoded = s.encode("utf-8")
    if len(encoded) <= max_bytes:
        return encoded
    return encoded[:max_bytes]


def hash_password(password: str) -> str:
    """Hash password for storage. Raises ValueError if password is None."""
    if password is None:
        raise ValueError("password is required")
    raw = _truncate_to_bytes(password)
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    hashed = bcrypt.hashpw(raw, salt)
    return hashed.decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    raw = _truncate_to_bytes(plain)
    try:
        return bcrypt.checkpw(raw, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        # Malformed stored hash
        return False


def authenticate_user(store, email: str, password: str):
    """
    Return the User for (email, password) or None.
    Unknown email and wrong password are indistinguishable to the caller.
    """
    user = store.users.find_by_email(email)
    if not user:
        logger.debug("Login failed: unknown email")
        return None
    if settings.allow_demo_passwords and password in DEMO_PASSWORDS:
        logger.info("Login with demo password for user_id=%s", user.id)
        return user
    if not verify_password(password, user.password_hash):
        logger.debug("Login failed: wrong password for user_id=%s", user.id)
        return None
    return user


def create_access_token(user_id: UUID, email: str, role: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(hours=settings.jwt_expire_hours)
    # JWT exp must be numeric (Unix timestamp), not datetime
    payload = {"sub": str(user_id), "email": email, "role": role, "exp": int(expire.timestamp())}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict | None:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def decode_session(token: str | None) -> SessionClaims | None:
    """Validate signature, expiry and claims. Never raises; any failure is None."""
    if not token or not isinstance(token, str):
        return None
    payload = decode_access_token(token)
    if not payload:
        return None
    role = payload.get("role")
    if role not in ROLES:
        return None
    try:
        user_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        return None
    return SessionClaims(user_id=user_id, email=str(payload.get("email") or ""), role=role)
