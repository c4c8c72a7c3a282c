"""Password hashing and access-token issuance.

New hashes use pbkdf2_sha256. bcrypt hashes carried over from older
records still verify and are marked for re-hashing on the next login.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt
from passlib.context import CryptContext

from hr_leave.common.constants import UserRole
from hr_leave.config import settings

password_context = CryptContext(
    schemes=["pbkdf2_sha256", "bcrypt"],
    deprecated="auto",
)


def hash_password(password: str) -> str:
    return password_context.hash(password)


def verify_password(password: str, password_hash: str) -> tuple[bool, Optional[str]]:
    """Return (matches, replacement_hash). The replacement is set when the
    stored hash uses a deprecated scheme and should be upgraded."""
    return password_context.verify_and_update(password, password_hash)


def create_access_token(employee_id: uuid.UUID, role: UserRole) -> tuple[str, int]:
    """Return (encoded_jwt, expires_in_seconds)."""
    expires_in = settings.JWT_EXPIRY_HOURS * 3600
    payload = {
        "sub": str(employee_id),
        "role": role.value,
        "type": "access",
        "exp": datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRY_HOURS),
    }
    token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token, expires_in
