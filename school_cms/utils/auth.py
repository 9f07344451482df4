"""
Admin password check for gallery write endpoints.
Uses bcrypt for password hashing. Logins and sessions live outside this service;
write endpoints only verify the X-CMS-Password header against ADMIN_PASSWORD_HASH.
"""
from typing import Optional

import bcrypt
from fastapi import Header, HTTPException, status

from school_cms.config import settings


def hash_password(password: str, rounds: int = 12) -> str:
    """
    Hash a password using bcrypt.
    Used for generating ADMIN_PASSWORD_HASH.
    """
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, hashed_password: str) -> bool:
    """
    Verify a password against a bcrypt hash.
    Malformed hashes count as a mismatch.
    """
    try:
        return bcrypt.checkpw(
            password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except ValueError:
        return False


def verify_admin_password(password: str) -> bool:
    """
    Raises:
        ValueError: If ADMIN_PASSWORD_HASH is not configured
    """
    if not settings.ADMIN_PASSWORD_HASH:
        raise ValueError("ADMIN_PASSWORD_HASH not configured")

    return verify_password(password, settings.ADMIN_PASSWORD_HASH)


def require_admin(
    x_cms_password: Optional[str] = Header(None, alias="X-CMS-Password", description="CMS admin password")
) -> bool:
    """
    FastAPI dependency guarding gallery write endpoints.

    Raises:
        HTTPException: 401 if the password is missing or wrong, 500 if no hash is configured
    """
    if not x_cms_password:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Missing password", "message": "CMS access requires password authentication"}
        )

    try:
        authorized = verify_admin_password(x_cms_password)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Authentication not configured", "message": str(e)}
        )

    if not authorized:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Invalid password", "message": "CMS access denied"}
        )
    return True
