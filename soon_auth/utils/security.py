"""Security utilities for password hashing and verification.

Hashing is bcrypt through passlib's ``bcrypt_sha256`` scheme: the password is
run through HMAC-SHA256 before bcrypt, so every character of a long password
counts and not only the first 72 bytes. Plain ``bcrypt`` hashes still verify.
Both operations are CPU-bound, so the async wrappers push them onto a worker
thread and keep the event loop responsive while several requests hash
concurrently.
"""

import asyncio

from passlib.context import CryptContext

from soon_auth.core.config.settings import settings

pwd_context = CryptContext(
    schemes=["bcrypt_sha256", "bcrypt"],
    deprecated="auto",
    bcrypt_sha256__rounds=settings.BCRYPT_WORK_FACTOR,
    bcrypt__rounds=settings.BCRYPT_WORK_FACTOR,
)

# Verified against when the account has no usable hash, so that unknown emails
# and password-less accounts cost the same time as a wrong password.
DUMMY_PASSWORD_HASH = pwd_context.hash("soon-dummy-password")


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        str: ``bcrypt_sha256`` hash (salted, so two calls never match)
    """
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Args:
        password: Plain text password to verify
        hashed_password: Hash to verify against

    Returns:
        bool: True if password matches hash. Malformed hashes verify as False.

    Security:
        - Uses constant-time comparison via bcrypt
    """
    try:
        return pwd_context.verify(password, hashed_password)
    except (ValueError, TypeError):
        return False


async def hash_password_async(password: str) -> str:
    return await asyncio.to_thread(hash_password, password)


async def verify_password_async(password: str, hashed_password: str) -> bool:
    return await asyncio.to_thread(verify_password, password, hashed_password)
