# kosync/core/security.py
"""
Security module for authentication.
Handles password hashing and the per-request header credential check.

KOReader never sends the typed password: it sends the MD5 hex digest of it
(the "client key") both when registering and in the x-auth-key header.
The client key is what gets verified, and only an argon2 hash of it is
stored.
"""
import hashlib
from typing import Optional

from passlib.context import CryptContext

from kosync.core.errors import Unauthenticated
from kosync.core.policies import Identity
from kosync.repositories.base import KosyncRepository

# Password hashing context
# Argon2 is a modern, salted password hashing algorithm
pwd_context = CryptContext(
    schemes=["argon2"],  # Use Argon2 for password hashing
    deprecated="auto",   # Automatically handle deprecated schemes
)

# Header names used by the KOReader sync plugin
AUTH_USER_HEADER = "x-auth-user"
AUTH_KEY_HEADER = "x-auth-key"


def client_key(password: str) -> str:
    """
    Derive the key KOReader sends for a plaintext password.

    Used where a plaintext password reaches the server (admin endpoints,
    admin seeding) so that the stored hash matches what devices send.
    """
    return hashlib.md5(password.encode("utf-8")).hexdigest()


def hash_password(plain: str) -> str:
    """
    Hash a client key using Argon2.

    Args:
        plain: Client key to hash

    Returns:
        Hashed string (safe to store in database)
    """
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a client key against a stored hash.

    Returns:
        True if the key matches, False otherwise (including unreadable hashes)
    """
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


async def authenticate(
    repository: KosyncRepository,
    username: Optional[str],
    key: Optional[str],
) -> Identity:
    """
    Validate header credentials against the store.

    Runs on every request to a protected endpoint; nothing is cached, so a
    password change or deletion takes effect on the next request.

    Args:
        repository: Account store
        username: Value of the x-auth-user header
        key: Value of the x-auth-key header

    Returns:
        Identity: username plus active and administrator claims

    Raises:
        Unauthenticated: Missing/empty headers, unknown user or wrong key
    """
    if not username or not key:
        raise Unauthenticated("Missing authentication headers")

    user = await repository.get_user_by_username(username)
    if user is None or not verify_password(key, user.password_hash):
        raise Unauthenticated("Invalid credentials")

    return Identity(
        username=user.username,
        is_active=user.is_active,
        is_administrator=user.is_administrator,
    )
