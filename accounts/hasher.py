"""Password hashing and verification.

Uses bcrypt, whose output embeds the salt and cost factor, so verification
needs nothing but the stored hash. Passwords are pre-hashed with SHA-256 to
stay under bcrypt's 72-byte input limit for multi-byte characters.
"""

import hashlib
import logging

import bcrypt

from accounts.config import BCRYPT_ROUNDS

logger = logging.getLogger(__name__)


def _prehash(password: str) -> bytes:
    return hashlib.sha256(password.encode("utf-8")).hexdigest().encode("ascii")


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> bytes:
    """Hash a password with a fresh salt.

    Single source of truth for password hashing across the application.

    Args:
        password: Password to hash
        rounds: bcrypt cost factor (log2 of iterations)

    Returns:
        bcrypt hash bytes including salt and cost
    """
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt(rounds=rounds))


def verify_password(stored_hash: bytes, password: str) -> bool:
    """Check a password against a stored hash in constant time.

    Args:
        stored_hash: Hash previously returned by hash_password
        password: Password to verify

    Returns:
        True if password matches, False otherwise (including malformed hashes)
    """
    try:
        return bcrypt.checkpw(_prehash(password), stored_hash)
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False
