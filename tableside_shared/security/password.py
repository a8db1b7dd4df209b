"""
Password hashing utilities using bcrypt.
"""

import bcrypt

from tableside_shared.config.logging import get_logger

logger = get_logger(__name__)

BCRYPT_ROUNDS = 12
BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """
    Hash a password using bcrypt.

    Example:
        hashed = hash_password("mypassword123")
        # Returns something like: $2b$12$...
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Non-bcrypt hashes are always rejected.
    """
    if not hashed_password.startswith(BCRYPT_PREFIXES):
        logger.warning("Rejected login against a non-bcrypt password hash")
        return False

    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def needs_rehash(hashed_password: str, rounds: int = BCRYPT_ROUNDS) -> bool:
    """Check if a stored hash should be upgraded after a successful login."""
    if not hashed_password.startswith(BCRYPT_PREFIXES):
        return True

    # "$2b$12$..." -> cost factor is the second field
    try:
        cost = int(hashed_password.split("$")[2])
    except (IndexError, ValueError):
        return True
    return cost < rounds
