"""
Password hashing with bcrypt.

Usage:
    hashed = hash_password("s3cret")
    verify_password("s3cret", hashed)  # True
"""

import bcrypt

BCRYPT_ROUNDS = 10

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a password with a fresh salt."""
    if not password:
        raise ValueError("Password must not be empty")
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def verify_password(password: str, hashed: str) -> bool:
    """
    Check a password against a stored hash.

    Returns False (rather than raising) for empty input or a malformed hash.
    """
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(_encode(password), hashed.encode("ascii"))
    except (ValueError, UnicodeEncodeError):
        return False
