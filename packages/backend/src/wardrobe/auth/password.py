"""Password hashing utilities.

Learn: Uses bcrypt for password hashing. bcrypt salts automatically and
checkpw compares in constant time, so login cannot leak how much of a
hash matched. Passwords are truncated to 72 bytes (bcrypt's limit);
that ceiling is fine for passwords but is exactly why refresh tokens are
fingerprinted with SHA-256 instead (see auth/tokens.py).
"""

import bcrypt

BCRYPT_ROUNDS = 10
_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a password with a fresh bcrypt salt."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    """Check a password against a stored bcrypt hash.

    Returns False (never raises) for a missing or corrupt hash.
    """
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False
