"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt generates a random
per-hash salt and embeds it in the "$2b$..." output, and checkpw compares
in constant time. The work factor comes from settings (12 in production,
lowered in tests). Passwords are truncated to 72 bytes (bcrypt's limit).

These functions are called from exactly one place: CredentialStore.
Callers hand plaintext to the store, never a pre-computed hash.
"""

import bcrypt

from peoplehub.config import settings


def hash_password(password: str) -> str:
    """Hash a password with bcrypt and a fresh salt."""
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its bcrypt hash."""
    try:
        pw_bytes = password.encode("utf-8")[:72]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError):
        return False


# Compared against when the email is unknown, so a miss costs the same
# bcrypt work as a wrong password.
DUMMY_HASH = hash_password("peoplehub-dummy-password")
