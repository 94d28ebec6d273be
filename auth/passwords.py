"""
auth/passwords.py -- Credential store: password hashing and verification.

bcrypt is used directly (no passlib wrapper). Its cost factor makes brute
force expensive, and the salt is embedded in the digest so no separate salt
column is needed.

Layer rule: no imports from api/, orders/, or catalog/. Import from core/ is
allowed.
"""

from __future__ import annotations

import bcrypt

from core.config import get_settings
from core.errors import InvalidInput
from core.validation import validate_password

_settings = get_settings()


def hash_password(plain: str) -> str:
    """Return a salted bcrypt digest of plain.

    Raises InvalidInput when the password is shorter than the configured
    minimum or longer than bcrypt's 72-byte input limit.
    """
    result = validate_password(plain, _settings.min_password_length)
    if not result.ok:
        raise InvalidInput("Invalid password.", result.errors)
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if plain matches the digest. Malformed input is a non-match, never an error."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except Exception:
        return False


# Verified against when an email is unknown so sign-in takes the same time
# whether or not the account exists. Computed once at import.
DUMMY_HASH: str = bcrypt.hashpw(b"cakemaker_timing_dummy", bcrypt.gensalt()).decode("utf-8")
