"""
auth/tokens.py -- Opaque bearer token issue and lookup.

Tokens are not signed and do not expire: a token is 128 random bytes as
256 hex characters, stored verbatim on the user record and matched exactly.
Nothing about the value is derived from the email or password.

Layer rule: no imports from api/, orders/, or catalog/.
"""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from auth.models import User
    from auth.store import UserStore

TOKEN_BYTES = 128


def issue_token() -> str:
    """Generate a new bearer token. The caller persists it."""
    return secrets.token_hex(TOKEN_BYTES)


def resolve_token(store: UserStore, token: str | None) -> User | None:
    """Return the user holding exactly this token, or None.

    No match is an ordinary outcome (anonymous request), not an error.
    """
    if not token:
        return None
    return store.get_by_access_token(token)
