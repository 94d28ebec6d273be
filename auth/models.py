"""
auth/models.py -- Domain dataclasses for user identities.

Pattern: Data class (pure data container, zero logic). Stores and routes do
the work.

Layer rule: no imports from api/, orders/, or catalog/.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class User:
    """A registered customer.

    hashed_password is a bcrypt digest with its salt embedded; the plaintext
    is never stored.

    access_token is the opaque bearer credential issued once at signup. It is
    never regenerated and never included in read projections of the user.

    ordered_cakes holds CakeOrder ids in the order they were placed. These are
    plain identifiers; resolve them through OrderStore.get_many().
    """

    name: str
    email: str
    hashed_password: str
    access_token: str
    id: str | None = None
    created_at: str | None = None
    ordered_cakes: list[str] = field(default_factory=list)
