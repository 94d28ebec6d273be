"""
auth/accounts.py -- Signup and sign-in on top of UserStore.

register_user() validates, hashes, issues the bearer token and persists.
authenticate_user() checks an email/password pair with timing equalization.

Both raise the core/errors taxonomy; the API layer turns those into HTTP
responses.

Layer rule: no imports from api/, orders/, or catalog/.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from auth.models import User
from auth.passwords import DUMMY_HASH, hash_password, verify_password
from auth.store import UserStore
from auth.tokens import issue_token
from core.config import get_settings
from core.errors import DuplicateEmail, InvalidCredentials
from core.validation import normalize_email, validate_signup

logger = logging.getLogger("cakemaker.auth")

SIGNUP_FAILED = "Could not create user."


def register_user(store: UserStore, name: str, email: str, password: str) -> User:
    """Create an account and return it, including the freshly issued access_token.

    The returned record is the only place the caller gets the token without
    signing in again; read projections never include it.

    Raises ValidationError on bad fields and DuplicateEmail when the email is
    already registered (detected by the store's UNIQUE constraint, so two
    concurrent signups with one email cannot both succeed).
    """
    settings = get_settings()
    validate_signup(name, email, password, settings.min_password_length).raise_for_errors(SIGNUP_FAILED)

    user = User(
        name=name.strip(),
        email=normalize_email(email),
        hashed_password=hash_password(password),
        access_token=issue_token(),
    )
    try:
        created = store.create_user(user)
    except IntegrityError as exc:
        raise DuplicateEmail(SIGNUP_FAILED) from exc

    logger.info("User %s signed up", created.id)
    return created


def authenticate_user(store: UserStore, email: str, password: str) -> User:
    """Return the user for a correct email/password pair.

    Unknown email and wrong password raise the same InvalidCredentials. bcrypt
    runs in both branches (against DUMMY_HASH when the email is unknown) so
    response time does not reveal which half failed.
    """
    user = store.get_by_email(normalize_email(email or ""))
    if user is None:
        verify_password(password or "", DUMMY_HASH)
        raise InvalidCredentials()
    if not verify_password(password or "", user.hashed_password):
        raise InvalidCredentials()
    return user
