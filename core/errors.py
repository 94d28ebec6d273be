"""
core/errors.py -- Domain error taxonomy.

Stores and account helpers raise these; api/main.py registers one exception
handler per class and turns each into an HTTP status plus JSON body. None of
them is fatal to the process.

Layer rule: no imports from api/, auth/, orders/, or catalog/.
"""

from __future__ import annotations


class CakeMakerError(Exception):
    """Base class. message is safe to show to API clients."""

    default_message = "Request failed."

    def __init__(self, message: str | None = None, errors: dict[str, str] | None = None) -> None:
        self.message = message or self.default_message
        self.errors: dict[str, str] = dict(errors or {})
        super().__init__(self.message)


class ValidationError(CakeMakerError):
    """Missing or malformed required fields. errors maps field name -> problem."""

    default_message = "Validation failed."


# The credential store's name for a rejected password.
InvalidInput = ValidationError


class DuplicateEmail(ValidationError):
    default_message = "Could not create user."

    def __init__(self, message: str | None = None, errors: dict[str, str] | None = None) -> None:
        super().__init__(message, errors or {"email": "Email is already registered."})


class NotFound(CakeMakerError):
    default_message = "Not found."


class InvalidCredentials(CakeMakerError):
    """Unknown email or wrong password. Deliberately does not say which."""

    default_message = "Invalid email or password."


class Unauthorized(CakeMakerError):
    """Missing or unresolvable bearer token."""

    default_message = "Authentication required."
