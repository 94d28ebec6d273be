"""
auth/dependencies.py -- FastAPI Depends() helpers: the authorization gate.

The Authorization header carries the user's opaque access token. The value is
matched exactly against stored tokens; a leading "Bearer " scheme is accepted
and stripped so both raw-token clients and standard bearer clients work.

try_get_current_user() is the soft variant (returns None on failure).
get_current_user() wraps it and raises Unauthorized, which api/main.py turns
into HTTP 401. The wrapped route handler never runs in that case.

On success the resolved user is also attached to request.state.user.

Layer rule: no imports from api/, orders/, or catalog/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Request

from auth.models import User
from auth.tokens import resolve_token
from core.errors import Unauthorized


def bearer_token(request: Request) -> str | None:
    """Extract the token from the Authorization header, or None if absent."""
    value = request.headers.get("Authorization", "").strip()
    if value[:7].lower() == "bearer ":
        value = value[7:].strip()
    return value or None


def try_get_current_user(request: Request) -> User | None:
    """Resolve the request's bearer token to a user. Never raises."""
    user = resolve_token(request.app.state.user_store, bearer_token(request))
    if user is not None:
        request.state.user = user
    return user


def get_current_user(request: Request) -> User:
    """Require a valid token. Raises Unauthorized otherwise.

    Use as a FastAPI dependency:
        @router.post("/cakeorders")
        def route(user: User = Depends(get_current_user)): ...
    """
    user = try_get_current_user(request)
    if user is None:
        raise Unauthorized()
    return user
