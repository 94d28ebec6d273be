"""
api/routes/sessions.py -- Sign-in endpoint.

Routes:
  POST /sessions  -- exchange email + password for userId and accessToken

The token returned is the one issued at signup; sign-in never rotates it.
Unknown email and wrong password get the same 400 {notFound: true}.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from api.models import SessionRequest, SessionResponse
from auth.accounts import authenticate_user
from auth.store import UserStore
from core.errors import InvalidCredentials

logger = logging.getLogger("cakemaker.api")

router = APIRouter()


@router.post("/sessions", response_model=SessionResponse)
def create_session(request: Request, body: SessionRequest) -> SessionResponse:
    """Authenticate with email and password.

    Uses authenticate_user(), which runs bcrypt whether or not the email
    exists. Do not inline get_by_email() + verify_password() here.
    """
    user_store: UserStore = request.app.state.user_store
    try:
        user = authenticate_user(user_store, body.email or "", body.password or "")
    except InvalidCredentials:
        logger.info("Failed sign-in from %s", request.client.host if request.client else "unknown")
        raise
    return SessionResponse(user_id=user.id, access_token=user.access_token)
