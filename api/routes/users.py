"""
api/routes/users.py -- Signup and user directory endpoints.

Routes:
  POST /users            -- sign up; returns userId and accessToken (201)
  GET  /users            -- newest 20 users, public projection
  GET  /users/{user_id}  -- one user's profile with resolved orders (token required)

Auth policy:
  POST /users and GET /users are public. Anyone can enumerate users; the list
  projection carries only id, name, email and createdAt.
  GET /users/{user_id} requires a valid access token because it discloses the
  user's orders.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from api.models import CakeOrderResponse, SignupRequest, SignupResponse, UserProfile, UserSummary
from auth.accounts import register_user
from auth.dependencies import get_current_user
from auth.models import User
from auth.store import UserStore
from core.errors import NotFound
from orders.store import OrderStore

router = APIRouter()


@router.post("/users", response_model=SignupResponse, status_code=201)
def create_user(request: Request, body: SignupRequest) -> SignupResponse:
    """Create an account. The access token in the response is the user's bearer credential."""
    user_store: UserStore = request.app.state.user_store
    user = register_user(user_store, body.name, body.email, body.password)
    return SignupResponse(user_id=user.id, access_token=user.access_token)


@router.get("/users", response_model=list[UserSummary])
def list_users(request: Request) -> list[UserSummary]:
    user_store: UserStore = request.app.state.user_store
    return [UserSummary.from_user(u) for u in user_store.list_users()]


@router.get("/users/{user_id}", response_model=UserProfile, response_model_exclude_none=True)
def get_user(
    request: Request,
    user_id: str,
    current_user: User = Depends(get_current_user),
) -> UserProfile:
    """Return a user's profile with their orders in placement order."""
    user_store: UserStore = request.app.state.user_store
    order_store: OrderStore = request.app.state.order_store

    user = user_store.get_by_id(user_id)
    if user is None:
        raise NotFound("Could not find user.")

    orders = order_store.get_many(user.ordered_cakes)
    return UserProfile(
        id=user.id,
        name=user.name,
        email=user.email,
        created_at=user.created_at or "",
        ordered_cakes=[CakeOrderResponse.from_order(o) for o in orders],
    )
