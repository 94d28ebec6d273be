"""
api/routes/cakeorders.py -- Cake order endpoints.

Routes:
  GET  /cakeorders                 -- newest 20 orders (public); ?embedOwner=true adds owner {id, email}
  GET  /cakeorders/{order_id}      -- one order (token required)
  POST /cakeorders                 -- place an order for the token's user (token required)

Order placement is two writes with no spanning transaction:
  1. OrderStore.create_order()   -- the order row
  2. UserStore.record_order()    -- the link into the user's orderedCakes
If (2) fails after (1) succeeded, the order exists but is not listed on the
user's profile. That failure is logged with both ids and re-raised so the
client gets a 500, never a silent 201.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.exc import SQLAlchemyError

from api.models import CakeOrderCreate, CakeOrderResponse
from auth.dependencies import get_current_user
from auth.models import User
from auth.store import UserStore
from core.errors import NotFound
from orders.store import OrderStore

logger = logging.getLogger("cakemaker.api")

router = APIRouter()


@router.get("/cakeorders", response_model=list[CakeOrderResponse], response_model_exclude_none=True)
def list_cake_orders(
    request: Request,
    embed_owner: bool = Query(default=False, alias="embedOwner"),
) -> list[CakeOrderResponse]:
    """Return the newest orders, optionally with each owner's id and email resolved."""
    order_store: OrderStore = request.app.state.order_store
    user_store: UserStore = request.app.state.user_store
    try:
        orders = order_store.list_orders()
        owners = user_store.get_many(o.ordered_by for o in orders) if embed_owner else {}
    except SQLAlchemyError as exc:
        logger.error("Could not list cake orders: %s", exc)
        raise HTTPException(status_code=404, detail="Could not find any cake orders.") from exc
    return [CakeOrderResponse.from_order(o, owners.get(o.ordered_by)) for o in orders]


@router.get("/cakeorders/{order_id}", response_model=CakeOrderResponse, response_model_exclude_none=True)
def get_cake_order(
    request: Request,
    order_id: str,
    current_user: User = Depends(get_current_user),
) -> CakeOrderResponse:
    order_store: OrderStore = request.app.state.order_store
    order = order_store.get_by_id(order_id)
    if order is None:
        raise NotFound("Could not find cake order.")
    return CakeOrderResponse.from_order(order)


@router.post(
    "/cakeorders",
    response_model=CakeOrderResponse,
    response_model_exclude_none=True,
    status_code=201,
)
def create_cake_order(
    request: Request,
    body: CakeOrderCreate,
    current_user: User = Depends(get_current_user),
) -> CakeOrderResponse:
    """Place an order owned by the authenticated user."""
    order_store: OrderStore = request.app.state.order_store
    user_store: UserStore = request.app.state.user_store

    order = order_store.create_order(current_user.id, body.to_fields())
    try:
        user_store.record_order(current_user.id, order.id)
    except SQLAlchemyError:
        logger.error(
            "Cake order %s was saved but could not be linked to user %s",
            order.id,
            current_user.id,
        )
        raise
    return CakeOrderResponse.from_order(order)
