"""
API request and response models for the cake-order REST endpoints.

These Pydantic v2 models define the HTTP transport contract. They are
intentionally separate from the dataclasses in auth/models.py,
orders/models.py and catalog/models.py, which own the internal domain
representation. Route handlers map between the two.

Wire names are camelCase (userId, accessToken, cakeName, createdAt). Python
attribute names stay snake_case; the alias generator bridges the two, and
FastAPI serializes responses by alias.

Request models declare every field Optional on purpose: presence and length
rules live in core/validation.py so a missing field yields the same
{message, errors} 400 body as a too-short one.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from auth.models import User
from catalog.models import Layer
from orders.models import CakeOrder


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def wire_name(field_path: str) -> str:
    """Map a domain field path ("cake_name", "ingredients.0.layer") to its wire name."""
    return ".".join(to_camel(part) for part in field_path.split("."))


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ErrorResponse(CamelModel):
    """Body of every 4xx/5xx response that is not a credential failure."""

    model_config = ConfigDict(frozen=True)

    message: str
    errors: Optional[dict[str, str]] = None


# ---------------------------------------------------------------------------
# Users and sessions
# ---------------------------------------------------------------------------


class SignupRequest(CamelModel):
    """Request body for POST /users."""

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class SignupResponse(CamelModel):
    """Response for POST /users. The only read of access_token besides sign-in."""

    message: str = "User created."
    user_id: str
    access_token: str


class SessionRequest(CamelModel):
    """Request body for POST /sessions."""

    email: Optional[str] = None
    password: Optional[str] = None


class SessionResponse(CamelModel):
    user_id: str
    access_token: str


class UserSummary(CamelModel):
    """Public projection of a user. Never carries the password digest or token."""

    id: str
    name: str
    email: str
    created_at: str

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls(id=user.id, name=user.name, email=user.email, created_at=user.created_at or "")


class OwnerSummary(CamelModel):
    """Minimal owner reference embedded in order listings."""

    id: str
    email: str


# ---------------------------------------------------------------------------
# Cake orders
# ---------------------------------------------------------------------------


class IngredientSelectionModel(CamelModel):
    layer: Optional[str] = None
    ingredient: Optional[str] = None
    color: Optional[str] = None


class CakeOrderCreate(CamelModel):
    """Request body for POST /cakeorders.

    Which fields are required depends on the configured order schema; fields
    of the other schema are ignored by the store.
    """

    cake_name: Optional[str] = None
    topping: Optional[str] = None
    cover: Optional[str] = None
    layer1: Optional[str] = None
    layer2: Optional[str] = None
    sponge: Optional[str] = None
    ingredients: Optional[list[IngredientSelectionModel]] = Field(default=None)

    def to_fields(self) -> dict:
        """Domain-named field mapping for OrderStore.create_order()."""
        return self.model_dump(exclude_none=True)


class CakeOrderResponse(CamelModel):
    """A stored order. Routes serialize with exclude_none so unused schema slots are omitted."""

    id: str
    created_at: str
    ordered_by: str
    cake_name: Optional[str] = None
    topping: Optional[str] = None
    cover: Optional[str] = None
    layer1: Optional[str] = None
    layer2: Optional[str] = None
    sponge: Optional[str] = None
    ingredients: Optional[list[IngredientSelectionModel]] = None
    owner: Optional[OwnerSummary] = None

    @classmethod
    def from_order(cls, order: CakeOrder, owner: Optional[User] = None) -> "CakeOrderResponse":
        return cls(
            id=order.id,
            created_at=order.created_at or "",
            ordered_by=order.ordered_by,
            cake_name=order.cake_name,
            topping=order.topping,
            cover=order.cover,
            layer1=order.layer1,
            layer2=order.layer2,
            sponge=order.sponge,
            ingredients=[
                IngredientSelectionModel(layer=s.layer, ingredient=s.ingredient, color=s.color)
                for s in order.ingredients
            ]
            or None,
            owner=OwnerSummary(id=owner.id, email=owner.email) if owner is not None else None,
        )


class UserProfile(UserSummary):
    """Response for GET /users/{id}: the summary plus the user's orders, resolved."""

    ordered_cakes: list[CakeOrderResponse] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class IngredientModel(CamelModel):
    model_config = ConfigDict(frozen=True)

    name: str
    color: str


class LayerResponse(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    ingredients: list[IngredientModel]

    @classmethod
    def from_layer(cls, layer: Layer) -> "LayerResponse":
        return cls(
            id=layer.id,
            name=layer.name,
            ingredients=[IngredientModel(name=i.name, color=i.color) for i in layer.ingredients],
        )


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------


class RouteInfo(CamelModel):
    """One entry of GET /: a path and the HTTP methods it answers."""

    model_config = ConfigDict(frozen=True)

    path: str
    methods: list[str]
