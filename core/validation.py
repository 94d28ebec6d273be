"""
core/validation.py -- Explicit per-entity field validation.

Each validate_* function inspects plain values and returns a ValidationResult:
either ok, or a mapping of field name -> human-readable problem. Callers decide
whether to raise (ValidationResult.raise_for_errors) or to inspect the result.

Field names here are the domain (snake_case) names. The API layer converts
them to wire names when it renders a 400 response.

Layer rule: core/ is the kernel. No imports from api/, auth/, orders/, or catalog/.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from core.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

MAX_NAME_LENGTH = 100
MAX_EMAIL_LENGTH = 254
MAX_FIELD_LENGTH = 100
# bcrypt only looks at the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72
MIN_CAKE_NAME_LENGTH = 5
MAX_INGREDIENTS = 50

FIXED_ORDER_FIELDS: tuple[str, ...] = ("cake_name", "topping", "cover", "layer1", "layer2", "sponge")


@dataclass
class ValidationResult:
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add(self, name: str, message: str) -> None:
        # First problem per field wins; later checks are usually consequences.
        self.errors.setdefault(name, message)

    def raise_for_errors(self, message: str) -> None:
        if self.errors:
            raise ValidationError(message, self.errors)


def _blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _check_text(result: ValidationResult, name: str, value: Any, max_length: int = MAX_FIELD_LENGTH) -> None:
    if _blank(value):
        result.add(name, "This field is required.")
    elif len(value.strip()) > max_length:
        result.add(name, f"Must be at most {max_length} characters.")


def normalize_email(email: str) -> str:
    return email.strip().lower()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


def validate_password(password: Any, min_length: int) -> ValidationResult:
    result = ValidationResult()
    if not isinstance(password, str) or not password:
        result.add("password", "This field is required.")
    elif len(password) < min_length:
        result.add("password", f"Must be at least {min_length} characters.")
    elif len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        result.add("password", f"Must be at most {MAX_PASSWORD_BYTES} bytes.")
    return result


def validate_signup(name: Any, email: Any, password: Any, min_password_length: int) -> ValidationResult:
    """Validate the three signup fields together so the client sees every problem at once."""
    result = ValidationResult()
    _check_text(result, "name", name, MAX_NAME_LENGTH)

    if _blank(email):
        result.add("email", "This field is required.")
    elif len(email.strip()) > MAX_EMAIL_LENGTH:
        result.add("email", f"Must be at most {MAX_EMAIL_LENGTH} characters.")
    elif not EMAIL_PATTERN.match(email.strip()):
        result.add("email", "Must be a valid email address.")

    result.errors.update(validate_password(password, min_password_length).errors)
    return result


# ---------------------------------------------------------------------------
# Cake orders
# ---------------------------------------------------------------------------


def _check_cake_name(result: ValidationResult, value: Any) -> None:
    _check_text(result, "cake_name", value)
    if "cake_name" not in result.errors and len(value.strip()) < MIN_CAKE_NAME_LENGTH:
        result.add("cake_name", f"Must be at least {MIN_CAKE_NAME_LENGTH} characters.")


def validate_fixed_order(fields: Mapping[str, Any]) -> ValidationResult:
    """Every named slot is required; cake_name additionally has a minimum length."""
    result = ValidationResult()
    _check_cake_name(result, fields.get("cake_name"))
    for name in FIXED_ORDER_FIELDS[1:]:
        _check_text(result, name, fields.get(name))
    return result


def validate_ingredient_order(fields: Mapping[str, Any]) -> ValidationResult:
    """Free-form variant: a non-empty list of {layer, ingredient, color?} selections."""
    result = ValidationResult()
    if fields.get("cake_name") is not None:
        _check_cake_name(result, fields.get("cake_name"))

    selections = fields.get("ingredients")
    if not isinstance(selections, list) or not selections:
        result.add("ingredients", "Choose at least one ingredient.")
        return result
    if len(selections) > MAX_INGREDIENTS:
        result.add("ingredients", f"At most {MAX_INGREDIENTS} ingredients per order.")
        return result

    for index, selection in enumerate(selections):
        prefix = f"ingredients.{index}"
        if not isinstance(selection, Mapping):
            result.add(prefix, "Must be an object with layer and ingredient.")
            continue
        _check_text(result, f"{prefix}.layer", selection.get("layer"))
        _check_text(result, f"{prefix}.ingredient", selection.get("ingredient"))
        color = selection.get("color")
        if color is not None and (not isinstance(color, str) or len(color) > MAX_FIELD_LENGTH):
            result.add(f"{prefix}.color", f"Must be text of at most {MAX_FIELD_LENGTH} characters.")
    return result


def validate_order(schema: str, fields: Mapping[str, Any]) -> ValidationResult:
    if schema == "ingredients":
        return validate_ingredient_order(fields)
    return validate_fixed_order(fields)
