from __future__ import annotations
from datetime import datetime
from decimal import Decimal, InvalidOperation
from app.time_utils import parse_iso_datetime

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import Boolean, Integer, Numeric, String, Text, DateTime
from sqlalchemy.orm import DeclarativeMeta

from .models.inventory import MOVEMENT_TYPES
from .models.rentals import RENTAL_PERIODS, RENTAL_STATUSES


# Numeric(10, 2) upper bound: 99,999,999.99
MAX_AMOUNT = Decimal("99999999.99")

# Integer columns are 32-bit signed on Postgres
INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1


class ValidationError(ValueError):
    """400-level input problem."""


class NotFoundError(LookupError):
    """404-level: a referenced entity does not exist."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate product code)."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: JSON keys clients are allowed to set (security boundary)
    - required_on_create: JSON keys required for POST
    - field_map: JSON key -> model attribute, for camelCase payloads

    The patch returned by validate_payload is keyed by model attribute.
    """
    writable_fields: set[str]
    required_on_create: set[str] = field(default_factory=set)
    field_map: dict[str, str] = field(default_factory=dict)

    def attr_for(self, key: str) -> str:
        return self.field_map.get(key, key)


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def _check_int_range(key: str, value: int) -> int:
    if value < INT_MIN or value > INT_MAX:
        raise ValidationError(f"{key} is out of range")
    return value


def _coerce_value(key: str, col, value: Any):
    coltype = col.type

    if value is None:
        return None

    # Integers - strict validation to reject floats and scientific notation
    if isinstance(coltype, Integer):
        # Already an int (but not bool which is a subclass of int)
        if isinstance(value, int) and not isinstance(value, bool):
            return _check_int_range(key, value)
        # String input - must be plain digits (with optional leading minus)
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValidationError(f"{key} must be an integer")
            if 'e' in stripped.lower():
                raise ValidationError(f"{key} must be a plain integer (scientific notation not allowed)")
            if '.' in stripped:
                raise ValidationError(f"{key} must be an integer (no decimals)")
            try:
                parsed = int(stripped)
            except ValueError:
                raise ValidationError(f"{key} must be an integer")
            return _check_int_range(key, parsed)
        if isinstance(value, float):
            raise ValidationError(f"{key} must be an integer, not a decimal")
        raise ValidationError(f"{key} must be an integer")

    # Decimals (money). The frontend sends "450.00"; plain numbers are accepted too.
    if isinstance(coltype, Numeric):
        if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
            raise ValidationError(f"{key} must be a decimal number")
        try:
            dec = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationError(f"{key} must be a decimal number")
        if not dec.is_finite():
            raise ValidationError(f"{key} must be a decimal number")
        if dec.as_tuple().exponent < -(coltype.scale or 0):
            raise ValidationError(f"{key} allows at most {coltype.scale} decimal places")
        return dec

    # Booleans
    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        raise ValidationError(f"{key} must be a boolean")

    # Datetimes (accept ISO-8601 dates and datetimes; normalize to UTC)
    if isinstance(coltype, DateTime):
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                dt = parse_iso_datetime(value)
            except ValueError:
                raise ValidationError(f"{key} must be an ISO-8601 datetime")
            if dt is None:
                raise ValidationError(f"{key} must be an ISO-8601 datetime")
            return dt
        raise ValidationError(f"{key} must be a datetime")

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        if isinstance(value, (dict, list)):
            raise ValidationError(f"{key} must be a string")
        return str(value).strip()

    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict keyed by model attribute.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if not partial:
        missing = sorted(f for f in policy.required_on_create if payload.get(f) is None)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cols = _columns_by_key(model)

    # Reject unknown / non-writable fields
    for k in payload.keys():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")
        if policy.attr_for(k) not in cols:
            raise ValidationError(f"Unknown field: {k}")

    patch: dict = {}

    for k, raw in payload.items():
        attr = policy.attr_for(k)
        col = cols[attr]

        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null")
            patch[attr] = None
            continue

        val = _coerce_value(k, col, raw)

        # Blank string check for non-nullable text fields
        if isinstance(col.type, (String, Text)) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{k} cannot be blank")

        # Max length check for String(n)
        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}")

        patch[attr] = val

    return patch


def _check_amount(patch: dict, attr: str, label: str) -> None:
    if attr in patch and patch[attr] is not None:
        amount = patch[attr]
        if amount < 0:
            raise ValidationError(f"{label} must be >= 0")
        if amount > MAX_AMOUNT:
            raise ValidationError(f"{label} cannot exceed {MAX_AMOUNT}")


def enforce_rules_product(patch: dict) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.
    Keep these small and centralized.
    """
    _check_amount(patch, "unit_price", "unitPrice")
    if patch.get("min_stock") is not None and patch["min_stock"] < 0:
        raise ValidationError("minStock must be >= 0")
    if patch.get("quantity") is not None and patch["quantity"] < 0:
        raise ValidationError("quantity must be >= 0")


def enforce_rules_movement(patch: dict) -> None:
    # quantity is a magnitude for every type; signed_delta applies the direction
    movement_type = patch.get("type")
    if movement_type not in MOVEMENT_TYPES:
        raise ValidationError(f"type must be one of: {', '.join(MOVEMENT_TYPES)}")

    quantity = patch.get("quantity")
    if quantity is None:
        raise ValidationError("quantity is required")
    if quantity <= 0:
        raise ValidationError("quantity must be > 0")
    if quantity > INT_MAX:
        raise ValidationError("quantity is out of range")


def enforce_rules_rental(patch: dict, *, start_date=None, end_date=None) -> None:
    if "status" in patch and patch["status"] not in RENTAL_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(RENTAL_STATUSES)}")
    if "rental_period" in patch and patch["rental_period"] not in RENTAL_PERIODS:
        raise ValidationError(f"rentalPeriod must be one of: {', '.join(RENTAL_PERIODS)}")
    if patch.get("quantity") is not None and patch["quantity"] <= 0:
        raise ValidationError("quantity must be > 0")
    _check_amount(patch, "daily_rate", "dailyRate")
    _check_amount(patch, "total_amount", "totalAmount")

    start = patch.get("start_date", start_date)
    end = patch.get("end_date", end_date)
    if start is not None and end is not None and end < start:
        raise ValidationError("endDate must not be before startDate")
