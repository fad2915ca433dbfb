from __future__ import annotations

import uuid
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def generate_id() -> str:
    """Opaque primary key: a random UUID4 string."""
    return str(uuid.uuid4())


def money_str(value) -> str | None:
    """Serialize a Numeric(10, 2) value the way the frontend expects ("450.00")."""
    if value is None:
        return None
    return str(Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))
