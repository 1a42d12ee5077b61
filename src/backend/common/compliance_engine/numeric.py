from __future__ import annotations

import math
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

ZERO = Decimal("0")
ONE_HUNDRED = Decimal("100")

# Quantization steps used across the engine.
UNIT_PRICE_PLACES = Decimal("0.0001")
WEIGHT_PLACES = Decimal("0.01")
VOLUME_PLACES = Decimal("0.001")


def to_decimal(value: Any) -> Optional[Decimal]:
    """Coerce editing-surface input to a Decimal.

    Blank, non-numeric and non-finite input returns None; this never raises.
    Thousands separators are tolerated ("1,200.50").
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return Decimal(str(value))
    text = str(value).strip().replace(",", "")
    if not text:
        return None
    try:
        parsed = Decimal(text)
    except InvalidOperation:
        return None
    return parsed if parsed.is_finite() else None


def decimal_or_zero(value: Any) -> Decimal:
    parsed = to_decimal(value)
    return ZERO if parsed is None else parsed


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def is_positive(value: Any) -> bool:
    parsed = to_decimal(value)
    return parsed is not None and parsed > 0


def quantize_amount(value: Decimal, quantize: Optional[Decimal]) -> Decimal:
    if quantize is None:
        return value
    return value.quantize(quantize, rounding=ROUND_HALF_UP)


def floor_amount(value: Decimal) -> Decimal:
    return value.quantize(Decimal("1"), rounding=ROUND_FLOOR)
