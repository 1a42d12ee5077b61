"""Merge duplicate line items by product name, and document-level totals.

The consolidator never runs health checks; callers re-check its output.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel

from .currency import derive_unit_price
from .models import LineItem
from .numeric import (
    VOLUME_PLACES,
    WEIGHT_PLACES,
    ZERO,
    decimal_or_zero,
    floor_amount,
    is_positive,
    quantize_amount,
)

SUMMED_FIELDS = (
    "quantity",
    "total_cost_domestic",
    "total_price_foreign",
    "carton_count",
    "gross_weight",
    "net_weight",
    "volume",
)


def is_empty_row(item: LineItem) -> bool:
    return not (
        item.product_name_local.strip()
        or item.product_name_foreign.strip()
        or is_positive(item.quantity)
        or is_positive(item.total_price_foreign)
        or is_positive(item.total_cost_domestic)
    )


def _add(left: Any, right: Any) -> Any:
    # blank + blank stays blank; otherwise blank counts as zero
    if left is None and right is None:
        return None
    if isinstance(left, int) or isinstance(right, int):
        return (left or 0) + (right or 0)
    return decimal_or_zero(left) + decimal_or_zero(right)


def _round(value: Optional[Decimal], places: Decimal) -> Optional[Decimal]:
    if value is None:
        return None
    return quantize_amount(value, places)


def _rederive(item: LineItem) -> LineItem:
    qty = item.quantity
    update: Dict[str, Any] = {
        "gross_weight": _round(item.gross_weight, WEIGHT_PLACES),
        "net_weight": _round(item.net_weight, WEIGHT_PLACES),
        "volume": _round(item.volume, VOLUME_PLACES),
    }
    has_quantity = qty is not None and qty > 0
    for total_field, unit_field in (
        ("total_price_foreign", "unit_price_foreign"),
        ("total_cost_domestic", "unit_cost_domestic"),
    ):
        total = getattr(item, total_field)
        if not has_quantity:
            update[unit_field] = None
        elif total is not None:
            update[unit_field] = derive_unit_price(total, qty)
    return item.model_copy(update=update)


def consolidate_line_items(items: Iterable[LineItem]) -> List[LineItem]:
    """Merge rows sharing a trimmed local product name.

    Numeric totals are summed, every other field comes from the first row of
    the group, and unit prices are re-derived from the merged totals. Rows
    without a local name are passed through unchanged after the merged rows;
    fully empty rows are dropped.
    """
    groups: Dict[str, Dict[str, Any]] = {}
    firsts: Dict[str, LineItem] = {}
    unnamed: List[LineItem] = []

    for item in items:
        if is_empty_row(item):
            continue
        key = item.product_name_local.strip()
        if not key:
            unnamed.append(item)
            continue
        if key not in firsts:
            firsts[key] = item
            groups[key] = {name: getattr(item, name) for name in SUMMED_FIELDS}
            continue
        sums = groups[key]
        for name in SUMMED_FIELDS:
            sums[name] = _add(sums[name], getattr(item, name))

    merged = [_rederive(firsts[key].model_copy(update=groups[key])) for key in firsts]
    return merged + unnamed


class DocumentTotals(BaseModel):
    quantity: Decimal = ZERO
    total_price_foreign: Decimal = ZERO
    carton_count: int = 0
    gross_weight: Decimal = ZERO
    net_weight: Decimal = ZERO
    volume: Decimal = ZERO


def document_totals(items: Iterable[LineItem]) -> DocumentTotals:
    """Column totals as printed under the goods table; foreign totals are floored per row."""
    quantity = ZERO
    total_price = ZERO
    cartons = 0
    gross = ZERO
    net = ZERO
    volume = ZERO
    for item in items:
        quantity += decimal_or_zero(item.quantity)
        total_price += floor_amount(decimal_or_zero(item.total_price_foreign))
        cartons += item.carton_count or 0
        gross += decimal_or_zero(item.gross_weight)
        net += decimal_or_zero(item.net_weight)
        volume += decimal_or_zero(item.volume)
    return DocumentTotals(
        quantity=quantity,
        total_price_foreign=total_price,
        carton_count=cartons,
        gross_weight=gross,
        net_weight=net,
        volume=volume,
    )
