from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from .models import DEFAULT_TAX_RATE_PERCENT, DocumentHeader, LineItem
from .numeric import (
    ONE_HUNDRED,
    UNIT_PRICE_PLACES,
    ZERO,
    decimal_or_zero,
    floor_amount,
    quantize_amount,
    to_decimal,
)


def domestic_cost_to_foreign_price(
    total_domestic_cost: Any,
    exchange_rate: Any,
    vat_percent: Any = DEFAULT_TAX_RATE_PERCENT,
    refund_percent: Any = DEFAULT_TAX_RATE_PERCENT,
) -> Decimal:
    """Convert a VAT-inclusive domestic procurement cost to a foreign sale total.

    The VAT not recovered through the export refund stays in the cost basis:
    ``adjusted = cost * (1 + vat - refund) / (1 + vat)``, then the result is
    ``floor(adjusted / exchange_rate)`` in whole currency units.

    Returns 0 when the cost or the exchange rate is not positive; callers treat
    0 as "clear the derived field".
    """
    cost = decimal_or_zero(total_domestic_cost)
    rate = decimal_or_zero(exchange_rate)
    if rate <= 0 or cost <= 0:
        return ZERO

    vat = to_decimal(vat_percent)
    refund = to_decimal(refund_percent)
    v = (DEFAULT_TAX_RATE_PERCENT if vat is None else vat) / ONE_HUNDRED
    r = (DEFAULT_TAX_RATE_PERCENT if refund is None else refund) / ONE_HUNDRED
    if 1 + v <= 0:
        return ZERO

    adjusted_cost = cost * (1 + v - r) / (1 + v)
    return floor_amount(adjusted_cost / rate)


def derive_unit_price(total: Any, quantity: Any) -> Optional[Decimal]:
    """Unit price to 4 decimal places, or None (blank) when quantity is not positive."""
    qty = to_decimal(quantity)
    amount = to_decimal(total)
    if qty is None or qty <= 0 or amount is None:
        return None
    return quantize_amount(amount / qty, UNIT_PRICE_PLACES)


def recalculate_line_item_prices(item: LineItem, header: DocumentHeader) -> LineItem:
    """Re-derive an item's price fields after an edit, paste or merge.

    Domestic-cost mode: the CNY total is floored, the CNY unit cost derived,
    and, with a usable exchange rate, the foreign total and unit price follow
    from `domestic_cost_to_foreign_price`. Foreign mode: the foreign total is
    floored and the unit price derived from it. A total that is blank or floors
    to 0 clears the prices derived from it.
    """
    qty = item.quantity
    update: dict[str, Any] = {}

    if header.use_domestic_cost_mode:
        total_cost = floor_amount(decimal_or_zero(item.total_cost_domestic))
        update["total_cost_domestic"] = total_cost or None
        if total_cost <= 0:
            # No cost basis left: every derived price is cleared.
            update["unit_cost_domestic"] = None
            update["total_price_foreign"] = None
            update["unit_price_foreign"] = None
        else:
            update["unit_cost_domestic"] = derive_unit_price(total_cost, qty)
            rate = decimal_or_zero(header.exchange_rate_to_domestic)
            if rate > 0:
                foreign_total = domestic_cost_to_foreign_price(
                    total_cost,
                    rate,
                    item.vat_rate_percent,
                    item.tax_refund_rate_percent,
                )
                update["total_price_foreign"] = foreign_total or None
                update["unit_price_foreign"] = (
                    derive_unit_price(foreign_total, qty) if foreign_total > 0 else None
                )
    else:
        total_price = floor_amount(decimal_or_zero(item.total_price_foreign))
        update["total_price_foreign"] = total_price or None
        update["unit_price_foreign"] = derive_unit_price(total_price, qty) if total_price > 0 else None

    return item.model_copy(update=update)
