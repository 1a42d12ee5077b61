"""Export settlement: FX revenue, purchase cost, VAT refund and gross profit.

Amounts are CNY except `FxReceipt.amount`, which is in the receipt currency
and converted at `FxReceipt.rate`.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .models import DEFAULT_TAX_RATE_PERCENT
from .numeric import ONE_HUNDRED, ZERO, decimal_or_zero, to_decimal

STAMP_DUTY_RATE = Decimal("0.0003")


class FxReceipt(BaseModel):
    amount: Decimal = ZERO
    rate: Decimal = ZERO

    @field_validator("amount", "rate", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> Decimal:
        return decimal_or_zero(value)


class SupplierCost(BaseModel):
    supplier_name: str = ""
    amount: Decimal = ZERO
    tax_refund_rate_percent: Decimal = ZERO
    # None means "not specified" and falls back to 13%; an explicit 0 is a VAT-exempt purchase.
    vat_rate_percent: Optional[Decimal] = None

    @field_validator("amount", "tax_refund_rate_percent", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> Decimal:
        return decimal_or_zero(value)

    @field_validator("vat_rate_percent", mode="before")
    @classmethod
    def _coerce_vat(cls, value: Any) -> Optional[Decimal]:
        return to_decimal(value)


class ExtraExpense(BaseModel):
    name: str = ""
    amount: Decimal = ZERO

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> Decimal:
        return decimal_or_zero(value)


class SettlementInputs(BaseModel):
    fx_receipts: List[FxReceipt] = Field(default_factory=list)
    supplier_costs: List[SupplierCost] = Field(default_factory=list)
    extra_expenses: List[ExtraExpense] = Field(default_factory=list)
    # Fraction of FX revenue (e.g. 0.005), with a floor of `min_agency_fee`.
    agency_fee_rate: Decimal = ZERO
    min_agency_fee: Decimal = ZERO
    # Named fixed charges (ocean freight, certificates, express, insurance, ...).
    fixed_expenses: Dict[str, Decimal] = Field(default_factory=dict)

    @field_validator("agency_fee_rate", "min_agency_fee", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> Decimal:
        return decimal_or_zero(value)

    @field_validator("fixed_expenses", mode="before")
    @classmethod
    def _coerce_fixed(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {str(name): decimal_or_zero(amount) for name, amount in value.items()}


class SettlementSummary(BaseModel):
    total_fx_revenue: Decimal
    total_purchase_cost: Decimal
    total_tax_refund: Decimal
    agency_fee: Decimal
    stamp_duty: Decimal
    total_expenses: Decimal
    gross_profit: Decimal


def supplier_tax_refund(cost: SupplierCost) -> Decimal:
    vat_percent = DEFAULT_TAX_RATE_PERCENT if cost.vat_rate_percent is None else cost.vat_rate_percent
    vat = vat_percent / ONE_HUNDRED
    if 1 + vat <= 0:
        return ZERO
    return cost.amount / (1 + vat) * (cost.tax_refund_rate_percent / ONE_HUNDRED)


def agency_fee(revenue: Decimal, rate: Decimal, minimum: Decimal) -> Decimal:
    calculated = revenue * rate
    if calculated == 0 and minimum == 0:
        return ZERO
    return max(calculated, minimum)


def summarize_settlement(inputs: SettlementInputs) -> SettlementSummary:
    """Gross profit = FX revenue + tax refund - purchase cost - expenses.

    Rows left blank in the editing surface are ignored.
    """
    receipts = [r for r in inputs.fx_receipts if r.amount > 0 or r.rate > 0]
    costs = [
        c for c in inputs.supplier_costs if c.amount > 0 or c.tax_refund_rate_percent > 0 or c.supplier_name
    ]
    extras = [e for e in inputs.extra_expenses if e.amount > 0 or e.name]

    revenue = sum((r.amount * r.rate for r in receipts), ZERO)
    purchase_cost = sum((c.amount for c in costs), ZERO)
    tax_refund = sum((supplier_tax_refund(c) for c in costs), ZERO)

    fee = agency_fee(revenue, inputs.agency_fee_rate, inputs.min_agency_fee)
    stamp_duty = (revenue + purchase_cost) * STAMP_DUTY_RATE
    total_expenses = (
        fee
        + sum(inputs.fixed_expenses.values(), ZERO)
        + sum((e.amount for e in extras), ZERO)
        + stamp_duty
    )

    return SettlementSummary(
        total_fx_revenue=revenue,
        total_purchase_cost=purchase_cost,
        total_tax_refund=tax_refund,
        agency_fee=fee,
        stamp_duty=stamp_duty,
        total_expenses=total_expenses,
        gross_profit=revenue + tax_refund - purchase_cost - total_expenses,
    )
