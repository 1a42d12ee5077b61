from decimal import Decimal

from common.compliance_engine.settlement import (
    SettlementInputs,
    SupplierCost,
    agency_fee,
    summarize_settlement,
    supplier_tax_refund,
)


def test_tax_refund_backs_out_vat_before_applying_refund_rate():
    assert supplier_tax_refund(SupplierCost(amount="56500", tax_refund_rate_percent="13")) == Decimal("6500")
    assert supplier_tax_refund(
        SupplierCost(amount="10000", tax_refund_rate_percent="10", vat_rate_percent="0")
    ) == Decimal("1000")
    assert supplier_tax_refund(SupplierCost(amount="56500", tax_refund_rate_percent="")) == 0


def test_agency_fee_has_a_floor():
    assert agency_fee(Decimal("70000"), Decimal("0.01"), Decimal("500")) == Decimal("700")
    assert agency_fee(Decimal("10000"), Decimal("0.01"), Decimal("500")) == Decimal("500")
    assert agency_fee(Decimal("0"), Decimal("0"), Decimal("0")) == 0


def test_summary_gross_profit():
    inputs = SettlementInputs.model_validate(
        {
            "fx_receipts": [{"amount": "10000", "rate": "7"}, {"amount": "", "rate": ""}],
            "supplier_costs": [
                {"supplier_name": "Ningbo Hardware", "amount": "56500", "tax_refund_rate_percent": "13"},
                {"supplier_name": "", "amount": "", "tax_refund_rate_percent": ""},
            ],
            "extra_expenses": [{"name": "Inspection", "amount": "200"}],
            "agency_fee_rate": "0.001",
            "min_agency_fee": "100",
            "fixed_expenses": {"ocean_freight": "1000", "insurance": ""},
        }
    )
    summary = summarize_settlement(inputs)
    assert summary.total_fx_revenue == Decimal("70000")
    assert summary.total_purchase_cost == Decimal("56500")
    assert summary.total_tax_refund == Decimal("6500")
    assert summary.agency_fee == Decimal("100")
    assert summary.stamp_duty == Decimal("37.95")
    assert summary.total_expenses == Decimal("1337.95")
    assert summary.gross_profit == Decimal("18662.05")


def test_empty_settlement_is_all_zero():
    summary = summarize_settlement(SettlementInputs())
    assert summary.gross_profit == 0
    assert summary.total_expenses == 0
