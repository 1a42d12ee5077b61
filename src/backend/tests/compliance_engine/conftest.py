import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import common...` work.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from decimal import Decimal

import pytest

from common.compliance_engine.config import HealthCheckConfig
from common.compliance_engine.context import HealthCheckContext
from common.compliance_engine.models import (
    ComplianceRule,
    DocumentHeader,
    HistoricalRecord,
    LineItem,
    UserRule,
)
from common.compliance_engine.price_history import EMPTY_PRICE_HISTORY


@pytest.fixture
def make_item():
    def _make(**fields) -> LineItem:
        base = {
            "id": "row-1",
            "product_name_local": "Widget",
            "product_name_foreign": "Widget",
            "quantity": "10",
            "gross_weight": "12",
            "net_weight": "10",
            "volume": "0.2",
            "carton_count": 2,
            "package_type": "CTNS",
            "unit_price_foreign": "10",
            "total_price_foreign": "100",
        }
        base.update(fields)
        return LineItem.model_validate(base)

    return _make


@pytest.fixture
def make_record():
    def _make(
        *,
        name: str = "Widget",
        prices=(),
        currency: str = "USD",
        domestic: bool = False,
    ) -> HistoricalRecord:
        price_field = "unit_cost_domestic" if domestic else "unit_price_foreign"
        return HistoricalRecord(
            header=DocumentHeader(currency_code=currency, use_domestic_cost_mode=domestic),
            items=[LineItem.model_validate({"product_name_local": name, price_field: p}) for p in prices],
        )

    return _make


@pytest.fixture
def make_user_rule():
    def _make(**fields) -> UserRule:
        base = {
            "id": "rule-1",
            "name": "Custom rule",
            "target_field": "net_weight",
            "operator": "gt",
            "compare_mode": "value",
            "compare_value": "0",
            "severity": "warning",
            "message": "",
            "enabled": True,
        }
        base.update(fields)
        return UserRule.model_validate(base)

    return _make


@pytest.fixture
def make_ctx():
    def _make(
        *,
        domestic: bool = False,
        currency: str = "USD",
        knowledge_base=None,
        user_rules=(),
        price_history=EMPTY_PRICE_HISTORY,
        config: HealthCheckConfig | None = None,
    ) -> HealthCheckContext:
        return HealthCheckContext(
            use_domestic_cost_mode=domestic,
            currency_code=currency,
            knowledge_base=knowledge_base or {},
            user_rules=tuple(user_rules),
            price_history=price_history,
            config=config or HealthCheckConfig(),
        )

    return _make


@pytest.fixture
def compliance_rule():
    def _make(hs_code: str, *, status: str = "normal", refund="13", note: str = "") -> ComplianceRule:
        return ComplianceRule(
            hs_code=hs_code,
            status=status,
            tax_refund_rate_percent=Decimal(str(refund)),
            note=note,
        )

    return _make
