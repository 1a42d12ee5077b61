from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from .config import HealthCheckConfig
from .knowledge_base import resolve_compliance_rule
from .models import ComplianceRule, DocumentHeader, LineItem, UserRule
from .price_history import (
    EMPTY_PRICE_HISTORY,
    PriceHistory,
    reference_currency,
    reference_unit_price,
)


@dataclass(frozen=True)
class HealthCheckContext:
    use_domestic_cost_mode: bool = False
    currency_code: str = "USD"
    knowledge_base: Mapping[str, ComplianceRule] = field(default_factory=dict)
    user_rules: tuple[UserRule, ...] = ()
    price_history: PriceHistory = field(default_factory=lambda: EMPTY_PRICE_HISTORY)
    config: HealthCheckConfig = field(default_factory=HealthCheckConfig)

    @classmethod
    def from_header(
        cls,
        header: DocumentHeader,
        *,
        knowledge_base: Optional[Mapping[str, ComplianceRule]] = None,
        user_rules: Iterable[UserRule] = (),
        price_history: PriceHistory = EMPTY_PRICE_HISTORY,
        config: Optional[HealthCheckConfig] = None,
    ) -> "HealthCheckContext":
        return cls(
            use_domestic_cost_mode=header.use_domestic_cost_mode,
            currency_code=header.currency_code,
            knowledge_base=knowledge_base or {},
            user_rules=tuple(user_rules),
            price_history=price_history,
            config=config or HealthCheckConfig(),
        )

    @property
    def reference_currency(self) -> str:
        return reference_currency(self.use_domestic_cost_mode, self.currency_code)

    def reference_price(self, item: LineItem) -> Optional[Decimal]:
        return reference_unit_price(item, self.use_domestic_cost_mode)

    def resolve_compliance_rule(self, hs_code: str) -> Optional[ComplianceRule]:
        return resolve_compliance_rule(hs_code, self.knowledge_base)
