from __future__ import annotations

from decimal import Decimal
from typing import Dict

from pydantic import BaseModel, Field

from .price_history import DEFAULT_MIN_HISTORY_SAMPLES, DEFAULT_PRICE_DEVIATION_THRESHOLD


class CheckConfig(BaseModel):
    enabled: bool = True


class HealthCheckConfig(BaseModel):
    """Thresholds for the built-in line item checks.

    Defaults reproduce the long-standing heuristics; override per deployment.
    """

    # Relative deviation from the historical average that counts as an anomaly (0.30 = 30%).
    price_deviation_threshold: Decimal = DEFAULT_PRICE_DEVIATION_THRESHOLD
    min_history_samples: int = DEFAULT_MIN_HISTORY_SAMPLES
    # Per-carton limits above which a CTNS row is probably mis-packaged or mis-typed.
    max_carton_weight_kg: Decimal = Decimal("50")
    max_carton_volume_cbm: Decimal = Decimal("1")
    min_declaration_elements_length: int = 5

    checks: Dict[str, CheckConfig] = Field(default_factory=dict)

    def is_check_enabled(self, check_id: str) -> bool:
        cfg = self.checks.get(check_id)
        return cfg is None or cfg.enabled
