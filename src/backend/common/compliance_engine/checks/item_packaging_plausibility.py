from __future__ import annotations

from typing import List

from ..check import HealthCheck
from ..context import HealthCheckContext
from ..models import HealthIssue, IssueCategory, IssueSeverity, LineItem, LineItemField
from ..numeric import decimal_or_zero
from ..registry import register_check

CARTON_PACKAGE_TYPE = "CTNS"


@register_check
class ITEM_PACKAGING_PLAUSIBILITY(HealthCheck):
    check_id = "ITEM-PACKAGING-PLAUSIBILITY"
    check_title = "Per-carton weight and volume are plausible"
    category = IssueCategory.PLAUSIBILITY_WARNING

    def evaluate(self, item: LineItem, ctx: HealthCheckContext) -> List[HealthIssue]:
        package_type = (item.package_type or CARTON_PACKAGE_TYPE).strip().upper()
        cartons = item.carton_count or 0
        if package_type != CARTON_PACKAGE_TYPE or cartons <= 0:
            return []

        cfg = ctx.config
        issues: List[HealthIssue] = []

        weight_per_carton = decimal_or_zero(item.gross_weight) / cartons
        if weight_per_carton > cfg.max_carton_weight_kg:
            issues.append(
                self.issue(
                    severity=IssueSeverity.WARNING,
                    field=LineItemField.PACKAGE_TYPE.value,
                    message=(
                        f"Packaging anomaly: about {weight_per_carton:.1f} kg per carton. "
                        "Check whether the package type should be pallets (PLTS)."
                    ),
                )
            )

        volume_per_carton = decimal_or_zero(item.volume) / cartons
        if volume_per_carton > cfg.max_carton_volume_cbm:
            issues.append(
                self.issue(
                    severity=IssueSeverity.WARNING,
                    field=LineItemField.VOLUME.value,
                    message=(
                        f"Volume anomaly: about {volume_per_carton:.2f} CBM per carton. "
                        "Check the decimal point of the volume."
                    ),
                )
            )

        return issues
