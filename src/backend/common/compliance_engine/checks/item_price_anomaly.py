from __future__ import annotations

from typing import List

from ..check import HealthCheck
from ..context import HealthCheckContext
from ..models import HealthIssue, IssueCategory, IssueSeverity, LineItem, LineItemField
from ..price_history import analyze_price
from ..registry import register_check


@register_check
class ITEM_PRICE_ANOMALY(HealthCheck):
    check_id = "ITEM-PRICE-ANOMALY"
    check_title = "Unit price is in line with the historical average"
    category = IssueCategory.PLAUSIBILITY_WARNING

    def evaluate(self, item: LineItem, ctx: HealthCheckContext) -> List[HealthIssue]:
        analysis = analyze_price(
            ctx.price_history,
            name=item.product_name_local,
            current_price=ctx.reference_price(item),
            use_domestic_cost_mode=ctx.use_domestic_cost_mode,
            currency_code=ctx.currency_code,
            min_samples=ctx.config.min_history_samples,
            deviation_threshold=ctx.config.price_deviation_threshold,
        )
        if analysis is None or not analysis.is_outlier:
            return []

        if ctx.use_domestic_cost_mode:
            label = "CNY purchase unit cost"
            field = LineItemField.UNIT_COST_DOMESTIC
        else:
            label = f"{analysis.reference_currency} unit price"
            field = LineItemField.UNIT_PRICE_FOREIGN

        return [
            self.issue(
                severity=IssueSeverity.WARNING,
                field=field.value,
                message=(
                    f"Price anomaly: current {label} is {analysis.deviation_pct}% {analysis.direction} "
                    f"versus the historical average {analysis.avg:.4f} "
                    f"({analysis.sample_count} samples, range {analysis.min:.4f}-{analysis.max:.4f})."
                ),
            )
        ]
