from __future__ import annotations

from typing import List

from ..check import HealthCheck
from ..context import HealthCheckContext
from ..models import HealthIssue, IssueCategory, IssueSeverity, LineItem, LineItemField
from ..numeric import decimal_or_zero
from ..registry import register_check


@register_check
class ITEM_PHYSICAL_WEIGHT(HealthCheck):
    check_id = "ITEM-PHYSICAL-WEIGHT"
    check_title = "Net weight does not exceed gross weight"
    category = IssueCategory.DATA_INCONSISTENCY

    def evaluate(self, item: LineItem, ctx: HealthCheckContext) -> List[HealthIssue]:
        gross = decimal_or_zero(item.gross_weight)
        net = decimal_or_zero(item.net_weight)
        if net <= gross:
            return []
        return [
            self.issue(
                severity=IssueSeverity.CRITICAL,
                field=LineItemField.NET_WEIGHT.value,
                message=f"Physical error: net weight (N.W) {net} kg exceeds gross weight (G.W) {gross} kg.",
            )
        ]
