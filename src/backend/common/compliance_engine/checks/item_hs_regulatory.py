from __future__ import annotations

from typing import List

from ..check import HealthCheck
from ..context import HealthCheckContext
from ..models import (
    ComplianceStatus,
    HealthIssue,
    IssueCategory,
    IssueSeverity,
    LineItem,
    LineItemField,
)
from ..registry import register_check


@register_check
class ITEM_HS_REGULATORY(HealthCheck):
    check_id = "ITEM-HS-REGULATORY"
    check_title = "HS code is not export-controlled and carries a refund"
    category = IssueCategory.REGULATORY_WARNING

    def evaluate(self, item: LineItem, ctx: HealthCheckContext) -> List[HealthIssue]:
        if not item.hs_code.strip():
            return []
        rule = ctx.resolve_compliance_rule(item.hs_code)
        if rule is None:
            return []

        if rule.status == ComplianceStatus.BANNED:
            return [
                self.issue(
                    severity=IssueSeverity.CRITICAL,
                    field=LineItemField.HS_CODE.value,
                    message=(
                        f"Compliance block: HS code {item.hs_code.strip()} is export-controlled "
                        f"({rule.note or 'export prohibited'})."
                    ),
                    category=IssueCategory.REGULATORY_BLOCK,
                )
            ]
        if rule.tax_refund_rate_percent == 0 and rule.status != ComplianceStatus.NORMAL:
            return [
                self.issue(
                    severity=IssueSeverity.WARNING,
                    field=LineItemField.HS_CODE.value,
                    message=(
                        f"Tax refund warning: HS code {item.hs_code.strip()} has a 0% refund rate, "
                        f"please confirm ({rule.note or 'no note'})."
                    ),
                )
            ]
        return []
