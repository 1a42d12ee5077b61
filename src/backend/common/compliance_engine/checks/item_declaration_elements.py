from __future__ import annotations

from typing import List

from ..check import HealthCheck
from ..context import HealthCheckContext
from ..models import HealthIssue, IssueCategory, IssueSeverity, LineItem, LineItemField
from ..registry import register_check


@register_check
class ITEM_DECLARATION_ELEMENTS(HealthCheck):
    check_id = "ITEM-DECLARATION-ELEMENTS"
    check_title = "Classified items carry declaration elements"
    category = IssueCategory.COMPLETENESS_WARNING

    def evaluate(self, item: LineItem, ctx: HealthCheckContext) -> List[HealthIssue]:
        if not item.hs_code.strip():
            return []
        if len(item.declaration_elements.strip()) >= ctx.config.min_declaration_elements_length:
            return []
        return [
            self.issue(
                severity=IssueSeverity.WARNING,
                field=LineItemField.DECLARATION_ELEMENTS.value,
                message="Compliance hint: HS code is set but the declaration elements look incomplete.",
            )
        ]
