from __future__ import annotations

import logging
from typing import Any, List

from ..check import HealthCheck
from ..context import HealthCheckContext
from ..models import HealthIssue, IssueCategory, IssueSeverity, LineItem
from ..registry import register_check
from ..rule_dsl import evaluate_user_rule

logger = logging.getLogger(__name__)


def _field_name(value: Any) -> str:
    return str(getattr(value, "value", value))


@register_check
class ITEM_USER_RULES(HealthCheck):
    check_id = "ITEM-USER-RULES"
    check_title = "User-authored rules"
    category = IssueCategory.USER_RULE_VIOLATION

    def evaluate(self, item: LineItem, ctx: HealthCheckContext) -> List[HealthIssue]:
        issues: List[HealthIssue] = []
        for rule in ctx.user_rules:
            if not rule.enabled:
                continue
            try:
                matched = evaluate_user_rule(rule, item)
            except Exception:
                logger.exception("User rule %r (%s) failed to evaluate; skipping", rule.name, rule.id)
                continue
            if not matched:
                continue
            issues.append(
                self.issue(
                    severity=IssueSeverity(rule.severity),
                    field=_field_name(rule.target_field),
                    message=rule.message.strip() or f"{rule.name}: custom rule check failed",
                )
            )
        return issues
