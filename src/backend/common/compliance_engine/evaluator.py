from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .check import HealthCheck
from .context import HealthCheckContext
from .models import HealthIssue, HealthReport, LineItem
from .registry import registry

# Import built-in checks so they self-register with the global registry.
from . import checks as _builtin_checks  # noqa: F401

logger = logging.getLogger(__name__)


class HealthChecker:
    """Runs every registered check against a line item.

    Checks are independent: one that raises is logged and skipped, and the
    item is still characterized by the remaining checks.
    """

    def __init__(self, checks: Optional[Iterable[HealthCheck]] = None):
        self._checks = list(checks) if checks is not None else registry.create_all()

    @property
    def check_ids(self) -> List[str]:
        return [check.check_id for check in self._checks]

    def check(self, item: LineItem, ctx: HealthCheckContext) -> HealthReport:
        issues: List[HealthIssue] = []
        for check in self._checks:
            if not ctx.config.is_check_enabled(check.check_id):
                continue
            try:
                issues.extend(check.evaluate(item, ctx))
            except Exception:
                logger.exception(
                    "Health check %s failed for item %r; continuing",
                    check.check_id,
                    item.id or item.product_name_local,
                )
        return HealthReport.from_issues(issues)


def check_item(
    item: LineItem,
    ctx: HealthCheckContext,
    *,
    checker: Optional[HealthChecker] = None,
) -> HealthReport:
    return (checker or HealthChecker()).check(item, ctx)
