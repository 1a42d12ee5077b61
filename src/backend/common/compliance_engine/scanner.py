from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from .context import HealthCheckContext
from .evaluator import HealthChecker
from .models import (
    HealthStatus,
    IssueSeverity,
    ItemHealthFinding,
    LineItem,
    ScanSummary,
)
from .numeric import is_positive

logger = logging.getLogger(__name__)


def is_placeholder_row(item: LineItem) -> bool:
    """Blank rows the editing surface keeps around: no name and no price."""
    has_name = bool(item.product_name_local.strip() or item.product_name_foreign.strip())
    has_price = is_positive(item.total_price_foreign) or is_positive(item.total_cost_domestic)
    return not has_name and not has_price


def scan_all(
    items: Iterable[LineItem],
    ctx: HealthCheckContext,
    *,
    checker: Optional[HealthChecker] = None,
) -> List[ItemHealthFinding]:
    """Health-check every used row and return the ones that are not healthy.

    Findings keep the row's original index so the UI can point at it.
    """
    checker = checker or HealthChecker()
    findings: List[ItemHealthFinding] = []
    for index, item in enumerate(items):
        if is_placeholder_row(item):
            continue
        report = checker.check(item, ctx)
        if report.status == HealthStatus.HEALTHY:
            continue
        findings.append(ItemHealthFinding(index=index, item=item, issues=report.issues))

    logger.debug("Health scan flagged %d item(s)", len(findings))
    return findings


def requires_acknowledgment(findings: Iterable[ItemHealthFinding]) -> bool:
    """True when export, print or save must wait for the user to acknowledge critical issues."""
    return any(finding.status == HealthStatus.CRITICAL for finding in findings)


def summarize_findings(findings: Iterable[ItemHealthFinding]) -> ScanSummary:
    findings = list(findings)
    counts: Dict[IssueSeverity, int] = {}
    for finding in findings:
        for issue in finding.issues:
            counts[issue.severity] = counts.get(issue.severity, 0) + 1
    critical_items = sum(1 for f in findings if f.status == HealthStatus.CRITICAL)
    return ScanSummary(
        items_flagged=len(findings),
        critical_items=critical_items,
        issue_counts=counts,
        requires_acknowledgment=critical_items > 0,
    )
