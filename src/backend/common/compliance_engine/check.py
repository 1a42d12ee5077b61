from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from .context import HealthCheckContext
from .models import HealthIssue, IssueCategory, IssueSeverity, LineItem


class HealthCheck(ABC):
    check_id: str
    check_title: str
    category: IssueCategory

    def __init__(self):
        if not getattr(self, "check_id", None):
            raise ValueError("HealthCheck must define check_id")

    @abstractmethod
    def evaluate(self, item: LineItem, ctx: HealthCheckContext) -> List[HealthIssue]:  # pragma: no cover
        raise NotImplementedError

    def issue(
        self,
        *,
        severity: IssueSeverity,
        field: str,
        message: str,
        category: Optional[IssueCategory] = None,
    ) -> HealthIssue:
        return HealthIssue(
            severity=severity,
            field=field,
            message=message,
            category=category or self.category,
            check_id=self.check_id,
        )
