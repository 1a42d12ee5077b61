"""Compliance & financial integrity engine for trade-document line items.

This package contains only domain logic:
- Inputs are line items, a document header subset, historical records, a
  compliance knowledge base and user-authored rules.
- Nothing here reads files, calls the network or persists state.
"""

from .consolidator import consolidate_line_items, document_totals
from .context import HealthCheckContext
from .currency import (
    derive_unit_price,
    domestic_cost_to_foreign_price,
    recalculate_line_item_prices,
)
from .evaluator import HealthChecker, check_item
from .knowledge_base import KnowledgeBase, normalize_hs_code, resolve_compliance_rule
from .models import (
    ComplianceRule,
    DocumentHeader,
    HealthIssue,
    HealthReport,
    HistoricalRecord,
    ItemHealthFinding,
    LineItem,
    UserRule,
)
from .price_history import (
    PriceHistoryCache,
    analyze_price,
    build_price_history,
    lookup_price_history,
)
from .rule_dsl import evaluate_user_rule
from .scanner import requires_acknowledgment, scan_all, summarize_findings
from .settlement import SettlementInputs, summarize_settlement
