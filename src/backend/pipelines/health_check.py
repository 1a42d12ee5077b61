from __future__ import annotations

import json
import logging
import os
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from common.compliance_engine.config import HealthCheckConfig
from common.compliance_engine.consolidator import (
    DocumentTotals,
    consolidate_line_items,
    document_totals,
)
from common.compliance_engine.context import HealthCheckContext
from common.compliance_engine.currency import recalculate_line_item_prices
from common.compliance_engine.knowledge_base import KnowledgeBase
from common.compliance_engine.models import (
    DocumentHeader,
    HistoricalRecord,
    ItemHealthFinding,
    LineItem,
    ScanSummary,
    UserRule,
)
from common.compliance_engine.price_history import PriceHistoryCache
from common.compliance_engine.scanner import scan_all, summarize_findings


load_dotenv()

logger = logging.getLogger(__name__)

DOCUMENT_FILE = "document.json"
HISTORY_FILE = "history.json"
KNOWLEDGE_BASE_FILE = "knowledge_base.json"
USER_RULES_FILE = "user_rules.json"


@dataclass(frozen=True)
class HealthCheckInputs:
    header: DocumentHeader
    items: tuple[LineItem, ...]
    history: tuple[HistoricalRecord, ...] = ()
    knowledge_base: KnowledgeBase = field(default_factory=KnowledgeBase)
    user_rules: tuple[UserRule, ...] = ()
    config: HealthCheckConfig = field(default_factory=HealthCheckConfig)


class HealthCheckRun(BaseModel):
    run_id: str
    generated_at: datetime
    header: DocumentHeader
    consolidated: bool = False
    items: List[LineItem] = Field(default_factory=list)
    findings: List[ItemHealthFinding] = Field(default_factory=list)
    summary: ScanSummary = Field(default_factory=ScanSummary)
    totals: DocumentTotals = Field(default_factory=DocumentTotals)


def _load_json(path: Path) -> Any:
    with path.open(encoding="utf-8") as handle:
        return json.load(handle)


def _load_optional_json(path: Path) -> Any:
    if not path.exists():
        return None
    return _load_json(path)


def default_config_path() -> Optional[Path]:
    override = os.getenv("HEALTH_CHECK_CONFIG_PATH", "").strip()
    if override:
        return Path(override)
    return None


def load_health_check_config(path: Optional[Path] = None) -> HealthCheckConfig:
    """Load thresholds from `path`, else from HEALTH_CHECK_CONFIG_PATH, else defaults."""
    path = path or default_config_path()
    if path is None:
        return HealthCheckConfig()
    if not path.exists():
        raise FileNotFoundError(f"Health check config file not found: {path}")
    return HealthCheckConfig.model_validate(_load_json(path))


def _load_user_rules(raw: Any) -> tuple[UserRule, ...]:
    if not isinstance(raw, list):
        return ()
    rules: list[UserRule] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        try:
            rules.append(UserRule.model_validate(entry))
        except ValidationError as exc:
            logger.warning("Skipping invalid user rule %r: %s", entry.get("name") or entry.get("id"), exc)
    return tuple(rules)


def build_fixture_inputs(
    fixtures_dir: Path,
    *,
    config_path: Optional[Path] = None,
) -> HealthCheckInputs:
    document_path = fixtures_dir / DOCUMENT_FILE
    if not document_path.exists():
        raise FileNotFoundError(f"Document fixture not found: {document_path}")
    document = _load_json(document_path)
    if not isinstance(document, dict):
        raise ValueError(f"{DOCUMENT_FILE} must contain a JSON object with 'header' and 'items'.")

    header = DocumentHeader.model_validate(document.get("header") or {})
    items = tuple(LineItem.model_validate(raw) for raw in document.get("items") or [])

    history_raw = _load_optional_json(fixtures_dir / HISTORY_FILE) or []
    history = tuple(HistoricalRecord.model_validate(raw) for raw in history_raw)

    kb_raw = _load_optional_json(fixtures_dir / KNOWLEDGE_BASE_FILE) or {}
    knowledge_base = KnowledgeBase.model_validate(kb_raw)

    user_rules = _load_user_rules(_load_optional_json(fixtures_dir / USER_RULES_FILE))

    return HealthCheckInputs(
        header=header,
        items=items,
        history=history,
        knowledge_base=knowledge_base,
        user_rules=user_rules,
        config=load_health_check_config(config_path),
    )


def run_health_check_from_inputs(
    inputs: HealthCheckInputs,
    *,
    consolidate: bool = False,
    price_history_cache: Optional[PriceHistoryCache] = None,
    history_version: Optional[str] = None,
) -> HealthCheckRun:
    items: list[LineItem] = list(inputs.items)
    if consolidate:
        items = [
            recalculate_line_item_prices(item, inputs.header)
            for item in consolidate_line_items(items)
        ]

    cache = price_history_cache or PriceHistoryCache()
    ctx = HealthCheckContext.from_header(
        inputs.header,
        knowledge_base=inputs.knowledge_base.compliance_rules,
        user_rules=inputs.user_rules,
        price_history=cache.get(inputs.history, version=history_version),
        config=inputs.config,
    )
    findings = scan_all(items, ctx)

    return HealthCheckRun(
        run_id=str(uuid.uuid4()),
        generated_at=datetime.now(timezone.utc),
        header=inputs.header,
        consolidated=consolidate,
        items=items,
        findings=findings,
        summary=summarize_findings(findings),
        totals=document_totals(items),
    )
