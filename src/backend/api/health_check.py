from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from common.compliance_engine.config import HealthCheckConfig
from common.compliance_engine.consolidator import consolidate_line_items
from common.compliance_engine.context import HealthCheckContext
from common.compliance_engine.currency import (
    derive_unit_price,
    domestic_cost_to_foreign_price,
    recalculate_line_item_prices,
)
from common.compliance_engine.evaluator import check_item
from common.compliance_engine.knowledge_base import KnowledgeBase
from common.compliance_engine.models import (
    DEFAULT_TAX_RATE_PERCENT,
    ComplianceRule,
    DocumentHeader,
    HealthReport,
    HistoricalRecord,
    ItemHealthFinding,
    LineItem,
    ScanSummary,
    UserRule,
)
from common.compliance_engine.price_history import build_price_history
from common.compliance_engine.scanner import scan_all, summarize_findings
from common.compliance_engine.settlement import (
    SettlementInputs,
    SettlementSummary,
    summarize_settlement,
)


router = APIRouter(prefix="/health-check", tags=["health-check"])


class CheckInputs(BaseModel):
    header: DocumentHeader = Field(default_factory=DocumentHeader)
    history: List[HistoricalRecord] = Field(default_factory=list)
    knowledge_base: KnowledgeBase = Field(default_factory=KnowledgeBase)
    user_rules: List[UserRule] = Field(default_factory=list)
    config: HealthCheckConfig = Field(default_factory=HealthCheckConfig)


class ItemCheckRequest(CheckInputs):
    item: LineItem


class ScanRequest(CheckInputs):
    items: List[LineItem] = Field(default_factory=list)


class ScanResponse(BaseModel):
    findings: List[ItemHealthFinding]
    summary: ScanSummary


class ConsolidateRequest(BaseModel):
    items: List[LineItem] = Field(default_factory=list)
    # When set, price fields are re-derived for the header's calculation mode after merging.
    header: Optional[DocumentHeader] = None


class ConvertRequest(BaseModel):
    total_domestic_cost: Decimal
    exchange_rate: Decimal
    vat_rate_percent: Decimal = DEFAULT_TAX_RATE_PERCENT
    tax_refund_rate_percent: Decimal = DEFAULT_TAX_RATE_PERCENT
    quantity: Optional[Decimal] = None


class ConvertResponse(BaseModel):
    total_price_foreign: Decimal
    unit_price_foreign: Optional[Decimal] = None


class KnowledgeBaseUpsertRequest(BaseModel):
    knowledge_base: KnowledgeBase = Field(default_factory=KnowledgeBase)
    rule: ComplianceRule


def _context(req: CheckInputs) -> HealthCheckContext:
    return HealthCheckContext.from_header(
        req.header,
        knowledge_base=req.knowledge_base.compliance_rules,
        user_rules=req.user_rules,
        price_history=build_price_history(req.history),
        config=req.config,
    )


@router.post("/item", response_model=HealthReport)
def health_check_item(req: ItemCheckRequest):
    return check_item(req.item, _context(req))


@router.post("/scan", response_model=ScanResponse)
def health_check_scan(req: ScanRequest):
    findings = scan_all(req.items, _context(req))
    return ScanResponse(findings=findings, summary=summarize_findings(findings))


@router.post("/consolidate", response_model=List[LineItem])
def health_check_consolidate(req: ConsolidateRequest):
    merged = consolidate_line_items(req.items)
    if req.header is not None:
        merged = [recalculate_line_item_prices(item, req.header) for item in merged]
    return merged


@router.post("/convert", response_model=ConvertResponse)
def health_check_convert(req: ConvertRequest):
    total = domestic_cost_to_foreign_price(
        req.total_domestic_cost,
        req.exchange_rate,
        req.vat_rate_percent,
        req.tax_refund_rate_percent,
    )
    unit = derive_unit_price(total, req.quantity) if total > 0 else None
    return ConvertResponse(total_price_foreign=total, unit_price_foreign=unit)


@router.post("/knowledge-base/entries", response_model=KnowledgeBase)
def health_check_upsert_compliance_rule(req: KnowledgeBaseUpsertRequest):
    try:
        return req.knowledge_base.upsert(req.rule)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post("/settlement", response_model=SettlementSummary)
def health_check_settlement(req: SettlementInputs):
    return summarize_settlement(req)
