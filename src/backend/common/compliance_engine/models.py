from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .numeric import to_decimal

DEFAULT_TAX_RATE_PERCENT = Decimal("13")
DOMESTIC_CURRENCY = "CNY"
DEFAULT_DOCUMENT_CURRENCY = "USD"


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


class IssueSeverity(str, Enum):
    WARNING = "warning"
    CRITICAL = "critical"


class IssueCategory(str, Enum):
    DATA_INCONSISTENCY = "DATA_INCONSISTENCY"
    PLAUSIBILITY_WARNING = "PLAUSIBILITY_WARNING"
    REGULATORY_BLOCK = "REGULATORY_BLOCK"
    REGULATORY_WARNING = "REGULATORY_WARNING"
    COMPLETENESS_WARNING = "COMPLETENESS_WARNING"
    USER_RULE_VIOLATION = "USER_RULE_VIOLATION"


class ComplianceStatus(str, Enum):
    NORMAL = "normal"
    WARNING = "warning"
    BANNED = "banned"


class RuleOperator(str, Enum):
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    EQ = "eq"
    NEQ = "neq"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    EMPTY = "empty"
    NOT_EMPTY = "not_empty"


class CompareMode(str, Enum):
    VALUE = "value"
    FIELD = "field"


class LineItemField(str, Enum):
    """Closed set of line item fields that user rules may reference."""

    PRODUCT_NAME_LOCAL = "product_name_local"
    PRODUCT_NAME_FOREIGN = "product_name_foreign"
    HS_CODE = "hs_code"
    QUANTITY = "quantity"
    UNIT = "unit"
    GROSS_WEIGHT = "gross_weight"
    NET_WEIGHT = "net_weight"
    VOLUME = "volume"
    CARTON_COUNT = "carton_count"
    PACKAGE_TYPE = "package_type"
    UNIT_PRICE_FOREIGN = "unit_price_foreign"
    TOTAL_PRICE_FOREIGN = "total_price_foreign"
    UNIT_COST_DOMESTIC = "unit_cost_domestic"
    TOTAL_COST_DOMESTIC = "total_cost_domestic"
    VAT_RATE_PERCENT = "vat_rate_percent"
    TAX_REFUND_RATE_PERCENT = "tax_refund_rate_percent"
    DECLARATION_ELEMENTS = "declaration_elements"
    REMARK = "remark"
    ORIGIN = "origin"


def _text(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return str(value)
    return value


def _rate_percent(value: Any) -> Decimal:
    parsed = to_decimal(value)
    return DEFAULT_TAX_RATE_PERCENT if parsed is None else parsed


class LineItem(BaseModel):
    """One merchandise row of a trade document.

    Numeric fields accept numbers or strings as typed in the editing surface;
    blank or unparseable input becomes None ("blank") rather than failing.
    """

    model_config = ConfigDict(frozen=True)

    id: str = ""
    product_name_local: str = ""
    product_name_foreign: str = ""
    hs_code: str = ""
    quantity: Optional[Decimal] = None
    unit: str = ""
    gross_weight: Optional[Decimal] = None
    net_weight: Optional[Decimal] = None
    volume: Optional[Decimal] = None
    carton_count: Optional[int] = None
    package_type: str = "CTNS"
    unit_price_foreign: Optional[Decimal] = None
    total_price_foreign: Optional[Decimal] = None
    unit_cost_domestic: Optional[Decimal] = None
    total_cost_domestic: Optional[Decimal] = None
    vat_rate_percent: Decimal = DEFAULT_TAX_RATE_PERCENT
    tax_refund_rate_percent: Decimal = DEFAULT_TAX_RATE_PERCENT
    declaration_elements: str = ""
    remark: Optional[str] = None
    origin: str = ""

    @field_validator(
        "id",
        "product_name_local",
        "product_name_foreign",
        "hs_code",
        "unit",
        "package_type",
        "declaration_elements",
        "origin",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _text(value)

    @field_validator(
        "quantity",
        "gross_weight",
        "net_weight",
        "volume",
        "unit_price_foreign",
        "total_price_foreign",
        "unit_cost_domestic",
        "total_cost_domestic",
        mode="before",
    )
    @classmethod
    def _coerce_amount(cls, value: Any) -> Optional[Decimal]:
        return to_decimal(value)

    @field_validator("carton_count", mode="before")
    @classmethod
    def _coerce_carton_count(cls, value: Any) -> Optional[int]:
        parsed = to_decimal(value)
        if parsed is None:
            return None
        return int(parsed)

    @field_validator("vat_rate_percent", "tax_refund_rate_percent", mode="before")
    @classmethod
    def _coerce_rate(cls, value: Any) -> Decimal:
        return _rate_percent(value)


class DocumentHeader(BaseModel):
    currency_code: str = DEFAULT_DOCUMENT_CURRENCY
    # "RMB calculation mode": prices are entered as domestic cost and the foreign price is derived.
    use_domestic_cost_mode: bool = False
    exchange_rate_to_domestic: Optional[Decimal] = None

    @field_validator("currency_code", mode="before")
    @classmethod
    def _coerce_currency(cls, value: Any) -> Any:
        return _text(value)

    @field_validator("exchange_rate_to_domestic", mode="before")
    @classmethod
    def _coerce_rate(cls, value: Any) -> Optional[Decimal]:
        return to_decimal(value)


class HistoricalRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = ""
    header: DocumentHeader = Field(default_factory=DocumentHeader)
    items: List[LineItem] = Field(default_factory=list)


class ComplianceRule(BaseModel):
    hs_code: str = ""
    tax_refund_rate_percent: Decimal = DEFAULT_TAX_RATE_PERCENT
    status: ComplianceStatus = ComplianceStatus.NORMAL
    note: str = ""
    last_updated: Optional[datetime] = None

    @field_validator("hs_code", "note", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _text(value)

    @field_validator("tax_refund_rate_percent", mode="before")
    @classmethod
    def _coerce_rate(cls, value: Any) -> Decimal:
        return _rate_percent(value)


class UserRule(BaseModel):
    """A user-authored conditional check over a single line item.

    Field references are validated here so that a rule naming an unknown field
    is rejected when it is authored, not silently ignored when evaluated.
    """

    id: str = ""
    name: str = ""
    target_field: LineItemField
    operator: RuleOperator
    compare_mode: CompareMode = CompareMode.VALUE
    compare_value: str = ""
    severity: IssueSeverity = IssueSeverity.WARNING
    message: str = ""
    enabled: bool = True

    @field_validator("compare_value", mode="before")
    @classmethod
    def _coerce_compare_value(cls, value: Any) -> Any:
        return _text(value)

    @model_validator(mode="after")
    def _check_compare_field(self) -> "UserRule":
        if self.compare_mode == CompareMode.FIELD:
            allowed = {f.value for f in LineItemField}
            if self.compare_value not in allowed:
                raise ValueError(f"Unknown compare field: {self.compare_value!r}")
        return self


class HealthIssue(BaseModel):
    severity: IssueSeverity
    field: str
    message: str
    category: Optional[IssueCategory] = None
    check_id: str = ""


class HealthReport(BaseModel):
    status: HealthStatus = HealthStatus.HEALTHY
    issues: List[HealthIssue] = Field(default_factory=list)

    @classmethod
    def from_issues(cls, issues: List[HealthIssue]) -> "HealthReport":
        return cls(status=status_for_issues(issues), issues=list(issues))

    @property
    def has_critical(self) -> bool:
        return self.status == HealthStatus.CRITICAL


def status_for_issues(issues: List[HealthIssue]) -> HealthStatus:
    if any(issue.severity == IssueSeverity.CRITICAL for issue in issues):
        return HealthStatus.CRITICAL
    if issues:
        return HealthStatus.WARNING
    return HealthStatus.HEALTHY


class ItemHealthFinding(BaseModel):
    index: int
    item: LineItem
    issues: List[HealthIssue] = Field(default_factory=list)

    @property
    def status(self) -> HealthStatus:
        return status_for_issues(self.issues)


class ScanSummary(BaseModel):
    items_flagged: int = 0
    critical_items: int = 0
    issue_counts: Dict[IssueSeverity, int] = Field(default_factory=dict)
    requires_acknowledgment: bool = False


class PriceAnalysis(BaseModel):
    reference_currency: str
    sample_count: int
    avg: Decimal
    min: Decimal
    max: Decimal
    current: Decimal
    deviation_pct: int
    direction: str
    is_outlier: bool
