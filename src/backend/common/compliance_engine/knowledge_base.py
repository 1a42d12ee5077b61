from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from .models import ComplianceRule

MIN_HS_CODE_DIGITS = 4

_NON_DIGITS = re.compile(r"\D")


def normalize_hs_code(hs_code: Any) -> str:
    if hs_code is None:
        return ""
    return _NON_DIGITS.sub("", str(hs_code))


def hs_lookup_keys(hs_code: Any) -> List[str]:
    """Keys to try for an HS code, most specific first.

    Tariff schedules are hierarchical (6/8/10 digits) and a knowledge base may
    only carry coarse entries, so the full code is tried before its 8- and
    6-digit headings.
    """
    code = normalize_hs_code(hs_code)
    if not code:
        return []
    keys = [code]
    if len(code) > 8:
        keys.append(code[:8])
    if len(code) > 6:
        keys.append(code[:6])
    return keys


def resolve_compliance_rule(
    hs_code: Any,
    knowledge_base: Mapping[str, ComplianceRule],
) -> Optional[ComplianceRule]:
    for key in hs_lookup_keys(hs_code):
        rule = knowledge_base.get(key)
        if rule is not None:
            return rule
    return None


class KnowledgeBase(BaseModel):
    """HS-code compliance entries keyed by normalized code."""

    compliance_rules: Dict[str, ComplianceRule] = Field(default_factory=dict)

    @field_validator("compliance_rules", mode="after")
    @classmethod
    def _normalize_keys(cls, value: Dict[str, ComplianceRule]) -> Dict[str, ComplianceRule]:
        normalized: Dict[str, ComplianceRule] = {}
        for key, rule in value.items():
            code = normalize_hs_code(key) or normalize_hs_code(rule.hs_code)
            if not code:
                continue
            normalized[code] = rule.model_copy(update={"hs_code": code})
        return normalized

    def resolve(self, hs_code: Any) -> Optional[ComplianceRule]:
        return resolve_compliance_rule(hs_code, self.compliance_rules)

    def upsert(self, rule: ComplianceRule, *, now: Optional[datetime] = None) -> "KnowledgeBase":
        """Return a new knowledge base with `rule` added or replaced."""
        code = normalize_hs_code(rule.hs_code)
        if not code:
            raise ValueError("HS code is required.")
        if len(code) < MIN_HS_CODE_DIGITS:
            raise ValueError(f"HS code {code!r} is too short (minimum {MIN_HS_CODE_DIGITS} digits).")
        stamped = rule.model_copy(
            update={"hs_code": code, "last_updated": now or datetime.now(timezone.utc)}
        )
        rules = dict(self.compliance_rules)
        rules[code] = stamped
        return KnowledgeBase(compliance_rules=rules)

    def search(self, term: str = "") -> List[Tuple[str, ComplianceRule]]:
        """Entries whose code contains `term` (dots ignored) or whose note mentions it."""
        needle = (term or "").strip().lower()
        code_needle = needle.replace(".", "")
        matches = [
            (code, rule)
            for code, rule in self.compliance_rules.items()
            if code_needle in code or needle in rule.note.lower()
        ]
        matches.sort(key=lambda entry: entry[0])
        return matches
