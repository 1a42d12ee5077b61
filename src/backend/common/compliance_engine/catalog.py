from __future__ import annotations

import argparse
import json
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from .config import HealthCheckConfig
from .fields import FIELD_LABELS
from .models import CompareMode, IssueSeverity, LineItemField, RuleOperator
from .registry import registry

# Ensure built-in checks are imported/registered when generating a catalog.
from . import checks as _builtin_checks  # noqa: F401

OPERATOR_LABELS: Dict[RuleOperator, str] = {
    RuleOperator.GT: "greater than (>)",
    RuleOperator.GTE: "greater than or equal (>=)",
    RuleOperator.LT: "less than (<)",
    RuleOperator.LTE: "less than or equal (<=)",
    RuleOperator.EQ: "equals (==)",
    RuleOperator.NEQ: "not equal (!=)",
    RuleOperator.CONTAINS: "contains",
    RuleOperator.NOT_CONTAINS: "does not contain",
    RuleOperator.EMPTY: "is empty",
    RuleOperator.NOT_EMPTY: "is not empty",
}


class CheckCatalogEntry(BaseModel):
    check_id: str
    check_title: str
    category: str

    module: str
    class_name: str


class VocabularyEntry(BaseModel):
    value: str
    label: str


class RuleVocabulary(BaseModel):
    fields: List[VocabularyEntry] = Field(default_factory=list)
    operators: List[VocabularyEntry] = Field(default_factory=list)
    compare_modes: List[str] = Field(default_factory=list)
    severities: List[str] = Field(default_factory=list)


def build_catalog() -> List[CheckCatalogEntry]:
    entries: List[CheckCatalogEntry] = []
    for check_id in registry.ids():
        check_cls = registry.get(check_id)
        category = getattr(check_cls, "category", None)
        entries.append(
            CheckCatalogEntry(
                check_id=check_id,
                check_title=getattr(check_cls, "check_title", ""),
                category=getattr(category, "value", "") if category is not None else "",
                module=getattr(check_cls, "__module__", ""),
                class_name=getattr(check_cls, "__name__", ""),
            )
        )

    entries.sort(key=lambda e: e.check_id)
    return entries


def build_rule_vocabulary() -> RuleVocabulary:
    """Field and operator choices offered to the rule-authoring UI."""
    return RuleVocabulary(
        fields=[VocabularyEntry(value=f.value, label=FIELD_LABELS[f]) for f in LineItemField],
        operators=[VocabularyEntry(value=op.value, label=OPERATOR_LABELS[op]) for op in RuleOperator],
        compare_modes=[mode.value for mode in CompareMode],
        severities=[sev.value for sev in IssueSeverity],
    )


def build_document() -> dict[str, Any]:
    return {
        "checks": [e.model_dump() for e in build_catalog()],
        "rule_vocabulary": build_rule_vocabulary().model_dump(),
        "config_schema": HealthCheckConfig.model_json_schema(),
    }


def _dump_json(document: dict[str, Any]) -> str:
    return json.dumps(document, indent=2, sort_keys=True)


def _dump_yaml(document: dict[str, Any]) -> str:
    import yaml

    return yaml.safe_dump(document, sort_keys=True)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Generate the health check catalog from the registry.")
    parser.add_argument(
        "--format",
        choices=("yaml", "json"),
        default="yaml",
        help="Output format (default: yaml).",
    )
    args = parser.parse_args(argv)

    document = build_document()
    if args.format == "json":
        print(_dump_json(document))
    else:
        print(_dump_yaml(document))


if __name__ == "__main__":
    main()
