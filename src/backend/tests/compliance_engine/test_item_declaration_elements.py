from common.compliance_engine.checks.item_declaration_elements import ITEM_DECLARATION_ELEMENTS
from common.compliance_engine.config import HealthCheckConfig
from common.compliance_engine.models import IssueCategory, IssueSeverity


def test_hs_code_without_elements_warns(make_item, make_ctx):
    issues = ITEM_DECLARATION_ELEMENTS().evaluate(make_item(hs_code="8471300000", declaration_elements=""), make_ctx())
    assert [(i.severity, i.category, i.field) for i in issues] == [
        (IssueSeverity.WARNING, IssueCategory.COMPLETENESS_WARNING, "declaration_elements")
    ]


def test_short_elements_warn(make_item, make_ctx):
    issues = ITEM_DECLARATION_ELEMENTS().evaluate(make_item(hs_code="8471300000", declaration_elements="abcd"), make_ctx())
    assert len(issues) == 1


def test_complete_elements_pass(make_item, make_ctx):
    item = make_item(hs_code="8471300000", declaration_elements="0|0|Laptop|ACME|X1")
    assert ITEM_DECLARATION_ELEMENTS().evaluate(item, make_ctx()) == []


def test_no_hs_code_means_nothing_to_declare(make_item, make_ctx):
    assert ITEM_DECLARATION_ELEMENTS().evaluate(make_item(hs_code="", declaration_elements=""), make_ctx()) == []


def test_minimum_length_is_configurable(make_item, make_ctx):
    cfg = HealthCheckConfig(min_declaration_elements_length=20)
    item = make_item(hs_code="8471300000", declaration_elements="0|0|Laptop|ACME|X1")
    assert len(ITEM_DECLARATION_ELEMENTS().evaluate(item, make_ctx(config=cfg))) == 1
