from common.compliance_engine.models import HealthStatus, IssueSeverity, LineItem
from common.compliance_engine.scanner import (
    is_placeholder_row,
    requires_acknowledgment,
    scan_all,
    summarize_findings,
)


def test_placeholder_rows_are_blank_name_and_no_price():
    assert is_placeholder_row(LineItem())
    assert is_placeholder_row(LineItem(net_weight="5", gross_weight="1", total_price_foreign="0"))
    assert not is_placeholder_row(LineItem(product_name_foreign="Bolt"))
    assert not is_placeholder_row(LineItem(total_cost_domestic="10"))
    assert not is_placeholder_row(LineItem(total_price_foreign="1"))


def test_scan_skips_placeholders_and_keeps_original_index(make_item, make_ctx):
    items = [
        make_item(id="a"),
        LineItem(net_weight="5", gross_weight="1"),
        make_item(id="c", net_weight="15", gross_weight="12"),
        make_item(id="d", hs_code="8471300000"),
    ]
    findings = scan_all(items, make_ctx())
    assert [(f.index, f.item.id, f.status) for f in findings] == [
        (2, "c", HealthStatus.CRITICAL),
        (3, "d", HealthStatus.WARNING),
    ]


def test_scan_of_healthy_document_is_empty(make_item, make_ctx):
    findings = scan_all([make_item(), make_item(id="row-2")], make_ctx())
    assert findings == []
    assert not requires_acknowledgment(findings)


def test_requires_acknowledgment_only_for_critical(make_item, make_ctx):
    warnings_only = scan_all([make_item(hs_code="8471300000")], make_ctx())
    assert warnings_only
    assert not requires_acknowledgment(warnings_only)

    critical = scan_all([make_item(net_weight="15", gross_weight="12")], make_ctx())
    assert requires_acknowledgment(critical)


def test_summary_counts(make_item, make_ctx):
    findings = scan_all(
        [
            make_item(net_weight="15", gross_weight="12", hs_code="8471300000"),
            make_item(hs_code="8471300000"),
        ],
        make_ctx(),
    )
    summary = summarize_findings(findings)
    assert summary.items_flagged == 2
    assert summary.critical_items == 1
    assert summary.issue_counts == {IssueSeverity.CRITICAL: 1, IssueSeverity.WARNING: 2}
    assert summary.requires_acknowledgment
