from decimal import Decimal


WIDGET = {
    "id": "row-1",
    "product_name_local": "Widget",
    "quantity": "10",
    "gross_weight": "12",
    "net_weight": "10",
    "volume": "0.2",
    "carton_count": 2,
    "package_type": "CTNS",
    "unit_price_foreign": "10",
    "total_price_foreign": "100",
}


def test_item_check_healthy(client):
    resp = client.post("/health-check/item", json={"item": WIDGET})
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy", "issues": []}


def test_item_check_reports_banned_hs_code(client):
    payload = {
        "item": {**WIDGET, "hs_code": "9302000010", "declaration_elements": "0|0|Parts|ACME|P1"},
        "knowledge_base": {
            "compliance_rules": {"930200": {"hs_code": "930200", "status": "banned", "tax_refund_rate_percent": 0}}
        },
    }
    resp = client.post("/health-check/item", json=payload)
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "critical"
    assert body["issues"][0]["check_id"] == "ITEM-HS-REGULATORY"
    assert body["issues"][0]["category"] == "REGULATORY_BLOCK"


def test_item_check_uses_history_and_user_rules(client):
    payload = {
        "item": {**WIDGET, "unit_price_foreign": "15", "origin": ""},
        "history": [
            {
                "header": {"currency_code": "USD"},
                "items": [{"product_name_local": "Widget", "unit_price_foreign": p} for p in ("10", "10", "11")],
            }
        ],
        "user_rules": [
            {"name": "Origin required", "target_field": "origin", "operator": "empty", "message": "Set origin"}
        ],
    }
    body = client.post("/health-check/item", json=payload).json()
    assert body["status"] == "warning"
    assert sorted(issue["check_id"] for issue in body["issues"]) == ["ITEM-PRICE-ANOMALY", "ITEM-USER-RULES"]


def test_item_check_rejects_rule_with_unknown_field(client):
    payload = {
        "item": WIDGET,
        "user_rules": [{"name": "bad", "target_field": "colour", "operator": "eq", "compare_value": "red"}],
    }
    assert client.post("/health-check/item", json=payload).status_code == 422


def test_scan_returns_findings_and_summary(client):
    payload = {
        "items": [
            WIDGET,
            {"id": "blank"},
            {**WIDGET, "id": "row-3", "net_weight": "20"},
        ]
    }
    body = client.post("/health-check/scan", json=payload).json()
    assert [finding["index"] for finding in body["findings"]] == [2]
    assert body["summary"]["critical_items"] == 1
    assert body["summary"]["requires_acknowledgment"] is True


def test_consolidate_merges_and_recalculates(client):
    payload = {
        "items": [
            {"product_name_local": "Widget", "quantity": "3", "total_cost_domestic": "565"},
            {"product_name_local": "Widget", "quantity": "", "total_cost_domestic": "565"},
        ],
        "header": {"currency_code": "USD", "use_domestic_cost_mode": True, "exchange_rate_to_domestic": "7"},
    }
    body = client.post("/health-check/consolidate", json=payload).json()
    assert len(body) == 1
    assert Decimal(body[0]["total_cost_domestic"]) == Decimal("1130")
    assert Decimal(body[0]["unit_cost_domestic"]) == Decimal("376.6667")
    assert Decimal(body[0]["total_price_foreign"]) == Decimal("142")
    assert Decimal(body[0]["unit_price_foreign"]) == Decimal("47.3333")


def test_convert_domestic_cost(client):
    body = client.post(
        "/health-check/convert",
        json={"total_domestic_cost": "1130", "exchange_rate": "7", "quantity": "3"},
    ).json()
    assert Decimal(body["total_price_foreign"]) == Decimal("142")
    assert Decimal(body["unit_price_foreign"]) == Decimal("47.3333")


def test_convert_without_rate_returns_zero(client):
    body = client.post(
        "/health-check/convert",
        json={"total_domestic_cost": "1130", "exchange_rate": "0", "quantity": "3"},
    ).json()
    assert Decimal(body["total_price_foreign"]) == 0
    assert body["unit_price_foreign"] is None


def test_knowledge_base_upsert(client):
    resp = client.post(
        "/health-check/knowledge-base/entries",
        json={"rule": {"hs_code": "7318.15.10", "status": "warning", "tax_refund_rate_percent": 0}},
    )
    assert resp.status_code == 200
    entry = resp.json()["compliance_rules"]["73181510"]
    assert entry["status"] == "warning"
    assert entry["last_updated"] is not None


def test_knowledge_base_upsert_rejects_short_code(client):
    resp = client.post("/health-check/knowledge-base/entries", json={"rule": {"hs_code": "73"}})
    assert resp.status_code == 400


def test_settlement_summary(client):
    payload = {
        "fx_receipts": [{"amount": "10000", "rate": "7"}],
        "supplier_costs": [{"supplier_name": "Ningbo Hardware", "amount": "56500", "tax_refund_rate_percent": "13"}],
        "agency_fee_rate": "0.001",
        "min_agency_fee": "100",
        "fixed_expenses": {"ocean_freight": "1000"},
        "extra_expenses": [{"name": "Inspection", "amount": "200"}],
    }
    body = client.post("/health-check/settlement", json=payload).json()
    assert Decimal(body["gross_profit"]) == Decimal("18662.05")
    assert Decimal(body["stamp_duty"]) == Decimal("37.95")
