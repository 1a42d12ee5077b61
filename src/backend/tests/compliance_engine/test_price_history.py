from decimal import Decimal

import pytest

from common.compliance_engine.models import DocumentHeader, HistoricalRecord, LineItem
from common.compliance_engine.price_history import (
    PriceHistoryCache,
    analyze_price,
    build_price_history,
    lookup_price_history,
    reference_currency,
)


def test_reference_currency_by_mode():
    assert reference_currency(True, "usd") == "CNY"
    assert reference_currency(False, " eur ") == "EUR"
    assert reference_currency(False, "") == "USD"


def test_build_buckets_by_name_and_reference_currency(make_record):
    history = build_price_history(
        [
            make_record(name="Widget", prices=["10", "11"], currency="usd"),
            make_record(name=" Widget ", prices=["9.5"], currency="USD"),
            make_record(name="Widget", prices=["70"], currency="USD", domestic=True),
            make_record(name="Widget", prices=["8"], currency="EUR"),
        ]
    )
    assert lookup_price_history(history, "Widget", "USD") == (Decimal("10"), Decimal("11"), Decimal("9.5"))
    assert lookup_price_history(history, "Widget", "cny") == (Decimal("70"),)
    assert lookup_price_history(history, "Widget", "EUR") == (Decimal("8"),)


def test_domestic_records_use_unit_cost_not_foreign_price():
    record = HistoricalRecord(
        header=DocumentHeader(currency_code="USD", use_domestic_cost_mode=True),
        items=[LineItem(product_name_local="Widget", unit_cost_domestic="70", unit_price_foreign="10")],
    )
    history = build_price_history([record])
    assert lookup_price_history(history, "Widget", "CNY") == (Decimal("70"),)
    assert lookup_price_history(history, "Widget", "USD") == ()


def test_build_skips_blank_names_and_non_positive_prices(make_record):
    history = build_price_history(
        [
            make_record(name="", prices=["10"]),
            make_record(name="Widget", prices=["0", "-5", "", "abc"]),
        ]
    )
    assert dict(history) == {}


def test_history_is_read_only(make_record):
    history = build_price_history([make_record(prices=["10"])])
    with pytest.raises(TypeError):
        history["Widget|USD"] = (Decimal("1"),)


def test_lookup_missing_bucket_is_empty(make_record):
    history = build_price_history([make_record(prices=["10"])])
    assert lookup_price_history(history, "Gadget", "USD") == ()
    assert lookup_price_history(history, "", "USD") == ()


def test_analyze_price_reports_direction_and_range(make_record):
    history = build_price_history([make_record(prices=["10", "10", "11"])])
    analysis = analyze_price(
        history,
        name="Widget",
        current_price=Decimal("15"),
        use_domestic_cost_mode=False,
        currency_code="usd",
    )
    assert analysis is not None
    assert analysis.is_outlier
    assert analysis.direction == "high"
    assert analysis.deviation_pct == 45
    assert analysis.min == Decimal("10")
    assert analysis.max == Decimal("11")
    assert analysis.sample_count == 3

    low = analyze_price(
        history,
        name="Widget",
        current_price=Decimal("5"),
        use_domestic_cost_mode=False,
        currency_code="USD",
    )
    assert low.direction == "low"
    assert low.is_outlier


def test_analyze_price_needs_three_samples(make_record):
    history = build_price_history([make_record(prices=["10", "10"])])
    assert (
        analyze_price(
            history,
            name="Widget",
            current_price=Decimal("1000"),
            use_domestic_cost_mode=False,
            currency_code="USD",
        )
        is None
    )


def test_analyze_price_within_threshold_is_not_outlier(make_record):
    history = build_price_history([make_record(prices=["10", "10", "10"])])
    analysis = analyze_price(
        history,
        name="Widget",
        current_price=Decimal("13"),
        use_domestic_cost_mode=False,
        currency_code="USD",
    )
    assert analysis is not None
    assert analysis.deviation_pct == 30
    assert not analysis.is_outlier


def test_cache_rebuilds_only_when_corpus_changes(make_record):
    cache = PriceHistoryCache()
    records = [make_record(prices=["10", "10", "11"])]
    first = cache.get(records)
    assert cache.get(list(records)) is first

    changed = records + [make_record(prices=["12"])]
    rebuilt = cache.get(changed)
    assert rebuilt is not first
    assert len(lookup_price_history(rebuilt, "Widget", "USD")) == 4

    cache.invalidate()
    assert cache.get(changed) is not rebuilt


def test_cache_keyed_by_caller_version_skips_fingerprinting(make_record, monkeypatch):
    from common.compliance_engine import price_history

    def _fail(records):
        raise AssertionError("corpus should not be fingerprinted when a version is given")

    monkeypatch.setattr(price_history, "corpus_fingerprint", _fail)

    cache = PriceHistoryCache()
    records = [make_record(prices=["10", "10", "11"])]
    first = cache.get(records, version=1)
    # Same version: the cached map is returned even for a different list object.
    assert cache.get(records + [make_record(prices=["99"])], version=1) is first

    bumped = cache.get(records + [make_record(prices=["12"])], version=2)
    assert bumped is not first
    assert len(lookup_price_history(bumped, "Widget", "USD")) == 4
