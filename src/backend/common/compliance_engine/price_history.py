"""Historical unit-price baselines keyed by product name and reference currency.

A unit price means different things per calculation mode: in domestic-cost
mode it is the CNY purchase cost, otherwise it is the sale price in the
document currency. Prices are bucketed under a reference currency so the two
bases are never averaged together.
"""

from __future__ import annotations

import hashlib
import json
import logging
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType
from typing import Dict, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple

from .models import (
    DEFAULT_DOCUMENT_CURRENCY,
    DOMESTIC_CURRENCY,
    HistoricalRecord,
    LineItem,
    PriceAnalysis,
)

logger = logging.getLogger(__name__)

PriceHistory = Mapping[str, Tuple[Decimal, ...]]

DEFAULT_MIN_HISTORY_SAMPLES = 3
DEFAULT_PRICE_DEVIATION_THRESHOLD = Decimal("0.30")

EMPTY_PRICE_HISTORY: PriceHistory = MappingProxyType({})


def reference_currency(use_domestic_cost_mode: bool, currency_code: Optional[str]) -> str:
    if use_domestic_cost_mode:
        return DOMESTIC_CURRENCY
    return (currency_code or "").strip().upper() or DEFAULT_DOCUMENT_CURRENCY


def reference_unit_price(item: LineItem, use_domestic_cost_mode: bool) -> Optional[Decimal]:
    if use_domestic_cost_mode:
        return item.unit_cost_domestic
    return item.unit_price_foreign


def history_key(name: str, currency: str) -> str:
    return f"{name.strip()}|{currency}"


def build_price_history(records: Iterable[HistoricalRecord]) -> PriceHistory:
    """Bucket positive historical unit prices by `name|CURRENCY`.

    The result is read-only; callers own caching and rebuild it whenever the
    historical corpus changes.
    """
    buckets: Dict[str, List[Decimal]] = {}
    for record in records:
        mode = record.header.use_domestic_cost_mode
        currency = reference_currency(mode, record.header.currency_code)
        for item in record.items:
            if not item.product_name_local.strip():
                continue
            price = reference_unit_price(item, mode)
            if price is None or price <= 0:
                continue
            buckets.setdefault(history_key(item.product_name_local, currency), []).append(price)

    return MappingProxyType({key: tuple(prices) for key, prices in buckets.items()})


def lookup_price_history(history: PriceHistory, name: str, currency: str) -> Tuple[Decimal, ...]:
    if not name or not name.strip():
        return ()
    return tuple(history.get(history_key(name, currency.strip().upper()), ()))


def analyze_price(
    history: PriceHistory,
    *,
    name: str,
    current_price: Optional[Decimal],
    use_domestic_cost_mode: bool,
    currency_code: Optional[str],
    min_samples: int = DEFAULT_MIN_HISTORY_SAMPLES,
    deviation_threshold: Decimal = DEFAULT_PRICE_DEVIATION_THRESHOLD,
) -> Optional[PriceAnalysis]:
    """Compare a current unit price with its historical baseline.

    Returns None when no comparison is possible: blank name, non-positive
    price, fewer than `min_samples` samples, or a zero average.
    """
    if not name or not name.strip() or current_price is None or current_price <= 0:
        return None

    currency = reference_currency(use_domestic_cost_mode, currency_code)
    samples = lookup_price_history(history, name, currency)
    if len(samples) < min_samples:
        return None

    avg = sum(samples, Decimal("0")) / len(samples)
    if avg == 0:
        return None

    deviation = (current_price - avg) / avg
    pct = int((abs(deviation) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return PriceAnalysis(
        reference_currency=currency,
        sample_count=len(samples),
        avg=avg,
        min=min(samples),
        max=max(samples),
        current=current_price,
        deviation_pct=pct,
        direction="high" if deviation > 0 else "low",
        is_outlier=abs(deviation) > deviation_threshold,
    )


def corpus_fingerprint(records: Sequence[HistoricalRecord]) -> str:
    payload = json.dumps(
        [record.model_dump(mode="json") for record in records],
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class PriceHistoryCache:
    """Caller-owned cache that rebuilds the price history only when the corpus changes.

    Callers that track their own corpus revision (a save counter, a row
    timestamp) pass it as `version` and no hashing happens. Without a version
    the corpus is fingerprinted on every call.
    """

    def __init__(self) -> None:
        self._key: Optional[Tuple[str, Hashable]] = None
        self._history: PriceHistory = EMPTY_PRICE_HISTORY

    def get(
        self,
        records: Sequence[HistoricalRecord],
        *,
        version: Optional[Hashable] = None,
    ) -> PriceHistory:
        if version is not None:
            key: Tuple[str, Hashable] = ("version", version)
        else:
            key = ("fingerprint", corpus_fingerprint(records))
        if key != self._key:
            self._history = build_price_history(records)
            self._key = key
            logger.debug(
                "Rebuilt price history from %d record(s): %d bucket(s)",
                len(records),
                len(self._history),
            )
        return self._history

    def invalidate(self) -> None:
        self._key = None
        self._history = EMPTY_PRICE_HISTORY
