"""Usage-based claim pricing."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ..schemas import PriceBreakdown

BASE_PRICE = Decimal("29.95")
INCLUDED_ITEMS = 100
PRICE_PER_EXTRA_ITEM = Decimal("0.10")
MAX_TRIAL_ITEMS = 10_000

_CENT = Decimal("0.01")


def _extra_items(item_count: int | None) -> int:
    if item_count is None:
        return 0
    return max(0, item_count - INCLUDED_ITEMS)


def compute_price(item_count: int | None) -> Decimal:
    """Price for claiming an auction with *item_count* lots.

    Formula: price = 29.95 + max(0, item_count - 100) * 0.10, rounded half-up
    to the cent. An unknown item count (lot pages) is charged the base price.
    """
    total = BASE_PRICE + _extra_items(item_count) * PRICE_PER_EXTRA_ITEM
    return total.quantize(_CENT, rounding=ROUND_HALF_UP)


def is_trial_eligible(item_count: int | None) -> bool:
    """Free trial claims are limited to auctions of at most 10,000 items."""
    return item_count is None or item_count <= MAX_TRIAL_ITEMS


def price_breakdown(item_count: int | None) -> PriceBreakdown | None:
    """Explain a quote; None when the item count is unknown."""
    if item_count is None:
        return None
    extra = _extra_items(item_count)
    return PriceBreakdown(
        base_price=float(BASE_PRICE),
        included_items=INCLUDED_ITEMS,
        extra_items=extra,
        extra_cost=float((extra * PRICE_PER_EXTRA_ITEM).quantize(_CENT, rounding=ROUND_HALF_UP)),
    )
