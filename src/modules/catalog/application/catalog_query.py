"""Search, price filter and ordering over aggregated test series."""

from collections.abc import Iterable
from enum import Enum

from src.modules.catalog.domain.entities import TestSeriesSummary


class PriceFilter(str, Enum):
    ALL = "all"
    FREE = "free"
    PAID = "paid"


class SortOrder(str, Enum):
    POPULARITY = "popularity"  # upstream order
    PRICE_LOW = "price_low"
    PRICE_HIGH = "price_high"
    TESTS = "tests"


def filter_and_sort(
    series: Iterable[TestSeriesSummary],
    search: str = "",
    price_filter: PriceFilter = PriceFilter.ALL,
    sort_by: SortOrder = SortOrder.POPULARITY,
) -> list[TestSeriesSummary]:
    """Apply the catalog page filters.

    Missing prices sort as 0. Sorting is stable, so ties keep aggregation
    order.
    """
    needle = search.strip().lower()
    matched = [
        item
        for item in series
        if needle in item.name.lower() and _matches_price(item, price_filter)
    ]

    if sort_by == SortOrder.PRICE_LOW:
        matched.sort(key=lambda item: item.price or 0)
    elif sort_by == SortOrder.PRICE_HIGH:
        matched.sort(key=lambda item: item.price or 0, reverse=True)
    elif sort_by == SortOrder.TESTS:
        matched.sort(key=lambda item: item.total_tests, reverse=True)
    return matched


def _matches_price(item: TestSeriesSummary, price_filter: PriceFilter) -> bool:
    if price_filter == PriceFilter.FREE:
        return not item.is_paid
    if price_filter == PriceFilter.PAID:
        return item.is_paid
    return True
