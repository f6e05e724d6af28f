#!/usr/bin/env python3
"""Catalog fetch script.

Loads the provider manifest, aggregates every provider's test series and
prints the filtered, sorted result.

Usage:
    # All series, default chunk size
    python scripts/fetch_catalog.py

    # Free series matching "ssc", cheapest first
    python scripts/fetch_catalog.py --search ssc --price free --sort price_low

    # Smaller chunks, JSON output
    python scripts/fetch_catalog.py --concurrency 2 --json
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


async def fetch_catalog(args: argparse.Namespace) -> dict:
    from loguru import logger

    from src.core.config import settings
    from src.core.infrastructure.http import HttpClient
    from src.modules.catalog.application.batch_aggregator import BatchAggregator
    from src.modules.catalog.application.catalog_query import (
        PriceFilter,
        SortOrder,
        filter_and_sort,
    )
    from src.modules.catalog.application.loaders import (
        AllTestSeriesLoader,
        ProvidersLoader,
    )
    from src.modules.catalog.infrastructure.dependencies import (
        build_catalog_client,
    )

    holder = HttpClient(timeout_sec=settings.CLIENT_TIMEOUT_SEC)
    try:
        client = build_catalog_client(holder.client)
        providers_state = await ProvidersLoader(client).load()
        if providers_state.error:
            return {"error": providers_state.error, "providers": 0, "series": []}

        def report(progress: float) -> None:
            logger.info(f"Aggregation progress: {progress:.0f}%")

        series_loader = AllTestSeriesLoader(
            BatchAggregator(client),
            concurrency=args.concurrency,
            on_progress=report if args.verbose else None,
        )
        series_state = await series_loader.load(providers_state.data)

        series = filter_and_sort(
            series_state.data,
            search=args.search,
            price_filter=PriceFilter(args.price),
            sort_by=SortOrder(args.sort),
        )
        return {
            "error": series_state.error,
            "providers": len(providers_state.data),
            "series": [item.model_dump(mode="json") for item in series],
        }
    finally:
        await holder.close()


def print_report(result: dict) -> None:
    if result["error"]:
        print(f"Error: {result['error']}")
    print(f"Providers: {result['providers']}")
    print(f"Test series: {len(result['series'])}")
    print("-" * 60)
    for item in result["series"]:
        price = "Free" if not item["is_paid"] else f"{item['price'] or 0:g}"
        print(
            f"{item['name'][:40]:<40} {item['total_tests']:>5} tests "
            f"{price:>8}  [{item['provider_name'] or '-'}]"
        )


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Fetch the aggregated catalog")
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Providers fetched per chunk (default: BATCH_CONCURRENCY)",
    )
    parser.add_argument("--search", default="", help="Name substring filter")
    parser.add_argument(
        "--price",
        choices=["all", "free", "paid"],
        default="all",
        help="Price filter",
    )
    parser.add_argument(
        "--sort",
        choices=["popularity", "price_low", "price_high", "tests"],
        default="popularity",
        help="Sort order",
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--verbose", action="store_true", help="Log progress")

    args = parser.parse_args()
    result = asyncio.run(fetch_catalog(args))

    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
    else:
        print_report(result)

    sys.exit(1 if result["error"] else 0)


if __name__ == "__main__":
    main()
