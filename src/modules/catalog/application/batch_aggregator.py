"""Concurrency-limited fan-out of "list series" across providers."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Sequence

from loguru import logger

from src.core.config import settings
from src.core.infrastructure.logging import BusinessEvents
from src.modules.catalog.application.catalog_client import CatalogClient
from src.modules.catalog.domain.entities import (
    BatchResult,
    Provider,
    TestSeriesSummary,
)

ProgressCallback = Callable[[float], None]


class BatchAggregator:
    """Fetch every provider's test series without flooding the proxy.

    Providers are processed in consecutive chunks. All calls in a chunk run
    concurrently; the next chunk starts only after every call of the previous
    one has settled and the inter-chunk pause has elapsed. A failing provider
    only loses its own contribution.

    The aggregator keeps no state between runs, so one instance can serve
    repeated and overlapping invocations.
    """

    def __init__(
        self,
        client: CatalogClient,
        chunk_delay_sec: float | None = None,
    ):
        self.client = client
        self.chunk_delay_sec = (
            settings.BATCH_CHUNK_DELAY_MS / 1000
            if chunk_delay_sec is None
            else chunk_delay_sec
        )

    async def fetch_all(
        self,
        providers: Sequence[Provider],
        concurrency: int | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[TestSeriesSummary]:
        """Aggregated, provider-stamped series of all providers.

        Args:
            providers: providers to query, in display order
            concurrency: chunk size, defaults to BATCH_CONCURRENCY
            on_progress: called once per chunk with the completed percentage

        Returns:
            Items in chunk order, then provider order within a chunk
        """
        batches = await self.fetch_batches(providers, concurrency, on_progress)
        return [item for batch in batches for item in batch.data]

    async def fetch_batches(
        self,
        providers: Sequence[Provider],
        concurrency: int | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[BatchResult[TestSeriesSummary]]:
        """Same as fetch_all, grouped per contributing provider."""
        if not providers:
            return []

        start_time = time.time()
        if concurrency is None:
            concurrency = settings.BATCH_CONCURRENCY
        chunk_size = max(1, concurrency)
        total = len(providers)
        chunks = [
            list(providers[index : index + chunk_size])
            for index in range(0, total, chunk_size)
        ]

        results: list[BatchResult[TestSeriesSummary]] = []
        completed = 0
        failed = 0

        for chunk_index, chunk in enumerate(chunks):
            if chunk_index > 0 and self.chunk_delay_sec > 0:
                await asyncio.sleep(self.chunk_delay_sec)

            outcomes = await asyncio.gather(
                *(
                    self.client.fetch_test_series_result(provider.api)
                    for provider in chunk
                ),
                return_exceptions=True,
            )
            for provider, outcome in zip(chunk, outcomes, strict=True):
                if isinstance(outcome, BaseException):
                    error = str(outcome) or type(outcome).__name__
                elif not outcome.is_success:
                    error = outcome.error_message or "unknown error"
                else:
                    error = None

                if error is not None:
                    failed += 1
                    logger.warning(
                        f"Failed to fetch test series from {provider.name}: {error}"
                    )
                    BusinessEvents.provider_fetch_failed(
                        provider_name=provider.name,
                        provider_api=provider.api,
                        error=error,
                    )
                    continue
                if not outcome.items:
                    continue
                results.append(
                    BatchResult(
                        provider=provider,
                        data=[item.stamped(provider) for item in outcome.items],
                    )
                )

            completed += len(chunk)
            if on_progress is not None:
                on_progress(completed / total * 100)

        duration_ms = int((time.time() - start_time) * 1000)
        series_total = sum(len(batch.data) for batch in results)
        logger.info(
            f"Fetched {series_total} test series from {total} providers "
            f"in {len(chunks)} chunks ({failed} failed, {duration_ms}ms)"
        )
        BusinessEvents.catalog_batch_completed(
            providers_total=total,
            providers_failed=failed,
            series_total=series_total,
            chunks=len(chunks),
            duration_ms=duration_ms,
        )
        return results
