"""Load/error/retry state wrappers consumed by the presentation layer.

Each loader owns a LoadState snapshot that is updated in place while a load
runs, so a caller polling ``loader.state`` sees ``loading`` and ``progress``
change. ``refetch`` repeats the last load with the same arguments.

Only the provider list surfaces an error. Everything below it degrades to
"fewer results" without an error flag, because the catalog client already
swallows per-call failures.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from loguru import logger

from src.core.infrastructure.logging import BusinessEvents
from src.modules.catalog.application.batch_aggregator import (
    BatchAggregator,
    ProgressCallback,
)
from src.modules.catalog.application.catalog_client import CatalogClient
from src.modules.catalog.domain.entities import (
    Provider,
    QuizQuestion,
    Subject,
    TestSeriesSummary,
    TestTitle,
)


@dataclass
class LoadState[T]:
    data: T
    loading: bool = False
    error: str | None = None
    progress: float = 0.0


class ProvidersLoader:
    ERROR_MESSAGE = "Failed to load API providers"

    def __init__(self, client: CatalogClient):
        self.client = client
        self.state: LoadState[list[Provider]] = LoadState(data=[])

    async def load(self) -> LoadState[list[Provider]]:
        self.state.loading = True
        self.state.error = None
        try:
            result = await self.client.fetch_providers_result()
            self.state.data = result.items
            if not result.is_success:
                self.state.error = self.ERROR_MESSAGE
                BusinessEvents.feature_degraded(
                    feature="catalog_providers",
                    reason=result.error_message or self.ERROR_MESSAGE,
                )
        finally:
            self.state.loading = False
        return self.state

    async def refetch(self) -> LoadState[list[Provider]]:
        return await self.load()


class AllTestSeriesLoader:
    """Aggregated series across providers with chunk progress."""

    ERROR_MESSAGE = "Failed to load test series"

    def __init__(
        self,
        aggregator: BatchAggregator,
        concurrency: int | None = None,
        on_progress: ProgressCallback | None = None,
    ):
        self.aggregator = aggregator
        self.concurrency = concurrency
        self.on_progress = on_progress
        self.state: LoadState[list[TestSeriesSummary]] = LoadState(data=[])
        self._providers: list[Provider] = []

    def _set_progress(self, value: float) -> None:
        self.state.progress = max(self.state.progress, value)
        if self.on_progress is not None:
            self.on_progress(self.state.progress)

    async def load(
        self, providers: Sequence[Provider]
    ) -> LoadState[list[TestSeriesSummary]]:
        self._providers = list(providers)
        self.state.loading = True
        self.state.error = None
        self.state.progress = 0.0
        try:
            self.state.data = await self.aggregator.fetch_all(
                self._providers,
                concurrency=self.concurrency,
                on_progress=self._set_progress,
            )
        except Exception as exc:
            logger.exception(f"Test series aggregation failed: {exc}")
            self.state.data = []
            self.state.error = self.ERROR_MESSAGE
        finally:
            self.state.loading = False
            self.state.progress = 100.0
        return self.state

    async def refetch(self) -> LoadState[list[TestSeriesSummary]]:
        return await self.load(self._providers)


class ResourceLoader[T]:
    """Loader for one scoped list (subjects, titles, questions).

    A load with any empty argument is skipped, mirroring a view that has not
    selected its parent yet.
    """

    def __init__(self, fetch: Callable[..., Awaitable[list[T]]]):
        self.fetch = fetch
        self.state: LoadState[list[T]] = LoadState(data=[])
        self._args: tuple[str, ...] = ()

    async def load(self, *args: str) -> LoadState[list[T]]:
        if not args or not all(args):
            return self.state
        self._args = args
        self.state.loading = True
        self.state.error = None
        try:
            self.state.data = await self.fetch(*args)
        finally:
            self.state.loading = False
        return self.state

    async def refetch(self) -> LoadState[list[T]]:
        return await self.load(*self._args)


def subjects_loader(client: CatalogClient) -> ResourceLoader[Subject]:
    return ResourceLoader(client.list_subjects)


def titles_loader(client: CatalogClient) -> ResourceLoader[TestTitle]:
    return ResourceLoader(client.list_test_titles)


def quiz_questions_loader(client: CatalogClient) -> ResourceLoader[QuizQuestion]:
    return ResourceLoader(client.fetch_quiz_questions)
