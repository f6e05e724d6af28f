"""Catalog module application dependencies."""

from typing import NoReturn

from fastapi import Depends

from src.modules.catalog.application.batch_aggregator import BatchAggregator
from src.modules.catalog.application.catalog_client import CatalogClient
from src.modules.catalog.application.loaders import (
    AllTestSeriesLoader,
    ProvidersLoader,
)


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_catalog_client() -> CatalogClient:
    _missing_dependency("CatalogClient")


async def get_batch_aggregator(
    client: CatalogClient = Depends(get_catalog_client),
) -> BatchAggregator:
    return BatchAggregator(client)


async def get_providers_loader(
    client: CatalogClient = Depends(get_catalog_client),
) -> ProvidersLoader:
    return ProvidersLoader(client)


async def get_all_test_series_loader(
    aggregator: BatchAggregator = Depends(get_batch_aggregator),
) -> AllTestSeriesLoader:
    return AllTestSeriesLoader(aggregator)
