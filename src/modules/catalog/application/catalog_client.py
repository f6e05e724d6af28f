"""Catalog client.

Wraps gateway calls with per-operation URL construction and field-alias
normalisation. Every public ``list_*``/``fetch_quiz_questions`` method resolves
to a list and never raises; the ``fetch_*_result`` variants keep the failure
visible for callers that track an error state.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger

from src.core.config import settings
from src.core.infrastructure.logging import BusinessEvents
from src.modules.catalog.domain.entities import (
    Provider,
    QuizQuestion,
    Subject,
    TestSeriesSummary,
    TestTitle,
)
from src.modules.catalog.domain.exceptions import (
    CatalogPayloadError,
    GatewayEnvelopeError,
    ProviderAuthRequiredError,
    UnexpectedPayloadError,
)
from src.modules.catalog.domain.gateway import GatewayPort
from src.modules.catalog.domain.normalizers import (
    normalize_provider,
    normalize_question,
    normalize_series,
    normalize_subject,
    normalize_title,
)
from src.modules.catalog.domain.result import FetchResult

AUTH_ERROR_MESSAGES = frozenset({"Invalid Token"})
AUTH_ERROR_STATUSES = frozenset({401, "401"})


def encode_uri_component(value: str) -> str:
    """Percent-encode like JavaScript's ``encodeURIComponent``."""
    return quote(value, safe="-_.!~*'()")


class CatalogClient:
    """Normalising client over the proxy gateway.

    Construct once per process and pass it to consumers.
    """

    def __init__(
        self,
        gateway: GatewayPort,
        base_url: str | None = None,
        manifest_url: str | None = None,
    ):
        self.gateway = gateway
        self.base_url = base_url or settings.CATALOG_BASE_URL
        self.manifest_url = manifest_url or settings.CATALOG_MANIFEST_URL

    # ------------------------------------------------------------------
    # URL construction
    # ------------------------------------------------------------------

    def build_action_url(self, provider_api: str, action: str, **params: str) -> str:
        query = f"bash_url={encode_uri_component(provider_api)}&action={action}"
        for key, value in params.items():
            query += f"&{key}={encode_uri_component(str(value))}"
        return f"{self.base_url}?{query}"

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def list_providers(self) -> list[Provider]:
        return (await self.fetch_providers_result()).items

    async def list_test_series(self, provider_api: str) -> list[TestSeriesSummary]:
        return (await self.fetch_test_series_result(provider_api)).items

    async def list_subjects(
        self, provider_api: str, test_series_id: str
    ) -> list[Subject]:
        return (await self.fetch_subjects_result(provider_api, test_series_id)).items

    async def list_test_titles(
        self, provider_api: str, test_series_id: str, subject_id: str
    ) -> list[TestTitle]:
        result = await self.fetch_test_titles_result(
            provider_api, test_series_id, subject_id
        )
        return result.items

    async def fetch_quiz_questions(self, questions_url: str) -> list[QuizQuestion]:
        return (await self.fetch_quiz_questions_result(questions_url)).items

    # ------------------------------------------------------------------
    # Result variants
    # ------------------------------------------------------------------

    async def fetch_providers_result(self) -> FetchResult[Provider]:
        return await self._fetch(
            self.manifest_url,
            operation="providers",
            extract=self._extract_array,
            normalize=normalize_provider,
        )

    async def fetch_test_series_result(
        self, provider_api: str
    ) -> FetchResult[TestSeriesSummary]:
        return await self._fetch(
            self.build_action_url(provider_api, "series"),
            operation="series",
            extract=self._provider_list_extractor(provider_api, "series"),
            normalize=normalize_series,
        )

    async def fetch_subjects_result(
        self, provider_api: str, test_series_id: str
    ) -> FetchResult[Subject]:
        return await self._fetch(
            self.build_action_url(provider_api, "subjects", test_id=test_series_id),
            operation="subjects",
            extract=self._provider_list_extractor(provider_api, "subjects"),
            normalize=normalize_subject,
        )

    async def fetch_test_titles_result(
        self, provider_api: str, test_series_id: str, subject_id: str
    ) -> FetchResult[TestTitle]:
        return await self._fetch(
            self.build_action_url(
                provider_api, "titles", test_id=test_series_id, subject_id=subject_id
            ),
            operation="titles",
            extract=self._provider_list_extractor(provider_api, "titles"),
            normalize=normalize_title,
        )

    async def fetch_quiz_questions_result(
        self, questions_url: str
    ) -> FetchResult[QuizQuestion]:
        return await self._fetch(
            questions_url,
            operation="questions",
            extract=lambda payload: self._extract_list(payload, ("data", "questions")),
            normalize=normalize_question,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _fetch[T](
        self,
        target_url: str,
        operation: str,
        extract: Callable[[Any], list[Any]],
        normalize: Callable[[Mapping[str, Any]], T | None],
    ) -> FetchResult[T]:
        start_time = time.time()
        metadata: dict[str, Any] = {"operation": operation, "url": target_url}
        try:
            payload = await self.gateway.get_json(target_url)
            raw_items = extract(payload)
            items: list[T] = []
            for raw in raw_items:
                if not isinstance(raw, Mapping):
                    continue
                item = normalize(raw)
                if item is not None:
                    items.append(item)
        except ProviderAuthRequiredError as exc:
            BusinessEvents.provider_auth_required(
                provider_api=exc.provider_api, action=operation
            )
            metadata["auth_required"] = True
            return FetchResult.success([], self._elapsed_ms(start_time), metadata)
        except CatalogPayloadError as exc:
            logger.warning(
                f"Error fetching {operation} from {target_url}: {exc.message}"
            )
            return FetchResult.failed(
                exc.message, self._elapsed_ms(start_time), metadata
            )
        except (httpx.HTTPError, ValueError, TypeError) as exc:
            logger.warning(f"Error fetching {operation} from {target_url}: {exc}")
            return FetchResult.failed(
                f"Error: {exc}", self._elapsed_ms(start_time), metadata
            )
        except Exception as exc:
            logger.exception(f"Unexpected error fetching {operation}: {exc}")
            return FetchResult.failed(
                f"Unexpected error: {exc}", self._elapsed_ms(start_time), metadata
            )

        metadata["total_found"] = len(raw_items)
        return FetchResult.success(items, self._elapsed_ms(start_time), metadata)

    def _provider_list_extractor(
        self, provider_api: str, action: str
    ) -> Callable[[Any], list[Any]]:
        def extract(payload: Any) -> list[Any]:
            if self._is_auth_error(payload):
                raise ProviderAuthRequiredError(provider_api)
            return self._extract_list(payload, ("data",))

        return extract

    @staticmethod
    def _is_auth_error(payload: Any) -> bool:
        if not isinstance(payload, Mapping):
            return False
        return (
            payload.get("msg") in AUTH_ERROR_MESSAGES
            or payload.get("status") in AUTH_ERROR_STATUSES
        )

    @staticmethod
    def _raise_for_envelope(payload: Any) -> None:
        if not isinstance(payload, Mapping):
            return
        error = payload.get("error")
        if isinstance(error, str) and error:
            raise GatewayEnvelopeError(error)

    @classmethod
    def _extract_array(cls, payload: Any) -> list[Any]:
        cls._raise_for_envelope(payload)
        if not isinstance(payload, list):
            raise UnexpectedPayloadError("array", payload)
        return payload

    @classmethod
    def _extract_list(cls, payload: Any, keys: tuple[str, ...]) -> list[Any]:
        if isinstance(payload, list):
            return payload
        cls._raise_for_envelope(payload)
        if isinstance(payload, Mapping):
            for key in keys:
                value = payload.get(key)
                if isinstance(value, list):
                    return value
        raise UnexpectedPayloadError("array or data envelope", payload)

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.time() - start_time) * 1000)
