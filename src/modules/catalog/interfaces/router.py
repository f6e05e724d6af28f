"""Catalog API routes."""

from fastapi import APIRouter, Depends, Query

from src.core.config import settings
from src.core.domain.exceptions import ValidationError
from src.core.interfaces.http.response import ApiResponse
from src.modules.catalog.application.catalog_client import CatalogClient
from src.modules.catalog.application.catalog_query import (
    PriceFilter,
    SortOrder,
    filter_and_sort,
)
from src.modules.catalog.application.dependencies import (
    get_all_test_series_loader,
    get_catalog_client,
    get_providers_loader,
)
from src.modules.catalog.application.loaders import (
    AllTestSeriesLoader,
    ProvidersLoader,
    quiz_questions_loader,
    subjects_loader,
    titles_loader,
)
from src.modules.catalog.domain.entities import (
    Provider,
    QuizQuestion,
    Subject,
    TestSeriesSummary,
    TestTitle,
)
from src.modules.catalog.interfaces.schemas import (
    ProviderResponse,
    QuizOptionResponse,
    QuizQuestionResponse,
    SubjectResponse,
    TestSeriesResponse,
    TestTitleResponse,
)

router = APIRouter(prefix="/catalog", tags=["catalog"])


def _require_http_url(value: str, name: str) -> str:
    value = value.strip()
    if not value.startswith(("http://", "https://")):
        raise ValidationError(f"{name} must be an absolute HTTP(S) URL")
    return value


def _to_provider_response(provider: Provider) -> ProviderResponse:
    return ProviderResponse(name=provider.name, api=provider.api)


def _to_series_response(series: TestSeriesSummary) -> TestSeriesResponse:
    return TestSeriesResponse(
        id=series.id,
        name=series.name,
        logo=series.logo,
        is_paid=series.is_paid,
        total_tests=series.total_tests,
        expires_on=series.expires_on,
        price=series.price,
        provider_name=series.provider_name,
        provider_api=series.provider_api,
    )


def _to_subject_response(subject: Subject) -> SubjectResponse:
    return SubjectResponse(
        id=subject.id,
        name=subject.name,
        logo=subject.logo,
        total_tests=subject.total_tests,
    )


def _to_title_response(title: TestTitle) -> TestTitleResponse:
    return TestTitleResponse(
        id=title.id,
        name=title.name,
        duration_minutes=title.duration_minutes,
        total_questions=title.total_questions,
        total_marks=title.total_marks,
        questions_url=title.questions_url,
        is_premium=title.is_premium,
        attempt_count=title.attempt_count,
    )


def _to_question_response(question: QuizQuestion) -> QuizQuestionResponse:
    return QuizQuestionResponse(
        id=question.id,
        question_html=question.question_html,
        options=[
            QuizOptionResponse(id=option.id, text_html=option.text_html)
            for option in question.options
        ],
        correct_answer_id=question.correct_answer_id,
        solution_html=question.solution_html,
    )


@router.get(
    "/providers",
    response_model=ApiResponse[list[ProviderResponse]],
    summary="List content providers",
)
async def list_providers(
    loader: ProvidersLoader = Depends(get_providers_loader),
) -> ApiResponse[list[ProviderResponse]]:
    state = await loader.load()
    return ApiResponse.success(
        data=[_to_provider_response(provider) for provider in state.data],
        meta={"total": len(state.data), "error": state.error},
    )


@router.get(
    "/series",
    response_model=ApiResponse[list[TestSeriesResponse]],
    summary="List test series across all providers",
    description="Aggregates every provider in chunks, then applies search/filter/sort",
)
async def list_all_test_series(
    search: str = Query("", max_length=100, description="Name substring"),
    price: PriceFilter = Query(PriceFilter.ALL, description="Price filter"),
    sort: SortOrder = Query(SortOrder.POPULARITY, description="Ordering"),
    concurrency: int = Query(
        settings.BATCH_CONCURRENCY, ge=1, le=20, description="Providers per chunk"
    ),
    providers_loader: ProvidersLoader = Depends(get_providers_loader),
    series_loader: AllTestSeriesLoader = Depends(get_all_test_series_loader),
) -> ApiResponse[list[TestSeriesResponse]]:
    providers_state = await providers_loader.load()
    series_loader.concurrency = concurrency
    series_state = await series_loader.load(providers_state.data)

    series = filter_and_sort(
        series_state.data, search=search, price_filter=price, sort_by=sort
    )
    return ApiResponse.success(
        data=[_to_series_response(item) for item in series],
        meta={
            "providers_total": len(providers_state.data),
            "series_total": len(series_state.data),
            "matched_total": len(series),
            "progress": series_state.progress,
            "error": providers_state.error or series_state.error,
        },
    )


@router.get(
    "/providers/series",
    response_model=ApiResponse[list[TestSeriesResponse]],
    summary="List test series of one provider",
)
async def list_provider_test_series(
    api: str = Query(..., min_length=1, description="Provider API URL"),
    client: CatalogClient = Depends(get_catalog_client),
) -> ApiResponse[list[TestSeriesResponse]]:
    series = await client.list_test_series(_require_http_url(api, "api"))
    return ApiResponse.success(
        data=[_to_series_response(item) for item in series],
        meta={"total": len(series)},
    )


@router.get(
    "/subjects",
    response_model=ApiResponse[list[SubjectResponse]],
    summary="List subjects of a test series",
)
async def list_subjects(
    api: str = Query(..., min_length=1, description="Provider API URL"),
    test_id: str = Query(..., min_length=1, description="Test series ID"),
    client: CatalogClient = Depends(get_catalog_client),
) -> ApiResponse[list[SubjectResponse]]:
    state = await subjects_loader(client).load(_require_http_url(api, "api"), test_id)
    return ApiResponse.success(
        data=[_to_subject_response(subject) for subject in state.data],
        meta={"total": len(state.data)},
    )


@router.get(
    "/titles",
    response_model=ApiResponse[list[TestTitleResponse]],
    summary="List tests of a subject",
)
async def list_test_titles(
    api: str = Query(..., min_length=1, description="Provider API URL"),
    test_id: str = Query(..., min_length=1, description="Test series ID"),
    subject_id: str = Query(..., min_length=1, description="Subject ID"),
    client: CatalogClient = Depends(get_catalog_client),
) -> ApiResponse[list[TestTitleResponse]]:
    state = await titles_loader(client).load(
        _require_http_url(api, "api"), test_id, subject_id
    )
    return ApiResponse.success(
        data=[_to_title_response(title) for title in state.data],
        meta={"total": len(state.data)},
    )


@router.get(
    "/questions",
    response_model=ApiResponse[list[QuizQuestionResponse]],
    summary="Fetch the questions of a test",
)
async def list_quiz_questions(
    url: str = Query(..., min_length=1, description="Questions JSON URL"),
    client: CatalogClient = Depends(get_catalog_client),
) -> ApiResponse[list[QuizQuestionResponse]]:
    state = await quiz_questions_loader(client).load(_require_http_url(url, "url"))
    return ApiResponse.success(
        data=[_to_question_response(question) for question in state.data],
        meta={"total": len(state.data)},
    )
