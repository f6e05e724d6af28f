"""Build catalog entities from raw upstream records."""

from collections.abc import Mapping
from typing import Any

from src.modules.catalog.domain.aliases import (
    NUMBERED_OPTION_KEYS,
    OPTION_ALIASES,
    PROVIDER_ALIASES,
    QUESTION_ALIASES,
    SERIES_ALIASES,
    SUBJECT_ALIASES,
    TITLE_ALIASES,
    is_present,
    resolve_fields,
    to_str,
)
from src.modules.catalog.domain.entities import (
    Provider,
    QuizOption,
    QuizQuestion,
    Subject,
    TestSeriesSummary,
    TestTitle,
)


def normalize_provider(raw: Mapping[str, Any]) -> Provider | None:
    """Providers without an API URL cannot be traced back, so they are dropped."""
    fields = resolve_fields(raw, PROVIDER_ALIASES)
    api = fields["api"]
    if not api:
        return None
    return Provider(name=fields["name"] or api, api=api)


def normalize_series(raw: Mapping[str, Any]) -> TestSeriesSummary:
    return TestSeriesSummary(**resolve_fields(raw, SERIES_ALIASES))


def normalize_subject(raw: Mapping[str, Any]) -> Subject:
    return Subject(**resolve_fields(raw, SUBJECT_ALIASES))


def normalize_title(raw: Mapping[str, Any]) -> TestTitle:
    return TestTitle(**resolve_fields(raw, TITLE_ALIASES))


def normalize_question(raw: Mapping[str, Any]) -> QuizQuestion:
    fields = resolve_fields(raw, QUESTION_ALIASES)
    return QuizQuestion(options=_extract_options(raw), **fields)


def _extract_options(raw: Mapping[str, Any]) -> list[QuizOption]:
    options_value = raw.get("options")
    if isinstance(options_value, list):
        return _options_from_list(options_value)

    options: list[QuizOption] = []
    for key in NUMBERED_OPTION_KEYS:
        value = raw.get(key)
        if not is_present(value):
            continue
        text = to_str(value)
        if text:
            options.append(QuizOption(id=key.removeprefix("option_"), text_html=text))
    return options


def _options_from_list(values: list[Any]) -> list[QuizOption]:
    options: list[QuizOption] = []
    for position, value in enumerate(values, start=1):
        if isinstance(value, Mapping):
            fields = resolve_fields(value, OPTION_ALIASES)
            text = fields["text_html"]
            option_id = fields["id"] or str(position)
        else:
            text = to_str(value) if is_present(value) else None
            option_id = str(position)
        if text:
            options.append(QuizOption(id=option_id, text_html=text))
    return options
