"""Field alias tables for upstream catalog payloads.

Each provider is a differently shaped legacy API, so one logical field arrives
under several historical key names. For every target field the table lists
the source keys in priority order; the first key whose value is present and
coerces cleanly wins, otherwise the field default applies.

A value is present when the key exists, is not None, and is not a blank
string.
"""

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

_TRUE_STRINGS = frozenset({"1", "true", "yes", "y", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "n", "off"})


def is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def to_str(value: Any) -> str | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and math.isfinite(value):
        return str(int(value)) if value.is_integer() else str(value)
    return None


def to_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return value != 0
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_STRINGS:
            return True
        if normalized in _FALSE_STRINGS:
            return False
    return None


def to_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def to_int(value: Any) -> int | None:
    number = to_float(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def new_id() -> str:
    return uuid4().hex


@dataclass(frozen=True)
class FieldAlias:
    """Priority-ordered source keys for one target field."""

    target: str
    keys: tuple[str, ...]
    coerce: Callable[[Any], Any]
    default: Callable[[], Any] = lambda: None

    def resolve(self, raw: Mapping[str, Any]) -> Any:
        for key in self.keys:
            value = raw.get(key)
            if not is_present(value):
                continue
            coerced = self.coerce(value)
            if coerced is not None:
                return coerced
        return self.default()


def resolve_fields(
    raw: Mapping[str, Any], aliases: tuple[FieldAlias, ...]
) -> dict[str, Any]:
    return {alias.target: alias.resolve(raw) for alias in aliases}


PROVIDER_ALIASES: tuple[FieldAlias, ...] = (
    FieldAlias("name", ("name", "title", "provider_name"), to_str, lambda: ""),
    FieldAlias("api", ("api", "api_url", "apiUrl", "url", "base_url"), to_str),
)

SERIES_ALIASES: tuple[FieldAlias, ...] = (
    FieldAlias("id", ("id", "test_id", "series_id", "slug"), to_str, new_id),
    FieldAlias("name", ("name", "series_name", "title"), to_str, lambda: ""),
    FieldAlias("logo", ("logo", "series_logo", "image", "thumbnail"), to_str),
    FieldAlias("is_paid", ("is_paid", "isPaid", "paid"), to_bool, lambda: False),
    FieldAlias(
        "total_tests", ("total_tests", "totalTests", "test_count"), to_int, lambda: 0
    ),
    FieldAlias("expires_on", ("expires_on", "expiry_date", "validity"), to_str),
    FieldAlias("price", ("price", "offer_price", "amount"), to_float),
)

SUBJECT_ALIASES: tuple[FieldAlias, ...] = (
    FieldAlias("id", ("id", "subject_id"), to_str, new_id),
    FieldAlias("name", ("name", "subject_name", "title"), to_str, lambda: ""),
    FieldAlias("logo", ("logo", "subject_logo", "image"), to_str),
    FieldAlias(
        "total_tests", ("total_tests", "totalTests", "test_count"), to_int, lambda: 0
    ),
)

TITLE_ALIASES: tuple[FieldAlias, ...] = (
    FieldAlias("id", ("id", "title_id", "test_id"), to_str, new_id),
    FieldAlias("name", ("name", "title_name", "title"), to_str, lambda: ""),
    FieldAlias(
        "duration_minutes", ("duration_minutes", "duration", "time"), to_int, lambda: 0
    ),
    FieldAlias(
        "total_questions",
        ("total_questions", "question_count", "questions"),
        to_int,
        lambda: 0,
    ),
    FieldAlias("total_marks", ("total_marks", "marks"), to_int, lambda: 0),
    FieldAlias(
        "questions_url",
        ("questions_url", "questions_json_url", "json_url", "test_questions_url"),
        to_str,
        lambda: "",
    ),
    FieldAlias(
        "is_premium", ("is_premium", "is_paid", "premium"), to_bool, lambda: False
    ),
    FieldAlias("attempt_count", ("attempt_count", "attempts", "total_attempts"), to_int),
)

QUESTION_ALIASES: tuple[FieldAlias, ...] = (
    FieldAlias("id", ("id", "question_id", "qid"), to_str, new_id),
    FieldAlias(
        "question_html",
        ("question_html", "question", "question_text", "text"),
        to_str,
        lambda: "",
    ),
    FieldAlias(
        "correct_answer_id",
        ("correct_answer_id", "correct_answer", "answer", "correct_option"),
        to_str,
        lambda: "",
    ),
    FieldAlias(
        "solution_html",
        ("solution_html", "solution", "explanation", "solution_text"),
        to_str,
    ),
)

OPTION_ALIASES: tuple[FieldAlias, ...] = (
    FieldAlias("id", ("id", "option_id", "key"), to_str),
    FieldAlias("text_html", ("text_html", "text", "option_text", "value"), to_str),
)

# option_1 ... option_10 when a provider flattens options into the question
NUMBERED_OPTION_KEYS: tuple[str, ...] = tuple(f"option_{n}" for n in range(1, 11))
