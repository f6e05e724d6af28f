"""Field alias resolution and entity normalisation tests."""

from uuid import UUID

import pytest

from src.modules.catalog.domain.aliases import (
    FieldAlias,
    is_present,
    to_bool,
    to_float,
    to_int,
    to_str,
)
from src.modules.catalog.domain.normalizers import (
    normalize_provider,
    normalize_question,
    normalize_series,
    normalize_subject,
    normalize_title,
)


class TestCoercion:
    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_values_are_not_present(self, value):
        assert not is_present(value)

    @pytest.mark.parametrize("value", [0, False, "0", [], {}])
    def test_falsy_values_are_present(self, value):
        assert is_present(value)

    def test_to_str(self):
        assert to_str(" SSC ") == "SSC"
        assert to_str(101) == "101"
        assert to_str(12.0) == "12"
        assert to_str(True) is None
        assert to_str({"a": 1}) is None

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (True, True),
            (0, False),
            (1, True),
            ("1", True),
            ("Yes", True),
            ("false", False),
            ("maybe", None),
        ],
    )
    def test_to_bool(self, value, expected):
        assert to_bool(value) is expected

    def test_to_float_and_int(self):
        assert to_float("499") == 499.0
        assert to_float("abc") is None
        assert to_float(float("nan")) is None
        assert to_int("25") == 25
        assert to_int("2.5") is None
        assert to_int(True) is None


class TestFieldAlias:
    def test_first_present_key_wins(self):
        alias = FieldAlias("name", ("name", "series_name"), to_str, lambda: "")
        assert alias.resolve({"name": "A", "series_name": "B"}) == "A"

    def test_blank_value_falls_through(self):
        alias = FieldAlias("name", ("name", "series_name"), to_str, lambda: "")
        assert alias.resolve({"name": "  ", "series_name": "B"}) == "B"

    def test_uncoercible_value_falls_through(self):
        alias = FieldAlias("total", ("total_tests", "test_count"), to_int, lambda: 0)
        assert alias.resolve({"total_tests": "many", "test_count": "7"}) == 7

    def test_default_when_nothing_matches(self):
        alias = FieldAlias("total", ("total_tests",), to_int, lambda: 0)
        assert alias.resolve({}) == 0


class TestNormalizeProvider:
    def test_alias_keys(self):
        provider = normalize_provider(
            {"title": "Beta Classes", "api_url": "https://beta.classx.co.in"}
        )
        assert provider is not None
        assert provider.name == "Beta Classes"
        assert provider.api == "https://beta.classx.co.in"

    def test_name_falls_back_to_api(self):
        provider = normalize_provider({"api": "https://gamma.classx.co.in"})
        assert provider is not None
        assert provider.name == "https://gamma.classx.co.in"

    def test_without_api_is_dropped(self):
        assert normalize_provider({"name": "Orphan"}) is None


class TestNormalizeSeries:
    def test_legacy_keys(self, sample_series_data):
        series = normalize_series(sample_series_data["data"][0])

        assert series.id == "101"
        assert series.name == "SSC CGL Mock Tests"
        assert series.logo == "https://alpha.classx.co.in/logo.png"
        assert series.is_paid is True
        assert series.total_tests == 25
        assert series.price == 499.0
        assert series.provider_name is None

    def test_legacy_keys_resolve_in_priority_order(self):
        series = normalize_series({"test_id": "9", "series_name": "Foo", "is_paid": 1})

        assert series.id == "9"
        assert series.name == "Foo"
        assert series.is_paid is True

    def test_id_beats_test_id(self):
        series = normalize_series({"id": "1", "test_id": "9", "name": "Bar"})
        assert series.id == "1"

    def test_defaults(self):
        series = normalize_series({})

        assert UUID(hex=series.id).hex == series.id
        assert len(series.id) == 32
        assert series.name == ""
        assert series.is_paid is False
        assert series.total_tests == 0
        assert series.price is None

    def test_generated_ids_are_unique(self):
        assert normalize_series({}).id != normalize_series({}).id


class TestNormalizeSubjectAndTitle:
    def test_subject(self):
        subject = normalize_subject(
            {"subject_id": "7", "subject_name": "Quant", "test_count": 4}
        )
        assert subject.id == "7"
        assert subject.name == "Quant"
        assert subject.total_tests == 4

    def test_title(self):
        title = normalize_title(
            {
                "title_id": 9,
                "title": "Mock 1",
                "duration": "60",
                "question_count": "100",
                "marks": 200,
                "json_url": "https://testseries-assets.classx.co.in/q/9.json",
                "is_paid": "0",
                "attempts": 3,
            }
        )
        assert title.id == "9"
        assert title.name == "Mock 1"
        assert title.duration_minutes == 60
        assert title.total_questions == 100
        assert title.total_marks == 200
        assert title.questions_url.endswith("/9.json")
        assert title.is_premium is False
        assert title.attempt_count == 3


class TestNormalizeQuestion:
    def test_numbered_options(self, sample_question_data):
        question = normalize_question(sample_question_data[0])

        assert question.id == "1"
        assert question.question_html == "<p>2 + 2 = ?</p>"
        assert [(o.id, o.text_html) for o in question.options] == [
            ("1", "3"),
            ("2", "4"),
        ]
        assert question.correct_answer_id == "2"
        assert question.solution_html == "<p>Basic addition</p>"

    def test_option_list_of_dicts(self):
        question = normalize_question(
            {
                "id": "q1",
                "question_text": "Capital of India?",
                "options": [
                    {"option_id": "a", "option_text": "Delhi"},
                    {"text": "Mumbai"},
                    {"option_id": "c", "text": ""},
                ],
                "correct_option": "a",
            }
        )
        assert [(o.id, o.text_html) for o in question.options] == [
            ("a", "Delhi"),
            ("2", "Mumbai"),
        ]
        assert question.correct_answer_id == "a"

    def test_option_list_of_strings(self):
        question = normalize_question({"id": 5, "options": ["Yes", "No", None]})
        assert [(o.id, o.text_html) for o in question.options] == [
            ("1", "Yes"),
            ("2", "No"),
        ]

    def test_no_options(self):
        question = normalize_question({"id": 5, "question": "Essay"})
        assert question.options == []
        assert question.solution_html is None
