"""Catalog domain entities.

Provider-agnostic shapes that every upstream payload is normalised into.
"""

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field


class Provider(BaseModel):
    """One third-party content source."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name")
    api: str = Field(..., description="Provider API base URL")


class TestSeriesSummary(BaseModel):
    """A purchasable or free bundle of tests offered by a provider."""

    __test__ = False

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Series ID as used by the provider")
    name: str = Field(default="", description="Series name")
    logo: str | None = Field(default=None, description="Logo URL")
    is_paid: bool = Field(default=False, description="Requires purchase")
    total_tests: int = Field(default=0, description="Number of tests")
    expires_on: str | None = Field(default=None, description="Expiry as sent upstream")
    price: float | None = Field(default=None, description="Price")
    provider_name: str | None = Field(default=None, description="Origin provider")
    provider_api: str | None = Field(default=None, description="Origin provider API")

    def stamped(self, provider: Provider) -> "TestSeriesSummary":
        """Copy tagged with the provider it was fetched from."""
        return self.model_copy(
            update={"provider_name": provider.name, "provider_api": provider.api}
        )


class Subject(BaseModel):
    """Subject inside one (provider, test series) pair."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    logo: str | None = None
    total_tests: int = 0


class TestTitle(BaseModel):
    """A single attemptable test inside a subject."""

    __test__ = False

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    duration_minutes: int = 0
    total_questions: int = 0
    total_marks: int = 0
    questions_url: str = ""
    is_premium: bool = False
    attempt_count: int | None = None


class QuizOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text_html: str


class QuizQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    question_html: str = ""
    options: list[QuizOption] = Field(default_factory=list)
    correct_answer_id: str = ""
    solution_html: str | None = None


@dataclass(frozen=True)
class BatchResult[T]:
    """Items one provider contributed to an aggregation run."""

    provider: Provider
    data: list[T] = field(default_factory=list)
