"""Catalog API schemas."""

from pydantic import BaseModel, Field


class ProviderResponse(BaseModel):
    name: str = Field(..., description="Provider name")
    api: str = Field(..., description="Provider API base URL")


class TestSeriesResponse(BaseModel):
    """Test series as shown on the catalog page."""

    __test__ = False

    id: str = Field(..., description="Series ID")
    name: str = Field(..., description="Series name")
    logo: str | None = Field(None, description="Logo URL")
    is_paid: bool = Field(..., description="Requires purchase")
    total_tests: int = Field(..., description="Number of tests")
    expires_on: str | None = Field(None, description="Expiry")
    price: float | None = Field(None, description="Price")
    provider_name: str | None = Field(None, description="Origin provider name")
    provider_api: str | None = Field(None, description="Origin provider API")


class SubjectResponse(BaseModel):
    id: str = Field(..., description="Subject ID")
    name: str = Field(..., description="Subject name")
    logo: str | None = Field(None, description="Logo URL")
    total_tests: int = Field(..., description="Number of tests")


class TestTitleResponse(BaseModel):
    __test__ = False

    id: str = Field(..., description="Test ID")
    name: str = Field(..., description="Test name")
    duration_minutes: int = Field(..., description="Time limit in minutes")
    total_questions: int = Field(..., description="Question count")
    total_marks: int = Field(..., description="Maximum marks")
    questions_url: str = Field(..., description="Questions JSON URL")
    is_premium: bool = Field(..., description="Premium only")
    attempt_count: int | None = Field(None, description="Attempts so far")


class QuizOptionResponse(BaseModel):
    id: str
    text_html: str


class QuizQuestionResponse(BaseModel):
    id: str = Field(..., description="Question ID")
    question_html: str = Field(..., description="Question body (HTML)")
    options: list[QuizOptionResponse] = Field(..., description="Answer options")
    correct_answer_id: str = Field(..., description="ID of the correct option")
    solution_html: str | None = Field(None, description="Worked solution (HTML)")
