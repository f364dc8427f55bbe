# app/schemas/quiz.py
from datetime import datetime
from typing import Annotated, List, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

MIN_SCORE = 1
MAX_SCORE = 5

Score = Annotated[int, Field(ge=MIN_SCORE, le=MAX_SCORE)]

# request bodies: no coercion of "3" or true into an int
StrictScore = Annotated[int, Field(ge=MIN_SCORE, le=MAX_SCORE, strict=True)]


# =========================
# Quiz configuration
# =========================
class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str = Field(..., min_length=1)
    question: str = Field(..., min_length=1)


class ReferenceProfile(BaseModel):
    """A named delegate stance, one score per category."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    scores: List[Score]


class QuizConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = "Political Alignment Quiz"
    questions: List[Question] = Field(..., min_length=1)
    profiles: List[ReferenceProfile] = Field(default_factory=list)

    @property
    def categories(self) -> List[str]:
        # first-occurrence order
        return list(dict.fromkeys(q.category for q in self.questions))

    @model_validator(mode="after")
    def check_shape(self) -> "QuizConfig":
        categories = self.categories

        seen = set()
        for profile in self.profiles:
            if len(profile.scores) != len(categories):
                raise ValueError(
                    f"Profile '{profile.name}' has {len(profile.scores)} scores, "
                    f"expected {len(categories)} (one per category)"
                )
            if profile.name in seen:
                raise ValueError(f"Duplicate profile name '{profile.name}'")
            seen.add(profile.name)

        return self


# =========================
# History
# =========================
class HistoryEntry(BaseModel):
    """One completed quiz, as persisted in the history slot."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date: datetime
    scores: List[int]
    match_name: str = Field(..., alias="matchName")


# =========================
# Requests
# =========================
class AnswerRequest(BaseModel):
    score: StrictScore


# =========================
# Presentation payloads
# =========================
class QuestionView(BaseModel):
    state: Literal["in_progress"] = "in_progress"
    title: str
    category: str
    question: str
    question_number: int
    total_questions: int


class ChartPoint(BaseModel):
    subject: str
    user: int
    delegate: int


class ResultView(BaseModel):
    state: Literal["completed"] = "completed"
    match_name: str
    similarity: int
    max_similarity: int
    chart_data: List[ChartPoint]
    history: List[HistoryEntry]


class ErrorView(BaseModel):
    state: Literal["errored"] = "errored"
    error: str


class QuestionBankResponse(BaseModel):
    title: str
    categories: List[str]
    questions: List[Question]
