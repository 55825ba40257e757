from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator


# Quiz Schemas
class Answer(BaseModel):
    answer_index: int
    answer_text: str


class Question(BaseModel):
    question_text: str
    question_image: Optional[str] = None
    # server-assigned identity, not the position in `questions`
    question_index: int
    answers: list[Answer] = Field(default_factory=list)

    def offers(self, answer_index: int) -> bool:
        return any(a.answer_index == answer_index for a in self.answers)


class QuizData(BaseModel):
    id: str
    name: str
    description: str = ""
    thumbnail_image: Optional[str] = None
    is_published: bool = False
    questions: list[Question] = Field(default_factory=list)
    score_per_question: int = 0


class SubmitAnswerIn(BaseModel):
    question_index: int
    selected_answer_index: int


class SubmitQuizIn(BaseModel):
    answers: list[SubmitAnswerIn]


# server-side rounding can push a percentage just past its bounds
PERCENTAGE_TOLERANCE = 0.01


class ScoreResult(BaseModel):
    correct_answers: int = Field(ge=0)
    total_questions: int = Field(ge=0)
    max_score: float = Field(ge=0)
    score: float = Field(ge=0)
    percentage: float = Field(allow_inf_nan=False)

    @field_validator("percentage")
    @classmethod
    def clamp_rounding_drift(cls, v: float) -> float:
        if not -PERCENTAGE_TOLERANCE <= v <= 100 + PERCENTAGE_TOLERANCE:
            raise ValueError("percentage must be within 0..100")
        return min(max(v, 0.0), 100.0)


class PlayCountIn(BaseModel):
    game_id: str


# Game Schemas
class LikeIn(BaseModel):
    game_id: str
    is_like: bool


class GameTemplate(BaseModel):
    id: str
    slug: str
    name: str
    logo: str = ""
    description: str = ""
    is_time_limit_based: bool = False
    is_life_based: bool = False


class GameSummary(BaseModel):
    id: str
    name: str
    description: str = ""
    thumbnail_image: Optional[str] = None
    game_template_name: str = ""
    game_template_slug: str = ""
    total_liked: Optional[int] = 0
    total_played: Optional[int] = 0
    creator_id: str = ""
    creator_name: Optional[str] = ""
    is_game_liked: Optional[bool] = False

    # local display state, seeded from is_game_liked
    is_liked: bool = False


# Project Schemas
DEFAULT_TEMPLATE_SLUG = "anagram"


class Project(BaseModel):
    id: str
    name: str
    description: str = ""
    thumbnail_image: Optional[str] = None
    is_published: bool = False
    game_template: Optional[int] = None
    game_template_slug: str = ""

    @property
    def slug(self) -> str:
        return self.game_template_slug or DEFAULT_TEMPLATE_SLUG
