from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from .schemas import ScoreResult

MAX_STARS = 5


class FeedbackTier(str, Enum):
    PERFECT = "perfect"
    GREAT = "great"
    GOOD = "good"
    LOW = "low"


FEEDBACK_MESSAGES = {
    FeedbackTier.PERFECT: "Perfect Score!",
    FeedbackTier.GREAT: "Great job!",
    FeedbackTier.GOOD: "Nice try!",
    FeedbackTier.LOW: "Better luck next time!",
}

# inclusive lower bounds, highest first
_TIER_THRESHOLDS = (
    (80.0, FeedbackTier.GREAT),
    (50.0, FeedbackTier.GOOD),
)


@dataclass(frozen=True)
class StarRating:
    full_stars: int
    half_star: bool
    empty_stars: int


@dataclass(frozen=True)
class ScorePresentation:
    star_rating: StarRating
    feedback_tier: FeedbackTier

    @property
    def feedback(self) -> str:
        return FEEDBACK_MESSAGES[self.feedback_tier]


def feedback_tier(percentage: float) -> FeedbackTier:
    if percentage == 100:
        return FeedbackTier.PERFECT
    for threshold, tier in _TIER_THRESHOLDS:
        if percentage >= threshold:
            return tier
    return FeedbackTier.LOW


def star_rating(percentage: float) -> StarRating:
    star_count = percentage / 100 * MAX_STARS
    full = math.floor(star_count)
    half = (star_count - full) >= 0.5
    return StarRating(full_stars=full, half_star=half, empty_stars=MAX_STARS - full - (1 if half else 0))


def present(percentage: float) -> ScorePresentation:
    """Map a 0..100 accuracy percentage to stars and a feedback tier."""
    if isinstance(percentage, bool) or not isinstance(percentage, (int, float)):
        raise TypeError(f"percentage must be a number, got {type(percentage)!r}")
    if math.isnan(percentage) or not 0 <= percentage <= 100:
        raise ValueError(f"percentage must be within 0..100, got {percentage!r}")
    return ScorePresentation(star_rating=star_rating(percentage), feedback_tier=feedback_tier(percentage))


@dataclass(frozen=True)
class ScoreCard:
    """Display-ready lines for a scored play-through."""

    result: ScoreResult
    presentation: ScorePresentation

    @classmethod
    def from_result(cls, result: ScoreResult) -> "ScoreCard":
        return cls(result=result, presentation=present(result.percentage))

    @property
    def headline(self) -> str:
        return self.presentation.feedback

    @property
    def fraction(self) -> str:
        return f"{self.result.correct_answers}/{self.result.total_questions}"

    @property
    def score_line(self) -> str:
        return f"Score: {_number(self.result.score)} / {_number(self.result.max_score)}"

    @property
    def accuracy_line(self) -> str:
        return f"{_number(self.result.percentage)}% Accuracy"


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
