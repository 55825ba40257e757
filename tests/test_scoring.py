from __future__ import annotations

import pytest
from pydantic import ValidationError

from edugame_client.schemas import ScoreResult
from edugame_client.scoring import FeedbackTier, ScoreCard, present


@pytest.mark.parametrize("percentage", [p / 2 for p in range(0, 201)])
def test_star_counts_always_sum_to_five(percentage: float) -> None:
    stars = present(percentage).star_rating

    assert stars.full_stars + (1 if stars.half_star else 0) + stars.empty_stars == 5
    assert stars.full_stars >= 0
    assert stars.empty_stars >= 0


@pytest.mark.parametrize(
    ("percentage", "expected"),
    [
        (0, (0, False, 5)),
        (10, (0, True, 4)),
        (20, (1, False, 4)),
        (30, (1, True, 3)),
        (50, (2, True, 2)),
        (66.67, (3, False, 2)),
        (70, (3, True, 1)),
        (90, (4, True, 0)),
        (100, (5, False, 0)),
    ],
)
def test_star_rating_values(percentage: float, expected: tuple[int, bool, int]) -> None:
    stars = present(percentage).star_rating

    assert (stars.full_stars, stars.half_star, stars.empty_stars) == expected


@pytest.mark.parametrize(
    ("percentage", "tier"),
    [
        (100, FeedbackTier.PERFECT),
        (99.99, FeedbackTier.GREAT),
        (80, FeedbackTier.GREAT),
        (79.9, FeedbackTier.GOOD),
        (50, FeedbackTier.GOOD),
        (49.99, FeedbackTier.LOW),
        (0, FeedbackTier.LOW),
    ],
)
def test_feedback_tier_boundaries(percentage: float, tier: FeedbackTier) -> None:
    assert present(percentage).feedback_tier is tier


@pytest.mark.parametrize("percentage", [-0.1, 100.01, float("nan")])
def test_out_of_range_percentage_is_rejected(percentage: float) -> None:
    with pytest.raises(ValueError):
        present(percentage)


def test_non_numeric_percentage_is_rejected() -> None:
    with pytest.raises(TypeError):
        present("80")  # type: ignore[arg-type]


def test_score_card_lines() -> None:
    card = ScoreCard.from_result(
        ScoreResult(correct_answers=3, total_questions=3, max_score=30, score=30, percentage=100)
    )

    assert card.headline == "Perfect Score!"
    assert card.fraction == "3/3"
    assert card.score_line == "Score: 30 / 30"
    assert card.accuracy_line == "100% Accuracy"


@pytest.mark.parametrize(("raw", "expected"), [(100.0000001, 100.0), (-0.0000001, 0.0), (66.67, 66.67)])
def test_score_result_absorbs_rounding_drift(raw: float, expected: float) -> None:
    result = ScoreResult(correct_answers=1, total_questions=1, max_score=10, score=10, percentage=raw)

    assert result.percentage == expected


@pytest.mark.parametrize("raw", [150, -5, float("nan")])
def test_score_result_rejects_real_out_of_range_percentage(raw: float) -> None:
    with pytest.raises(ValidationError):
        ScoreResult(correct_answers=1, total_questions=1, max_score=10, score=10, percentage=raw)
