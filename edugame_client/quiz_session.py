"""Quiz play-through state machine.

Loading -> Playing -> Submitting -> Scored, with Failed reachable from the
fetch and submit steps. Local transitions are synchronous; the machine only
yields while waiting on the remote authority.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from .api import GamePlatformAPI
from .errors import FetchFailure, InvalidTransition, SideEffectFailure, SubmitFailure
from .schemas import Question, QuizData, ScoreResult, SubmitAnswerIn
from .scoring import ScoreCard

logger = logging.getLogger("edugame_client.quiz")

Notify = Callable[[str, str], None]


class SessionPhase(str, Enum):
    LOADING = "loading"
    PLAYING = "playing"
    SUBMITTING = "submitting"
    SCORED = "scored"
    FAILED = "failed"


class FailedStep(str, Enum):
    FETCH = "fetch"
    SUBMIT = "submit"


@dataclass
class QuizSession:
    questions: tuple[Question, ...] = ()
    current_index: int = 0
    selected_answer: Optional[int] = None
    recorded_answers: list[SubmitAnswerIn] = field(default_factory=list)
    phase: SessionPhase = SessionPhase.LOADING
    score_result: Optional[ScoreResult] = None
    failed_step: Optional[FailedStep] = None
    error: Optional[FetchFailure | SubmitFailure] = None
    side_effect_error: Optional[SideEffectFailure] = None

    @classmethod
    def start(cls, questions: tuple[Question, ...]) -> "QuizSession":
        return cls(questions=questions, phase=SessionPhase.PLAYING)


class QuizSessionMachine:
    def __init__(self, api: GamePlatformAPI, quiz_id: str, *, notify: Optional[Notify] = None) -> None:
        self.api = api
        self.quiz_id = quiz_id
        self.quiz: Optional[QuizData] = None
        self.session = QuizSession()
        self._notify = notify
        self._disposed = False
        self._fetching = False

    # -------------------------
    # Read-only views
    # -------------------------

    @property
    def phase(self) -> SessionPhase:
        return self.session.phase

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def current_question(self) -> Optional[Question]:
        if self.session.phase is not SessionPhase.PLAYING:
            return None
        return self.session.questions[self.session.current_index]

    @property
    def question_number(self) -> int:
        return self.session.current_index + 1

    @property
    def total_questions(self) -> int:
        return len(self.session.questions)

    @property
    def is_first_question(self) -> bool:
        return self.session.current_index == 0

    @property
    def is_last_question(self) -> bool:
        return self.session.current_index == len(self.session.questions) - 1

    @property
    def progress(self) -> float:
        if not self.session.questions:
            return 0.0
        return self.session.current_index / len(self.session.questions) * 100

    @property
    def score_card(self) -> Optional[ScoreCard]:
        if self.session.phase is not SessionPhase.SCORED or self.session.score_result is None:
            return None
        return ScoreCard.from_result(self.session.score_result)

    # -------------------------
    # Loading
    # -------------------------

    async def load(self) -> QuizSession:
        if self._fetching:
            return self.session
        self._require(SessionPhase.LOADING, SessionPhase.FAILED, action="load")
        if self.session.phase is SessionPhase.FAILED and self.session.failed_step is not FailedStep.FETCH:
            raise InvalidTransition("Only a failed fetch can be reloaded.")
        self.session = QuizSession()

        self._fetching = True
        try:
            result = await self.api.fetch_quiz(self.quiz_id)
        finally:
            self._fetching = False
        if self._disposed:
            return self.session

        if not result.ok:
            logger.error("Quiz %s could not be loaded: %s", self.quiz_id, result.failure.detail)
            return self._fail(FailedStep.FETCH, FetchFailure(failure=result.failure))

        quiz: QuizData = result.data
        if not quiz.questions:
            logger.error("Quiz %s has no questions", self.quiz_id)
            return self._fail(FailedStep.FETCH, FetchFailure("Quiz has no questions."))

        self.quiz = quiz
        self.session = QuizSession.start(tuple(quiz.questions))
        logger.info("Quiz %s loaded with %s questions", self.quiz_id, len(quiz.questions))
        return self.session

    # -------------------------
    # Playing
    # -------------------------

    def select_answer(self, answer_index: int) -> None:
        self._require(SessionPhase.PLAYING, action="select an answer")
        question = self.session.questions[self.session.current_index]
        if not question.offers(answer_index):
            raise InvalidTransition(
                f"Answer {answer_index} is not offered by question {question.question_index}."
            )
        self.session.selected_answer = answer_index

    async def advance(self) -> QuizSession:
        """Record the selected answer and move on; the last answer submits."""
        if self.session.phase is SessionPhase.SUBMITTING:
            # re-entrant call while a submit is pending
            logger.debug("advance() ignored while submitting quiz %s", self.quiz_id)
            return self.session
        self._require(SessionPhase.PLAYING, action="advance")
        session = self.session
        if session.selected_answer is None:
            raise InvalidTransition("Select an answer before advancing.")

        question = session.questions[session.current_index]
        session.recorded_answers.append(
            SubmitAnswerIn(
                question_index=question.question_index,
                selected_answer_index=session.selected_answer,
            )
        )

        if session.current_index < len(session.questions) - 1:
            session.current_index += 1
            session.selected_answer = None
            return session

        return await self._submit()

    def retreat(self) -> None:
        """Step back one question and clear the selection.

        The answer recorded for the question we return to is dropped, along
        with anything after it, so ``recorded_answers`` always holds exactly
        ``current_index`` entries while playing. Advancing again records the
        new choice once; nothing is restored from the dropped entry.
        """
        self._require(SessionPhase.PLAYING, action="go back")
        session = self.session
        if session.current_index == 0:
            raise InvalidTransition("Already at the first question.")
        session.current_index -= 1
        session.selected_answer = None
        del session.recorded_answers[session.current_index:]

    # -------------------------
    # Submitting
    # -------------------------

    async def _submit(self) -> QuizSession:
        session = self.session
        session.phase = SessionPhase.SUBMITTING
        session.failed_step = None
        session.error = None

        result = await self.api.submit_quiz(self.quiz_id, list(session.recorded_answers))
        if self._disposed or session is not self.session:
            return session

        if not result.ok:
            logger.error("Quiz %s submit failed: %s", self.quiz_id, result.failure.detail)
            return self._fail(FailedStep.SUBMIT, SubmitFailure(failure=result.failure))

        score: ScoreResult = result.data

        played = await self.api.add_play_count(self.quiz_id)
        if self._disposed or session is not self.session:
            return session
        if not played.ok:
            logger.warning("Play count for %s not updated: %s", self.quiz_id, played.failure.detail)
            session.side_effect_error = SideEffectFailure(failure=played.failure)
            self._emit("error", session.side_effect_error.message)

        session.score_result = score
        session.phase = SessionPhase.SCORED
        logger.info("Quiz %s scored %s%%", self.quiz_id, score.percentage)
        return session

    async def retry(self) -> QuizSession:
        """Repeat whichever step failed."""
        self._require(SessionPhase.FAILED, action="retry")
        if self.session.failed_step is FailedStep.FETCH:
            return await self.load()
        return await self._submit()

    # -------------------------
    # Scored
    # -------------------------

    def restart(self) -> QuizSession:
        self._require(SessionPhase.SCORED, action="restart")
        self.session = QuizSession.start(self.session.questions)
        return self.session

    def close(self) -> None:
        self._disposed = True

    # -------------------------
    # Helpers
    # -------------------------

    def _require(self, *phases: SessionPhase, action: str) -> None:
        if self._disposed:
            raise InvalidTransition(f"Cannot {action}: session closed.")
        if self.session.phase not in phases:
            raise InvalidTransition(f"Cannot {action} while {self.session.phase.value}.")

    def _fail(self, step: FailedStep, error: FetchFailure | SubmitFailure) -> QuizSession:
        self.session.phase = SessionPhase.FAILED
        self.session.failed_step = step
        self.session.error = error
        self._emit("error", error.message)
        return self.session

    def _emit(self, level: str, message: str) -> None:
        if self._notify is not None:
            self._notify(level, message)
