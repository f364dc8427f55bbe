# app/engine/quiz_session.py

"""
QUIZ SESSION STATE MACHINE

States:
    IN_PROGRESS(question_index) -> COMPLETED(match) | ERRORED(reason)

Transitions:
    answer(score)  only while IN_PROGRESS; the last answer aggregates and matches
    reset()        from any state back to IN_PROGRESS(0) with all answers cleared

COMPLETED and ERRORED are terminal until reset().
"""

from enum import Enum
from typing import List, Optional
import logging

from app.engine.scorer import AlignmentScorer, MatchResult, NoProfilesAvailableError
from app.schemas.quiz import MAX_SCORE, MIN_SCORE, Question

logger = logging.getLogger(__name__)

NO_MATCH_MESSAGE = "No matching delegate found. Please try again."


class QuizStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ERRORED = "errored"


class InvalidAnswerError(ValueError):
    pass


class QuizStateError(RuntimeError):
    pass


class QuizSession:
    def __init__(self, scorer: AlignmentScorer):
        self.scorer = scorer
        self.questions: List[Question] = list(scorer.config.questions)
        self.reset()

    def reset(self) -> None:
        self.status = QuizStatus.IN_PROGRESS
        self.question_index = 0
        self.answers: List[int] = [0] * len(self.questions)
        self.aggregated_scores: Optional[List[int]] = None
        self.match: Optional[MatchResult] = None
        self.error: Optional[str] = None

    @property
    def is_finished(self) -> bool:
        return self.status != QuizStatus.IN_PROGRESS

    @property
    def current_question(self) -> Optional[Question]:
        if self.is_finished:
            return None
        return self.questions[self.question_index]

    @property
    def progress(self) -> str:
        return f"Question {self.question_index + 1} of {len(self.questions)}"

    def answer(self, score: int) -> QuizStatus:
        """
        Record a score for the current question and advance.

        Returns the status after the transition.
        """
        if self.is_finished:
            raise QuizStateError(
                f"Quiz is {self.status.value}; reset it to answer again"
            )

        # bool is an int subclass but never a valid answer
        if isinstance(score, bool) or not isinstance(score, int):
            raise InvalidAnswerError(f"Score must be an integer, got {score!r}")
        if not MIN_SCORE <= score <= MAX_SCORE:
            raise InvalidAnswerError(
                f"Score must be between {MIN_SCORE} and {MAX_SCORE}, got {score}"
            )

        self.answers[self.question_index] = score

        if self.question_index < len(self.questions) - 1:
            self.question_index += 1
        else:
            self._finish()

        return self.status

    def _finish(self) -> None:
        self.aggregated_scores = self.scorer.aggregate_scores(self.answers)
        try:
            self.match = self.scorer.find_best_match(self.aggregated_scores)
        except NoProfilesAvailableError as exc:
            logger.error("Quiz finished without a match: %s", exc)
            self.status = QuizStatus.ERRORED
            self.error = NO_MATCH_MESSAGE
            return

        self.status = QuizStatus.COMPLETED
        logger.info(
            "Quiz completed: matched %s (similarity %d)",
            self.match.profile.name, self.match.similarity,
        )
