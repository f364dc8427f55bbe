import logging
import threading
from typing import Any, Dict, List, Union

from app.core.config import settings
from app.db.session import SessionLocal, init_db
from app.engine.quiz_session import QuizSession, QuizStateError, QuizStatus
from app.engine.scorer import AlignmentScorer, create_alignment_scorer
from app.reports.report_builder import generate_quiz_report
from app.schemas.quiz import (
    ChartPoint,
    ErrorView,
    HistoryEntry,
    QuestionView,
    QuizConfig,
    ResultView,
)
from app.services.history import HistoryLog
from app.services.quiz_config import load_quiz_config

logger = logging.getLogger(__name__)

QuizView = Union[QuestionView, ResultView, ErrorView]


class QuizService:
    """
    Owns the single quiz session and the history log.

    Every action runs to completion under one lock, so answers and resets
    are applied one at a time.
    """

    def __init__(self, config: QuizConfig, scorer: AlignmentScorer, history: HistoryLog):
        self.config = config
        self.scorer = scorer
        self.history = history
        self.session = QuizSession(scorer)
        self._lock = threading.Lock()

    def answer(self, score: int) -> QuizView:
        with self._lock:
            status = self.session.answer(score)

            if status == QuizStatus.COMPLETED:
                self.history.append(
                    scores=self.session.aggregated_scores,
                    match_name=self.session.match.profile.name,
                )

            return self._view()

    def reset(self) -> QuizView:
        with self._lock:
            self.session.reset()
            return self._view()

    def view(self) -> QuizView:
        with self._lock:
            return self._view()

    def history_entries(self) -> List[HistoryEntry]:
        with self._lock:
            return list(self.history.entries)

    def report(self) -> Dict[str, Any]:
        """Result report for the completed session; raises if not completed."""
        with self._lock:
            view = self._view()
        if not isinstance(view, ResultView):
            raise QuizStateError("No completed quiz to report on")
        return generate_quiz_report(view, title=self.config.title)

    def _view(self) -> QuizView:
        session = self.session

        if session.status == QuizStatus.ERRORED:
            return ErrorView(error=session.error)

        if session.status == QuizStatus.COMPLETED:
            profile = session.match.profile
            chart_data = [
                ChartPoint(subject=category, user=user, delegate=delegate)
                for category, user, delegate in zip(
                    self.scorer.categories, session.aggregated_scores, profile.scores
                )
            ]
            return ResultView(
                match_name=profile.name,
                similarity=session.match.similarity,
                max_similarity=self.scorer.max_similarity,
                chart_data=chart_data,
                history=list(self.history.entries),
            )

        question = session.current_question
        return QuestionView(
            title=self.config.title,
            category=question.category,
            question=question.question,
            question_number=session.question_index + 1,
            total_questions=len(session.questions),
        )


def build_quiz_service() -> QuizService:
    """Wire a QuizService from settings: config file, scorer, storage."""
    config = load_quiz_config(settings.QUIZ_CONFIG_PATH)
    scorer = create_alignment_scorer(config)

    init_db()
    history = HistoryLog(SessionLocal, settings.HISTORY_STORAGE_KEY)
    logger.info("Quiz history loaded with %d entries", len(history))

    return QuizService(config, scorer, history)
