from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.db.session import init_db
from app.engine.scorer import create_alignment_scorer
from app.schemas.quiz import ChartPoint, HistoryEntry, QuizConfig, ResultView
from app.services.history import HistoryLog
from app.services.quiz import QuizService
from app.services.quiz_config import load_quiz_config


@pytest.fixture
def small_config():
    """Two categories, two questions each, two opposite delegates."""
    return QuizConfig.model_validate({
        "title": "Test Quiz",
        "questions": [
            {"category": "Governance", "question": "g1"},
            {"category": "Governance", "question": "g2"},
            {"category": "Finance", "question": "f1"},
            {"category": "Finance", "question": "f2"},
        ],
        "profiles": [
            {"name": "A", "scores": [5, 1]},
            {"name": "B", "scores": [1, 5]},
        ],
    })


@pytest.fixture
def bundled_config():
    return load_quiz_config(settings.QUIZ_CONFIG_PATH)


@pytest.fixture
def session_factory():
    """In-memory SQLite shared across sessions, with tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def history(session_factory):
    return HistoryLog(session_factory, "quizHistory")


@pytest.fixture
def quiz_service(small_config, history):
    return QuizService(small_config, create_alignment_scorer(small_config), history)


@pytest.fixture
def result_view():
    return ResultView(
        match_name="Delegate A",
        similarity=22,
        max_similarity=30,
        chart_data=[
            ChartPoint(subject="Governance", user=4, delegate=4),
            ChartPoint(subject="Finance", user=1, delegate=5),
            ChartPoint(subject="Compliance", user=3, delegate=2),
        ],
        history=[
            HistoryEntry(
                date=datetime(2024, 1, 2, 3, 4, tzinfo=timezone.utc),
                scores=[4, 1, 3],
                match_name="Delegate A",
            )
        ],
    )
