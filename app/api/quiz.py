from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask
from typing import List, Optional, Union
import os
import uuid

from app.core.config import settings
from app.engine.quiz_session import InvalidAnswerError, QuizStateError
from app.reports.report_docx import generate_report_docx
from app.schemas.quiz import (
    AnswerRequest,
    ErrorView,
    HistoryEntry,
    QuestionBankResponse,
    QuestionView,
    ResultView,
)
from app.services.quiz import QuizService, build_quiz_service

router = APIRouter(prefix="/quiz", tags=["Quiz"])

ViewResponse = Union[QuestionView, ResultView, ErrorView]

_service: Optional[QuizService] = None


def get_quiz_service() -> QuizService:
    # built on first use so config errors surface at startup, not import
    global _service
    if _service is None:
        _service = build_quiz_service()
    return _service


# -------------------------------------------------
# GET: Question bank
# -------------------------------------------------

@router.get("/questions", response_model=QuestionBankResponse)
def get_questions(service: QuizService = Depends(get_quiz_service)):
    config = service.config
    return QuestionBankResponse(
        title=config.title,
        categories=config.categories,
        questions=config.questions,
    )


# -------------------------------------------------
# GET: Current view (question, result or error)
# -------------------------------------------------

@router.get("", response_model=ViewResponse)
def get_current_view(service: QuizService = Depends(get_quiz_service)):
    return service.view()


# -------------------------------------------------
# POST: Answer current question
# -------------------------------------------------

@router.post("/answer", response_model=ViewResponse)
def answer_question(
    payload: AnswerRequest,
    service: QuizService = Depends(get_quiz_service),
):
    try:
        return service.answer(payload.score)
    except QuizStateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except InvalidAnswerError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))


# -------------------------------------------------
# POST: Reset (retake / try again)
# -------------------------------------------------

@router.post("/reset", response_model=ViewResponse)
def reset_quiz(service: QuizService = Depends(get_quiz_service)):
    return service.reset()


# -------------------------------------------------
# GET: Persisted history
# -------------------------------------------------

@router.get("/history", response_model=List[HistoryEntry])
def get_history(service: QuizService = Depends(get_quiz_service)):
    return service.history_entries()


# -------------------------------------------------
# GET: Result report (JSON or DOCX download)
# -------------------------------------------------

@router.get("/report")
def get_or_download_report(
    download: bool = Query(False, description="Set true to download report"),
    service: QuizService = Depends(get_quiz_service),
):
    try:
        report = service.report()
    except QuizStateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))

    if not download:
        return report

    os.makedirs(settings.REPORTS_DIR, exist_ok=True)
    file_name = f"alignment_report_{uuid.uuid4().hex}.docx"
    file_path = os.path.join(settings.REPORTS_DIR, file_name)

    generate_report_docx(report, file_path)

    return FileResponse(
        path=file_path,
        filename=file_name,
        media_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        # generated per request; removed once sent
        background=BackgroundTask(os.remove, file_path),
    )
