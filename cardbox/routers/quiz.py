from fastapi import APIRouter, Depends

from cardbox.core.deps import get_quiz_engine
from cardbox.core.errors import ValidationError
from cardbox.schemas.quiz import (
    StartQuizRequest, GradeRequest,
    QuizCardOut, QuizSessionOut, QuizSummaryOut,
)
from cardbox.services.quiz_engine import QuizEngine

router = APIRouter(prefix="/v1/quiz", tags=["quiz"])


@router.post("/start", response_model=QuizSessionOut)
def start_quiz(body: StartQuizRequest, engine: QuizEngine = Depends(get_quiz_engine)):
    if body.cardIds:
        session = engine.start(body.cardIds)
    elif body.tags:
        session = engine.start_from_tags(body.tags)
    else:
        raise ValidationError("Provide cardIds or tags to start a quiz.", field="cardIds")
    return QuizSessionOut.from_session(session)


@router.get("/{session_id}", response_model=QuizSessionOut)
def get_quiz(session_id: str, engine: QuizEngine = Depends(get_quiz_engine)):
    return QuizSessionOut.from_session(engine.get(session_id))


@router.get("/{session_id}/cards/{card_id}", response_model=QuizCardOut)
def render_card(session_id: str, card_id: int, engine: QuizEngine = Depends(get_quiz_engine)):
    return QuizCardOut.from_view(engine.get(session_id).render(card_id))


@router.post("/{session_id}/cards/{card_id}/reveal", response_model=QuizCardOut)
def reveal_card(session_id: str, card_id: int, engine: QuizEngine = Depends(get_quiz_engine)):
    return QuizCardOut.from_view(engine.get(session_id).reveal(card_id))


@router.post("/{session_id}/cards/{card_id}/grade", response_model=QuizCardOut)
def grade_card(
    session_id: str,
    card_id: int,
    body: GradeRequest,
    engine: QuizEngine = Depends(get_quiz_engine),
):
    return QuizCardOut.from_view(engine.get(session_id).grade(card_id, body.isCorrect))


@router.delete("/{session_id}", response_model=QuizSummaryOut)
def close_quiz(session_id: str, engine: QuizEngine = Depends(get_quiz_engine)):
    return QuizSummaryOut.from_summary(engine.close(session_id))
