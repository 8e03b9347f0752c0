from typing import List, Optional
from pydantic import BaseModel, Field

from cardbox.models.flashcards import CardKind
from cardbox.models.quiz import CardState, CardView, QuizSummary
from cardbox.services.quiz_engine import QuizSession


class StartQuizRequest(BaseModel):
    cardIds: Optional[List[int]] = Field(default=None, description="Quiz order is kept")
    tags: Optional[List[str]] = Field(default=None, description="Used when cardIds is empty")


class GradeRequest(BaseModel):
    isCorrect: bool


class QuizCardOut(BaseModel):
    id: int
    kind: CardKind
    question: str
    state: CardState
    options: Optional[List[str]] = None
    tags: List[str] = Field(default_factory=list)
    # None until the card is revealed
    answer: Optional[str] = None

    @classmethod
    def from_view(cls, view: CardView) -> "QuizCardOut":
        return cls(
            id=view.id,
            kind=view.kind,
            question=view.question,
            state=view.state,
            options=view.options,
            tags=view.tags or [],
            answer=view.answer,
        )


class QuizSummaryOut(BaseModel):
    total: int
    hidden: int
    revealed: int
    correct: int
    incorrect: int
    finished: bool

    @classmethod
    def from_summary(cls, summary: QuizSummary) -> "QuizSummaryOut":
        return cls(
            total=summary.total,
            hidden=summary.hidden,
            revealed=summary.revealed,
            correct=summary.correct,
            incorrect=summary.incorrect,
            finished=summary.finished,
        )


class QuizSessionOut(BaseModel):
    sessionId: str
    cardIds: List[int]
    cards: List[QuizCardOut]
    summary: QuizSummaryOut

    @classmethod
    def from_session(cls, session: QuizSession) -> "QuizSessionOut":
        return cls(
            sessionId=session.id,
            cardIds=list(session.cards),
            cards=[QuizCardOut.from_view(v) for v in session.render_all()],
            summary=QuizSummaryOut.from_summary(session.summary()),
        )
