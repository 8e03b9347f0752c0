from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from cardbox.models.flashcards import CardKind, Flashcard


class CardState(str, Enum):
    hidden = "hidden"
    revealed = "revealed"
    correct = "correct"
    incorrect = "incorrect"


@dataclass
class CardView:
    """What a quiz shows for one card. ``answer`` stays None while hidden."""

    id: int
    kind: CardKind
    question: str
    state: CardState
    options: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    answer: Optional[str] = None

    @classmethod
    def of(cls, card: Flashcard, state: CardState) -> "CardView":
        view = cls(
            id=card.id,
            kind=card.kind,
            question=card.question,
            state=state,
            options=list(card.options) if card.options is not None else None,
            tags=sorted(card.tags),
        )
        if state is not CardState.hidden:
            view.answer = card.answer
        return view


@dataclass
class QuizSummary:
    total: int
    hidden: int
    revealed: int
    correct: int
    incorrect: int

    @property
    def finished(self) -> bool:
        return self.correct + self.incorrect == self.total
