from typing import List, Optional
from pydantic import BaseModel, Field

from cardbox.models.flashcards import CardKind


class ScoreRecord(BaseModel):
    times_correct: int = Field(default=0, ge=0)
    times_incorrect: int = Field(default=0, ge=0)


class CardRecord(BaseModel):
    id: int = Field(..., ge=1)
    kind: CardKind = CardKind.short_answer
    question: str
    answer: str
    options: Optional[List[str]] = None
    tags: List[str] = Field(default_factory=list)
    score: ScoreRecord = Field(default_factory=ScoreRecord)


class CollectionSnapshot(BaseModel):
    """Full in-memory state exchanged with the storage layer."""

    version: int = 1
    next_id: int = Field(default=1, ge=1)
    tags: List[str] = Field(default_factory=list, description="Includes tags without cards")
    cards: List[CardRecord] = Field(default_factory=list)
