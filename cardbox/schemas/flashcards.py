from typing import List, Optional
from pydantic import BaseModel, Field

from cardbox.models.flashcards import CardKind, Flashcard, Statistics, Tag

# -------------------
# Cards
# -------------------
class CardCreateIn(BaseModel):
    question: str = Field(..., max_length=8000)
    answer: str = Field(..., max_length=8000, description="Text, or a letter A-Z for a multiple-choice card")
    options: Optional[List[str]] = Field(default=None, description="Present = multiple-choice card")
    tags: List[str] = Field(default_factory=list)

class CardUpdateIn(BaseModel):
    question: Optional[str] = Field(default=None, max_length=8000)
    answer: Optional[str] = Field(default=None, max_length=8000)
    options: Optional[List[str]] = None

class ScoreOut(BaseModel):
    times_correct: int
    times_incorrect: int

class CardOut(BaseModel):
    id: int
    kind: CardKind
    question: str
    answer: str
    options: Optional[List[str]] = None
    tags: List[str]
    score: ScoreOut

    @classmethod
    def from_card(cls, card: Flashcard) -> "CardOut":
        return cls(
            id=card.id,
            kind=card.kind,
            question=card.question,
            answer=card.answer,
            options=card.options,
            tags=sorted(card.tags),
            score=ScoreOut(
                times_correct=card.score.times_correct,
                times_incorrect=card.score.times_incorrect,
            ),
        )

class CardListResponse(BaseModel):
    items: List[CardOut]

# -------------------
# Tags
# -------------------
class TagIn(BaseModel):
    name: str = Field(..., max_length=255)

class TagOut(BaseModel):
    name: str
    cards_count: int
    card_ids: List[int]

    @classmethod
    def from_tag(cls, tag: Tag) -> "TagOut":
        return cls(name=tag.name, cards_count=len(tag.members), card_ids=sorted(tag.members))

class TagListResponse(BaseModel):
    items: List[TagOut]

# -------------------
# Stats
# -------------------
class StatsOut(BaseModel):
    total_cards: int
    short_answer_cards: int
    mcq_cards: int
    total_tags: int
    times_correct: int
    times_incorrect: int
    accuracy: Optional[float] = None

    @classmethod
    def from_stats(cls, stats: Statistics) -> "StatsOut":
        return cls(
            total_cards=stats.total_cards,
            short_answer_cards=stats.short_answer_cards,
            mcq_cards=stats.mcq_cards,
            total_tags=stats.total_tags,
            times_correct=stats.times_correct,
            times_incorrect=stats.times_incorrect,
            accuracy=stats.accuracy,
        )
