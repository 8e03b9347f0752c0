from __future__ import annotations

import string
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Set

from cardbox.core.errors import InvalidOptionsError, ValidationError
from cardbox.utils.text_utils import contains_keyword, normalize_question

# "A" -> first option, "B" -> second, ...
OPTION_LETTERS = string.ascii_uppercase


class CardKind(str, Enum):
    short_answer = "short_answer"
    mcq = "mcq"


@dataclass
class Score:
    times_correct: int = 0
    times_incorrect: int = 0


@dataclass
class Tag:
    """
    A named label. ``members`` is the authoritative set of card ids carrying it;
    only TagIndex mutates it.
    """

    name: str
    members: Set[int] = field(default_factory=set)


@dataclass
class Flashcard:
    id: int
    kind: CardKind
    question: str
    answer: str
    options: Optional[List[str]] = None  # mcq only
    tags: Set[str] = field(default_factory=set)  # display cache, see TagIndex
    score: Score = field(default_factory=Score)

    @property
    def is_mcq(self) -> bool:
        return self.kind is CardKind.mcq

    @property
    def normalized_question(self) -> str:
        return normalize_question(self.question)

    @property
    def resolved_answer(self) -> str:
        """Option text the answer points to (the answer itself for short cards)."""
        if not self.is_mcq:
            return self.answer
        return self.options[resolve_answer(self.options, self.answer)]

    def is_same_card(self, other: "Flashcard") -> bool:
        """Two cards are the same card when their normalized questions match."""
        return other is self or (
            other is not None and other.normalized_question == self.normalized_question
        )

    def has_same_content(self, other: "Flashcard") -> bool:
        """Stronger than is_same_card: answer, options and tags must match too."""
        return (
            self.is_same_card(other)
            and other.answer == self.answer
            and (other.options or []) == (self.options or [])
            and other.tags == self.tags
        )

    def matches(self, keyword: str) -> bool:
        return any(
            contains_keyword(text, keyword)
            for text in (str(self.id), self.question, self.answer)
        )


def require_text(value: Optional[str], field_name: str, **context) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field_name} must not be empty.", field=field_name, **context)
    return value.strip()


def validate_options(options: Sequence[str], **context) -> List[str]:
    """
    Returns the stripped option list or raises InvalidOptionsError: at least
    two entries, none blank, pairwise distinct (case-sensitive).
    """
    if options is None or isinstance(options, str):
        raise InvalidOptionsError("Options must be a list of strings.", **context)
    cleaned = [(o or "").strip() for o in options]
    if len(cleaned) < 2:
        raise InvalidOptionsError("A multiple-choice card needs at least 2 options.", **context)
    if any(not o for o in cleaned):
        raise InvalidOptionsError("Options must not be blank.", **context)
    if len(set(cleaned)) != len(cleaned):
        raise InvalidOptionsError("Options must be distinct.", **context)
    return cleaned


def resolve_answer(options: Sequence[str], answer: str, **context) -> int:
    """
    Index of the option ``answer`` designates. An exact option match wins;
    otherwise a single letter (case-insensitive) selects the slot at that
    position in the alphabet.
    """
    answer = (answer or "").strip()
    if answer in options:
        return list(options).index(answer)
    if len(answer) == 1 and answer.upper() in OPTION_LETTERS:
        slot = OPTION_LETTERS.index(answer.upper())
        if slot < len(options):
            return slot
    raise InvalidOptionsError(
        f"Answer '{answer}' does not match any option.", answer=answer, **context
    )


@dataclass
class Statistics:
    total_cards: int = 0
    short_answer_cards: int = 0
    mcq_cards: int = 0
    total_tags: int = 0
    times_correct: int = 0
    times_incorrect: int = 0

    @property
    def accuracy(self) -> Optional[float]:
        attempts = self.times_correct + self.times_incorrect
        if not attempts:
            return None
        return self.times_correct / attempts
