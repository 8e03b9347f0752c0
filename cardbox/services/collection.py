from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence

from cardbox.core.errors import (
    DuplicateQuestionError,
    DuplicateTagError,
    InvalidOptionsError,
    NotFoundError,
    ValidationError,
    WrongVariantError,
)
from cardbox.models.flashcards import (
    CardKind,
    Flashcard,
    Score,
    Statistics,
    Tag,
    require_text,
    resolve_answer,
    validate_options,
)
from cardbox.models.snapshot import CardRecord, CollectionSnapshot, ScoreRecord
from cardbox.services.tag_index import TagIndex, clean_tag_name
from cardbox.utils.text_utils import normalize_question

logger = logging.getLogger(__name__)


class FlashcardCollection:
    """
    Owns every flashcard (keyed by id, in insertion order) and the TagIndex.

    Ids are handed out from a counter that never goes back, so an id held by
    an open quiz session can never point at a newer card after a delete.
    All public methods run under ``self.lock``; quiz sessions reuse the same
    lock so a tag/untag/delete is never observed half-done.
    """

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self._cards: Dict[int, Flashcard] = {}
        self._index = TagIndex()
        self._next_id = 1

    # ---------- cards ----------

    def add(self, question: str, answer: str, options: Optional[Sequence[str]] = None) -> int:
        """
        Adds a short-answer card, or a multiple-choice card when ``options`` is
        given, and returns its id.
        """
        question = require_text(question, "question")
        answer = require_text(answer, "answer")
        kind = CardKind.short_answer
        if options is not None:
            options = validate_options(options)
            resolve_answer(options, answer)
            kind = CardKind.mcq

        with self.lock:
            self._ensure_unique_question(question)
            card_id = self._next_id
            self._next_id += 1
            self._cards[card_id] = Flashcard(
                id=card_id,
                kind=kind,
                question=question,
                answer=answer,
                options=options,
            )
        logger.info("card %s added (%s)", card_id, kind.value)
        return card_id

    def get(self, card_id: int) -> Flashcard:
        """Detached copy of the card; mutating it does not touch the collection."""
        with self.lock:
            return _detached(self._get(card_id))

    def edit(
        self,
        card_id: int,
        question: Optional[str] = None,
        answer: Optional[str] = None,
        options: Optional[Sequence[str]] = None,
    ) -> Flashcard:
        """
        Applies any of the three edits at once. Everything is checked against
        the combined result first; on error the card is left as it was.
        The answer is never rewritten to follow new options.
        """
        with self.lock:
            card = self._get(card_id)
            new_question = card.question
            new_answer = card.answer
            new_options = card.options
            if question is not None:
                new_question = require_text(question, "question", card_id=card_id)
            if answer is not None:
                new_answer = require_text(answer, "answer", card_id=card_id)
            if options is not None:
                if not card.is_mcq:
                    raise WrongVariantError(
                        f"Flashcard {card_id} is not a multiple-choice card.",
                        card_id=card_id,
                        kind=card.kind.value,
                    )
                new_options = validate_options(options, card_id=card_id)
            if card.is_mcq:
                resolve_answer(new_options, new_answer, card_id=card_id)
            if question is not None:
                self._ensure_unique_question(new_question, exclude_id=card_id)

            card.question = new_question
            card.answer = new_answer
            card.options = new_options
            edited = _detached(card)
        logger.info("card %s edited", card_id)
        return edited

    def edit_question(self, card_id: int, new_question: str) -> Flashcard:
        return self.edit(card_id, question=new_question)

    def edit_answer(self, card_id: int, new_answer: str) -> Flashcard:
        return self.edit(card_id, answer=new_answer)

    def edit_options(self, card_id: int, new_options: Sequence[str]) -> Flashcard:
        if new_options is None:
            raise InvalidOptionsError("Options must be a list of strings.", card_id=card_id)
        return self.edit(card_id, options=new_options)

    def delete(self, card_id: int) -> Flashcard:
        with self.lock:
            card = self._get(card_id)
            removed_from = self._index.drop_card(card_id)
            card.tags.clear()
            del self._cards[card_id]
        logger.info("card %s deleted (untagged from %s)", card_id, sorted(removed_from))
        return card

    def list(self) -> List[Flashcard]:
        with self.lock:
            return [_detached(card) for card in self._cards.values()]

    def find(self, keyword: str) -> List[Flashcard]:
        """
        Case-insensitive substring search over id, question and answer.
        An empty result is a NotFoundError.
        """
        keyword = require_text(keyword, "keyword")
        with self.lock:
            found = [_detached(card) for card in self._cards.values() if card.matches(keyword)]
        if not found:
            raise NotFoundError(f"No flashcard matches '{keyword}'.", keyword=keyword)
        return found

    def __len__(self) -> int:
        return len(self._cards)

    def __contains__(self, card_id: object) -> bool:
        return card_id in self._cards

    # ---------- tags ----------

    def tag(self, card_id: int, tag_name: str) -> Tag:
        name = clean_tag_name(tag_name)
        with self.lock:
            card = self._get(card_id)
            if name in self._index.tags_of(card_id):
                raise DuplicateTagError(
                    f"Flashcard {card_id} is already tagged '{name}'.",
                    card_id=card_id,
                    tag=name,
                )
            tag = self._index.get_or_create(name)
            self._index.add_membership(tag, card_id)
            card.tags.add(name)
        logger.info("card %s tagged %s", card_id, name)
        return tag

    def untag(self, card_id: int, tag_name: str) -> Tag:
        name = clean_tag_name(tag_name)
        with self.lock:
            card = self._get(card_id)
            tag = self._index.get(name)
            if card_id not in tag.members:
                raise NotFoundError(
                    f"Flashcard {card_id} is not tagged '{name}'.",
                    card_id=card_id,
                    tag=name,
                )
            self._index.remove_membership(tag, card_id)
            card.tags.discard(name)
        logger.info("card %s untagged %s", card_id, name)
        return tag

    def has_tag(self, tag_name: str) -> bool:
        with self.lock:
            return self._index.has_tag(tag_name)

    def members_of(self, tag_name: str) -> set:
        with self.lock:
            return self._index.members_of(tag_name)

    def tags(self) -> List[Tag]:
        with self.lock:
            return [Tag(name=t.name, members=set(t.members)) for t in self._index.all()]

    def list_by_tags(self, tag_names: Iterable[str]) -> List[Flashcard]:
        """Cards carrying any of ``tag_names``, in collection order."""
        names = [clean_tag_name(n) for n in tag_names]
        if not names:
            raise ValidationError("At least one tag is required.", field="tags")
        with self.lock:
            wanted = set()
            for name in names:
                wanted |= self._index.members_of(name)
            return [_detached(card) for card in self._cards.values() if card.id in wanted]

    def statistics(self) -> Statistics:
        with self.lock:
            stats = Statistics(total_cards=len(self._cards), total_tags=len(self._index))
            for card in self._cards.values():
                if card.is_mcq:
                    stats.mcq_cards += 1
                else:
                    stats.short_answer_cards += 1
                stats.times_correct += card.score.times_correct
                stats.times_incorrect += card.score.times_incorrect
            return stats

    # ---------- snapshot ----------

    def export(self) -> CollectionSnapshot:
        with self.lock:
            return CollectionSnapshot(
                next_id=self._next_id,
                tags=[t.name for t in self._index.all()],
                cards=[
                    CardRecord(
                        id=card.id,
                        kind=card.kind,
                        question=card.question,
                        answer=card.answer,
                        options=list(card.options) if card.options is not None else None,
                        tags=sorted(card.tags),
                        score=ScoreRecord(
                            times_correct=card.score.times_correct,
                            times_incorrect=card.score.times_incorrect,
                        ),
                    )
                    for card in self._cards.values()
                ],
            )

    def restore(self, snapshot: CollectionSnapshot) -> None:
        """
        Replaces the whole state with ``snapshot``. Every record is checked
        before anything is swapped in; on error the collection is untouched.
        """
        cards: Dict[int, Flashcard] = {}
        index = TagIndex()
        for name in snapshot.tags:
            index.get_or_create(clean_tag_name(name))

        for record in snapshot.cards:
            card = self._card_from_record(record)
            if card.id in cards:
                raise ValidationError(f"Duplicate flashcard id {card.id}.", card_id=card.id)
            clash = next((c for c in cards.values() if c.is_same_card(card)), None)
            if clash is not None:
                if clash.has_same_content(card):
                    logger.warning("restore: card %s duplicates card %s, skipped", card.id, clash.id)
                    continue
                raise DuplicateQuestionError(
                    f"Flashcard {card.id} repeats the question of flashcard {clash.id}.",
                    card_id=card.id,
                    existing_id=clash.id,
                )
            cards[card.id] = card
            for name in card.tags:
                index.add_membership(index.get_or_create(name), card.id)

        next_id = max([snapshot.next_id] + [card_id + 1 for card_id in cards])
        with self.lock:
            self._cards = cards
            self._index = index
            self._next_id = max(next_id, self._next_id)
        logger.info("restored %d cards, %d tags", len(cards), len(index))

    # ---------- internals ----------

    def _get(self, card_id: int) -> Flashcard:
        """The stored card itself, for in-place updates (QuizSession.grade too). Hold ``self.lock``."""
        card = self._cards.get(card_id)
        if card is None:
            raise NotFoundError(f"Flashcard {card_id} not found.", card_id=card_id)
        return card

    def _ensure_unique_question(self, question: str, exclude_id: Optional[int] = None) -> None:
        key = normalize_question(question)
        for card in self._cards.values():
            if card.id != exclude_id and card.normalized_question == key:
                raise DuplicateQuestionError(
                    f"A flashcard with this question already exists (id {card.id}).",
                    existing_id=card.id,
                    question=question,
                )

    @staticmethod
    def _card_from_record(record: CardRecord) -> Flashcard:
        question = require_text(record.question, "question", card_id=record.id)
        answer = require_text(record.answer, "answer", card_id=record.id)
        options = None
        if record.kind is CardKind.mcq:
            options = validate_options(record.options or [], card_id=record.id)
            resolve_answer(options, answer, card_id=record.id)
        elif record.options:
            raise InvalidOptionsError(
                f"Short-answer flashcard {record.id} cannot carry options.", card_id=record.id
            )
        return Flashcard(
            id=record.id,
            kind=record.kind,
            question=question,
            answer=answer,
            options=options,
            tags={clean_tag_name(name) for name in record.tags},
            score=Score(
                times_correct=record.score.times_correct,
                times_incorrect=record.score.times_incorrect,
            ),
        )


def _detached(card: Flashcard) -> Flashcard:
    return replace(
        card,
        options=list(card.options) if card.options is not None else None,
        tags=set(card.tags),
        score=replace(card.score),
    )
