import time
import uuid
import logging
import threading
from typing import Dict, Iterable, List, Optional, Set

from cardbox.core.errors import InvalidTransitionError, NotFoundError, ValidationError
from cardbox.models.quiz import CardState, CardView, QuizSummary
from cardbox.services.collection import FlashcardCollection

logger = logging.getLogger(__name__)


class QuizSession:
    """
    Answer-hiding pass over a fixed, ordered list of card ids.

    Per card: hidden -> revealed -> correct | incorrect. The session only
    holds ids and goes back to the collection on every access, so a card
    deleted mid-quiz fails with NotFoundError instead of being graded.
    """

    def __init__(
        self,
        collection: FlashcardCollection,
        card_ids: Iterable[int],
        session_id: Optional[str] = None,
    ) -> None:
        ids = list(card_ids)
        if not ids:
            raise ValidationError("A quiz needs at least one flashcard.", field="card_ids")
        if len(set(ids)) != len(ids):
            raise ValidationError("A flashcard can appear only once in a quiz.", field="card_ids")
        with collection.lock:
            for card_id in ids:
                collection.get(card_id)

        self.id = session_id or f"quiz_{uuid.uuid4().hex[:12]}"
        self.cards = tuple(ids)
        self.created_at = time.time()
        self._collection = collection
        self._states: Dict[int, CardState] = {card_id: CardState.hidden for card_id in ids}

    @property
    def revealed(self) -> Set[int]:
        return {cid for cid, state in self._states.items() if state is not CardState.hidden}

    def state(self, card_id: int) -> CardState:
        state = self._states.get(card_id)
        if state is None:
            raise NotFoundError(
                f"Flashcard {card_id} is not part of quiz {self.id}.",
                session_id=self.id,
                card_id=card_id,
            )
        return state

    def reveal(self, card_id: int) -> CardView:
        with self._collection.lock:
            self._expect(card_id, CardState.hidden, "reveal")
            card = self._collection.get(card_id)
            self._states[card_id] = CardState.revealed
            return CardView.of(card, CardState.revealed)

    def grade(self, card_id: int, correct: bool) -> CardView:
        with self._collection.lock:
            self._expect(card_id, CardState.revealed, "grade")
            card = self._collection._get(card_id)
            if correct:
                card.score.times_correct += 1
                outcome = CardState.correct
            else:
                card.score.times_incorrect += 1
                outcome = CardState.incorrect
            self._states[card_id] = outcome
            view = CardView.of(card, outcome)
        logger.info("quiz %s: card %s graded %s", self.id, card_id, outcome.value)
        return view

    def render(self, card_id: int) -> CardView:
        with self._collection.lock:
            state = self.state(card_id)
            return CardView.of(self._collection.get(card_id), state)

    def render_all(self) -> List[CardView]:
        """Views for every card still in the collection, in quiz order."""
        with self._collection.lock:
            return [
                CardView.of(self._collection.get(card_id), self._states[card_id])
                for card_id in self.cards
                if card_id in self._collection
            ]

    def summary(self) -> QuizSummary:
        counts = {state: 0 for state in CardState}
        with self._collection.lock:
            for state in self._states.values():
                counts[state] += 1
        return QuizSummary(
            total=len(self.cards),
            hidden=counts[CardState.hidden],
            revealed=counts[CardState.revealed],
            correct=counts[CardState.correct],
            incorrect=counts[CardState.incorrect],
        )

    def _expect(self, card_id: int, expected: CardState, action: str) -> None:
        state = self._states.get(card_id)
        if state is None:
            raise InvalidTransitionError(
                f"Cannot {action} flashcard {card_id}: not part of quiz {self.id}.",
                session_id=self.id,
                card_id=card_id,
            )
        if state is not expected:
            raise InvalidTransitionError(
                f"Cannot {action} flashcard {card_id}: it is {state.value}.",
                session_id=self.id,
                card_id=card_id,
                state=state.value,
            )


class QuizEngine:
    """
    In-memory registry of open quiz sessions, with a TTL.
    """

    def __init__(self, collection: FlashcardCollection, ttl_seconds: int = 60 * 60) -> None:
        self._collection = collection
        self._sessions: Dict[str, QuizSession] = {}
        self._ttl_seconds = ttl_seconds
        self._lock = threading.Lock()

    def start(self, card_ids: Iterable[int]) -> QuizSession:
        session = QuizSession(self._collection, card_ids)
        self.purge_expired()
        with self._lock:
            self._sessions[session.id] = session
        logger.info("quiz %s started with %d cards", session.id, len(session.cards))
        return session

    def start_from_tags(self, tag_names: Iterable[str]) -> QuizSession:
        names = list(tag_names)
        cards = self._collection.list_by_tags(names)
        if not cards:
            raise NotFoundError("No flashcard carries these tags.", tags=names)
        return self.start([card.id for card in cards])

    def get(self, session_id: str) -> QuizSession:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise NotFoundError("Quiz session not found.", session_id=session_id)
            if time.time() - session.created_at > self._ttl_seconds:
                del self._sessions[session_id]
                raise NotFoundError("Quiz session expired.", session_id=session_id)
        return session

    def close(self, session_id: str) -> QuizSummary:
        session = self.get(session_id)
        with self._lock:
            self._sessions.pop(session_id, None)
        logger.info("quiz %s closed", session_id)
        return session.summary()

    def purge_expired(self) -> int:
        now = time.time()
        with self._lock:
            expired = [
                sid for sid, s in self._sessions.items()
                if now - s.created_at > self._ttl_seconds
            ]
            for sid in expired:
                del self._sessions[sid]
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)
