import logging
from typing import Dict, List, Set

from cardbox.core.errors import NotFoundError
from cardbox.models.flashcards import Tag, require_text

logger = logging.getLogger(__name__)


def clean_tag_name(name: str) -> str:
    """Tag names are stripped and otherwise case-sensitive."""
    return require_text(name, "tag", tag=name)


class TagIndex:
    """
    Tag registry. Keeps two one-way maps in step:
    tag name -> Tag (whose ``members`` are card ids) and card id -> tag names.
    Tags outlive their last member.

    Not thread-safe on its own; FlashcardCollection holds its lock around
    every call.
    """

    def __init__(self) -> None:
        self._tags: Dict[str, Tag] = {}
        self._by_card: Dict[int, Set[str]] = {}

    def has_tag(self, name: str) -> bool:
        return name in self._tags

    def get(self, name: str) -> Tag:
        tag = self._tags.get(name)
        if tag is None:
            raise NotFoundError(f"Tag '{name}' not found.", tag=name)
        return tag

    def get_or_create(self, name: str) -> Tag:
        tag = self._tags.get(name)
        if tag is None:
            tag = Tag(name=name)
            self._tags[name] = tag
            logger.info("tag created: %s", name)
        return tag

    def add_membership(self, tag: Tag, card_id: int) -> None:
        tag.members.add(card_id)
        self._by_card.setdefault(card_id, set()).add(tag.name)

    def remove_membership(self, tag: Tag, card_id: int) -> None:
        tag.members.discard(card_id)
        names = self._by_card.get(card_id)
        if names is not None:
            names.discard(tag.name)
            if not names:
                del self._by_card[card_id]

    def members_of(self, name: str) -> Set[int]:
        return set(self.get(name).members)

    def tags_of(self, card_id: int) -> Set[str]:
        return set(self._by_card.get(card_id, ()))

    def drop_card(self, card_id: int) -> Set[str]:
        """Removes ``card_id`` from every tag it belongs to."""
        names = self.tags_of(card_id)
        for name in names:
            self.remove_membership(self._tags[name], card_id)
        return names

    def all(self) -> List[Tag]:
        return [self._tags[name] for name in sorted(self._tags)]

    def __len__(self) -> int:
        return len(self._tags)
