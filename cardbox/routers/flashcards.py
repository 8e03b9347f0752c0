from typing import Optional
from fastapi import APIRouter, Depends, Query
from starlette.status import HTTP_201_CREATED

from cardbox.core.deps import get_collection
from cardbox.core.security import get_api_key
from cardbox.schemas.flashcards import (
    CardCreateIn, CardUpdateIn, CardOut, CardListResponse,
    TagIn, TagOut,
)
from cardbox.services.collection import FlashcardCollection
from cardbox.services.tag_index import clean_tag_name
from cardbox.utils.text_utils import split_csv

router = APIRouter(prefix="/v1/flashcards", tags=["flashcards"])


@router.get("", response_model=CardListResponse)
def list_flashcards(
    tags: Optional[str] = Query(default=None, description="Comma-separated tag names"),
    collection: FlashcardCollection = Depends(get_collection),
):
    names = split_csv(tags)
    cards = collection.list_by_tags(names) if names else collection.list()
    return CardListResponse(items=[CardOut.from_card(c) for c in cards])


@router.post("", response_model=CardOut, status_code=HTTP_201_CREATED)
def create_flashcard(
    body: CardCreateIn,
    collection: FlashcardCollection = Depends(get_collection),
):
    # tag names are checked up front so a bad tag never leaves a half-created card
    names = list(dict.fromkeys(clean_tag_name(t) for t in body.tags))
    with collection.lock:
        card_id = collection.add(body.question, body.answer, body.options)
        for name in names:
            collection.tag(card_id, name)
        return CardOut.from_card(collection.get(card_id))


@router.get("/search", response_model=CardListResponse)
def search_flashcards(
    q: str = Query(..., description="Keyword matched against id, question and answer"),
    collection: FlashcardCollection = Depends(get_collection),
):
    return CardListResponse(items=[CardOut.from_card(c) for c in collection.find(q)])


@router.get("/{card_id}", response_model=CardOut)
def get_flashcard(card_id: int, collection: FlashcardCollection = Depends(get_collection)):
    return CardOut.from_card(collection.get(card_id))


@router.patch("/{card_id}", response_model=CardOut)
def update_flashcard(
    card_id: int,
    body: CardUpdateIn,
    collection: FlashcardCollection = Depends(get_collection),
):
    card = collection.edit(
        card_id,
        question=body.question,
        answer=body.answer,
        options=body.options,
    )
    return CardOut.from_card(card)


@router.delete("/{card_id}")
def delete_flashcard(
    card_id: int,
    collection: FlashcardCollection = Depends(get_collection),
    _: str = Depends(get_api_key),
):
    collection.delete(card_id)
    return {"ok": True, "id": card_id}


# =========================================================
# Tags on a card
# =========================================================
@router.post("/{card_id}/tags", response_model=TagOut, status_code=HTTP_201_CREATED)
def tag_flashcard(
    card_id: int,
    body: TagIn,
    collection: FlashcardCollection = Depends(get_collection),
):
    collection.tag(card_id, body.name)
    return _tag_out(collection, body.name)


@router.delete("/{card_id}/tags/{tag_name}", response_model=TagOut)
def untag_flashcard(
    card_id: int,
    tag_name: str,
    collection: FlashcardCollection = Depends(get_collection),
):
    collection.untag(card_id, tag_name)
    return _tag_out(collection, tag_name)


def _tag_out(collection: FlashcardCollection, name: str) -> TagOut:
    name = clean_tag_name(name)
    members = collection.members_of(name)
    return TagOut(name=name, cards_count=len(members), card_ids=sorted(members))
