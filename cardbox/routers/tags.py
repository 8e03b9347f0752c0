from fastapi import APIRouter, Depends

from cardbox.core.deps import get_collection
from cardbox.schemas.flashcards import CardListResponse, CardOut, TagListResponse, TagOut
from cardbox.services.collection import FlashcardCollection
from cardbox.services.tag_index import clean_tag_name

router = APIRouter(prefix="/v1/tags", tags=["tags"])


@router.get("", response_model=TagListResponse)
def list_tags(collection: FlashcardCollection = Depends(get_collection)):
    return TagListResponse(items=[TagOut.from_tag(t) for t in collection.tags()])


@router.get("/{tag_name}", response_model=TagOut)
def get_tag(tag_name: str, collection: FlashcardCollection = Depends(get_collection)):
    name = clean_tag_name(tag_name)
    members = collection.members_of(name)
    return TagOut(name=name, cards_count=len(members), card_ids=sorted(members))


@router.get("/{tag_name}/cards", response_model=CardListResponse)
def list_tag_cards(tag_name: str, collection: FlashcardCollection = Depends(get_collection)):
    return CardListResponse(items=[CardOut.from_card(c) for c in collection.list_by_tags([tag_name])])
