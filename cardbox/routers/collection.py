from fastapi import APIRouter, Depends

from cardbox.core.deps import get_collection, get_storage_service
from cardbox.core.security import get_api_key
from cardbox.schemas.flashcards import StatsOut
from cardbox.services.collection import FlashcardCollection
from cardbox.services.storage import StorageService

router = APIRouter(prefix="/v1", tags=["collection"])


@router.get("/stats", response_model=StatsOut)
def stats(collection: FlashcardCollection = Depends(get_collection)):
    return StatsOut.from_stats(collection.statistics())


@router.post("/collection/save")
def save_collection(
    collection: FlashcardCollection = Depends(get_collection),
    storage: StorageService = Depends(get_storage_service),
    _: str = Depends(get_api_key),
):
    path = storage.save(collection)
    return {"ok": True, "path": str(path), "cards": len(collection)}
