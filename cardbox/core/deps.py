from fastapi import Request

from cardbox.core.config import get_settings
from cardbox.services.collection import FlashcardCollection
from cardbox.services.quiz_engine import QuizEngine
from cardbox.services.storage import StorageService


def get_settings_dep():
    return get_settings()


def get_collection(request: Request) -> FlashcardCollection:
    """
    The collection created by create_app() (one per application).
    """
    return request.app.state.collection


def get_quiz_engine(request: Request) -> QuizEngine:
    return request.app.state.quiz_engine


def get_storage_service() -> StorageService:
    """
    Provides the storage service as a dependency (DI).
    """
    settings = get_settings()
    return StorageService(base_path=settings.STORAGE_PATH)
