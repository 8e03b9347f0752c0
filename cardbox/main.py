import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from cardbox.core.config import get_settings
from cardbox.core.errors import CardboxError
from cardbox.core.logging import setup_logging
from cardbox.routers import collection, flashcards, quiz, system, tags
from cardbox.services.collection import FlashcardCollection
from cardbox.services.quiz_engine import QuizEngine
from cardbox.services.storage import StorageService

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="API backend for a personal flashcard collection (cards, tags, quiz)",
    )

    # Middleware CORS
    origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],  # fallback if misconfigured
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # In-memory state, one collection per app
    app.state.collection = FlashcardCollection()
    app.state.quiz_engine = QuizEngine(app.state.collection, ttl_seconds=settings.QUIZ_SESSION_TTL)
    if settings.LOAD_ON_START:
        StorageService(base_path=settings.STORAGE_PATH).load_into(app.state.collection)

    @app.exception_handler(CardboxError)
    async def cardbox_error_handler(request: Request, exc: CardboxError):
        logger.debug("%s %s -> %s: %s", request.method, request.url.path, type(exc).__name__, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # Routers
    app.include_router(system.router)
    app.include_router(flashcards.router)
    app.include_router(tags.router)
    app.include_router(quiz.router)
    app.include_router(collection.router)

    # Redirect root → docs
    @app.get("/", include_in_schema=False)
    async def root():
        return RedirectResponse(url="/docs")

    return app
