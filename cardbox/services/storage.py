import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as SchemaError

from cardbox.core.errors import ValidationError
from cardbox.models.snapshot import CollectionSnapshot
from cardbox.services.collection import FlashcardCollection

logger = logging.getLogger(__name__)

SNAPSHOT_FILENAME = "collection.json"


class StorageService:
    """
    Saves / reloads the whole collection as one JSON snapshot.
    (V1 simple: a single file under STORAGE_PATH.)
    """

    def __init__(self, base_path: str = "./storage"):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    @property
    def snapshot_path(self) -> Path:
        return self.base_path / SNAPSHOT_FILENAME

    def exists(self) -> bool:
        return self.snapshot_path.exists()

    def read(self) -> Optional[CollectionSnapshot]:
        if not self.exists():
            return None
        raw = self.snapshot_path.read_text(encoding="utf-8")
        try:
            return CollectionSnapshot.model_validate_json(raw)
        except SchemaError as e:
            raise ValidationError(
                f"Snapshot file is not valid: {e.error_count()} error(s).",
                path=str(self.snapshot_path),
            ) from e

    def load_into(self, collection: FlashcardCollection) -> bool:
        """
        Restores ``collection`` from disk. Returns False when no snapshot exists.
        """
        snapshot = self.read()
        if snapshot is None:
            logger.info("no snapshot at %s, starting empty", self.snapshot_path)
            return False
        collection.restore(snapshot)
        return True

    def save(self, collection: FlashcardCollection) -> Path:
        snapshot = collection.export()
        # write then rename, a crash never leaves half a file
        tmp_path = self.snapshot_path.with_suffix(".json.tmp")
        tmp_path.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
        tmp_path.replace(self.snapshot_path)
        logger.info("saved %d cards to %s", len(snapshot.cards), self.snapshot_path)
        return self.snapshot_path

    def clear(self) -> None:
        """
        Removes the snapshot (useful for tests).
        """
        if self.exists():
            self.snapshot_path.unlink()
