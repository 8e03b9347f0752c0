import pytest

from cardbox.core.errors import DuplicateQuestionError, ValidationError
from cardbox.models.snapshot import CardRecord, CollectionSnapshot
from cardbox.services.collection import FlashcardCollection
from cardbox.services.quiz_engine import QuizSession
from cardbox.services.storage import StorageService


def test_missing_snapshot(tmp_path):
    storage = StorageService(base_path=str(tmp_path))
    assert storage.read() is None
    assert storage.load_into(FlashcardCollection()) is False


def test_save_then_load(tmp_path, geo_collection):
    for _ in range(3):
        session = QuizSession(geo_collection, [1])
        session.reveal(1)
        session.grade(1, True)
    geo_collection.delete(2)
    geo_collection.tag(1, "empty-later")
    geo_collection.untag(1, "empty-later")

    storage = StorageService(base_path=str(tmp_path))
    storage.save(geo_collection)

    restored = FlashcardCollection()
    assert storage.load_into(restored) is True
    assert restored.export() == geo_collection.export()

    assert restored.get(1).score.times_correct == 3
    assert restored.members_of("geo") == {1}
    assert restored.has_tag("empty-later")
    # id 2 was deleted before the save and must not come back
    assert restored.add("Another?", "yes") == 4


def test_corrupt_snapshot(tmp_path):
    storage = StorageService(base_path=str(tmp_path))
    storage.snapshot_path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValidationError):
        storage.read()


def test_restore_rebuilds_tag_index():
    snapshot = CollectionSnapshot(
        next_id=1,
        cards=[
            CardRecord(id=5, question="Capital of France?", answer="Paris", tags=["geo"]),
            CardRecord(id=9, kind="mcq", question="2+2?", answer="4", options=["3", "4"], tags=["geo", "math"]),
        ],
    )
    collection = FlashcardCollection()
    collection.restore(snapshot)
    assert collection.members_of("geo") == {5, 9}
    assert collection.get(9).tags == {"geo", "math"}
    assert collection.add("New?", "x") == 10


def test_restore_collapses_exact_duplicates():
    record = CardRecord(id=1, question="Capital of France?", answer="Paris", tags=["geo"])
    twin = CardRecord(id=2, question="capital of france?", answer="Paris", tags=["geo"])
    collection = FlashcardCollection()
    collection.restore(CollectionSnapshot(cards=[record, twin]))
    assert [c.id for c in collection.list()] == [1]
    assert collection.members_of("geo") == {1}


def test_failed_restore_leaves_collection_untouched(geo_collection):
    before = geo_collection.export()
    clash = CollectionSnapshot(
        cards=[
            CardRecord(id=1, question="Capital of France?", answer="Paris"),
            CardRecord(id=2, question="capital of FRANCE?", answer="Lyon"),
        ]
    )
    with pytest.raises(DuplicateQuestionError):
        geo_collection.restore(clash)
    assert geo_collection.export() == before


def test_clear_removes_snapshot(tmp_path, collection):
    storage = StorageService(base_path=str(tmp_path))
    storage.save(collection)
    assert storage.exists()
    storage.clear()
    assert not storage.exists()
    storage.clear()
