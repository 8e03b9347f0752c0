import pytest

from cardbox.core.errors import InvalidOptionsError, ValidationError
from cardbox.models.flashcards import (
    CardKind,
    Flashcard,
    require_text,
    resolve_answer,
    validate_options,
)
from cardbox.utils.text_utils import normalize_question


def test_normalize_question_ignores_case_and_spacing():
    assert normalize_question("  Capital   of\tFRANCE? ") == normalize_question("capital of france?")


def test_require_text_strips_and_rejects_blank():
    assert require_text("  Paris ", "answer") == "Paris"
    with pytest.raises(ValidationError) as exc:
        require_text("   ", "answer")
    assert exc.value.context["field"] == "answer"


def test_validate_options_rules():
    assert validate_options([" 3", "4 "]) == ["3", "4"]
    # distinctness is case-sensitive
    assert validate_options(["a", "A"]) == ["a", "A"]
    with pytest.raises(InvalidOptionsError):
        validate_options(["only one"])
    with pytest.raises(InvalidOptionsError):
        validate_options(["3", "3"])
    with pytest.raises(InvalidOptionsError):
        validate_options(["3", "  "])


def test_resolve_answer_by_text_and_by_letter():
    options = ["3", "4", "5"]
    assert resolve_answer(options, "4") == 1
    assert resolve_answer(options, "B") == 1
    assert resolve_answer(options, "c") == 2
    with pytest.raises(InvalidOptionsError):
        resolve_answer(options, "D")
    with pytest.raises(InvalidOptionsError):
        resolve_answer(options, "9")


def test_exact_option_text_wins_over_letter():
    assert resolve_answer(["B", "A"], "A") == 1


def test_resolved_answer_and_identity_rules():
    mcq = Flashcard(id=1, kind=CardKind.mcq, question="2+2?", answer="b", options=["3", "4"])
    assert mcq.resolved_answer == "4"

    a = Flashcard(id=1, kind=CardKind.short_answer, question="Capital of France?", answer="Paris")
    b = Flashcard(id=2, kind=CardKind.short_answer, question="capital of  france?", answer="paris")
    assert a.is_same_card(b)
    assert not a.has_same_content(b)

    b.answer = "Paris"
    assert a.has_same_content(b)
    b.tags.add("geo")
    assert not a.has_same_content(b)


def test_matches_id_question_and_answer():
    card = Flashcard(id=12, kind=CardKind.short_answer, question="Capital of France?", answer="Paris")
    assert card.matches("france")
    assert card.matches("PAR")
    assert card.matches("12")
    assert not card.matches("Rome")
