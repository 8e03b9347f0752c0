import pytest

from cardbox.core.errors import NotFoundError, ValidationError
from cardbox.services.tag_index import TagIndex, clean_tag_name


def test_get_or_create_is_idempotent():
    index = TagIndex()
    assert not index.has_tag("geo")
    tag = index.get_or_create("geo")
    assert index.get_or_create("geo") is tag
    assert index.has_tag("geo")
    assert len(index) == 1


def test_names_are_case_sensitive():
    index = TagIndex()
    index.get_or_create("Geo")
    assert not index.has_tag("geo")


def test_clean_tag_name():
    assert clean_tag_name("  geo ") == "geo"
    with pytest.raises(ValidationError):
        clean_tag_name("   ")


def test_membership_is_kept_on_both_sides():
    index = TagIndex()
    geo = index.get_or_create("geo")
    history = index.get_or_create("history")
    index.add_membership(geo, 1)
    index.add_membership(history, 1)
    index.add_membership(geo, 2)

    assert index.members_of("geo") == {1, 2}
    assert index.tags_of(1) == {"geo", "history"}

    index.remove_membership(geo, 1)
    assert index.members_of("geo") == {2}
    assert index.tags_of(1) == {"history"}


def test_last_member_leaving_keeps_the_tag():
    index = TagIndex()
    geo = index.get_or_create("geo")
    index.add_membership(geo, 1)
    index.remove_membership(geo, 1)
    assert index.has_tag("geo")
    assert index.members_of("geo") == set()
    assert index.tags_of(1) == set()


def test_drop_card_clears_every_tag():
    index = TagIndex()
    for name in ("a", "b"):
        index.add_membership(index.get_or_create(name), 7)
    index.add_membership(index.get_or_create("b"), 8)

    assert index.drop_card(7) == {"a", "b"}
    assert index.members_of("a") == set()
    assert index.members_of("b") == {8}
    assert index.tags_of(7) == set()


def test_unknown_tag():
    index = TagIndex()
    with pytest.raises(NotFoundError):
        index.members_of("nope")


def test_members_of_returns_a_copy():
    index = TagIndex()
    index.add_membership(index.get_or_create("geo"), 1)
    index.members_of("geo").add(99)
    assert index.members_of("geo") == {1}


def test_all_sorted_by_name():
    index = TagIndex()
    for name in ("zoo", "art", "math"):
        index.get_or_create(name)
    assert [t.name for t in index.all()] == ["art", "math", "zoo"]
