"""Tests for translatable.store module."""

import pytest

from translatable import DocumentSet, FindOptions, FindType, MemoryStore, Record, StoreError
from translatable.store import matches, resolve_path


DOCUMENT = {
    "_id": "a1",
    "tags": ["rock", "reggae"],
    "localizations": [
        {"locale": "en", "name": "Richard"},
        {"locale": "ja", "name": "Richard Japper"},
    ],
}


def test_resolve_path_traverses_arrays():
    """Test that dotted paths collect values from every array element."""
    assert resolve_path(DOCUMENT, "localizations.locale") == ["en", "ja"]
    assert resolve_path(DOCUMENT, "tags") == [["rock", "reggae"], "rock", "reggae"]
    assert resolve_path(DOCUMENT, "missing.path") == []


def test_matches_equality_and_operators():
    """Test equality and the supported operators."""
    assert matches(DOCUMENT, {"localizations.locale": "ja"})
    assert matches(DOCUMENT, {"tags": "rock"})
    assert not matches(DOCUMENT, {"localizations.locale": "it"})
    assert matches(DOCUMENT, {"localizations.locale": {"$in": ["it", "en"]}})
    assert matches(DOCUMENT, {"localizations.locale": {"$nin": ["it"]}})
    assert not matches(DOCUMENT, {"localizations.locale": {"$ne": "en"}})
    assert matches(DOCUMENT, {"validation": {"$exists": False}})
    assert matches(DOCUMENT, {"validation": None})


def test_matches_unsupported_operator():
    """Test that unknown operators raise StoreError."""
    with pytest.raises(StoreError):
        matches(DOCUMENT, {"tags": {"$regex": "ro"}})


@pytest.fixture
def filled_store():
    store = MemoryStore()
    for name, rank in (("Bob", 2), ("Alice", 3), ("Carol", 1)):
        store.save("people", Record({"name": name, "rank": rank}))
    return store


def test_save_assigns_identity(filled_store):
    """Test that inserts get an id and the record is synced."""
    record = Record({"name": "Dave"})

    assert filled_store.save("people", record) is True
    assert record.exists()
    assert record.modified() == set()
    assert filled_store.documents("people")[-1]["_id"] == record.id


def test_save_replaces_existing(filled_store):
    """Test that saving a record with an id replaces the stored document."""
    record = filled_store.find("people", FindType.FIRST, FindOptions(conditions={"name": "Bob"}))
    record["rank"] = 9

    filled_store.save("people", record)

    assert len(filled_store.documents("people")) == 3
    assert filled_store.documents("people")[0]["rank"] == 9


def test_find_shapes(filled_store):
    """Test first, all and count result shapes."""
    first = filled_store.find("people", FindType.FIRST, FindOptions())
    everyone = filled_store.find("people", FindType.ALL, FindOptions())
    count = filled_store.find("people", FindType.COUNT, FindOptions(conditions={"rank": 1}))

    assert isinstance(first, Record)
    assert first["name"] == "Bob"
    assert isinstance(everyone, DocumentSet)
    assert len(everyone) == 3
    assert count == 1
    assert filled_store.find("people", FindType.FIRST, FindOptions(conditions={"rank": 7})) is None


def test_find_order_limit_offset(filled_store):
    """Test sorting and paging."""
    options = FindOptions(order={"rank": "desc"}, offset=1, limit=1)

    found = filled_store.find("people", FindType.ALL, options)

    assert [record["name"] for record in found] == ["Bob"]


def test_found_records_do_not_alias_store(filled_store):
    """Test that changing a found record leaves the store untouched."""
    record = filled_store.find("people", FindType.FIRST, FindOptions())
    record["name"] = "Changed"

    assert filled_store.documents("people")[0]["name"] == "Bob"


def test_remove(filled_store):
    """Test removing matching documents."""
    assert filled_store.remove("people", {"rank": {"$in": [1, 2]}}) == 2
    assert filled_store.count("people", {}) == 1


def test_matches_elem_match():
    """Test that $elemMatch requires every predicate on the same element."""
    assert matches(
        DOCUMENT, {"localizations": {"$elemMatch": {"locale": "ja", "name": "Richard Japper"}}}
    )
    assert not matches(
        DOCUMENT, {"localizations": {"$elemMatch": {"locale": "en", "name": "Richard Japper"}}}
    )
    assert not matches(DOCUMENT, {"tags": {"$elemMatch": {"locale": "en"}}})


def test_matches_and_or():
    """Test $and and $or clause lists."""
    assert matches(
        DOCUMENT,
        {"$and": [{"localizations.locale": "en"}, {"localizations.locale": "ja"}]},
    )
    assert matches(DOCUMENT, {"$or": [{"tags": "jazz"}, {"tags": "rock"}]})
    assert not matches(DOCUMENT, {"$or": [{"tags": "jazz"}, {"tags": "blues"}]})
    with pytest.raises(StoreError):
        matches(DOCUMENT, {"$nor": [{"tags": "jazz"}]})


def test_find_order_mixed_types():
    """Test that values of different types sort by type, numbers first."""
    store = MemoryStore()
    for name, rank in (("Bob", "two"), ("Alice", 1), ("Carol", None)):
        store.save("people", Record({"name": name, "rank": rank}))

    ascending = store.find("people", FindType.ALL, FindOptions(order={"rank": "asc"}))
    descending = store.find("people", FindType.ALL, FindOptions(order={"rank": "desc"}))

    assert [record["name"] for record in ascending] == ["Carol", "Alice", "Bob"]
    assert [record["name"] for record in descending] == ["Bob", "Alice", "Carol"]


def test_find_order_within_matching_elements():
    """Test sorting on the values of array elements matching a filter."""
    store = MemoryStore()
    for english, japanese in (("Zed", "Aaaa"), ("Bobby", "Zzzz")):
        store.save(
            "artists",
            Record(
                {
                    "localizations": [
                        {"locale": "en", "name": english},
                        {"locale": "ja", "name": japanese},
                    ]
                }
            ),
        )
    order = {"localizations.name": {"direction": "asc", "$elemMatch": {"locale": "en"}}}

    found = store.find("artists", FindType.ALL, FindOptions(order=order))

    assert [record["localizations"][0]["name"] for record in found] == ["Bobby", "Zed"]
