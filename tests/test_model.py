"""Tests for translatable.model module without any behavior bound."""

import pytest

from translatable import FindType, MemoryStore, Model, Validator, not_empty


@pytest.fixture
def people():
    return Model("people", MemoryStore(), Validator(rules=[not_empty("name")]))


def test_save_and_find(people):
    """Test the plain save/find cycle."""
    record = people.create({"name": "Taro", "rank": 1})

    assert people.save(record) is True
    assert record.exists()

    found = people.first(conditions={"name": "Taro"})
    assert found.id == record.id
    assert found["rank"] == 1


def test_save_rejected_by_validator(people):
    """Test that the core save validates first."""
    record = people.create({"rank": 1})

    assert people.save(record) is False
    assert record.errors == {"name": ["name should not be empty."]}
    assert people.count() == 0


def test_save_merges_data(people):
    record = people.create()

    assert people.save(record, {"name": "Jiro"})
    assert people.first()["name"] == "Jiro"


def test_model_without_validator_accepts_anything():
    model = Model("things", MemoryStore())
    record = model.create({"anything": 1})

    assert model.validates(record) is True
    assert model.save(record) is True


def test_find_types(people):
    """Test the find entry points and string find types."""
    for name in ("Taro", "Jiro", "Saburo"):
        people.save(people.create({"name": name}))

    assert people.count() == 3
    assert len(people.all(order={"name": "asc"}, limit=2)) == 2
    assert people.search(conditions={"name": "Jiro"}).first()["name"] == "Jiro"
    assert people.find("count", conditions={"name": {"$ne": "Jiro"}}) == 2
    assert people.find(FindType.FIRST, conditions={"name": "Nobody"}) is None


def test_unknown_find_type(people):
    with pytest.raises(ValueError):
        people.find("newest")


def test_remove(people):
    for name in ("Taro", "Jiro"):
        people.save(people.create({"name": name}))

    assert people.remove({"name": "Taro"}) == 1
    assert people.remove() == 1
    assert people.count() == 0


def test_filters_wrap_operations(people):
    """Test that registered filters see every find request."""
    seen = []

    def spy(model, request, next_):
        seen.append((model.name, request.type))
        return next_(request)

    people.filters.apply("find", "spy", spy)
    people.count()

    assert seen == [("people", FindType.COUNT)]
