"""Shared pytest fixtures for translatable tests."""

import typing

import pytest

from translatable import (
    Environment,
    MemoryStore,
    Model,
    Validator,
    bind,
    length_between,
    not_empty,
)


ARTIST_CONFIG: dict[str, typing.Any] = {
    "default": "ja",
    "locales": ["en", "it", "ja"],
    "fields": ["name", "profile"],
}


@pytest.fixture
def store() -> MemoryStore:
    """Fixture providing an empty in-memory document store."""
    return MemoryStore()


@pytest.fixture
def artist_validator() -> Validator:
    """Fixture providing the artist name rules."""
    return Validator(
        rules=[
            not_empty("name", "Username should not be empty."),
            length_between(
                "name", 4, 20, "Username should be between 5 and 20 characters."
            ),
        ]
    )


@pytest.fixture
def artists(store: MemoryStore, artist_validator: Validator) -> Model:
    """Fixture providing an artists model bound with en/it/ja, default ja."""
    model = Model("artists", store, artist_validator)
    bind(model, ARTIST_CONFIG, environment=Environment())
    return model


@pytest.fixture
def bilingual_artist() -> dict[str, typing.Any]:
    """Fixture providing locale-prefixed data for a new artist."""
    return {
        "ja.name": "Richard Japper",
        "ja.profile": "Dreaded Rasta Nihon",
        "en.name": "Richard",
        "en.profile": "Dreaded Rasta",
        "something_else": "Something",
    }


@pytest.fixture
def saved_artist(artists: Model, bilingual_artist: dict[str, typing.Any]):
    """Fixture providing the id of a persisted en/ja artist."""
    record = artists.create(bilingual_artist)
    assert artists.save(record)
    return record.id
