"""Record types bound to a document store."""

import logging
import typing

from collections.abc import Mapping

from . import hooks as _hooks
from . import options as _options
from . import record as _record
from . import result as _result
from . import store as _store
from . import validate as _validate

logger = logging.getLogger(__name__)


class Model:
    """A named record type persisted in a document store.

    Every public operation runs through the filters registered for it in
    ``filters`` before reaching the store or validator.

    Attributes:
        name: Collection name in the store
        store: DocumentStore the records live in
        validator: Validator run before saves, or None to accept everything
        filters: Filter pipelines per operation
        behaviors: Settings of the behaviors bound to this model, by name
    """

    def __init__(
        self,
        name: str,
        store: _store.DocumentStore,
        validator: _validate.Validator | None = None,
        *,
        key: str = "_id",
    ) -> None:
        self.name = name
        self.store = store
        self.validator = validator
        self.key = key
        self.filters = _hooks.Filters()
        self.behaviors: dict[str, typing.Any] = {}

    def __repr__(self) -> str:
        return f"Model({self.name!r})"

    def create(self, data: Mapping[str, typing.Any] | None = None) -> _record.Record:
        """Return a new, unsaved record holding ``data``."""
        return _record.Record(data, key=self.key)

    def save(
        self,
        record: _record.Record,
        data: Mapping[str, typing.Any] | None = None,
        *,
        validate: bool = True,
    ) -> bool:
        """Persist a record.

        Args:
            record: Record to save; updated in place with its stored form
            data: Field values merged onto the record before saving
            validate: Whether to run ``validates`` first

        Returns:
            True if the record was written, False if it was rejected
        """
        request = _options.SaveRequest(
            record, dict(data) if data else None, validate=validate
        )
        return self.filters.run("save", self, request, self._save)

    def _save(self, request: _options.SaveRequest) -> bool:
        entity = request.entity
        if request.data:
            entity.set(request.data)
        if request.validate and not self.validates(entity):
            logger.debug("%s save rejected by validation", self.name)
            return False
        return self.store.save(self.name, entity)

    def validates(self, record: _record.Record) -> bool:
        """Validate a record, replacing its error collection.

        Returns:
            True if the record has no errors
        """
        request = _options.ValidateRequest(record)
        return self.filters.run("validates", self, request, self._validates)

    def _validates(self, request: _options.ValidateRequest) -> bool:
        errors = self.validator.check(request.entity) if self.validator else {}
        request.entity.set_errors(errors)
        return not errors

    def find(
        self,
        type: _options.FindType | str = _options.FindType.ALL,
        **options: typing.Any,
    ) -> _result.FindResult:
        """Query records.

        Args:
            type: Result shape (first, all, search or count)
            **options: FindOptions fields (conditions, order, locale, limit,
                offset, ignore_locale)

        Returns:
            A record or None, a DocumentSet, or a count depending on ``type``
        """
        request = _options.FindRequest(
            _options.FindType(type), _options.FindOptions.build(**options)
        )
        return self.filters.run("find", self, request, self._find)

    def _find(self, request: _options.FindRequest) -> _result.FindResult:
        return self.store.find(self.name, request.type, request.options)

    def first(self, **options: typing.Any) -> _record.Record | None:
        return self.find(_options.FindType.FIRST, **options)

    def all(self, **options: typing.Any) -> _result.DocumentSet:
        return self.find(_options.FindType.ALL, **options)

    def search(self, **options: typing.Any) -> _result.DocumentSet:
        return self.find(_options.FindType.SEARCH, **options)

    def count(self, **options: typing.Any) -> int:
        return self.find(_options.FindType.COUNT, **options)

    def remove(
        self, conditions: Mapping[str, typing.Any] | None = None, **options: typing.Any
    ) -> int:
        """Delete the records matching ``conditions``.

        Returns:
            Number of records removed
        """
        request = _options.RemoveRequest(
            _options.FindOptions.build(conditions=conditions, **options)
        )
        return self.filters.run("remove", self, request, self._remove)

    def _remove(self, request: _options.RemoveRequest) -> int:
        return self.store.remove(self.name, request.options.conditions)
