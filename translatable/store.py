"""Document store interface and an in-memory implementation."""

import copy
import datetime
import logging
import typing
import uuid

from collections.abc import Mapping

from . import errors as _errors
from . import options as _options
from . import record as _record
from . import result as _result

logger = logging.getLogger(__name__)


class DocumentStore(typing.Protocol):
    """What a model needs from the database it persists records in."""

    def save(self, collection: str, record: _record.Record) -> bool:
        """Insert or replace ``record``, assigning its identity on insert."""
        ...

    def find(
        self,
        collection: str,
        type: _options.FindType,
        options: _options.FindOptions,
    ) -> _result.FindResult:
        """Return the records matching ``options`` shaped by ``type``."""
        ...

    def count(self, collection: str, conditions: Mapping[str, typing.Any]) -> int:
        """Return the number of records matching ``conditions``."""
        ...

    def remove(self, collection: str, conditions: Mapping[str, typing.Any]) -> int:
        """Delete the records matching ``conditions``, returning how many."""
        ...


def resolve_path(value: typing.Any, path: str) -> list[typing.Any]:
    """Collect the values a dotted path reaches inside a document.

    Arrays met along the way are traversed element by element, and an array
    found at the end of the path contributes both itself and its elements,
    as MongoDB does.

    Args:
        value: Document (or sub-document) to search
        path: Dotted field path such as ``"localizations.name"``

    Returns:
        Every value reached; empty if the path does not exist
    """
    return _resolve(value, path.split(".") if path else [])


def _resolve(value: typing.Any, parts: list[str]) -> list[typing.Any]:
    if not parts:
        if isinstance(value, list):
            return [value, *value]
        return [value]
    if isinstance(value, list):
        found: list[typing.Any] = []
        for item in value:
            found.extend(_resolve(item, parts))
        return found
    if isinstance(value, Mapping) and parts[0] in value:
        return _resolve(value[parts[0]], parts[1:])
    return []


def _is_operator(condition: typing.Any) -> bool:
    return (
        isinstance(condition, Mapping)
        and bool(condition)
        and all(isinstance(key, str) and key.startswith("$") for key in condition)
    )


def _equals(found: list[typing.Any], expected: typing.Any) -> bool:
    if expected is None:
        return not found or any(value is None for value in found)
    return any(value == expected for value in found)


def match_condition(found: list[typing.Any], condition: typing.Any) -> bool:
    """Test the values found at a path against one condition.

    Raises:
        StoreError: If the condition uses an unsupported operator
    """
    if not _is_operator(condition):
        return _equals(found, condition)
    for operator, argument in condition.items():
        if operator == "$in":
            ok = any(_equals(found, item) for item in argument)
        elif operator == "$nin":
            ok = not any(_equals(found, item) for item in argument)
        elif operator == "$ne":
            ok = not _equals(found, argument)
        elif operator == "$exists":
            ok = bool(found) == bool(argument)
        elif operator == "$elemMatch":
            ok = bool(_elements(found, argument))
        else:
            raise _errors.StoreError(f"Unsupported query operator: {operator}")
        if not ok:
            return False
    return True


def _elements(
    found: list[typing.Any], conditions: Mapping[str, typing.Any]
) -> list[Mapping[str, typing.Any]]:
    return [
        value
        for value in found
        if isinstance(value, Mapping) and matches(value, conditions)
    ]


def matches(document: Mapping[str, typing.Any], conditions: Mapping[str, typing.Any]) -> bool:
    """Return True if ``document`` satisfies every condition.

    ``$and`` and ``$or`` keys take a list of condition mappings.

    Raises:
        StoreError: If a condition uses an unsupported operator
    """
    for path, condition in conditions.items():
        if path == "$and":
            ok = all(matches(document, clause) for clause in condition)
        elif path == "$or":
            ok = any(matches(document, clause) for clause in condition)
        elif path.startswith("$"):
            raise _errors.StoreError(f"Unsupported query operator: {path}")
        else:
            ok = match_condition(resolve_path(document, path), condition)
        if not ok:
            return False
    return True


def _type_rank(value: typing.Any) -> int:
    # BSON comparison order: null, numbers, strings, objects, arrays,
    # binary data, booleans, dates.
    if value is None:
        return 0
    if isinstance(value, bool):
        return 6
    if isinstance(value, (int, float)):
        return 1
    if isinstance(value, str):
        return 2
    if isinstance(value, Mapping):
        return 3
    if isinstance(value, (list, tuple)):
        return 4
    if isinstance(value, (bytes, bytearray)):
        return 5
    if isinstance(value, (datetime.date, datetime.datetime)):
        return 7
    return 8


def _compare_key(value: typing.Any) -> tuple:
    rank = _type_rank(value)
    if rank == 0:
        return (rank,)
    if rank in (1, 2, 5, 6):
        return (rank, value)
    if rank == 7:
        if not isinstance(value, datetime.datetime):
            value = datetime.datetime.combine(value, datetime.time())
        return (rank, value.replace(tzinfo=None))
    return (rank, repr(value))


def _sort_key(
    document: Mapping[str, typing.Any],
    path: str,
    descending: bool,
    element: Mapping[str, typing.Any] | None = None,
) -> tuple:
    if element is None:
        found = resolve_path(document, path)
    else:
        head, _, rest = path.partition(".")
        found = []
        for value in _elements(resolve_path(document, head), element):
            found.extend(resolve_path(value, rest))
    values = [value for value in found if not isinstance(value, list)]
    if not values:
        return _compare_key(None)
    keys = [_compare_key(value) for value in values]
    return max(keys) if descending else min(keys)


def _sort_direction(direction: typing.Any) -> tuple[bool, Mapping[str, typing.Any] | None]:
    element = None
    if isinstance(direction, Mapping):
        element = direction.get("$elemMatch")
        direction = direction.get("direction", "asc")
    return str(direction).lower() == "desc", element


class MemoryStore:
    """A DocumentStore holding documents in process memory.

    Documents are deep-copied on the way in and out, so records handed to
    callers never alias stored state.

    Attributes:
        key: Identity field name
    """

    def __init__(self, key: str = "_id") -> None:
        self.key = key
        self._collections: dict[str, dict[typing.Any, dict[str, typing.Any]]] = {}

    def _collection(self, name: str) -> dict[typing.Any, dict[str, typing.Any]]:
        return self._collections.setdefault(name, {})

    def documents(self, collection: str) -> list[dict[str, typing.Any]]:
        """Copies of every stored document, in insertion order."""
        return copy.deepcopy(list(self._collection(collection).values()))

    def save(self, collection: str, record: _record.Record) -> bool:
        document = record.data()
        id = document.get(self.key)
        if id is None:
            id = uuid.uuid4().hex[:24]
            document[self.key] = id
        logger.debug("save %s %s", collection, id)
        self._collection(collection)[id] = document
        record.sync(id)
        return True

    def _matching(
        self, collection: str, options: _options.FindOptions
    ) -> list[dict[str, typing.Any]]:
        documents = [
            document
            for document in self._collection(collection).values()
            if matches(document, options.conditions)
        ]
        for path, direction in reversed(list(options.order.items())):
            descending, element = _sort_direction(direction)
            documents.sort(
                key=lambda document: _sort_key(document, path, descending, element),
                reverse=descending,
            )
        return documents

    def _record(self, document: dict[str, typing.Any]) -> _record.Record:
        record = _record.Record(copy.deepcopy(document), key=self.key)
        record.sync()
        return record

    def find(
        self,
        collection: str,
        type: _options.FindType,
        options: _options.FindOptions,
    ) -> _result.FindResult:
        type = _options.FindType(type)
        logger.debug("find %s %s %s", type.value, collection, options.conditions)
        if type is _options.FindType.COUNT:
            return self.count(collection, options.conditions)
        documents = self._matching(collection, options)
        documents = documents[options.offset:]
        if options.limit is not None:
            documents = documents[: options.limit]
        if type is _options.FindType.FIRST:
            return self._record(documents[0]) if documents else None
        return _result.DocumentSet(self._record(document) for document in documents)

    def count(self, collection: str, conditions: Mapping[str, typing.Any]) -> int:
        return sum(
            1
            for document in self._collection(collection).values()
            if matches(document, conditions)
        )

    def remove(self, collection: str, conditions: Mapping[str, typing.Any]) -> int:
        stored = self._collection(collection)
        doomed = [id for id, document in stored.items() if matches(document, conditions)]
        for id in doomed:
            del stored[id]
        logger.debug("remove %s: %d documents", collection, len(doomed))
        return len(doomed)
