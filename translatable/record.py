"""Record types for localized documents."""

import builtins
import copy
import typing

from collections.abc import Iterator, Mapping, MutableMapping


Localization = dict[str, typing.Any]
"""Type alias for one locale's stored values.

A Localization always carries a ``locale`` key plus a value for each
translatable field that has been supplied for that locale.
"""

Errors = dict[str, list[str]]
"""Type alias for a record's error collection, keyed by field name."""


def _split(key: str) -> tuple[str, str | None]:
    head, _, rest = key.partition(".")
    return head, rest or None


class Record(MutableMapping[str, typing.Any]):
    """An ordered mapping of field name to value with change tracking.

    Dotted keys address nested mappings, so ``record["ja.name"] = "A"``
    stores ``{"ja": {"name": "A"}}`` and ``record["ja.name"]`` reads it back.

    Attributes:
        key: Name of the identity field
    """

    key = "_id"

    def __init__(
        self,
        data: Mapping[str, typing.Any] | None = None,
        *,
        key: str | None = None,
    ) -> None:
        """Initialize Record.

        Args:
            data: Initial field values (dotted keys are expanded)
            key: Identity field name, overrides the class default
        """
        if key is not None:
            self.key = key
        self._data: dict[str, typing.Any] = {}
        self._modified: set[str] = set()
        self._errors: Errors = {}
        if data:
            self.set(data)

    def __getitem__(self, key: str) -> typing.Any:
        head, rest = _split(key)
        value = self._data[head]
        if rest is None:
            return value
        if not isinstance(value, Mapping):
            raise KeyError(key)
        return _get_path(value, rest, key)

    def __setitem__(self, key: str, value: typing.Any) -> None:
        head, rest = _split(key)
        self._modified.add(head)
        if rest is None:
            self._data[head] = value
            return
        current = self._data.get(head)
        if not isinstance(current, MutableMapping):
            current = {}
            self._data[head] = current
        _set_path(current, rest, value)

    def __delitem__(self, key: str) -> None:
        head, rest = _split(key)
        if rest is None:
            del self._data[head]
            self._modified.discard(head)
            return
        current = self._data[head]
        if not isinstance(current, MutableMapping):
            raise KeyError(key)
        _del_path(current, rest, key)
        self._modified.add(head)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        try:
            self[key]
        except KeyError:
            return False
        return True

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"

    def set(
        self, data: Mapping[str, typing.Any], *, track: bool = True
    ) -> None:
        """Assign several fields at once.

        Args:
            data: Field values to assign (dotted keys are expanded)
            track: Whether the assignment counts as a modification
        """
        for field, value in data.items():
            self[field] = value
            if not track:
                self._modified.discard(_split(field)[0])

    def data(self) -> dict[str, typing.Any]:
        """Return a deep copy of the record's fields as a plain dict."""
        return copy.deepcopy(self._data)

    @property
    def id(self) -> typing.Any:
        """The record identity, or None for records never persisted."""
        return self._data.get(self.key)

    def exists(self) -> bool:
        """Return True if the record carries an identity."""
        return self.id is not None

    def modified(self, field: str | None = None) -> bool | builtins.set[str]:
        """Report change tracking state.

        Args:
            field: Top-level field to check, or None for all modified fields

        Returns:
            Whether ``field`` was assigned since the last sync, or the set
            of all such fields when ``field`` is None
        """
        if field is None:
            return set(self._modified)
        return field in self._modified

    def sync(self, id: typing.Any = None) -> None:
        """Mark the record clean, optionally assigning its identity.

        Args:
            id: Identity assigned by the store on insert
        """
        if id is not None:
            self._data[self.key] = id
        self._modified.clear()

    @property
    def errors(self) -> Errors:
        """The record's error collection."""
        return self._errors

    def add_error(self, field: str, message: str) -> None:
        """Append an error message for a field."""
        self._errors.setdefault(field, []).append(message)

    def set_errors(self, errors: Mapping[str, typing.Iterable[str]]) -> None:
        """Replace the error collection.

        Args:
            errors: Mapping of field name to error messages
        """
        self._errors = {field: list(messages) for field, messages in errors.items()}

    def clone(self) -> "Record":
        """Return a deep copy, including change tracking and errors."""
        return copy.deepcopy(self)


def _get_path(mapping: Mapping[str, typing.Any], path: str, key: str) -> typing.Any:
    value: typing.Any = mapping
    for part in path.split("."):
        if not isinstance(value, Mapping) or part not in value:
            raise KeyError(key)
        value = value[part]
    return value


def _set_path(
    mapping: MutableMapping[str, typing.Any], path: str, value: typing.Any
) -> None:
    *parents, last = path.split(".")
    for part in parents:
        child = mapping.get(part)
        if not isinstance(child, MutableMapping):
            child = {}
            mapping[part] = child
        mapping = child
    mapping[last] = value


def _del_path(mapping: MutableMapping[str, typing.Any], path: str, key: str) -> None:
    *parents, last = path.split(".")
    for part in parents:
        child = mapping.get(part)
        if not isinstance(child, MutableMapping):
            raise KeyError(key)
        mapping = child
    if last not in mapping:
        raise KeyError(key)
    del mapping[last]


def is_empty(localization: Mapping[str, typing.Any]) -> bool:
    """Return True if a Localization carries no field data beyond its locale."""
    return not any(key != "locale" for key in localization)
