"""Result types for find operations."""

import typing as _t

from collections.abc import Iterable, Iterator, Sequence

from . import record as _record


class DocumentSet(Sequence[_t.Any]):
    """The records returned by an ``all`` or ``search`` find.

    Items are usually Records, but ``each`` may replace them with anything
    its callback returns.
    """

    def __init__(self, records: Iterable[_t.Any] = ()) -> None:
        self._records: list[_t.Any] = list(records)

    @_t.overload
    def __getitem__(self, index: int) -> _t.Any: ...

    @_t.overload
    def __getitem__(self, index: slice) -> list[_t.Any]: ...

    def __getitem__(self, index: int | slice) -> _t.Any:
        return self._records[index]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[_t.Any]:
        return iter(self._records)

    def __repr__(self) -> str:
        return f"DocumentSet({self._records!r})"

    def each(self, func: _t.Callable[[_t.Any], _t.Any]) -> "DocumentSet":
        """Replace every item with ``func(item)`` in place.

        Returns:
            self, for chaining
        """
        self._records = [func(record) for record in self._records]
        return self

    def first(self) -> _t.Any:
        """The first item, or None if the set is empty."""
        return self._records[0] if self._records else None


FindResult = _record.Record | DocumentSet | int | None
"""Type alias for what a find returns: a record, a set, a count, or None."""
