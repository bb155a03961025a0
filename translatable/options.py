"""Request and option types passed through the filter pipelines."""

import dataclasses
import typing

from enum import Enum

from . import record as _record


class FindType(str, Enum):
    """Result shapes a find can produce.

    Attributes:
        FIRST: A single record, or None
        ALL: A DocumentSet of every matching record
        SEARCH: Same shape as ALL, kept distinct for filters that care
        COUNT: The number of matching records
    """

    FIRST = "first"
    ALL = "all"
    SEARCH = "search"
    COUNT = "count"


IGNORE_LOCALE = "Ignore-Locale"
"""Option name of the marker that bypasses locale rewriting on find."""


@dataclasses.dataclass(frozen=True)
class FindOptions:
    """Query options for find, count and remove.

    Attributes:
        conditions: Field predicates, possibly locale-prefixed (``"ja.name"``)
        order: Sort fields mapped to ``"asc"`` or ``"desc"``, or to a mapping
            with ``direction`` and an ``$elemMatch`` filter on array elements
        locale: Locale to flatten onto returned records
        limit: Maximum number of records returned
        offset: Number of matching records skipped
        ignore_locale: Bypass locale rewriting and re-projection
    """

    conditions: dict[str, typing.Any] = dataclasses.field(default_factory=dict)
    order: dict[str, typing.Any] = dataclasses.field(default_factory=dict)
    locale: str | None = None
    limit: int | None = None
    offset: int = 0
    ignore_locale: bool = False

    @classmethod
    def build(cls, **options: typing.Any) -> "FindOptions":
        """Build options from keyword arguments.

        Accepts the ``Ignore-Locale`` spelling through ``**{"Ignore-Locale": True}``.
        """
        if IGNORE_LOCALE in options:
            options["ignore_locale"] = bool(options.pop(IGNORE_LOCALE))
        for name in ("conditions", "order"):
            if options.get(name) is None:
                options.pop(name, None)
            else:
                options[name] = dict(options[name])
        return cls(**options)

    def replace(self, **changes: typing.Any) -> "FindOptions":
        return dataclasses.replace(self, **changes)


@dataclasses.dataclass
class SaveRequest:
    entity: _record.Record
    data: dict[str, typing.Any] | None = None
    validate: bool = True


@dataclasses.dataclass
class FindRequest:
    type: FindType
    options: FindOptions


@dataclasses.dataclass
class ValidateRequest:
    entity: _record.Record


@dataclasses.dataclass
class RemoveRequest:
    options: FindOptions
