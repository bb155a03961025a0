"""Store translatable fields of document records per locale.

A bound model keeps each record's translatable fields in a ``localizations``
list, one entry per locale, while callers read and write ``<locale>.<field>``
values or a single active locale through the plain field names.
"""

__version__ = "0.1.0"

from translatable.behavior import bind, settings_for
from translatable.config import Environment, LocaleSettings, TranslatableConfig
from translatable.errors import NotBoundError, StoreError, TranslatableError
from translatable.model import Model
from translatable.options import FindOptions, FindType
from translatable.record import Record
from translatable.result import DocumentSet
from translatable.rules import ValidationRule, RuleValidator, length_between, not_empty
from translatable.store import DocumentStore, MemoryStore
from translatable.transform import format_return_document, parse_options
from translatable.validate import Validator

__all__ = [
    "bind",
    "settings_for",
    "Environment",
    "LocaleSettings",
    "TranslatableConfig",
    "NotBoundError",
    "StoreError",
    "TranslatableError",
    "Model",
    "FindOptions",
    "FindType",
    "Record",
    "DocumentSet",
    "ValidationRule",
    "RuleValidator",
    "length_between",
    "not_empty",
    "DocumentStore",
    "MemoryStore",
    "format_return_document",
    "parse_options",
    "Validator",
]
