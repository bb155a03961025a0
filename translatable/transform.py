"""Transformations between caller-facing and stored localized documents."""

import copy
import logging
import typing

from collections.abc import Iterable, Mapping

from . import options as _options
from . import record as _record

logger = logging.getLogger(__name__)

SUBDOCUMENT = "localizations"
"""Field holding the list of stored Localizations."""


def _locale_key(key: str, locales: typing.Container[str]) -> tuple[str, str] | None:
    locale, dot, field = key.partition(".")
    if dot and field and locale in locales:
        return locale, field
    return None


def rewrite_conditions(
    conditions: Mapping[str, typing.Any],
    fields: Iterable[str],
    locales: Iterable[str],
) -> dict[str, typing.Any]:
    """Point locale-aware conditions into the localizations array.

    ``"<locale>.<field>"`` conditions are grouped per locale into one
    ``$elemMatch`` on ``localizations``, so the locale and the field values
    must hold for the same Localization. Conditions on several locales are
    combined with ``$and``. ``locale`` and translatable fields become
    ``localizations.<field>``; other keys pass through.

    Args:
        conditions: Field predicates
        fields: Translatable field names
        locales: Recognized locale codes

    Returns:
        The rewritten conditions
    """
    translatable = {*fields, "locale"}
    locales = set(locales)
    rewritten: dict[str, typing.Any] = {}
    per_locale: dict[str, dict[str, typing.Any]] = {}

    for key, args in conditions.items():
        split = _locale_key(key, locales)
        if split is not None:
            locale, field = split
            per_locale.setdefault(locale, {"locale": locale})[field] = args
        elif key in translatable:
            rewritten[f"{SUBDOCUMENT}.{key}"] = args
        else:
            rewritten[key] = args

    element_matches = [
        {SUBDOCUMENT: {"$elemMatch": predicate}} for predicate in per_locale.values()
    ]
    if len(element_matches) == 1 and SUBDOCUMENT not in rewritten:
        rewritten.update(element_matches[0])
    elif element_matches:
        rewritten["$and"] = [*rewritten.get("$and", []), *element_matches]

    return rewritten


def rewrite_order(
    order: Mapping[str, typing.Any],
    fields: Iterable[str],
    locales: Iterable[str],
    locale: str | None = None,
) -> dict[str, typing.Any]:
    """Point sort fields into the localizations array.

    ``"<locale>.<field>"`` sorts on that locale's value of the field. A
    plain translatable field sorts on the value for ``locale`` when one is
    given, otherwise on the values of every locale. Such sorts are written
    as ``{"direction": ..., "$elemMatch": {"locale": ...}}``.

    Args:
        order: Sort fields mapped to ``"asc"`` or ``"desc"``
        fields: Translatable field names
        locales: Recognized locale codes
        locale: Locale requested by the find, if any

    Returns:
        The rewritten sort order
    """
    fields = set(fields)
    locales = set(locales)
    rewritten: dict[str, typing.Any] = {}

    for key, direction in order.items():
        split = _locale_key(key, locales)
        if split is None and key in fields and locale is not None:
            split = locale, key
        if split is not None:
            rewritten[f"{SUBDOCUMENT}.{split[1]}"] = {
                "direction": direction,
                "$elemMatch": {"locale": split[0]},
            }
        elif key in fields or key == "locale":
            rewritten[f"{SUBDOCUMENT}.{key}"] = direction
        else:
            rewritten[key] = direction

    return rewritten


def parse_options(
    options: _options.FindOptions,
    fields: Iterable[str],
    locales: Iterable[str],
) -> _options.FindOptions:
    """Rewrite find options for the stored localization layout.

    Args:
        options: Original find options
        fields: Translatable field names
        locales: Recognized locale codes

    Returns:
        Options whose conditions and order address ``localizations``
    """
    fields = tuple(fields)
    locales = tuple(locales)
    changes: dict[str, typing.Any] = {}
    if options.conditions:
        changes["conditions"] = rewrite_conditions(options.conditions, fields, locales)
    if options.order:
        changes["order"] = rewrite_order(options.order, fields, locales, options.locale)
    if changes:
        logger.debug("rewrote find options: %s", changes)
    return options.replace(**changes)


def format_return_document(
    options: _options.FindOptions, fields: Iterable[str]
) -> typing.Callable[[typing.Any], typing.Any]:
    """Build the function that re-projects one found record.

    When ``options.locale`` names a stored Localization, its values are
    flattened onto the record; every Localization met before it (or all of
    them, without a locale) is attached under its locale code instead.

    Args:
        options: Find options, mainly for the requested locale
        fields: Translatable field names

    Returns:
        Function taking a find result and returning it re-projected
    """
    keys = (*fields, "locale")

    def _format(result: typing.Any) -> typing.Any:
        if not isinstance(result, _record.Record):
            return result
        localizations = result.get(SUBDOCUMENT)
        if not localizations:
            return result
        for localization in localizations:
            if not isinstance(localization, Mapping) or _record.is_empty(localization):
                continue
            locale = localization.get("locale")
            if options.locale is not None and options.locale == locale:
                result.set({key: localization.get(key) for key in keys}, track=False)
                return result
            if locale:
                result.set({locale: dict(localization)}, track=False)
        return result

    return _format


def extract_localization(
    source: Mapping[str, typing.Any],
    fields: Iterable[str],
    locale: str,
    only: Iterable[str] | None = None,
) -> _record.Localization:
    """Pick one locale's translatable values out of a mapping.

    Args:
        source: Record or per-locale sub-mapping holding plain field names
        fields: Translatable field names
        locale: Locale the values belong to
        only: Restrict to these field names (e.g. fields modified since load)

    Returns:
        Localization with ``locale`` and every non-None field value found
    """
    allowed = None if only is None else set(only)
    localization: _record.Localization = {"locale": locale}
    for field in fields:
        if allowed is not None and field not in allowed:
            continue
        value = source.get(field)
        if value is not None:
            localization[field] = copy.deepcopy(value)
    return localization


def merge_localizations(
    stored: Iterable[Mapping[str, typing.Any]],
    written: Mapping[str, _record.Localization],
    validation_locale: str | None,
) -> list[_record.Localization]:
    """Merge the Localizations of a save over those already stored.

    Stored Localizations neither written nor being validated are carried
    forward untouched. The others take the written values over the stored
    ones. Written locales with nothing stored yet are appended in order.

    Args:
        stored: Localizations currently persisted, in stored order
        written: Localizations built from this save, keyed by locale
        validation_locale: Locale whose values the validator will see

    Returns:
        The Localizations to persist
    """
    merged: list[_record.Localization] = []
    existing: set[str] = set()

    for localization in stored:
        locale = localization.get("locale")
        if locale in existing:
            logger.warning("dropping duplicate stored localization %r", locale)
            continue
        existing.add(locale)
        if locale not in written and locale != validation_locale:
            merged.append(copy.deepcopy(dict(localization)))
            continue
        update = copy.deepcopy(dict(localization))
        update.update(written.get(locale, {}))
        merged.append(update)

    for locale, localization in written.items():
        if locale not in existing:
            merged.append(localization)

    logger.debug(
        "merged localizations: stored=%s written=%s",
        sorted(filter(None, existing)),
        list(written),
    )
    return merged
