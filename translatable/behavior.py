"""Locale-aware storage for document models.

``bind`` attaches filters to a model's save, find, validates and remove
pipelines. Saved records keep their translatable fields in a
``localizations`` list, one entry per locale, while callers read and write
either ``<locale>.<field>`` values or a single active locale through the
plain field names.
"""

import logging
import typing

from collections.abc import Mapping

from . import config as _config
from . import errors as _errors
from . import hooks as _hooks
from . import options as _options
from . import record as _record
from . import transform as _transform

logger = logging.getLogger(__name__)

NAME = "translatable"
"""Name the filters and settings are registered under on a model."""


def bind(
    model: typing.Any,
    config: _config.ConfigInput = None,
    *,
    environment: _config.Environment | None = None,
) -> _config.LocaleSettings:
    """Make a model store its translatable fields per locale.

    Rebinding a model replaces its settings and filters.

    Args:
        model: Model exposing ``behaviors`` and ``filters``
        config: TranslatableConfig or mapping of its options
        environment: Provider for locale settings the config leaves out
            (defaults to ``Environment.from_env()``)

    Returns:
        The resolved settings now in effect for ``model``

    Raises:
        pydantic.ValidationError: If ``config`` is invalid
    """
    if environment is None:
        environment = _config.Environment.from_env()
    settings = _config.LocaleSettings.resolve(_config.load_config(config), environment)
    model.behaviors[NAME] = settings

    filters: _hooks.Filters = model.filters
    filters.apply("save", NAME, save_filter(settings))
    filters.apply("find", NAME, find_filter(settings))
    filters.apply("validates", NAME, validates_filter)
    filters.apply("remove", NAME, remove_filter(settings))

    logger.info(
        "bound %s: locales=%s default=%s fields=%s",
        getattr(model, "name", model),
        list(settings.locales),
        settings.default,
        list(settings.fields),
    )
    return settings


def settings_for(model: typing.Any) -> _config.LocaleSettings:
    """Return the settings a model was bound with.

    Raises:
        NotBoundError: If ``bind`` was never called for ``model``
    """
    try:
        return model.behaviors[NAME]
    except KeyError:
        raise _errors.NotBoundError(getattr(model, "name", repr(model))) from None


def _present_locales(
    entity: _record.Record, locales: typing.Iterable[str]
) -> list[str]:
    return [locale for locale in locales if isinstance(entity.get(locale), Mapping)]


def save_filter(settings: _config.LocaleSettings) -> _hooks.Filter:
    """Build the filter normalizing a record into its stored layout."""
    fields = settings.fields
    locales = settings.locales
    default = settings.default

    def _save(
        model: typing.Any, request: _options.SaveRequest, next_: _hooks.Next
    ) -> typing.Any:
        entity = request.entity

        if request.data:
            entity.set(request.data)
            request.data = None

        locale = entity.get("locale")
        present = _present_locales(entity, locales)

        if not locale and not present:
            if default is None:
                entity.add_error("locale", _errors.MISSING_LOCALE)
                logger.info("save aborted: no locale for %s record", model.name)
                return False
            entity["locale"] = locale = default

        written: dict[str, _record.Localization] = {}
        if locale:
            validation_locale = locale
            ignored = [
                code for code in present if code != locale and entity.modified(code)
            ]
            if ignored:
                logger.warning(
                    "single-locale save in %r discards data for %s", locale, ignored
                )
            only = None
            if entity.exists():
                only = [field for field in fields if entity.modified(field)]
            written[locale] = _transform.extract_localization(
                entity, fields, locale, only=only
            )
        else:
            validation_locale = default
            for code in present:
                written[code] = _transform.extract_localization(
                    entity[code], fields, code
                )

        stored: list[typing.Any] = []
        if entity.exists():
            current = model.find(
                _options.FindType.FIRST,
                conditions={entity.key: entity.id},
                ignore_locale=True,
            )
            if current is not None:
                stored = list(current.get(_transform.SUBDOCUMENT) or [])

        entity[_transform.SUBDOCUMENT] = _transform.merge_localizations(
            stored, written, validation_locale
        )
        entity["validation"] = validation_locale

        for key in (*locales, *settings.translatable):
            entity.pop(key, None)

        return next_(request)

    return _save


def find_filter(settings: _config.LocaleSettings) -> _hooks.Filter:
    """Build the filter rewriting queries and re-projecting their results."""

    def _find(
        model: typing.Any, request: _options.FindRequest, next_: _hooks.Next
    ) -> typing.Any:
        options = request.options
        if options.ignore_locale:
            request.options = options.replace(ignore_locale=False)
            return next_(request)

        if options.locale is not None:
            options = options.replace(
                conditions={**options.conditions, "locale": options.locale}
            )
        options = _transform.parse_options(options, settings.fields, settings.locales)
        request.options = options
        result = next_(request)

        if isinstance(result, int):
            return result

        function = _transform.format_return_document(options, settings.fields)
        if request.type in (_options.FindType.ALL, _options.FindType.SEARCH):
            result.each(function)
            return result
        return function(result)

    return _find


def validates_filter(
    model: typing.Any, request: _options.ValidateRequest, next_: _hooks.Next
) -> typing.Any:
    """Validate a record through the values of its validation locale.

    The validator sees a clone with that locale's values flattened onto the
    top level; its errors are copied back onto the original record.
    """
    original = request.entity
    entity = original.clone()
    validation = entity.get("validation")

    if validation is not None:
        for localization in entity.get(_transform.SUBDOCUMENT) or []:
            if isinstance(localization, Mapping) and localization.get("locale") == validation:
                entity.set(dict(localization))
                del entity[_transform.SUBDOCUMENT]
                break

    request.entity = entity
    result = next_(request)
    original.set_errors(request.entity.errors)
    return result


def remove_filter(settings: _config.LocaleSettings) -> _hooks.Filter:
    """Build the filter rewriting remove conditions like find conditions."""

    def _remove(
        model: typing.Any, request: _options.RemoveRequest, next_: _hooks.Next
    ) -> typing.Any:
        options = request.options
        if options.ignore_locale:
            request.options = options.replace(ignore_locale=False)
            return next_(request)
        if options.locale is not None:
            options = options.replace(
                conditions={**options.conditions, "locale": options.locale}
            )
        request.options = _transform.parse_options(
            options, settings.fields, settings.locales
        )
        return next_(request)

    return _remove
