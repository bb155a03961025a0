"""Configuration for translatable models."""

import os
import typing

from collections.abc import Mapping
from dataclasses import dataclass, field

import pydantic


LOCALE_VAR = "TRANSLATABLE_LOCALE"
LOCALES_VAR = "TRANSLATABLE_LOCALES"


def _check_unique(values: tuple[str, ...], what: str) -> tuple[str, ...]:
    seen: set[str] = set()
    for value in values:
        if not value:
            raise ValueError(f"{what} must not be empty strings")
        if "." in value:
            raise ValueError(f"{what} must not contain '.': {value!r}")
        if value in seen:
            raise ValueError(f"duplicate {what[:-1]}: {value!r}")
        seen.add(value)
    return values


class TranslatableConfig(pydantic.BaseModel):
    """Options a model is bound with.

    Attributes:
        default: Locale assumed when a save carries no locale information
        locales: Recognized locale codes, in order (None to use the environment)
        fields: Names of the translatable fields
    """

    model_config = pydantic.ConfigDict(frozen=True, extra="forbid")

    default: str | None = None
    locales: tuple[str, ...] | None = None
    fields: tuple[str, ...] = ()

    @pydantic.field_validator("locales")
    @classmethod
    def _validate_locales(
        cls, value: tuple[str, ...] | None
    ) -> tuple[str, ...] | None:
        if value is None:
            return value
        if not value:
            raise ValueError("locales must not be empty when configured")
        return _check_unique(value, "locales")

    @pydantic.field_validator("fields")
    @classmethod
    def _validate_fields(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if "locale" in value:
            raise ValueError("'locale' is always translatable and cannot be listed")
        return _check_unique(value, "fields")


@dataclass
class Environment:
    """Process-level locale settings used when a config leaves them out.

    Attributes:
        locale: The current default locale
        locales: Recognized locale codes mapped to display names
    """

    locale: str | None = None
    locales: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Environment":
        """Read locale settings from environment variables.

        ``TRANSLATABLE_LOCALE`` names the current locale and
        ``TRANSLATABLE_LOCALES`` lists recognized locales, comma separated,
        each optionally given a display name as ``code:Name``.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            Environment built from the variables that are set
        """
        if environ is None:
            environ = os.environ
        locales: dict[str, str] = {}
        for item in environ.get(LOCALES_VAR, "").split(","):
            code, _, name = item.strip().partition(":")
            if code:
                locales[code] = name.strip() or code
        return cls(locale=environ.get(LOCALE_VAR) or None, locales=locales)


@dataclass(frozen=True)
class LocaleSettings:
    """Resolved settings a bound model's filters work with.

    Attributes:
        default: Default locale, or None
        locales: Recognized locale codes
        fields: Translatable field names, not including ``locale``
    """

    default: str | None
    locales: tuple[str, ...]
    fields: tuple[str, ...]

    @classmethod
    def resolve(
        cls,
        config: TranslatableConfig,
        environment: Environment | None = None,
    ) -> "LocaleSettings":
        """Fill the gaps in ``config`` from ``environment``."""
        environment = environment or Environment()
        if config.locales is not None:
            locales = config.locales
        else:
            locales = tuple(environment.locales)
        default = config.default if config.default is not None else environment.locale
        return cls(default=default, locales=locales, fields=config.fields)

    @property
    def translatable(self) -> tuple[str, ...]:
        """Translatable fields plus ``locale``."""
        return (*self.fields, "locale")


ConfigInput = TranslatableConfig | Mapping[str, typing.Any] | None


def load_config(config: ConfigInput = None) -> TranslatableConfig:
    """Coerce a mapping (or nothing) into a TranslatableConfig.

    Raises:
        pydantic.ValidationError: If the mapping is not a valid configuration
    """
    if isinstance(config, TranslatableConfig):
        return config
    return TranslatableConfig.model_validate(dict(config or {}))
