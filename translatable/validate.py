import logging
import typing as _typing

import pydantic as _pydantic

from . import record as _record
from . import rules as _rules

logger = logging.getLogger(__name__)


def _pydantic_errors(error: _pydantic.ValidationError) -> dict[str, list[str]]:
    """Group a pydantic ValidationError's messages by top-level field.

    Args:
        error: Error raised by ``model_validate``

    Returns:
        Messages keyed by field name ('*' for errors without a location)
    """
    errors: dict[str, list[str]] = {}
    for detail in error.errors():
        loc = detail.get("loc") or ("*",)
        errors.setdefault(str(loc[0]), []).append(detail["msg"])
    return errors


class Validator:
    """Generic validation engine for records.

    Checks a record's top-level fields against an optional pydantic model,
    then against field rules. Errors from both are merged by field.

    Attributes:
        schema: Pydantic BaseModel class the record must satisfy, or None
        rules: Additional rules applied to the raw field values
    """

    def __init__(
        self,
        schema: type[_pydantic.BaseModel] | None = None,
        rules: _typing.Iterable[_rules.ValidationRule] = (),
        *,
        strict: bool | None = None,
    ) -> None:
        """Initialize Validator.

        Args:
            schema: Pydantic BaseModel class to validate against
            rules: Field rules to check
            strict: Whether to use strict pydantic validation
        """
        self.schema = schema
        self.rules = list(rules)
        self.strict = strict
        self._rule_validator = _rules.RuleValidator(self.rules)

    def check(self, record: _typing.Mapping[str, _typing.Any]) -> dict[str, list[str]]:
        """Validate a record.

        Args:
            record: Record (or plain mapping) to validate

        Returns:
            Error messages keyed by field name, empty if valid
        """
        data = record.data() if isinstance(record, _record.Record) else dict(record)
        errors: dict[str, list[str]] = {}

        if self.schema is not None:
            try:
                self.schema.model_validate(data, strict=self.strict)
            except _pydantic.ValidationError as e:
                errors = _pydantic_errors(e)

        for field, messages in self._rule_validator.validate(data).items():
            errors.setdefault(field, []).extend(messages)

        if errors:
            logger.debug("validation failed on fields %s", sorted(errors))
        return errors

    __call__ = check
