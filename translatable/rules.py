"""Field rules checked by the validator."""

import typing


class ValidationRule:
    """A rule applied to one field (or the whole record) of a document.

    Attributes:
        field: Field name to validate (or '*' for record-level)
        validator: Function that takes value and returns bool
        message: Error message if validation fails
        priority: Execution order (lower numbers execute first)
        required: Check the field even when the record lacks it (value None)
    """

    def __init__(
        self,
        field: str,
        validator: typing.Callable[[typing.Any], bool],
        message: str,
        priority: int = 0,
        required: bool = False,
    ) -> None:
        """Initialize ValidationRule.

        Args:
            field: Field name or '*' for record-level validation
            validator: Function(value) -> bool (True if valid)
            message: Error message if validation fails
            priority: Execution order
            required: Run even when the field is absent
        """
        self.field = field
        self.validator = validator
        self.message = message
        self.priority = priority
        self.required = required

    def validate(self, value: typing.Any) -> tuple[bool, str]:
        """Validate a value.

        Args:
            value: Value to validate

        Returns:
            Tuple of (is_valid, error_message)
        """
        try:
            is_valid = bool(self.validator(value))
        except (TypeError, ValueError) as e:
            return (False, f"{self.message}: {e}")
        return (is_valid, "" if is_valid else self.message)


def not_empty(field: str, message: str | None = None, priority: int = 0) -> ValidationRule:
    """Rule failing on a missing, None, or blank value."""

    def check(value: typing.Any) -> bool:
        if value is None:
            return False
        if isinstance(value, str):
            return bool(value.strip())
        return True

    return ValidationRule(
        field,
        check,
        message or f"{field} should not be empty.",
        priority=priority,
        required=True,
    )


def length_between(
    field: str,
    min: int,
    max: int,
    message: str | None = None,
    priority: int = 0,
) -> ValidationRule:
    """Rule requiring ``min <= len(value) <= max`` for present values."""
    return ValidationRule(
        field,
        lambda value: min <= len(value) <= max,
        message or f"{field} should be between {min} and {max} characters.",
        priority=priority,
    )


class RuleValidator:
    """Validates records against a collection of rules."""

    def __init__(self, rules: typing.Iterable[ValidationRule]) -> None:
        """Initialize RuleValidator.

        Args:
            rules: Collection of ValidationRule instances
        """
        self.rules = sorted(rules, key=lambda r: r.priority)
        self.field_rules: dict[str, list[ValidationRule]] = {}
        self.record_rules: list[ValidationRule] = []

        for rule in self.rules:
            if rule.field == "*":
                self.record_rules.append(rule)
            else:
                self.field_rules.setdefault(rule.field, []).append(rule)

    def validate(
        self, record: typing.Mapping[str, typing.Any]
    ) -> dict[str, list[str]]:
        """Validate a record against rules.

        Args:
            record: Top-level field values

        Returns:
            Error messages keyed by field ('*' for record rules), empty if valid
        """
        errors: dict[str, list[str]] = {}

        for rule in self.record_rules:
            is_valid, error_msg = rule.validate(record)
            if not is_valid:
                errors.setdefault("*", []).append(error_msg)

        for field_name, field_rules in self.field_rules.items():
            present = field_name in record
            value = record.get(field_name)
            for rule in field_rules:
                if not present and not rule.required:
                    continue
                is_valid, error_msg = rule.validate(value)
                if not is_valid:
                    errors.setdefault(field_name, []).append(error_msg)

        return errors
