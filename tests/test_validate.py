"""Tests for translatable.validate and translatable.rules modules."""

import pydantic

from translatable import Record, RuleValidator, ValidationRule, Validator
from translatable.rules import length_between, not_empty


class Artist(pydantic.BaseModel):
    name: str
    rank: int = 0


def test_not_empty_rule():
    """Test that missing, None and blank values fail not_empty."""
    validator = RuleValidator([not_empty("name")])

    assert validator.validate({"name": "Taro"}) == {}
    assert validator.validate({}) == {"name": ["name should not be empty."]}
    assert validator.validate({"name": None}) != {}
    assert validator.validate({"name": "  "}) != {}


def test_length_between_skips_absent_fields():
    """Test that optional rules only run on present fields."""
    validator = RuleValidator([length_between("name", 4, 20)])

    assert validator.validate({}) == {}
    assert validator.validate({"name": "Bo"}) == {
        "name": ["name should be between 4 and 20 characters."]
    }


def test_rules_collect_all_messages_in_priority_order():
    """Test that every failing rule reports, lower priority first."""
    validator = RuleValidator(
        [
            length_between("name", 4, 20, "length", priority=2),
            not_empty("name", "empty", priority=1),
        ]
    )

    assert validator.validate({"name": ""}) == {"name": ["empty", "length"]}


def test_record_level_rule():
    """Test rules registered on '*' receive the whole record."""
    rule = ValidationRule("*", lambda record: "name" in record, "needs a name")

    assert RuleValidator([rule]).validate({"other": 1}) == {"*": ["needs a name"]}


def test_rule_exception_is_failure():
    """Test that a rule raising TypeError counts as a failed check."""
    rule = ValidationRule("name", lambda value: len(value) > 2, "bad", required=True)

    is_valid, message = rule.validate(None)

    assert is_valid is False
    assert message.startswith("bad: ")


def test_validator_with_schema_and_rules():
    """Test that schema and rule errors are merged by field."""
    validator = Validator(Artist, [length_between("name", 4, 20, "length")])

    errors = validator.check(Record({"name": "Bo", "rank": "high"}))

    assert errors["name"] == ["length"]
    assert len(errors["rank"]) == 1


def test_validator_accepts_valid_record():
    validator = Validator(Artist, [not_empty("name")])

    assert validator(Record({"name": "Taro", "extra": True})) == {}


def test_validator_missing_schema_field():
    """Test that a missing required schema field is reported on that field."""
    errors = Validator(Artist).check({"rank": 1})

    assert list(errors) == ["name"]
