"""Rule-based parameter checking for command builders.

Command builders declare a RuleSet (an ordered mapping of field name to Rule)
and check caller arguments against it before any byte is sent.

Usage:
    rules = {
        "position": Rule(type="integer", required=True, min=0, max=100),
        "mode": Rule(type="integer", min=0, max=1),
    }
    result = ParameterChecker.check({"position": 40}, rules, required=True)
    if not result:
        print(result.error.code, result.error.name)
"""

from __future__ import annotations

import re
from collections.abc import Collection, Mapping
from dataclasses import dataclass
from typing import Any

from .exceptions import ValidationError

MISSING_REQUIRED = "MISSING_REQUIRED"
TYPE_INVALID = "TYPE_INVALID"
TYPE_UNKNOWN = "TYPE_UNKNOWN"
VALUE_UNDERFLOW = "VALUE_UNDERFLOW"
VALUE_OVERFLOW = "VALUE_OVERFLOW"
LENGTH_UNDERFLOW = "LENGTH_UNDERFLOW"
LENGTH_OVERFLOW = "LENGTH_OVERFLOW"
PATTERN_UNMATCH = "PATTERN_UNMATCH"
ENUM_UNMATCH = "ENUM_UNMATCH"


@dataclass(frozen=True, slots=True)
class Rule:
    """Constraints for one field.

    Bounds are inclusive. A bound that is None or not a number is ignored.

    Attributes:
        type: One of "float", "integer", "boolean", "array", "object", "string"
        required: Fail with MISSING_REQUIRED when the value is absent
        min: Minimum value (numbers) or minimum length (strings, arrays)
        max: Maximum value (numbers) or maximum length (strings, arrays)
        min_bytes: Minimum UTF-8 byte length (strings)
        max_bytes: Maximum UTF-8 byte length (strings)
        pattern: Regular expression the string must contain a match for
        enum: Allowed values, any non-string collection (ignored when empty)
    """

    type: str | None = None
    required: bool = False
    min: Any = None
    max: Any = None
    min_bytes: Any = None
    max_bytes: Any = None
    pattern: re.Pattern[str] | str | None = None
    enum: Collection[Any] | None = None


RuleSet = Mapping[str, Rule]


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """First violated condition found by a check."""

    code: str
    message: str
    name: str | None = None

    def to_exception(self) -> ValidationError:
        return ValidationError(self.code, self.message, self.name)


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Outcome of one check call. Truthy when valid."""

    error: ValidationIssue | None = None

    @property
    def valid(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.error is None


_OK = CheckResult()

_TYPE_CHECKERS = {
    "float": "is_float",
    "integer": "is_integer",
    "boolean": "is_boolean",
    "array": "is_array",
    "object": "is_object",
    "string": "is_string",
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _fail(code: str, message: str, name: str | None = None) -> CheckResult:
    return CheckResult(ValidationIssue(code, message, name))


def _enum_values(rule: Rule) -> list[Any] | None:
    enum = rule.enum
    if isinstance(enum, (str, bytes, Mapping)) or not isinstance(enum, Collection):
        return None
    if len(enum) > 0:
        return list(enum)
    return None


def _enum_repr(values: list[Any]) -> str:
    return "[" + ", ".join(repr(v) for v in values) + "]"


class ParameterChecker:
    """Stateless checker evaluating argument mappings against a RuleSet."""

    @classmethod
    def check(
        cls,
        obj: Mapping[str, Any] | None,
        rules: RuleSet,
        required: bool = False,
    ) -> CheckResult:
        """Check that obj contains valid values for every rule.

        Args:
            obj: Mapping of parameter names to values
            rules: Ordered mapping of parameter names to rules
            required: Whether obj itself must be supplied

        Returns:
            CheckResult carrying the first violated rule, if any
        """
        if obj is None:
            if required:
                return _fail(MISSING_REQUIRED, "The first argument is missing.")
            return _OK

        if not isinstance(obj, Mapping):
            return _fail(MISSING_REQUIRED, "The first argument is missing.")

        for name, rule in rules.items():
            value = obj.get(name)

            if value is None:
                if rule.required:
                    return _fail(MISSING_REQUIRED, f"The `{name}` is required.", name)
                continue

            method_name = _TYPE_CHECKERS.get(rule.type) if rule.type else None
            if method_name is None:
                return _fail(
                    TYPE_UNKNOWN,
                    f"The rule specified for the `{name}` includes an unknown type: {rule.type}",
                    name,
                )

            result = getattr(cls, method_name)(value, rule, name)
            if not result:
                return result

        return _OK

    @classmethod
    def ensure(
        cls,
        obj: Mapping[str, Any] | None,
        rules: RuleSet,
        required: bool = False,
    ) -> None:
        """Like check(), but raise ValidationError on the first violation."""
        result = cls.check(obj, rules, required)
        if result.error is not None:
            raise result.error.to_exception()

    @staticmethod
    def is_float(value: Any, rule: Rule, name: str = "value") -> CheckResult:
        if not _is_number(value):
            return _fail(TYPE_INVALID, f"The `{name}` must be a number (integer or float).", name)

        if _is_number(rule.min) and value < rule.min:
            return _fail(
                VALUE_UNDERFLOW,
                f"The `{name}` must be greater than or equal to {rule.min}.",
                name,
            )
        if _is_number(rule.max) and value > rule.max:
            return _fail(
                VALUE_OVERFLOW,
                f"The `{name}` must be less than or equal to {rule.max}.",
                name,
            )

        allowed = _enum_values(rule)
        if allowed is not None and value not in allowed:
            return _fail(ENUM_UNMATCH, f"The `{name}` must be any one of {_enum_repr(allowed)}.", name)

        return _OK

    @staticmethod
    def is_integer(value: Any, rule: Rule, name: str = "value") -> CheckResult:
        result = ParameterChecker.is_float(value, rule, name)
        if not result:
            return result
        if value % 1 != 0:
            return _fail(TYPE_INVALID, f"The `{name}` must be an integer.", name)
        return _OK

    @staticmethod
    def is_boolean(value: Any, rule: Rule, name: str = "value") -> CheckResult:
        if not isinstance(value, bool):
            return _fail(TYPE_INVALID, f"The `{name}` must be boolean.", name)
        return _OK

    @staticmethod
    def is_object(value: Any, rule: Rule, name: str = "value") -> CheckResult:
        if not isinstance(value, Mapping):
            return _fail(TYPE_INVALID, f"The `{name}` must be an object.", name)
        return _OK

    @staticmethod
    def is_array(value: Any, rule: Rule, name: str = "value") -> CheckResult:
        if not isinstance(value, (list, tuple)):
            return _fail(TYPE_INVALID, f"The `{name}` must be an array.", name)

        if _is_number(rule.min) and len(value) < rule.min:
            return _fail(
                LENGTH_UNDERFLOW,
                f"The number of elements in the `{name}` must be greater than or equal to {rule.min}.",
                name,
            )
        if _is_number(rule.max) and len(value) > rule.max:
            return _fail(
                LENGTH_OVERFLOW,
                f"The number of elements in the `{name}` must be less than or equal to {rule.max}.",
                name,
            )
        return _OK

    @staticmethod
    def is_string(value: Any, rule: Rule, name: str = "value") -> CheckResult:
        if not isinstance(value, str):
            return _fail(TYPE_INVALID, f"The `{name}` must be a string.", name)

        if _is_number(rule.min) and len(value) < rule.min:
            return _fail(
                LENGTH_UNDERFLOW,
                f"The number of characters in the `{name}` must be greater than or equal to {rule.min}.",
                name,
            )
        if _is_number(rule.max) and len(value) > rule.max:
            return _fail(
                LENGTH_OVERFLOW,
                f"The number of characters in the `{name}` must be less than or equal to {rule.max}.",
                name,
            )

        if _is_number(rule.min_bytes) or _is_number(rule.max_bytes):
            byte_length = len(value.encode("utf-8"))
            if _is_number(rule.min_bytes) and byte_length < rule.min_bytes:
                return _fail(
                    LENGTH_UNDERFLOW,
                    f"The byte length of the `{name}` ({byte_length} bytes) must be "
                    f"greater than or equal to {rule.min_bytes} bytes.",
                    name,
                )
            if _is_number(rule.max_bytes) and byte_length > rule.max_bytes:
                return _fail(
                    LENGTH_OVERFLOW,
                    f"The byte length of the `{name}` ({byte_length} bytes) must be "
                    f"less than or equal to {rule.max_bytes} bytes.",
                    name,
                )

        if rule.pattern is not None and re.search(rule.pattern, value) is None:
            return _fail(PATTERN_UNMATCH, f"The `{name}` does not conform with the pattern.", name)

        allowed = _enum_values(rule)
        if allowed is not None and value not in allowed:
            return _fail(ENUM_UNMATCH, f"The `{name}` must be any one of {_enum_repr(allowed)}.", name)

        return _OK
