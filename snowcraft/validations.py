"""
Constraint vocabulary for options structs.

Constraints are declared next to the fields they guard, as a class-level tuple:

    @dataclass
    class AlterSessionPolicyOptions:
        ...
        validations: ClassVar[tuple] = (
            ValidIdentifier("name"),
            ExactlyOneValueSet("rename_to", "set", "set_tags", "unset_tags", "unset"),
        )

`validate` checks the struct and every nested struct that is present, collecting
all violations into one JoinedError.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from .exceptions import (
    ERR_NIL_OPTIONS,
    AtLeastOneOfError,
    ConflictingFieldsError,
    ExactlyOneOfError,
    FieldOrderError,
    InvalidObjectIdentifierError,
    InvalidValueError,
    OutOfRangeError,
    PatternRequiredForLikeError,
    RequiredIfError,
    ValidationError,
    join_errors,
)
from .identifiers import valid_object_identifier
from .sql_builder import directives_for, is_struct

logger = logging.getLogger("snowcraft")


def value_set(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) > 0
    return True


class Constraint:
    def check(self, options) -> list[ValidationError]:
        raise NotImplementedError(f"{self.__class__.__name__} must implement check")


def _struct_name(options) -> str:
    return type(options).__name__


@dataclass(frozen=True)
class ValidIdentifier(Constraint):
    field: str

    def check(self, options):
        if not valid_object_identifier(getattr(options, self.field)):
            return [InvalidObjectIdentifierError(_struct_name(options), self.field)]
        return []


@dataclass(frozen=True)
class ValidIdentifierIfSet(Constraint):
    field: str

    def check(self, options):
        value = getattr(options, self.field)
        if value_set(value) and not valid_object_identifier(value):
            return [InvalidObjectIdentifierError(_struct_name(options), self.field)]
        return []


@dataclass(frozen=True)
class ValidIdentifiers(Constraint):
    """Every element of a list of identifiers is well formed."""

    field: str

    def check(self, options):
        values = getattr(options, self.field) or []
        if any(not valid_object_identifier(value) for value in values):
            return [InvalidObjectIdentifierError(_struct_name(options), self.field)]
        return []


class _FieldGroup(Constraint):
    def __init__(self, *fields: str):
        self.fields = tuple(fields)

    def count_set(self, options) -> int:
        return sum(1 for name in self.fields if value_set(getattr(options, name)))

    def __repr__(self):
        return f"{self.__class__.__name__}{self.fields}"


class ExactlyOneValueSet(_FieldGroup):
    def check(self, options):
        if self.count_set(options) != 1:
            return [ExactlyOneOfError(_struct_name(options), self.fields)]
        return []


class AtLeastOneValueSet(_FieldGroup):
    def check(self, options):
        if self.count_set(options) == 0:
            return [AtLeastOneOfError(_struct_name(options), self.fields)]
        return []


class ConflictingFields(_FieldGroup):
    def check(self, options):
        if self.count_set(options) > 1:
            return [ConflictingFieldsError(_struct_name(options), self.fields)]
        return []


@dataclass(frozen=True)
class ValidRange(Constraint):
    field: str
    lo: int
    hi: int

    def check(self, options):
        value = getattr(options, self.field)
        if value is None:
            return []
        if not (self.lo <= value <= self.hi):
            return [OutOfRangeError(_struct_name(options), self.field, self.lo, self.hi)]
        return []


@dataclass(frozen=True)
class NotGreaterThan(Constraint):
    """When both fields are set, `field` must not exceed `upper`."""

    field: str
    upper: str

    def check(self, options):
        value = getattr(options, self.field)
        upper = getattr(options, self.upper)
        if value is not None and upper is not None and value > upper:
            return [FieldOrderError(_struct_name(options), self.field, self.upper)]
        return []


@dataclass(frozen=True)
class RequiredIf(Constraint):
    field: str
    condition: Callable[[Any], bool]
    description: str

    def check(self, options):
        if self.condition(options) and not value_set(getattr(options, self.field)):
            return [RequiredIfError(_struct_name(options), self.field, self.description)]
        return []


@dataclass(frozen=True)
class ValidEnumValue(Constraint):
    """A string field holds one of the values of a closed enum."""

    field: str
    enum: type[Enum]

    def check(self, options):
        value = getattr(options, self.field)
        if value is None or isinstance(value, self.enum):
            return []
        allowed = tuple(member.value for member in self.enum)
        if value in allowed:
            return []
        return [InvalidValueError(_struct_name(options), self.field, value, allowed)]


@dataclass(frozen=True)
class PatternRequiredForLike(Constraint):
    """Declared on the LIKE clause itself, so it only runs when the clause is present."""

    field: str = "pattern"

    def check(self, options):
        if not getattr(options, self.field):
            return [PatternRequiredForLikeError(_struct_name(options))]
        return []


def _collect(options, errors: list):
    for constraint in getattr(type(options), "validations", ()):
        errors.extend(constraint.check(options))
    for name, _ in directives_for(type(options)):
        value = getattr(options, name)
        if is_struct(value):
            _collect(value, errors)
        elif isinstance(value, (list, tuple)):
            for item in value:
                if is_struct(item):
                    _collect(item, errors)


def validate(options) -> Optional[Exception]:
    if options is None:
        return ERR_NIL_OPTIONS
    errors: list[ValidationError] = []
    _collect(options, errors)
    err = join_errors(errors)
    if err is not None:
        logger.debug(f"{_struct_name(options)} failed validation: {err}")
    return err
