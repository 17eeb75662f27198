from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional

import pytest

from snowcraft.ddl import identifier, keyword, list_field, parameter, static
from snowcraft.exceptions import (
    ERR_NIL_OPTIONS,
    AtLeastOneOfError,
    ConflictingFieldsError,
    ExactlyOneOfError,
    FieldOrderError,
    InvalidObjectIdentifierError,
    InvalidValueError,
    JoinedError,
    OutOfRangeError,
    PatternRequiredForLikeError,
    RequiredIfError,
)
from snowcraft.identifiers import AccountObjectIdentifier, SchemaObjectIdentifier
from snowcraft.validations import (
    AtLeastOneValueSet,
    ConflictingFields,
    ExactlyOneValueSet,
    NotGreaterThan,
    PatternRequiredForLike,
    RequiredIf,
    ValidEnumValue,
    ValidIdentifier,
    ValidIdentifierIfSet,
    ValidIdentifiers,
    ValidRange,
    validate,
    value_set,
)


class Color(str, Enum):
    RED = "RED"
    BLUE = "BLUE"


@dataclass
class Pattern:
    pattern: Optional[str] = keyword("LIKE")

    validations: ClassVar[tuple] = (PatternRequiredForLike(),)


@dataclass
class Item:
    name: Optional[AccountObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class Options:
    alter: bool = static("ALTER THING")
    name: Optional[SchemaObjectIdentifier] = identifier()
    rename_to: Optional[SchemaObjectIdentifier] = identifier("RENAME TO")
    owner: Optional[AccountObjectIdentifier] = identifier("OWNER")
    members: Optional[list] = list_field("MEMBERS")
    comment: Optional[str] = parameter("COMMENT")
    unset_comment: Optional[bool] = keyword("UNSET COMMENT")
    restrict: Optional[bool] = keyword("RESTRICT")
    cascade: Optional[bool] = keyword("CASCADE")
    min_count: Optional[int] = parameter("MIN_COUNT")
    max_count: Optional[int] = parameter("MAX_COUNT")
    resume: Optional[bool] = keyword("RESUME")
    if_paused: Optional[bool] = keyword("IF PAUSED")
    color: Optional[str] = parameter("COLOR")
    like: Optional[Pattern] = keyword()
    items: list = field(default_factory=list)

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ValidIdentifierIfSet("rename_to"),
        ValidIdentifierIfSet("owner"),
        ValidIdentifiers("members"),
        ExactlyOneValueSet("comment", "unset_comment"),
        ConflictingFields("restrict", "cascade"),
        ValidRange("min_count", 1, 10),
        ValidRange("max_count", 1, 10),
        NotGreaterThan("min_count", "max_count"),
        RequiredIf("resume", lambda opts: bool(opts.if_paused), "if_paused is set"),
        ValidEnumValue("color", Color),
    )


def valid_options(**kwargs):
    defaults = dict(name=SchemaObjectIdentifier("DB", "SCH", "X"), comment="c")
    defaults.update(kwargs)
    return Options(**defaults)


class TestValueSet:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, False),
            ([], False),
            ((), False),
            ({}, False),
            (False, True),
            (0, True),
            ("", True),
            (["a"], True),
        ],
    )
    def test_value_set(self, value, expected):
        assert value_set(value) is expected


class TestValidate:
    def test_valid_options(self):
        assert validate(valid_options()) is None

    def test_nil_options(self):
        assert validate(None) is ERR_NIL_OPTIONS

    def test_invalid_identifier(self):
        err = validate(valid_options(name=SchemaObjectIdentifier("DB", "", "X")))
        assert isinstance(err, JoinedError)
        (ident_err,) = err.of_kind(InvalidObjectIdentifierError)
        assert ident_err.field_name == "name"
        assert ident_err.struct_name == "Options"

    def test_missing_identifier(self):
        err = validate(valid_options(name=None))
        assert err.has(InvalidObjectIdentifierError)

    def test_identifier_if_set(self):
        assert validate(valid_options(rename_to=None)) is None
        err = validate(valid_options(owner=AccountObjectIdentifier("")))
        assert err.of_kind(InvalidObjectIdentifierError)[0].field_name == "owner"

    def test_identifier_list(self):
        assert validate(valid_options(members=[AccountObjectIdentifier("A")])) is None
        err = validate(valid_options(members=[AccountObjectIdentifier("A"), AccountObjectIdentifier("")]))
        assert err.of_kind(InvalidObjectIdentifierError)[0].field_name == "members"

    @pytest.mark.parametrize(
        "comment, unset_comment, ok",
        [
            (None, None, False),
            ("c", None, True),
            (None, True, True),
            ("c", True, False),
        ],
    )
    def test_exactly_one(self, comment, unset_comment, ok):
        err = validate(valid_options(comment=comment, unset_comment=unset_comment))
        if ok:
            assert err is None
        else:
            (exactly_one,) = err.of_kind(ExactlyOneOfError)
            assert exactly_one.field_names == ("comment", "unset_comment")

    def test_false_counts_as_set(self):
        err = validate(valid_options(comment=None, unset_comment=False))
        assert err is None

    @pytest.mark.parametrize(
        "restrict, cascade, ok",
        [(None, None, True), (True, None, True), (None, True, True), (True, True, False)],
    )
    def test_conflicting_fields(self, restrict, cascade, ok):
        err = validate(valid_options(restrict=restrict, cascade=cascade))
        assert (err is None) is ok
        if not ok:
            assert err.has(ConflictingFieldsError)

    @pytest.mark.parametrize("value, ok", [(None, True), (1, True), (10, True), (0, False), (11, False), (-1, False)])
    def test_range(self, value, ok):
        err = validate(valid_options(min_count=value))
        assert (err is None) is ok
        if not ok:
            (range_err,) = err.of_kind(OutOfRangeError)
            assert (range_err.field_name, range_err.lo, range_err.hi) == ("min_count", 1, 10)

    def test_field_order(self):
        assert validate(valid_options(min_count=3, max_count=3)) is None
        assert validate(valid_options(min_count=3)) is None
        err = validate(valid_options(min_count=4, max_count=3))
        (order_err,) = err.of_kind(FieldOrderError)
        assert (order_err.lower_field, order_err.upper_field) == ("min_count", "max_count")

    def test_required_if(self):
        assert validate(valid_options(if_paused=True, resume=True)) is None
        err = validate(valid_options(if_paused=True))
        (required,) = err.of_kind(RequiredIfError)
        assert required.field_name == "resume"
        assert "if_paused is set" in str(required)

    @pytest.mark.parametrize("color, ok", [(None, True), ("RED", True), (Color.BLUE, True), ("GREEN", False)])
    def test_enum_value(self, color, ok):
        err = validate(valid_options(color=color))
        assert (err is None) is ok
        if not ok:
            (value_err,) = err.of_kind(InvalidValueError)
            assert value_err.allowed == ("RED", "BLUE")

    def test_nested_struct_is_validated(self):
        assert validate(valid_options(like=Pattern("A%"))) is None
        err = validate(valid_options(like=Pattern()))
        (pattern_err,) = err.of_kind(PatternRequiredForLikeError)
        assert pattern_err.struct_name == "Pattern"

    def test_absent_nested_struct_is_not_validated(self):
        assert validate(valid_options(like=None)) is None

    def test_structs_in_lists_are_validated(self):
        err = validate(valid_options(items=[Item(AccountObjectIdentifier("A")), Item(AccountObjectIdentifier(""))]))
        assert len(err) == 1
        assert err.errors[0].struct_name == "Item"

    def test_all_violations_are_collected(self):
        err = validate(
            valid_options(
                name=None,
                comment=None,
                restrict=True,
                cascade=True,
                min_count=20,
            )
        )
        kinds = {type(e) for e in err}
        assert kinds == {InvalidObjectIdentifierError, ExactlyOneOfError, ConflictingFieldsError, OutOfRangeError}
        assert str(err) == "\n".join(str(e) for e in err.errors)

    def test_at_least_one(self):
        @dataclass
        class Unset:
            comment: Optional[bool] = keyword("COMMENT")
            tag: Optional[bool] = keyword("TAG")

            validations: ClassVar[tuple] = (AtLeastOneValueSet("comment", "tag"),)

        assert validate(Unset(comment=True, tag=True)) is None
        err = validate(Unset())
        assert err.of_kind(AtLeastOneOfError)[0].field_names == ("comment", "tag")


class TestMonotonicity:
    """Adding a violation never removes one that was already reported."""

    @pytest.mark.parametrize(
        "extra",
        [
            dict(restrict=True, cascade=True),
            dict(min_count=0),
            dict(color="GREEN"),
            dict(like=Pattern()),
        ],
    )
    def test_violations_only_accumulate(self, extra):
        base = validate(valid_options(name=None))
        more = validate(valid_options(name=None, **extra))
        assert {type(e) for e in base} <= {type(e) for e in more}
        assert len(more) > len(base)
