from dataclasses import dataclass, field
from typing import Optional

import pytest

from snowcraft.ddl import identifier, keyword, list_field, parameter, static
from snowcraft.identifiers import AccountObjectIdentifier
from snowcraft.requests import Request, build_if_set, copy_if_set, copy_to_options, true_or_none


@dataclass
class DropThingOptions:
    drop: bool = static("DROP THING")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[AccountObjectIdentifier] = identifier()
    values: Optional[list] = list_field("VALUES")
    comment: Optional[str] = parameter("COMMENT")


@dataclass
class DropThingRequest(Request):
    name: AccountObjectIdentifier
    if_exists: Optional[bool] = None
    values: list = field(default_factory=list)
    comment: Optional[str] = None

    options_class = DropThingOptions


class TestCopyToOptions:
    def test_copies_same_named_fields(self):
        opts = copy_to_options(DropThingRequest(AccountObjectIdentifier("X"), comment="c"), DropThingOptions)
        assert opts.name == AccountObjectIdentifier("X")
        assert opts.comment == "c"

    @pytest.mark.parametrize("flag, expected", [(True, True), (False, None), (None, None)])
    def test_keyword_flags(self, flag, expected):
        opts = copy_to_options(DropThingRequest(AccountObjectIdentifier("X"), if_exists=flag), DropThingOptions)
        assert opts.if_exists is expected

    def test_empty_list_becomes_none(self):
        opts = copy_to_options(DropThingRequest(AccountObjectIdentifier("X")), DropThingOptions)
        assert opts.values is None

    def test_overrides_win(self):
        opts = copy_to_options(
            DropThingRequest(AccountObjectIdentifier("X"), comment="c"), DropThingOptions, comment="other"
        )
        assert opts.comment == "other"

    def test_missing_attributes_are_skipped(self):
        opts = copy_to_options(object(), DropThingOptions)
        assert opts.name is None
        assert opts.drop is True


class TestRequest:
    def test_with_setters_chain(self):
        request = DropThingRequest(AccountObjectIdentifier("X")).with_if_exists(True).with_comment("c")
        assert request.if_exists is True
        assert request.comment == "c"

    def test_unknown_with_setter(self):
        with pytest.raises(AttributeError):
            DropThingRequest(AccountObjectIdentifier("X")).with_color("red")

    def test_unknown_attribute(self):
        with pytest.raises(AttributeError):
            DropThingRequest(AccountObjectIdentifier("X")).color

    def test_to_opts(self):
        opts = DropThingRequest(AccountObjectIdentifier("X"), if_exists=True).to_opts()
        assert isinstance(opts, DropThingOptions)
        assert opts.if_exists is True

    def test_to_opts_without_options_class(self):
        @dataclass
        class Bare(Request):
            name: Optional[str] = None

        with pytest.raises(NotImplementedError):
            Bare().to_opts()


class TestHelpers:
    def test_build_if_set(self):
        assert build_if_set(DropThingOptions, comment=None, values=[]) is None
        opts = build_if_set(DropThingOptions, comment="c", values=[])
        assert opts.comment == "c"

    def test_build_if_set_counts_false(self):
        assert build_if_set(DropThingOptions, if_exists=False) is not None

    def test_copy_if_set(self):
        assert copy_if_set(None, DropThingOptions) is None
        empty = DropThingRequest(AccountObjectIdentifier("X"))
        empty.name = None
        assert copy_if_set(empty, DropThingOptions) is None
        assert copy_if_set(DropThingRequest(AccountObjectIdentifier("X")), DropThingOptions) is not None

    @pytest.mark.parametrize("value, expected", [(True, True), (False, None), (None, None)])
    def test_true_or_none(self, value, expected):
        assert true_or_none(value) is expected
