"""
Field directives for option structs.

An option struct is a dataclass whose fields are declared with the factories below.
The directive stored in the field metadata tells the renderer how the field becomes SQL
and the declaration order of the fields is the order of the emitted tokens.

    @dataclass
    class DropPasswordPolicyOptions:
        drop: bool = static("DROP")
        password_policy: bool = static("PASSWORD POLICY")
        if_exists: Optional[bool] = keyword("IF EXISTS")
        name: Optional[SchemaObjectIdentifier] = identifier()

renders as `DROP PASSWORD POLICY IF EXISTS "DB"."SCH"."POLICY"`.
"""

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any

DIRECTIVE = "snowcraft.directive"


class DDL(str, Enum):
    STATIC = "static"
    KEYWORD = "keyword"
    PARAMETER = "parameter"
    IDENTIFIER = "identifier"
    LIST = "list"


class Quotes(str, Enum):
    NO_QUOTES = "no_quotes"
    SINGLE_QUOTES = "single_quotes"
    DOUBLE_QUOTES = "double_quotes"

    @property
    def char(self) -> str:
        if self == Quotes.SINGLE_QUOTES:
            return "'"
        if self == Quotes.DOUBLE_QUOTES:
            return '"'
        return ""

    def apply(self, value: str) -> str:
        char = self.char
        if not char:
            return value
        return char + value.replace(char, char + char) + char


class Equals(str, Enum):
    EQUALS = "equals"
    ARROW_EQUALS = "arrow_equals"
    NO_EQUALS = "no_equals"

    def prefix(self, key: str) -> str:
        if self == Equals.EQUALS:
            return f"{key} = ".lstrip(" ")
        if self == Equals.ARROW_EQUALS:
            return f"{key} => ".lstrip(" ")
        return f"{key} ".lstrip(" ")


class Parens(str, Enum):
    PARENTHESES = "parentheses"
    NO_PARENTHESES = "no_parentheses"

    def apply(self, value: str) -> str:
        if self == Parens.PARENTHESES:
            return f"({value})"
        return value


class Comma(str, Enum):
    COMMA = "comma"
    NO_COMMA = "no_comma"

    def join(self, values: list[str]) -> str:
        if self == Comma.COMMA:
            return ", ".join(values)
        return " ".join(values)


NO_QUOTES = Quotes.NO_QUOTES
SINGLE_QUOTES = Quotes.SINGLE_QUOTES
DOUBLE_QUOTES = Quotes.DOUBLE_QUOTES
EQUALS = Equals.EQUALS
ARROW_EQUALS = Equals.ARROW_EQUALS
NO_EQUALS = Equals.NO_EQUALS
PARENTHESES = Parens.PARENTHESES
NO_PARENTHESES = Parens.NO_PARENTHESES
COMMA = Comma.COMMA
NO_COMMA = Comma.NO_COMMA


@dataclass(frozen=True)
class Directive:
    ddl: DDL
    sql: str = ""
    quotes: Quotes = NO_QUOTES
    equals: Equals = EQUALS
    parens: Parens = NO_PARENTHESES
    comma: Comma = COMMA


def _field(directive: Directive, default: Any = None, **kwargs):
    return dataclasses.field(default=default, metadata={DIRECTIVE: directive}, **kwargs)


def static(sql: str):
    """Always emitted. Not settable by callers."""
    return _field(Directive(DDL.STATIC, sql), default=True, init=False, repr=False, compare=False)


def keyword(
    sql: str = "",
    quotes: Quotes = NO_QUOTES,
    parens: Parens = NO_PARENTHESES,
    comma: Comma = COMMA,
):
    return _field(Directive(DDL.KEYWORD, sql, quotes=quotes, parens=parens, comma=comma))


def parameter(
    sql: str = "",
    quotes: Quotes = NO_QUOTES,
    equals: Equals = EQUALS,
    parens: Parens = NO_PARENTHESES,
    comma: Comma = COMMA,
):
    return _field(Directive(DDL.PARAMETER, sql, quotes=quotes, equals=equals, parens=parens, comma=comma))


def identifier(sql: str = "", equals: Equals = NO_EQUALS, parens: Parens = NO_PARENTHESES):
    return _field(Directive(DDL.IDENTIFIER, sql, equals=equals, parens=parens))


def list_field(sql: str = "", parens: Parens = NO_PARENTHESES, comma: Comma = COMMA, quotes: Quotes = NO_QUOTES):
    return _field(Directive(DDL.LIST, sql, quotes=quotes, parens=parens, comma=comma))


def embedded():
    """A nested struct rendered in place, without a leading keyword."""
    return dataclasses.field(default=None)


def directive_of(field: dataclasses.Field):
    return field.metadata.get(DIRECTIVE)
