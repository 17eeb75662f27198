"""Sub-clauses shared by many options structs."""

from dataclasses import dataclass
from typing import Any, ClassVar, Optional

from .ddl import ARROW_EQUALS, NO_EQUALS, PARENTHESES, SINGLE_QUOTES, identifier, keyword, list_field, parameter
from .identifiers import (
    AccountObjectIdentifier,
    DatabaseObjectIdentifier,
    Identifier,
    SchemaObjectIdentifier,
)
from .validations import (
    ExactlyOneValueSet,
    PatternRequiredForLike,
    ValidIdentifier,
    ValidIdentifierIfSet,
    ValidIdentifiers,
)


@dataclass
class Like:
    pattern: Optional[str] = keyword("LIKE", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (PatternRequiredForLike(),)


@dataclass
class In:
    account: Optional[bool] = keyword("IN ACCOUNT")
    database: Optional[AccountObjectIdentifier] = identifier("IN DATABASE")
    schema: Optional[DatabaseObjectIdentifier] = identifier("IN SCHEMA")

    validations: ClassVar[tuple] = (
        ExactlyOneValueSet("account", "database", "schema"),
        ValidIdentifierIfSet("database"),
        ValidIdentifierIfSet("schema"),
    )


@dataclass
class ExtendedIn:
    """IN clause that can also point at a table or view, as used by SHOW STREAMS."""

    account: Optional[bool] = keyword("IN ACCOUNT")
    database: Optional[AccountObjectIdentifier] = identifier("IN DATABASE")
    schema: Optional[DatabaseObjectIdentifier] = identifier("IN SCHEMA")
    table: Optional[SchemaObjectIdentifier] = identifier("IN TABLE")
    view: Optional[SchemaObjectIdentifier] = identifier("IN VIEW")

    validations: ClassVar[tuple] = (
        ExactlyOneValueSet("account", "database", "schema", "table", "view"),
        ValidIdentifierIfSet("database"),
        ValidIdentifierIfSet("schema"),
        ValidIdentifierIfSet("table"),
        ValidIdentifierIfSet("view"),
    )


@dataclass
class StartsWith:
    value: Optional[str] = parameter("STARTS WITH", quotes=SINGLE_QUOTES, equals=NO_EQUALS)


@dataclass
class LimitFrom:
    rows: Optional[int] = keyword("LIMIT")
    from_: Optional[str] = parameter("FROM", quotes=SINGLE_QUOTES, equals=NO_EQUALS)


@dataclass
class TagAssociation:
    name: Optional[Identifier] = keyword()
    value: Optional[str] = parameter(quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class SetTags:
    """ALTER ... SET TAG t1 = 'v1', t2 = 'v2'"""

    tags: Optional[list[TagAssociation]] = list_field("SET TAG")


@dataclass
class UnsetTags:
    tags: Optional[list[Identifier]] = list_field("UNSET TAG")

    validations: ClassVar[tuple] = (ValidIdentifiers("tags"),)


@dataclass
class IP:
    ip: Optional[str] = keyword(quotes=SINGLE_QUOTES)


@dataclass
class StringItem:
    value: Optional[str] = keyword(quotes=SINGLE_QUOTES)


def ip_list(values: Optional[list[str]]) -> Optional[list[IP]]:
    if not values:
        return None
    return [IP(value) for value in values]


def string_items(values: Optional[list[str]]) -> Optional[list[StringItem]]:
    if not values:
        return None
    return [StringItem(value) for value in values]


def tag_associations(tags: Optional[dict]) -> Optional[list[TagAssociation]]:
    """{SchemaObjectIdentifier(...): "value"} -> [TagAssociation(...)]"""
    if not tags:
        return None
    return [TagAssociation(name, value) for name, value in tags.items()]


def in_container(container: Optional[Identifier]) -> Optional[In]:
    """IN ACCOUNT for None, otherwise IN DATABASE or IN SCHEMA depending on the identifier."""
    if container is None:
        return In(account=True)
    if isinstance(container, AccountObjectIdentifier):
        return In(database=container)
    if isinstance(container, DatabaseObjectIdentifier):
        return In(schema=container)
    raise ValueError(f"Unsupported container: {container!r}")


@dataclass
class SessionParameter:
    """TIMEZONE = 'UTC' for strings, LOCK_TIMEOUT = 10 for everything else."""

    name: Optional[str] = keyword()
    string_value: Optional[str] = parameter(quotes=SINGLE_QUOTES)
    value: Optional[Any] = parameter()


def session_parameters(parameters: Optional[dict]) -> Optional[list[SessionParameter]]:
    if not parameters:
        return None
    result = []
    for name, value in parameters.items():
        if isinstance(value, str):
            result.append(SessionParameter(name=name.upper(), string_value=value))
        else:
            result.append(SessionParameter(name=name.upper(), value=value))
    return result


@dataclass
class TimeTravelPoint:
    timestamp: Optional[str] = parameter("TIMESTAMP", equals=ARROW_EQUALS)
    offset: Optional[str] = parameter("OFFSET", equals=ARROW_EQUALS)
    statement: Optional[str] = parameter("STATEMENT", quotes=SINGLE_QUOTES, equals=ARROW_EQUALS)
    stream: Optional[str] = parameter("STREAM", quotes=SINGLE_QUOTES, equals=ARROW_EQUALS)

    validations: ClassVar[tuple] = (ExactlyOneValueSet("timestamp", "offset", "statement", "stream"),)


@dataclass
class TimeTravel:
    """AT (OFFSET => -60) or BEFORE (STATEMENT => '8e5d0ca9-...')"""

    at: Optional[bool] = keyword("AT")
    before: Optional[bool] = keyword("BEFORE")
    point: Optional[TimeTravelPoint] = list_field(parens=PARENTHESES)

    validations: ClassVar[tuple] = (ExactlyOneValueSet("at", "before"),)


@dataclass
class TimeTravelRequest:
    at: Optional[bool] = None
    before: Optional[bool] = None
    timestamp: Optional[str] = None
    offset: Optional[str] = None
    statement: Optional[str] = None
    stream: Optional[str] = None

    def to_opts(self) -> TimeTravel:
        point = TimeTravelPoint(
            timestamp=self.timestamp,
            offset=self.offset,
            statement=self.statement,
            stream=self.stream,
        )
        return TimeTravel(at=self.at or None, before=self.before or None, point=point)


def time_travel(request: Optional[TimeTravelRequest]) -> Optional[TimeTravel]:
    return request.to_opts() if request is not None else None
