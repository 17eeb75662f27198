"""
Snowflake object identifiers.

Every identifier renders as double-quoted components joined with dots:

    SchemaObjectIdentifier("DB", "SCH", "OBJ").fully_qualified_name()  ->  "DB"."SCH"."OBJ"

Components are stored exactly as given. Snowflake uppercases unquoted names on its side,
since the rendered form is always quoted the caller decides the final casing.
"""

from dataclasses import dataclass, field
from typing import Union

import pyparsing as pp

QUOTE = '"'


def quote_component(part: str) -> str:
    return QUOTE + part.replace(QUOTE, QUOTE + QUOTE) + QUOTE


def _reject_commas(*parts: str):
    for part in parts:
        if "," in part:
            raise ValueError(f"Identifier component must not contain a comma: {part!r}")


class Identifier:
    """Common behaviour of all identifier variants."""

    def parts(self) -> tuple[str, ...]:
        raise NotImplementedError(f"{self.__class__.__name__} must implement parts")

    def fully_qualified_name(self) -> str:
        return ".".join(quote_component(part) for part in self.parts())

    def __str__(self):
        return self.fully_qualified_name()


@dataclass(frozen=True)
class AccountIdentifier(Identifier):
    organization_name: str = ""
    account_name: str = ""
    account_locator: str = ""

    def __post_init__(self):
        _reject_commas(self.organization_name, self.account_name, self.account_locator)

    @classmethod
    def from_account_locator(cls, account_locator: str) -> "AccountIdentifier":
        return cls(account_locator=account_locator)

    @property
    def name(self) -> str:
        if self.account_locator:
            return self.account_locator
        return f"{self.organization_name}.{self.account_name}"

    def parts(self) -> tuple[str, ...]:
        if self.account_locator:
            return (self.account_locator,)
        return (self.organization_name, self.account_name)


@dataclass(frozen=True)
class AccountObjectIdentifier(Identifier):
    name: str

    def __post_init__(self):
        _reject_commas(self.name)

    def parts(self) -> tuple[str, ...]:
        return (self.name,)


@dataclass(frozen=True)
class DatabaseObjectIdentifier(Identifier):
    database_name: str
    name: str

    def __post_init__(self):
        _reject_commas(self.database_name, self.name)

    def database_id(self) -> AccountObjectIdentifier:
        return AccountObjectIdentifier(self.database_name)

    def parts(self) -> tuple[str, ...]:
        return (self.database_name, self.name)


@dataclass(frozen=True)
class SchemaObjectIdentifier(Identifier):
    database_name: str
    schema_name: str
    name: str

    def __post_init__(self):
        _reject_commas(self.database_name, self.schema_name, self.name)

    def database_id(self) -> AccountObjectIdentifier:
        return AccountObjectIdentifier(self.database_name)

    def schema_id(self) -> DatabaseObjectIdentifier:
        return DatabaseObjectIdentifier(self.database_name, self.schema_name)

    def parts(self) -> tuple[str, ...]:
        return (self.database_name, self.schema_name, self.name)


@dataclass(frozen=True)
class TableColumnIdentifier(Identifier):
    database_name: str
    schema_name: str
    table_name: str
    name: str

    def __post_init__(self):
        _reject_commas(self.database_name, self.schema_name, self.table_name, self.name)

    def table_id(self) -> SchemaObjectIdentifier:
        return SchemaObjectIdentifier(self.database_name, self.schema_name, self.table_name)

    def parts(self) -> tuple[str, ...]:
        return (self.database_name, self.schema_name, self.table_name, self.name)


@dataclass(frozen=True)
class ExternalObjectIdentifier(Identifier):
    """An account-level object that lives in another account, eg. a share or a failover group."""

    account_identifier: AccountIdentifier = field(default_factory=AccountIdentifier)
    object_identifier: AccountObjectIdentifier = field(default_factory=lambda: AccountObjectIdentifier(""))

    @property
    def name(self) -> str:
        return self.object_identifier.name

    def parts(self) -> tuple[str, ...]:
        return self.account_identifier.parts() + self.object_identifier.parts()


ObjectIdentifier = Union[
    AccountObjectIdentifier,
    DatabaseObjectIdentifier,
    SchemaObjectIdentifier,
    TableColumnIdentifier,
    ExternalObjectIdentifier,
]


def valid_object_identifier(identifier) -> bool:
    if not isinstance(identifier, Identifier):
        return False
    if isinstance(identifier, AccountIdentifier):
        if identifier.account_locator:
            return True
        return bool(identifier.organization_name) and bool(identifier.account_name)
    if isinstance(identifier, ExternalObjectIdentifier):
        return valid_object_identifier(identifier.account_identifier) and valid_object_identifier(
            identifier.object_identifier
        )
    return all(part != "" for part in identifier.parts())


# Grammar: either every component is double-quoted ("a"."b") or none is (a.b).
# Bare components are taken verbatim, there is no case normalisation.
_DOT = pp.Suppress(pp.Literal(".").leave_whitespace())
_QUOTED_PART = pp.QuotedString(QUOTE, esc_quote=QUOTE + QUOTE, multiline=True).leave_whitespace()
_BARE_PART = pp.Regex(r'[^".]+').leave_whitespace()
QuotedIdentifier = _QUOTED_PART + pp.ZeroOrMore(_DOT + _QUOTED_PART)
BareIdentifier = _BARE_PART + pp.ZeroOrMore(_DOT + _BARE_PART)
FullyQualifiedIdentifier = (QuotedIdentifier | BareIdentifier).leave_whitespace()


def parse_identifier_parts(identifier: str) -> list[str]:
    if not identifier:
        raise ValueError("Identifier must not be empty")
    try:
        return list(FullyQualifiedIdentifier.parse_string(identifier, parse_all=True))
    except pp.ParseException as err:
        raise ValueError(f"Unable to parse identifier: {identifier}") from err


def parse_identifier(identifier: str) -> ObjectIdentifier:
    parts = parse_identifier_parts(identifier)
    if len(parts) == 1:
        return AccountObjectIdentifier(*parts)
    elif len(parts) == 2:
        return DatabaseObjectIdentifier(*parts)
    elif len(parts) == 3:
        return SchemaObjectIdentifier(*parts)
    elif len(parts) == 4:
        return TableColumnIdentifier(*parts)
    raise ValueError(f"Unable to classify identifier: {identifier}, expected 1 to 4 parts, got {len(parts)}")


def _parse_exact(identifier: str, count: int) -> list[str]:
    parts = parse_identifier_parts(identifier)
    if len(parts) != count:
        raise ValueError(f"Unexpected number of parts in {identifier}: expected {count}, got {len(parts)}")
    return parts


def parse_account_object_identifier(identifier: str) -> AccountObjectIdentifier:
    return AccountObjectIdentifier(*_parse_exact(identifier, 1))


def parse_database_object_identifier(identifier: str) -> DatabaseObjectIdentifier:
    return DatabaseObjectIdentifier(*_parse_exact(identifier, 2))


def parse_schema_object_identifier(identifier: str) -> SchemaObjectIdentifier:
    return SchemaObjectIdentifier(*_parse_exact(identifier, 3))


def parse_table_column_identifier(identifier: str) -> TableColumnIdentifier:
    return TableColumnIdentifier(*_parse_exact(identifier, 4))


def parse_account_identifier(identifier: str) -> AccountIdentifier:
    parts = parse_identifier_parts(identifier)
    if len(parts) == 1:
        return AccountIdentifier.from_account_locator(parts[0])
    if len(parts) == 2:
        return AccountIdentifier(organization_name=parts[0], account_name=parts[1])
    raise ValueError(f"Unexpected number of parts in account identifier {identifier}: {len(parts)}")


def parse_external_object_identifier(identifier: str) -> ExternalObjectIdentifier:
    """
    Input
    -----
        "ORG"."ACCOUNT"."NAME"  or  "LOCATOR"."NAME"

    Output
    ------
        ExternalObjectIdentifier(account_identifier=..., object_identifier=AccountObjectIdentifier("NAME"))
    """
    parts = parse_identifier_parts(identifier)
    if len(parts) == 2:
        account = AccountIdentifier.from_account_locator(parts[0])
    elif len(parts) == 3:
        account = AccountIdentifier(organization_name=parts[0], account_name=parts[1])
    else:
        raise ValueError(f"Unexpected number of parts in external identifier {identifier}: {len(parts)}")
    return ExternalObjectIdentifier(account, AccountObjectIdentifier(parts[-1]))
