import dataclasses
from enum import Enum
from functools import cache
from typing import Any, Optional

from .ddl import DDL, Directive, directive_of
from .exceptions import NilOptionsError, RenderError
from .identifiers import Identifier


@cache
def directives_for(cls: type) -> tuple[tuple[str, Optional[Directive]], ...]:
    """
    The ordered (field name, directive) table of an options dataclass.

    Computed once per type and never evicted.
    """
    if not dataclasses.is_dataclass(cls):
        raise RenderError(f"{cls.__name__} is not an options struct")
    return tuple((f.name, directive_of(f)) for f in dataclasses.fields(cls))


def is_struct(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, (type, Identifier))


def render(options) -> str:
    if options is None:
        raise NilOptionsError()
    if not is_struct(options):
        raise RenderError(f"Cannot render {type(options).__name__}, expected an options struct")
    return _join(_struct_clauses(options))


def _join(clauses: list[str]) -> str:
    return " ".join(clause for clause in clauses if clause)


def _struct_clauses(struct) -> list[str]:
    clauses = []
    for name, directive in directives_for(type(struct)):
        value = getattr(struct, name)
        if directive is None:
            if is_struct(value):
                clauses.append(_join(_struct_clauses(value)))
            continue
        try:
            clauses.append(_field_clause(directive, value))
        except RenderError as err:
            raise RenderError(f"{type(struct).__name__}.{name}: {err}") from err
    return clauses


def _field_clause(directive: Directive, value: Any) -> str:
    if directive.ddl == DDL.STATIC:
        return directive.sql
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return _list_clause(directive, value)
    if isinstance(value, Identifier):
        return _identifier_clause(directive, value)
    if is_struct(value):
        return _struct_clause(directive, value)
    return _scalar_clause(directive, value)


def _identifier_clause(directive: Directive, value: Identifier) -> str:
    fqn = directive.parens.apply(value.fully_qualified_name())
    if directive.ddl == DDL.IDENTIFIER:
        return directive.equals.prefix(directive.sql) + fqn
    if directive.ddl == DDL.PARAMETER:
        return directive.equals.prefix(directive.sql) + fqn
    if directive.ddl == DDL.KEYWORD:
        return _join([directive.sql, fqn])
    raise RenderError(f"identifier value is not allowed for a {directive.ddl.value} field")


def _struct_clause(directive: Directive, value) -> str:
    if directive.ddl == DDL.KEYWORD:
        return _join([directive.sql, directive.parens.apply(_join(_struct_clauses(value)))])
    if directive.ddl == DDL.LIST:
        inner = [clause for clause in _struct_clauses(value) if clause]
        return _join([directive.sql, directive.parens.apply(directive.comma.join(inner))])
    if directive.ddl == DDL.PARAMETER:
        return directive.equals.prefix(directive.sql) + directive.parens.apply(_join(_struct_clauses(value)))
    raise RenderError(f"nested struct is not allowed for a {directive.ddl.value} field")


def _list_clause(directive: Directive, values) -> str:
    if not values:
        return ""
    items = [_list_item(directive, item) for item in values]
    rendered = directive.parens.apply(directive.comma.join(items))
    if directive.ddl == DDL.PARAMETER:
        return directive.equals.prefix(directive.sql) + rendered
    return _join([directive.sql, rendered])


def _list_item(directive: Directive, item) -> str:
    if isinstance(item, Identifier):
        return item.fully_qualified_name()
    if is_struct(item):
        return _join(_struct_clauses(item))
    return directive.quotes.apply(format_value(item))


def _scalar_clause(directive: Directive, value) -> str:
    if directive.ddl == DDL.KEYWORD:
        if isinstance(value, bool):
            return directive.sql if value else ""
        return _join([directive.sql, directive.parens.apply(directive.quotes.apply(format_value(value)))])
    if directive.ddl == DDL.PARAMETER:
        rendered = directive.parens.apply(directive.quotes.apply(format_value(value)))
        return directive.equals.prefix(directive.sql) + rendered
    raise RenderError(f"{type(value).__name__} value is not allowed for a {directive.ddl.value} field")


def format_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (str, int, float)):
        return str(value)
    raise RenderError(f"Unsupported value type {type(value).__name__}")
