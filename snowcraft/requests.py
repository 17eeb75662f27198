"""
Request objects: the public input side of every operation.

A request only carries what a caller can choose. `to_opts()` turns it into the
options struct the renderer consumes, filling in the static keywords and only
building nested clauses that have at least one value set.

    request = CreateNetworkPolicyRequest(name).with_allowed_ip_list(["1.1.1.1"]).with_comment("office")
    opts = request.to_opts()
"""

import dataclasses
from typing import Any, ClassVar, Optional, Type, TypeVar

from .ddl import DDL, directive_of
from .validations import value_set

T = TypeVar("T")


def copy_to_options(source, cls: Type[T], **overrides: Any) -> T:
    """
    Build `cls` from the same-named attributes of `source`.

    Empty collections become None and keyword flags set to False are dropped,
    static fields are left to their defaults. `overrides` win over copied values.
    """
    values = {}
    for f in dataclasses.fields(cls):
        if not f.init or f.name in overrides or not hasattr(source, f.name):
            continue
        value = getattr(source, f.name)
        directive = directive_of(f)
        if directive is not None and directive.ddl == DDL.KEYWORD and isinstance(value, bool):
            value = true_or_none(value)
        elif not value_set(value):
            value = None
        values[f.name] = value
    values.update(overrides)
    return cls(**values)


class Request:
    options_class: ClassVar[Optional[type]] = None

    def __getattr__(self, name: str):
        if name.startswith("with_") and dataclasses.is_dataclass(self):
            field_name = name[len("with_") :]
            if field_name in {f.name for f in dataclasses.fields(self)}:

                def setter(value):
                    setattr(self, field_name, value)
                    return self

                return setter
        raise AttributeError(f"{self.__class__.__name__!r} object has no attribute {name!r}")

    def to_opts(self):
        if self.options_class is None:
            raise NotImplementedError(f"{self.__class__.__name__} must implement to_opts")
        return copy_to_options(self, self.options_class)


def build_if_set(cls: Type[T], **values: Any) -> Optional[T]:
    """Construct `cls(**values)` only if at least one of the values is set."""
    if not any(value_set(value) for value in values.values()):
        return None
    return cls(**values)


def copy_if_set(source, cls: Type[T], **overrides: Any) -> Optional[T]:
    """Like copy_to_options, but None when `source` is None or nothing ends up set."""
    if source is None:
        return None
    opts = copy_to_options(source, cls, **overrides)
    if not any(value_set(getattr(opts, f.name)) for f in dataclasses.fields(cls) if f.init):
        return None
    return opts


def true_or_none(value: Optional[bool]) -> Optional[bool]:
    """Keyword flags render only when True, an explicit False is treated as unset."""
    return True if value else None
