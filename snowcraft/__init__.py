import logging

from .client import Client
from .config import ClientConfig, connect, default_config, merge_config, profile_config
from .exceptions import (
    ERR_NIL_OPTIONS,
    JoinedError,
    NilOptionsError,
    ObjectNotFoundError,
    RenderError,
    SnowcraftError,
    ValidationError,
)
from .identifiers import (
    AccountIdentifier,
    AccountObjectIdentifier,
    DatabaseObjectIdentifier,
    ExternalObjectIdentifier,
    SchemaObjectIdentifier,
    TableColumnIdentifier,
    parse_identifier,
)
from .objects.base import build_sql
from .sql_builder import render
from .validations import validate

logger = logging.getLogger("snowcraft")

__all__ = [
    "AccountIdentifier",
    "AccountObjectIdentifier",
    "Client",
    "ClientConfig",
    "DatabaseObjectIdentifier",
    "ERR_NIL_OPTIONS",
    "ExternalObjectIdentifier",
    "JoinedError",
    "NilOptionsError",
    "ObjectNotFoundError",
    "RenderError",
    "SchemaObjectIdentifier",
    "SnowcraftError",
    "TableColumnIdentifier",
    "ValidationError",
    "build_sql",
    "connect",
    "default_config",
    "merge_config",
    "parse_identifier",
    "profile_config",
    "render",
    "validate",
]
