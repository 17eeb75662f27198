from dataclasses import dataclass, field
from typing import ClassVar, Optional

from ..common import (
    In,
    Like,
    SetTags,
    TagAssociation,
    TimeTravel,
    TimeTravelRequest,
    UnsetTags,
    tag_associations,
    time_travel,
)
from ..ddl import COMMA, NO_EQUALS, PARENTHESES, SINGLE_QUOTES, identifier, keyword, list_field, parameter, static
from ..enums import ObjectType
from ..identifiers import DatabaseObjectIdentifier
from ..requests import Request, build_if_set, copy_if_set, copy_to_options
from ..rows import database_object_id, normalize_row, optional_int, optional_string, to_bool, to_string
from ..validations import (
    AtLeastOneValueSet,
    ConflictingFields,
    ExactlyOneValueSet,
    ValidIdentifier,
    ValidIdentifierIfSet,
)
from .base import Collection, find_by_id


@dataclass
class CreateSchemaOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    transient: Optional[bool] = keyword("TRANSIENT")
    schema: bool = static("SCHEMA")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[DatabaseObjectIdentifier] = identifier()
    with_managed_access: Optional[bool] = keyword("WITH MANAGED ACCESS")
    data_retention_time_in_days: Optional[int] = parameter("DATA_RETENTION_TIME_IN_DAYS")
    max_data_extension_time_in_days: Optional[int] = parameter("MAX_DATA_EXTENSION_TIME_IN_DAYS")
    default_ddl_collation: Optional[str] = parameter("DEFAULT_DDL_COLLATION", quotes=SINGLE_QUOTES)
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)
    tags: Optional[list[TagAssociation]] = keyword("TAG", parens=PARENTHESES)

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ConflictingFields("or_replace", "if_not_exists"),
    )


@dataclass
class CloneSchemaOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    transient: Optional[bool] = keyword("TRANSIENT")
    schema: bool = static("SCHEMA")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[DatabaseObjectIdentifier] = identifier()
    source_schema: Optional[DatabaseObjectIdentifier] = identifier("CLONE")
    time_travel: Optional[TimeTravel] = keyword()

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ValidIdentifier("source_schema"),
        ConflictingFields("or_replace", "if_not_exists"),
    )


@dataclass
class SchemaSet:
    data_retention_time_in_days: Optional[int] = parameter("DATA_RETENTION_TIME_IN_DAYS")
    max_data_extension_time_in_days: Optional[int] = parameter("MAX_DATA_EXTENSION_TIME_IN_DAYS")
    default_ddl_collation: Optional[str] = parameter("DEFAULT_DDL_COLLATION", quotes=SINGLE_QUOTES)
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet(
            "data_retention_time_in_days",
            "max_data_extension_time_in_days",
            "default_ddl_collation",
            "comment",
        ),
    )


@dataclass
class SchemaUnset:
    data_retention_time_in_days: Optional[bool] = keyword("DATA_RETENTION_TIME_IN_DAYS")
    max_data_extension_time_in_days: Optional[bool] = keyword("MAX_DATA_EXTENSION_TIME_IN_DAYS")
    default_ddl_collation: Optional[bool] = keyword("DEFAULT_DDL_COLLATION")
    comment: Optional[bool] = keyword("COMMENT")

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet(
            "data_retention_time_in_days",
            "max_data_extension_time_in_days",
            "default_ddl_collation",
            "comment",
        ),
    )


@dataclass
class AlterSchemaOptions:
    alter: bool = static("ALTER")
    schema: bool = static("SCHEMA")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[DatabaseObjectIdentifier] = identifier()
    rename_to: Optional[DatabaseObjectIdentifier] = identifier("RENAME TO")
    swap_with: Optional[DatabaseObjectIdentifier] = identifier("SWAP WITH")
    set: Optional[SchemaSet] = keyword("SET")
    unset: Optional[SchemaUnset] = list_field("UNSET", comma=COMMA)
    set_tags: Optional[SetTags] = keyword()
    unset_tags: Optional[UnsetTags] = keyword()
    enable_managed_access: Optional[bool] = keyword("ENABLE MANAGED ACCESS")
    disable_managed_access: Optional[bool] = keyword("DISABLE MANAGED ACCESS")

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ValidIdentifierIfSet("rename_to"),
        ValidIdentifierIfSet("swap_with"),
        ExactlyOneValueSet(
            "rename_to",
            "swap_with",
            "set",
            "unset",
            "set_tags",
            "unset_tags",
            "enable_managed_access",
            "disable_managed_access",
        ),
    )


@dataclass
class DropSchemaOptions:
    drop: bool = static("DROP")
    schema: bool = static("SCHEMA")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[DatabaseObjectIdentifier] = identifier()
    cascade: Optional[bool] = keyword("CASCADE")
    restrict: Optional[bool] = keyword("RESTRICT")

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ConflictingFields("cascade", "restrict"),
    )


@dataclass
class UndropSchemaOptions:
    undrop: bool = static("UNDROP")
    schema: bool = static("SCHEMA")
    name: Optional[DatabaseObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class ShowSchemaOptions:
    show: bool = static("SHOW")
    terse: Optional[bool] = keyword("TERSE")
    schemas: bool = static("SCHEMAS")
    history: Optional[bool] = keyword("HISTORY")
    like: Optional[Like] = keyword()
    in_: Optional[In] = keyword()
    starts_with: Optional[str] = parameter("STARTS WITH", quotes=SINGLE_QUOTES, equals=NO_EQUALS)
    limit: Optional[int] = keyword("LIMIT")


@dataclass
class DescribeSchemaOptions:
    describe: bool = static("DESCRIBE")
    schema: bool = static("SCHEMA")
    name: Optional[DatabaseObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class CreateSchemaRequest(Request):
    name: DatabaseObjectIdentifier
    or_replace: Optional[bool] = None
    transient: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    with_managed_access: Optional[bool] = None
    data_retention_time_in_days: Optional[int] = None
    max_data_extension_time_in_days: Optional[int] = None
    default_ddl_collation: Optional[str] = None
    comment: Optional[str] = None
    tags: dict = field(default_factory=dict)

    def to_opts(self) -> CreateSchemaOptions:
        return copy_to_options(self, CreateSchemaOptions, tags=tag_associations(self.tags))


@dataclass
class CloneSchemaRequest(Request):
    name: DatabaseObjectIdentifier
    source_schema: DatabaseObjectIdentifier
    or_replace: Optional[bool] = None
    transient: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    time_travel: Optional[TimeTravelRequest] = None

    def to_opts(self) -> CloneSchemaOptions:
        return copy_to_options(self, CloneSchemaOptions, time_travel=time_travel(self.time_travel))


@dataclass
class SchemaSetRequest:
    data_retention_time_in_days: Optional[int] = None
    max_data_extension_time_in_days: Optional[int] = None
    default_ddl_collation: Optional[str] = None
    comment: Optional[str] = None


@dataclass
class SchemaUnsetRequest:
    data_retention_time_in_days: Optional[bool] = None
    max_data_extension_time_in_days: Optional[bool] = None
    default_ddl_collation: Optional[bool] = None
    comment: Optional[bool] = None


@dataclass
class AlterSchemaRequest(Request):
    name: DatabaseObjectIdentifier
    if_exists: Optional[bool] = None
    rename_to: Optional[DatabaseObjectIdentifier] = None
    swap_with: Optional[DatabaseObjectIdentifier] = None
    set: Optional[SchemaSetRequest] = None
    unset: Optional[SchemaUnsetRequest] = None
    set_tags: dict = field(default_factory=dict)
    unset_tags: list = field(default_factory=list)
    enable_managed_access: Optional[bool] = None
    disable_managed_access: Optional[bool] = None

    def to_opts(self) -> AlterSchemaOptions:
        return copy_to_options(
            self,
            AlterSchemaOptions,
            set=copy_if_set(self.set, SchemaSet),
            unset=copy_if_set(self.unset, SchemaUnset),
            set_tags=build_if_set(SetTags, tags=tag_associations(self.set_tags)),
            unset_tags=build_if_set(UnsetTags, tags=self.unset_tags or None),
        )


@dataclass
class DropSchemaRequest(Request):
    name: DatabaseObjectIdentifier
    if_exists: Optional[bool] = None
    cascade: Optional[bool] = None
    restrict: Optional[bool] = None

    options_class = DropSchemaOptions


@dataclass
class UndropSchemaRequest(Request):
    name: DatabaseObjectIdentifier

    options_class = UndropSchemaOptions


@dataclass
class ShowSchemaRequest(Request):
    terse: Optional[bool] = None
    history: Optional[bool] = None
    like: Optional[Like] = None
    in_: Optional[In] = None
    starts_with: Optional[str] = None
    limit: Optional[int] = None

    options_class = ShowSchemaOptions


@dataclass
class DescribeSchemaRequest(Request):
    name: DatabaseObjectIdentifier

    options_class = DescribeSchemaOptions


@dataclass
class Schema:
    created_on: str
    name: str
    is_default: bool
    is_current: bool
    database_name: str
    owner: str
    comment: Optional[str]
    options: str
    retention_time: Optional[int]
    dropped_on: Optional[str] = None
    owner_role_type: str = ""

    def id(self) -> DatabaseObjectIdentifier:
        return DatabaseObjectIdentifier(self.database_name, self.name)

    def object_type(self) -> ObjectType:
        return ObjectType.SCHEMA

    def is_managed_access(self) -> bool:
        return "MANAGED ACCESS" in self.options.upper()

    def is_transient(self) -> bool:
        return "TRANSIENT" in self.options.upper()


@dataclass
class SchemaDetails:
    created_on: str
    name: str
    kind: str


def decode_schema(row: dict) -> Schema:
    row = normalize_row(row)
    id = database_object_id(row)
    return Schema(
        created_on=to_string(row.get("created_on")),
        name=id.name,
        is_default=to_bool(row.get("is_default")),
        is_current=to_bool(row.get("is_current")),
        database_name=id.database_name,
        owner=to_string(row.get("owner")),
        comment=optional_string(row.get("comment")),
        options=to_string(row.get("options")),
        retention_time=optional_int(row.get("retention_time")),
        dropped_on=optional_string(row.get("dropped_on")),
        owner_role_type=to_string(row.get("owner_role_type")),
    )


def decode_schema_details(row: dict) -> SchemaDetails:
    row = normalize_row(row)
    return SchemaDetails(
        created_on=to_string(row.get("created_on")),
        name=row["name"],
        kind=to_string(row.get("kind")),
    )


class Schemas(Collection):
    def create(self, request: CreateSchemaRequest) -> int:
        return self._exec(request)

    def clone(self, request: CloneSchemaRequest) -> int:
        return self._exec(request)

    def alter(self, request: AlterSchemaRequest) -> int:
        return self._exec(request)

    def drop(self, request: DropSchemaRequest) -> int:
        return self._exec(request)

    def undrop(self, id: DatabaseObjectIdentifier) -> int:
        return self._exec(UndropSchemaRequest(id))

    def show(self, request: Optional[ShowSchemaRequest] = None) -> list[Schema]:
        return self._query(request or ShowSchemaRequest(), decode_schema)

    def show_by_id(self, id: DatabaseObjectIdentifier) -> Optional[Schema]:
        request = ShowSchemaRequest(like=Like(id.name), in_=In(database=id.database_id()))
        return find_by_id(self.show(request), id)

    def describe(self, id: DatabaseObjectIdentifier) -> Optional[list[SchemaDetails]]:
        """One row per object in the schema."""
        rows = self._describe(DescribeSchemaRequest(id))
        if rows is None:
            return None
        return [decode_schema_details(row) for row in rows]
