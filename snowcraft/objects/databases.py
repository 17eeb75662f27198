from dataclasses import dataclass, field
from typing import ClassVar, Optional

from ..common import (
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
from ..identifiers import AccountObjectIdentifier, ExternalObjectIdentifier
from ..requests import Request, build_if_set, copy_if_set, copy_to_options
from ..rows import normalize_row, optional_int, optional_string, to_bool, to_string
from ..validations import (
    AtLeastOneValueSet,
    ConflictingFields,
    ExactlyOneValueSet,
    ValidIdentifier,
    ValidIdentifierIfSet,
    ValidRange,
)
from .base import Collection, find_by_id

MAX_DATA_RETENTION_DAYS = 90


@dataclass
class CreateDatabaseOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    transient: Optional[bool] = keyword("TRANSIENT")
    database: bool = static("DATABASE")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[AccountObjectIdentifier] = identifier()
    from_share: Optional[ExternalObjectIdentifier] = identifier("FROM SHARE")
    data_retention_time_in_days: Optional[int] = parameter("DATA_RETENTION_TIME_IN_DAYS")
    max_data_extension_time_in_days: Optional[int] = parameter("MAX_DATA_EXTENSION_TIME_IN_DAYS")
    default_ddl_collation: Optional[str] = parameter("DEFAULT_DDL_COLLATION", quotes=SINGLE_QUOTES)
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)
    tags: Optional[list[TagAssociation]] = keyword("TAG", parens=PARENTHESES)

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ValidIdentifierIfSet("from_share"),
        ConflictingFields("or_replace", "if_not_exists"),
        ValidRange("data_retention_time_in_days", 0, MAX_DATA_RETENTION_DAYS),
    )


@dataclass
class CloneDatabaseOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    transient: Optional[bool] = keyword("TRANSIENT")
    database: bool = static("DATABASE")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[AccountObjectIdentifier] = identifier()
    source_database: Optional[AccountObjectIdentifier] = identifier("CLONE")
    time_travel: Optional[TimeTravel] = keyword()
    data_retention_time_in_days: Optional[int] = parameter("DATA_RETENTION_TIME_IN_DAYS")
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ValidIdentifier("source_database"),
        ConflictingFields("or_replace", "if_not_exists"),
    )


@dataclass
class DatabaseSet:
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
        ValidRange("data_retention_time_in_days", 0, MAX_DATA_RETENTION_DAYS),
    )


@dataclass
class DatabaseUnset:
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
class AlterDatabaseOptions:
    alter: bool = static("ALTER")
    database: bool = static("DATABASE")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[AccountObjectIdentifier] = identifier()
    rename_to: Optional[AccountObjectIdentifier] = identifier("RENAME TO")
    swap_with: Optional[AccountObjectIdentifier] = identifier("SWAP WITH")
    set: Optional[DatabaseSet] = keyword("SET")
    unset: Optional[DatabaseUnset] = list_field("UNSET", comma=COMMA)
    set_tags: Optional[SetTags] = keyword()
    unset_tags: Optional[UnsetTags] = keyword()

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ValidIdentifierIfSet("rename_to"),
        ValidIdentifierIfSet("swap_with"),
        ExactlyOneValueSet("rename_to", "swap_with", "set", "unset", "set_tags", "unset_tags"),
    )


@dataclass
class DropDatabaseOptions:
    drop: bool = static("DROP")
    database: bool = static("DATABASE")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[AccountObjectIdentifier] = identifier()
    cascade: Optional[bool] = keyword("CASCADE")
    restrict: Optional[bool] = keyword("RESTRICT")

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ConflictingFields("cascade", "restrict"),
    )


@dataclass
class UndropDatabaseOptions:
    undrop: bool = static("UNDROP")
    database: bool = static("DATABASE")
    name: Optional[AccountObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class ShowDatabaseOptions:
    show: bool = static("SHOW")
    terse: Optional[bool] = keyword("TERSE")
    databases: bool = static("DATABASES")
    history: Optional[bool] = keyword("HISTORY")
    like: Optional[Like] = keyword()
    starts_with: Optional[str] = parameter("STARTS WITH", quotes=SINGLE_QUOTES, equals=NO_EQUALS)
    limit: Optional[int] = keyword("LIMIT")


@dataclass
class DescribeDatabaseOptions:
    describe: bool = static("DESCRIBE")
    database: bool = static("DATABASE")
    name: Optional[AccountObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class CreateDatabaseRequest(Request):
    name: AccountObjectIdentifier
    or_replace: Optional[bool] = None
    transient: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    from_share: Optional[ExternalObjectIdentifier] = None
    data_retention_time_in_days: Optional[int] = None
    max_data_extension_time_in_days: Optional[int] = None
    default_ddl_collation: Optional[str] = None
    comment: Optional[str] = None
    tags: dict = field(default_factory=dict)

    def to_opts(self) -> CreateDatabaseOptions:
        return copy_to_options(self, CreateDatabaseOptions, tags=tag_associations(self.tags))


@dataclass
class CloneDatabaseRequest(Request):
    name: AccountObjectIdentifier
    source_database: AccountObjectIdentifier
    or_replace: Optional[bool] = None
    transient: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    time_travel: Optional[TimeTravelRequest] = None
    data_retention_time_in_days: Optional[int] = None
    comment: Optional[str] = None

    def to_opts(self) -> CloneDatabaseOptions:
        return copy_to_options(self, CloneDatabaseOptions, time_travel=time_travel(self.time_travel))


@dataclass
class DatabaseSetRequest:
    data_retention_time_in_days: Optional[int] = None
    max_data_extension_time_in_days: Optional[int] = None
    default_ddl_collation: Optional[str] = None
    comment: Optional[str] = None


@dataclass
class DatabaseUnsetRequest:
    data_retention_time_in_days: Optional[bool] = None
    max_data_extension_time_in_days: Optional[bool] = None
    default_ddl_collation: Optional[bool] = None
    comment: Optional[bool] = None


@dataclass
class AlterDatabaseRequest(Request):
    name: AccountObjectIdentifier
    if_exists: Optional[bool] = None
    rename_to: Optional[AccountObjectIdentifier] = None
    swap_with: Optional[AccountObjectIdentifier] = None
    set: Optional[DatabaseSetRequest] = None
    unset: Optional[DatabaseUnsetRequest] = None
    set_tags: dict = field(default_factory=dict)
    unset_tags: list = field(default_factory=list)

    def to_opts(self) -> AlterDatabaseOptions:
        return copy_to_options(
            self,
            AlterDatabaseOptions,
            set=copy_if_set(self.set, DatabaseSet),
            unset=copy_if_set(self.unset, DatabaseUnset),
            set_tags=build_if_set(SetTags, tags=tag_associations(self.set_tags)),
            unset_tags=build_if_set(UnsetTags, tags=self.unset_tags or None),
        )


@dataclass
class DropDatabaseRequest(Request):
    name: AccountObjectIdentifier
    if_exists: Optional[bool] = None
    cascade: Optional[bool] = None
    restrict: Optional[bool] = None

    options_class = DropDatabaseOptions


@dataclass
class UndropDatabaseRequest(Request):
    name: AccountObjectIdentifier

    options_class = UndropDatabaseOptions


@dataclass
class ShowDatabaseRequest(Request):
    terse: Optional[bool] = None
    history: Optional[bool] = None
    like: Optional[Like] = None
    starts_with: Optional[str] = None
    limit: Optional[int] = None

    options_class = ShowDatabaseOptions


@dataclass
class DescribeDatabaseRequest(Request):
    name: AccountObjectIdentifier

    options_class = DescribeDatabaseOptions


@dataclass
class Database:
    created_on: str
    name: str
    is_default: bool
    is_current: bool
    origin: str
    owner: str
    comment: Optional[str]
    options: str
    retention_time: Optional[int]
    kind: str = ""
    dropped_on: Optional[str] = None
    owner_role_type: str = ""

    def id(self) -> AccountObjectIdentifier:
        return AccountObjectIdentifier(self.name)

    def object_type(self) -> ObjectType:
        return ObjectType.DATABASE

    def is_transient(self) -> bool:
        return "TRANSIENT" in self.options.upper()


@dataclass
class DatabaseDetails:
    created_on: str
    name: str
    kind: str


def decode_database(row: dict) -> Database:
    row = normalize_row(row)
    return Database(
        created_on=to_string(row.get("created_on")),
        name=row["name"],
        is_default=to_bool(row.get("is_default")),
        is_current=to_bool(row.get("is_current")),
        origin=to_string(row.get("origin")),
        owner=to_string(row.get("owner")),
        comment=optional_string(row.get("comment")),
        options=to_string(row.get("options")),
        retention_time=optional_int(row.get("retention_time")),
        kind=to_string(row.get("kind")),
        dropped_on=optional_string(row.get("dropped_on")),
        owner_role_type=to_string(row.get("owner_role_type")),
    )


def decode_database_details(row: dict) -> DatabaseDetails:
    row = normalize_row(row)
    return DatabaseDetails(
        created_on=to_string(row.get("created_on")),
        name=row["name"],
        kind=to_string(row.get("kind")),
    )


class Databases(Collection):
    def create(self, request: CreateDatabaseRequest) -> int:
        return self._exec(request)

    def clone(self, request: CloneDatabaseRequest) -> int:
        return self._exec(request)

    def alter(self, request: AlterDatabaseRequest) -> int:
        return self._exec(request)

    def drop(self, request: DropDatabaseRequest) -> int:
        return self._exec(request)

    def undrop(self, id: AccountObjectIdentifier) -> int:
        return self._exec(UndropDatabaseRequest(id))

    def show(self, request: Optional[ShowDatabaseRequest] = None) -> list[Database]:
        return self._query(request or ShowDatabaseRequest(), decode_database)

    def show_by_id(self, id: AccountObjectIdentifier) -> Optional[Database]:
        return find_by_id(self.show(ShowDatabaseRequest(like=Like(id.name))), id)

    def describe(self, id: AccountObjectIdentifier) -> Optional[list[DatabaseDetails]]:
        rows = self._describe(DescribeDatabaseRequest(id))
        if rows is None:
            return None
        return [decode_database_details(row) for row in rows]
