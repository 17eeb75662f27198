import datetime
from dataclasses import dataclass, field
from typing import ClassVar, Optional

from ..common import (
    ExtendedIn,
    LimitFrom,
    Like,
    SetTags,
    TimeTravel,
    TimeTravelRequest,
    UnsetTags,
    tag_associations,
    time_travel,
)
from ..ddl import NO_EQUALS, SINGLE_QUOTES, identifier, keyword, parameter, static
from ..enums import ObjectType, StreamMode, StreamSourceType
from ..identifiers import SchemaObjectIdentifier
from ..requests import Request, build_if_set, copy_to_options
from ..rows import normalize_row, optional_enum, optional_string, to_bool, to_string, to_utc
from ..validations import ExactlyOneValueSet, ValidIdentifier
from .base import Collection, find_by_id


@dataclass
class CreateOnTableStreamOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    stream: bool = static("STREAM")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()
    copy_grants: Optional[bool] = keyword("COPY GRANTS")
    on_table: bool = static("ON TABLE")
    table_id: Optional[SchemaObjectIdentifier] = identifier()
    on: Optional[TimeTravel] = keyword()
    append_only: Optional[bool] = parameter("APPEND_ONLY")
    show_initial_rows: Optional[bool] = parameter("SHOW_INITIAL_ROWS")
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (ValidIdentifier("name"), ValidIdentifier("table_id"))


@dataclass
class CreateOnExternalTableStreamOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    stream: bool = static("STREAM")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()
    copy_grants: Optional[bool] = keyword("COPY GRANTS")
    on_external_table: bool = static("ON EXTERNAL TABLE")
    external_table_id: Optional[SchemaObjectIdentifier] = identifier()
    on: Optional[TimeTravel] = keyword()
    insert_only: Optional[bool] = parameter("INSERT_ONLY")
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (ValidIdentifier("name"), ValidIdentifier("external_table_id"))


@dataclass
class CreateOnStageStreamOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    stream: bool = static("STREAM")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()
    copy_grants: Optional[bool] = keyword("COPY GRANTS")
    on_stage: bool = static("ON STAGE")
    stage_id: Optional[SchemaObjectIdentifier] = identifier()
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (ValidIdentifier("name"), ValidIdentifier("stage_id"))


@dataclass
class CreateOnViewStreamOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    stream: bool = static("STREAM")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()
    copy_grants: Optional[bool] = keyword("COPY GRANTS")
    on_view: bool = static("ON VIEW")
    view_id: Optional[SchemaObjectIdentifier] = identifier()
    on: Optional[TimeTravel] = keyword()
    append_only: Optional[bool] = parameter("APPEND_ONLY")
    show_initial_rows: Optional[bool] = parameter("SHOW_INITIAL_ROWS")
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (ValidIdentifier("name"), ValidIdentifier("view_id"))


@dataclass
class CloneStreamOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    stream: bool = static("STREAM")
    name: Optional[SchemaObjectIdentifier] = identifier()
    source_stream: Optional[SchemaObjectIdentifier] = identifier("CLONE")
    copy_grants: Optional[bool] = keyword("COPY GRANTS")

    validations: ClassVar[tuple] = (ValidIdentifier("name"), ValidIdentifier("source_stream"))


@dataclass
class AlterStreamOptions:
    alter: bool = static("ALTER")
    stream: bool = static("STREAM")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()
    set_comment: Optional[str] = parameter("SET COMMENT", quotes=SINGLE_QUOTES)
    unset_comment: Optional[bool] = keyword("UNSET COMMENT")
    set_tags: Optional[SetTags] = keyword()
    unset_tags: Optional[UnsetTags] = keyword()

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ExactlyOneValueSet("set_comment", "unset_comment", "set_tags", "unset_tags"),
    )


@dataclass
class DropStreamOptions:
    drop: bool = static("DROP")
    stream: bool = static("STREAM")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class ShowStreamOptions:
    show: bool = static("SHOW")
    terse: Optional[bool] = keyword("TERSE")
    streams: bool = static("STREAMS")
    like: Optional[Like] = keyword()
    in_: Optional[ExtendedIn] = keyword()
    starts_with: Optional[str] = parameter("STARTS WITH", quotes=SINGLE_QUOTES, equals=NO_EQUALS)
    limit: Optional[LimitFrom] = keyword()


@dataclass
class DescribeStreamOptions:
    describe: bool = static("DESCRIBE")
    stream: bool = static("STREAM")
    name: Optional[SchemaObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class CreateOnTableStreamRequest(Request):
    name: SchemaObjectIdentifier
    table_id: SchemaObjectIdentifier
    or_replace: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    copy_grants: Optional[bool] = None
    on: Optional[TimeTravelRequest] = None
    append_only: Optional[bool] = None
    show_initial_rows: Optional[bool] = None
    comment: Optional[str] = None

    def to_opts(self) -> CreateOnTableStreamOptions:
        return copy_to_options(self, CreateOnTableStreamOptions, on=time_travel(self.on))


@dataclass
class CreateOnExternalTableStreamRequest(Request):
    name: SchemaObjectIdentifier
    external_table_id: SchemaObjectIdentifier
    or_replace: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    copy_grants: Optional[bool] = None
    on: Optional[TimeTravelRequest] = None
    insert_only: Optional[bool] = None
    comment: Optional[str] = None

    def to_opts(self) -> CreateOnExternalTableStreamOptions:
        return copy_to_options(self, CreateOnExternalTableStreamOptions, on=time_travel(self.on))


@dataclass
class CreateOnStageStreamRequest(Request):
    name: SchemaObjectIdentifier
    stage_id: SchemaObjectIdentifier
    or_replace: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    copy_grants: Optional[bool] = None
    comment: Optional[str] = None

    options_class = CreateOnStageStreamOptions


@dataclass
class CreateOnViewStreamRequest(Request):
    name: SchemaObjectIdentifier
    view_id: SchemaObjectIdentifier
    or_replace: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    copy_grants: Optional[bool] = None
    on: Optional[TimeTravelRequest] = None
    append_only: Optional[bool] = None
    show_initial_rows: Optional[bool] = None
    comment: Optional[str] = None

    def to_opts(self) -> CreateOnViewStreamOptions:
        return copy_to_options(self, CreateOnViewStreamOptions, on=time_travel(self.on))


@dataclass
class CloneStreamRequest(Request):
    name: SchemaObjectIdentifier
    source_stream: SchemaObjectIdentifier
    or_replace: Optional[bool] = None
    copy_grants: Optional[bool] = None

    options_class = CloneStreamOptions


@dataclass
class AlterStreamRequest(Request):
    name: SchemaObjectIdentifier
    if_exists: Optional[bool] = None
    set_comment: Optional[str] = None
    unset_comment: Optional[bool] = None
    set_tags: dict = field(default_factory=dict)
    unset_tags: list = field(default_factory=list)

    def to_opts(self) -> AlterStreamOptions:
        return copy_to_options(
            self,
            AlterStreamOptions,
            set_tags=build_if_set(SetTags, tags=tag_associations(self.set_tags)),
            unset_tags=build_if_set(UnsetTags, tags=self.unset_tags or None),
        )


@dataclass
class DropStreamRequest(Request):
    name: SchemaObjectIdentifier
    if_exists: Optional[bool] = None

    options_class = DropStreamOptions


@dataclass
class ShowStreamRequest(Request):
    terse: Optional[bool] = None
    like: Optional[Like] = None
    in_: Optional[ExtendedIn] = None
    starts_with: Optional[str] = None
    limit: Optional[LimitFrom] = None

    options_class = ShowStreamOptions


@dataclass
class DescribeStreamRequest(Request):
    name: SchemaObjectIdentifier

    options_class = DescribeStreamOptions


@dataclass
class Stream:
    created_on: str
    name: str
    database_name: str
    schema_name: str
    owner: str
    comment: Optional[str]
    table_name: Optional[str]
    source_type: Optional[StreamSourceType]
    base_tables: Optional[str]
    type: str
    stale: bool
    mode: Optional[StreamMode]
    stale_after: Optional[datetime.datetime]
    invalid_reason: Optional[str]
    owner_role_type: str

    def id(self) -> SchemaObjectIdentifier:
        return SchemaObjectIdentifier(self.database_name, self.schema_name, self.name)

    def object_type(self) -> ObjectType:
        return ObjectType.STREAM


def decode_stream(row: dict) -> Stream:
    row = normalize_row(row)
    source_type = optional_string(row.get("source_type"))
    return Stream(
        created_on=to_string(row.get("created_on")),
        name=row["name"],
        database_name=row["database_name"],
        schema_name=row["schema_name"],
        owner=to_string(row.get("owner")),
        comment=optional_string(row.get("comment")),
        table_name=optional_string(row.get("table_name")),
        source_type=StreamSourceType(source_type.replace("_", " ")) if source_type else None,
        base_tables=optional_string(row.get("base_tables")),
        type=to_string(row.get("type")),
        stale=to_bool(row.get("stale")),
        mode=optional_enum(StreamMode, row.get("mode")),
        stale_after=to_utc(row.get("stale_after")),
        invalid_reason=optional_string(row.get("invalid_reason")),
        owner_role_type=to_string(row.get("owner_role_type")),
    )


class Streams(Collection):
    def create_on_table(self, request: CreateOnTableStreamRequest) -> int:
        return self._exec(request)

    def create_on_external_table(self, request: CreateOnExternalTableStreamRequest) -> int:
        return self._exec(request)

    def create_on_stage(self, request: CreateOnStageStreamRequest) -> int:
        return self._exec(request)

    def create_on_view(self, request: CreateOnViewStreamRequest) -> int:
        return self._exec(request)

    def clone(self, request: CloneStreamRequest) -> int:
        return self._exec(request)

    def alter(self, request: AlterStreamRequest) -> int:
        return self._exec(request)

    def drop(self, request: DropStreamRequest) -> int:
        return self._exec(request)

    def show(self, request: Optional[ShowStreamRequest] = None) -> list[Stream]:
        return self._query(request or ShowStreamRequest(), decode_stream)

    def show_by_id(self, id: SchemaObjectIdentifier) -> Optional[Stream]:
        request = ShowStreamRequest(like=Like(id.name), in_=ExtendedIn(schema=id.schema_id()))
        return find_by_id(self.show(request), id)

    def describe(self, id: SchemaObjectIdentifier) -> Optional[Stream]:
        rows = self._describe(DescribeStreamRequest(id))
        if rows is None:
            return None
        return decode_stream(rows[0])
