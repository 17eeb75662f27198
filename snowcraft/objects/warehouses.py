from dataclasses import dataclass, field
from typing import ClassVar, Optional

from ..common import Like, SetTags, TagAssociation, UnsetTags, tag_associations
from ..ddl import COMMA, EQUALS, PARENTHESES, SINGLE_QUOTES, identifier, keyword, list_field, parameter, static
from ..enums import ObjectType, ScalingPolicy, WarehouseSize, WarehouseType
from ..identifiers import AccountObjectIdentifier
from ..requests import Request, build_if_set, copy_if_set, copy_to_options
from ..rows import (
    normalize_row,
    optional_enum,
    optional_float,
    optional_int,
    optional_string,
    to_bool,
    to_int,
    to_string,
)
from ..validations import (
    AtLeastOneValueSet,
    ExactlyOneValueSet,
    NotGreaterThan,
    RequiredIf,
    ValidIdentifier,
    ValidIdentifierIfSet,
    ValidRange,
)
from .base import Collection, find_by_id

WAREHOUSE_SET_FIELDS = (
    "warehouse_type",
    "warehouse_size",
    "wait_for_completion",
    "max_cluster_count",
    "min_cluster_count",
    "scaling_policy",
    "auto_suspend",
    "auto_resume",
    "resource_monitor",
    "comment",
    "enable_query_acceleration",
    "query_acceleration_max_scale_factor",
    "max_concurrency_level",
    "statement_queued_timeout_in_seconds",
    "statement_timeout_in_seconds",
)


@dataclass
class CreateWarehouseOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    warehouse: bool = static("WAREHOUSE")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[AccountObjectIdentifier] = identifier()
    warehouse_type: Optional[WarehouseType] = parameter("WAREHOUSE_TYPE", quotes=SINGLE_QUOTES)
    warehouse_size: Optional[WarehouseSize] = parameter("WAREHOUSE_SIZE", quotes=SINGLE_QUOTES)
    max_cluster_count: Optional[int] = parameter("MAX_CLUSTER_COUNT")
    min_cluster_count: Optional[int] = parameter("MIN_CLUSTER_COUNT")
    scaling_policy: Optional[ScalingPolicy] = parameter("SCALING_POLICY", quotes=SINGLE_QUOTES)
    auto_suspend: Optional[int] = parameter("AUTO_SUSPEND")
    auto_resume: Optional[bool] = parameter("AUTO_RESUME")
    initially_suspended: Optional[bool] = parameter("INITIALLY_SUSPENDED")
    resource_monitor: Optional[AccountObjectIdentifier] = identifier("RESOURCE_MONITOR", equals=EQUALS)
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)
    enable_query_acceleration: Optional[bool] = parameter("ENABLE_QUERY_ACCELERATION")
    query_acceleration_max_scale_factor: Optional[int] = parameter("QUERY_ACCELERATION_MAX_SCALE_FACTOR")
    max_concurrency_level: Optional[int] = parameter("MAX_CONCURRENCY_LEVEL")
    statement_queued_timeout_in_seconds: Optional[int] = parameter("STATEMENT_QUEUED_TIMEOUT_IN_SECONDS")
    statement_timeout_in_seconds: Optional[int] = parameter("STATEMENT_TIMEOUT_IN_SECONDS")
    tags: Optional[list[TagAssociation]] = keyword("TAG", parens=PARENTHESES)

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ValidIdentifierIfSet("resource_monitor"),
        NotGreaterThan("min_cluster_count", "max_cluster_count"),
        ValidRange("query_acceleration_max_scale_factor", 0, 100),
    )


@dataclass
class WarehouseSet:
    warehouse_type: Optional[WarehouseType] = parameter("WAREHOUSE_TYPE", quotes=SINGLE_QUOTES)
    warehouse_size: Optional[WarehouseSize] = parameter("WAREHOUSE_SIZE", quotes=SINGLE_QUOTES)
    wait_for_completion: Optional[bool] = parameter("WAIT_FOR_COMPLETION")
    max_cluster_count: Optional[int] = parameter("MAX_CLUSTER_COUNT")
    min_cluster_count: Optional[int] = parameter("MIN_CLUSTER_COUNT")
    scaling_policy: Optional[ScalingPolicy] = parameter("SCALING_POLICY", quotes=SINGLE_QUOTES)
    auto_suspend: Optional[int] = parameter("AUTO_SUSPEND")
    auto_resume: Optional[bool] = parameter("AUTO_RESUME")
    resource_monitor: Optional[AccountObjectIdentifier] = identifier("RESOURCE_MONITOR", equals=EQUALS)
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)
    enable_query_acceleration: Optional[bool] = parameter("ENABLE_QUERY_ACCELERATION")
    query_acceleration_max_scale_factor: Optional[int] = parameter("QUERY_ACCELERATION_MAX_SCALE_FACTOR")
    max_concurrency_level: Optional[int] = parameter("MAX_CONCURRENCY_LEVEL")
    statement_queued_timeout_in_seconds: Optional[int] = parameter("STATEMENT_QUEUED_TIMEOUT_IN_SECONDS")
    statement_timeout_in_seconds: Optional[int] = parameter("STATEMENT_TIMEOUT_IN_SECONDS")

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet(*WAREHOUSE_SET_FIELDS),
        NotGreaterThan("min_cluster_count", "max_cluster_count"),
        ValidRange("min_cluster_count", 1, 10),
        ValidRange("max_cluster_count", 1, 10),
        ValidRange("auto_suspend", 0, 2**31 - 1),
        ValidRange("query_acceleration_max_scale_factor", 0, 100),
        ValidIdentifierIfSet("resource_monitor"),
    )


@dataclass
class WarehouseUnset:
    warehouse_type: Optional[bool] = keyword("WAREHOUSE_TYPE")
    wait_for_completion: Optional[bool] = keyword("WAIT_FOR_COMPLETION")
    max_cluster_count: Optional[bool] = keyword("MAX_CLUSTER_COUNT")
    min_cluster_count: Optional[bool] = keyword("MIN_CLUSTER_COUNT")
    scaling_policy: Optional[bool] = keyword("SCALING_POLICY")
    auto_suspend: Optional[bool] = keyword("AUTO_SUSPEND")
    auto_resume: Optional[bool] = keyword("AUTO_RESUME")
    resource_monitor: Optional[bool] = keyword("RESOURCE_MONITOR")
    comment: Optional[bool] = keyword("COMMENT")
    enable_query_acceleration: Optional[bool] = keyword("ENABLE_QUERY_ACCELERATION")
    query_acceleration_max_scale_factor: Optional[bool] = keyword("QUERY_ACCELERATION_MAX_SCALE_FACTOR")
    max_concurrency_level: Optional[bool] = keyword("MAX_CONCURRENCY_LEVEL")
    statement_queued_timeout_in_seconds: Optional[bool] = keyword("STATEMENT_QUEUED_TIMEOUT_IN_SECONDS")
    statement_timeout_in_seconds: Optional[bool] = keyword("STATEMENT_TIMEOUT_IN_SECONDS")

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet(*(name for name in WAREHOUSE_SET_FIELDS if name != "warehouse_size")),
    )


@dataclass
class AlterWarehouseOptions:
    alter: bool = static("ALTER")
    warehouse: bool = static("WAREHOUSE")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[AccountObjectIdentifier] = identifier()
    suspend: Optional[bool] = keyword("SUSPEND")
    resume: Optional[bool] = keyword("RESUME")
    if_suspended: Optional[bool] = keyword("IF SUSPENDED")
    abort_all_queries: Optional[bool] = keyword("ABORT ALL QUERIES")
    rename_to: Optional[AccountObjectIdentifier] = identifier("RENAME TO")
    set: Optional[WarehouseSet] = keyword("SET")
    unset: Optional[WarehouseUnset] = list_field("UNSET", comma=COMMA)
    set_tags: Optional[SetTags] = keyword()
    unset_tags: Optional[UnsetTags] = keyword()

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ValidIdentifierIfSet("rename_to"),
        ExactlyOneValueSet(
            "suspend", "resume", "abort_all_queries", "rename_to", "set", "unset", "set_tags", "unset_tags"
        ),
        RequiredIf("resume", lambda opts: bool(opts.if_suspended), "if_suspended is set"),
    )


@dataclass
class DropWarehouseOptions:
    drop: bool = static("DROP")
    warehouse: bool = static("WAREHOUSE")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[AccountObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class ShowWarehouseOptions:
    show: bool = static("SHOW")
    warehouses: bool = static("WAREHOUSES")
    like: Optional[Like] = keyword()


@dataclass
class DescribeWarehouseOptions:
    describe: bool = static("DESCRIBE")
    warehouse: bool = static("WAREHOUSE")
    name: Optional[AccountObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class CreateWarehouseRequest(Request):
    name: AccountObjectIdentifier
    or_replace: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    warehouse_type: Optional[WarehouseType] = None
    warehouse_size: Optional[WarehouseSize] = None
    max_cluster_count: Optional[int] = None
    min_cluster_count: Optional[int] = None
    scaling_policy: Optional[ScalingPolicy] = None
    auto_suspend: Optional[int] = None
    auto_resume: Optional[bool] = None
    initially_suspended: Optional[bool] = None
    resource_monitor: Optional[AccountObjectIdentifier] = None
    comment: Optional[str] = None
    enable_query_acceleration: Optional[bool] = None
    query_acceleration_max_scale_factor: Optional[int] = None
    max_concurrency_level: Optional[int] = None
    statement_queued_timeout_in_seconds: Optional[int] = None
    statement_timeout_in_seconds: Optional[int] = None
    tags: dict = field(default_factory=dict)

    def to_opts(self) -> CreateWarehouseOptions:
        return copy_to_options(self, CreateWarehouseOptions, tags=tag_associations(self.tags))


@dataclass
class WarehouseSetRequest:
    warehouse_type: Optional[WarehouseType] = None
    warehouse_size: Optional[WarehouseSize] = None
    wait_for_completion: Optional[bool] = None
    max_cluster_count: Optional[int] = None
    min_cluster_count: Optional[int] = None
    scaling_policy: Optional[ScalingPolicy] = None
    auto_suspend: Optional[int] = None
    auto_resume: Optional[bool] = None
    resource_monitor: Optional[AccountObjectIdentifier] = None
    comment: Optional[str] = None
    enable_query_acceleration: Optional[bool] = None
    query_acceleration_max_scale_factor: Optional[int] = None
    max_concurrency_level: Optional[int] = None
    statement_queued_timeout_in_seconds: Optional[int] = None
    statement_timeout_in_seconds: Optional[int] = None


@dataclass
class WarehouseUnsetRequest:
    warehouse_type: Optional[bool] = None
    wait_for_completion: Optional[bool] = None
    max_cluster_count: Optional[bool] = None
    min_cluster_count: Optional[bool] = None
    scaling_policy: Optional[bool] = None
    auto_suspend: Optional[bool] = None
    auto_resume: Optional[bool] = None
    resource_monitor: Optional[bool] = None
    comment: Optional[bool] = None
    enable_query_acceleration: Optional[bool] = None
    query_acceleration_max_scale_factor: Optional[bool] = None
    max_concurrency_level: Optional[bool] = None
    statement_queued_timeout_in_seconds: Optional[bool] = None
    statement_timeout_in_seconds: Optional[bool] = None


@dataclass
class AlterWarehouseRequest(Request):
    name: AccountObjectIdentifier
    if_exists: Optional[bool] = None
    suspend: Optional[bool] = None
    resume: Optional[bool] = None
    if_suspended: Optional[bool] = None
    abort_all_queries: Optional[bool] = None
    rename_to: Optional[AccountObjectIdentifier] = None
    set: Optional[WarehouseSetRequest] = None
    unset: Optional[WarehouseUnsetRequest] = None
    set_tags: dict = field(default_factory=dict)
    unset_tags: list = field(default_factory=list)

    def to_opts(self) -> AlterWarehouseOptions:
        return copy_to_options(
            self,
            AlterWarehouseOptions,
            set=copy_if_set(self.set, WarehouseSet),
            unset=copy_if_set(self.unset, WarehouseUnset),
            set_tags=build_if_set(SetTags, tags=tag_associations(self.set_tags)),
            unset_tags=build_if_set(UnsetTags, tags=self.unset_tags or None),
        )


@dataclass
class DropWarehouseRequest(Request):
    name: AccountObjectIdentifier
    if_exists: Optional[bool] = None

    options_class = DropWarehouseOptions


@dataclass
class ShowWarehouseRequest(Request):
    like: Optional[Like] = None

    options_class = ShowWarehouseOptions


@dataclass
class DescribeWarehouseRequest(Request):
    name: AccountObjectIdentifier

    options_class = DescribeWarehouseOptions


@dataclass
class Warehouse:
    name: str
    state: str
    type: Optional[WarehouseType]
    size: Optional[WarehouseSize]
    min_cluster_count: int
    max_cluster_count: int
    started_clusters: int
    running: int
    queued: int
    is_default: bool
    is_current: bool
    auto_suspend: Optional[int]
    auto_resume: bool
    available: Optional[float]
    provisioning: Optional[float]
    quiescing: Optional[float]
    other: Optional[float]
    created_on: str
    resumed_on: str
    updated_on: str
    owner: str
    comment: Optional[str]
    enable_query_acceleration: bool
    query_acceleration_max_scale_factor: int
    resource_monitor: Optional[str]
    scaling_policy: Optional[ScalingPolicy]
    owner_role_type: str = ""

    def id(self) -> AccountObjectIdentifier:
        return AccountObjectIdentifier(self.name)

    def object_type(self) -> ObjectType:
        return ObjectType.WAREHOUSE


@dataclass
class WarehouseDetails:
    created_on: str
    name: str
    kind: str


def decode_warehouse(row: dict) -> Warehouse:
    row = normalize_row(row)
    return Warehouse(
        name=row["name"],
        state=to_string(row.get("state")),
        type=optional_enum(WarehouseType, row.get("type")),
        size=optional_enum(WarehouseSize, row.get("size")),
        min_cluster_count=to_int(row.get("min_cluster_count")),
        max_cluster_count=to_int(row.get("max_cluster_count")),
        started_clusters=to_int(row.get("started_clusters")),
        running=to_int(row.get("running")),
        queued=to_int(row.get("queued")),
        is_default=to_bool(row.get("is_default")),
        is_current=to_bool(row.get("is_current")),
        auto_suspend=optional_int(row.get("auto_suspend")),
        auto_resume=to_bool(row.get("auto_resume")),
        available=optional_float(row.get("available")),
        provisioning=optional_float(row.get("provisioning")),
        quiescing=optional_float(row.get("quiescing")),
        other=optional_float(row.get("other")),
        created_on=to_string(row.get("created_on")),
        resumed_on=to_string(row.get("resumed_on")),
        updated_on=to_string(row.get("updated_on")),
        owner=to_string(row.get("owner")),
        comment=optional_string(row.get("comment")),
        enable_query_acceleration=to_bool(row.get("enable_query_acceleration")),
        query_acceleration_max_scale_factor=to_int(row.get("query_acceleration_max_scale_factor")),
        resource_monitor=optional_string(row.get("resource_monitor")),
        scaling_policy=optional_enum(ScalingPolicy, row.get("scaling_policy")),
        owner_role_type=to_string(row.get("owner_role_type")),
    )


def decode_warehouse_details(row: dict) -> WarehouseDetails:
    row = normalize_row(row)
    return WarehouseDetails(
        created_on=to_string(row.get("created_on")),
        name=row["name"],
        kind=to_string(row.get("kind")),
    )


class Warehouses(Collection):
    def create(self, request: CreateWarehouseRequest) -> int:
        return self._exec(request)

    def alter(self, request: AlterWarehouseRequest) -> int:
        return self._exec(request)

    def drop(self, request: DropWarehouseRequest) -> int:
        return self._exec(request)

    def show(self, request: Optional[ShowWarehouseRequest] = None) -> list[Warehouse]:
        return self._query(request or ShowWarehouseRequest(), decode_warehouse)

    def show_by_id(self, id: AccountObjectIdentifier) -> Optional[Warehouse]:
        return find_by_id(self.show(ShowWarehouseRequest(like=Like(id.name))), id)

    def describe(self, id: AccountObjectIdentifier) -> Optional[WarehouseDetails]:
        rows = self._describe(DescribeWarehouseRequest(id))
        if rows is None:
            return None
        return decode_warehouse_details(rows[0])
