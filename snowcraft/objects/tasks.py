from dataclasses import dataclass, field
from typing import ClassVar, Optional

from ..common import (
    In,
    LimitFrom,
    Like,
    SessionParameter,
    SetTags,
    TagAssociation,
    UnsetTags,
    in_container,
    session_parameters,
    tag_associations,
)
from ..ddl import (
    COMMA,
    EQUALS,
    NO_EQUALS,
    PARENTHESES,
    SINGLE_QUOTES,
    identifier,
    keyword,
    list_field,
    parameter,
    static,
)
from ..enums import ObjectType, TaskState, WarehouseSize
from ..identifiers import AccountObjectIdentifier, SchemaObjectIdentifier, parse_schema_object_identifier
from ..requests import Request, build_if_set, copy_if_set, copy_to_options
from ..rows import normalize_row, optional_enum, optional_string, parse_json_list, to_bool, to_string
from ..validations import (
    AtLeastOneValueSet,
    ConflictingFields,
    ExactlyOneValueSet,
    ValidIdentifier,
    ValidIdentifierIfSet,
    ValidIdentifiers,
)
from .base import Collection, find_by_id


@dataclass
class TaskWarehouse:
    warehouse: Optional[AccountObjectIdentifier] = identifier("WAREHOUSE", equals=EQUALS)
    user_task_managed_initial_warehouse_size: Optional[WarehouseSize] = parameter(
        "USER_TASK_MANAGED_INITIAL_WAREHOUSE_SIZE", quotes=SINGLE_QUOTES
    )

    validations: ClassVar[tuple] = (
        ExactlyOneValueSet("warehouse", "user_task_managed_initial_warehouse_size"),
        ValidIdentifierIfSet("warehouse"),
    )


@dataclass
class CreateTaskOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    task: bool = static("TASK")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()
    warehouse: Optional[TaskWarehouse] = keyword()
    schedule: Optional[str] = parameter("SCHEDULE", quotes=SINGLE_QUOTES)
    config: Optional[str] = parameter("CONFIG")
    allow_overlapping_execution: Optional[bool] = parameter("ALLOW_OVERLAPPING_EXECUTION")
    session_parameters: Optional[list[SessionParameter]] = list_field()
    user_task_timeout_ms: Optional[int] = parameter("USER_TASK_TIMEOUT_MS")
    suspend_task_after_num_failures: Optional[int] = parameter("SUSPEND_TASK_AFTER_NUM_FAILURES")
    error_integration: Optional[str] = parameter("ERROR_INTEGRATION")
    copy_grants: Optional[bool] = keyword("COPY GRANTS")
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)
    after: Optional[list[SchemaObjectIdentifier]] = parameter("AFTER", equals=NO_EQUALS)
    tags: Optional[list[TagAssociation]] = keyword("TAG", parens=PARENTHESES)
    when: Optional[str] = parameter("WHEN", equals=NO_EQUALS)
    as_: bool = static("AS")
    sql_statement: Optional[str] = keyword()

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ValidIdentifiers("after"),
        ConflictingFields("or_replace", "if_not_exists"),
        AtLeastOneValueSet("sql_statement"),
    )


@dataclass
class CloneTaskOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    task: bool = static("TASK")
    name: Optional[SchemaObjectIdentifier] = identifier()
    source_task: Optional[SchemaObjectIdentifier] = identifier("CLONE")
    copy_grants: Optional[bool] = keyword("COPY GRANTS")

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ValidIdentifier("source_task"),
    )


@dataclass
class TaskSet:
    warehouse: Optional[AccountObjectIdentifier] = identifier("WAREHOUSE", equals=EQUALS)
    user_task_managed_initial_warehouse_size: Optional[WarehouseSize] = parameter(
        "USER_TASK_MANAGED_INITIAL_WAREHOUSE_SIZE", quotes=SINGLE_QUOTES
    )
    schedule: Optional[str] = parameter("SCHEDULE", quotes=SINGLE_QUOTES)
    config: Optional[str] = parameter("CONFIG")
    allow_overlapping_execution: Optional[bool] = parameter("ALLOW_OVERLAPPING_EXECUTION")
    user_task_timeout_ms: Optional[int] = parameter("USER_TASK_TIMEOUT_MS")
    suspend_task_after_num_failures: Optional[int] = parameter("SUSPEND_TASK_AFTER_NUM_FAILURES")
    error_integration: Optional[str] = parameter("ERROR_INTEGRATION")
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)
    session_parameters: Optional[list[SessionParameter]] = list_field()

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet(
            "warehouse",
            "user_task_managed_initial_warehouse_size",
            "schedule",
            "config",
            "allow_overlapping_execution",
            "user_task_timeout_ms",
            "suspend_task_after_num_failures",
            "error_integration",
            "comment",
            "session_parameters",
        ),
        ConflictingFields("warehouse", "user_task_managed_initial_warehouse_size"),
        ValidIdentifierIfSet("warehouse"),
    )


@dataclass
class TaskUnset:
    warehouse: Optional[bool] = keyword("WAREHOUSE")
    schedule: Optional[bool] = keyword("SCHEDULE")
    config: Optional[bool] = keyword("CONFIG")
    allow_overlapping_execution: Optional[bool] = keyword("ALLOW_OVERLAPPING_EXECUTION")
    user_task_timeout_ms: Optional[bool] = keyword("USER_TASK_TIMEOUT_MS")
    suspend_task_after_num_failures: Optional[bool] = keyword("SUSPEND_TASK_AFTER_NUM_FAILURES")
    error_integration: Optional[bool] = keyword("ERROR_INTEGRATION")
    comment: Optional[bool] = keyword("COMMENT")
    session_parameters: Optional[list[str]] = list_field()

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet(
            "warehouse",
            "schedule",
            "config",
            "allow_overlapping_execution",
            "user_task_timeout_ms",
            "suspend_task_after_num_failures",
            "error_integration",
            "comment",
            "session_parameters",
        ),
    )


@dataclass
class AlterTaskOptions:
    alter: bool = static("ALTER")
    task: bool = static("TASK")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()
    resume: Optional[bool] = keyword("RESUME")
    suspend: Optional[bool] = keyword("SUSPEND")
    remove_after: Optional[list[SchemaObjectIdentifier]] = parameter("REMOVE AFTER", equals=NO_EQUALS)
    add_after: Optional[list[SchemaObjectIdentifier]] = parameter("ADD AFTER", equals=NO_EQUALS)
    set: Optional[TaskSet] = keyword("SET")
    unset: Optional[TaskUnset] = list_field("UNSET", comma=COMMA)
    set_tags: Optional[SetTags] = keyword()
    unset_tags: Optional[UnsetTags] = keyword()
    modify_as: Optional[str] = parameter("MODIFY AS", equals=NO_EQUALS)
    modify_when: Optional[str] = parameter("MODIFY WHEN", equals=NO_EQUALS)

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ValidIdentifiers("remove_after"),
        ValidIdentifiers("add_after"),
        ExactlyOneValueSet(
            "resume",
            "suspend",
            "remove_after",
            "add_after",
            "set",
            "unset",
            "set_tags",
            "unset_tags",
            "modify_as",
            "modify_when",
        ),
    )


@dataclass
class DropTaskOptions:
    drop: bool = static("DROP")
    task: bool = static("TASK")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class ShowTaskOptions:
    show: bool = static("SHOW")
    terse: Optional[bool] = keyword("TERSE")
    tasks: bool = static("TASKS")
    like: Optional[Like] = keyword()
    in_: Optional[In] = keyword()
    starts_with: Optional[str] = parameter("STARTS WITH", quotes=SINGLE_QUOTES, equals=NO_EQUALS)
    root_only: Optional[bool] = keyword("ROOT ONLY")
    limit: Optional[LimitFrom] = keyword()


@dataclass
class DescribeTaskOptions:
    describe: bool = static("DESCRIBE")
    task: bool = static("TASK")
    name: Optional[SchemaObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class ExecuteTaskOptions:
    execute: bool = static("EXECUTE")
    task: bool = static("TASK")
    name: Optional[SchemaObjectIdentifier] = identifier()
    retry_last: Optional[bool] = keyword("RETRY LAST")

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class CreateTaskRequest(Request):
    name: SchemaObjectIdentifier
    sql_statement: str
    or_replace: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    warehouse: Optional[AccountObjectIdentifier] = None
    user_task_managed_initial_warehouse_size: Optional[WarehouseSize] = None
    schedule: Optional[str] = None
    config: Optional[str] = None
    allow_overlapping_execution: Optional[bool] = None
    session_parameters: dict = field(default_factory=dict)
    user_task_timeout_ms: Optional[int] = None
    suspend_task_after_num_failures: Optional[int] = None
    error_integration: Optional[str] = None
    copy_grants: Optional[bool] = None
    comment: Optional[str] = None
    after: list = field(default_factory=list)
    tags: dict = field(default_factory=dict)
    when: Optional[str] = None

    def to_opts(self) -> CreateTaskOptions:
        return copy_to_options(
            self,
            CreateTaskOptions,
            warehouse=build_if_set(
                TaskWarehouse,
                warehouse=self.warehouse,
                user_task_managed_initial_warehouse_size=self.user_task_managed_initial_warehouse_size,
            ),
            session_parameters=session_parameters(self.session_parameters),
            tags=tag_associations(self.tags),
        )


@dataclass
class CloneTaskRequest(Request):
    name: SchemaObjectIdentifier
    source_task: SchemaObjectIdentifier
    or_replace: Optional[bool] = None
    copy_grants: Optional[bool] = None

    options_class = CloneTaskOptions


@dataclass
class TaskSetRequest:
    warehouse: Optional[AccountObjectIdentifier] = None
    user_task_managed_initial_warehouse_size: Optional[WarehouseSize] = None
    schedule: Optional[str] = None
    config: Optional[str] = None
    allow_overlapping_execution: Optional[bool] = None
    user_task_timeout_ms: Optional[int] = None
    suspend_task_after_num_failures: Optional[int] = None
    error_integration: Optional[str] = None
    comment: Optional[str] = None
    session_parameters: dict = field(default_factory=dict)


@dataclass
class TaskUnsetRequest:
    warehouse: Optional[bool] = None
    schedule: Optional[bool] = None
    config: Optional[bool] = None
    allow_overlapping_execution: Optional[bool] = None
    user_task_timeout_ms: Optional[bool] = None
    suspend_task_after_num_failures: Optional[bool] = None
    error_integration: Optional[bool] = None
    comment: Optional[bool] = None
    session_parameters: list = field(default_factory=list)


@dataclass
class AlterTaskRequest(Request):
    name: SchemaObjectIdentifier
    if_exists: Optional[bool] = None
    resume: Optional[bool] = None
    suspend: Optional[bool] = None
    remove_after: list = field(default_factory=list)
    add_after: list = field(default_factory=list)
    set: Optional[TaskSetRequest] = None
    unset: Optional[TaskUnsetRequest] = None
    set_tags: dict = field(default_factory=dict)
    unset_tags: list = field(default_factory=list)
    modify_as: Optional[str] = None
    modify_when: Optional[str] = None

    def to_opts(self) -> AlterTaskOptions:
        task_set = None
        if self.set is not None:
            task_set = copy_if_set(
                self.set, TaskSet, session_parameters=session_parameters(self.set.session_parameters)
            )
        task_unset = None
        if self.unset is not None:
            names = [name.upper() for name in self.unset.session_parameters]
            task_unset = copy_if_set(self.unset, TaskUnset, session_parameters=names or None)
        return copy_to_options(
            self,
            AlterTaskOptions,
            set=task_set,
            unset=task_unset,
            set_tags=build_if_set(SetTags, tags=tag_associations(self.set_tags)),
            unset_tags=build_if_set(UnsetTags, tags=self.unset_tags or None),
        )


@dataclass
class DropTaskRequest(Request):
    name: SchemaObjectIdentifier
    if_exists: Optional[bool] = None

    options_class = DropTaskOptions


@dataclass
class ShowTaskRequest(Request):
    terse: Optional[bool] = None
    like: Optional[Like] = None
    in_: Optional[In] = None
    starts_with: Optional[str] = None
    root_only: Optional[bool] = None
    limit: Optional[LimitFrom] = None

    options_class = ShowTaskOptions


@dataclass
class DescribeTaskRequest(Request):
    name: SchemaObjectIdentifier

    options_class = DescribeTaskOptions


@dataclass
class ExecuteTaskRequest(Request):
    name: SchemaObjectIdentifier
    retry_last: Optional[bool] = None

    options_class = ExecuteTaskOptions


@dataclass
class Task:
    created_on: str
    name: str
    id_: str
    database_name: str
    schema_name: str
    owner: str
    comment: Optional[str]
    warehouse: Optional[str]
    schedule: Optional[str]
    predecessors: list[SchemaObjectIdentifier]
    state: Optional[TaskState]
    definition: str
    condition: Optional[str]
    allow_overlapping_execution: bool
    error_integration: Optional[str]
    last_committed_on: Optional[str]
    last_suspended_on: Optional[str]
    owner_role_type: str
    config: Optional[str]
    budget: Optional[str]

    def id(self) -> SchemaObjectIdentifier:
        return SchemaObjectIdentifier(self.database_name, self.schema_name, self.name)

    def object_type(self) -> ObjectType:
        return ObjectType.TASK

    def is_started(self) -> bool:
        return self.state == TaskState.STARTED


def parse_predecessors(value) -> list[SchemaObjectIdentifier]:
    """SHOW TASKS reports predecessors as a JSON array of fully qualified task names."""
    return [parse_schema_object_identifier(name) for name in parse_json_list(value) if name]


def decode_task(row: dict) -> Task:
    row = normalize_row(row)
    return Task(
        created_on=to_string(row.get("created_on")),
        name=row["name"],
        id_=to_string(row.get("id")),
        database_name=row["database_name"],
        schema_name=row["schema_name"],
        owner=to_string(row.get("owner")),
        comment=optional_string(row.get("comment")),
        warehouse=optional_string(row.get("warehouse")),
        schedule=optional_string(row.get("schedule")),
        predecessors=parse_predecessors(row.get("predecessors")),
        state=optional_enum(TaskState, row.get("state")),
        definition=to_string(row.get("definition")),
        condition=optional_string(row.get("condition")),
        allow_overlapping_execution=to_bool(row.get("allow_overlapping_execution")),
        error_integration=optional_string(row.get("error_integration")),
        last_committed_on=optional_string(row.get("last_committed_on")),
        last_suspended_on=optional_string(row.get("last_suspended_on")),
        owner_role_type=to_string(row.get("owner_role_type")),
        config=optional_string(row.get("config")),
        budget=optional_string(row.get("budget")),
    )


class Tasks(Collection):
    def create(self, request: CreateTaskRequest) -> int:
        return self._exec(request)

    def clone(self, request: CloneTaskRequest) -> int:
        return self._exec(request)

    def alter(self, request: AlterTaskRequest) -> int:
        return self._exec(request)

    def drop(self, request: DropTaskRequest) -> int:
        return self._exec(request)

    def show(self, request: Optional[ShowTaskRequest] = None) -> list[Task]:
        return self._query(request or ShowTaskRequest(), decode_task)

    def show_by_id(self, id: SchemaObjectIdentifier) -> Optional[Task]:
        request = ShowTaskRequest(like=Like(id.name), in_=in_container(id.schema_id()))
        return find_by_id(self.show(request), id)

    def describe(self, id: SchemaObjectIdentifier) -> Optional[Task]:
        rows = self._describe(DescribeTaskRequest(id))
        if rows is None:
            return None
        return decode_task(rows[0])

    def execute(self, request: ExecuteTaskRequest) -> int:
        return self._exec(request)
