from dataclasses import dataclass, field
from typing import ClassVar, Optional

from ..common import Like
from ..ddl import NO_COMMA, NO_EQUALS, PARENTHESES, SINGLE_QUOTES, identifier, keyword, parameter, static
from ..enums import ObjectType, ResourceMonitorFrequency, ResourceMonitorLevel, TriggerAction
from ..identifiers import AccountObjectIdentifier
from ..requests import Request, copy_if_set, copy_to_options
from ..rows import normalize_row, optional_enum, optional_float, optional_string, parse_list, to_float, to_string
from ..validations import (
    AtLeastOneValueSet,
    ConflictingFields,
    ValidIdentifier,
    ValidIdentifiers,
)
from .base import Collection, find_by_id


@dataclass
class TriggerDefinition:
    """ON 80 PERCENT DO NOTIFY"""

    threshold: Optional[int] = parameter("ON", equals=NO_EQUALS)
    action: Optional[TriggerAction] = parameter("PERCENT DO", equals=NO_EQUALS)

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet("threshold"),
        AtLeastOneValueSet("action"),
    )


@dataclass
class ResourceMonitorWith:
    credit_quota: Optional[int] = parameter("CREDIT_QUOTA")
    frequency: Optional[ResourceMonitorFrequency] = parameter("FREQUENCY")
    start_timestamp: Optional[str] = parameter("START_TIMESTAMP", quotes=SINGLE_QUOTES)
    end_timestamp: Optional[str] = parameter("END_TIMESTAMP", quotes=SINGLE_QUOTES)
    notify_users: Optional[list[AccountObjectIdentifier]] = parameter("NOTIFY_USERS", parens=PARENTHESES)
    triggers: Optional[list[TriggerDefinition]] = keyword("TRIGGERS", comma=NO_COMMA)

    validations: ClassVar[tuple] = (ValidIdentifiers("notify_users"),)


@dataclass
class CreateResourceMonitorOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    resource_monitor: bool = static("RESOURCE MONITOR")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[AccountObjectIdentifier] = identifier()
    with_: Optional[ResourceMonitorWith] = keyword("WITH")

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ConflictingFields("or_replace", "if_not_exists"),
    )


@dataclass
class ResourceMonitorSet:
    credit_quota: Optional[int] = parameter("CREDIT_QUOTA")
    frequency: Optional[ResourceMonitorFrequency] = parameter("FREQUENCY")
    start_timestamp: Optional[str] = parameter("START_TIMESTAMP", quotes=SINGLE_QUOTES)
    end_timestamp: Optional[str] = parameter("END_TIMESTAMP", quotes=SINGLE_QUOTES)
    notify_users: Optional[list[AccountObjectIdentifier]] = parameter("NOTIFY_USERS", parens=PARENTHESES)

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet("credit_quota", "frequency", "start_timestamp", "end_timestamp", "notify_users"),
        ValidIdentifiers("notify_users"),
    )


@dataclass
class ResourceMonitorUnset:
    # Resource monitors have no UNSET, properties are cleared with SET <property> = null
    credit_quota: Optional[bool] = keyword("CREDIT_QUOTA = null")
    end_timestamp: Optional[bool] = keyword("END_TIMESTAMP = null")

    validations: ClassVar[tuple] = (AtLeastOneValueSet("credit_quota", "end_timestamp"),)


@dataclass
class AlterResourceMonitorOptions:
    alter: bool = static("ALTER")
    resource_monitor: bool = static("RESOURCE MONITOR")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[AccountObjectIdentifier] = identifier()
    set: Optional[ResourceMonitorSet] = keyword("SET")
    unset: Optional[ResourceMonitorUnset] = keyword("SET")
    triggers: Optional[list[TriggerDefinition]] = keyword("TRIGGERS", comma=NO_COMMA)

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        AtLeastOneValueSet("set", "unset", "triggers"),
        ConflictingFields("set", "unset"),
    )


@dataclass
class DropResourceMonitorOptions:
    drop: bool = static("DROP")
    resource_monitor: bool = static("RESOURCE MONITOR")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[AccountObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class ShowResourceMonitorOptions:
    show: bool = static("SHOW")
    resource_monitors: bool = static("RESOURCE MONITORS")
    like: Optional[Like] = keyword()


@dataclass
class TriggerRequest:
    threshold: int
    action: TriggerAction


def _triggers(triggers: list) -> Optional[list[TriggerDefinition]]:
    if not triggers:
        return None
    return [TriggerDefinition(trigger.threshold, trigger.action) for trigger in triggers]


@dataclass
class CreateResourceMonitorRequest(Request):
    name: AccountObjectIdentifier
    or_replace: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    credit_quota: Optional[int] = None
    frequency: Optional[ResourceMonitorFrequency] = None
    start_timestamp: Optional[str] = None
    end_timestamp: Optional[str] = None
    notify_users: list = field(default_factory=list)
    triggers: list = field(default_factory=list)

    def to_opts(self) -> CreateResourceMonitorOptions:
        return copy_to_options(
            self,
            CreateResourceMonitorOptions,
            with_=copy_if_set(self, ResourceMonitorWith, triggers=_triggers(self.triggers)),
        )


@dataclass
class ResourceMonitorSetRequest:
    credit_quota: Optional[int] = None
    frequency: Optional[ResourceMonitorFrequency] = None
    start_timestamp: Optional[str] = None
    end_timestamp: Optional[str] = None
    notify_users: list = field(default_factory=list)


@dataclass
class ResourceMonitorUnsetRequest:
    credit_quota: Optional[bool] = None
    end_timestamp: Optional[bool] = None


@dataclass
class AlterResourceMonitorRequest(Request):
    name: AccountObjectIdentifier
    if_exists: Optional[bool] = None
    set: Optional[ResourceMonitorSetRequest] = None
    unset: Optional[ResourceMonitorUnsetRequest] = None
    triggers: list = field(default_factory=list)

    def to_opts(self) -> AlterResourceMonitorOptions:
        return copy_to_options(
            self,
            AlterResourceMonitorOptions,
            set=copy_if_set(self.set, ResourceMonitorSet),
            unset=copy_if_set(self.unset, ResourceMonitorUnset),
            triggers=_triggers(self.triggers),
        )


@dataclass
class DropResourceMonitorRequest(Request):
    name: AccountObjectIdentifier
    if_exists: Optional[bool] = None

    options_class = DropResourceMonitorOptions


@dataclass
class ShowResourceMonitorRequest(Request):
    like: Optional[Like] = None

    options_class = ShowResourceMonitorOptions


@dataclass
class ResourceMonitor:
    name: str
    credit_quota: Optional[float]
    used_credits: float
    remaining_credits: float
    level: Optional[ResourceMonitorLevel]
    frequency: Optional[ResourceMonitorFrequency]
    start_time: str
    end_time: Optional[str]
    notify_at: list[int]
    suspend_at: Optional[int]
    suspend_immediate_at: Optional[int]
    created_on: str
    owner: str
    comment: Optional[str]
    notify_users: list[str]

    def id(self) -> AccountObjectIdentifier:
        return AccountObjectIdentifier(self.name)

    def object_type(self) -> ObjectType:
        return ObjectType.RESOURCE_MONITOR


def parse_trigger_thresholds(value) -> list[int]:
    """'50%,75%'  ->  [50, 75]"""
    return [int(item.rstrip("%")) for item in parse_list(value)]


def _first(values: list[int]) -> Optional[int]:
    return values[0] if values else None


def decode_resource_monitor(row: dict) -> ResourceMonitor:
    row = normalize_row(row)
    return ResourceMonitor(
        name=row["name"],
        credit_quota=optional_float(row.get("credit_quota")),
        used_credits=to_float(row.get("used_credits")),
        remaining_credits=to_float(row.get("remaining_credits")),
        level=optional_enum(ResourceMonitorLevel, row.get("level")),
        frequency=optional_enum(ResourceMonitorFrequency, row.get("frequency")),
        start_time=to_string(row.get("start_time")),
        end_time=optional_string(row.get("end_time")),
        notify_at=parse_trigger_thresholds(row.get("notify_at")),
        suspend_at=_first(parse_trigger_thresholds(row.get("suspend_at"))),
        suspend_immediate_at=_first(parse_trigger_thresholds(row.get("suspend_immediately_at"))),
        created_on=to_string(row.get("created_on")),
        owner=to_string(row.get("owner")),
        comment=optional_string(row.get("comment")),
        notify_users=parse_list(row.get("notify_users")),
    )


class ResourceMonitors(Collection):
    def create(self, request: CreateResourceMonitorRequest) -> int:
        return self._exec(request)

    def alter(self, request: AlterResourceMonitorRequest) -> int:
        return self._exec(request)

    def drop(self, request: DropResourceMonitorRequest) -> int:
        return self._exec(request)

    def show(self, request: Optional[ShowResourceMonitorRequest] = None) -> list[ResourceMonitor]:
        return self._query(request or ShowResourceMonitorRequest(), decode_resource_monitor)

    def show_by_id(self, id: AccountObjectIdentifier) -> Optional[ResourceMonitor]:
        return find_by_id(self.show(ShowResourceMonitorRequest(like=Like(id.name))), id)
