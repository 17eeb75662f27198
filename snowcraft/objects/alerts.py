from dataclasses import dataclass
from typing import ClassVar, Optional

from ..common import In, Like, in_container
from ..ddl import EQUALS, NO_EQUALS, PARENTHESES, SINGLE_QUOTES, identifier, keyword, parameter, static
from ..enums import AlertAction, AlertState, ObjectType
from ..identifiers import AccountObjectIdentifier, SchemaObjectIdentifier
from ..requests import Request, copy_if_set, copy_to_options
from ..rows import normalize_row, optional_enum, optional_string, to_string
from ..validations import (
    AtLeastOneValueSet,
    ExactlyOneValueSet,
    ValidIdentifier,
    ValidIdentifierIfSet,
)
from .base import Collection, find_by_id


@dataclass
class AlertCondition:
    query: Optional[str] = keyword("EXISTS", parens=PARENTHESES)


@dataclass
class CreateAlertOptions:
    """
    CREATE ALERT "DB"."S"."A" WAREHOUSE = "WH" SCHEDULE = '1 minute'
        IF (EXISTS (SELECT 1)) THEN CALL notify()
    """

    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    alert: bool = static("ALERT")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()
    warehouse: Optional[AccountObjectIdentifier] = identifier("WAREHOUSE", equals=EQUALS)
    schedule: Optional[str] = parameter("SCHEDULE", quotes=SINGLE_QUOTES)
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)
    condition: Optional[AlertCondition] = keyword("IF", parens=PARENTHESES)
    action: Optional[str] = parameter("THEN", equals=NO_EQUALS)

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ValidIdentifier("warehouse"),
        AtLeastOneValueSet("schedule"),
        AtLeastOneValueSet("condition"),
        AtLeastOneValueSet("action"),
    )


@dataclass
class AlertSet:
    warehouse: Optional[AccountObjectIdentifier] = identifier("WAREHOUSE", equals=EQUALS)
    schedule: Optional[str] = parameter("SCHEDULE", quotes=SINGLE_QUOTES)
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet("warehouse", "schedule", "comment"),
        ValidIdentifierIfSet("warehouse"),
    )


@dataclass
class AlertUnset:
    warehouse: Optional[bool] = keyword("WAREHOUSE")
    schedule: Optional[bool] = keyword("SCHEDULE")
    comment: Optional[bool] = keyword("COMMENT")

    validations: ClassVar[tuple] = (AtLeastOneValueSet("warehouse", "schedule", "comment"),)


@dataclass
class AlterAlertOptions:
    alter: bool = static("ALTER")
    alert: bool = static("ALERT")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()
    action: Optional[AlertAction] = keyword()
    set: Optional[AlertSet] = keyword("SET")
    unset: Optional[AlertUnset] = keyword("UNSET")
    modify_condition: Optional[str] = keyword("MODIFY CONDITION EXISTS", parens=PARENTHESES)
    modify_action: Optional[str] = parameter("MODIFY ACTION", equals=NO_EQUALS)

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ExactlyOneValueSet("action", "set", "unset", "modify_condition", "modify_action"),
    )


@dataclass
class DropAlertOptions:
    drop: bool = static("DROP")
    alert: bool = static("ALERT")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class ShowAlertOptions:
    show: bool = static("SHOW")
    terse: Optional[bool] = keyword("TERSE")
    alerts: bool = static("ALERTS")
    like: Optional[Like] = keyword()
    in_: Optional[In] = keyword()
    starts_with: Optional[str] = parameter("STARTS WITH", quotes=SINGLE_QUOTES, equals=NO_EQUALS)
    limit: Optional[int] = parameter("LIMIT", equals=NO_EQUALS)


@dataclass
class DescribeAlertOptions:
    describe: bool = static("DESCRIBE")
    alert: bool = static("ALERT")
    name: Optional[SchemaObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class CreateAlertRequest(Request):
    name: SchemaObjectIdentifier
    warehouse: AccountObjectIdentifier
    schedule: str
    condition: str
    action: str
    or_replace: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    comment: Optional[str] = None

    def to_opts(self) -> CreateAlertOptions:
        return copy_to_options(self, CreateAlertOptions, condition=AlertCondition(self.condition))


@dataclass
class AlertSetRequest:
    warehouse: Optional[AccountObjectIdentifier] = None
    schedule: Optional[str] = None
    comment: Optional[str] = None


@dataclass
class AlertUnsetRequest:
    warehouse: Optional[bool] = None
    schedule: Optional[bool] = None
    comment: Optional[bool] = None


@dataclass
class AlterAlertRequest(Request):
    name: SchemaObjectIdentifier
    if_exists: Optional[bool] = None
    action: Optional[AlertAction] = None
    set: Optional[AlertSetRequest] = None
    unset: Optional[AlertUnsetRequest] = None
    modify_condition: Optional[str] = None
    modify_action: Optional[str] = None

    def to_opts(self) -> AlterAlertOptions:
        return copy_to_options(
            self,
            AlterAlertOptions,
            set=copy_if_set(self.set, AlertSet),
            unset=copy_if_set(self.unset, AlertUnset),
        )


@dataclass
class DropAlertRequest(Request):
    name: SchemaObjectIdentifier
    if_exists: Optional[bool] = None

    options_class = DropAlertOptions


@dataclass
class ShowAlertRequest(Request):
    terse: Optional[bool] = None
    like: Optional[Like] = None
    in_: Optional[In] = None
    starts_with: Optional[str] = None
    limit: Optional[int] = None

    options_class = ShowAlertOptions


@dataclass
class DescribeAlertRequest(Request):
    name: SchemaObjectIdentifier

    options_class = DescribeAlertOptions


@dataclass
class Alert:
    created_on: str
    name: str
    database_name: str
    schema_name: str
    owner: str
    comment: Optional[str]
    warehouse: str
    schedule: str
    state: Optional[AlertState]
    condition: str
    action: str

    def id(self) -> SchemaObjectIdentifier:
        return SchemaObjectIdentifier(self.database_name, self.schema_name, self.name)

    def object_type(self) -> ObjectType:
        return ObjectType.ALERT


def decode_alert(row: dict) -> Alert:
    # SHOW ALERTS and DESCRIBE ALERT return the same columns
    row = normalize_row(row)
    return Alert(
        created_on=to_string(row.get("created_on")),
        name=row["name"],
        database_name=row["database_name"],
        schema_name=row["schema_name"],
        owner=to_string(row.get("owner")),
        comment=optional_string(row.get("comment")),
        warehouse=to_string(row.get("warehouse")),
        schedule=to_string(row.get("schedule")),
        state=optional_enum(AlertState, row.get("state")),
        condition=to_string(row.get("condition")),
        action=to_string(row.get("action")),
    )


class Alerts(Collection):
    def create(self, request: CreateAlertRequest) -> int:
        return self._exec(request)

    def alter(self, request: AlterAlertRequest) -> int:
        return self._exec(request)

    def drop(self, request: DropAlertRequest) -> int:
        return self._exec(request)

    def show(self, request: Optional[ShowAlertRequest] = None) -> list[Alert]:
        return self._query(request or ShowAlertRequest(), decode_alert)

    def show_by_id(self, id: SchemaObjectIdentifier) -> Optional[Alert]:
        request = ShowAlertRequest(like=Like(id.name), in_=in_container(id.schema_id()))
        return find_by_id(self.show(request), id)

    def describe(self, id: SchemaObjectIdentifier) -> Optional[Alert]:
        rows = self._describe(DescribeAlertRequest(id))
        if rows is None:
            return None
        return decode_alert(rows[0])
