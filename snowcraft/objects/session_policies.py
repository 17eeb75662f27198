from dataclasses import dataclass, field
from typing import ClassVar, Optional

from ..common import In, Like, SetTags, UnsetTags, in_container, tag_associations
from ..ddl import COMMA, SINGLE_QUOTES, identifier, keyword, list_field, parameter, static
from ..enums import ObjectType
from ..identifiers import SchemaObjectIdentifier
from ..requests import Request, build_if_set, copy_if_set, copy_to_options
from ..rows import normalize_row, optional_int, optional_string, to_string
from ..validations import AtLeastOneValueSet, ExactlyOneValueSet, ValidIdentifier, ValidIdentifierIfSet
from .base import Collection, find_by_id


@dataclass
class CreateSessionPolicyOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    session_policy: bool = static("SESSION POLICY")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()
    session_idle_timeout_mins: Optional[int] = parameter("SESSION_IDLE_TIMEOUT_MINS")
    session_ui_idle_timeout_mins: Optional[int] = parameter("SESSION_UI_IDLE_TIMEOUT_MINS")
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class SessionPolicySet:
    session_idle_timeout_mins: Optional[int] = parameter("SESSION_IDLE_TIMEOUT_MINS")
    session_ui_idle_timeout_mins: Optional[int] = parameter("SESSION_UI_IDLE_TIMEOUT_MINS")
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet("session_idle_timeout_mins", "session_ui_idle_timeout_mins", "comment"),
    )


@dataclass
class SessionPolicyUnset:
    session_idle_timeout_mins: Optional[bool] = keyword("SESSION_IDLE_TIMEOUT_MINS")
    session_ui_idle_timeout_mins: Optional[bool] = keyword("SESSION_UI_IDLE_TIMEOUT_MINS")
    comment: Optional[bool] = keyword("COMMENT")

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet("session_idle_timeout_mins", "session_ui_idle_timeout_mins", "comment"),
    )


@dataclass
class AlterSessionPolicyOptions:
    alter: bool = static("ALTER")
    session_policy: bool = static("SESSION POLICY")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()
    rename_to: Optional[SchemaObjectIdentifier] = identifier("RENAME TO")
    set: Optional[SessionPolicySet] = keyword("SET")
    set_tags: Optional[SetTags] = keyword()
    unset_tags: Optional[UnsetTags] = keyword()
    unset: Optional[SessionPolicyUnset] = list_field("UNSET", comma=COMMA)

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ValidIdentifierIfSet("rename_to"),
        ExactlyOneValueSet("rename_to", "set", "set_tags", "unset_tags", "unset"),
    )


@dataclass
class DropSessionPolicyOptions:
    drop: bool = static("DROP")
    session_policy: bool = static("SESSION POLICY")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class ShowSessionPolicyOptions:
    show: bool = static("SHOW")
    session_policies: bool = static("SESSION POLICIES")
    like: Optional[Like] = keyword()
    in_: Optional[In] = keyword()


@dataclass
class DescribeSessionPolicyOptions:
    describe: bool = static("DESCRIBE")
    session_policy: bool = static("SESSION POLICY")
    name: Optional[SchemaObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class CreateSessionPolicyRequest(Request):
    name: SchemaObjectIdentifier
    or_replace: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    session_idle_timeout_mins: Optional[int] = None
    session_ui_idle_timeout_mins: Optional[int] = None
    comment: Optional[str] = None

    options_class = CreateSessionPolicyOptions


@dataclass
class SessionPolicySetRequest:
    session_idle_timeout_mins: Optional[int] = None
    session_ui_idle_timeout_mins: Optional[int] = None
    comment: Optional[str] = None


@dataclass
class SessionPolicyUnsetRequest:
    session_idle_timeout_mins: Optional[bool] = None
    session_ui_idle_timeout_mins: Optional[bool] = None
    comment: Optional[bool] = None


@dataclass
class AlterSessionPolicyRequest(Request):
    name: SchemaObjectIdentifier
    if_exists: Optional[bool] = None
    rename_to: Optional[SchemaObjectIdentifier] = None
    set: Optional[SessionPolicySetRequest] = None
    set_tags: dict = field(default_factory=dict)
    unset_tags: list = field(default_factory=list)
    unset: Optional[SessionPolicyUnsetRequest] = None

    def to_opts(self) -> AlterSessionPolicyOptions:
        return copy_to_options(
            self,
            AlterSessionPolicyOptions,
            set=copy_if_set(self.set, SessionPolicySet),
            unset=copy_if_set(self.unset, SessionPolicyUnset),
            set_tags=build_if_set(SetTags, tags=tag_associations(self.set_tags)),
            unset_tags=build_if_set(UnsetTags, tags=self.unset_tags or None),
        )


@dataclass
class DropSessionPolicyRequest(Request):
    name: SchemaObjectIdentifier
    if_exists: Optional[bool] = None

    options_class = DropSessionPolicyOptions


@dataclass
class ShowSessionPolicyRequest(Request):
    like: Optional[Like] = None
    in_: Optional[In] = None

    options_class = ShowSessionPolicyOptions


@dataclass
class DescribeSessionPolicyRequest(Request):
    name: SchemaObjectIdentifier

    options_class = DescribeSessionPolicyOptions


@dataclass
class SessionPolicy:
    created_on: str
    name: str
    database_name: str
    schema_name: str
    kind: str
    owner: str
    comment: Optional[str]
    options: str = ""
    owner_role_type: str = ""

    def id(self) -> SchemaObjectIdentifier:
        return SchemaObjectIdentifier(self.database_name, self.schema_name, self.name)

    def object_type(self) -> ObjectType:
        return ObjectType.SESSION_POLICY


@dataclass
class SessionPolicyDescription:
    created_on: str
    name: str
    session_idle_timeout_mins: Optional[int]
    session_ui_idle_timeout_mins: Optional[int]
    comment: Optional[str]


def decode_session_policy(row: dict) -> SessionPolicy:
    row = normalize_row(row)
    return SessionPolicy(
        created_on=to_string(row.get("created_on")),
        name=row["name"],
        database_name=row["database_name"],
        schema_name=row["schema_name"],
        kind=to_string(row.get("kind")),
        owner=to_string(row.get("owner")),
        comment=optional_string(row.get("comment")),
        options=to_string(row.get("options")),
        owner_role_type=to_string(row.get("owner_role_type")),
    )


def decode_session_policy_description(row: dict) -> SessionPolicyDescription:
    row = normalize_row(row)
    return SessionPolicyDescription(
        created_on=to_string(row.get("created_on")),
        name=row["name"],
        session_idle_timeout_mins=optional_int(row.get("session_idle_timeout_mins")),
        session_ui_idle_timeout_mins=optional_int(row.get("session_ui_idle_timeout_mins")),
        comment=optional_string(row.get("comment")),
    )


class SessionPolicies(Collection):
    def create(self, request: CreateSessionPolicyRequest) -> int:
        return self._exec(request)

    def alter(self, request: AlterSessionPolicyRequest) -> int:
        return self._exec(request)

    def drop(self, request: DropSessionPolicyRequest) -> int:
        return self._exec(request)

    def show(self, request: Optional[ShowSessionPolicyRequest] = None) -> list[SessionPolicy]:
        return self._query(request or ShowSessionPolicyRequest(), decode_session_policy)

    def show_by_id(self, id: SchemaObjectIdentifier) -> Optional[SessionPolicy]:
        request = ShowSessionPolicyRequest(like=Like(id.name), in_=in_container(id.schema_id()))
        return find_by_id(self.show(request), id)

    def describe(self, id: SchemaObjectIdentifier) -> Optional[SessionPolicyDescription]:
        rows = self._describe(DescribeSessionPolicyRequest(id))
        if rows is None:
            return None
        return decode_session_policy_description(rows[0])
