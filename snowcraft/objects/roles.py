from dataclasses import dataclass, field
from typing import ClassVar, Optional

from ..common import Like, SetTags, TagAssociation, UnsetTags, tag_associations
from ..ddl import PARENTHESES, SINGLE_QUOTES, identifier, keyword, parameter, static
from ..enums import ObjectType
from ..identifiers import AccountObjectIdentifier
from ..requests import Request, build_if_set, copy_to_options
from ..rows import normalize_row, optional_string, to_bool, to_int, to_string
from ..validations import ConflictingFields, ExactlyOneValueSet, ValidIdentifier, ValidIdentifierIfSet
from .base import Collection, find_by_id


@dataclass
class CreateRoleOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    role: bool = static("ROLE")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[AccountObjectIdentifier] = identifier()
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)
    tags: Optional[list[TagAssociation]] = keyword("TAG", parens=PARENTHESES)

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ConflictingFields("or_replace", "if_not_exists"),
    )


@dataclass
class AlterRoleOptions:
    alter: bool = static("ALTER")
    role: bool = static("ROLE")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[AccountObjectIdentifier] = identifier()
    rename_to: Optional[AccountObjectIdentifier] = identifier("RENAME TO")
    set_comment: Optional[str] = parameter("SET COMMENT", quotes=SINGLE_QUOTES)
    unset_comment: Optional[bool] = keyword("UNSET COMMENT")
    set_tags: Optional[SetTags] = keyword()
    unset_tags: Optional[UnsetTags] = keyword()

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ValidIdentifierIfSet("rename_to"),
        ExactlyOneValueSet("rename_to", "set_comment", "unset_comment", "set_tags", "unset_tags"),
    )


@dataclass
class DropRoleOptions:
    drop: bool = static("DROP")
    role: bool = static("ROLE")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[AccountObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class ShowRoleOptions:
    show: bool = static("SHOW")
    roles: bool = static("ROLES")
    like: Optional[Like] = keyword()


@dataclass
class RoleGrantee:
    role: Optional[AccountObjectIdentifier] = identifier("ROLE")
    user: Optional[AccountObjectIdentifier] = identifier("USER")

    validations: ClassVar[tuple] = (
        ExactlyOneValueSet("role", "user"),
        ValidIdentifierIfSet("role"),
        ValidIdentifierIfSet("user"),
    )


@dataclass
class GrantRoleOptions:
    """GRANT ROLE "ANALYST" TO ROLE "SYSADMIN" """

    grant: bool = static("GRANT")
    role: bool = static("ROLE")
    name: Optional[AccountObjectIdentifier] = identifier()
    to: Optional[RoleGrantee] = keyword("TO")

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class RevokeRoleOptions:
    revoke: bool = static("REVOKE")
    role: bool = static("ROLE")
    name: Optional[AccountObjectIdentifier] = identifier()
    from_: Optional[RoleGrantee] = keyword("FROM")

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class CreateRoleRequest(Request):
    name: AccountObjectIdentifier
    or_replace: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    comment: Optional[str] = None
    tags: dict = field(default_factory=dict)

    def to_opts(self) -> CreateRoleOptions:
        return copy_to_options(self, CreateRoleOptions, tags=tag_associations(self.tags))


@dataclass
class AlterRoleRequest(Request):
    name: AccountObjectIdentifier
    if_exists: Optional[bool] = None
    rename_to: Optional[AccountObjectIdentifier] = None
    set_comment: Optional[str] = None
    unset_comment: Optional[bool] = None
    set_tags: dict = field(default_factory=dict)
    unset_tags: list = field(default_factory=list)

    def to_opts(self) -> AlterRoleOptions:
        return copy_to_options(
            self,
            AlterRoleOptions,
            set_tags=build_if_set(SetTags, tags=tag_associations(self.set_tags)),
            unset_tags=build_if_set(UnsetTags, tags=self.unset_tags or None),
        )


@dataclass
class DropRoleRequest(Request):
    name: AccountObjectIdentifier
    if_exists: Optional[bool] = None

    options_class = DropRoleOptions


@dataclass
class ShowRoleRequest(Request):
    like: Optional[Like] = None

    options_class = ShowRoleOptions


@dataclass
class GrantRoleRequest(Request):
    name: AccountObjectIdentifier
    role: Optional[AccountObjectIdentifier] = None
    user: Optional[AccountObjectIdentifier] = None

    def to_opts(self) -> GrantRoleOptions:
        return GrantRoleOptions(name=self.name, to=RoleGrantee(role=self.role, user=self.user))


@dataclass
class RevokeRoleRequest(Request):
    name: AccountObjectIdentifier
    role: Optional[AccountObjectIdentifier] = None
    user: Optional[AccountObjectIdentifier] = None

    def to_opts(self) -> RevokeRoleOptions:
        return RevokeRoleOptions(name=self.name, from_=RoleGrantee(role=self.role, user=self.user))


@dataclass
class Role:
    created_on: str
    name: str
    is_default: bool
    is_current: bool
    is_inherited: bool
    assigned_to_users: int
    granted_to_roles: int
    granted_roles: int
    owner: str
    comment: Optional[str]

    def id(self) -> AccountObjectIdentifier:
        return AccountObjectIdentifier(self.name)

    def object_type(self) -> ObjectType:
        return ObjectType.ROLE


def decode_role(row: dict) -> Role:
    row = normalize_row(row)
    return Role(
        created_on=to_string(row.get("created_on")),
        name=row["name"],
        is_default=to_bool(row.get("is_default")),
        is_current=to_bool(row.get("is_current")),
        is_inherited=to_bool(row.get("is_inherited")),
        assigned_to_users=to_int(row.get("assigned_to_users")),
        granted_to_roles=to_int(row.get("granted_to_roles")),
        granted_roles=to_int(row.get("granted_roles")),
        owner=to_string(row.get("owner")),
        comment=optional_string(row.get("comment")),
    )


class Roles(Collection):
    def create(self, request: CreateRoleRequest) -> int:
        return self._exec(request)

    def alter(self, request: AlterRoleRequest) -> int:
        return self._exec(request)

    def drop(self, request: DropRoleRequest) -> int:
        return self._exec(request)

    def show(self, request: Optional[ShowRoleRequest] = None) -> list[Role]:
        return self._query(request or ShowRoleRequest(), decode_role)

    def show_by_id(self, id: AccountObjectIdentifier) -> Optional[Role]:
        return find_by_id(self.show(ShowRoleRequest(like=Like(id.name))), id)

    def grant(self, request: GrantRoleRequest) -> int:
        return self._exec(request)

    def revoke(self, request: RevokeRoleRequest) -> int:
        return self._exec(request)
