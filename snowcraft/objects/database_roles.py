from dataclasses import dataclass, field
from functools import partial
from typing import ClassVar, Optional

from ..common import Like, SetTags, UnsetTags, tag_associations
from ..ddl import SINGLE_QUOTES, identifier, keyword, parameter, static
from ..enums import ObjectType
from ..identifiers import AccountObjectIdentifier, DatabaseObjectIdentifier
from ..requests import Request, build_if_set, copy_to_options
from ..rows import normalize_row, optional_string, to_bool, to_int, to_string
from ..validations import ConflictingFields, ExactlyOneValueSet, ValidIdentifier, ValidIdentifierIfSet
from .base import Collection, find_by_id


@dataclass
class CreateDatabaseRoleOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    database_role: bool = static("DATABASE ROLE")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[DatabaseObjectIdentifier] = identifier()
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ConflictingFields("or_replace", "if_not_exists"),
    )


@dataclass
class AlterDatabaseRoleOptions:
    alter: bool = static("ALTER")
    database_role: bool = static("DATABASE ROLE")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[DatabaseObjectIdentifier] = identifier()
    rename_to: Optional[DatabaseObjectIdentifier] = identifier("RENAME TO")
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
class DropDatabaseRoleOptions:
    drop: bool = static("DROP")
    database_role: bool = static("DATABASE ROLE")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[DatabaseObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class ShowDatabaseRoleOptions:
    show: bool = static("SHOW")
    database_roles: bool = static("DATABASE ROLES")
    like: Optional[Like] = keyword()
    database: Optional[AccountObjectIdentifier] = identifier("IN DATABASE")

    validations: ClassVar[tuple] = (ValidIdentifier("database"),)


@dataclass
class CreateDatabaseRoleRequest(Request):
    name: DatabaseObjectIdentifier
    or_replace: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    comment: Optional[str] = None

    options_class = CreateDatabaseRoleOptions


@dataclass
class AlterDatabaseRoleRequest(Request):
    name: DatabaseObjectIdentifier
    if_exists: Optional[bool] = None
    rename_to: Optional[DatabaseObjectIdentifier] = None
    set_comment: Optional[str] = None
    unset_comment: Optional[bool] = None
    set_tags: dict = field(default_factory=dict)
    unset_tags: list = field(default_factory=list)

    def to_opts(self) -> AlterDatabaseRoleOptions:
        return copy_to_options(
            self,
            AlterDatabaseRoleOptions,
            set_tags=build_if_set(SetTags, tags=tag_associations(self.set_tags)),
            unset_tags=build_if_set(UnsetTags, tags=self.unset_tags or None),
        )


@dataclass
class DropDatabaseRoleRequest(Request):
    name: DatabaseObjectIdentifier
    if_exists: Optional[bool] = None

    options_class = DropDatabaseRoleOptions


@dataclass
class ShowDatabaseRoleRequest(Request):
    database: AccountObjectIdentifier
    like: Optional[Like] = None

    options_class = ShowDatabaseRoleOptions


@dataclass
class DatabaseRole:
    created_on: str
    name: str
    database_name: str
    is_default: bool
    is_current: bool
    is_inherited: bool
    granted_to_roles: int
    granted_to_database_roles: int
    granted_database_roles: int
    owner: str
    comment: Optional[str]
    owner_role_type: str = ""

    def id(self) -> DatabaseObjectIdentifier:
        return DatabaseObjectIdentifier(self.database_name, self.name)

    def object_type(self) -> ObjectType:
        return ObjectType.DATABASE_ROLE


def decode_database_role(row: dict, database_name: str) -> DatabaseRole:
    # SHOW DATABASE ROLES does not report the database, it comes from the IN clause
    row = normalize_row(row)
    return DatabaseRole(
        created_on=to_string(row.get("created_on")),
        name=row["name"],
        database_name=database_name,
        is_default=to_bool(row.get("is_default")),
        is_current=to_bool(row.get("is_current")),
        is_inherited=to_bool(row.get("is_inherited")),
        granted_to_roles=to_int(row.get("granted_to_roles")),
        granted_to_database_roles=to_int(row.get("granted_to_database_roles")),
        granted_database_roles=to_int(row.get("granted_database_roles")),
        owner=to_string(row.get("owner")),
        comment=optional_string(row.get("comment")),
        owner_role_type=to_string(row.get("owner_role_type")),
    )


class DatabaseRoles(Collection):
    def create(self, request: CreateDatabaseRoleRequest) -> int:
        return self._exec(request)

    def alter(self, request: AlterDatabaseRoleRequest) -> int:
        return self._exec(request)

    def drop(self, request: DropDatabaseRoleRequest) -> int:
        return self._exec(request)

    def show(self, request: ShowDatabaseRoleRequest) -> list[DatabaseRole]:
        return self._query(request, partial(decode_database_role, database_name=request.database.name))

    def show_by_id(self, id: DatabaseObjectIdentifier) -> Optional[DatabaseRole]:
        request = ShowDatabaseRoleRequest(database=id.database_id(), like=Like(id.name))
        return find_by_id(self.show(request), id)
