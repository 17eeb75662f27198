"""
GRANT, REVOKE and SHOW GRANTS.

Privileges and grant targets are nested option structs, so a statement is built
by composing them:

    GrantPrivilegesToAccountRoleRequest(
        privileges=AccountRoleGrantPrivileges(schema_object_privileges=[SchemaObjectPrivilege.SELECT]),
        on=AccountRoleGrantOn(
            schema_object=GrantOnSchemaObject(future=schema_objects_in(ObjectType.TABLE, in_schema=schema)),
        ),
        account_role=AccountObjectIdentifier("ANALYST"),
    )

renders as `GRANT SELECT ON FUTURE TABLES IN SCHEMA "DB"."S" TO ROLE "ANALYST"`.
"""

import logging
from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from ..ddl import embedded, identifier, keyword, list_field, static
from ..enums import (
    AccountObjectPrivilege,
    GlobalPrivilege,
    ObjectType,
    OwnershipCurrentGrantsOutboundPrivileges,
    SchemaObjectPrivilege,
    SchemaPrivilege,
)
from ..identifiers import (
    AccountObjectIdentifier,
    DatabaseObjectIdentifier,
    Identifier,
    parse_identifier,
)
from ..requests import Request
from ..rows import normalize_row, to_bool, to_string
from ..validations import (
    AtLeastOneValueSet,
    ConflictingFields,
    ExactlyOneValueSet,
    RequiredIf,
    ValidEnumValue,
    ValidIdentifier,
    ValidIdentifierIfSet,
)
from .base import Collection

logger = logging.getLogger("snowcraft")


@dataclass
class GrantObject:
    """A single securable, eg. TABLE "DB"."S"."T"."""

    object_type: Optional[ObjectType] = keyword()
    name: Optional[Identifier] = identifier()

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet("object_type"),
        ValidIdentifier("name"),
    )


@dataclass
class GrantOnSchemaObjectIn:
    """TABLES IN SCHEMA "DB"."S", the object kind is always plural."""

    plural_object_type: Optional[str] = keyword()
    in_database: Optional[AccountObjectIdentifier] = identifier("IN DATABASE")
    in_schema: Optional[DatabaseObjectIdentifier] = identifier("IN SCHEMA")

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet("plural_object_type"),
        ExactlyOneValueSet("in_database", "in_schema"),
        ValidIdentifierIfSet("in_database"),
        ValidIdentifierIfSet("in_schema"),
    )


def schema_objects_in(
    object_type: ObjectType,
    in_database: Optional[AccountObjectIdentifier] = None,
    in_schema: Optional[DatabaseObjectIdentifier] = None,
) -> GrantOnSchemaObjectIn:
    return GrantOnSchemaObjectIn(object_type.plural(), in_database=in_database, in_schema=in_schema)


@dataclass
class AccountRoleGrantPrivileges:
    global_privileges: Optional[list[GlobalPrivilege]] = list_field()
    account_object_privileges: Optional[list[AccountObjectPrivilege]] = list_field()
    schema_privileges: Optional[list[SchemaPrivilege]] = list_field()
    schema_object_privileges: Optional[list[SchemaObjectPrivilege]] = list_field()
    all_privileges: Optional[bool] = keyword("ALL PRIVILEGES")

    validations: ClassVar[tuple] = (
        ExactlyOneValueSet(
            "global_privileges",
            "account_object_privileges",
            "schema_privileges",
            "schema_object_privileges",
            "all_privileges",
        ),
    )


@dataclass
class DatabaseRoleGrantPrivileges:
    database_privileges: Optional[list[AccountObjectPrivilege]] = list_field()
    schema_privileges: Optional[list[SchemaPrivilege]] = list_field()
    schema_object_privileges: Optional[list[SchemaObjectPrivilege]] = list_field()
    all_privileges: Optional[bool] = keyword("ALL PRIVILEGES")

    validations: ClassVar[tuple] = (
        ExactlyOneValueSet("database_privileges", "schema_privileges", "schema_object_privileges", "all_privileges"),
    )


@dataclass
class GrantOnAccountObject:
    user: Optional[AccountObjectIdentifier] = identifier("USER")
    resource_monitor: Optional[AccountObjectIdentifier] = identifier("RESOURCE MONITOR")
    warehouse: Optional[AccountObjectIdentifier] = identifier("WAREHOUSE")
    database: Optional[AccountObjectIdentifier] = identifier("DATABASE")
    integration: Optional[AccountObjectIdentifier] = identifier("INTEGRATION")
    failover_group: Optional[AccountObjectIdentifier] = identifier("FAILOVER GROUP")
    replication_group: Optional[AccountObjectIdentifier] = identifier("REPLICATION GROUP")

    validations: ClassVar[tuple] = (
        ExactlyOneValueSet(
            "user",
            "resource_monitor",
            "warehouse",
            "database",
            "integration",
            "failover_group",
            "replication_group",
        ),
        ValidIdentifierIfSet("user"),
        ValidIdentifierIfSet("resource_monitor"),
        ValidIdentifierIfSet("warehouse"),
        ValidIdentifierIfSet("database"),
        ValidIdentifierIfSet("integration"),
        ValidIdentifierIfSet("failover_group"),
        ValidIdentifierIfSet("replication_group"),
    )


@dataclass
class GrantOnSchema:
    schema: Optional[DatabaseObjectIdentifier] = identifier("SCHEMA")
    all_schemas_in_database: Optional[AccountObjectIdentifier] = identifier("ALL SCHEMAS IN DATABASE")
    future_schemas_in_database: Optional[AccountObjectIdentifier] = identifier("FUTURE SCHEMAS IN DATABASE")

    validations: ClassVar[tuple] = (
        ExactlyOneValueSet("schema", "all_schemas_in_database", "future_schemas_in_database"),
        ValidIdentifierIfSet("schema"),
        ValidIdentifierIfSet("all_schemas_in_database"),
        ValidIdentifierIfSet("future_schemas_in_database"),
    )


@dataclass
class GrantOnSchemaObject:
    schema_object: Optional[GrantObject] = embedded()
    all: Optional[GrantOnSchemaObjectIn] = keyword("ALL")
    future: Optional[GrantOnSchemaObjectIn] = keyword("FUTURE")

    validations: ClassVar[tuple] = (ExactlyOneValueSet("schema_object", "all", "future"),)


@dataclass
class AccountRoleGrantOn:
    account: Optional[bool] = keyword("ACCOUNT")
    account_object: Optional[GrantOnAccountObject] = embedded()
    schema: Optional[GrantOnSchema] = embedded()
    schema_object: Optional[GrantOnSchemaObject] = embedded()

    validations: ClassVar[tuple] = (ExactlyOneValueSet("account", "account_object", "schema", "schema_object"),)


@dataclass
class DatabaseRoleGrantOn:
    database: Optional[AccountObjectIdentifier] = identifier("DATABASE")
    schema: Optional[GrantOnSchema] = embedded()
    schema_object: Optional[GrantOnSchemaObject] = embedded()

    validations: ClassVar[tuple] = (
        ExactlyOneValueSet("database", "schema", "schema_object"),
        ValidIdentifierIfSet("database"),
    )


@dataclass
class GrantPrivilegesToAccountRoleOptions:
    grant: bool = static("GRANT")
    privileges: Optional[AccountRoleGrantPrivileges] = embedded()
    on: Optional[AccountRoleGrantOn] = keyword("ON")
    account_role: Optional[AccountObjectIdentifier] = identifier("TO ROLE")
    with_grant_option: Optional[bool] = keyword("WITH GRANT OPTION")

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet("privileges"),
        AtLeastOneValueSet("on"),
        ValidIdentifier("account_role"),
    )


@dataclass
class RevokePrivilegesFromAccountRoleOptions:
    revoke: bool = static("REVOKE")
    grant_option_for: Optional[bool] = keyword("GRANT OPTION FOR")
    privileges: Optional[AccountRoleGrantPrivileges] = embedded()
    on: Optional[AccountRoleGrantOn] = keyword("ON")
    account_role: Optional[AccountObjectIdentifier] = identifier("FROM ROLE")
    restrict: Optional[bool] = keyword("RESTRICT")
    cascade: Optional[bool] = keyword("CASCADE")

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet("privileges"),
        AtLeastOneValueSet("on"),
        ValidIdentifier("account_role"),
        ConflictingFields("restrict", "cascade"),
    )


@dataclass
class GrantPrivilegesToDatabaseRoleOptions:
    grant: bool = static("GRANT")
    privileges: Optional[DatabaseRoleGrantPrivileges] = embedded()
    on: Optional[DatabaseRoleGrantOn] = keyword("ON")
    database_role: Optional[DatabaseObjectIdentifier] = identifier("TO DATABASE ROLE")
    with_grant_option: Optional[bool] = keyword("WITH GRANT OPTION")

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet("privileges"),
        AtLeastOneValueSet("on"),
        ValidIdentifier("database_role"),
    )


@dataclass
class RevokePrivilegesFromDatabaseRoleOptions:
    revoke: bool = static("REVOKE")
    grant_option_for: Optional[bool] = keyword("GRANT OPTION FOR")
    privileges: Optional[DatabaseRoleGrantPrivileges] = embedded()
    on: Optional[DatabaseRoleGrantOn] = keyword("ON")
    database_role: Optional[DatabaseObjectIdentifier] = identifier("FROM DATABASE ROLE")
    restrict: Optional[bool] = keyword("RESTRICT")
    cascade: Optional[bool] = keyword("CASCADE")

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet("privileges"),
        AtLeastOneValueSet("on"),
        ValidIdentifier("database_role"),
        ConflictingFields("restrict", "cascade"),
    )


@dataclass
class OwnershipGrantOn:
    object: Optional[GrantObject] = embedded()
    all: Optional[GrantOnSchemaObjectIn] = keyword("ALL")
    future: Optional[GrantOnSchemaObjectIn] = keyword("FUTURE")

    validations: ClassVar[tuple] = (ExactlyOneValueSet("object", "all", "future"),)


@dataclass
class OwnershipGrantTo:
    database_role_name: Optional[DatabaseObjectIdentifier] = identifier("DATABASE ROLE")
    account_role_name: Optional[AccountObjectIdentifier] = identifier("ROLE")

    validations: ClassVar[tuple] = (
        ExactlyOneValueSet("database_role_name", "account_role_name"),
        ValidIdentifierIfSet("database_role_name"),
        ValidIdentifierIfSet("account_role_name"),
    )


@dataclass
class OwnershipCurrentGrants:
    """REVOKE CURRENT GRANTS or COPY CURRENT GRANTS"""

    outbound_privileges: Optional[Union[OwnershipCurrentGrantsOutboundPrivileges, str]] = keyword()
    current_grants: bool = static("CURRENT GRANTS")

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet("outbound_privileges"),
        ValidEnumValue("outbound_privileges", OwnershipCurrentGrantsOutboundPrivileges),
    )


@dataclass
class GrantOwnershipOptions:
    grant_ownership: bool = static("GRANT OWNERSHIP")
    on: Optional[OwnershipGrantOn] = keyword("ON")
    to: Optional[OwnershipGrantTo] = keyword("TO")
    current_grants: Optional[OwnershipCurrentGrants] = embedded()

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet("on"),
        AtLeastOneValueSet("to"),
    )


@dataclass
class ShowGrantsOn:
    account: Optional[bool] = keyword("ACCOUNT")
    object: Optional[GrantObject] = embedded()

    validations: ClassVar[tuple] = (ExactlyOneValueSet("account", "object"),)


@dataclass
class ShowGrantsTo:
    role: Optional[AccountObjectIdentifier] = identifier("ROLE")
    user: Optional[AccountObjectIdentifier] = identifier("USER")
    share: Optional[AccountObjectIdentifier] = identifier("SHARE")
    database_role: Optional[DatabaseObjectIdentifier] = identifier("DATABASE ROLE")

    validations: ClassVar[tuple] = (
        ExactlyOneValueSet("role", "user", "share", "database_role"),
        ValidIdentifierIfSet("role"),
        ValidIdentifierIfSet("user"),
        ValidIdentifierIfSet("share"),
        ValidIdentifierIfSet("database_role"),
    )


@dataclass
class ShowGrantsOf:
    role: Optional[AccountObjectIdentifier] = identifier("ROLE")
    share: Optional[AccountObjectIdentifier] = identifier("SHARE")

    validations: ClassVar[tuple] = (
        ExactlyOneValueSet("role", "share"),
        ValidIdentifierIfSet("role"),
        ValidIdentifierIfSet("share"),
    )


@dataclass
class ShowGrantsIn:
    schema: Optional[DatabaseObjectIdentifier] = identifier("SCHEMA")
    database: Optional[AccountObjectIdentifier] = identifier("DATABASE")

    validations: ClassVar[tuple] = (
        ExactlyOneValueSet("schema", "database"),
        ValidIdentifierIfSet("schema"),
        ValidIdentifierIfSet("database"),
    )


@dataclass
class ShowGrantOptions:
    show: bool = static("SHOW")
    future: Optional[bool] = keyword("FUTURE")
    grants: bool = static("GRANTS")
    on: Optional[ShowGrantsOn] = keyword("ON")
    to: Optional[ShowGrantsTo] = keyword("TO")
    of: Optional[ShowGrantsOf] = keyword("OF")
    in_: Optional[ShowGrantsIn] = keyword("IN")

    validations: ClassVar[tuple] = (
        ConflictingFields("on", "to", "of", "in_"),
        RequiredIf("in_", lambda opts: bool(opts.future), "future is set"),
    )


@dataclass
class GrantPrivilegesToAccountRoleRequest(Request):
    privileges: AccountRoleGrantPrivileges
    on: AccountRoleGrantOn
    account_role: AccountObjectIdentifier
    with_grant_option: Optional[bool] = None

    options_class = GrantPrivilegesToAccountRoleOptions


@dataclass
class RevokePrivilegesFromAccountRoleRequest(Request):
    privileges: AccountRoleGrantPrivileges
    on: AccountRoleGrantOn
    account_role: AccountObjectIdentifier
    grant_option_for: Optional[bool] = None
    restrict: Optional[bool] = None
    cascade: Optional[bool] = None

    options_class = RevokePrivilegesFromAccountRoleOptions


@dataclass
class GrantPrivilegesToDatabaseRoleRequest(Request):
    privileges: DatabaseRoleGrantPrivileges
    on: DatabaseRoleGrantOn
    database_role: DatabaseObjectIdentifier
    with_grant_option: Optional[bool] = None

    options_class = GrantPrivilegesToDatabaseRoleOptions


@dataclass
class RevokePrivilegesFromDatabaseRoleRequest(Request):
    privileges: DatabaseRoleGrantPrivileges
    on: DatabaseRoleGrantOn
    database_role: DatabaseObjectIdentifier
    grant_option_for: Optional[bool] = None
    restrict: Optional[bool] = None
    cascade: Optional[bool] = None

    options_class = RevokePrivilegesFromDatabaseRoleOptions


@dataclass
class GrantOwnershipRequest(Request):
    on: OwnershipGrantOn
    to: OwnershipGrantTo
    current_grants: Optional[Union[OwnershipCurrentGrantsOutboundPrivileges, str]] = None

    def to_opts(self) -> GrantOwnershipOptions:
        current_grants = None
        if self.current_grants is not None:
            current_grants = OwnershipCurrentGrants(self.current_grants)
        return GrantOwnershipOptions(on=self.on, to=self.to, current_grants=current_grants)


@dataclass
class ShowGrantRequest(Request):
    future: Optional[bool] = None
    on: Optional[ShowGrantsOn] = None
    to: Optional[ShowGrantsTo] = None
    of: Optional[ShowGrantsOf] = None
    in_: Optional[ShowGrantsIn] = None

    options_class = ShowGrantOptions


@dataclass
class Grant:
    created_on: str
    privilege: str
    granted_on: Optional[ObjectType]
    grant_on: Optional[ObjectType]
    name: Optional[Identifier]
    granted_to: Optional[ObjectType]
    grant_to: Optional[ObjectType]
    grantee_name: AccountObjectIdentifier
    grant_option: bool
    granted_by: Optional[AccountObjectIdentifier]

    def id(self) -> Optional[Identifier]:
        return self.name


def _object_type(value) -> Optional[ObjectType]:
    # granted_on is empty for future grants, grant_on is empty for current grants
    if not value:
        return None
    try:
        return ObjectType.from_row(value)
    except ValueError:
        logger.debug(f"Unknown object type in SHOW GRANTS: {value}")
        return None


def _grant_name(value) -> Optional[Identifier]:
    if not value:
        return None
    try:
        return parse_identifier(value)
    except ValueError:
        # Functions and procedures report their signature as part of the name
        return AccountObjectIdentifier(value.strip('"'))


def decode_grant(row: dict) -> Grant:
    row = normalize_row(row)
    granted_to = _object_type(row.get("granted_to"))
    grantee_name = to_string(row.get("grantee_name"))
    if granted_to == ObjectType.SHARE:
        # Shares are reported as <account locator>.<share name>
        grantee_name = grantee_name.split(".", 1)[-1]
    granted_by = to_string(row.get("granted_by"))
    return Grant(
        created_on=to_string(row.get("created_on")),
        privilege=to_string(row.get("privilege")),
        granted_on=_object_type(row.get("granted_on")),
        grant_on=_object_type(row.get("grant_on")),
        name=_grant_name(row.get("name")),
        granted_to=granted_to,
        grant_to=_object_type(row.get("grant_to")),
        grantee_name=AccountObjectIdentifier(grantee_name),
        grant_option=to_bool(row.get("grant_option")),
        granted_by=AccountObjectIdentifier(granted_by) if granted_by else None,
    )


class Grants(Collection):
    def grant_privileges_to_account_role(self, request: GrantPrivilegesToAccountRoleRequest) -> int:
        return self._exec(request)

    def revoke_privileges_from_account_role(self, request: RevokePrivilegesFromAccountRoleRequest) -> int:
        return self._exec(request)

    def grant_privileges_to_database_role(self, request: GrantPrivilegesToDatabaseRoleRequest) -> int:
        return self._exec(request)

    def revoke_privileges_from_database_role(self, request: RevokePrivilegesFromDatabaseRoleRequest) -> int:
        return self._exec(request)

    def grant_ownership(self, request: GrantOwnershipRequest) -> int:
        return self._exec(request)

    def show(self, request: Optional[ShowGrantRequest] = None) -> list[Grant]:
        return self._query(request or ShowGrantRequest(), decode_grant)
