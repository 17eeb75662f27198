import pytest

from snowcraft.enums import (
    AccountObjectPrivilege,
    GlobalPrivilege,
    ObjectType,
    OwnershipCurrentGrantsOutboundPrivileges,
    SchemaObjectPrivilege,
    SchemaPrivilege,
)
from snowcraft.exceptions import (
    ConflictingFieldsError,
    ExactlyOneOfError,
    InvalidObjectIdentifierError,
    InvalidValueError,
    JoinedError,
    RequiredIfError,
)
from snowcraft.identifiers import AccountObjectIdentifier, DatabaseObjectIdentifier, SchemaObjectIdentifier
from snowcraft.objects.base import build_sql
from snowcraft.objects.grants import (
    AccountRoleGrantOn,
    AccountRoleGrantPrivileges,
    DatabaseRoleGrantOn,
    DatabaseRoleGrantPrivileges,
    GrantObject,
    GrantOnAccountObject,
    GrantOnSchema,
    GrantOnSchemaObject,
    GrantOwnershipRequest,
    GrantPrivilegesToAccountRoleRequest,
    GrantPrivilegesToDatabaseRoleRequest,
    Grants,
    OwnershipGrantOn,
    OwnershipGrantTo,
    RevokePrivilegesFromAccountRoleRequest,
    RevokePrivilegesFromDatabaseRoleRequest,
    ShowGrantRequest,
    ShowGrantsIn,
    ShowGrantsOf,
    ShowGrantsOn,
    ShowGrantsTo,
    decode_grant,
    schema_objects_in,
)

ROLE = AccountObjectIdentifier("R")
DATABASE = AccountObjectIdentifier("DB")
SCHEMA = DatabaseObjectIdentifier("DB", "S")
TABLE = SchemaObjectIdentifier("DB", "S", "T")
DATABASE_ROLE = DatabaseObjectIdentifier("DB", "DR")


def sql(request):
    return build_sql(request.to_opts())


class TestGrantToAccountRole:
    def test_future_tables(self):
        request = GrantPrivilegesToAccountRoleRequest(
            privileges=AccountRoleGrantPrivileges(schema_object_privileges=[SchemaObjectPrivilege.SELECT]),
            on=AccountRoleGrantOn(
                schema_object=GrantOnSchemaObject(future=schema_objects_in(ObjectType.TABLE, in_schema=SCHEMA)),
            ),
            account_role=AccountObjectIdentifier("ANALYST"),
        )
        assert sql(request) == 'GRANT SELECT ON FUTURE TABLES IN SCHEMA "DB"."S" TO ROLE "ANALYST"'

    @pytest.mark.parametrize(
        "privileges, on, expected",
        [
            (
                AccountRoleGrantPrivileges(global_privileges=[GlobalPrivilege.CREATE_WAREHOUSE]),
                AccountRoleGrantOn(account=True),
                'GRANT CREATE WAREHOUSE ON ACCOUNT TO ROLE "R"',
            ),
            (
                AccountRoleGrantPrivileges(account_object_privileges=[AccountObjectPrivilege.USAGE]),
                AccountRoleGrantOn(account_object=GrantOnAccountObject(warehouse=AccountObjectIdentifier("WH"))),
                'GRANT USAGE ON WAREHOUSE "WH" TO ROLE "R"',
            ),
            (
                AccountRoleGrantPrivileges(schema_privileges=[SchemaPrivilege.USAGE]),
                AccountRoleGrantOn(schema=GrantOnSchema(all_schemas_in_database=DATABASE)),
                'GRANT USAGE ON ALL SCHEMAS IN DATABASE "DB" TO ROLE "R"',
            ),
            (
                AccountRoleGrantPrivileges(
                    schema_object_privileges=[SchemaObjectPrivilege.SELECT, SchemaObjectPrivilege.INSERT]
                ),
                AccountRoleGrantOn(
                    schema_object=GrantOnSchemaObject(schema_object=GrantObject(ObjectType.TABLE, TABLE))
                ),
                'GRANT SELECT, INSERT ON TABLE "DB"."S"."T" TO ROLE "R"',
            ),
            (
                AccountRoleGrantPrivileges(all_privileges=True),
                AccountRoleGrantOn(
                    schema_object=GrantOnSchemaObject(
                        all=schema_objects_in(ObjectType.MASKING_POLICY, in_database=DATABASE)
                    )
                ),
                'GRANT ALL PRIVILEGES ON ALL MASKING POLICIES IN DATABASE "DB" TO ROLE "R"',
            ),
        ],
    )
    def test_grant(self, privileges, on, expected):
        assert sql(GrantPrivilegesToAccountRoleRequest(privileges, on, ROLE)) == expected

    def test_with_grant_option(self):
        request = GrantPrivilegesToAccountRoleRequest(
            AccountRoleGrantPrivileges(global_privileges=[GlobalPrivilege.CREATE_DATABASE]),
            AccountRoleGrantOn(account=True),
            ROLE,
            with_grant_option=True,
        )
        assert sql(request) == 'GRANT CREATE DATABASE ON ACCOUNT TO ROLE "R" WITH GRANT OPTION'

    def test_two_privilege_kinds(self):
        request = GrantPrivilegesToAccountRoleRequest(
            AccountRoleGrantPrivileges(
                global_privileges=[GlobalPrivilege.CREATE_DATABASE], all_privileges=True
            ),
            AccountRoleGrantOn(account=True),
            ROLE,
        )
        with pytest.raises(JoinedError) as excinfo:
            sql(request)
        assert excinfo.value.of_kind(ExactlyOneOfError)[0].struct_name == "AccountRoleGrantPrivileges"

    @pytest.mark.parametrize(
        "field",
        ["user", "resource_monitor", "warehouse", "database", "integration", "failover_group", "replication_group"],
    )
    def test_empty_account_object(self, field):
        on = AccountRoleGrantOn(account_object=GrantOnAccountObject(**{field: AccountObjectIdentifier("")}))
        request = GrantPrivilegesToAccountRoleRequest(AccountRoleGrantPrivileges(all_privileges=True), on, ROLE)
        with pytest.raises(JoinedError) as excinfo:
            sql(request)
        (invalid,) = excinfo.value.of_kind(InvalidObjectIdentifierError)
        assert (invalid.struct_name, invalid.field_name) == ("GrantOnAccountObject", field)

    def test_schema_objects_in_two_containers(self):
        request = GrantPrivilegesToAccountRoleRequest(
            AccountRoleGrantPrivileges(schema_object_privileges=[SchemaObjectPrivilege.SELECT]),
            AccountRoleGrantOn(
                schema_object=GrantOnSchemaObject(
                    all=schema_objects_in(ObjectType.TABLE, in_database=DATABASE, in_schema=SCHEMA)
                )
            ),
            ROLE,
        )
        with pytest.raises(JoinedError) as excinfo:
            sql(request)
        assert excinfo.value.of_kind(ExactlyOneOfError)[0].struct_name == "GrantOnSchemaObjectIn"

    def test_revoke(self):
        request = RevokePrivilegesFromAccountRoleRequest(
            AccountRoleGrantPrivileges(schema_object_privileges=[SchemaObjectPrivilege.SELECT]),
            AccountRoleGrantOn(
                schema_object=GrantOnSchemaObject(all=schema_objects_in(ObjectType.TABLE, in_database=DATABASE))
            ),
            ROLE,
            grant_option_for=True,
            cascade=True,
        )
        assert sql(request) == 'REVOKE GRANT OPTION FOR SELECT ON ALL TABLES IN DATABASE "DB" FROM ROLE "R" CASCADE'

    def test_revoke_restrict_and_cascade(self):
        request = RevokePrivilegesFromAccountRoleRequest(
            AccountRoleGrantPrivileges(all_privileges=True),
            AccountRoleGrantOn(account=True),
            ROLE,
            restrict=True,
            cascade=True,
        )
        with pytest.raises(JoinedError) as excinfo:
            sql(request)
        assert excinfo.value.has(ConflictingFieldsError)


class TestGrantToDatabaseRole:
    def test_grant_on_database(self):
        request = GrantPrivilegesToDatabaseRoleRequest(
            DatabaseRoleGrantPrivileges(database_privileges=[AccountObjectPrivilege.USAGE]),
            DatabaseRoleGrantOn(database=DATABASE),
            DATABASE_ROLE,
        )
        assert sql(request) == 'GRANT USAGE ON DATABASE "DB" TO DATABASE ROLE "DB"."DR"'

    def test_revoke_on_future_schemas(self):
        request = RevokePrivilegesFromDatabaseRoleRequest(
            DatabaseRoleGrantPrivileges(schema_privileges=[SchemaPrivilege.USAGE]),
            DatabaseRoleGrantOn(schema=GrantOnSchema(future_schemas_in_database=DATABASE)),
            DATABASE_ROLE,
            restrict=True,
        )
        assert sql(request) == (
            'REVOKE USAGE ON FUTURE SCHEMAS IN DATABASE "DB" FROM DATABASE ROLE "DB"."DR" RESTRICT'
        )

    def test_invalid_database_role(self):
        request = GrantPrivilegesToDatabaseRoleRequest(
            DatabaseRoleGrantPrivileges(all_privileges=True),
            DatabaseRoleGrantOn(database=DATABASE),
            DatabaseObjectIdentifier("", "DR"),
        )
        with pytest.raises(JoinedError):
            sql(request)


class TestGrantOwnership:
    @pytest.mark.parametrize(
        "current_grants, suffix",
        [
            (OwnershipCurrentGrantsOutboundPrivileges.COPY, " COPY CURRENT GRANTS"),
            ("REVOKE", " REVOKE CURRENT GRANTS"),
            (None, ""),
        ],
    )
    def test_ownership(self, current_grants, suffix):
        request = GrantOwnershipRequest(
            on=OwnershipGrantOn(object=GrantObject(ObjectType.TABLE, TABLE)),
            to=OwnershipGrantTo(account_role_name=ROLE),
            current_grants=current_grants,
        )
        assert sql(request) == 'GRANT OWNERSHIP ON TABLE "DB"."S"."T" TO ROLE "R"' + suffix

    def test_ownership_of_future_objects(self):
        request = GrantOwnershipRequest(
            on=OwnershipGrantOn(future=schema_objects_in(ObjectType.TABLE, in_schema=SCHEMA)),
            to=OwnershipGrantTo(database_role_name=DATABASE_ROLE),
        )
        assert sql(request) == 'GRANT OWNERSHIP ON FUTURE TABLES IN SCHEMA "DB"."S" TO DATABASE ROLE "DB"."DR"'

    def test_invalid_outbound_privileges(self):
        request = GrantOwnershipRequest(
            on=OwnershipGrantOn(object=GrantObject(ObjectType.TABLE, TABLE)),
            to=OwnershipGrantTo(account_role_name=ROLE),
            current_grants="MOVE",
        )
        with pytest.raises(JoinedError) as excinfo:
            sql(request)
        (invalid,) = excinfo.value.of_kind(InvalidValueError)
        assert invalid.allowed == ("REVOKE", "COPY")

    def test_two_grantees(self):
        request = GrantOwnershipRequest(
            on=OwnershipGrantOn(object=GrantObject(ObjectType.TABLE, TABLE)),
            to=OwnershipGrantTo(database_role_name=DATABASE_ROLE, account_role_name=ROLE),
        )
        with pytest.raises(JoinedError) as excinfo:
            sql(request)
        assert excinfo.value.has(ExactlyOneOfError)


class TestShowGrants:
    @pytest.mark.parametrize(
        "request_, expected",
        [
            (ShowGrantRequest(), "SHOW GRANTS"),
            (ShowGrantRequest(on=ShowGrantsOn(account=True)), "SHOW GRANTS ON ACCOUNT"),
            (
                ShowGrantRequest(on=ShowGrantsOn(object=GrantObject(ObjectType.TABLE, TABLE))),
                'SHOW GRANTS ON TABLE "DB"."S"."T"',
            ),
            (ShowGrantRequest(to=ShowGrantsTo(role=ROLE)), 'SHOW GRANTS TO ROLE "R"'),
            (ShowGrantRequest(to=ShowGrantsTo(database_role=DATABASE_ROLE)), 'SHOW GRANTS TO DATABASE ROLE "DB"."DR"'),
            (ShowGrantRequest(of=ShowGrantsOf(role=ROLE)), 'SHOW GRANTS OF ROLE "R"'),
            (ShowGrantRequest(future=True, in_=ShowGrantsIn(schema=SCHEMA)), 'SHOW FUTURE GRANTS IN SCHEMA "DB"."S"'),
        ],
    )
    def test_show(self, request_, expected):
        assert sql(request_) == expected

    def test_future_requires_in(self):
        with pytest.raises(JoinedError) as excinfo:
            sql(ShowGrantRequest(future=True))
        (required,) = excinfo.value.of_kind(RequiredIfError)
        assert required.field_name == "in_"

    @pytest.mark.parametrize(
        "request_, struct_name, field",
        [
            (ShowGrantRequest(to=ShowGrantsTo(role=AccountObjectIdentifier(""))), "ShowGrantsTo", "role"),
            (ShowGrantRequest(to=ShowGrantsTo(user=AccountObjectIdentifier(""))), "ShowGrantsTo", "user"),
            (ShowGrantRequest(to=ShowGrantsTo(share=AccountObjectIdentifier(""))), "ShowGrantsTo", "share"),
            (
                ShowGrantRequest(to=ShowGrantsTo(database_role=DatabaseObjectIdentifier("DB", ""))),
                "ShowGrantsTo",
                "database_role",
            ),
            (ShowGrantRequest(of=ShowGrantsOf(role=AccountObjectIdentifier(""))), "ShowGrantsOf", "role"),
            (ShowGrantRequest(of=ShowGrantsOf(share=AccountObjectIdentifier(""))), "ShowGrantsOf", "share"),
            (ShowGrantRequest(in_=ShowGrantsIn(schema=DatabaseObjectIdentifier("", "S"))), "ShowGrantsIn", "schema"),
            (ShowGrantRequest(in_=ShowGrantsIn(database=AccountObjectIdentifier(""))), "ShowGrantsIn", "database"),
        ],
    )
    def test_empty_identifiers(self, request_, struct_name, field):
        with pytest.raises(JoinedError) as excinfo:
            sql(request_)
        (invalid,) = excinfo.value.of_kind(InvalidObjectIdentifierError)
        assert (invalid.struct_name, invalid.field_name) == (struct_name, field)

    def test_on_and_to(self):
        with pytest.raises(JoinedError) as excinfo:
            sql(ShowGrantRequest(on=ShowGrantsOn(account=True), to=ShowGrantsTo(role=ROLE)))
        assert excinfo.value.has(ConflictingFieldsError)


class TestDecodeGrant:
    def test_decode(self):
        grant = decode_grant(
            {
                "created_on": "2024-01-01",
                "privilege": "SELECT",
                "granted_on": "TABLE",
                "name": "DB.S.T",
                "granted_to": "ROLE",
                "grantee_name": "R",
                "grant_option": "false",
                "granted_by": "SYSADMIN",
            }
        )
        assert grant.granted_on == ObjectType.TABLE
        assert grant.id() == TABLE
        assert grant.granted_to == ObjectType.ROLE
        assert grant.grantee_name == ROLE
        assert grant.grant_option is False
        assert grant.granted_by == AccountObjectIdentifier("SYSADMIN")

    def test_decode_future_grant(self):
        grant = decode_grant(
            {
                "privilege": "SELECT",
                "grant_on": "MASKING_POLICY",
                "name": "DB.S.<MASKING_POLICY>",
                "grant_to": "ROLE",
                "grantee_name": "R",
            }
        )
        assert grant.granted_on is None
        assert grant.grant_on == ObjectType.MASKING_POLICY
        assert grant.grant_to == ObjectType.ROLE
        assert grant.granted_by is None

    def test_decode_share_grantee(self):
        grant = decode_grant(
            {
                "privilege": "USAGE",
                "granted_on": "DATABASE",
                "name": "DB",
                "granted_to": "SHARE",
                "grantee_name": "AB12345.MYSHARE",
            }
        )
        assert grant.grantee_name == AccountObjectIdentifier("MYSHARE")

    def test_unknown_object_type(self):
        grant = decode_grant({"privilege": "USAGE", "granted_on": "NOT_A_TYPE", "grantee_name": "R"})
        assert grant.granted_on is None
        assert grant.name is None


class TestGrants:
    def test_grant_ownership(self, client):
        request = GrantOwnershipRequest(
            on=OwnershipGrantOn(object=GrantObject(ObjectType.TABLE, TABLE)),
            to=OwnershipGrantTo(account_role_name=ROLE),
            current_grants=OwnershipCurrentGrantsOutboundPrivileges.COPY,
        )
        Grants(client).grant_ownership(request)
        client.exec.assert_called_once_with('GRANT OWNERSHIP ON TABLE "DB"."S"."T" TO ROLE "R" COPY CURRENT GRANTS')

    def test_show(self, client):
        client.query.return_value = [
            {"privilege": "USAGE", "granted_on": "WAREHOUSE", "name": "WH", "grantee_name": "R"},
        ]
        grants = Grants(client).show(ShowGrantRequest(to=ShowGrantsTo(role=ROLE)))
        client.query.assert_called_once_with('SHOW GRANTS TO ROLE "R"')
        assert grants[0].id() == AccountObjectIdentifier("WH")
