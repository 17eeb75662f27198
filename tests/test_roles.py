import pytest

from snowcraft.common import Like
from snowcraft.exceptions import ConflictingFieldsError, ExactlyOneOfError, JoinedError
from snowcraft.identifiers import AccountObjectIdentifier, SchemaObjectIdentifier
from snowcraft.objects.base import build_sql
from snowcraft.objects.roles import (
    AlterRoleRequest,
    CreateRoleRequest,
    DropRoleRequest,
    GrantRoleRequest,
    RevokeRoleRequest,
    Roles,
    ShowRoleRequest,
    decode_role,
)

ROLE = AccountObjectIdentifier("ANALYST")


def sql(request):
    return build_sql(request.to_opts())


class TestRoleDDL:
    def test_create(self):
        request = CreateRoleRequest(ROLE, if_not_exists=True, comment="analysts")
        assert sql(request) == "CREATE ROLE IF NOT EXISTS \"ANALYST\" COMMENT = 'analysts'"

    def test_create_conflict(self):
        with pytest.raises(JoinedError) as excinfo:
            sql(CreateRoleRequest(ROLE, or_replace=True, if_not_exists=True))
        assert excinfo.value.has(ConflictingFieldsError)

    @pytest.mark.parametrize(
        "kwargs, expected",
        [
            (dict(rename_to=AccountObjectIdentifier("READER")), 'RENAME TO "READER"'),
            (dict(set_comment="c"), "SET COMMENT = 'c'"),
            (dict(unset_comment=True), "UNSET COMMENT"),
            (dict(set_tags={SchemaObjectIdentifier("DB", "S", "TAG"): "v"}), "SET TAG \"DB\".\"S\".\"TAG\" = 'v'"),
        ],
    )
    def test_alter(self, kwargs, expected):
        assert sql(AlterRoleRequest(ROLE, **kwargs)) == 'ALTER ROLE "ANALYST" ' + expected

    def test_alter_two_actions(self):
        with pytest.raises(JoinedError) as excinfo:
            sql(AlterRoleRequest(ROLE, set_comment="c", unset_comment=True))
        assert excinfo.value.has(ExactlyOneOfError)

    def test_drop(self):
        assert sql(DropRoleRequest(ROLE, if_exists=True)) == 'DROP ROLE IF EXISTS "ANALYST"'

    def test_show(self):
        assert sql(ShowRoleRequest(like=Like("AN%"))) == "SHOW ROLES LIKE 'AN%'"


class TestRoleGrants:
    def test_grant_to_role(self):
        request = GrantRoleRequest(ROLE, role=AccountObjectIdentifier("SYSADMIN"))
        assert sql(request) == 'GRANT ROLE "ANALYST" TO ROLE "SYSADMIN"'

    def test_revoke_from_user(self):
        request = RevokeRoleRequest(AccountObjectIdentifier("A"), user=AccountObjectIdentifier("U"))
        assert sql(request) == 'REVOKE ROLE "A" FROM USER "U"'

    @pytest.mark.parametrize(
        "kwargs",
        [dict(), dict(role=AccountObjectIdentifier("R"), user=AccountObjectIdentifier("U"))],
    )
    def test_grantee_must_be_one(self, kwargs):
        with pytest.raises(JoinedError) as excinfo:
            sql(GrantRoleRequest(ROLE, **kwargs))
        assert excinfo.value.of_kind(ExactlyOneOfError)[0].struct_name == "RoleGrantee"


class TestRoles:
    def test_decode(self):
        role = decode_role(
            {
                "created_on": "2024-01-01",
                "name": "ANALYST",
                "is_default": "N",
                "is_current": "N",
                "is_inherited": "Y",
                "assigned_to_users": "2",
                "granted_to_roles": 1,
                "granted_roles": "0",
                "owner": "SECURITYADMIN",
                "comment": "",
            }
        )
        assert role.id() == ROLE
        assert role.is_inherited is True
        assert role.assigned_to_users == 2
        assert role.granted_to_roles == 1

    def test_grant(self, client):
        Roles(client).grant(GrantRoleRequest(ROLE, role=AccountObjectIdentifier("SYSADMIN")))
        client.exec.assert_called_once_with('GRANT ROLE "ANALYST" TO ROLE "SYSADMIN"')

    def test_show_by_id(self, client):
        client.query.return_value = [{"name": "ANALYST_2"}, {"name": "ANALYST"}]
        assert Roles(client).show_by_id(ROLE).name == "ANALYST"
        client.query.assert_called_once_with("SHOW ROLES LIKE 'ANALYST'")
