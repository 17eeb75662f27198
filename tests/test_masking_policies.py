import pytest

from snowcraft.common import In, Like
from snowcraft.exceptions import AtLeastOneOfError, ExactlyOneOfError, JoinedError
from snowcraft.identifiers import AccountObjectIdentifier, SchemaObjectIdentifier
from snowcraft.objects.base import build_sql
from snowcraft.objects.masking_policies import (
    AlterMaskingPolicyRequest,
    CreateMaskingPolicyRequest,
    DescribeMaskingPolicyRequest,
    DropMaskingPolicyRequest,
    MaskingPolicies,
    MaskingPolicySetRequest,
    ShowMaskingPolicyRequest,
    decode_masking_policy,
    decode_masking_policy_details,
)

POLICY = SchemaObjectIdentifier("DB", "S", "M")
BODY = "CASE WHEN CURRENT_ROLE() = 'ADMIN' THEN VAL ELSE '***' END"


def sql(request):
    return build_sql(request.to_opts())


class TestCreateMaskingPolicy:
    def test_create(self):
        request = CreateMaskingPolicyRequest(
            POLICY,
            signature={"VAL": "VARCHAR"},
            returns="VARCHAR",
            body=BODY,
            comment="x",
            exempt_other_policies=True,
        )
        assert sql(request) == (
            f"CREATE MASKING POLICY \"DB\".\"S\".\"M\" AS (\"VAL\" VARCHAR) RETURNS VARCHAR -> {BODY} "
            "COMMENT = 'x' EXEMPT_OTHER_POLICIES = true"
        )

    def test_signature_keeps_argument_order(self):
        request = CreateMaskingPolicyRequest(
            POLICY, signature={"VAL": "VARCHAR", "LEN": "NUMBER(38,0)"}, returns="VARCHAR", body="VAL", or_replace=True
        )
        assert sql(request) == (
            'CREATE OR REPLACE MASKING POLICY "DB"."S"."M" AS ("VAL" VARCHAR, "LEN" NUMBER(38,0)) '
            "RETURNS VARCHAR -> VAL"
        )

    @pytest.mark.parametrize(
        "kwargs",
        [
            dict(returns="VARCHAR", body="VAL"),
            dict(signature={"VAL": "VARCHAR"}, body="VAL"),
            dict(signature={"VAL": "VARCHAR"}, returns="VARCHAR"),
        ],
    )
    def test_required_parts(self, kwargs):
        with pytest.raises(JoinedError) as excinfo:
            sql(CreateMaskingPolicyRequest(POLICY, **kwargs))
        assert excinfo.value.has(AtLeastOneOfError)


class TestAlterMaskingPolicy:
    @pytest.mark.parametrize(
        "kwargs, expected",
        [
            (dict(set=MaskingPolicySetRequest(body="VAL")), "SET BODY -> VAL"),
            (dict(set=MaskingPolicySetRequest(comment="c")), "SET COMMENT = 'c'"),
            (dict(unset_comment=True), "UNSET COMMENT"),
            (dict(rename_to=SchemaObjectIdentifier("DB", "S", "M2")), 'RENAME TO "DB"."S"."M2"'),
            (dict(unset_tags=[SchemaObjectIdentifier("DB", "S", "T")]), 'UNSET TAG "DB"."S"."T"'),
        ],
    )
    def test_actions(self, kwargs, expected):
        assert sql(AlterMaskingPolicyRequest(POLICY, **kwargs)) == 'ALTER MASKING POLICY "DB"."S"."M" ' + expected

    def test_set_body_and_comment_together(self):
        with pytest.raises(JoinedError) as excinfo:
            sql(AlterMaskingPolicyRequest(POLICY, set=MaskingPolicySetRequest(body="VAL", comment="c")))
        assert excinfo.value.of_kind(ExactlyOneOfError)[0].struct_name == "MaskingPolicySet"

    def test_unset_comment_false_is_no_action(self):
        with pytest.raises(JoinedError):
            sql(AlterMaskingPolicyRequest(POLICY, unset_comment=False))


class TestDropShowDescribe:
    def test_drop(self):
        assert sql(DropMaskingPolicyRequest(POLICY)) == 'DROP MASKING POLICY "DB"."S"."M"'

    def test_show(self):
        request = ShowMaskingPolicyRequest(like=Like("M%"), in_=In(database=AccountObjectIdentifier("DB")), limit=5)
        assert sql(request) == "SHOW MASKING POLICIES LIKE 'M%' IN DATABASE \"DB\" LIMIT 5"

    def test_describe(self):
        assert sql(DescribeMaskingPolicyRequest(POLICY)) == 'DESCRIBE MASKING POLICY "DB"."S"."M"'


class TestDecode:
    @pytest.mark.parametrize(
        "options, expected",
        [
            ('{"EXEMPT_OTHER_POLICIES": true}', True),
            ("{}", False),
            ("", False),
            (None, False),
            ("not json", False),
            ("[1]", False),
        ],
    )
    def test_exempt_other_policies(self, options, expected):
        policy = decode_masking_policy(
            {"name": "M", "database_name": "DB", "schema_name": "S", "options": options, "comment": None}
        )
        assert policy.exempt_other_policies is expected
        assert policy.id() == POLICY

    def test_decode_details(self):
        details = decode_masking_policy_details(
            {"name": "M", "signature": "(VAL VARCHAR)", "return_type": "VARCHAR(16777216)", "body": "VAL"}
        )
        assert details.signature == {"VAL": "VARCHAR"}
        assert details.return_type == "VARCHAR(16777216)"
        assert details.body == "VAL"


class TestMaskingPolicies:
    def test_create(self, client):
        MaskingPolicies(client).create(
            CreateMaskingPolicyRequest(POLICY, signature={"VAL": "VARCHAR"}, returns="VARCHAR", body="VAL")
        )
        client.exec.assert_called_once_with(
            'CREATE MASKING POLICY "DB"."S"."M" AS ("VAL" VARCHAR) RETURNS VARCHAR -> VAL'
        )

    def test_describe(self, client):
        client.query.return_value = [
            {"NAME": "M", "SIGNATURE": "(VAL VARCHAR)", "RETURN_TYPE": "VARCHAR", "BODY": "VAL"},
        ]
        assert MaskingPolicies(client).describe(POLICY).signature == {"VAL": "VARCHAR"}

    def test_show_by_id(self, client):
        MaskingPolicies(client).show_by_id(POLICY)
        client.query.assert_called_once_with("SHOW MASKING POLICIES LIKE 'M' IN SCHEMA \"DB\".\"S\"")
