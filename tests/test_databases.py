import pytest

from snowcraft.client import NOT_FOUND_CODES
from snowcraft.common import Like, TimeTravelRequest
from snowcraft.exceptions import ConflictingFieldsError, ExactlyOneOfError, JoinedError, OutOfRangeError
from snowcraft.identifiers import (
    AccountIdentifier,
    AccountObjectIdentifier,
    ExternalObjectIdentifier,
    SchemaObjectIdentifier,
)
from snowcraft.objects.base import build_sql
from snowcraft.objects.databases import (
    AlterDatabaseRequest,
    CloneDatabaseRequest,
    CreateDatabaseRequest,
    DatabaseSetRequest,
    DatabaseUnsetRequest,
    Databases,
    DescribeDatabaseRequest,
    DropDatabaseRequest,
    ShowDatabaseRequest,
    UndropDatabaseRequest,
    decode_database,
)

DATABASE = AccountObjectIdentifier("X")


def sql(request):
    return build_sql(request.to_opts())


class TestCreateDatabase:
    def test_create(self):
        request = CreateDatabaseRequest(DATABASE, transient=True, data_retention_time_in_days=1, comment="c")
        assert sql(request) == "CREATE TRANSIENT DATABASE \"X\" DATA_RETENTION_TIME_IN_DAYS = 1 COMMENT = 'c'"

    def test_from_share(self):
        share = ExternalObjectIdentifier(AccountIdentifier("ORG", "ACCT"), AccountObjectIdentifier("SHARE"))
        request = CreateDatabaseRequest(DATABASE, if_not_exists=True, from_share=share)
        assert sql(request) == 'CREATE DATABASE IF NOT EXISTS "X" FROM SHARE "ORG"."ACCT"."SHARE"'

    def test_with_tags(self):
        request = CreateDatabaseRequest(DATABASE, or_replace=True, tags={SchemaObjectIdentifier("DB", "S", "T"): "v"})
        assert sql(request) == "CREATE OR REPLACE DATABASE \"X\" TAG (\"DB\".\"S\".\"T\" = 'v')"

    @pytest.mark.parametrize("days, ok", [(0, True), (90, True), (91, False), (-1, False)])
    def test_retention_range(self, days, ok):
        request = CreateDatabaseRequest(DATABASE, data_retention_time_in_days=days)
        if ok:
            sql(request)
        else:
            with pytest.raises(JoinedError) as excinfo:
                sql(request)
            assert excinfo.value.has(OutOfRangeError)

    def test_or_replace_with_if_not_exists(self):
        with pytest.raises(JoinedError) as excinfo:
            sql(CreateDatabaseRequest(DATABASE, or_replace=True, if_not_exists=True))
        assert excinfo.value.has(ConflictingFieldsError)


class TestCloneDatabase:
    def test_clone(self):
        request = CloneDatabaseRequest(AccountObjectIdentifier("X2"), DATABASE)
        assert sql(request) == 'CREATE DATABASE "X2" CLONE "X"'

    def test_clone_at_offset(self):
        request = CloneDatabaseRequest(
            AccountObjectIdentifier("X2"), DATABASE, time_travel=TimeTravelRequest(at=True, offset="-3600")
        )
        assert sql(request) == 'CREATE DATABASE "X2" CLONE "X" AT (OFFSET => -3600)'


class TestAlterDatabase:
    @pytest.mark.parametrize(
        "kwargs, expected",
        [
            (dict(rename_to=AccountObjectIdentifier("Y")), 'RENAME TO "Y"'),
            (dict(swap_with=AccountObjectIdentifier("Y")), 'SWAP WITH "Y"'),
            (dict(set=DatabaseSetRequest(data_retention_time_in_days=7)), "SET DATA_RETENTION_TIME_IN_DAYS = 7"),
            (
                dict(unset=DatabaseUnsetRequest(data_retention_time_in_days=True, comment=True)),
                "UNSET DATA_RETENTION_TIME_IN_DAYS, COMMENT",
            ),
        ],
    )
    def test_actions(self, kwargs, expected):
        assert sql(AlterDatabaseRequest(DATABASE, **kwargs)) == 'ALTER DATABASE "X" ' + expected

    def test_set_retention_out_of_range(self):
        request = AlterDatabaseRequest(DATABASE, set=DatabaseSetRequest(data_retention_time_in_days=91))
        with pytest.raises(JoinedError) as excinfo:
            sql(request)
        assert excinfo.value.of_kind(OutOfRangeError)[0].struct_name == "DatabaseSet"

    def test_rename_and_swap(self):
        request = AlterDatabaseRequest(
            DATABASE, rename_to=AccountObjectIdentifier("Y"), swap_with=AccountObjectIdentifier("Z")
        )
        with pytest.raises(JoinedError) as excinfo:
            sql(request)
        assert excinfo.value.has(ExactlyOneOfError)


class TestDropUndropShowDescribe:
    @pytest.mark.parametrize(
        "kwargs, expected",
        [
            (dict(), 'DROP DATABASE "X"'),
            (dict(if_exists=True, cascade=True), 'DROP DATABASE IF EXISTS "X" CASCADE'),
            (dict(restrict=True), 'DROP DATABASE "X" RESTRICT'),
        ],
    )
    def test_drop(self, kwargs, expected):
        assert sql(DropDatabaseRequest(DATABASE, **kwargs)) == expected

    def test_drop_cascade_and_restrict(self):
        with pytest.raises(JoinedError) as excinfo:
            sql(DropDatabaseRequest(DATABASE, cascade=True, restrict=True))
        assert excinfo.value.has(ConflictingFieldsError)

    def test_undrop(self):
        assert sql(UndropDatabaseRequest(DATABASE)) == 'UNDROP DATABASE "X"'

    @pytest.mark.parametrize(
        "request_, expected",
        [
            (ShowDatabaseRequest(like=Like("x")), "SHOW DATABASES LIKE 'x'"),
            (ShowDatabaseRequest(terse=True, history=True), "SHOW TERSE DATABASES HISTORY"),
            (ShowDatabaseRequest(starts_with="X", limit=5), "SHOW DATABASES STARTS WITH 'X' LIMIT 5"),
        ],
    )
    def test_show(self, request_, expected):
        assert sql(request_) == expected

    def test_describe(self):
        assert sql(DescribeDatabaseRequest(DATABASE)) == 'DESCRIBE DATABASE "X"'


class TestDecode:
    def test_decode_database(self):
        database = decode_database(
            {
                "created_on": "2024-01-01",
                "name": "X",
                "is_default": "N",
                "is_current": "Y",
                "origin": "",
                "owner": "SYSADMIN",
                "comment": "null",
                "options": "TRANSIENT",
                "retention_time": "1",
                "kind": "STANDARD",
            }
        )
        assert database.id() == DATABASE
        assert database.is_current is True
        assert database.retention_time == 1
        assert database.comment is None
        assert database.is_transient()


class TestDatabases:
    def test_undrop(self, client):
        Databases(client).undrop(DATABASE)
        client.exec.assert_called_once_with('UNDROP DATABASE "X"')

    def test_describe(self, client):
        client.query.return_value = [
            {"created_on": "2024-01-01", "name": "PUBLIC", "kind": "SCHEMA"},
            {"created_on": "2024-01-01", "name": "INFORMATION_SCHEMA", "kind": "SCHEMA"},
        ]
        details = Databases(client).describe(DATABASE)
        client.query.assert_called_once_with('DESCRIBE DATABASE "X"', empty_response_codes=NOT_FOUND_CODES)
        assert [d.name for d in details] == ["PUBLIC", "INFORMATION_SCHEMA"]

    def test_show_by_id(self, client):
        client.query.return_value = [{"name": "X", "options": ""}]
        assert Databases(client).show_by_id(DATABASE).id() == DATABASE
