import json

import pytest

from snowcraft.common import In, LimitFrom, Like
from snowcraft.enums import TaskState, WarehouseSize
from snowcraft.exceptions import ConflictingFieldsError, ExactlyOneOfError, JoinedError
from snowcraft.identifiers import AccountObjectIdentifier, SchemaObjectIdentifier
from snowcraft.objects.base import build_sql
from snowcraft.objects.tasks import (
    AlterTaskRequest,
    CloneTaskRequest,
    CreateTaskRequest,
    DescribeTaskRequest,
    DropTaskRequest,
    ExecuteTaskRequest,
    ShowTaskRequest,
    TaskSetRequest,
    TaskUnsetRequest,
    Tasks,
    decode_task,
    parse_predecessors,
)

TASK = SchemaObjectIdentifier("DB", "S", "T")
PARENT = SchemaObjectIdentifier("DB", "S", "P")
TAG = SchemaObjectIdentifier("DB", "S", "TAG")


def sql(request):
    return build_sql(request.to_opts())


class TestCreateTask:
    def test_create(self):
        request = CreateTaskRequest(TASK, "SELECT 1", warehouse=AccountObjectIdentifier("WH"), schedule="5 minute")
        assert sql(request) == 'CREATE TASK "DB"."S"."T" WAREHOUSE = "WH" SCHEDULE = \'5 minute\' AS SELECT 1'

    def test_serverless(self):
        request = CreateTaskRequest(TASK, "SELECT 1", user_task_managed_initial_warehouse_size=WarehouseSize.XSMALL)
        assert sql(request) == (
            "CREATE TASK \"DB\".\"S\".\"T\" USER_TASK_MANAGED_INITIAL_WAREHOUSE_SIZE = 'XSMALL' AS SELECT 1"
        )

    def test_all_clauses(self):
        request = CreateTaskRequest(
            TASK,
            "INSERT INTO t SELECT * FROM s",
            if_not_exists=True,
            warehouse=AccountObjectIdentifier("WH"),
            allow_overlapping_execution=False,
            session_parameters={"timezone": "UTC", "lock_timeout": 10},
            suspend_task_after_num_failures=3,
            comment="c",
            after=[PARENT],
            tags={TAG: "v"},
            when="SYSTEM$STREAM_HAS_DATA('ST')",
        )
        assert sql(request) == (
            'CREATE TASK IF NOT EXISTS "DB"."S"."T" WAREHOUSE = "WH" ALLOW_OVERLAPPING_EXECUTION = false '
            "TIMEZONE = 'UTC', LOCK_TIMEOUT = 10 SUSPEND_TASK_AFTER_NUM_FAILURES = 3 COMMENT = 'c' "
            'AFTER "DB"."S"."P" TAG ("DB"."S"."TAG" = \'v\') '
            "WHEN SYSTEM$STREAM_HAS_DATA('ST') AS INSERT INTO t SELECT * FROM s"
        )

    def test_both_warehouse_kinds(self):
        request = CreateTaskRequest(
            TASK,
            "SELECT 1",
            warehouse=AccountObjectIdentifier("WH"),
            user_task_managed_initial_warehouse_size=WarehouseSize.SMALL,
        )
        with pytest.raises(JoinedError) as excinfo:
            sql(request)
        assert excinfo.value.of_kind(ExactlyOneOfError)[0].struct_name == "TaskWarehouse"

    def test_or_replace_conflicts_with_if_not_exists(self):
        with pytest.raises(JoinedError) as excinfo:
            sql(CreateTaskRequest(TASK, "SELECT 1", or_replace=True, if_not_exists=True))
        assert excinfo.value.has(ConflictingFieldsError)


class TestCloneTask:
    def test_clone(self):
        request = CloneTaskRequest(
            SchemaObjectIdentifier("DB", "S", "T2"),
            SchemaObjectIdentifier("DB", "S", "T1"),
            or_replace=True,
            copy_grants=True,
        )
        assert sql(request) == 'CREATE OR REPLACE TASK "DB"."S"."T2" CLONE "DB"."S"."T1" COPY GRANTS'


class TestAlterTask:
    @pytest.mark.parametrize(
        "kwargs, expected",
        [
            (dict(resume=True), "RESUME"),
            (dict(suspend=True), "SUSPEND"),
            (dict(add_after=[PARENT]), 'ADD AFTER "DB"."S"."P"'),
            (dict(remove_after=[PARENT]), 'REMOVE AFTER "DB"."S"."P"'),
            (dict(set=TaskSetRequest(schedule="1 minute")), "SET SCHEDULE = '1 minute'"),
            (
                dict(set=TaskSetRequest(comment="c", session_parameters={"timezone": "UTC"})),
                "SET COMMENT = 'c' TIMEZONE = 'UTC'",
            ),
            (
                dict(unset=TaskUnsetRequest(comment=True, session_parameters=["timezone", "lock_timeout"])),
                "UNSET COMMENT, TIMEZONE, LOCK_TIMEOUT",
            ),
            (dict(unset_tags=[TAG]), 'UNSET TAG "DB"."S"."TAG"'),
            (dict(modify_as="SELECT 2"), "MODIFY AS SELECT 2"),
            (dict(modify_when="true"), "MODIFY WHEN true"),
        ],
    )
    def test_actions(self, kwargs, expected):
        assert sql(AlterTaskRequest(TASK, **kwargs)) == 'ALTER TASK "DB"."S"."T" ' + expected

    def test_resume_and_suspend(self):
        with pytest.raises(JoinedError):
            sql(AlterTaskRequest(TASK, resume=True, suspend=True))

    def test_set_conflicting_warehouses(self):
        request = AlterTaskRequest(
            TASK,
            set=TaskSetRequest(
                warehouse=AccountObjectIdentifier("WH"),
                user_task_managed_initial_warehouse_size=WarehouseSize.SMALL,
            ),
        )
        with pytest.raises(JoinedError) as excinfo:
            sql(request)
        assert excinfo.value.has(ConflictingFieldsError)


class TestDropShowDescribeExecute:
    def test_drop(self):
        assert sql(DropTaskRequest(TASK)) == 'DROP TASK "DB"."S"."T"'

    def test_show(self):
        request = ShowTaskRequest(
            terse=True,
            like=Like("T%"),
            in_=In(database=AccountObjectIdentifier("DB")),
            root_only=True,
            limit=LimitFrom(rows=10, from_="T"),
        )
        assert sql(request) == "SHOW TERSE TASKS LIKE 'T%' IN DATABASE \"DB\" ROOT ONLY LIMIT 10 FROM 'T'"

    def test_describe(self):
        assert sql(DescribeTaskRequest(TASK)) == 'DESCRIBE TASK "DB"."S"."T"'

    @pytest.mark.parametrize(
        "retry_last, expected",
        [(True, 'EXECUTE TASK "DB"."S"."T" RETRY LAST'), (None, 'EXECUTE TASK "DB"."S"."T"')],
    )
    def test_execute(self, retry_last, expected):
        assert sql(ExecuteTaskRequest(TASK, retry_last=retry_last)) == expected


class TestDecode:
    def test_parse_predecessors(self):
        value = json.dumps(['"DB"."S"."P"', "DB.S.Q"])
        assert parse_predecessors(value) == [PARENT, SchemaObjectIdentifier("DB", "S", "Q")]
        assert parse_predecessors("[]") == []
        assert parse_predecessors(None) == []

    def test_decode_task(self):
        task = decode_task(
            {
                "created_on": "2024-01-01",
                "name": "T",
                "id": "01b2",
                "database_name": "DB",
                "schema_name": "S",
                "owner": "SYSADMIN",
                "comment": "",
                "warehouse": "null",
                "schedule": "5 MINUTE",
                "predecessors": json.dumps(['"DB"."S"."P"']),
                "state": "started",
                "definition": "SELECT 1",
                "condition": None,
                "allow_overlapping_execution": "false",
                "error_integration": "null",
                "owner_role_type": "ROLE",
            }
        )
        assert task.id() == TASK
        assert task.id_ == "01b2"
        assert task.warehouse is None
        assert task.predecessors == [PARENT]
        assert task.state == TaskState.STARTED
        assert task.is_started()
        assert task.allow_overlapping_execution is False


class TestTasks:
    def test_clone(self, client):
        Tasks(client).clone(CloneTaskRequest(SchemaObjectIdentifier("DB", "S", "T2"), TASK))
        client.exec.assert_called_once_with('CREATE TASK "DB"."S"."T2" CLONE "DB"."S"."T"')

    def test_execute(self, client):
        Tasks(client).execute(ExecuteTaskRequest(TASK, retry_last=True))
        client.exec.assert_called_once_with('EXECUTE TASK "DB"."S"."T" RETRY LAST')

    def test_show_by_id(self, client):
        client.query.return_value = [{"name": "T", "database_name": "DB", "schema_name": "S", "state": "suspended"}]
        task = Tasks(client).show_by_id(TASK)
        client.query.assert_called_once_with("SHOW TASKS LIKE 'T' IN SCHEMA \"DB\".\"S\"")
        assert not task.is_started()
