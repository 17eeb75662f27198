from enum import Enum

from inflection import pluralize


class ParseableEnum(Enum):
    """Enum that accepts any casing on lookup, eg. WarehouseSize("xsmall")."""

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            normalized = value.upper().strip()
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    def __str__(self):
        return str(self.value)


class ObjectType(ParseableEnum):
    ACCOUNT = "ACCOUNT"
    ALERT = "ALERT"
    API_INTEGRATION = "API INTEGRATION"
    DATABASE = "DATABASE"
    DATABASE_ROLE = "DATABASE ROLE"
    DYNAMIC_TABLE = "DYNAMIC TABLE"
    EXTERNAL_TABLE = "EXTERNAL TABLE"
    FILE_FORMAT = "FILE FORMAT"
    FUNCTION = "FUNCTION"
    INTEGRATION = "INTEGRATION"
    MASKING_POLICY = "MASKING POLICY"
    MATERIALIZED_VIEW = "MATERIALIZED VIEW"
    NETWORK_POLICY = "NETWORK POLICY"
    PASSWORD_POLICY = "PASSWORD POLICY"
    PIPE = "PIPE"
    PROCEDURE = "PROCEDURE"
    RESOURCE_MONITOR = "RESOURCE MONITOR"
    ROLE = "ROLE"
    ROW_ACCESS_POLICY = "ROW ACCESS POLICY"
    SCHEMA = "SCHEMA"
    SEQUENCE = "SEQUENCE"
    SESSION_POLICY = "SESSION POLICY"
    SHARE = "SHARE"
    STAGE = "STAGE"
    STREAM = "STREAM"
    TABLE = "TABLE"
    TAG = "TAG"
    TASK = "TASK"
    USER = "USER"
    VIEW = "VIEW"
    WAREHOUSE = "WAREHOUSE"

    def plural(self) -> str:
        """
        MASKING POLICY -> MASKING POLICIES, as used by GRANT ... ON ALL <plural> IN SCHEMA
        """
        return pluralize(self.value.lower()).upper()

    @classmethod
    def from_row(cls, value: str) -> "ObjectType":
        """SHOW GRANTS reports types with underscores, eg. MASKING_POLICY."""
        return cls(value.replace("_", " "))


class WarehouseType(ParseableEnum):
    STANDARD = "STANDARD"
    SNOWPARK_OPTIMIZED = "SNOWPARK-OPTIMIZED"


_NUMBERED_SIZES = {
    "2XLARGE": "XXLARGE",
    "3XLARGE": "XXXLARGE",
    "4XLARGE": "X4LARGE",
    "5XLARGE": "X5LARGE",
    "6XLARGE": "X6LARGE",
}


class WarehouseSize(ParseableEnum):
    XSMALL = "XSMALL"
    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"
    XLARGE = "XLARGE"
    XXLARGE = "XXLARGE"
    XXXLARGE = "XXXLARGE"
    X4LARGE = "X4LARGE"
    X5LARGE = "X5LARGE"
    X6LARGE = "X6LARGE"

    @classmethod
    def _missing_(cls, value):
        # SHOW WAREHOUSES reports sizes as "X-Small", "2X-Large", ...
        if isinstance(value, str):
            normalized = value.upper().replace("-", "").replace(" ", "")
            normalized = _NUMBERED_SIZES.get(normalized, normalized)
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class ScalingPolicy(ParseableEnum):
    STANDARD = "STANDARD"
    ECONOMY = "ECONOMY"


class GlobalPrivilege(ParseableEnum):
    CREATE_ACCOUNT = "CREATE ACCOUNT"
    CREATE_DATA_EXCHANGE_LISTING = "CREATE DATA EXCHANGE LISTING"
    CREATE_DATABASE = "CREATE DATABASE"
    CREATE_FAILOVER_GROUP = "CREATE FAILOVER GROUP"
    CREATE_INTEGRATION = "CREATE INTEGRATION"
    CREATE_NETWORK_POLICY = "CREATE NETWORK POLICY"
    CREATE_EXTERNAL_VOLUME = "CREATE EXTERNAL VOLUME"
    CREATE_REPLICATION_GROUP = "CREATE REPLICATION GROUP"
    CREATE_ROLE = "CREATE ROLE"
    CREATE_SHARE = "CREATE SHARE"
    CREATE_USER = "CREATE USER"
    CREATE_WAREHOUSE = "CREATE WAREHOUSE"
    APPLY_MASKING_POLICY = "APPLY MASKING POLICY"
    APPLY_PASSWORD_POLICY = "APPLY PASSWORD POLICY"
    APPLY_ROW_ACCESS_POLICY = "APPLY ROW ACCESS POLICY"
    APPLY_SESSION_POLICY = "APPLY SESSION POLICY"
    APPLY_TAG = "APPLY TAG"
    ATTACH_POLICY = "ATTACH POLICY"
    AUDIT = "AUDIT"
    EXECUTE_ALERT = "EXECUTE ALERT"
    EXECUTE_TASK = "EXECUTE TASK"
    IMPORT_SHARE = "IMPORT SHARE"
    MANAGE_GRANTS = "MANAGE GRANTS"
    MANAGE_WAREHOUSES = "MANAGE WAREHOUSES"
    MODIFY_LOG_LEVEL = "MODIFY LOG LEVEL"
    MODIFY_TRACE_LEVEL = "MODIFY TRACE LEVEL"
    MODIFY_SESSION_LOG_LEVEL = "MODIFY SESSION LOG LEVEL"
    MODIFY_SESSION_TRACE_LEVEL = "MODIFY SESSION TRACE LEVEL"
    MONITOR_EXECUTION = "MONITOR EXECUTION"
    MONITOR_USAGE = "MONITOR USAGE"
    OVERRIDE_SHARE_RESTRICTIONS = "OVERRIDE SHARE RESTRICTIONS"
    RESOLVE_ALL = "RESOLVE ALL"


class AccountObjectPrivilege(ParseableEnum):
    CREATE_DATABASE_ROLE = "CREATE DATABASE ROLE"
    CREATE_SCHEMA = "CREATE SCHEMA"
    IMPORTED_PRIVILEGES = "IMPORTED PRIVILEGES"
    MODIFY = "MODIFY"
    MONITOR = "MONITOR"
    USAGE = "USAGE"
    FAILOVER = "FAILOVER"
    USE_ANY_ROLE = "USE_ANY_ROLE"
    REPLICATE = "REPLICATE"
    OPERATE = "OPERATE"


class SchemaPrivilege(ParseableEnum):
    ADD_SEARCH_OPTIMIZATION = "ADD SEARCH OPTIMIZATION"
    APPLYBUDGET = "APPLYBUDGET"
    CREATE_ALERT = "CREATE ALERT"
    CREATE_DYNAMIC_TABLE = "CREATE DYNAMIC TABLE"
    CREATE_EXTERNAL_TABLE = "CREATE EXTERNAL TABLE"
    CREATE_FILE_FORMAT = "CREATE FILE FORMAT"
    CREATE_FUNCTION = "CREATE FUNCTION"
    CREATE_ICEBERG_TABLE = "CREATE ICEBERG TABLE"
    CREATE_MATERIALIZED_VIEW = "CREATE MATERIALIZED VIEW"
    CREATE_PIPE = "CREATE PIPE"
    CREATE_PROCEDURE = "CREATE PROCEDURE"
    CREATE_MASKING_POLICY = "CREATE MASKING POLICY"
    CREATE_PASSWORD_POLICY = "CREATE PASSWORD POLICY"
    CREATE_ROW_ACCESS_POLICY = "CREATE ROW ACCESS POLICY"
    CREATE_SESSION_POLICY = "CREATE SESSION POLICY"
    CREATE_SECRET = "CREATE SECRET"
    CREATE_SEQUENCE = "CREATE SEQUENCE"
    CREATE_STAGE = "CREATE STAGE"
    CREATE_STREAM = "CREATE STREAM"
    CREATE_TAG = "CREATE TAG"
    CREATE_TABLE = "CREATE TABLE"
    CREATE_TASK = "CREATE TASK"
    CREATE_VIEW = "CREATE VIEW"
    MODIFY = "MODIFY"
    MONITOR = "MONITOR"
    USAGE = "USAGE"


class SchemaObjectPrivilege(ParseableEnum):
    OWNERSHIP = "OWNERSHIP"
    OPERATE = "OPERATE"
    SELECT = "SELECT"
    INSERT = "INSERT"
    USAGE = "USAGE"
    APPLYBUDGET = "APPLYBUDGET"
    MONITOR = "MONITOR"
    APPLY = "APPLY"
    READ = "READ"
    WRITE = "WRITE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    TRUNCATE = "TRUNCATE"
    REFERENCES = "REFERENCES"


class OwnershipCurrentGrantsOutboundPrivileges(ParseableEnum):
    REVOKE = "REVOKE"
    COPY = "COPY"


class AlertAction(ParseableEnum):
    RESUME = "RESUME"
    SUSPEND = "SUSPEND"


class AlertState(ParseableEnum):
    STARTED = "STARTED"
    SUSPENDED = "SUSPENDED"


class TaskState(ParseableEnum):
    STARTED = "STARTED"
    SUSPENDED = "SUSPENDED"


class StreamMode(ParseableEnum):
    DEFAULT = "DEFAULT"
    APPEND_ONLY = "APPEND_ONLY"
    INSERT_ONLY = "INSERT_ONLY"


class StreamSourceType(ParseableEnum):
    TABLE = "TABLE"
    EXTERNAL_TABLE = "EXTERNAL TABLE"
    VIEW = "VIEW"
    STAGE = "STAGE"


class ResourceMonitorLevel(ParseableEnum):
    ACCOUNT = "ACCOUNT"
    WAREHOUSE = "WAREHOUSE"


class ResourceMonitorFrequency(ParseableEnum):
    MONTHLY = "MONTHLY"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    YEARLY = "YEARLY"
    NEVER = "NEVER"


class TriggerAction(ParseableEnum):
    SUSPEND = "SUSPEND"
    SUSPEND_IMMEDIATE = "SUSPEND_IMMEDIATE"
    NOTIFY = "NOTIFY"


class ApiIntegrationAwsApiProviderType(ParseableEnum):
    AWS_API_GATEWAY = "aws_api_gateway"
    AWS_PRIVATE_API_GATEWAY = "aws_private_api_gateway"
    AWS_GOV_API_GATEWAY = "aws_gov_api_gateway"
    AWS_GOV_PRIVATE_API_GATEWAY = "aws_gov_private_api_gateway"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            normalized = value.lower().strip()
            for member in cls:
                if member.value == normalized:
                    return member
        return None
