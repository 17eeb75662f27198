from dataclasses import dataclass
from typing import ClassVar, Optional

from ..common import In, Like, in_container
from ..ddl import COMMA, SINGLE_QUOTES, identifier, keyword, list_field, parameter, static
from ..enums import ObjectType
from ..identifiers import SchemaObjectIdentifier
from ..requests import Request, copy_if_set, copy_to_options
from ..rows import normalize_row, optional_int, optional_string, route_properties, to_string
from ..validations import AtLeastOneValueSet, ExactlyOneValueSet, ValidIdentifier, ValidIdentifierIfSet, ValidRange
from .base import Collection, find_by_id

PASSWORD_POLICY_RANGES = (
    ValidRange("password_min_length", 8, 256),
    ValidRange("password_max_length", 8, 256),
    ValidRange("password_min_upper_case_chars", 0, 256),
    ValidRange("password_min_lower_case_chars", 0, 256),
    ValidRange("password_min_numeric_chars", 0, 256),
    ValidRange("password_min_special_chars", 0, 256),
    ValidRange("password_min_age_days", 0, 999),
    ValidRange("password_max_age_days", 0, 999),
    ValidRange("password_max_retries", 1, 10),
    ValidRange("password_lockout_time_mins", 1, 999),
    ValidRange("password_history", 0, 24),
)

PASSWORD_POLICY_PROPERTIES = (
    "password_min_length",
    "password_max_length",
    "password_min_upper_case_chars",
    "password_min_lower_case_chars",
    "password_min_numeric_chars",
    "password_min_special_chars",
    "password_min_age_days",
    "password_max_age_days",
    "password_max_retries",
    "password_lockout_time_mins",
    "password_history",
)


@dataclass
class CreatePasswordPolicyOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    password_policy: bool = static("PASSWORD POLICY")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()
    password_min_length: Optional[int] = parameter("PASSWORD_MIN_LENGTH")
    password_max_length: Optional[int] = parameter("PASSWORD_MAX_LENGTH")
    password_min_upper_case_chars: Optional[int] = parameter("PASSWORD_MIN_UPPER_CASE_CHARS")
    password_min_lower_case_chars: Optional[int] = parameter("PASSWORD_MIN_LOWER_CASE_CHARS")
    password_min_numeric_chars: Optional[int] = parameter("PASSWORD_MIN_NUMERIC_CHARS")
    password_min_special_chars: Optional[int] = parameter("PASSWORD_MIN_SPECIAL_CHARS")
    password_min_age_days: Optional[int] = parameter("PASSWORD_MIN_AGE_DAYS")
    password_max_age_days: Optional[int] = parameter("PASSWORD_MAX_AGE_DAYS")
    password_max_retries: Optional[int] = parameter("PASSWORD_MAX_RETRIES")
    password_lockout_time_mins: Optional[int] = parameter("PASSWORD_LOCKOUT_TIME_MINS")
    password_history: Optional[int] = parameter("PASSWORD_HISTORY")
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (ValidIdentifier("name"),) + PASSWORD_POLICY_RANGES


@dataclass
class PasswordPolicySet:
    password_min_length: Optional[int] = parameter("PASSWORD_MIN_LENGTH")
    password_max_length: Optional[int] = parameter("PASSWORD_MAX_LENGTH")
    password_min_upper_case_chars: Optional[int] = parameter("PASSWORD_MIN_UPPER_CASE_CHARS")
    password_min_lower_case_chars: Optional[int] = parameter("PASSWORD_MIN_LOWER_CASE_CHARS")
    password_min_numeric_chars: Optional[int] = parameter("PASSWORD_MIN_NUMERIC_CHARS")
    password_min_special_chars: Optional[int] = parameter("PASSWORD_MIN_SPECIAL_CHARS")
    password_min_age_days: Optional[int] = parameter("PASSWORD_MIN_AGE_DAYS")
    password_max_age_days: Optional[int] = parameter("PASSWORD_MAX_AGE_DAYS")
    password_max_retries: Optional[int] = parameter("PASSWORD_MAX_RETRIES")
    password_lockout_time_mins: Optional[int] = parameter("PASSWORD_LOCKOUT_TIME_MINS")
    password_history: Optional[int] = parameter("PASSWORD_HISTORY")
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet(*PASSWORD_POLICY_PROPERTIES, "comment"),
    ) + PASSWORD_POLICY_RANGES


@dataclass
class PasswordPolicyUnset:
    password_min_length: Optional[bool] = keyword("PASSWORD_MIN_LENGTH")
    password_max_length: Optional[bool] = keyword("PASSWORD_MAX_LENGTH")
    password_min_upper_case_chars: Optional[bool] = keyword("PASSWORD_MIN_UPPER_CASE_CHARS")
    password_min_lower_case_chars: Optional[bool] = keyword("PASSWORD_MIN_LOWER_CASE_CHARS")
    password_min_numeric_chars: Optional[bool] = keyword("PASSWORD_MIN_NUMERIC_CHARS")
    password_min_special_chars: Optional[bool] = keyword("PASSWORD_MIN_SPECIAL_CHARS")
    password_min_age_days: Optional[bool] = keyword("PASSWORD_MIN_AGE_DAYS")
    password_max_age_days: Optional[bool] = keyword("PASSWORD_MAX_AGE_DAYS")
    password_max_retries: Optional[bool] = keyword("PASSWORD_MAX_RETRIES")
    password_lockout_time_mins: Optional[bool] = keyword("PASSWORD_LOCKOUT_TIME_MINS")
    password_history: Optional[bool] = keyword("PASSWORD_HISTORY")
    comment: Optional[bool] = keyword("COMMENT")

    validations: ClassVar[tuple] = (AtLeastOneValueSet(*PASSWORD_POLICY_PROPERTIES, "comment"),)


@dataclass
class AlterPasswordPolicyOptions:
    alter: bool = static("ALTER")
    password_policy: bool = static("PASSWORD POLICY")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()
    rename_to: Optional[SchemaObjectIdentifier] = identifier("RENAME TO")
    set: Optional[PasswordPolicySet] = keyword("SET")
    unset: Optional[PasswordPolicyUnset] = list_field("UNSET", comma=COMMA)

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ValidIdentifierIfSet("rename_to"),
        ExactlyOneValueSet("rename_to", "set", "unset"),
    )


@dataclass
class DropPasswordPolicyOptions:
    drop: bool = static("DROP")
    password_policy: bool = static("PASSWORD POLICY")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class ShowPasswordPolicyOptions:
    show: bool = static("SHOW")
    password_policies: bool = static("PASSWORD POLICIES")
    like: Optional[Like] = keyword()
    in_: Optional[In] = keyword()
    limit: Optional[int] = keyword("LIMIT")


@dataclass
class DescribePasswordPolicyOptions:
    describe: bool = static("DESCRIBE")
    password_policy: bool = static("PASSWORD POLICY")
    name: Optional[SchemaObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class CreatePasswordPolicyRequest(Request):
    name: SchemaObjectIdentifier
    or_replace: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    password_min_length: Optional[int] = None
    password_max_length: Optional[int] = None
    password_min_upper_case_chars: Optional[int] = None
    password_min_lower_case_chars: Optional[int] = None
    password_min_numeric_chars: Optional[int] = None
    password_min_special_chars: Optional[int] = None
    password_min_age_days: Optional[int] = None
    password_max_age_days: Optional[int] = None
    password_max_retries: Optional[int] = None
    password_lockout_time_mins: Optional[int] = None
    password_history: Optional[int] = None
    comment: Optional[str] = None

    options_class = CreatePasswordPolicyOptions


@dataclass
class PasswordPolicySetRequest:
    password_min_length: Optional[int] = None
    password_max_length: Optional[int] = None
    password_min_upper_case_chars: Optional[int] = None
    password_min_lower_case_chars: Optional[int] = None
    password_min_numeric_chars: Optional[int] = None
    password_min_special_chars: Optional[int] = None
    password_min_age_days: Optional[int] = None
    password_max_age_days: Optional[int] = None
    password_max_retries: Optional[int] = None
    password_lockout_time_mins: Optional[int] = None
    password_history: Optional[int] = None
    comment: Optional[str] = None


@dataclass
class PasswordPolicyUnsetRequest:
    password_min_length: Optional[bool] = None
    password_max_length: Optional[bool] = None
    password_min_upper_case_chars: Optional[bool] = None
    password_min_lower_case_chars: Optional[bool] = None
    password_min_numeric_chars: Optional[bool] = None
    password_min_special_chars: Optional[bool] = None
    password_min_age_days: Optional[bool] = None
    password_max_age_days: Optional[bool] = None
    password_max_retries: Optional[bool] = None
    password_lockout_time_mins: Optional[bool] = None
    password_history: Optional[bool] = None
    comment: Optional[bool] = None


@dataclass
class AlterPasswordPolicyRequest(Request):
    name: SchemaObjectIdentifier
    if_exists: Optional[bool] = None
    rename_to: Optional[SchemaObjectIdentifier] = None
    set: Optional[PasswordPolicySetRequest] = None
    unset: Optional[PasswordPolicyUnsetRequest] = None

    def to_opts(self) -> AlterPasswordPolicyOptions:
        return copy_to_options(
            self,
            AlterPasswordPolicyOptions,
            set=copy_if_set(self.set, PasswordPolicySet),
            unset=copy_if_set(self.unset, PasswordPolicyUnset),
        )


@dataclass
class DropPasswordPolicyRequest(Request):
    name: SchemaObjectIdentifier
    if_exists: Optional[bool] = None

    options_class = DropPasswordPolicyOptions


@dataclass
class ShowPasswordPolicyRequest(Request):
    like: Optional[Like] = None
    in_: Optional[In] = None
    limit: Optional[int] = None

    options_class = ShowPasswordPolicyOptions


@dataclass
class DescribePasswordPolicyRequest(Request):
    name: SchemaObjectIdentifier

    options_class = DescribePasswordPolicyOptions


@dataclass
class PasswordPolicy:
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
        return ObjectType.PASSWORD_POLICY


@dataclass
class PasswordPolicyDetails:
    name: Optional[str] = None
    owner: Optional[str] = None
    comment: Optional[str] = None
    password_min_length: Optional[int] = None
    password_max_length: Optional[int] = None
    password_min_upper_case_chars: Optional[int] = None
    password_min_lower_case_chars: Optional[int] = None
    password_min_numeric_chars: Optional[int] = None
    password_min_special_chars: Optional[int] = None
    password_min_age_days: Optional[int] = None
    password_max_age_days: Optional[int] = None
    password_max_retries: Optional[int] = None
    password_lockout_time_mins: Optional[int] = None
    password_history: Optional[int] = None


_DETAIL_CONVERTERS = {
    "name": optional_string,
    "owner": optional_string,
    "comment": optional_string,
    **{name: optional_int for name in PASSWORD_POLICY_PROPERTIES},
}


def decode_password_policy(row: dict) -> PasswordPolicy:
    row = normalize_row(row)
    return PasswordPolicy(
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


def decode_password_policy_details(rows: list[dict]) -> PasswordPolicyDetails:
    return route_properties(rows, PasswordPolicyDetails(), _DETAIL_CONVERTERS)


class PasswordPolicies(Collection):
    def create(self, request: CreatePasswordPolicyRequest) -> int:
        return self._exec(request)

    def alter(self, request: AlterPasswordPolicyRequest) -> int:
        return self._exec(request)

    def drop(self, request: DropPasswordPolicyRequest) -> int:
        return self._exec(request)

    def show(self, request: Optional[ShowPasswordPolicyRequest] = None) -> list[PasswordPolicy]:
        return self._query(request or ShowPasswordPolicyRequest(), decode_password_policy)

    def show_by_id(self, id: SchemaObjectIdentifier) -> Optional[PasswordPolicy]:
        request = ShowPasswordPolicyRequest(like=Like(id.name), in_=in_container(id.schema_id()))
        return find_by_id(self.show(request), id)

    def describe(self, id: SchemaObjectIdentifier) -> Optional[PasswordPolicyDetails]:
        rows = self._describe(DescribePasswordPolicyRequest(id))
        if rows is None:
            return None
        return decode_password_policy_details(rows)
