from dataclasses import dataclass, field
from typing import ClassVar, Optional

from ..common import In, Like, SetTags, UnsetTags, in_container, tag_associations
from ..ddl import NO_EQUALS, PARENTHESES, SINGLE_QUOTES, identifier, keyword, parameter, static
from ..enums import ObjectType
from ..identifiers import SchemaObjectIdentifier
from ..requests import Request, build_if_set, copy_to_options
from ..rows import normalize_row, optional_string, parse_signature, to_string
from ..validations import AtLeastOneValueSet, ExactlyOneValueSet, ValidIdentifier, ValidIdentifierIfSet
from .base import Collection, find_by_id


@dataclass
class RowAccessPolicyArg:
    name: Optional[str] = keyword()
    type: Optional[str] = keyword()


@dataclass
class CreateRowAccessPolicyOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    row_access_policy: bool = static("ROW ACCESS POLICY")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()
    args: Optional[list[RowAccessPolicyArg]] = keyword("AS", parens=PARENTHESES)
    returns_boolean: bool = static("RETURNS BOOLEAN")
    body: Optional[str] = parameter("->", equals=NO_EQUALS)
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        AtLeastOneValueSet("args"),
        AtLeastOneValueSet("body"),
    )


@dataclass
class AlterRowAccessPolicyOptions:
    alter: bool = static("ALTER")
    row_access_policy: bool = static("ROW ACCESS POLICY")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()
    rename_to: Optional[SchemaObjectIdentifier] = identifier("RENAME TO")
    set_body: Optional[str] = parameter("SET BODY ->", equals=NO_EQUALS)
    set_tags: Optional[SetTags] = keyword()
    unset_tags: Optional[UnsetTags] = keyword()
    set_comment: Optional[str] = parameter("SET COMMENT", quotes=SINGLE_QUOTES)
    unset_comment: Optional[bool] = keyword("UNSET COMMENT")

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ValidIdentifierIfSet("rename_to"),
        ExactlyOneValueSet("rename_to", "set_body", "set_tags", "unset_tags", "set_comment", "unset_comment"),
    )


@dataclass
class DropRowAccessPolicyOptions:
    drop: bool = static("DROP")
    row_access_policy: bool = static("ROW ACCESS POLICY")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class ShowRowAccessPolicyOptions:
    show: bool = static("SHOW")
    row_access_policies: bool = static("ROW ACCESS POLICIES")
    like: Optional[Like] = keyword()
    in_: Optional[In] = keyword()


@dataclass
class DescribeRowAccessPolicyOptions:
    describe: bool = static("DESCRIBE")
    row_access_policy: bool = static("ROW ACCESS POLICY")
    name: Optional[SchemaObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class CreateRowAccessPolicyRequest(Request):
    name: SchemaObjectIdentifier
    args: dict = field(default_factory=dict)
    body: Optional[str] = None
    or_replace: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    comment: Optional[str] = None

    def to_opts(self) -> CreateRowAccessPolicyOptions:
        args = [RowAccessPolicyArg(name, data_type) for name, data_type in self.args.items()]
        return copy_to_options(self, CreateRowAccessPolicyOptions, args=args or None)


@dataclass
class AlterRowAccessPolicyRequest(Request):
    name: SchemaObjectIdentifier
    if_exists: Optional[bool] = None
    rename_to: Optional[SchemaObjectIdentifier] = None
    set_body: Optional[str] = None
    set_tags: dict = field(default_factory=dict)
    unset_tags: list = field(default_factory=list)
    set_comment: Optional[str] = None
    unset_comment: Optional[bool] = None

    def to_opts(self) -> AlterRowAccessPolicyOptions:
        return copy_to_options(
            self,
            AlterRowAccessPolicyOptions,
            set_tags=build_if_set(SetTags, tags=tag_associations(self.set_tags)),
            unset_tags=build_if_set(UnsetTags, tags=self.unset_tags or None),
        )


@dataclass
class DropRowAccessPolicyRequest(Request):
    name: SchemaObjectIdentifier
    if_exists: Optional[bool] = None

    options_class = DropRowAccessPolicyOptions


@dataclass
class ShowRowAccessPolicyRequest(Request):
    like: Optional[Like] = None
    in_: Optional[In] = None

    options_class = ShowRowAccessPolicyOptions


@dataclass
class DescribeRowAccessPolicyRequest(Request):
    name: SchemaObjectIdentifier

    options_class = DescribeRowAccessPolicyOptions


@dataclass
class RowAccessPolicy:
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
        return ObjectType.ROW_ACCESS_POLICY


@dataclass
class RowAccessPolicyDescription:
    name: str
    signature: dict
    return_type: str
    body: str


def decode_row_access_policy(row: dict) -> RowAccessPolicy:
    row = normalize_row(row)
    return RowAccessPolicy(
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


def decode_row_access_policy_description(row: dict) -> RowAccessPolicyDescription:
    row = normalize_row(row)
    return RowAccessPolicyDescription(
        name=row["name"],
        signature=parse_signature(row.get("signature")),
        return_type=to_string(row.get("return_type")),
        body=to_string(row.get("body")),
    )


class RowAccessPolicies(Collection):
    def create(self, request: CreateRowAccessPolicyRequest) -> int:
        return self._exec(request)

    def alter(self, request: AlterRowAccessPolicyRequest) -> int:
        return self._exec(request)

    def drop(self, request: DropRowAccessPolicyRequest) -> int:
        return self._exec(request)

    def show(self, request: Optional[ShowRowAccessPolicyRequest] = None) -> list[RowAccessPolicy]:
        return self._query(request or ShowRowAccessPolicyRequest(), decode_row_access_policy)

    def show_by_id(self, id: SchemaObjectIdentifier) -> Optional[RowAccessPolicy]:
        request = ShowRowAccessPolicyRequest(like=Like(id.name), in_=in_container(id.schema_id()))
        return find_by_id(self.show(request), id)

    def describe(self, id: SchemaObjectIdentifier) -> Optional[RowAccessPolicyDescription]:
        rows = self._describe(DescribeRowAccessPolicyRequest(id))
        if rows is None:
            return None
        return decode_row_access_policy_description(rows[0])
