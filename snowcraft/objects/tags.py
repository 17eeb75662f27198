from dataclasses import dataclass, field
from typing import ClassVar, Optional

from ..common import In, Like, in_container
from ..ddl import SINGLE_QUOTES, identifier, keyword, list_field, parameter, static
from ..enums import ObjectType
from ..identifiers import SchemaObjectIdentifier
from ..requests import Request, build_if_set, copy_to_options
from ..rows import normalize_row, optional_string, parse_json_list, to_string
from ..validations import (
    AtLeastOneValueSet,
    ConflictingFields,
    ExactlyOneValueSet,
    ValidIdentifier,
    ValidIdentifierIfSet,
    ValidIdentifiers,
)
from .base import Collection, find_by_id


@dataclass
class CreateTagOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    tag: bool = static("TAG")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()
    allowed_values: Optional[list[str]] = list_field("ALLOWED_VALUES", quotes=SINGLE_QUOTES)
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ConflictingFields("or_replace", "if_not_exists"),
    )


@dataclass
class TagSetMaskingPolicies:
    policies: Optional[list[SchemaObjectIdentifier]] = list_field("SET MASKING POLICY")
    force: Optional[bool] = keyword("FORCE")

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet("policies"),
        ValidIdentifiers("policies"),
    )


@dataclass
class TagUnsetMaskingPolicies:
    policies: Optional[list[SchemaObjectIdentifier]] = list_field("UNSET MASKING POLICY")

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet("policies"),
        ValidIdentifiers("policies"),
    )


@dataclass
class AlterTagOptions:
    alter: bool = static("ALTER")
    tag: bool = static("TAG")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()
    rename_to: Optional[SchemaObjectIdentifier] = identifier("RENAME TO")
    add_allowed_values: Optional[list[str]] = list_field("ADD ALLOWED_VALUES", quotes=SINGLE_QUOTES)
    drop_allowed_values: Optional[list[str]] = list_field("DROP ALLOWED_VALUES", quotes=SINGLE_QUOTES)
    unset_allowed_values: Optional[bool] = keyword("UNSET ALLOWED_VALUES")
    set_masking_policies: Optional[TagSetMaskingPolicies] = keyword()
    unset_masking_policies: Optional[TagUnsetMaskingPolicies] = keyword()
    set_comment: Optional[str] = parameter("SET COMMENT", quotes=SINGLE_QUOTES)
    unset_comment: Optional[bool] = keyword("UNSET COMMENT")

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ValidIdentifierIfSet("rename_to"),
        ExactlyOneValueSet(
            "rename_to",
            "add_allowed_values",
            "drop_allowed_values",
            "unset_allowed_values",
            "set_masking_policies",
            "unset_masking_policies",
            "set_comment",
            "unset_comment",
        ),
    )


@dataclass
class DropTagOptions:
    drop: bool = static("DROP")
    tag: bool = static("TAG")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class UndropTagOptions:
    undrop: bool = static("UNDROP")
    tag: bool = static("TAG")
    name: Optional[SchemaObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class ShowTagOptions:
    show: bool = static("SHOW")
    tags: bool = static("TAGS")
    like: Optional[Like] = keyword()
    in_: Optional[In] = keyword()


@dataclass
class CreateTagRequest(Request):
    name: SchemaObjectIdentifier
    or_replace: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    allowed_values: list = field(default_factory=list)
    comment: Optional[str] = None

    options_class = CreateTagOptions


@dataclass
class AlterTagRequest(Request):
    name: SchemaObjectIdentifier
    if_exists: Optional[bool] = None
    rename_to: Optional[SchemaObjectIdentifier] = None
    add_allowed_values: list = field(default_factory=list)
    drop_allowed_values: list = field(default_factory=list)
    unset_allowed_values: Optional[bool] = None
    set_masking_policies: list = field(default_factory=list)
    force: Optional[bool] = None
    unset_masking_policies: list = field(default_factory=list)
    set_comment: Optional[str] = None
    unset_comment: Optional[bool] = None

    def to_opts(self) -> AlterTagOptions:
        set_masking_policies = None
        if self.set_masking_policies:
            set_masking_policies = TagSetMaskingPolicies(self.set_masking_policies, force=self.force or None)
        return copy_to_options(
            self,
            AlterTagOptions,
            set_masking_policies=set_masking_policies,
            unset_masking_policies=build_if_set(TagUnsetMaskingPolicies, policies=self.unset_masking_policies or None),
        )


@dataclass
class DropTagRequest(Request):
    name: SchemaObjectIdentifier
    if_exists: Optional[bool] = None

    options_class = DropTagOptions


@dataclass
class UndropTagRequest(Request):
    name: SchemaObjectIdentifier

    options_class = UndropTagOptions


@dataclass
class ShowTagRequest(Request):
    like: Optional[Like] = None
    in_: Optional[In] = None

    options_class = ShowTagOptions


@dataclass
class Tag:
    created_on: str
    name: str
    database_name: str
    schema_name: str
    owner: str
    comment: Optional[str]
    allowed_values: list[str]
    owner_role_type: str = ""

    def id(self) -> SchemaObjectIdentifier:
        return SchemaObjectIdentifier(self.database_name, self.schema_name, self.name)

    def object_type(self) -> ObjectType:
        return ObjectType.TAG


def decode_tag(row: dict) -> Tag:
    row = normalize_row(row)
    return Tag(
        created_on=to_string(row.get("created_on")),
        name=row["name"],
        database_name=row["database_name"],
        schema_name=row["schema_name"],
        owner=to_string(row.get("owner")),
        comment=optional_string(row.get("comment")),
        allowed_values=parse_json_list(row.get("allowed_values")),
        owner_role_type=to_string(row.get("owner_role_type")),
    )


class Tags(Collection):
    def create(self, request: CreateTagRequest) -> int:
        return self._exec(request)

    def alter(self, request: AlterTagRequest) -> int:
        return self._exec(request)

    def drop(self, request: DropTagRequest) -> int:
        return self._exec(request)

    def undrop(self, id: SchemaObjectIdentifier) -> int:
        return self._exec(UndropTagRequest(id))

    def show(self, request: Optional[ShowTagRequest] = None) -> list[Tag]:
        return self._query(request or ShowTagRequest(), decode_tag)

    def show_by_id(self, id: SchemaObjectIdentifier) -> Optional[Tag]:
        request = ShowTagRequest(like=Like(id.name), in_=in_container(id.schema_id()))
        return find_by_id(self.show(request), id)
