import json
import logging
from dataclasses import dataclass, field
from typing import ClassVar, Optional

from ..common import In, Like, SetTags, UnsetTags, in_container, tag_associations
from ..ddl import DOUBLE_QUOTES, NO_EQUALS, PARENTHESES, SINGLE_QUOTES, identifier, keyword, parameter, static
from ..enums import ObjectType
from ..identifiers import SchemaObjectIdentifier
from ..requests import Request, build_if_set, copy_if_set, copy_to_options
from ..rows import normalize_row, optional_string, parse_signature, to_string
from ..validations import AtLeastOneValueSet, ExactlyOneValueSet, ValidIdentifier, ValidIdentifierIfSet
from .base import Collection, find_by_id

logger = logging.getLogger("snowcraft")


@dataclass
class ColumnSignature:
    name: Optional[str] = keyword(quotes=DOUBLE_QUOTES)
    type: Optional[str] = keyword()


@dataclass
class CreateMaskingPolicyOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    masking_policy: bool = static("MASKING POLICY")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()
    signature: Optional[list[ColumnSignature]] = keyword("AS", parens=PARENTHESES)
    returns: Optional[str] = parameter("RETURNS", equals=NO_EQUALS)
    body: Optional[str] = parameter("->", equals=NO_EQUALS)
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)
    exempt_other_policies: Optional[bool] = parameter("EXEMPT_OTHER_POLICIES")

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        AtLeastOneValueSet("signature"),
        AtLeastOneValueSet("returns"),
        AtLeastOneValueSet("body"),
    )


@dataclass
class MaskingPolicySet:
    body: Optional[str] = parameter("BODY ->", equals=NO_EQUALS)
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (ExactlyOneValueSet("body", "comment"),)


@dataclass
class MaskingPolicyUnset:
    comment: Optional[bool] = keyword("COMMENT")

    validations: ClassVar[tuple] = (AtLeastOneValueSet("comment"),)


@dataclass
class AlterMaskingPolicyOptions:
    alter: bool = static("ALTER")
    masking_policy: bool = static("MASKING POLICY")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()
    rename_to: Optional[SchemaObjectIdentifier] = identifier("RENAME TO")
    set: Optional[MaskingPolicySet] = keyword("SET")
    unset: Optional[MaskingPolicyUnset] = keyword("UNSET")
    set_tags: Optional[SetTags] = keyword()
    unset_tags: Optional[UnsetTags] = keyword()

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ValidIdentifierIfSet("rename_to"),
        ExactlyOneValueSet("rename_to", "set", "unset", "set_tags", "unset_tags"),
    )


@dataclass
class DropMaskingPolicyOptions:
    drop: bool = static("DROP")
    masking_policy: bool = static("MASKING POLICY")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[SchemaObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class ShowMaskingPolicyOptions:
    show: bool = static("SHOW")
    masking_policies: bool = static("MASKING POLICIES")
    like: Optional[Like] = keyword()
    in_: Optional[In] = keyword()
    limit: Optional[int] = parameter("LIMIT", equals=NO_EQUALS)


@dataclass
class DescribeMaskingPolicyOptions:
    describe: bool = static("DESCRIBE")
    masking_policy: bool = static("MASKING POLICY")
    name: Optional[SchemaObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class CreateMaskingPolicyRequest(Request):
    """
    The signature is an ordered mapping of argument name to data type:

        CreateMaskingPolicyRequest(
            name=SchemaObjectIdentifier("DB", "SCH", "EMAIL_MASK"),
            signature={"VAL": "VARCHAR"},
            returns="VARCHAR",
            body="CASE WHEN CURRENT_ROLE() = 'ADMIN' THEN VAL ELSE '***' END",
        )
    """

    name: SchemaObjectIdentifier
    signature: dict = field(default_factory=dict)
    returns: Optional[str] = None
    body: Optional[str] = None
    or_replace: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    comment: Optional[str] = None
    exempt_other_policies: Optional[bool] = None

    def to_opts(self) -> CreateMaskingPolicyOptions:
        return copy_to_options(
            self,
            CreateMaskingPolicyOptions,
            signature=column_signatures(self.signature),
        )


@dataclass
class MaskingPolicySetRequest:
    body: Optional[str] = None
    comment: Optional[str] = None


@dataclass
class AlterMaskingPolicyRequest(Request):
    name: SchemaObjectIdentifier
    if_exists: Optional[bool] = None
    rename_to: Optional[SchemaObjectIdentifier] = None
    set: Optional[MaskingPolicySetRequest] = None
    unset_comment: Optional[bool] = None
    set_tags: dict = field(default_factory=dict)
    unset_tags: list = field(default_factory=list)

    def to_opts(self) -> AlterMaskingPolicyOptions:
        return copy_to_options(
            self,
            AlterMaskingPolicyOptions,
            set=copy_if_set(self.set, MaskingPolicySet),
            unset=build_if_set(MaskingPolicyUnset, comment=self.unset_comment or None),
            set_tags=build_if_set(SetTags, tags=tag_associations(self.set_tags)),
            unset_tags=build_if_set(UnsetTags, tags=self.unset_tags or None),
        )


@dataclass
class DropMaskingPolicyRequest(Request):
    name: SchemaObjectIdentifier
    if_exists: Optional[bool] = None

    options_class = DropMaskingPolicyOptions


@dataclass
class ShowMaskingPolicyRequest(Request):
    like: Optional[Like] = None
    in_: Optional[In] = None
    limit: Optional[int] = None

    options_class = ShowMaskingPolicyOptions


@dataclass
class DescribeMaskingPolicyRequest(Request):
    name: SchemaObjectIdentifier

    options_class = DescribeMaskingPolicyOptions


def column_signatures(signature: Optional[dict]) -> Optional[list[ColumnSignature]]:
    if not signature:
        return None
    return [ColumnSignature(name, data_type) for name, data_type in signature.items()]


@dataclass
class MaskingPolicy:
    created_on: str
    name: str
    database_name: str
    schema_name: str
    kind: str
    owner: str
    comment: Optional[str]
    exempt_other_policies: bool = False
    owner_role_type: str = ""

    def id(self) -> SchemaObjectIdentifier:
        return SchemaObjectIdentifier(self.database_name, self.schema_name, self.name)

    def object_type(self) -> ObjectType:
        return ObjectType.MASKING_POLICY


@dataclass
class MaskingPolicyDetails:
    name: str
    signature: dict
    return_type: str
    body: str


def _exempt_other_policies(options: Optional[str]) -> bool:
    if not options:
        return False
    try:
        return bool(json.loads(options).get("EXEMPT_OTHER_POLICIES", False))
    except (json.JSONDecodeError, AttributeError):
        logger.debug(f"masking policy options are not valid JSON: {options}")
        return False


def decode_masking_policy(row: dict) -> MaskingPolicy:
    row = normalize_row(row)
    return MaskingPolicy(
        created_on=to_string(row.get("created_on")),
        name=row["name"],
        database_name=row["database_name"],
        schema_name=row["schema_name"],
        kind=to_string(row.get("kind")),
        owner=to_string(row.get("owner")),
        comment=optional_string(row.get("comment")),
        exempt_other_policies=_exempt_other_policies(row.get("options")),
        owner_role_type=to_string(row.get("owner_role_type")),
    )


def decode_masking_policy_details(row: dict) -> MaskingPolicyDetails:
    row = normalize_row(row)
    return MaskingPolicyDetails(
        name=row["name"],
        signature=parse_signature(row.get("signature")),
        return_type=to_string(row.get("return_type")),
        body=to_string(row.get("body")),
    )


class MaskingPolicies(Collection):
    def create(self, request: CreateMaskingPolicyRequest) -> int:
        return self._exec(request)

    def alter(self, request: AlterMaskingPolicyRequest) -> int:
        return self._exec(request)

    def drop(self, request: DropMaskingPolicyRequest) -> int:
        return self._exec(request)

    def show(self, request: Optional[ShowMaskingPolicyRequest] = None) -> list[MaskingPolicy]:
        return self._query(request or ShowMaskingPolicyRequest(), decode_masking_policy)

    def show_by_id(self, id: SchemaObjectIdentifier) -> Optional[MaskingPolicy]:
        request = ShowMaskingPolicyRequest(like=Like(id.name), in_=in_container(id.schema_id()))
        return find_by_id(self.show(request), id)

    def describe(self, id: SchemaObjectIdentifier) -> Optional[MaskingPolicyDetails]:
        rows = self._describe(DescribeMaskingPolicyRequest(id))
        if rows is None:
            return None
        return decode_masking_policy_details(rows[0])
