from dataclasses import dataclass, field
from typing import ClassVar, Optional

from ..common import IP, Like, SetTags, UnsetTags, ip_list, tag_associations
from ..ddl import COMMA, PARENTHESES, SINGLE_QUOTES, identifier, keyword, list_field, parameter, static
from ..enums import ObjectType
from ..identifiers import AccountObjectIdentifier, SchemaObjectIdentifier
from ..requests import Request, build_if_set, copy_if_set, copy_to_options
from ..rows import normalize_row, optional_string, parse_list, to_int, to_string
from ..validations import (
    AtLeastOneValueSet,
    ExactlyOneValueSet,
    ValidIdentifier,
    ValidIdentifierIfSet,
    ValidIdentifiers,
)
from .base import Collection, find_by_id


@dataclass
class CreateNetworkPolicyOptions:
    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    network_policy: bool = static("NETWORK POLICY")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[AccountObjectIdentifier] = identifier()
    allowed_network_rule_list: Optional[list[SchemaObjectIdentifier]] = parameter(
        "ALLOWED_NETWORK_RULE_LIST", parens=PARENTHESES
    )
    blocked_network_rule_list: Optional[list[SchemaObjectIdentifier]] = parameter(
        "BLOCKED_NETWORK_RULE_LIST", parens=PARENTHESES
    )
    allowed_ip_list: Optional[list[IP]] = parameter("ALLOWED_IP_LIST", parens=PARENTHESES)
    blocked_ip_list: Optional[list[IP]] = parameter("BLOCKED_IP_LIST", parens=PARENTHESES)
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ValidIdentifiers("allowed_network_rule_list"),
        ValidIdentifiers("blocked_network_rule_list"),
    )


@dataclass
class NetworkPolicySet:
    allowed_network_rule_list: Optional[list[SchemaObjectIdentifier]] = parameter(
        "ALLOWED_NETWORK_RULE_LIST", parens=PARENTHESES
    )
    blocked_network_rule_list: Optional[list[SchemaObjectIdentifier]] = parameter(
        "BLOCKED_NETWORK_RULE_LIST", parens=PARENTHESES
    )
    allowed_ip_list: Optional[list[IP]] = parameter("ALLOWED_IP_LIST", parens=PARENTHESES)
    blocked_ip_list: Optional[list[IP]] = parameter("BLOCKED_IP_LIST", parens=PARENTHESES)
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet(
            "allowed_network_rule_list", "blocked_network_rule_list", "allowed_ip_list", "blocked_ip_list", "comment"
        ),
        ValidIdentifiers("allowed_network_rule_list"),
        ValidIdentifiers("blocked_network_rule_list"),
    )


@dataclass
class NetworkPolicyUnset:
    allowed_network_rule_list: Optional[bool] = keyword("ALLOWED_NETWORK_RULE_LIST")
    blocked_network_rule_list: Optional[bool] = keyword("BLOCKED_NETWORK_RULE_LIST")
    allowed_ip_list: Optional[bool] = keyword("ALLOWED_IP_LIST")
    blocked_ip_list: Optional[bool] = keyword("BLOCKED_IP_LIST")
    comment: Optional[bool] = keyword("COMMENT")

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet(
            "allowed_network_rule_list", "blocked_network_rule_list", "allowed_ip_list", "blocked_ip_list", "comment"
        ),
    )


@dataclass
class NetworkRuleListChange:
    """Body of ADD and REMOVE, one rule list at a time."""

    allowed_network_rule_list: Optional[list[SchemaObjectIdentifier]] = parameter(
        "ALLOWED_NETWORK_RULE_LIST", parens=PARENTHESES
    )
    blocked_network_rule_list: Optional[list[SchemaObjectIdentifier]] = parameter(
        "BLOCKED_NETWORK_RULE_LIST", parens=PARENTHESES
    )

    validations: ClassVar[tuple] = (
        ExactlyOneValueSet("allowed_network_rule_list", "blocked_network_rule_list"),
        ValidIdentifiers("allowed_network_rule_list"),
        ValidIdentifiers("blocked_network_rule_list"),
    )


@dataclass
class AlterNetworkPolicyOptions:
    alter: bool = static("ALTER")
    network_policy: bool = static("NETWORK POLICY")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[AccountObjectIdentifier] = identifier()
    set: Optional[NetworkPolicySet] = keyword("SET")
    unset: Optional[NetworkPolicyUnset] = list_field("UNSET", comma=COMMA)
    add: Optional[NetworkRuleListChange] = keyword("ADD")
    remove: Optional[NetworkRuleListChange] = keyword("REMOVE")
    rename_to: Optional[AccountObjectIdentifier] = identifier("RENAME TO")
    set_tags: Optional[SetTags] = keyword()
    unset_tags: Optional[UnsetTags] = keyword()

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ValidIdentifierIfSet("rename_to"),
        ExactlyOneValueSet("set", "unset", "add", "remove", "rename_to", "set_tags", "unset_tags"),
    )


@dataclass
class DropNetworkPolicyOptions:
    drop: bool = static("DROP")
    network_policy: bool = static("NETWORK POLICY")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[AccountObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class ShowNetworkPolicyOptions:
    show: bool = static("SHOW")
    network_policies: bool = static("NETWORK POLICIES")
    like: Optional[Like] = keyword()


@dataclass
class DescribeNetworkPolicyOptions:
    describe: bool = static("DESCRIBE")
    network_policy: bool = static("NETWORK POLICY")
    name: Optional[AccountObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class CreateNetworkPolicyRequest(Request):
    name: AccountObjectIdentifier
    or_replace: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    allowed_network_rule_list: Optional[list[SchemaObjectIdentifier]] = None
    blocked_network_rule_list: Optional[list[SchemaObjectIdentifier]] = None
    allowed_ip_list: Optional[list[str]] = None
    blocked_ip_list: Optional[list[str]] = None
    comment: Optional[str] = None

    def to_opts(self) -> CreateNetworkPolicyOptions:
        return copy_to_options(
            self,
            CreateNetworkPolicyOptions,
            allowed_ip_list=ip_list(self.allowed_ip_list),
            blocked_ip_list=ip_list(self.blocked_ip_list),
        )


@dataclass
class NetworkPolicySetRequest:
    allowed_network_rule_list: Optional[list[SchemaObjectIdentifier]] = None
    blocked_network_rule_list: Optional[list[SchemaObjectIdentifier]] = None
    allowed_ip_list: Optional[list[str]] = None
    blocked_ip_list: Optional[list[str]] = None
    comment: Optional[str] = None


@dataclass
class NetworkPolicyUnsetRequest:
    allowed_network_rule_list: Optional[bool] = None
    blocked_network_rule_list: Optional[bool] = None
    allowed_ip_list: Optional[bool] = None
    blocked_ip_list: Optional[bool] = None
    comment: Optional[bool] = None


@dataclass
class AlterNetworkPolicyRequest(Request):
    name: AccountObjectIdentifier
    if_exists: Optional[bool] = None
    set: Optional[NetworkPolicySetRequest] = None
    unset: Optional[NetworkPolicyUnsetRequest] = None
    add_allowed_network_rules: Optional[list[SchemaObjectIdentifier]] = None
    add_blocked_network_rules: Optional[list[SchemaObjectIdentifier]] = None
    remove_allowed_network_rules: Optional[list[SchemaObjectIdentifier]] = None
    remove_blocked_network_rules: Optional[list[SchemaObjectIdentifier]] = None
    rename_to: Optional[AccountObjectIdentifier] = None
    set_tags: dict = field(default_factory=dict)
    unset_tags: list = field(default_factory=list)

    def to_opts(self) -> AlterNetworkPolicyOptions:
        set_ = None
        if self.set is not None:
            set_ = copy_if_set(
                self.set,
                NetworkPolicySet,
                allowed_ip_list=ip_list(self.set.allowed_ip_list),
                blocked_ip_list=ip_list(self.set.blocked_ip_list),
            )
        return copy_to_options(
            self,
            AlterNetworkPolicyOptions,
            set=set_,
            unset=copy_if_set(self.unset, NetworkPolicyUnset),
            add=build_if_set(
                NetworkRuleListChange,
                allowed_network_rule_list=self.add_allowed_network_rules or None,
                blocked_network_rule_list=self.add_blocked_network_rules or None,
            ),
            remove=build_if_set(
                NetworkRuleListChange,
                allowed_network_rule_list=self.remove_allowed_network_rules or None,
                blocked_network_rule_list=self.remove_blocked_network_rules or None,
            ),
            set_tags=build_if_set(SetTags, tags=tag_associations(self.set_tags)),
            unset_tags=build_if_set(UnsetTags, tags=self.unset_tags or None),
        )


@dataclass
class DropNetworkPolicyRequest(Request):
    name: AccountObjectIdentifier
    if_exists: Optional[bool] = None

    options_class = DropNetworkPolicyOptions


@dataclass
class ShowNetworkPolicyRequest(Request):
    like: Optional[Like] = None

    options_class = ShowNetworkPolicyOptions


@dataclass
class DescribeNetworkPolicyRequest(Request):
    name: AccountObjectIdentifier

    options_class = DescribeNetworkPolicyOptions


@dataclass
class NetworkPolicy:
    created_on: str
    name: str
    comment: Optional[str]
    entries_in_allowed_ip_list: int
    entries_in_blocked_ip_list: int
    entries_in_allowed_network_rules: int
    entries_in_blocked_network_rules: int
    owner: str = ""
    owner_role_type: str = ""

    def id(self) -> AccountObjectIdentifier:
        return AccountObjectIdentifier(self.name)

    def object_type(self) -> ObjectType:
        return ObjectType.NETWORK_POLICY


@dataclass
class NetworkPolicyDetails:
    allowed_ip_list: list[str] = field(default_factory=list)
    blocked_ip_list: list[str] = field(default_factory=list)
    allowed_network_rule_list: list[str] = field(default_factory=list)
    blocked_network_rule_list: list[str] = field(default_factory=list)


def decode_network_policy(row: dict) -> NetworkPolicy:
    row = normalize_row(row)
    return NetworkPolicy(
        created_on=to_string(row.get("created_on")),
        name=row["name"],
        comment=optional_string(row.get("comment")),
        entries_in_allowed_ip_list=to_int(row.get("entries_in_allowed_ip_list")),
        entries_in_blocked_ip_list=to_int(row.get("entries_in_blocked_ip_list")),
        entries_in_allowed_network_rules=to_int(row.get("entries_in_allowed_network_rules")),
        entries_in_blocked_network_rules=to_int(row.get("entries_in_blocked_network_rules")),
        owner=to_string(row.get("owner")),
        owner_role_type=to_string(row.get("owner_role_type")),
    )


def decode_network_policy_details(rows: list[dict]) -> NetworkPolicyDetails:
    details = NetworkPolicyDetails()
    for row in rows:
        row = normalize_row(row)
        name = str(row["name"]).lower()
        if hasattr(details, name):
            setattr(details, name, parse_list(row.get("value")))
    return details


class NetworkPolicies(Collection):
    def create(self, request: CreateNetworkPolicyRequest) -> int:
        return self._exec(request)

    def alter(self, request: AlterNetworkPolicyRequest) -> int:
        return self._exec(request)

    def drop(self, request: DropNetworkPolicyRequest) -> int:
        return self._exec(request)

    def show(self, request: Optional[ShowNetworkPolicyRequest] = None) -> list[NetworkPolicy]:
        return self._query(request or ShowNetworkPolicyRequest(), decode_network_policy)

    def show_by_id(self, id: AccountObjectIdentifier) -> Optional[NetworkPolicy]:
        return find_by_id(self.show(ShowNetworkPolicyRequest(like=Like(id.name))), id)

    def describe(self, id: AccountObjectIdentifier) -> Optional[NetworkPolicyDetails]:
        rows = self._describe(DescribeNetworkPolicyRequest(id))
        if rows is None:
            return None
        return decode_network_policy_details(rows)
