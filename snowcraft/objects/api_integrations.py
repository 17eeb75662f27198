from dataclasses import dataclass, field
from typing import ClassVar, Optional

from ..common import Like, SetTags, UnsetTags, tag_associations
from ..ddl import COMMA, PARENTHESES, SINGLE_QUOTES, embedded, identifier, keyword, list_field, parameter, static
from ..enums import ApiIntegrationAwsApiProviderType, ObjectType
from ..identifiers import AccountObjectIdentifier
from ..requests import Request, build_if_set, copy_if_set, copy_to_options
from ..rows import normalize_row, optional_string, to_bool, to_string
from ..validations import (
    AtLeastOneValueSet,
    ConflictingFields,
    ExactlyOneValueSet,
    ValidIdentifier,
)
from .base import Collection, find_by_id


@dataclass
class AwsApiParams:
    api_provider: Optional[ApiIntegrationAwsApiProviderType] = parameter("API_PROVIDER")
    api_aws_role_arn: Optional[str] = parameter("API_AWS_ROLE_ARN", quotes=SINGLE_QUOTES)
    api_key: Optional[str] = parameter("API_KEY", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet("api_provider"),
        AtLeastOneValueSet("api_aws_role_arn"),
    )


@dataclass
class AzureApiParams:
    api_provider: bool = static("API_PROVIDER = azure_api_management")
    azure_tenant_id: Optional[str] = parameter("AZURE_TENANT_ID", quotes=SINGLE_QUOTES)
    azure_ad_application_id: Optional[str] = parameter("AZURE_AD_APPLICATION_ID", quotes=SINGLE_QUOTES)
    api_key: Optional[str] = parameter("API_KEY", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet("azure_tenant_id"),
        AtLeastOneValueSet("azure_ad_application_id"),
    )


@dataclass
class GoogleApiParams:
    api_provider: bool = static("API_PROVIDER = google_api_gateway")
    google_audience: Optional[str] = parameter("GOOGLE_AUDIENCE", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (AtLeastOneValueSet("google_audience"),)


@dataclass
class CreateApiIntegrationOptions:
    """
    CREATE API INTEGRATION "API" API_PROVIDER = aws_api_gateway API_AWS_ROLE_ARN = 'arn:aws:iam::123:role/api'
        API_ALLOWED_PREFIXES = ('https://xyz.execute-api.us-west-2.amazonaws.com/production') ENABLED = true
    """

    create: bool = static("CREATE")
    or_replace: Optional[bool] = keyword("OR REPLACE")
    api_integration: bool = static("API INTEGRATION")
    if_not_exists: Optional[bool] = keyword("IF NOT EXISTS")
    name: Optional[AccountObjectIdentifier] = identifier()
    aws_api_provider_params: Optional[AwsApiParams] = embedded()
    azure_api_provider_params: Optional[AzureApiParams] = embedded()
    google_api_provider_params: Optional[GoogleApiParams] = embedded()
    api_allowed_prefixes: Optional[list[str]] = parameter(
        "API_ALLOWED_PREFIXES", quotes=SINGLE_QUOTES, parens=PARENTHESES
    )
    api_blocked_prefixes: Optional[list[str]] = parameter(
        "API_BLOCKED_PREFIXES", quotes=SINGLE_QUOTES, parens=PARENTHESES
    )
    enabled: Optional[bool] = parameter("ENABLED")
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ConflictingFields("if_not_exists", "or_replace"),
        ExactlyOneValueSet("aws_api_provider_params", "azure_api_provider_params", "google_api_provider_params"),
        AtLeastOneValueSet("api_allowed_prefixes"),
        AtLeastOneValueSet("enabled"),
    )


@dataclass
class SetAwsApiParams:
    api_aws_role_arn: Optional[str] = parameter("API_AWS_ROLE_ARN", quotes=SINGLE_QUOTES)
    api_key: Optional[str] = parameter("API_KEY", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (AtLeastOneValueSet("api_aws_role_arn", "api_key"),)


@dataclass
class SetAzureApiParams:
    azure_tenant_id: Optional[str] = parameter("AZURE_TENANT_ID", quotes=SINGLE_QUOTES)
    azure_ad_application_id: Optional[str] = parameter("AZURE_AD_APPLICATION_ID", quotes=SINGLE_QUOTES)
    api_key: Optional[str] = parameter("API_KEY", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (AtLeastOneValueSet("azure_tenant_id", "azure_ad_application_id", "api_key"),)


@dataclass
class SetGoogleApiParams:
    google_audience: Optional[str] = parameter("GOOGLE_AUDIENCE", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (AtLeastOneValueSet("google_audience"),)


@dataclass
class ApiIntegrationSet:
    aws_params: Optional[SetAwsApiParams] = embedded()
    azure_params: Optional[SetAzureApiParams] = embedded()
    google_params: Optional[SetGoogleApiParams] = embedded()
    enabled: Optional[bool] = parameter("ENABLED")
    api_allowed_prefixes: Optional[list[str]] = parameter(
        "API_ALLOWED_PREFIXES", quotes=SINGLE_QUOTES, parens=PARENTHESES
    )
    api_blocked_prefixes: Optional[list[str]] = parameter(
        "API_BLOCKED_PREFIXES", quotes=SINGLE_QUOTES, parens=PARENTHESES
    )
    comment: Optional[str] = parameter("COMMENT", quotes=SINGLE_QUOTES)

    validations: ClassVar[tuple] = (
        AtLeastOneValueSet(
            "aws_params",
            "azure_params",
            "google_params",
            "enabled",
            "api_allowed_prefixes",
            "api_blocked_prefixes",
            "comment",
        ),
        ConflictingFields("aws_params", "azure_params", "google_params"),
    )


@dataclass
class ApiIntegrationUnset:
    api_key: Optional[bool] = keyword("API_KEY")
    enabled: Optional[bool] = keyword("ENABLED")
    api_blocked_prefixes: Optional[bool] = keyword("API_BLOCKED_PREFIXES")
    comment: Optional[bool] = keyword("COMMENT")

    validations: ClassVar[tuple] = (AtLeastOneValueSet("api_key", "enabled", "api_blocked_prefixes", "comment"),)


@dataclass
class AlterApiIntegrationOptions:
    alter: bool = static("ALTER")
    api_integration: bool = static("API INTEGRATION")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[AccountObjectIdentifier] = identifier()
    set: Optional[ApiIntegrationSet] = keyword("SET")
    unset: Optional[ApiIntegrationUnset] = list_field("UNSET", comma=COMMA)
    set_tags: Optional[SetTags] = keyword()
    unset_tags: Optional[UnsetTags] = keyword()

    validations: ClassVar[tuple] = (
        ValidIdentifier("name"),
        ConflictingFields("if_exists", "set_tags"),
        ConflictingFields("if_exists", "unset_tags"),
        ExactlyOneValueSet("set", "unset", "set_tags", "unset_tags"),
    )


@dataclass
class DropApiIntegrationOptions:
    drop: bool = static("DROP")
    api_integration: bool = static("API INTEGRATION")
    if_exists: Optional[bool] = keyword("IF EXISTS")
    name: Optional[AccountObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class ShowApiIntegrationOptions:
    show: bool = static("SHOW")
    api_integrations: bool = static("API INTEGRATIONS")
    like: Optional[Like] = keyword()


@dataclass
class DescribeApiIntegrationOptions:
    describe: bool = static("DESCRIBE")
    api_integration: bool = static("API INTEGRATION")
    name: Optional[AccountObjectIdentifier] = identifier()

    validations: ClassVar[tuple] = (ValidIdentifier("name"),)


@dataclass
class AwsApiParamsRequest:
    api_provider: ApiIntegrationAwsApiProviderType
    api_aws_role_arn: str
    api_key: Optional[str] = None


@dataclass
class AzureApiParamsRequest:
    azure_tenant_id: str
    azure_ad_application_id: str
    api_key: Optional[str] = None


@dataclass
class GoogleApiParamsRequest:
    google_audience: str


@dataclass
class CreateApiIntegrationRequest(Request):
    name: AccountObjectIdentifier
    api_allowed_prefixes: list = field(default_factory=list)
    enabled: Optional[bool] = None
    or_replace: Optional[bool] = None
    if_not_exists: Optional[bool] = None
    aws_api_provider_params: Optional[AwsApiParamsRequest] = None
    azure_api_provider_params: Optional[AzureApiParamsRequest] = None
    google_api_provider_params: Optional[GoogleApiParamsRequest] = None
    api_blocked_prefixes: list = field(default_factory=list)
    comment: Optional[str] = None

    def to_opts(self) -> CreateApiIntegrationOptions:
        return copy_to_options(
            self,
            CreateApiIntegrationOptions,
            aws_api_provider_params=copy_if_set(self.aws_api_provider_params, AwsApiParams),
            azure_api_provider_params=copy_if_set(self.azure_api_provider_params, AzureApiParams),
            google_api_provider_params=copy_if_set(self.google_api_provider_params, GoogleApiParams),
        )


@dataclass
class ApiIntegrationSetRequest:
    aws_params: Optional[SetAwsApiParams] = None
    azure_params: Optional[SetAzureApiParams] = None
    google_params: Optional[SetGoogleApiParams] = None
    enabled: Optional[bool] = None
    api_allowed_prefixes: list = field(default_factory=list)
    api_blocked_prefixes: list = field(default_factory=list)
    comment: Optional[str] = None


@dataclass
class ApiIntegrationUnsetRequest:
    api_key: Optional[bool] = None
    enabled: Optional[bool] = None
    api_blocked_prefixes: Optional[bool] = None
    comment: Optional[bool] = None


@dataclass
class AlterApiIntegrationRequest(Request):
    name: AccountObjectIdentifier
    if_exists: Optional[bool] = None
    set: Optional[ApiIntegrationSetRequest] = None
    unset: Optional[ApiIntegrationUnsetRequest] = None
    set_tags: dict = field(default_factory=dict)
    unset_tags: list = field(default_factory=list)

    def to_opts(self) -> AlterApiIntegrationOptions:
        return copy_to_options(
            self,
            AlterApiIntegrationOptions,
            set=copy_if_set(self.set, ApiIntegrationSet),
            unset=copy_if_set(self.unset, ApiIntegrationUnset),
            set_tags=build_if_set(SetTags, tags=tag_associations(self.set_tags)),
            unset_tags=build_if_set(UnsetTags, tags=self.unset_tags or None),
        )


@dataclass
class DropApiIntegrationRequest(Request):
    name: AccountObjectIdentifier
    if_exists: Optional[bool] = None

    options_class = DropApiIntegrationOptions


@dataclass
class ShowApiIntegrationRequest(Request):
    like: Optional[Like] = None

    options_class = ShowApiIntegrationOptions


@dataclass
class DescribeApiIntegrationRequest(Request):
    name: AccountObjectIdentifier

    options_class = DescribeApiIntegrationOptions


@dataclass
class ApiIntegration:
    name: str
    api_type: str
    category: str
    enabled: bool
    comment: Optional[str]
    created_on: str

    def id(self) -> AccountObjectIdentifier:
        return AccountObjectIdentifier(self.name)

    def object_type(self) -> ObjectType:
        return ObjectType.API_INTEGRATION


@dataclass
class ApiIntegrationProperty:
    name: str
    type: str
    value: str
    default: str


def decode_api_integration(row: dict) -> ApiIntegration:
    row = normalize_row(row)
    return ApiIntegration(
        name=row["name"],
        api_type=to_string(row.get("type")),
        category=to_string(row.get("category")),
        enabled=to_bool(row.get("enabled")),
        comment=optional_string(row.get("comment")),
        created_on=to_string(row.get("created_on")),
    )


def decode_api_integration_property(row: dict) -> ApiIntegrationProperty:
    row = normalize_row(row)
    return ApiIntegrationProperty(
        name=row["property"],
        type=to_string(row.get("property_type")),
        value=to_string(row.get("property_value")),
        default=to_string(row.get("property_default")),
    )


class ApiIntegrations(Collection):
    def create(self, request: CreateApiIntegrationRequest) -> int:
        return self._exec(request)

    def alter(self, request: AlterApiIntegrationRequest) -> int:
        return self._exec(request)

    def drop(self, request: DropApiIntegrationRequest) -> int:
        return self._exec(request)

    def show(self, request: Optional[ShowApiIntegrationRequest] = None) -> list[ApiIntegration]:
        return self._query(request or ShowApiIntegrationRequest(), decode_api_integration)

    def show_by_id(self, id: AccountObjectIdentifier) -> Optional[ApiIntegration]:
        return find_by_id(self.show(ShowApiIntegrationRequest(like=Like(id.name))), id)

    def describe(self, id: AccountObjectIdentifier) -> Optional[list[ApiIntegrationProperty]]:
        rows = self._describe(DescribeApiIntegrationRequest(id))
        if rows is None:
            return None
        return [decode_api_integration_property(row) for row in rows]
