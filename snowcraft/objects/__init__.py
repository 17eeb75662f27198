from .alerts import Alerts
from .api_integrations import ApiIntegrations
from .database_roles import DatabaseRoles
from .databases import Databases
from .grants import Grants
from .masking_policies import MaskingPolicies
from .network_policies import NetworkPolicies
from .password_policies import PasswordPolicies
from .resource_monitors import ResourceMonitors
from .roles import Roles
from .row_access_policies import RowAccessPolicies
from .schemas import Schemas
from .session_policies import SessionPolicies
from .streams import Streams
from .tags import Tags
from .tasks import Tasks
from .warehouses import Warehouses

COLLECTIONS = {
    "alerts": Alerts,
    "api_integrations": ApiIntegrations,
    "database_roles": DatabaseRoles,
    "databases": Databases,
    "grants": Grants,
    "masking_policies": MaskingPolicies,
    "network_policies": NetworkPolicies,
    "password_policies": PasswordPolicies,
    "resource_monitors": ResourceMonitors,
    "roles": Roles,
    "row_access_policies": RowAccessPolicies,
    "schemas": Schemas,
    "session_policies": SessionPolicies,
    "streams": Streams,
    "tags": Tags,
    "tasks": Tasks,
    "warehouses": Warehouses,
}


def register_collections(client):
    for attr, collection in COLLECTIONS.items():
        setattr(client, attr, collection(client))


__all__ = [collection.__name__ for collection in COLLECTIONS.values()] + ["COLLECTIONS", "register_collections"]
