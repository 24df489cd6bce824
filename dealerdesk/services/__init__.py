"""Services package."""
from dealerdesk.services import (
    auth_service,
    authorization_service,
    corporation_service,
    permission_service,
    rbac_seed_service,
    resource_service,
    role_service,
)

__all__ = [
    "auth_service",
    "authorization_service",
    "corporation_service",
    "permission_service",
    "rbac_seed_service",
    "resource_service",
    "role_service",
]
