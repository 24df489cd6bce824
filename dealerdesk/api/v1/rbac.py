# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Role and permission administration endpoints."""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from dealerdesk.api.deps import get_current_principal, get_db, require_permission
from dealerdesk.rbac.actions import Action
from dealerdesk.schemas.rbac import (
    BulkPermissionUpdateSchema,
    ResourcePermissionSchema,
    ResourceSchema,
    RoleCreateSchema,
    RoleSchema,
    RoleUpdateSchema,
    RoleWithPermissionsSchema,
    UserPermissionsSchema,
)
from dealerdesk.schemas.user import UserResponse, UserRoleAssignment
from dealerdesk.services import (
    authorization_service,
    permission_service,
    resource_service,
    role_service,
)
from dealerdesk.services.authorization_service import Principal

ROLES_RESOURCE = "Roles Management"

router = APIRouter(prefix="/rbac", tags=["rbac"])


@router.get("/user-permissions", response_model=UserPermissionsSchema, summary="Get current user's effective permissions")
def get_my_permissions(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Retrieve the current user's role and the resources it may access,
    limited to the corporation's current entitlement.
    """
    return authorization_service.get_effective_permissions(db, principal)


@router.get("/resources", response_model=list[ResourceSchema], summary="List grantable resources")
def list_resources(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ROLES_RESOURCE, Action.READ)),
):
    """List all public resources ordered by position."""
    return resource_service.list_public(db)


@router.get("/roles", response_model=list[RoleWithPermissionsSchema], summary="List roles of the caller's corporation")
def list_roles(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ROLES_RESOURCE, Action.READ)),
):
    """Retrieve all roles of the caller's corporation with their permissions.
    Requires Roles Management read permission.
    """
    return role_service.list_roles(db, principal.corp_id)


@router.post("/roles", response_model=RoleWithPermissionsSchema, status_code=status.HTTP_201_CREATED, summary="Create a new custom role")
def create_role(
    role_in: RoleCreateSchema,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ROLES_RESOURCE, Action.CREATE)),
):
    """Create a custom role with every entitled resource denied.
    Requires Roles Management create permission.
    """
    role = role_service.create_custom_role(
        db, principal.corp_id, role_in.name, role_in.description
    )
    return role_service.role_to_response_dict(db, role)


@router.put("/roles/{role_id}", response_model=RoleSchema, summary="Update an existing role")
def update_role(
    role_id: uuid.UUID,
    role_in: RoleUpdateSchema,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ROLES_RESOURCE, Action.UPDATE)),
):
    """Update a custom role's name and description.
    System roles cannot be modified.
    """
    return role_service.update_role(db, role_id, role_in, corp_id=principal.corp_id)


@router.delete("/roles/{role_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a custom role")
def delete_role(
    role_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ROLES_RESOURCE, Action.DELETE)),
):
    """Delete a custom role and its permissions. System roles cannot be deleted."""
    role_service.delete_role(db, role_id, corp_id=principal.corp_id)


@router.put("/roles/{role_id}/permissions", response_model=list[ResourcePermissionSchema], summary="Replace a role's permissions")
def update_role_permissions(
    role_id: uuid.UUID,
    permissions_in: BulkPermissionUpdateSchema,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ROLES_RESOURCE, Action.UPDATE)),
):
    """Set the flags of each listed resource for a custom role.
    Requires Roles Management update permission.
    """
    return permission_service.bulk_replace(
        db, role_id, permissions_in.permissions, corp_id=principal.corp_id
    )


@router.put("/users/{user_id}/role", response_model=UserResponse, summary="Assign a role to a user")
def assign_user_role(
    user_id: uuid.UUID,
    data: UserRoleAssignment,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(ROLES_RESOURCE, Action.UPDATE)),
):
    """Assign one of the caller's corporation roles to a user of the same
    corporation, or clear it with a null role_id.
    """
    return role_service.assign_role_to_user(
        db, user_id, data.role_id, corp_id=principal.corp_id
    )
