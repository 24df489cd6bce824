# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Corporation onboarding and entitlement endpoints."""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from dealerdesk.api.deps import get_current_principal, get_db, require_permission
from dealerdesk.rbac.actions import Action
from dealerdesk.schemas.corporation import (
    CorporationCreate,
    CorporationResponse,
    CorporationUpdate,
    EntitlementUpdate,
)
from dealerdesk.schemas.rbac import ResourceSchema, RoleWithPermissionsSchema
from dealerdesk.schemas.user import UserResponse, UserRoleAssignment
from dealerdesk.services import corporation_service, role_service
from dealerdesk.services.authorization_service import Principal

CORPORATIONS_RESOURCE = "Corporations"

router = APIRouter(prefix="/corporations", tags=["corporations"])


@router.get("", response_model=list[CorporationResponse])
def list_corporations(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(CORPORATIONS_RESOURCE, Action.READ)),
):
    """List all corporations, newest first."""
    return corporation_service.list_corporations(db)


@router.get("/current", response_model=CorporationResponse)
def get_current_corporation(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """The caller's own corporation."""
    return corporation_service.get_corporation(db, principal.corp_id)


@router.get("/allowed-resources", response_model=list[ResourceSchema])
def get_allowed_resources(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Resources the caller's corporation is entitled to."""
    return corporation_service.list_allowed_resources(db, principal.corp_id)


@router.post("", response_model=CorporationResponse, status_code=status.HTTP_201_CREATED)
def create_corporation(
    data: CorporationCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(CORPORATIONS_RESOURCE, Action.CREATE)),
):
    """Onboard a corporation with its Admin role and optional admin user.

    The entitlement must be a subset of the caller's own corporation.
    """
    return corporation_service.create_corporation(
        db,
        data.name,
        data.allowed_resources,
        admin=data.admin,
        requested_by=principal.corp_id,
    )


@router.put("/users/{user_id}/role", response_model=UserResponse)
def assign_user_role(
    user_id: uuid.UUID,
    data: UserRoleAssignment,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(CORPORATIONS_RESOURCE, Action.UPDATE)),
):
    """Assign a role of the user's own corporation to any user."""
    return role_service.assign_role_to_user(db, user_id, data.role_id)


@router.put("/{corp_id}", response_model=CorporationResponse)
def update_corporation(
    corp_id: uuid.UUID,
    data: CorporationUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(CORPORATIONS_RESOURCE, Action.UPDATE)),
):
    """Rename, (de)activate or re-entitle a corporation."""
    return corporation_service.update_corporation(
        db,
        corp_id,
        name=data.name,
        is_active=data.is_active,
        allowed_resource_ids=data.allowed_resources,
        requested_by=principal.corp_id,
    )


@router.get("/{corp_id}/roles", response_model=list[RoleWithPermissionsSchema])
def list_corporation_roles(
    corp_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(CORPORATIONS_RESOURCE, Action.READ)),
):
    """Roles of any corporation with their permissions."""
    corporation_service.get_corporation(db, corp_id)
    return role_service.list_roles(db, corp_id)


@router.put("/{corp_id}/resources", response_model=CorporationResponse)
def update_corporation_resources(
    corp_id: uuid.UUID,
    data: EntitlementUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(CORPORATIONS_RESOURCE, Action.UPDATE)),
):
    """Replace a corporation's entitlement and reconcile its roles."""
    return corporation_service.update_entitlement(
        db, corp_id, data.allowed_resources, requested_by=principal.corp_id
    )


@router.delete("/{corp_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_corporation(
    corp_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_permission(CORPORATIONS_RESOURCE, Action.DELETE)),
):
    """Delete a corporation and everything it owns."""
    corporation_service.delete_corporation(db, corp_id)
