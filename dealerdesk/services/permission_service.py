# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Permission matrix: provisioning, checks, bulk replace and reconciliation."""

import logging
import uuid
from collections.abc import Iterable

from sqlalchemy.orm import Session

from dealerdesk.database import atomic
from dealerdesk.exceptions import ForbiddenError, NotFoundError, ValidationError
from dealerdesk.models import (
    Corporation,
    Permission,
    Resource,
    Role,
    SubresourcePermission,
)
from dealerdesk.rbac.actions import Action, CrudFlags
from dealerdesk.schemas.rbac import PermissionInput
from dealerdesk.services import resource_service

logger = logging.getLogger(__name__)


def get_permission(
    db: Session, role_id: uuid.UUID, resource_id: str
) -> Permission | None:
    """Get the permission row for a (role, resource) pair."""
    return (
        db.query(Permission)
        .filter(Permission.role_id == role_id, Permission.resource_id == resource_id)
        .first()
    )


def _sync_subresource_entries(
    permission: Permission,
    resource: Resource,
    flags_by_route: dict[str, CrudFlags],
    default: CrudFlags,
) -> None:
    """Rebuild subresource entries from the resource's declared routes.

    Existing rows are updated in place. Routes the resource no longer declares
    are dropped, declared routes missing from ``flags_by_route`` get
    ``default``.
    """
    existing = {
        entry.subresource_route: entry for entry in permission.subresource_permissions
    }
    entries = []
    for route in resource.subresource_routes:
        entry = existing.get(route) or SubresourcePermission(subresource_route=route)
        entry.set_flags(flags_by_route.get(route, default))
        entries.append(entry)
    permission.subresource_permissions = entries


def _create_permission(
    db: Session, role: Role, resource: Resource, flags: CrudFlags
) -> Permission:
    permission = Permission(role_id=role.id, resource_id=resource.id)
    permission.set_flags(flags)
    _sync_subresource_entries(permission, resource, {}, flags)
    role.permissions.append(permission)
    db.add(permission)
    return permission


def provision_defaults(
    db: Session,
    role_id: uuid.UUID,
    resource_ids: Iterable[str],
    default_flags: CrudFlags,
) -> list[Permission]:
    """Create a permission row for every resource the role does not have yet.

    Subresource entries are derived from each resource's declared
    subresources and start with ``default_flags`` as well.
    """
    resource_ids = set(resource_ids)
    with atomic(db):
        role = db.get(Role, role_id)
        if role is None:
            raise NotFoundError("Role not found")

        missing = resource_service.missing_resource_ids(db, resource_ids)
        if missing:
            raise ValidationError(f"Unknown resources: {', '.join(missing)}")

        existing = {permission.resource_id for permission in role.permissions}
        created = [
            _create_permission(db, role, resource, default_flags)
            for resource in resource_service.get_resources(db, resource_ids)
            if resource.id not in existing
        ]
        db.flush()
    return created


def check(
    db: Session, role_id: uuid.UUID | None, resource_id: str, action: Action | str
) -> bool:
    """True iff the role has a row for the resource with the action flag set."""
    action = Action(action)
    if role_id is None:
        return False
    permission = get_permission(db, role_id, resource_id)
    return permission is not None and permission.flags.allows(action)


def check_subresource(
    db: Session,
    role_id: uuid.UUID | None,
    resource_id: str,
    subresource_route: str,
    action: Action | str,
) -> bool:
    """Check a subresource flag.

    Only the subresource entry is consulted; the parent resource's own flags
    do not gate it. A missing row or entry denies.
    """
    action = Action(action)
    if role_id is None:
        return False
    permission = get_permission(db, role_id, resource_id)
    if permission is None:
        return False
    flags = permission.subresource_flags(subresource_route)
    return flags is not None and flags.allows(action)


def permission_to_response_dict(permission: Permission) -> dict:
    """Resolve a permission row against its resource metadata for display."""
    resource = permission.resource
    subresources = []
    for sub in resource.subresources:
        flags = permission.subresource_flags(sub.route) or CrudFlags.none()
        subresources.append(
            {
                "title": sub.title,
                "route": sub.route,
                "icon": sub.icon,
                "permissions": flags.as_dict(),
            }
        )
    return {
        "permission_id": permission.id,
        "resource_id": resource.id,
        "title": resource.title,
        "description": resource.description,
        "route": resource.route,
        "icon": resource.icon,
        "position": resource.position,
        "has_subresources": resource.has_subresources,
        "subresources": subresources,
        "permissions": permission.flags.as_dict(),
    }


def list_role_permissions(
    db: Session, role: Role, public_only: bool = False
) -> list[dict]:
    """List a role's permissions, enriched and ordered by resource position."""
    query = (
        db.query(Permission)
        .join(Resource, Permission.resource_id == Resource.id)
        .filter(Permission.role_id == role.id)
    )
    if public_only:
        query = query.filter(Resource.is_public.is_(True))
    permissions = query.order_by(Resource.position).all()
    return [permission_to_response_dict(p) for p in permissions]


def bulk_replace(
    db: Session,
    role_id: uuid.UUID,
    permissions_input: list[PermissionInput],
    *,
    corp_id: uuid.UUID | None = None,
) -> list[dict]:
    """Upsert the given flags for each resource of a custom role.

    Each entry fully replaces the flags of its (role, resource) row. Subresource
    flags are joined against the resource's declared routes, and routes not
    supplied are denied. Resources absent from the input keep their rows.
    Calling this twice with the same input yields the same result.

    @return: the role's full permission list, enriched for display
    """
    from dealerdesk.services import corporation_service, role_service

    with atomic(db):
        role = role_service.get_role(db, role_id, corp_id=corp_id)
        if role.is_system:
            raise ForbiddenError("Cannot modify system role permissions")

        # Later entries for the same resource win
        entries = {entry.resource_id: entry for entry in permissions_input}

        missing = resource_service.missing_resource_ids(db, entries)
        if missing:
            raise ValidationError(f"Unknown resources: {', '.join(missing)}")
        corporation_service.assert_entitled(db, role.corporation_id, entries)

        existing = {permission.resource_id: permission for permission in role.permissions}
        for resource in resource_service.get_resources(db, entries):
            entry = entries[resource.id]
            permission = existing.get(resource.id)
            if permission is None:
                permission = _create_permission(db, role, resource, CrudFlags.none())
            permission.set_flags(CrudFlags.from_object(entry))
            supplied = {sub.route: CrudFlags.from_object(sub) for sub in entry.subresources}
            _sync_subresource_entries(permission, resource, supplied, CrudFlags.none())
        db.flush()

    logger.info(f"Replaced {len(entries)} permission entries for role {role.id}")
    return list_role_permissions(db, role)


def reconcile_role(
    db: Session, role: Role, entitled_ids: Iterable[str]
) -> tuple[int, int]:
    """Bring a role's permission rows in line with an entitlement set.

    Rows for resources outside the entitlement are deleted, missing rows are
    created (all flags granted for system roles, denied otherwise). System
    roles also receive granted entries for newly declared subresources.

    @return: (created, deleted) row counts
    """
    entitled_ids = set(entitled_ids)
    default = CrudFlags.all() if role.is_system else CrudFlags.none()

    with atomic(db):
        existing = {permission.resource_id: permission for permission in role.permissions}
        deleted = 0
        for resource_id, permission in existing.items():
            if resource_id not in entitled_ids:
                role.permissions.remove(permission)
                deleted += 1

        created = 0
        for resource in resource_service.get_resources(db, entitled_ids - existing.keys()):
            _create_permission(db, role, resource, default)
            created += 1

        if role.is_system:
            for resource_id, permission in existing.items():
                if resource_id not in entitled_ids:
                    continue
                granted = {
                    entry.subresource_route: entry.flags
                    for entry in permission.subresource_permissions
                }
                _sync_subresource_entries(
                    permission, permission.resource, granted, CrudFlags.all()
                )
        db.flush()

    if created or deleted:
        logger.info(
            f"Reconciled role {role.id}: {created} permissions created, "
            f"{deleted} deleted"
        )
    return created, deleted


def reconcile_corporation(db: Session, corporation: Corporation) -> tuple[int, int]:
    """Reconcile every role of the corporation against its entitlement."""
    entitled_ids = corporation.allowed_resource_ids
    created = deleted = 0
    with atomic(db):
        for role in corporation.roles:
            role_created, role_deleted = reconcile_role(db, role, entitled_ids)
            created += role_created
            deleted += role_deleted
    return created, deleted
