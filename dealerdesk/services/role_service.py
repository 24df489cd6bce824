# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Role service."""

import logging
import uuid

from sqlalchemy.orm import Session

from dealerdesk.database import atomic
from dealerdesk.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from dealerdesk.models import Corporation, Role, User
from dealerdesk.rbac.actions import CrudFlags
from dealerdesk.rbac.roles import (
    ADMIN_ROLE_NAME,
    SUPER_ADMIN_DESCRIPTION,
    SUPER_ADMIN_ROLE_NAME,
    admin_role_description,
)
from dealerdesk.schemas.rbac import RoleUpdateSchema
from dealerdesk.services import permission_service

logger = logging.getLogger(__name__)


def get_role(db: Session, role_id: uuid.UUID, *, corp_id: uuid.UUID | None = None) -> Role:
    """Get a role, optionally scoped to a corporation.

    A role owned by another corporation is reported as missing.
    """
    role = db.get(Role, role_id)
    if role is None or (corp_id is not None and role.corporation_id != corp_id):
        raise NotFoundError("Role not found")
    return role


def get_system_role(db: Session, corp_id: uuid.UUID) -> Role | None:
    """Get the corporation's system admin role."""
    return (
        db.query(Role)
        .filter(Role.corporation_id == corp_id, Role.is_system.is_(True))
        .first()
    )


def get_role_by_name(db: Session, corp_id: uuid.UUID, name: str) -> Role | None:
    return (
        db.query(Role)
        .filter(Role.corporation_id == corp_id, Role.name == name)
        .first()
    )


def role_to_response_dict(db: Session, role: Role) -> dict:
    """Role with its enriched permissions on public resources."""
    permissions = permission_service.list_role_permissions(db, role, public_only=True)
    return {
        "id": role.id,
        "corporation_id": role.corporation_id,
        "name": role.name,
        "description": role.description,
        "is_system": role.is_system,
        "permissions": permissions,
        "permissions_count": len(permissions),
    }


def list_roles(db: Session, corp_id: uuid.UUID) -> list[dict]:
    """List the corporation's roles, newest first, with their permissions."""
    roles = (
        db.query(Role)
        .filter(Role.corporation_id == corp_id)
        .order_by(Role.created_at.desc(), Role.name)
        .all()
    )
    return [role_to_response_dict(db, role) for role in roles]


def create_system_admin_role(
    db: Session, corp_id: uuid.UUID, display_name: str
) -> Role:
    """Return the corporation's system role, creating it if needed.

    The role is named "Super Admin" for the system corporation and "Admin"
    everywhere else. When a concurrent call creates the role first, that
    role is returned.
    """
    existing = get_system_role(db, corp_id)
    if existing:
        return existing

    try:
        with atomic(db), db.begin_nested():
            corporation = db.get(Corporation, corp_id)
            if corporation is None:
                raise NotFoundError("Corporation not found")

            if corporation.is_system:
                name, description = SUPER_ADMIN_ROLE_NAME, SUPER_ADMIN_DESCRIPTION
            else:
                name, description = ADMIN_ROLE_NAME, admin_role_description(
                    display_name
                )

            role = Role(name=name, description=description, is_system=True)
            corporation.roles.append(role)
            db.flush()
    except ConflictError:
        existing = get_system_role(db, corp_id)
        if existing is None:
            raise
        logger.info(f"System role for corporation {corp_id} was created concurrently")
        return existing

    logger.info(f"Created system role '{role.name}' for corporation {corp_id}")
    return role


def create_custom_role(
    db: Session, corp_id: uuid.UUID, name: str, description: str | None = None
) -> Role:
    """Create a custom role with denied permissions on every entitled resource."""
    with atomic(db):
        corporation = db.get(Corporation, corp_id)
        if corporation is None:
            raise NotFoundError("Corporation not found")
        if get_role_by_name(db, corp_id, name):
            raise ConflictError("Role with this name already exists")

        role = Role(name=name, description=description, is_system=False)
        corporation.roles.append(role)
        db.flush()

        permission_service.provision_defaults(
            db, role.id, corporation.allowed_resource_ids, CrudFlags.none()
        )

    logger.info(f"Created role '{role.name}' for corporation {corp_id}")
    return role


def update_role(
    db: Session,
    role_id: uuid.UUID,
    data: RoleUpdateSchema,
    *,
    corp_id: uuid.UUID | None = None,
) -> Role:
    """Update a custom role's name or description."""
    role = get_role(db, role_id, corp_id=corp_id)
    if role.is_system:
        raise ForbiddenError("System roles cannot be modified")

    with atomic(db):
        if data.name:
            existing = get_role_by_name(db, role.corporation_id, data.name)
            if existing and existing.id != role.id:
                raise ConflictError("Role with this name already exists")
            role.name = data.name

        if data.description is not None:
            role.description = data.description

    db.refresh(role)
    return role


def delete_role(
    db: Session, role_id: uuid.UUID, *, corp_id: uuid.UUID | None = None
) -> None:
    """Delete a custom role together with all of its permission rows.

    Users holding the role are left without one, so every check denies.
    """
    role = get_role(db, role_id, corp_id=corp_id)
    if role.is_system:
        raise ForbiddenError("System roles cannot be deleted")

    with atomic(db):
        db.query(User).filter(User.role_id == role.id).update(
            {User.role_id: None}, synchronize_session="fetch"
        )
        db.delete(role)

    logger.info(f"Deleted role {role_id}")


def assign_role_to_user(
    db: Session,
    user_id: uuid.UUID,
    role_id: uuid.UUID | None,
    *,
    corp_id: uuid.UUID | None = None,
) -> User:
    """Assign a role to a user, or clear it with ``role_id=None``.

    The role must belong to the user's corporation. With ``corp_id`` the user
    must belong to that corporation as well.
    """
    user = db.get(User, user_id)
    if user is None or (corp_id is not None and user.corporation_id != corp_id):
        raise NotFoundError("User not found")

    with atomic(db):
        if role_id is not None:
            role = db.get(Role, role_id)
            if role is None or role.corporation_id != user.corporation_id:
                raise ValidationError("Invalid role ID for the target corporation")
        user.role_id = role_id

    logger.info(f"Assigned role {role_id} to user {user_id}")
    return user
