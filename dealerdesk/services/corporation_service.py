# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Corporation onboarding and resource entitlement."""

import logging
import uuid
from collections.abc import Iterable

from sqlalchemy.orm import Session

from dealerdesk.database import atomic
from dealerdesk.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from dealerdesk.models import Corporation, Resource, User
from dealerdesk.rbac.actions import CrudFlags
from dealerdesk.schemas.corporation import CorporationAdminCreate
from dealerdesk.services import permission_service, resource_service, role_service

logger = logging.getLogger(__name__)


def get_corporation(db: Session, corp_id: uuid.UUID) -> Corporation:
    corporation = db.get(Corporation, corp_id)
    if corporation is None:
        raise NotFoundError("Corporation not found")
    return corporation


def get_system_corporation(db: Session) -> Corporation | None:
    return db.query(Corporation).filter(Corporation.is_system.is_(True)).first()


def list_corporations(db: Session) -> list[Corporation]:
    return db.query(Corporation).order_by(Corporation.created_at.desc()).all()


def list_allowed_resources(db: Session, corp_id: uuid.UUID) -> list[Resource]:
    """Resources the corporation is entitled to, ordered by position."""
    return get_corporation(db, corp_id).allowed_resources


def assert_entitled(
    db: Session, corp_id: uuid.UUID, resource_ids: Iterable[str]
) -> None:
    """Raise ForbiddenError unless every id is in the corporation's entitlement."""
    corporation = get_corporation(db, corp_id)
    outside = set(resource_ids) - corporation.allowed_resource_ids
    if outside:
        logger.info(
            f"Corporation {corp_id} tried to assign resources outside its "
            f"entitlement: {sorted(outside)}"
        )
        raise ForbiddenError(
            "You cannot assign resources that your corporation does not have access to"
        )


def _resolve_entitlement(
    db: Session, resource_ids: Iterable[str], *, allow_private: bool
) -> list[Resource]:
    resource_ids = set(resource_ids)
    missing = resource_service.missing_resource_ids(db, resource_ids)
    if missing:
        raise ValidationError(f"Unknown resources: {', '.join(missing)}")

    resources = resource_service.get_resources(db, resource_ids)
    if not allow_private:
        reserved = [resource.id for resource in resources if not resource.is_public]
        if reserved:
            raise ValidationError(
                f"Resources reserved for the system corporation: {', '.join(reserved)}"
            )
    return resources


def create_corporation(
    db: Session,
    name: str,
    allowed_resource_ids: Iterable[str],
    *,
    admin: CorporationAdminCreate | None = None,
    requested_by: uuid.UUID | None = None,
    is_system: bool = False,
) -> Corporation:
    """Onboard a corporation.

    Creates the corporation, its system admin role with every flag granted on
    each entitled resource and, optionally, the first admin user. All of it
    is committed together or not at all.

    @param requested_by: corporation of the caller; the new entitlement must
        be a subset of the caller's own
    """
    allowed_resource_ids = set(allowed_resource_ids)
    with atomic(db):
        resources = _resolve_entitlement(
            db, allowed_resource_ids, allow_private=is_system
        )
        if requested_by is not None:
            assert_entitled(db, requested_by, allowed_resource_ids)

        if admin and db.query(User).filter(User.email == admin.email).first():
            raise ConflictError("A user with this email already exists")

        corporation = Corporation(
            name=name,
            is_active=True,
            is_system=is_system,
            allowed_resources=resources,
        )
        db.add(corporation)
        db.flush()

        admin_role = role_service.create_system_admin_role(db, corporation.id, name)
        permission_service.provision_defaults(
            db, admin_role.id, allowed_resource_ids, CrudFlags.all()
        )

        if admin:
            db.add(
                User(
                    corporation_id=corporation.id,
                    role_id=admin_role.id,
                    email=admin.email,
                    first_name=admin.first_name,
                    last_name=admin.last_name,
                    is_active=True,
                )
            )
            db.flush()

    logger.info(
        f"Created corporation '{name}' ({corporation.id}) with "
        f"{len(resources)} entitled resources"
    )
    return corporation


def update_corporation(
    db: Session,
    corp_id: uuid.UUID,
    name: str | None = None,
    is_active: bool | None = None,
    allowed_resource_ids: Iterable[str] | None = None,
    *,
    requested_by: uuid.UUID | None = None,
) -> Corporation:
    """Update a corporation's name, active flag and entitlement.

    Fields left as None are unchanged. A new entitlement reconciles every
    role of the corporation. The corporation row is locked for the duration
    of the transaction, so concurrent updates apply one after the other and
    the last commit wins. Users of an inactive corporation are refused at
    authentication.
    """
    created = deleted = 0
    with atomic(db):
        corporation = (
            db.query(Corporation)
            .filter(Corporation.id == corp_id)
            .with_for_update()
            .first()
        )
        if corporation is None:
            raise NotFoundError("Corporation not found")

        if name is not None:
            corporation.name = name

        if is_active is not None:
            if corporation.is_system and not is_active:
                raise ForbiddenError("The system corporation cannot be deactivated")
            corporation.is_active = is_active

        if allowed_resource_ids is not None:
            allowed_resource_ids = set(allowed_resource_ids)
            resources = _resolve_entitlement(
                db, allowed_resource_ids, allow_private=corporation.is_system
            )
            if requested_by is not None:
                assert_entitled(db, requested_by, allowed_resource_ids)

            corporation.allowed_resources = resources
            db.flush()
            created, deleted = permission_service.reconcile_corporation(
                db, corporation
            )
        db.flush()

    logger.info(
        f"Updated corporation {corp_id}: {created} permissions created, "
        f"{deleted} deleted"
    )
    return corporation


def update_entitlement(
    db: Session,
    corp_id: uuid.UUID,
    allowed_resource_ids: Iterable[str],
    *,
    requested_by: uuid.UUID | None = None,
) -> Corporation:
    """Replace a corporation's entitlement and reconcile all of its roles."""
    return update_corporation(
        db,
        corp_id,
        allowed_resource_ids=allowed_resource_ids,
        requested_by=requested_by,
    )


def delete_corporation(db: Session, corp_id: uuid.UUID) -> None:
    """Delete a corporation with its roles, permissions and users."""
    corporation = get_corporation(db, corp_id)
    if corporation.is_system:
        raise ForbiddenError("The system corporation cannot be deleted")

    with atomic(db):
        db.delete(corporation)

    logger.info(f"Deleted corporation {corp_id}")
