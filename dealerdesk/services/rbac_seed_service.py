# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Bootstrap of the resource catalog and the system corporation."""

import logging

from sqlalchemy.orm import Session

from dealerdesk.config import settings
from dealerdesk.database import atomic
from dealerdesk.models import Corporation, User
from dealerdesk.services import corporation_service, resource_service, role_service

logger = logging.getLogger(__name__)


def seed_rbac_data(
    db: Session,
    catalog: list[dict] | None = None,
    super_admin_email: str | None = None,
) -> Corporation:
    """Seeds the catalog, the system corporation and its Super Admin role.

    The system corporation is entitled to every catalog resource; resources
    added to the catalog later are appended to its entitlement, which also
    grants them to the Super Admin role. This function is idempotent.
    @param db: SQLAlchemy Session object
    @param super_admin_email: creates the first Super Admin user when given,
        defaults to ``settings.super_admin_email``
    """
    super_admin_email = super_admin_email or settings.super_admin_email

    with atomic(db):
        resource_ids = resource_service.ensure_seeded(db, catalog)

        system_corp = corporation_service.get_system_corporation(db)
        if system_corp is None:
            system_corp = corporation_service.create_corporation(
                db, settings.system_corporation_name, resource_ids, is_system=True
            )
        else:
            corporation_service.update_entitlement(
                db,
                system_corp.id,
                system_corp.allowed_resource_ids | set(resource_ids),
            )

        if super_admin_email:
            existing = db.query(User).filter(User.email == super_admin_email).first()
            if not existing:
                super_admin_role = role_service.get_system_role(db, system_corp.id)
                db.add(
                    User(
                        corporation_id=system_corp.id,
                        role_id=super_admin_role.id,
                        email=super_admin_email,
                        first_name="Super",
                        last_name="Admin",
                        is_active=True,
                    )
                )
                db.flush()
                logger.info("Super Admin user created")

    logger.info("RBAC system initialized")
    return system_corp
