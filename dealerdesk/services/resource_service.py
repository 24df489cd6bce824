# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Resource catalog service."""

import logging
from collections.abc import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session

from dealerdesk.database import atomic
from dealerdesk.models import Resource, Subresource
from dealerdesk.rbac.resources import PRIVATE_RESOURCES, RESOURCE_CATALOG

logger = logging.getLogger(__name__)


def get_resource(db: Session, resource_id: str) -> Resource | None:
    """Get a resource by its stable identifier."""
    return db.get(Resource, resource_id)


def get_resource_by_title(db: Session, title: str) -> Resource | None:
    """Get a resource by title, ignoring case."""
    return (
        db.query(Resource)
        .filter(func.lower(Resource.title) == title.strip().lower())
        .first()
    )


def get_resource_by_route(db: Session, route: str) -> Resource | None:
    return db.query(Resource).filter(Resource.route == route).first()


def get_resources(db: Session, resource_ids: Iterable[str]) -> list[Resource]:
    """Get the resources with the given ids, ordered by position."""
    ids = set(resource_ids)
    if not ids:
        return []
    return (
        db.query(Resource)
        .filter(Resource.id.in_(ids))
        .order_by(Resource.position)
        .all()
    )


def missing_resource_ids(db: Session, resource_ids: Iterable[str]) -> list[str]:
    """Return the ids that do not exist in the catalog, sorted."""
    ids = set(resource_ids)
    found = {resource.id for resource in get_resources(db, ids)}
    return sorted(ids - found)


def list_public(db: Session) -> list[Resource]:
    """List all active, grantable resources ordered by position."""
    return (
        db.query(Resource)
        .filter(Resource.is_public.is_(True), Resource.is_active.is_(True))
        .order_by(Resource.position)
        .all()
    )


def _sync_subresources(resource: Resource, entries: list[dict]) -> None:
    """Make the resource's subresource list match ``entries``, keyed by route."""
    existing = {sub.route: sub for sub in resource.subresources}
    updated = []
    for position, entry in enumerate(entries):
        sub = existing.get(entry["route"]) or Subresource(route=entry["route"])
        sub.title = entry["title"]
        sub.icon = entry["icon"]
        sub.position = position
        updated.append(sub)
    resource.subresources = updated
    resource.has_subresources = bool(updated)


def ensure_seeded(db: Session, catalog: list[dict] | None = None) -> list[str]:
    """Create missing catalog resources and refresh declared subresources.

    Resources are matched by route. Existing resources are left alone unless
    the catalog entry declares subresources, in which case the subresource
    list is refreshed to match. This function is idempotent.

    @param db: SQLAlchemy Session object
    @param catalog: catalog entries, defaults to ``RESOURCE_CATALOG``
    @return: ids of every resource in the catalog, created or pre-existing
    """
    if catalog is None:
        catalog = RESOURCE_CATALOG

    resource_ids = []
    created = 0
    with atomic(db):
        for entry in catalog:
            resource = get_resource_by_route(db, entry["route"])
            subresources = entry.get("subresources") or []
            if resource is None:
                resource = Resource(
                    id=entry["resource_id"],
                    title=entry["title"],
                    route=entry["route"],
                    icon=entry["icon"],
                    position=entry["position"],
                    description=entry.get("description"),
                    is_public=entry.get(
                        "is_public", entry["resource_id"] not in PRIVATE_RESOURCES
                    ),
                    is_active=entry.get("is_active", True),
                )
                db.add(resource)
                _sync_subresources(resource, subresources)
                created += 1
            elif subresources:
                _sync_subresources(resource, subresources)
            resource_ids.append(resource.id)
        db.flush()

    if created:
        logger.info(f"Seeded {created} new resources into the catalog")
    return resource_ids
