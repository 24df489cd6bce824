# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Request-time authorization against the permission matrix.

Entitlement is enforced when permissions are written, never here: a
permission row only exists for resources the corporation is entitled to.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy.orm import Session

from dealerdesk.exceptions import (
    ForbiddenError,
    NotFoundError,
    RBACError,
    ValidationError,
)
from dealerdesk.models import Corporation, Permission, Role, User
from dealerdesk.rbac.actions import Action
from dealerdesk.services import permission_service, resource_service

logger = logging.getLogger(__name__)

# Unknown resources get the same answer as a denial so the catalog is not leaked
NOT_AUTHORIZED_MESSAGE = "Not authorized"
INACTIVE_CORPORATION_MESSAGE = "Corporation is inactive"


@dataclass(frozen=True)
class Principal:
    """The authenticated actor of a request."""

    user_id: uuid.UUID
    corp_id: uuid.UUID
    role_id: uuid.UUID | None

    @classmethod
    def from_user(cls, user: User) -> Principal:
        return cls(user_id=user.id, corp_id=user.corporation_id, role_id=user.role_id)


@dataclass(frozen=True)
class AuthorizationDecision:
    """Outcome of a gate call. Denials carry the error to surface."""

    allowed: bool
    permission: Permission | None = None
    error: RBACError | None = None

    @property
    def reason(self) -> str | None:
        return self.error.message if self.error else None

    def raise_for_denial(self) -> None:
        if not self.allowed:
            raise self.error


def denial_message(action: Action) -> str:
    return f"You don't have permission to {action.value} this resource"


def _parse_action(action: Action | str) -> Action | None:
    try:
        return Action(action)
    except ValueError:
        return None


def _deny_unknown_action(
    principal: Principal, action: Action | str
) -> AuthorizationDecision:
    logger.info(f"Unknown action '{action}' requested by user {principal.user_id}")
    return AuthorizationDecision(
        allowed=False, error=ValidationError(f"Unknown action: {action}")
    )


def _deny_unknown_resource(
    principal: Principal, resource: str
) -> AuthorizationDecision:
    logger.info(f"Unknown resource '{resource}' requested by user {principal.user_id}")
    return AuthorizationDecision(
        allowed=False, error=NotFoundError(NOT_AUTHORIZED_MESSAGE)
    )


def _decide(
    db: Session, principal: Principal, resource_id: str, action: Action
) -> AuthorizationDecision:
    corporation = db.get(Corporation, principal.corp_id)
    if corporation is None or not corporation.is_active:
        logger.info(
            f"Denied {action.value} on {resource_id} for user {principal.user_id}: "
            f"corporation inactive"
        )
        return AuthorizationDecision(
            allowed=False, error=ForbiddenError(INACTIVE_CORPORATION_MESSAGE)
        )

    permission = None
    if principal.role_id is not None:
        permission = permission_service.get_permission(
            db, principal.role_id, resource_id
        )

    if permission is None or not permission.flags.allows(action):
        logger.info(
            f"Denied {action.value} on {resource_id} for user {principal.user_id}"
        )
        return AuthorizationDecision(
            allowed=False, error=ForbiddenError(denial_message(action))
        )
    return AuthorizationDecision(allowed=True, permission=permission)


def authorize(
    db: Session, principal: Principal, resource_title: str, action: Action | str
) -> AuthorizationDecision:
    """Gate a request by resource title (case-insensitive).

    Never raises for a denial; inspect ``allowed`` on the returned decision.
    Unknown actions, unknown titles and deactivated resources are denied.
    """
    parsed = _parse_action(action)
    if parsed is None:
        return _deny_unknown_action(principal, action)
    resource = resource_service.get_resource_by_title(db, resource_title)
    if resource is None or not resource.is_active:
        return _deny_unknown_resource(principal, resource_title)
    return _decide(db, principal, resource.id, parsed)


def authorize_resource(
    db: Session, principal: Principal, resource_id: str, action: Action | str
) -> AuthorizationDecision:
    """Gate a request by stable resource id."""
    parsed = _parse_action(action)
    if parsed is None:
        return _deny_unknown_action(principal, action)
    resource = resource_service.get_resource(db, resource_id)
    if resource is None or not resource.is_active:
        return _deny_unknown_resource(principal, resource_id)
    return _decide(db, principal, resource.id, parsed)


def get_effective_permissions(db: Session, principal: Principal) -> dict:
    """Everything the principal may do, limited to the corporation's entitlement.

    Resources are keyed by id and appear in position order.
    """
    role = db.get(Role, principal.role_id) if principal.role_id else None
    if role is None or role.corporation_id != principal.corp_id:
        raise NotFoundError("User role not found")

    corporation = db.get(Corporation, principal.corp_id)
    if corporation is None:
        raise NotFoundError("Corporation not found")

    allowed = corporation.allowed_resource_ids
    resources = {
        entry["resource_id"]: entry
        for entry in permission_service.list_role_permissions(db, role)
        if entry["resource_id"] in allowed
    }
    return {
        "role": {"id": role.id, "name": role.name, "description": role.description},
        "resources": resources,
    }
