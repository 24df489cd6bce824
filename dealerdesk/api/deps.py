# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""API dependencies for dependency injection."""

from fastapi import Cookie, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from dealerdesk.database import get_db
from dealerdesk.models import User
from dealerdesk.rbac.actions import Action
from dealerdesk.services import auth_service, authorization_service
from dealerdesk.services.authorization_service import Principal

__all__ = ["get_current_principal", "get_current_user", "get_db", "require_permission"]


def get_current_user(
    db: Session = Depends(get_db),
    session: str | None = Cookie(default=None),
) -> User:
    """Get current authenticated user from session cookie."""
    if not session:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    session_obj = auth_service.get_session(db, session)
    if not session_obj:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session",
        )

    user = auth_service.get_user_by_id(db, session_obj.user_id)
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    if not user.corporation.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Corporation is inactive",
        )

    return user


def get_current_principal(current_user: User = Depends(get_current_user)) -> Principal:
    """Principal (user, corporation, role) of the authenticated user."""
    return Principal.from_user(current_user)


def require_permission(resource_title: str, action: Action):
    """Dependency gating a route on a resource flag.

    The resolved permission row is stored on ``request.state.permission`` for
    subresource checks further down.
    """

    def dependency(
        request: Request,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_current_principal),
    ) -> Principal:
        decision = authorization_service.authorize(db, principal, resource_title, action)
        decision.raise_for_denial()
        request.state.permission = decision.permission
        return principal

    return dependency
