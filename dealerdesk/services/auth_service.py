# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Session lookup for the authentication layer.

Sessions are issued by the login service; this module only resolves them.
"""

import uuid

from sqlalchemy.orm import Session

from dealerdesk.models import User
from dealerdesk.models.base import utcnow
from dealerdesk.models.session import Session as SessionModel


def get_session(db: Session, token: str) -> SessionModel | None:
    """Get a valid session by token."""
    session = db.query(SessionModel).filter(SessionModel.token == token).first()
    if not session:
        return None
    if session.expires_at < utcnow():
        db.delete(session)
        db.commit()
        return None
    return session


def get_user_by_id(db: Session, user_id: uuid.UUID) -> User | None:
    """Get a user by ID."""
    return db.get(User, user_id)


def cleanup_expired_sessions(db: Session) -> int:
    """Delete all expired sessions. Returns count of deleted sessions."""
    count = (
        db.query(SessionModel)
        .filter(SessionModel.expires_at < utcnow())
        .delete()
    )
    db.commit()
    return count
