# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Database engine, session factory and transaction helpers."""

import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from dealerdesk.config import settings
from dealerdesk.exceptions import ConflictError

logger = logging.getLogger(__name__)

_ATOMIC_DEPTH = "atomic_depth"

connect_args = (
    {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
)
engine = create_engine(settings.database_url, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """Run a multi-row mutation as one unit of work.

    Only the outermost block commits, so service calls can be composed (for
    example corporation onboarding creating a role and provisioning its
    permissions) and still land in a single transaction. Any exception rolls
    the whole unit back; unique-key violations surface as ``ConflictError``.
    """
    depth = db.info.get(_ATOMIC_DEPTH, 0)
    db.info[_ATOMIC_DEPTH] = depth + 1
    try:
        yield db
        if depth == 0:
            db.commit()
    except IntegrityError as e:
        if depth == 0:
            db.rollback()
        logger.warning(f"Integrity error, transaction rolled back: {e.orig}")
        raise ConflictError("A record with the same unique key already exists") from e
    except Exception:
        if depth == 0:
            db.rollback()
        raise
    finally:
        db.info[_ATOMIC_DEPTH] = depth
