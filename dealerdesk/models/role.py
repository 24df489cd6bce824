# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Role model."""

from __future__ import annotations

import uuid as uuid_lib
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealerdesk.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from dealerdesk.models.corporation import Corporation
    from dealerdesk.models.permission import Permission
    from dealerdesk.models.user import User


class Role(Base, TimestampMixin):
    """Named, corporation-scoped bundle of permission rows."""

    __tablename__ = "roles"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    corporation_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("corporations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_system: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    corporation: Mapped[Corporation] = relationship(
        "Corporation", back_populates="roles"
    )
    permissions: Mapped[list[Permission]] = relationship(
        "Permission", back_populates="role", cascade="all, delete-orphan"
    )
    users: Mapped[list[User]] = relationship("User", back_populates="role")


# One system role per corporation
Index(
    "uq_roles_system_per_corporation",
    Role.corporation_id,
    unique=True,
    sqlite_where=Role.is_system.is_(True),
    postgresql_where=Role.is_system.is_(True),
)
