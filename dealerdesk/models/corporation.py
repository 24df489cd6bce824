# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Corporation (tenant) model and its resource entitlement."""

from __future__ import annotations

import uuid as uuid_lib
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Column, ForeignKey, String, Table, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealerdesk.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from dealerdesk.models.resource import Resource
    from dealerdesk.models.role import Role
    from dealerdesk.models.user import User


corporation_resources = Table(
    "corporation_resources",
    Base.metadata,
    Column(
        "corporation_id",
        Uuid(as_uuid=True),
        ForeignKey("corporations.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "resource_id",
        String(50),
        ForeignKey("resources.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Corporation(Base, TimestampMixin):
    """A tenant and the set of resources it is entitled to."""

    __tablename__ = "corporations"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    # The root tenant that owns the Super Admin role
    is_system: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    allowed_resources: Mapped[list[Resource]] = relationship(
        "Resource",
        secondary=corporation_resources,
        order_by="Resource.position",
    )
    roles: Mapped[list[Role]] = relationship(
        "Role",
        back_populates="corporation",
        cascade="all, delete-orphan",
    )
    users: Mapped[list[User]] = relationship(
        "User",
        back_populates="corporation",
        cascade="all, delete-orphan",
    )

    @property
    def allowed_resource_ids(self) -> set[str]:
        return {resource.id for resource in self.allowed_resources}
