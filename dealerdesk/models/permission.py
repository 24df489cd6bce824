# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Permission matrix models."""

from __future__ import annotations

import uuid as uuid_lib
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealerdesk.models.base import Base, TimestampMixin
from dealerdesk.rbac.actions import CrudFlags

if TYPE_CHECKING:
    from dealerdesk.models.resource import Resource
    from dealerdesk.models.role import Role


class CrudColumnsMixin:
    """The four ``can_*`` flags, all denied by default."""

    can_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    can_create: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    can_update: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    can_delete: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    @property
    def flags(self) -> CrudFlags:
        return CrudFlags.from_object(self)

    def set_flags(self, flags: CrudFlags) -> None:
        self.can_read = flags.can_read
        self.can_create = flags.can_create
        self.can_update = flags.can_update
        self.can_delete = flags.can_delete


class Permission(Base, TimestampMixin, CrudColumnsMixin):
    """CRUD flags for one (role, resource) pair."""

    __tablename__ = "permissions"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    role_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    resource_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("resources.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        UniqueConstraint("role_id", "resource_id", name="uq_permissions_role_resource"),
    )

    role: Mapped[Role] = relationship("Role", back_populates="permissions")
    resource: Mapped[Resource] = relationship("Resource")
    subresource_permissions: Mapped[list[SubresourcePermission]] = relationship(
        "SubresourcePermission",
        back_populates="permission",
        cascade="all, delete-orphan",
    )

    def subresource_flags(self, route: str) -> CrudFlags | None:
        """Flags stored for ``route``, or None when no entry exists."""
        for entry in self.subresource_permissions:
            if entry.subresource_route == route:
                return entry.flags
        return None


class SubresourcePermission(Base, CrudColumnsMixin):
    """CRUD flags for one subresource route inside a permission row."""

    __tablename__ = "subresource_permissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    permission_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("permissions.id", ondelete="CASCADE"),
        nullable=False,
    )
    subresource_route: Mapped[str] = mapped_column(String(200), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "permission_id",
            "subresource_route",
            name="uq_subresource_permissions_route",
        ),
    )

    permission: Mapped[Permission] = relationship(
        "Permission", back_populates="subresource_permissions"
    )
