# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Resource catalog models."""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealerdesk.models.base import Base, TimestampMixin


class Resource(Base, TimestampMixin):
    """An addressable application area that permissions are granted on."""

    __tablename__ = "resources"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    title: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    route: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    icon: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    has_subresources: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )

    subresources: Mapped[list[Subresource]] = relationship(
        "Subresource",
        back_populates="resource",
        cascade="all, delete-orphan",
        order_by="Subresource.position",
    )

    @property
    def subresource_routes(self) -> list[str]:
        return [sub.route for sub in self.subresources]


class Subresource(Base):
    """Named sub-area of a resource, addressed by its route."""

    __tablename__ = "subresources"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    resource_id: Mapped[str] = mapped_column(
        String(50), ForeignKey("resources.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    route: Mapped[str] = mapped_column(String(200), nullable=False)
    icon: Mapped[str] = mapped_column(String(100), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("resource_id", "route", name="uq_subresources_resource_route"),
    )

    resource: Mapped[Resource] = relationship("Resource", back_populates="subresources")


# Titles are matched case-insensitively by the authorization check
Index("ix_resources_title_lower", func.lower(Resource.title), unique=True)
