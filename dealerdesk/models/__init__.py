# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Database models package."""

from dealerdesk.models.base import Base, TimestampMixin
from dealerdesk.models.corporation import Corporation, corporation_resources
from dealerdesk.models.permission import Permission, SubresourcePermission
from dealerdesk.models.resource import Resource, Subresource
from dealerdesk.models.role import Role
from dealerdesk.models.session import Session
from dealerdesk.models.user import User

__all__ = [
    "Base",
    "Corporation",
    "Permission",
    "Resource",
    "Role",
    "Session",
    "Subresource",
    "SubresourcePermission",
    "TimestampMixin",
    "User",
    "corporation_resources",
]
