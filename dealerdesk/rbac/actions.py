# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""CRUD actions and the four-flag permission record."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Action(str, Enum):
    """Action a principal can request on a resource."""

    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"

    @property
    def column(self) -> str:
        """Name of the matching ``can_*`` column."""
        return f"can_{self.value}"


@dataclass(frozen=True)
class CrudFlags:
    """Exactly four booleans, one per ``Action``."""

    can_read: bool = False
    can_create: bool = False
    can_update: bool = False
    can_delete: bool = False

    @classmethod
    def all(cls, value: bool = True) -> CrudFlags:
        return cls(value, value, value, value)

    @classmethod
    def none(cls) -> CrudFlags:
        return cls.all(False)

    @classmethod
    def from_object(cls, obj: object) -> CrudFlags:
        """Read the four ``can_*`` attributes off a row or schema."""
        return cls(**{action.column: bool(getattr(obj, action.column)) for action in Action})

    def allows(self, action: Action) -> bool:
        return getattr(self, action.column)

    def as_dict(self) -> dict[str, bool]:
        return {action.column: self.allows(action) for action in Action}
