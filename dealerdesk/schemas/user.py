# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""User schemas."""
import uuid

from pydantic import BaseModel, ConfigDict


class UserRoleAssignment(BaseModel):
    """Role to assign to a user; null clears the role."""

    role_id: uuid.UUID | None = None


class UserResponse(BaseModel):
    """Schema for user response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    corporation_id: uuid.UUID
    role_id: uuid.UUID | None
    email: str
    first_name: str | None
    last_name: str | None
    is_active: bool
