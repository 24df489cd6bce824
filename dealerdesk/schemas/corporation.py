# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Corporation schemas."""

import datetime
import uuid

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class CorporationAdminCreate(BaseModel):
    """Initial administrator created together with a corporation."""

    email: EmailStr
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)


class CorporationCreate(BaseModel):
    """Schema for onboarding a corporation."""

    name: str = Field(..., min_length=1, max_length=200)
    allowed_resources: list[str] = []
    admin: CorporationAdminCreate | None = None


class CorporationUpdate(BaseModel):
    """Schema for updating a corporation. Omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=200)
    is_active: bool | None = None
    allowed_resources: list[str] | None = None


class EntitlementUpdate(BaseModel):
    """Replacement entitlement for a corporation."""

    allowed_resources: list[str]


class AllowedResourceSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str


class CorporationResponse(BaseModel):
    """Schema for corporation response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    is_active: bool
    is_system: bool
    allowed_resources: list[AllowedResourceSchema]
    created_at: datetime.datetime
    updated_at: datetime.datetime
