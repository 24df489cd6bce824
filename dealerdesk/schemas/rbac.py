# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Role, resource and permission schemas."""

import uuid

from pydantic import BaseModel, ConfigDict, Field


class CrudFlagsSchema(BaseModel):
    """The four CRUD flags. Omitted flags are denied."""

    model_config = ConfigDict(from_attributes=True)

    can_read: bool = False
    can_create: bool = False
    can_update: bool = False
    can_delete: bool = False


class SubresourceSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    route: str
    icon: str


class ResourceSchema(BaseModel):
    """Schema representing a catalog resource."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    route: str
    icon: str
    position: int
    description: str | None
    is_public: bool
    has_subresources: bool
    subresources: list[SubresourceSchema] = []


class SubresourcePermissionSchema(SubresourceSchema):
    """A subresource together with the role's flags on it."""

    permissions: CrudFlagsSchema


class ResourcePermissionSchema(BaseModel):
    """A resource enriched with the role's resolved flags."""

    permission_id: uuid.UUID
    resource_id: str
    title: str
    description: str | None
    route: str
    icon: str
    position: int
    has_subresources: bool
    subresources: list[SubresourcePermissionSchema]
    permissions: CrudFlagsSchema


class RoleSchema(BaseModel):
    """Schema representing a role."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    corporation_id: uuid.UUID
    name: str
    description: str | None
    is_system: bool


class RoleWithPermissionsSchema(RoleSchema):
    """Schema representing a role along with its permissions."""

    permissions: list[ResourcePermissionSchema]
    permissions_count: int


class RoleCreateSchema(BaseModel):
    """Schema for creating a new custom role."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None


class RoleUpdateSchema(BaseModel):
    """Schema for updating a role."""

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None


class SubresourcePermissionInput(CrudFlagsSchema):
    route: str


class PermissionInput(CrudFlagsSchema):
    """Desired flags for one resource of a role."""

    resource_id: str
    subresources: list[SubresourcePermissionInput] = []


class BulkPermissionUpdateSchema(BaseModel):
    """Full desired permission set for a role."""

    permissions: list[PermissionInput]


class EffectiveRoleSchema(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None


class UserPermissionsSchema(BaseModel):
    """What the current user may do, keyed by resource id."""

    role: EffectiveRoleSchema
    resources: dict[str, ResourcePermissionSchema]
