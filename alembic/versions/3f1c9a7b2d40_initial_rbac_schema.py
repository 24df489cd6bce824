"""initial_rbac_schema

Revision ID: 3f1c9a7b2d40
Revises:
Create Date: 2026-10-19 09:12:31.402117

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '3f1c9a7b2d40'
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    ]


def _crud_flags() -> list[sa.Column]:
    return [
        sa.Column(name, sa.Boolean(), nullable=False, server_default="0")
        for name in ("can_read", "can_create", "can_update", "can_delete")
    ]


def upgrade() -> None:
    op.create_table(
        "resources",
        sa.Column("id", sa.String(50), nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("route", sa.String(200), nullable=False),
        sa.Column("icon", sa.String(100), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column(
            "has_subresources", sa.Boolean(), nullable=False, server_default="0"
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("title"),
        sa.UniqueConstraint("route"),
        sa.UniqueConstraint("icon"),
    )
    # Titles are looked up case-insensitively
    op.create_index(
        "ix_resources_title_lower",
        "resources",
        [sa.text("lower(title)")],
        unique=True,
    )

    op.create_table(
        "subresources",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("resource_id", sa.String(50), nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("route", sa.String(200), nullable=False),
        sa.Column("icon", sa.String(100), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["resource_id"], ["resources.id"], ondelete="CASCADE"
        ),
        sa.UniqueConstraint(
            "resource_id", "route", name="uq_subresources_resource_route"
        ),
    )

    op.create_table(
        "corporations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("is_system", sa.Boolean(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "corporation_resources",
        sa.Column("corporation_id", sa.Uuid(), nullable=False),
        sa.Column("resource_id", sa.String(50), nullable=False),
        sa.PrimaryKeyConstraint("corporation_id", "resource_id"),
        sa.ForeignKeyConstraint(
            ["corporation_id"], ["corporations.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["resource_id"], ["resources.id"], ondelete="CASCADE"
        ),
    )

    op.create_table(
        "roles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("corporation_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_system", sa.Boolean(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["corporation_id"], ["corporations.id"], ondelete="CASCADE"
        ),
    )
    op.create_index("ix_roles_corporation_id", "roles", ["corporation_id"])
    # At most one system role per corporation
    op.create_index(
        "uq_roles_system_per_corporation",
        "roles",
        ["corporation_id"],
        unique=True,
        sqlite_where=sa.text("is_system = 1"),
        postgresql_where=sa.text("is_system IS TRUE"),
    )

    op.create_table(
        "permissions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("role_id", sa.Uuid(), nullable=False),
        sa.Column("resource_id", sa.String(50), nullable=False),
        *_crud_flags(),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["role_id"], ["roles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["resource_id"], ["resources.id"], ondelete="CASCADE"
        ),
        sa.UniqueConstraint(
            "role_id", "resource_id", name="uq_permissions_role_resource"
        ),
    )
    op.create_index("ix_permissions_role_id", "permissions", ["role_id"])
    op.create_index("ix_permissions_resource_id", "permissions", ["resource_id"])

    op.create_table(
        "subresource_permissions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("permission_id", sa.Uuid(), nullable=False),
        sa.Column("subresource_route", sa.String(200), nullable=False),
        *_crud_flags(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["permission_id"], ["permissions.id"], ondelete="CASCADE"
        ),
        sa.UniqueConstraint(
            "permission_id",
            "subresource_route",
            name="uq_subresource_permissions_route",
        ),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("corporation_id", sa.Uuid(), nullable=False),
        sa.Column("role_id", sa.Uuid(), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["corporation_id"], ["corporations.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["role_id"], ["roles.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_users_corporation_id", "users", ["corporation_id"])

    op.create_table(
        "sessions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("token", sa.String(36), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("token"),
    )


def downgrade() -> None:
    op.drop_table("sessions")
    op.drop_index("ix_users_corporation_id", table_name="users")
    op.drop_table("users")
    op.drop_table("subresource_permissions")
    op.drop_index("ix_permissions_resource_id", table_name="permissions")
    op.drop_index("ix_permissions_role_id", table_name="permissions")
    op.drop_table("permissions")
    op.drop_index("uq_roles_system_per_corporation", table_name="roles")
    op.drop_index("ix_roles_corporation_id", table_name="roles")
    op.drop_table("roles")
    op.drop_table("corporation_resources")
    op.drop_table("corporations")
    op.drop_table("subresources")
    op.drop_index("ix_resources_title_lower", table_name="resources")
    op.drop_table("resources")
