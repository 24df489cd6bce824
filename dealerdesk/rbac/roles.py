# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Names of the roles created automatically during onboarding."""

# Every corporation gets exactly one system role, created before any custom
# role. System roles are immutable and always hold every entitled resource.
ADMIN_ROLE_NAME = "Admin"
SUPER_ADMIN_ROLE_NAME = "Super Admin"

SUPER_ADMIN_DESCRIPTION = "System super administrator with full access"


def admin_role_description(corporation_name: str) -> str:
    return f"Corporation {corporation_name} administrator"
