# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Static RBAC definitions: actions, resource catalog and system roles."""

from dealerdesk.rbac.actions import Action, CrudFlags

__all__ = ["Action", "CrudFlags"]
