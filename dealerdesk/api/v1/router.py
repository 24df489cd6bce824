# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Main API router for v1 endpoints."""

from fastapi import APIRouter

from dealerdesk.api.v1 import corporations, rbac

api_router = APIRouter()

# Corporation routes
api_router.include_router(corporations.router)

# RBAC routes
api_router.include_router(rbac.router)
