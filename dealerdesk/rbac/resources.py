# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Fixed catalog of addressable application resources.

Seeded into the ``resources`` table at startup. The ``resource_id`` keys are
the stable identifiers stored in corporation entitlements and permission rows.
"""

DASHBOARD = "DASHBOARD"
USERS = "USERS"
ROLES = "ROLES"
CORPORATIONS = "CORPORATIONS"
CUSTOMERS = "CUSTOMERS"
VEHICLES = "VEHICLES"
AGREEMENTS = "AGREEMENTS"
SWISH = "SWISH"
INVOICES = "INVOICES"

# Internal-only resources that only the system corporation may hold
PRIVATE_RESOURCES = {CORPORATIONS}

RESOURCE_CATALOG = [
    {
        "resource_id": DASHBOARD,
        "position": 0,
        "title": "Dashboard",
        "route": "/dashboard",
        "icon": "ri-dashboard-line",
        "description": "Manage Dashboard",
    },
    {
        "resource_id": USERS,
        "position": 1,
        "title": "Users Management",
        "route": "/dashboard/users",
        "icon": "ri-group-line",
        "description": "Manage system users",
    },
    {
        "resource_id": ROLES,
        "position": 2,
        "title": "Roles Management",
        "route": "/dashboard/roles",
        "icon": "ri-p2p-line",
        "description": "Manage system roles",
    },
    {
        "resource_id": CORPORATIONS,
        "position": 3,
        "title": "Corporations",
        "route": "/dashboard/corporations",
        "icon": "ri-building-2-line",
        "description": "Manage corporations",
    },
    {
        "resource_id": CUSTOMERS,
        "position": 4,
        "title": "Customers",
        "route": "/dashboard/customers",
        "icon": "ri-user-3-line",
        "description": "Manage customers",
    },
    {
        "resource_id": VEHICLES,
        "position": 8,
        "title": "Vehicles",
        "route": "/dashboard/vehicles",
        "icon": "ri-car-line",
        "description": "Manage vehicles",
    },
    {
        "resource_id": AGREEMENTS,
        "position": 9,
        "title": "Agreements",
        "route": "/dashboard/agreements",
        "icon": "ri-file-list-3-line",
        "description": "Manage agreements",
        "subresources": [
            {
                "title": "Sales Agreements",
                "route": "/dashboard/agreements/sales",
                "icon": "ri-file-paper-2-line",
            },
            {
                "title": "Purchase Agreements",
                "route": "/dashboard/agreements/purchase",
                "icon": "ri-shopping-cart-line",
            },
            {
                "title": "Agency Agreements",
                "route": "/dashboard/agreements/agency",
                "icon": "ri-handshake-line",
            },
        ],
    },
    {
        "resource_id": SWISH,
        "position": 10,
        "title": "Swish",
        "route": "/dashboard/swish",
        "icon": "ri-bank-card-line",
        "description": "Manage Swish",
    },
    {
        "resource_id": INVOICES,
        "position": 11,
        "title": "Invoices",
        "route": "/dashboard/invoices",
        "icon": "ri-file-text-line",
        "description": "Manage invoices",
    },
]
